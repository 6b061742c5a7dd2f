"""OTA channel connection management."""

from typing import Any, Dict, List, Optional

from innochannel.services.base import BaseService


class OtaConnectionService(BaseService):
    """Service for ``/api/ota-connections``."""

    base_path = "/api/ota-connections"

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        connections = self._unwrap(self.client.get(self.base_path, filters))
        return connections if isinstance(connections, list) else []

    def get(self, connection_id: str) -> Dict[str, Any]:
        return self._unwrap(self.client.get(f"{self.base_path}/{connection_id}"))

    def create(self, connection_data: Dict[str, Any]) -> Dict[str, Any]:
        return self._unwrap(self.client.post(self.base_path, connection_data))

    def update(self, connection_id: str, update_data: Dict[str, Any]) -> Dict[str, Any]:
        return self._unwrap(self.client.put(f"{self.base_path}/{connection_id}", update_data))

    def delete(self, connection_id: str) -> bool:
        self.client.delete(f"{self.base_path}/{connection_id}")
        return True

    def test_connection(self, connection_id: str) -> Any:
        return self.client.post(f"{self.base_path}/{connection_id}/test")

    def sync(self, connection_id: str, sync_options: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.post(f"{self.base_path}/{connection_id}/sync", sync_options)

    def get_status(self, connection_id: str) -> Any:
        return self._unwrap(self.client.get(f"{self.base_path}/{connection_id}/status"))

    def activate(self, connection_id: str) -> bool:
        self.client.post(f"{self.base_path}/{connection_id}/activate")
        return True
