"""Read-only access to the monitoring endpoints."""

from typing import Any, Dict, Optional

from innochannel.services.base import BaseService


class MonitoringService(BaseService):
    base_path = "/api/monitoring"

    def get_health_status(self) -> Any:
        return self.client.get(f"{self.base_path}/health")

    def get_metrics(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.get(f"{self.base_path}/metrics", filters)

    def get_logs(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.get(f"{self.base_path}/logs", filters)

    def get_alerts(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.get(f"{self.base_path}/alerts", filters)

    def get_error_stats(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.get(f"{self.base_path}/errors", filters)
