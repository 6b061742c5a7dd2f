"""Resource services of the Innochannel API."""

from innochannel.services.inventory import InventoryService
from innochannel.services.monitoring import MonitoringService
from innochannel.services.ota_connections import OtaConnectionService
from innochannel.services.properties import PropertyService
from innochannel.services.reservations import ReservationService
from innochannel.services.webhooks import WebhookService

__all__ = [
    "InventoryService",
    "MonitoringService",
    "OtaConnectionService",
    "PropertyService",
    "ReservationService",
    "WebhookService",
]
