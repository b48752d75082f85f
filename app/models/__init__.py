from .shipment import Shipment
from .enums import ShipmentStatus, TERMINAL_STATUSES
