from app.models.attendee import Attendee
from app.models.event import Event
from app.models.event_config import EventConfig
from app.models.extras import Extras, ExtrasPurchase
from app.models.order import Order, OrderLineItem
from app.models.registration import Registration

__all__ = [
    "Event",
    "EventConfig",
    "Registration",
    "Attendee",
    "Order",
    "OrderLineItem",
    "Extras",
    "ExtrasPurchase",
]
