from .outcome import Outcome, OutcomeKind
from .pagination import PaginationState
from .record import Attribute, BelongsTo, HasMany, Record, ValidationErrors, belongs_to, has_many
from .resources import (
    ALL_RESOURCES,
    Address,
    Company,
    FulfillmentReturn,
    FulfillmentReturnLineItem,
    Invoice,
    Order,
    Payment,
    PaymentMethod,
    PriceList,
)

__all__ = [
    "Outcome",
    "OutcomeKind",
    "PaginationState",
    "Attribute",
    "BelongsTo",
    "HasMany",
    "Record",
    "ValidationErrors",
    "belongs_to",
    "has_many",
    "ALL_RESOURCES",
    "Address",
    "Company",
    "FulfillmentReturn",
    "FulfillmentReturnLineItem",
    "Invoice",
    "Order",
    "Payment",
    "PaymentMethod",
    "PriceList",
]
