"""Resource schemas shipped with the client."""
from datetime import date, datetime
from decimal import Decimal

from commerce_records.domain.models.record import Attribute, Record, belongs_to, has_many


class Company(Record):
    addresses = has_many("Address")

    name = Attribute(str)
    company_code = Attribute(str)
    company_type = Attribute(str)
    email = Attribute(str)
    tax_number = Attribute(str)
    status = Attribute(str, readonly=True)


class Address(Record):
    company = belongs_to("Company")

    label = Attribute(str)
    address1 = Attribute(str)
    address2 = Attribute(str)
    city = Attribute(str)
    state = Attribute(str)
    country = Attribute(str)
    zip_code = Attribute(str)
    phone_number = Attribute(str)
    status = Attribute(str, readonly=True)


class Order(Record):
    company = belongs_to("Company")
    shipping_address = belongs_to("Address")

    order_number = Attribute(str)
    status = Attribute(str)
    payment_status = Attribute(str, readonly=True)
    issued_at = Attribute(date)
    total = Attribute(Decimal, readonly=True)
    notes = Attribute(str)


class Invoice(Record):
    order = belongs_to("Order", writeable_on="create")
    payments = has_many("Payment")

    invoice_number = Attribute(str)
    invoiced_at = Attribute(date)
    due_at = Attribute(date)
    payment_status = Attribute(str, readonly=True)
    exchange_rate = Attribute(Decimal)


class Payment(Record):
    invoice = belongs_to("Invoice")
    payment_method = belongs_to("PaymentMethod")

    amount = Attribute(Decimal)
    reference = Attribute(str)
    paid_at = Attribute(datetime)
    exchange_rate = Attribute(Decimal)


class PaymentMethod(Record):
    payments = has_many("Payment")

    name = Attribute(str)
    xero_code = Attribute(str)
    quickbooks_code = Attribute(str)
    is_default = Attribute(bool)


class PriceList(Record):
    name = Attribute(str)
    status = Attribute(str, readonly=True)
    code = Attribute(str)
    is_cost = Attribute(bool)
    currency_id = Attribute(int)
    currency_symbol = Attribute(str)
    currency_iso = Attribute(str)
    is_default = Attribute(bool)


class FulfillmentReturn(Record):
    order = belongs_to("Order", writeable_on="create")
    location = belongs_to("Address")
    company = belongs_to("Company")

    fulfillment_return_line_items = has_many("FulfillmentReturnLineItem")

    delivery_type = Attribute(str)
    exchange_rate = Attribute(str)
    received_at = Attribute(date)
    tracking_company = Attribute(str)
    tracking_number = Attribute(str)
    tracking_url = Attribute(str)
    status = Attribute(str)
    credit_note_number = Attribute(str)
    order_number = Attribute(str)


class FulfillmentReturnLineItem(Record):
    fulfillment_return = belongs_to("FulfillmentReturn", writeable_on="create")

    order_line_item_id = Attribute(int)
    quantity = Attribute(Decimal)


ALL_RESOURCES = (
    Company,
    Address,
    Order,
    Invoice,
    Payment,
    PaymentMethod,
    PriceList,
    FulfillmentReturn,
    FulfillmentReturnLineItem,
)
