from __future__ import annotations

from dataclasses import dataclass, field, fields
from decimal import Decimal


class InvalidInputError(ValueError):
    """The page/token source cannot be read at all."""


@dataclass(frozen=True)
class Token:
    """A positioned word on a page. The vertical axis grows upward (top >= bottom)."""

    text: str
    left: float
    top: float
    bottom: float

    @property
    def mid_y(self) -> float:
        return (self.top + self.bottom) / 2


@dataclass
class Line:
    """One visual row of tokens, sorted left to right."""

    y: float
    tokens: list[Token]
    full_text: str


@dataclass
class PageTokens:
    """One page as handed over by the token provider."""

    width: float
    height: float
    tokens: list[Token]
    fallback_text: str = ""


def _summary_lines(obj, section: str, labels: dict[str, str]) -> list[str]:
    out = []
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None or value == "":
            continue
        out.append(f"[{section}] {labels.get(f.name, f.name)}: {value}")
    return out


@dataclass
class LineItem:
    """A single order row recognised by the pivot search."""

    part_number: str
    description: str
    quantity: int
    discount_code: str
    discount_pct: Decimal
    retail_per_unit: Decimal | None = None
    net_per_unit: Decimal | None = None
    net_summary: Decimal | None = None

    def summary(self) -> list[str]:
        return _summary_lines(
            self,
            "LineItem",
            {
                "part_number": "Part Number",
                "description": "Description",
                "quantity": "Quantity",
                "discount_code": "Discount Code",
                "discount_pct": "Discount %",
                "retail_per_unit": "Retail Per Unit",
                "net_per_unit": "Net Per Unit",
                "net_summary": "Net Summary",
            },
        )


@dataclass
class DeliveryAddress:
    recipient_name: str
    company_name: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None

    def summary(self) -> list[str]:
        return _summary_lines(
            self,
            "Delivery",
            {
                "recipient_name": "Recipient",
                "company_name": "Company",
                "street": "Street",
                "city": "City",
                "state": "State",
                "zip_code": "ZipCode",
                "country": "Country",
            },
        )


@dataclass
class CustomerInfo:
    dms_number: str | None = None
    customer: str | None = None
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    ctdi_id: str | None = None

    def has_values(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))

    def summary(self) -> list[str]:
        return _summary_lines(
            self,
            "CustomerInfo",
            {
                "dms_number": "DMS Customer Number",
                "customer": "Customer",
                "company": "Company",
                "email": "Email",
                "phone": "Phone",
                "ctdi_id": "CTDI ID",
            },
        )


@dataclass
class OrderInfo:
    order_number: str | None = None
    order_date: str | None = None
    order_class: str | None = None
    delivery_way: str | None = None
    payment_method: str | None = None
    items_amount: str | None = None
    net_weight: str | None = None

    def has_values(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))

    def summary(self) -> list[str]:
        return _summary_lines(
            self,
            "OrderInfo",
            {
                "order_number": "Order Number",
                "order_date": "Order Date",
                "order_class": "Order Class",
                "delivery_way": "Delivery Way",
                "payment_method": "Payment Method",
                "items_amount": "Items Amount",
                "net_weight": "Net Weight",
            },
        )


@dataclass
class OrderDocument:
    """Everything recovered from one document."""

    delivery_address: DeliveryAddress | None = None
    order_info: OrderInfo | None = None
    customer_info: CustomerInfo | None = None
    items: list[LineItem] = field(default_factory=list)
