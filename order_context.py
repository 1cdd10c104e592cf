from __future__ import annotations

import re
from collections.abc import Callable

from order_extract import group_rows
from order_models import CustomerInfo, DeliveryAddress, OrderInfo, PageTokens

DEFAULT_LEFT_COLUMN_FRACTION = 0.49
_ADDRESS_ANCHOR_WORDS = ("delivery", "address")
_ADDRESS_LINE_COUNT = 5

# (min left, min top) as fractions of page width/height: the upper-right quadrant
_CUSTOMER_REGION = (0.50, 0.50)
_CUSTOMER_STOP_LABELS = ("company", "email", "phone", "ctdi")


# ---------------------------------------------------------------------------
# Delivery address
# ---------------------------------------------------------------------------

def _split_city_state_zip(text: str) -> tuple[str | None, str | None, str | None]:
    """Split ``"Byron Center, MI 49315"`` or ``"49311 Byron Center, MI"``."""
    city = state = zip_code = None
    parts = [p for p in text.split(",") if p]

    if parts:
        left = parts[0].strip()
        if left[:1].isdigit():
            words = left.split()
            if len(words) > 1:
                zip_code = words[0]
                city = " ".join(words[1:])
        elif left:
            city = left

    if len(parts) > 1:
        state_zip = parts[1].split()
        if state_zip:
            state = state_zip[0]
        if len(state_zip) > 1 and zip_code is None:
            zip_code = state_zip[1]

    return city, state, zip_code


def find_delivery_address(
    page: PageTokens,
    left_column_fraction: float = DEFAULT_LEFT_COLUMN_FRACTION,
) -> DeliveryAddress | None:
    """Read the address block printed under the "Delivery address" label.

    Only the left column of the page is considered. The five non-blank rows
    after the label are taken, in order, as recipient, company, street,
    city/state/zip and country.
    """
    max_left = page.width * left_column_fraction
    rows = group_rows(
        [t for t in page.tokens if t.left <= max_left],
        key=lambda t: t.bottom,
    )

    anchor = next(
        (
            i
            for i, row in enumerate(rows)
            if all(word in row.lower() for word in _ADDRESS_ANCHOR_WORDS)
        ),
        None,
    )
    if anchor is None:
        return None

    block: list[str | None] = []
    for row in rows[anchor + 1:]:
        row = row.strip()
        if row:
            block.append(row)
        if len(block) == _ADDRESS_LINE_COUNT:
            break
    block += [None] * (_ADDRESS_LINE_COUNT - len(block))

    name, company, street, city_line, country = block
    if not name:
        return None

    city = state = zip_code = None
    if city_line:
        city, state, zip_code = _split_city_state_zip(city_line)

    return DeliveryAddress(
        recipient_name=name,
        company_name=company,
        street=street,
        city=city,
        state=state,
        zip_code=zip_code,
        country=country,
    )


# ---------------------------------------------------------------------------
# Customer info
# ---------------------------------------------------------------------------

def _starts_with(line: str, label: str) -> bool:
    return line.lower().startswith(label.lower())


def _after_label(label: str) -> Callable[[list[str], int], str | None]:
    def match(lines: list[str], i: int) -> str | None:
        line = lines[i].strip()
        if _starts_with(line, label):
            return line[len(label):].strip()
        return None

    return match


def _last_word_after(label: str) -> Callable[[list[str], int], str | None]:
    def match(lines: list[str], i: int) -> str | None:
        line = lines[i].strip()
        if _starts_with(line, label):
            words = line.split(" ")
            if len(words) > 2:
                return words[-1]
        return None

    return match


def _customer_name(lines: list[str], i: int) -> str | None:
    # The "DMS customer number" label wraps, leaving "number" on its own row
    # right above the "Customer <name>" row. The name itself can wrap too.
    if lines[i].strip().lower() != "number" or i + 1 >= len(lines):
        return None
    if not _starts_with(lines[i + 1], "Customer"):
        return None

    parts: list[str] = []
    first = lines[i + 1].strip()[len("Customer"):].strip()
    if first:
        parts.append(first)

    for nxt in lines[i + 2:]:
        nxt = nxt.strip()
        if any(_starts_with(nxt, label) for label in _CUSTOMER_STOP_LABELS):
            break
        parts.append(nxt)

    return " ".join(parts)


_CUSTOMER_RULES: list[tuple[str, Callable[[list[str], int], str | None]]] = [
    ("dms_number", _last_word_after("DMS customer")),
    ("customer", _customer_name),
    ("company", _after_label("Company")),
    ("email", _after_label("Email")),
    ("phone", _after_label("Phone")),
    ("ctdi_id", _last_word_after("CTDI ID")),
]


def find_customer_info(page: PageTokens) -> CustomerInfo:
    """Apply the customer label rules to every row of the upper-right quadrant.

    Every rule sees every row, so a label repeated further down the region
    replaces the value found above it.
    """
    min_left = page.width * _CUSTOMER_REGION[0]
    min_top = page.height * _CUSTOMER_REGION[1]
    lines = group_rows(
        [t for t in page.tokens if t.left >= min_left and t.top >= min_top],
        key=lambda t: t.top,
    )

    info = CustomerInfo()
    for i in range(len(lines)):
        for field_name, match in _CUSTOMER_RULES:
            value = match(lines, i)
            if value is not None:
                setattr(info, field_name, value)
    return info


# ---------------------------------------------------------------------------
# Order metadata
# ---------------------------------------------------------------------------

_ORDER_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("order_number", re.compile(r"Order\s*Number\s*[:\-]?\s*(\S+)", re.IGNORECASE)),
    ("order_date", re.compile(r"Date\s*of\s*Order\s*[:\-]?\s*([0-9/\-.]+)", re.IGNORECASE)),
    ("order_class", re.compile(r"Order\s*Class\s*[:\-]?\s*(\w+)", re.IGNORECASE)),
    ("delivery_way", re.compile(r"Delivery\s*Way\s*[:\-]?\s*(\w+)", re.IGNORECASE)),
    ("payment_method", re.compile(r"Payment\s*Method\s*[:\-]?\s*(\w+)", re.IGNORECASE)),
    ("items_amount", re.compile(r"Items\s*[:\-]?\s*(\d+)", re.IGNORECASE)),
    ("net_weight", re.compile(r"Net\s*weight\s*\(lbs\)\s*([0-9]+(?:\.[0-9]+)?)", re.IGNORECASE)),
]


def find_order_info(page: PageTokens) -> OrderInfo:
    """Match each metadata label against the page text in provider order."""
    page_text = " ".join(t.text for t in page.tokens)
    info = OrderInfo()
    for field_name, pattern in _ORDER_PATTERNS:
        m = pattern.search(page_text)
        if m:
            setattr(info, field_name, m.group(1))
    return info
