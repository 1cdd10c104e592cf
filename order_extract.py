from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Callable
from decimal import Decimal, InvalidOperation

from order_models import Line, LineItem, PageTokens, Token

DEFAULT_Y_TOLERANCE = 3.0


def build_lines(page: PageTokens, y_tolerance: float = DEFAULT_Y_TOLERANCE) -> list[Line]:
    """Cluster the page's tokens into visual lines, top of page first.

    A token joins the current line while its vertical midpoint stays within
    *y_tolerance* of the midpoint of the line's first token.
    """
    if not page.tokens:
        if page.fallback_text:
            token = Token(page.fallback_text, 0.0, 0.0, 0.0)
            return [Line(y=0.0, tokens=[token], full_text=token.text)]
        return []

    ordered = sorted(page.tokens, key=lambda t: (-t.mid_y, t.left))

    lines: list[Line] = []
    current: list[Token] = []
    ref_y = 0.0

    for token in ordered:
        if current and abs(token.mid_y - ref_y) > y_tolerance:
            lines.append(_close_line(current, ref_y))
            current = []
        if not current:
            ref_y = token.mid_y
        current.append(token)

    if current:
        lines.append(_close_line(current, ref_y))
    return lines


def _close_line(tokens: list[Token], y: float) -> Line:
    row = sorted(tokens, key=lambda t: t.left)
    return Line(y=y, tokens=row, full_text=" ".join(t.text for t in row))


def group_rows(tokens: list[Token], key: Callable[[Token], float]) -> list[str]:
    """Bucket *tokens* by rounded *key* and return each bucket as text, top first."""
    by_y: dict[int, list[Token]] = defaultdict(list)
    for t in tokens:
        by_y[round(key(t))].append(t)

    rows: list[str] = []
    for y_key in sorted(by_y.keys(), reverse=True):
        row = sorted(by_y[y_key], key=lambda t: t.left)
        rows.append(" ".join(t.text for t in row))
    return rows


# ---------------------------------------------------------------------------
# Numbers and currency
# ---------------------------------------------------------------------------

_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)$")
_INT32_MAX = 2**31 - 1


def _to_decimal(text: str) -> Decimal | None:
    text = text.strip()
    if not _DECIMAL_RE.match(text):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def safe_int(text: str) -> int:
    text = text.strip()
    if not re.fullmatch(r"[+-]?\d+", text):
        return 0
    value = int(text)
    return value if abs(value) <= _INT32_MAX else 0


def safe_percent(text: str) -> Decimal:
    value = _to_decimal(text.strip().rstrip("%"))
    return value if value is not None else Decimal(0)


def take_currency(texts: list[str], idx: int) -> tuple[Decimal | None, int]:
    """Read one amount starting at *idx*; return it with the index after it.

    Handles ``$12.50``, ``$ 12.50``, ``1,234.50`` and the accounting negative
    forms ``( $120.00 )`` / ``($120.00)``. Unparsable text gives ``None``
    but the cursor still moves past what was inspected.
    """
    if idx >= len(texts):
        return None, idx

    negative = False
    t = texts[idx]

    if t == "(":
        negative = True
        idx += 1
        if idx >= len(texts):
            return None, idx
        t = texts[idx]
    if t.startswith("($") or t.startswith("$("):
        negative = True
        t = t[2:]
        if t.endswith(")"):
            t = t[:-1]

    if t == "$":
        idx += 1
        if idx >= len(texts):
            return None, idx
        t = texts[idx]
    if t.startswith("$"):
        t = t[1:]

    idx += 1
    if idx < len(texts) and texts[idx] == ")":
        idx += 1

    value = _to_decimal(t.replace(",", ""))
    if value is None:
        return None, idx
    return (-value if negative else value), idx


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------

_MIN_ITEM_TOKENS = 8
_PART_RE = re.compile(r"^\d{5,}$")
_INT_RE = re.compile(r"^\d+$")
_ALNUM_RE = re.compile(r"^[A-Za-z0-9]+$")
_PCT_OR_DEC_RE = re.compile(r"^\d+(?:\.\d+)?%?$")


def _find_pivot(texts: list[str], start: int) -> int | None:
    # Leave room for the currency tail after the quantity/code/discount triple.
    for j in range(start, len(texts) - 5):
        if (
            _INT_RE.match(texts[j])
            and _ALNUM_RE.match(texts[j + 1])
            and _PCT_OR_DEC_RE.match(texts[j + 2])
        ):
            return j
    return None


def parse_line_item(line: Line) -> LineItem | None:
    """Return the LineItem on *line*, or None when the row is not an order line."""
    texts = [t.text for t in line.tokens]
    if len(texts) < _MIN_ITEM_TOKENS or not _PART_RE.match(texts[0]):
        return None

    pivot = _find_pivot(texts, 1)
    if pivot is None:
        return None

    description = " ".join(texts[1:pivot]).strip()
    if not description:
        return None

    idx = pivot + 3
    retail, idx = take_currency(texts, idx)
    net_unit, idx = take_currency(texts, idx)
    net_sum, idx = take_currency(texts, idx)

    return LineItem(
        part_number=texts[0],
        description=description,
        quantity=safe_int(texts[pivot]),
        discount_code=texts[pivot + 1],
        discount_pct=safe_percent(texts[pivot + 2]),
        retail_per_unit=retail,
        net_per_unit=net_unit,
        net_summary=net_sum,
    )
