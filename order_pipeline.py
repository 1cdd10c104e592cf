from __future__ import annotations

import logging
import warnings
from collections.abc import Sequence
from pathlib import Path

import pdfplumber
from pdfminer.pdfparser import PDFSyntaxError
from pdfplumber.utils.exceptions import PdfminerException

from order_context import (
    DEFAULT_LEFT_COLUMN_FRACTION,
    find_customer_info,
    find_delivery_address,
    find_order_info,
)
from order_extract import DEFAULT_Y_TOLERANCE, build_lines, parse_line_item
from order_models import InvalidInputError, OrderDocument, PageTokens, Token

logging.getLogger("pdfminer").setLevel(logging.ERROR)
warnings.filterwarnings("ignore", module="pdfminer")

logger = logging.getLogger(__name__)


def load_pages(pdf_path: str | Path) -> list[PageTokens]:
    """Read every page of a PDF into PageTokens.

    pdfplumber measures ``top``/``bottom`` down from the top edge; they are
    flipped here so that larger values sit higher on the page.
    """
    path = Path(pdf_path)
    if not path.exists():
        raise InvalidInputError(f"file not found: {path}")

    pages: list[PageTokens] = []
    try:
        with pdfplumber.open(path) as pdf:
            for page in pdf.pages:
                tokens = [
                    Token(
                        text=w["text"],
                        left=float(w["x0"]),
                        top=float(page.height - w["top"]),
                        bottom=float(page.height - w["bottom"]),
                    )
                    for w in page.extract_words()
                ]
                pages.append(
                    PageTokens(
                        width=float(page.width),
                        height=float(page.height),
                        tokens=tokens,
                        fallback_text="" if tokens else (page.extract_text() or ""),
                    )
                )
    except (PDFSyntaxError, PdfminerException, OSError) as exc:
        raise InvalidInputError(f"cannot read {path}: {exc}") from exc

    logger.debug("Loaded %d page(s) from %s", len(pages), path)
    return pages


def extract_order(
    pages: Sequence[PageTokens],
    *,
    y_tolerance: float = DEFAULT_Y_TOLERANCE,
    left_column_fraction: float = DEFAULT_LEFT_COLUMN_FRACTION,
) -> OrderDocument:
    """Build one OrderDocument from all pages of a document.

    Line items are collected from every page. Delivery address, order info
    and customer info are only read from the first page.
    """
    if pages is None or isinstance(pages, (str, bytes)) or not isinstance(pages, Sequence):
        raise InvalidInputError("pages must be a random-access sequence of PageTokens")
    if not all(isinstance(p, PageTokens) for p in pages):
        raise InvalidInputError("every page must be a PageTokens value")

    order = OrderDocument()

    for page_number, page in enumerate(pages, 1):
        for line in build_lines(page, y_tolerance):
            item = parse_line_item(line)
            if item is not None:
                order.items.append(item)
                logger.debug("Page %d: %s", page_number, "; ".join(item.summary()))

        if page_number != 1:
            continue

        delivery = find_delivery_address(page, left_column_fraction)
        if delivery is not None:
            order.delivery_address = delivery
            logger.debug("; ".join(delivery.summary()))

        order_info = find_order_info(page)
        if order_info.has_values():
            order.order_info = order_info
            logger.debug("; ".join(order_info.summary()))

        customer_info = find_customer_info(page)
        if customer_info.has_values():
            order.customer_info = customer_info
            logger.debug("; ".join(customer_info.summary()))

    logger.info("Extracted %d line item(s) from %d page(s)", len(order.items), len(pages))
    return order
