"""Extract an order (line items, delivery address, customer and order info) from a PDF.

Pipeline:
  1. load_pages            – pdfplumber words -> PageTokens (y axis flipped upward)
  2. extract_order         – for every page:
       a) build_lines           – cluster tokens into visual rows by vertical midpoint
       b) parse_line_item       – find the qty/code/discount pivot, read the currency tail
     and on the first page only:
       c) find_delivery_address – left-column block under "Delivery address"
       d) find_order_info       – label regexes over the flat page text
       e) find_customer_info    – label rules over the upper-right quadrant
"""

from __future__ import annotations

import argparse
import logging
import sys

from order_context import DEFAULT_LEFT_COLUMN_FRACTION
from order_extract import DEFAULT_Y_TOLERANCE
from order_models import InvalidInputError, OrderDocument
from order_pipeline import extract_order, load_pages


def _print_section(title: str, lines: list[str]) -> None:
    print(f"\n{title}:\n")
    if not lines:
        print("  (not found)")
        return
    for line in lines:
        print(f"  {line}")


def print_order(order: OrderDocument) -> None:
    print("=" * 64)
    print("ORDER")
    print("=" * 64)

    _print_section("Order info", order.order_info.summary() if order.order_info else [])
    _print_section("Customer", order.customer_info.summary() if order.customer_info else [])
    _print_section("Delivery address", order.delivery_address.summary() if order.delivery_address else [])

    print(f"\nLine items ({len(order.items)}):\n")
    if not order.items:
        print("  No line items found in the document.")
    for i, item in enumerate(order.items, 1):
        amount = f"{item.net_summary:>14,.2f}" if item.net_summary is not None else f"{'-':>14}"
        print(f"  #{i:<3} {item.part_number:<10} {item.quantity:>5} x  {amount}  {item.description}")

    print()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract line items and header fields from an order PDF.",
    )
    parser.add_argument("pdf", help="Path to the PDF file")
    parser.add_argument(
        "--y-tolerance",
        type=float, default=DEFAULT_Y_TOLERANCE, metavar="PT",
        help=f"Max vertical distance between tokens on one line (default: {DEFAULT_Y_TOLERANCE})",
    )
    parser.add_argument(
        "--left-column",
        type=float, default=DEFAULT_LEFT_COLUMN_FRACTION, metavar="FRAC",
        help=f"Page-width fraction bounding the address column (default: {DEFAULT_LEFT_COLUMN_FRACTION})",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every extracted item and section",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        pages = load_pages(args.pdf)
    except InvalidInputError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    order = extract_order(pages, y_tolerance=args.y_tolerance, left_column_fraction=args.left_column)
    print_order(order)
    return 0


if __name__ == "__main__":
    sys.exit(main())
