from order_context import find_customer_info, find_delivery_address, find_order_info
from order_models import PageTokens, Token

PAGE_W = 600.0
PAGE_H = 800.0


def _row(text: str, y: float, left: float = 40.0) -> list[Token]:
    """Tokens for one printed row; *y* is the baseline (bottom) and top is y + 8."""
    return [
        Token(word, left + 45.0 * i, y + 8.0, y)
        for i, word in enumerate(text.split())
    ]


def _page(*rows: list[Token]) -> PageTokens:
    return PageTokens(PAGE_W, PAGE_H, [t for row in rows for t in row])


# ---------------------------------------------------------------------------
# delivery address
# ---------------------------------------------------------------------------

def _address_rows(name: str = "Jane Doe") -> list[list[Token]]:
    return [
        _row("Delivery address", 600),
        _row(name, 588),
        _row("Acme Supply Co", 576),
        _row("123 Main St", 564),
        _row("49311 Byron Center, MI 49315", 552),
        _row("USA", 540),
    ]


def test_address_block_after_anchor():
    address = find_delivery_address(_page(*_address_rows()))
    assert address is not None
    assert address.recipient_name == "Jane Doe"
    assert address.company_name == "Acme Supply Co"
    assert address.street == "123 Main St"
    assert address.country == "USA"


def test_leading_zip_wins_over_trailing_zip():
    address = find_delivery_address(_page(*_address_rows()))
    assert address.zip_code == "49311"
    assert address.city == "Byron Center"
    assert address.state == "MI"


def test_city_state_zip_in_usual_order():
    rows = _address_rows()
    rows[4] = _row("Byron Center, MI 49315", 552)
    address = find_delivery_address(_page(*rows))
    assert address.city == "Byron Center"
    assert address.state == "MI"
    assert address.zip_code == "49315"


def test_right_column_tokens_are_ignored():
    rows = _address_rows() + [_row("Invoice address", 588, left=400.0)]
    address = find_delivery_address(_page(*rows))
    assert address.recipient_name == "Jane Doe"


def test_anchor_match_is_case_insensitive():
    rows = _address_rows()
    rows[0] = _row("DELIVERY ADDRESS:", 600)
    assert find_delivery_address(_page(*rows)).recipient_name == "Jane Doe"


def test_short_block_leaves_trailing_fields_empty():
    address = find_delivery_address(_page(_row("Delivery address", 600), _row("Jane Doe", 588)))
    assert address.recipient_name == "Jane Doe"
    assert address.company_name is None
    assert address.city is None
    assert address.country is None


def test_no_anchor_or_no_name_gives_none():
    assert find_delivery_address(_page(_row("Jane Doe", 588))) is None
    assert find_delivery_address(_page(_row("Delivery address", 600))) is None


# ---------------------------------------------------------------------------
# customer info
# ---------------------------------------------------------------------------

def _customer_rows() -> list[list[Token]]:
    return [
        _row("DMS customer 55501", 760, left=320.0),
        _row("number", 748, left=320.0),
        _row("Customer George", 736, left=320.0),
        _row("Reece", 724, left=320.0),
        _row("Company Acme Supply", 712, left=320.0),
        _row("Email orders@acme.test", 700, left=320.0),
        _row("Phone 616-555-0100", 688, left=320.0),
        _row("CTDI ID 9876", 676, left=320.0),
    ]


def test_customer_labels_in_upper_right_quadrant():
    info = find_customer_info(_page(*_customer_rows()))
    assert info.dms_number == "55501"
    assert info.customer == "George Reece"
    assert info.company == "Acme Supply"
    assert info.email == "orders@acme.test"
    assert info.phone == "616-555-0100"
    assert info.ctdi_id == "9876"


def test_customer_labels_outside_region_are_ignored():
    rows = [
        _row("Email left@acme.test", 700, left=40.0),
        _row("Phone 555-0000", 200, left=320.0),
    ]
    info = find_customer_info(_page(*rows))
    assert info.email is None
    assert info.phone is None
    assert not info.has_values()


def test_repeated_label_last_match_wins():
    # Deliberate: every rule sees every row, so the lower row replaces the upper one.
    rows = _customer_rows() + [_row("Email second@acme.test", 664, left=320.0)]
    assert find_customer_info(_page(*rows)).email == "second@acme.test"


def test_customer_name_needs_number_row_above():
    rows = [_row("Customer George", 736, left=320.0)]
    assert find_customer_info(_page(*rows)).customer is None


# ---------------------------------------------------------------------------
# order info
# ---------------------------------------------------------------------------

def test_order_metadata_labels():
    text = (
        "Order Number: 4500123 Date of Order 10/02/2025 Order Class STD "
        "Delivery Way Ground Payment Method Invoice Items: 3 Net weight (lbs) 12.5"
    )
    info = find_order_info(_page(_row(text, 700)))
    assert info.order_number == "4500123"
    assert info.order_date == "10/02/2025"
    assert info.order_class == "STD"
    assert info.delivery_way == "Ground"
    assert info.payment_method == "Invoice"
    assert info.items_amount == "3"
    assert info.net_weight == "12.5"


def test_order_metadata_uses_provider_order():
    # Tokens are flattened as delivered, not re-sorted by position.
    tokens = [
        Token("4500123", 300, 708, 700),
        Token("Order", 40, 708, 700),
        Token("Number", 85, 708, 700),
    ]
    assert find_order_info(PageTokens(PAGE_W, PAGE_H, tokens)).order_number is None


def test_missing_metadata_is_empty():
    info = find_order_info(_page(_row("Thank you for your business", 700)))
    assert not info.has_values()
