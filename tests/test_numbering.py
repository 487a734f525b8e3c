from datetime import datetime

from storefront.core.numbering import (
    generate_order_number,
    generate_quote_number,
    bump_number,
    generate_sku,
    to_base36,
)


def test_order_number_uses_year_and_last_six_millis():
    number = generate_order_number(now=datetime(2025, 3, 1), millis=1740787200123)
    assert number == "UL-2025-200123"


def test_quote_number_prefix():
    assert generate_quote_number(now=datetime(2025, 1, 1), millis=42).startswith("COT-2025-")
    assert generate_quote_number(now=datetime(2025, 1, 1), millis=42) == "COT-2025-000042"


def test_bump_number_wraps_within_width():
    assert bump_number("UL-2025-000123") == "UL-2025-000124"
    assert bump_number("UL-2025-999999") == "UL-2025-000000"


def test_sku_format():
    sku = generate_sku(millis=1700000000000)
    prefix, stamp, suffix = sku.split("-")
    assert prefix == "PRD"
    assert stamp == to_base36(1700000000000).upper()
    assert len(suffix) == 3
    assert sku == sku.upper()
