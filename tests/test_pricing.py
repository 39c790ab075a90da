from datetime import date
from decimal import Decimal

from hotelbook.models import Room
from hotelbook.services.booking import compute_pricing


def test_discount_price_wins_over_list_price():
    room = Room(price=Decimal("100.00"), discount_price=Decimal("80.00"))

    pricing = compute_pricing(room, date(2024, 6, 10), date(2024, 6, 13), Decimal("0.12"))

    assert pricing.nights == 3
    assert pricing.price_per_night == Decimal("80.00")
    assert pricing.subtotal == Decimal("240.00")
    assert pricing.taxes == Decimal("28.80")
    assert pricing.total_amount == Decimal("268.80")


def test_list_price_without_discount():
    room = Room(price=Decimal("150.00"), discount_price=None)

    pricing = compute_pricing(room, date(2024, 6, 10), date(2024, 6, 11), Decimal("0.12"))

    assert pricing.nights == 1
    assert pricing.subtotal == Decimal("150.00")
    assert pricing.taxes == Decimal("18.00")
    assert pricing.total_amount == Decimal("168.00")


def test_taxes_round_half_up_to_the_cent():
    room = Room(price=Decimal("0.20"), discount_price=None)

    pricing = compute_pricing(room, date(2024, 6, 10), date(2024, 6, 11), Decimal("0.125"))

    # 0.025 rounds up, not to even
    assert pricing.taxes == Decimal("0.03")
    assert pricing.total_amount == Decimal("0.23")


def test_total_is_subtotal_plus_taxes():
    room = Room(price=Decimal("99.99"), discount_price=None)

    pricing = compute_pricing(room, date(2024, 1, 30), date(2024, 2, 2), Decimal("0.07"))

    assert pricing.nights == 3
    assert pricing.subtotal == Decimal("299.97")
    assert pricing.taxes == Decimal("21.00")
    assert pricing.total_amount == pricing.subtotal + pricing.taxes
