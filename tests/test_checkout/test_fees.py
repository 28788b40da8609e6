"""Tests for the per-ticket surcharge."""

from dataclasses import replace
from decimal import Decimal
from types import SimpleNamespace

import pytest
from django.test import override_settings

from django_conference_checkout.checkout.services.fees import apply_ticket_surcharge, surcharge_applies
from django_conference_checkout.checkout.services.options import Options

OPTIONS = Options(
    fee_enabled=True,
    fee_title="Pay on the Door Surcharge",
    fee_amount=Decimal("10"),
    fee_taxable=False,
    fee_tax_class="",
    fee_only_cod=True,
    newsletter_label="",
)


class FakeCart:
    def __init__(self, quantities, payment_method=""):
        product = SimpleNamespace(get_name=lambda: "Ticket", get_sku=lambda: "")
        self._lines = [
            SimpleNamespace(key=f"line{index}", quantity=quantity, product=product)
            for index, quantity in enumerate(quantities)
        ]
        self.payment_method = payment_method
        self.fees = []

    def line_items(self):
        return self._lines

    def add_fee(self, name, amount, *, taxable=False, tax_class=""):
        self.fees.append((name, amount, taxable, tax_class))


class TestSurchargeApplies:
    def test_disabled(self):
        assert surcharge_applies(replace(OPTIONS, fee_enabled=False), "cod") is False

    def test_cod_only(self):
        assert surcharge_applies(OPTIONS, "cod") is True
        assert surcharge_applies(OPTIONS, "card") is False
        assert surcharge_applies(OPTIONS, "") is False

    def test_all_methods(self):
        assert surcharge_applies(replace(OPTIONS, fee_only_cod=False), "card") is True

    def test_configured_cod_method(self):
        with override_settings(DJANGO_CONFERENCE_CHECKOUT={"cod_payment_method": "door"}):
            assert surcharge_applies(OPTIONS, "door") is True
            assert surcharge_applies(OPTIONS, "cod") is False


class TestApplyTicketSurcharge:
    def test_one_fee_per_ticket_on_cod(self):
        cart = FakeCart([2, 1], payment_method="cod")

        assert apply_ticket_surcharge(cart, OPTIONS) == 3
        assert cart.fees == [("Pay on the Door Surcharge", Decimal("10"), False, "")] * 3
        assert sum(fee[1] for fee in cart.fees) == Decimal("30")

    def test_no_fee_for_other_method(self):
        cart = FakeCart([2], payment_method="card")

        assert apply_ticket_surcharge(cart, OPTIONS) == 0
        assert cart.fees == []

    def test_every_method_when_not_cod_only(self):
        cart = FakeCart([2], payment_method="card")

        assert apply_ticket_surcharge(cart, replace(OPTIONS, fee_only_cod=False)) == 2

    def test_disabled(self):
        cart = FakeCart([2], payment_method="cod")

        assert apply_ticket_surcharge(cart, replace(OPTIONS, fee_enabled=False)) == 0
        assert cart.fees == []

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
    def test_non_positive_amount(self, amount):
        cart = FakeCart([2], payment_method="cod")

        assert apply_ticket_surcharge(cart, replace(OPTIONS, fee_amount=amount)) == 0
        assert cart.fees == []

    def test_empty_cart(self):
        cart = FakeCart([], payment_method="cod")

        assert apply_ticket_surcharge(cart, OPTIONS) == 0

    def test_taxable_fee(self):
        cart = FakeCart([1], payment_method="cod")

        apply_ticket_surcharge(cart, replace(OPTIONS, fee_taxable=True, fee_tax_class="reduced-rate"))

        assert cart.fees == [("Pay on the Door Surcharge", Decimal("10"), True, "reduced-rate")]
