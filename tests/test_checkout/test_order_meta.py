"""Tests for writing registration details onto orders."""

from decimal import Decimal

import pytest

from django_conference_checkout.checkout.services.order_meta import (
    NEWSLETTER_META,
    PAYEE_EMAIL_META,
    PAYER_TYPE_META,
    apply_payee_email,
    sanitize_email,
    sanitize_text,
    save_order_meta,
    yes_no,
)
from django_conference_checkout.checkout.services.tickets import list_ticket_blocks
from django_conference_checkout.registration.models import Cart, CartItem, Order, OrderLineItem, TicketType


@pytest.fixture
def ticket_type(db):
    return TicketType.objects.create(name="Early Bird", slug="early-bird", sku="EB-24", price=Decimal("150.00"))


@pytest.fixture
def cart(ticket_type):
    cart = Cart.objects.create(session_key="session-meta")
    CartItem.objects.create(cart=cart, ticket_type=ticket_type, quantity=2)
    return cart


@pytest.fixture
def order(db):
    return Order.objects.create(reference="ORD-META0001")


def _meta(order):
    return dict(order.meta.order_by("pk").values_list("key", "value"))


class TestSanitizers:
    def test_sanitize_text(self):
        assert sanitize_text("  Jane   <b>Doe</b>\n") == "Jane Doe"

    def test_sanitize_email(self):
        assert sanitize_email(" jane.doe+cfp@example.com ") == "jane.doe+cfp@example.com"
        assert sanitize_email("ja ne<>@exa(mple).com") == "jane@example.com"

    @pytest.mark.parametrize("value", ["1", "on", "yes", "true", "off", "no", " "])
    def test_yes(self, value):
        assert yes_no(value) == "Yes"

    @pytest.mark.parametrize("value", [None, "", "0", 0])
    def test_no(self, value):
        assert yes_no(value) == "No"


@pytest.mark.django_db
class TestSaveOrderMeta:
    def test_full_submission(self, order, cart):
        blocks = list_ticket_blocks(cart)
        submitted = {
            "contact_payer_type": "behalf",
            "contact_payee_email": "payee@example.com",
            "newsletter_optin": "1",
            f"{blocks[0].key}_name": "Ada Lovelace",
            f"{blocks[0].key}_email": "ada@example.com",
            f"{blocks[0].key}_phone": "0123",
            f"{blocks[0].key}_presenting": "1",
            f"{blocks[1].key}_name": "Alan Turing",
            f"{blocks[1].key}_email": "alan@example.com",
            f"{blocks[1].key}_phone": "0456",
        }

        save_order_meta(order, submitted, cart)

        assert _meta(order) == {
            PAYER_TYPE_META: "behalf",
            PAYEE_EMAIL_META: "payee@example.com",
            NEWSLETTER_META: "Yes",
            f"{blocks[0].label}: Delegate Name": "Ada Lovelace",
            f"{blocks[0].label}: Delegate Email": "ada@example.com",
            f"{blocks[0].label}: Delegate Phone": "0123",
            f"{blocks[0].label}: Presenting": "Yes",
            f"{blocks[1].label}: Delegate Name": "Alan Turing",
            f"{blocks[1].label}: Delegate Email": "alan@example.com",
            f"{blocks[1].label}: Delegate Phone": "0456",
        }

    def test_labels_include_sku_and_position(self, order, cart):
        block = list_ticket_blocks(cart)[1]
        save_order_meta(order, {f"{block.key}_name": "Grace"}, cart)

        assert order.get_meta("Ticket 2 — Early Bird [EB-24] (2 of 2): Delegate Name") == "Grace"

    def test_newsletter_always_written(self, order, cart):
        save_order_meta(order, {}, cart)

        assert _meta(order) == {NEWSLETTER_META: "No"}

    def test_absent_fields_are_not_written(self, order, cart):
        block = list_ticket_blocks(cart)[0]
        save_order_meta(order, {f"{block.key}_presenting": "0"}, cart)

        meta = _meta(order)
        assert PAYER_TYPE_META not in meta
        assert PAYEE_EMAIL_META not in meta
        assert meta[f"{block.label}: Presenting"] == "No"
        assert f"{block.label}: Waitlisted" not in meta

    def test_values_are_sanitized(self, order, cart):
        block = list_ticket_blocks(cart)[0]
        save_order_meta(
            order,
            {
                "contact_payer_type": " <i>self</i> ",
                f"{block.key}_name": "  Ada\n\nLovelace ",
                f"{block.key}_email": " ada@example.com ",
            },
            cart,
        )

        assert order.get_meta(PAYER_TYPE_META) == "self"
        assert order.get_meta(f"{block.label}: Delegate Name") == "Ada Lovelace"
        assert order.get_meta(f"{block.label}: Delegate Email") == "ada@example.com"

    def test_rewriting_updates_existing_rows(self, order, cart):
        save_order_meta(order, {"newsletter_optin": "1"}, cart)
        save_order_meta(order, {}, cart)

        assert order.meta.filter(key=NEWSLETTER_META).count() == 1
        assert order.get_meta(NEWSLETTER_META) == "No"


@pytest.mark.django_db
class TestApplyPayeeEmail:
    def test_sets_missing_billing_email(self, order):
        assert apply_payee_email(order, {"contact_payee_email": " payee@example.com "}) is True

        order.refresh_from_db()
        assert order.billing_email == "payee@example.com"

    def test_keeps_existing_billing_email(self, order):
        order.billing_email = "billing@example.com"
        order.save()

        assert apply_payee_email(order, {"contact_payee_email": "payee@example.com"}) is False
        assert order.billing_email == "billing@example.com"

    def test_nothing_submitted(self, order):
        assert apply_payee_email(order, {}) is False
        assert order.billing_email == ""


@pytest.mark.django_db
def test_longest_ticket_label_fits_order_columns(order):
    ticket_type = TicketType.objects.create(name="N" * 200, slug="long", sku="S" * 100, price=Decimal("10.00"))
    cart = Cart.objects.create(session_key="session-long")
    CartItem.objects.create(cart=cart, ticket_type=ticket_type, quantity=1)
    block = list_ticket_blocks(cart)[0]
    submitted = {
        f"{block.key}_name": "Ada Lovelace",
        f"{block.key}_email": "ada@example.com",
        f"{block.key}_phone": "0123",
        f"{block.key}_presenting": "1",
        f"{block.key}_waitlisted": "1",
    }

    save_order_meta(order, submitted, cart)

    rows = list(order.meta.all())
    assert len(rows) == 6
    for row in rows:
        row.full_clean()
    OrderLineItem(
        order=order,
        description=str(ticket_type),
        unit_price=ticket_type.price,
        line_total=ticket_type.price,
        ticket_type=ticket_type,
    ).full_clean()
