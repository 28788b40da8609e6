"""Tests for CartService in django_conference_checkout.registration.services.cart."""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.contrib.sessions.backends.db import SessionStore
from django.core.exceptions import ValidationError
from django.test import RequestFactory

from django_conference_checkout.checkout.models import CheckoutOptions
from django_conference_checkout.hooks import CheckoutContext, CheckoutEvent, hooks
from django_conference_checkout.registration.models import Cart, CartItem, TicketType
from django_conference_checkout.registration.services.cart import CartService

User = get_user_model()


# -- Fixtures -----------------------------------------------------------------


@pytest.fixture
def ticket_type(db):
    return TicketType.objects.create(name="Early Bird", slug="early-bird", sku="EB", price=Decimal("150.00"))


@pytest.fixture
def student_ticket(db):
    return TicketType.objects.create(name="Student", slug="student", price=Decimal("50.00"))


@pytest.fixture
def cart(db):
    return Cart.objects.create(session_key="cart-service-session")


@pytest.fixture
def session_request(db):
    request = RequestFactory().get("/")
    request.session = SessionStore()
    request.user = AnonymousUser()
    return request


# =============================================================================
# Cart lookup
# =============================================================================


@pytest.mark.django_db
class TestGetOrCreateCart:
    def test_creates_session_and_cart(self, session_request):
        cart = CartService.get_or_create_cart(session_request)

        assert session_request.session.session_key
        assert cart.session_key == session_request.session.session_key
        assert cart.status == Cart.Status.OPEN
        assert cart.user is None

    def test_returns_existing_open_cart(self, session_request):
        first = CartService.get_or_create_cart(session_request)

        assert CartService.get_or_create_cart(session_request).pk == first.pk

    def test_checked_out_cart_is_not_reused(self, session_request):
        first = CartService.get_or_create_cart(session_request)
        first.status = Cart.Status.CHECKED_OUT
        first.save()

        assert CartService.get_or_create_cart(session_request).pk != first.pk

    def test_attaches_authenticated_user(self, session_request):
        session_request.user = User.objects.create_user(username="attendee", password="password")

        assert CartService.get_or_create_cart(session_request).user == session_request.user

    def test_current_cart_without_session(self, session_request):
        assert CartService.get_current_cart(session_request) is None


# =============================================================================
# Items
# =============================================================================


@pytest.mark.django_db
class TestItems:
    def test_add_ticket(self, cart, ticket_type):
        item = CartService.add_ticket(cart, ticket_type, 2)

        assert item.quantity == 2
        assert len(item.key) == 32
        assert cart.line_items() == [item]

    def test_add_same_ticket_increments(self, cart, ticket_type):
        first = CartService.add_ticket(cart, ticket_type)
        second = CartService.add_ticket(cart, ticket_type, 2)

        assert first.pk == second.pk
        assert second.quantity == 3
        assert cart.items.count() == 1

    def test_line_items_keep_insertion_order(self, cart, ticket_type, student_ticket):
        CartService.add_ticket(cart, student_ticket)
        CartService.add_ticket(cart, ticket_type)

        assert [item.product for item in cart.line_items()] == [student_ticket, ticket_type]

    def test_rejects_inactive_ticket(self, cart, ticket_type):
        ticket_type.is_active = False
        ticket_type.save()

        with pytest.raises(ValidationError, match="not available"):
            CartService.add_ticket(cart, ticket_type)

    def test_rejects_zero_quantity(self, cart, ticket_type):
        with pytest.raises(ValidationError, match="at least 1"):
            CartService.add_ticket(cart, ticket_type, 0)

    def test_rejects_closed_cart(self, cart, ticket_type):
        cart.status = Cart.Status.CHECKED_OUT
        cart.save()

        with pytest.raises(ValidationError, match="open carts"):
            CartService.add_ticket(cart, ticket_type)

    def test_remove_item(self, cart, ticket_type):
        item = CartService.add_ticket(cart, ticket_type)

        CartService.remove_item(cart, item.key)

        assert not cart.items.exists()

    def test_remove_unknown_item(self, cart):
        with pytest.raises(ValidationError, match="not found"):
            CartService.remove_item(cart, "missing")

    def test_update_quantity(self, cart, ticket_type):
        item = CartService.add_ticket(cart, ticket_type)

        updated = CartService.update_quantity(cart, item.key, 4)

        assert updated.quantity == 4

    def test_update_quantity_to_zero_removes(self, cart, ticket_type):
        item = CartService.add_ticket(cart, ticket_type)

        assert CartService.update_quantity(cart, item.key, 0) is None
        assert not CartItem.objects.filter(pk=item.pk).exists()

    def test_product_survives_ticket_deletion(self, cart, ticket_type):
        item = CartService.add_ticket(cart, ticket_type)
        ticket_type.delete()
        item.refresh_from_db()

        assert item.product is None
        assert item.unit_price == Decimal("0.00")


# =============================================================================
# Payment method and totals
# =============================================================================


@pytest.mark.django_db
class TestPaymentMethod:
    def test_set_known_method(self, cart):
        CartService.set_payment_method(cart, Cart.PaymentMethod.COD)

        cart.refresh_from_db()
        assert cart.payment_method == "cod"

    def test_reject_unknown_method(self, cart):
        with pytest.raises(ValidationError, match="Unknown payment method"):
            CartService.set_payment_method(cart, "bitcoin")


@pytest.mark.django_db
class TestCalculateTotals:
    def test_card_payment_has_no_fees(self, cart, ticket_type):
        CartService.add_ticket(cart, ticket_type, 2)
        CartService.set_payment_method(cart, "card")

        summary = CartService.calculate_totals(cart)

        assert summary.fees == []
        assert summary.subtotal == Decimal("300.00")
        assert summary.total == Decimal("300.00")

    def test_cod_adds_one_fee_per_ticket(self, cart, ticket_type, student_ticket):
        CartService.add_ticket(cart, ticket_type, 2)
        CartService.add_ticket(cart, student_ticket)
        CartService.set_payment_method(cart, "cod")

        summary = CartService.calculate_totals(cart)

        assert [fee.name for fee in summary.fees] == ["Pay on the Door Surcharge"] * 3
        assert summary.fee_total == Decimal("30.00")
        assert summary.total == Decimal("380.00")
        assert cart.fees.count() == 3

    def test_recalculation_is_idempotent(self, cart, ticket_type):
        CartService.add_ticket(cart, ticket_type, 2)
        CartService.set_payment_method(cart, "cod")

        first = CartService.calculate_totals(cart)
        second = CartService.calculate_totals(cart)

        assert first == second
        assert cart.fees.count() == 2

    def test_switching_method_clears_fees(self, cart, ticket_type):
        CartService.add_ticket(cart, ticket_type)
        CartService.set_payment_method(cart, "cod")
        CartService.calculate_totals(cart)

        CartService.set_payment_method(cart, "bacs")
        summary = CartService.calculate_totals(cart)

        assert summary.fees == []
        assert not cart.fees.exists()

    def test_saved_options_apply(self, cart, ticket_type):
        CheckoutOptions.objects.create(fee_amount=Decimal("2.50"), fee_only_cod=False, fee_title="Handling")
        CartService.add_ticket(cart, ticket_type, 2)
        CartService.set_payment_method(cart, "card")

        summary = CartService.calculate_totals(cart)

        assert [(fee.name, fee.amount) for fee in summary.fees] == [("Handling", Decimal("2.50"))] * 2

    def test_disabled_fee(self, cart, ticket_type):
        CheckoutOptions.objects.create(fee_enabled=False)
        CartService.add_ticket(cart, ticket_type)
        CartService.set_payment_method(cart, "cod")

        assert CartService.calculate_totals(cart).fees == []

    def test_handlers_receive_context(self, cart, ticket_type):
        CartService.add_ticket(cart, ticket_type)
        context = CheckoutContext(cart=cart)
        seen = []

        def spy(handler_cart, handler_context):
            seen.append((handler_cart, handler_context))

        hooks.add_action(CheckoutEvent.CALCULATE_FEES, spy, 99)
        try:
            CartService.calculate_totals(cart, context)
        finally:
            hooks.remove(CheckoutEvent.CALCULATE_FEES, spy)

        assert seen == [(cart, context)]
