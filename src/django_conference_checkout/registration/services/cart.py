"""Cart management service for conference checkout.

Handles cart lookup for the visitor's session, ticket lines, the payment
method choice, and totals (including fee lines contributed by
``CALCULATE_FEES`` handlers). All methods are stateless and operate on Cart
model instances directly.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from django_conference_checkout.hooks import CheckoutContext, CheckoutEvent, hooks
from django_conference_checkout.registration.models import Cart, CartItem, TicketType

logger = logging.getLogger(__name__)


@dataclass
class LineItemSummary:
    """Pricing breakdown for a single cart item."""

    item_key: str
    description: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass
class FeeSummary:
    """A fee line as shown in the totals."""

    name: str
    amount: Decimal
    taxable: bool
    tax_class: str


@dataclass
class CartSummary:
    """Full pricing summary of a cart including fee lines."""

    items: list[LineItemSummary]
    fees: list[FeeSummary]
    subtotal: Decimal
    fee_total: Decimal
    total: Decimal


class CartService:
    """Stateless service for cart operations.

    All methods are static and enforce the rules around open carts, ticket
    availability, quantities and payment methods.
    """

    @staticmethod
    def get_current_cart(request: object) -> Cart | None:
        """Return the open cart for the request's session, if one exists."""
        session_key = request.session.session_key
        if not session_key:
            return None
        return Cart.objects.filter(session_key=session_key, status=Cart.Status.OPEN).first()

    @staticmethod
    def get_or_create_cart(request: object) -> Cart:
        """Return the session's open cart, creating one if none exists.

        Args:
            request: The incoming HTTP request. A session is created when the
                visitor does not have one yet.

        Returns:
            An open Cart instance.
        """
        if not request.session.session_key:
            request.session.save()
        cart = CartService.get_current_cart(request)
        if cart is not None:
            return cart

        user = request.user if request.user.is_authenticated else None
        return Cart.objects.create(
            session_key=request.session.session_key,
            user=user,
            status=Cart.Status.OPEN,
        )

    @staticmethod
    @transaction.atomic
    def add_ticket(cart: Cart, ticket_type: TicketType, qty: int = 1) -> CartItem:
        """Add tickets to the cart or increase the quantity of an existing line.

        Args:
            cart: The open cart to add the tickets to.
            ticket_type: The ticket type to add.
            qty: Number of tickets to add (must be >= 1).

        Returns:
            The created or updated CartItem.

        Raises:
            ValidationError: If the cart is not open, the quantity is below one,
                or the ticket type is inactive.
        """
        _assert_cart_open(cart)

        if qty < 1:
            raise ValidationError("Quantity must be at least 1.")

        if not ticket_type.is_active:
            raise ValidationError(f"Ticket type '{ticket_type.name}' is not available.")

        item = cart.items.select_for_update().filter(ticket_type=ticket_type).first()
        if item is not None:
            item.quantity += qty
            item.save(update_fields=["quantity"])
            logger.info("Added %d x %s to cart %s", qty, ticket_type.slug, cart.pk)
            return item

        logger.info("Added %d x %s to cart %s", qty, ticket_type.slug, cart.pk)
        return CartItem.objects.create(cart=cart, ticket_type=ticket_type, quantity=qty)

    @staticmethod
    @transaction.atomic
    def remove_item(cart: Cart, item_key: str) -> None:
        """Remove a line from the cart.

        Raises:
            ValidationError: If the line does not exist in this cart.
        """
        _assert_cart_open(cart)

        deleted, _ = cart.items.filter(key=item_key).delete()
        if not deleted:
            raise ValidationError("Cart item not found.")

    @staticmethod
    @transaction.atomic
    def update_quantity(cart: Cart, item_key: str, qty: int) -> CartItem | None:
        """Set the quantity of a cart line, removing it when *qty* is zero or less.

        Returns:
            The updated CartItem, or ``None`` if the line was removed.

        Raises:
            ValidationError: If the line does not belong to this cart.
        """
        _assert_cart_open(cart)

        if qty <= 0:
            CartService.remove_item(cart, item_key)
            return None

        try:
            item = cart.items.get(key=item_key)
        except CartItem.DoesNotExist:
            raise ValidationError("Cart item not found.") from None

        item.quantity = qty
        item.save(update_fields=["quantity"])
        return item

    @staticmethod
    def set_payment_method(cart: Cart, method: str) -> Cart:
        """Record the visitor's chosen payment method on the cart.

        Raises:
            ValidationError: If *method* is not a known payment method.
        """
        _assert_cart_open(cart)

        if method not in Cart.PaymentMethod.values:
            raise ValidationError(f"Unknown payment method '{method}'.")

        cart.payment_method = method
        cart.save(update_fields=["payment_method", "updated_at"])
        return cart

    @staticmethod
    @transaction.atomic
    def calculate_totals(cart: Cart, context: CheckoutContext | None = None) -> CartSummary:
        """Recalculate fee lines and return the cart's pricing summary.

        Existing fee lines are cleared before ``CALCULATE_FEES`` fires, so
        handlers always start from a cart without fees and repeated
        calculation of an unchanged cart gives the same result.

        Args:
            cart: The cart to total.
            context: The request's checkout context; a bare one is used when
                omitted.

        Returns:
            A CartSummary with line items, fee lines and totals.
        """
        if context is None:
            context = CheckoutContext(cart=cart)

        cart.clear_fees()
        hooks.do_action(CheckoutEvent.CALCULATE_FEES, cart, context)

        items = [
            LineItemSummary(
                item_key=item.key,
                description=str(item.ticket_type) if item.ticket_type is not None else "Removed ticket",
                quantity=item.quantity,
                unit_price=item.unit_price,
                line_total=item.line_total,
            )
            for item in cart.line_items()
        ]
        fees = [
            FeeSummary(name=fee.name, amount=fee.amount, taxable=fee.taxable, tax_class=fee.tax_class)
            for fee in cart.fees.all()
        ]
        subtotal = sum((item.line_total for item in items), Decimal("0.00"))
        fee_total = sum((fee.amount for fee in fees), Decimal("0.00"))
        return CartSummary(
            items=items,
            fees=fees,
            subtotal=subtotal,
            fee_total=fee_total,
            total=subtotal + fee_total,
        )


def _assert_cart_open(cart: Cart) -> None:
    """Raise ValidationError when the cart cannot be modified."""
    if cart.status != Cart.Status.OPEN:
        raise ValidationError("Only open carts can be modified.")
