"""Checkout service for converting carts into orders.

Builds the checkout field schema, runs checkout validation, and performs the
atomic order placement. Customization apps take part through the
``CHECKOUT_FIELDS``, ``CHECKOUT_PROCESS`` and ``CREATE_ORDER`` hooks.
"""

import logging
import secrets
import string

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from django_conference_checkout.hooks import CheckoutContext, CheckoutEvent, hooks
from django_conference_checkout.registration.emails import send_order_confirmation
from django_conference_checkout.registration.forms import FieldSchema, default_checkout_fields
from django_conference_checkout.registration.models import Cart, Order, OrderFee, OrderLineItem
from django_conference_checkout.registration.services.cart import CartService
from django_conference_checkout.settings import get_config

logger = logging.getLogger(__name__)

BILLING_ORDER_FIELDS = (
    "billing_first_name",
    "billing_last_name",
    "billing_country",
    "billing_address_1",
    "billing_email",
)


def _generate_reference() -> str:
    """Generate an order reference using the configured prefix.

    The prefix is set via ``DJANGO_CONFERENCE_CHECKOUT["order_reference_prefix"]``
    (default ``"ORD"``), producing references like ``ORD-A1B2C3D4``.
    """
    config = get_config()
    chars = string.ascii_uppercase + string.digits
    suffix = "".join(secrets.choice(chars) for _ in range(8))
    return f"{config.order_reference_prefix}-{suffix}"


def billing_details(submitted: object) -> dict[str, str]:
    """Pick the billing values the Order model stores from a submission."""
    return {key: str(submitted.get(key, "")).strip() for key in BILLING_ORDER_FIELDS if submitted.get(key)}


class CheckoutService:
    """Stateless service for checkout operations."""

    @staticmethod
    def checkout_fields(context: CheckoutContext) -> FieldSchema:
        """Return the checkout field schema after every ``CHECKOUT_FIELDS`` filter ran."""
        return hooks.apply_filters(CheckoutEvent.CHECKOUT_FIELDS, default_checkout_fields(), context)

    @staticmethod
    def validate(context: CheckoutContext) -> list[str]:
        """Run the ``CHECKOUT_PROCESS`` handlers and return the notices they raised.

        Notices from an earlier run on the same context are discarded first.
        """
        context.notices.clear()
        hooks.do_action(CheckoutEvent.CHECKOUT_PROCESS, context)
        return list(context.notices)

    @staticmethod
    def place_order(cart: Cart, context: CheckoutContext) -> Order:
        """Validate the submission and convert the cart into an order.

        Re-runs checkout validation against the current cart, recalculates fee
        lines, then creates the Order with its line item and fee snapshots.
        ``CREATE_ORDER`` handlers run inside the same transaction, so metadata
        written by them is committed together with the order. The cart is
        marked ``CHECKED_OUT`` and the confirmation email is sent after
        commit.

        Args:
            cart: The open cart to check out.
            context: The request's checkout context carrying the submission.

        Returns:
            The newly created Order with PENDING status.

        Raises:
            ValidationError: If the cart is not open or empty, or if any
                ``CHECKOUT_PROCESS`` handler reported a notice. The error
                carries every notice as a separate message.
        """
        if cart.status != Cart.Status.OPEN:
            raise ValidationError("Only open carts can be checked out.")
        if not cart.items.exists():
            raise ValidationError("Cannot check out an empty cart.")

        context.cart = cart
        notices = CheckoutService.validate(context)
        if notices:
            logger.warning("Checkout rejected for cart %s with %d notice(s)", cart.pk, len(notices))
            raise ValidationError(notices)

        with transaction.atomic():
            summary = CartService.calculate_totals(cart, context)
            order = _create_order(cart, summary, billing_details(context.submitted))

            ticket_types = {item.key: item.ticket_type for item in cart.line_items()}
            for line in summary.items:
                OrderLineItem.objects.create(
                    order=order,
                    description=line.description,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                    ticket_type=ticket_types.get(line.item_key),
                )
            for fee in summary.fees:
                OrderFee.objects.create(
                    order=order,
                    name=fee.name,
                    amount=fee.amount,
                    taxable=fee.taxable,
                    tax_class=fee.tax_class,
                )

            hooks.do_action(CheckoutEvent.CREATE_ORDER, order, context)

            cart.status = Cart.Status.CHECKED_OUT
            cart.save(update_fields=["status", "updated_at"])

            if get_config().send_order_emails:
                transaction.on_commit(lambda: send_order_confirmation(order))

        logger.info("Placed order %s from cart %s (total %s)", order.reference, cart.pk, order.total)
        return order


def _create_order(cart: Cart, summary: object, billing: dict[str, str]) -> Order:
    """Create the Order row, retrying on the rare reference collision."""
    while True:
        try:
            with transaction.atomic():
                return Order.objects.create(
                    user=cart.user,
                    status=Order.Status.PENDING,
                    payment_method=cart.payment_method,
                    subtotal=summary.subtotal,
                    fee_total=summary.fee_total,
                    total=summary.total,
                    reference=_generate_reference(),
                    **billing,
                )
        except IntegrityError:
            continue
