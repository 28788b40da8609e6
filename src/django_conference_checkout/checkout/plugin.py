"""Wiring of the conference checkout handlers into the host's lifecycle events.

Each handler is a thin adapter between a hook signature and one of the
services in :mod:`django_conference_checkout.checkout.services`. Options are
loaded once per request and cached on the :class:`CheckoutContext`.
"""

from django_conference_checkout.checkout.services import display, fees, fields, order_meta, validation
from django_conference_checkout.checkout.services.options import Options, get_options
from django_conference_checkout.hooks import CheckoutContext, CheckoutEvent, HookRegistry, hooks

FIELDS_PRIORITY = 9999
CONTACT_HEADING_PRIORITY = 3
TICKETS_HEADING_PRIORITY = 48
FEES_PRIORITY = 20
PAYEE_EMAIL_PRIORITY = 5


def request_options(context: CheckoutContext) -> Options:
    """Return the options for the request, loading them on first use."""
    options = context.state.get("options")
    if options is None:
        options = get_options()
        context.state["options"] = options
    return options


def enqueue_assets(context: CheckoutContext) -> list[display.Asset]:
    return display.checkout_assets(on_checkout=context.on_checkout)


def heading_contact(context: CheckoutContext) -> str:  # noqa: ARG001
    return display.heading_contact()


def heading_tickets(context: CheckoutContext) -> str:  # noqa: ARG001
    return display.heading_tickets()


def checkout_fields(schema: fields.FieldSchema, context: CheckoutContext) -> fields.FieldSchema:
    return fields.build_checkout_fields(schema, request_options(context), context.cart)


def validate_checkout(context: CheckoutContext) -> None:
    context.notices.extend(validation.validate_checkout(context.submitted, context.cart))


def save_order_meta(order: object, context: CheckoutContext) -> None:
    order_meta.save_order_meta(order, context.submitted, context.cart)


def use_payee_as_billing_email(order: object, context: CheckoutContext) -> None:
    order_meta.apply_payee_email(order, context.submitted)


def admin_meta_box(order: object) -> str:
    return display.admin_meta_box(order)


def email_meta_fields(meta_fields: dict, sent_to_admin: bool, order: object) -> dict:  # noqa: FBT001
    return display.email_meta_fields(meta_fields, sent_to_admin, order)


def per_ticket_surcharge(cart: object, context: CheckoutContext) -> None:
    fees.apply_ticket_surcharge(cart, request_options(context))


def init(registry: HookRegistry = hooks) -> None:
    """Register every checkout handler on *registry*.

    Safe to call more than once; the registry keeps a single entry per
    handler and event.
    """
    registry.add_action(CheckoutEvent.ENQUEUE_ASSETS, enqueue_assets)

    registry.add_action(CheckoutEvent.BEFORE_BILLING_FORM, heading_contact, CONTACT_HEADING_PRIORITY)
    registry.add_action(CheckoutEvent.BEFORE_BILLING_FORM, heading_tickets, TICKETS_HEADING_PRIORITY)

    registry.add_filter(CheckoutEvent.CHECKOUT_FIELDS, checkout_fields, FIELDS_PRIORITY)

    registry.add_action(CheckoutEvent.CHECKOUT_PROCESS, validate_checkout)
    registry.add_action(CheckoutEvent.CREATE_ORDER, use_payee_as_billing_email, PAYEE_EMAIL_PRIORITY)
    registry.add_action(CheckoutEvent.CREATE_ORDER, save_order_meta)

    registry.add_action(CheckoutEvent.ADMIN_ORDER_DATA, admin_meta_box)
    registry.add_filter(CheckoutEvent.EMAIL_ORDER_META_FIELDS, email_meta_fields)

    registry.add_action(CheckoutEvent.CALCULATE_FEES, per_ticket_surcharge, FEES_PRIORITY)
