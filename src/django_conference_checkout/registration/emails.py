"""Order confirmation emails.

The meta fields listed in the email come from the
``EMAIL_ORDER_META_FIELDS`` filter, so customization apps decide what extra
order details customers and administrators see.
"""

import logging

from django.core.mail import mail_managers, send_mail
from django.template.loader import render_to_string

from django_conference_checkout.hooks import CheckoutEvent, hooks

logger = logging.getLogger(__name__)

TEXT_TEMPLATE = "django_conference_checkout/registration/emails/order_confirmation.txt"
HTML_TEMPLATE = "django_conference_checkout/registration/emails/order_confirmation.html"


def order_meta_fields(order: object, *, sent_to_admin: bool) -> dict[str, dict[str, str]]:
    """Return the extra ``{"label", "value"}`` rows to list in an order email."""
    return hooks.apply_filters(CheckoutEvent.EMAIL_ORDER_META_FIELDS, {}, sent_to_admin, order)


def render_order_email(order: object, *, sent_to_admin: bool) -> tuple[str, str, str]:
    """Render the subject, text body and HTML body of an order email."""
    context = {
        "order": order,
        "line_items": list(order.line_items.all()),
        "fees": list(order.fees.all()),
        "meta_fields": list(order_meta_fields(order, sent_to_admin=sent_to_admin).values()),
        "sent_to_admin": sent_to_admin,
    }
    subject = f"New order {order.reference}" if sent_to_admin else f"Your order {order.reference}"
    return subject, render_to_string(TEXT_TEMPLATE, context), render_to_string(HTML_TEMPLATE, context)


def send_order_confirmation(order: object) -> int:
    """Email the order confirmation to the customer and a copy to the site managers.

    Returns:
        The number of customer messages sent (0 when the order has no
        billing email).
    """
    subject, text_body, html_body = render_order_email(order, sent_to_admin=True)
    mail_managers(subject, text_body, html_message=html_body)

    if not order.billing_email:
        logger.info("Order %s has no billing email, skipping customer confirmation", order.reference)
        return 0

    subject, text_body, html_body = render_order_email(order, sent_to_admin=False)
    sent = send_mail(subject, text_body, None, [order.billing_email], html_message=html_body)
    logger.info("Sent order confirmation for %s to %s", order.reference, order.billing_email)
    return sent
