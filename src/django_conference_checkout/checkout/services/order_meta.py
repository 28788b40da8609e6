"""Persistence of the registration details as order metadata."""

import logging
import re
from collections.abc import Mapping

from django.utils.html import strip_tags

from django_conference_checkout.checkout.services.fields import (
    EMAIL,
    NAME,
    NEWSLETTER_FIELD,
    PAYEE_EMAIL_FIELD,
    PAYER_TYPE_FIELD,
    PHONE,
    PRESENTING,
    WAITLISTED,
    ticket_field_key,
)
from django_conference_checkout.checkout.services.tickets import TicketBlock, list_ticket_blocks

logger = logging.getLogger(__name__)

PAYER_TYPE_META = "Contact: Payer Type"
PAYEE_EMAIL_META = "Contact: Payee Email"
NEWSLETTER_META = "Contact: Newsletter Consent"
CONTACT_META_PREFIX = "Contact: "

TICKET_META_SUFFIXES = {
    NAME: ": Delegate Name",
    EMAIL: ": Delegate Email",
    PHONE: ": Delegate Phone",
    PRESENTING: ": Presenting",
    WAITLISTED: ": Waitlisted",
}
CHECKBOX_FIELDS = (PRESENTING, WAITLISTED)

_WHITESPACE_RE = re.compile(r"\s+")
_EMAIL_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9!#$%&'*+/=?^_`{|}~.@-]")
_FALSY_CHECKBOX_VALUES = {"", "0"}


def sanitize_text(value: object) -> str:
    """Strip markup, collapse whitespace and trim a free-text value."""
    return _WHITESPACE_RE.sub(" ", strip_tags(str(value))).strip()


def sanitize_email(value: object) -> str:
    """Trim an email address and drop characters that cannot appear in one."""
    return _EMAIL_UNSAFE_RE.sub("", str(value).strip())


def yes_no(value: object) -> str:
    """Render a checkbox submission as ``"Yes"`` or ``"No"``."""
    if value is None:
        return "No"
    return "No" if str(value) in _FALSY_CHECKBOX_VALUES else "Yes"


def ticket_meta_key(block: TicketBlock, suffix: str) -> str:
    """Return the order metadata key for *suffix* of *block*."""
    return f"{block.label}{TICKET_META_SUFFIXES[suffix]}"


def _ticket_meta_value(suffix: str, value: object) -> str:
    if suffix in CHECKBOX_FIELDS:
        return yes_no(value)
    if suffix == EMAIL:
        return sanitize_email(value)
    return sanitize_text(value)


def save_order_meta(order: object, submitted: Mapping[str, str], cart: object | None) -> None:
    """Write the contact and per-ticket registration details onto *order*.

    Payer type and payee email are written only when submitted. Newsletter
    consent is always written. For each ticket block every submitted field
    is written under ``"{block label}: {field}"``; fields missing from the
    submission are skipped rather than defaulted.

    Args:
        order: The order being created; must provide ``update_meta_data``.
        submitted: Field name to raw submitted value.
        cart: The cart the order is created from.
    """
    written = 0
    if PAYER_TYPE_FIELD in submitted:
        order.update_meta_data(PAYER_TYPE_META, sanitize_text(submitted[PAYER_TYPE_FIELD]))
        written += 1
    if PAYEE_EMAIL_FIELD in submitted:
        order.update_meta_data(PAYEE_EMAIL_META, sanitize_email(submitted[PAYEE_EMAIL_FIELD]))
        written += 1
    order.update_meta_data(NEWSLETTER_META, yes_no(submitted.get(NEWSLETTER_FIELD)))
    written += 1

    for block in list_ticket_blocks(cart):
        for suffix in TICKET_META_SUFFIXES:
            field_key = ticket_field_key(block, suffix)
            if field_key not in submitted:
                continue
            order.update_meta_data(ticket_meta_key(block, suffix), _ticket_meta_value(suffix, submitted[field_key]))
            written += 1

    logger.info("Wrote %d registration meta row(s) to order %s", written, getattr(order, "reference", order))


def apply_payee_email(order: object, submitted: Mapping[str, str]) -> bool:
    """Use the payee email as the order's billing email when none was given.

    The checkout form drops the standard billing email field, so the payee
    email is the only address confirmations can go to.

    Returns:
        Whether the billing email was set.
    """
    if getattr(order, "billing_email", ""):
        return False
    email = sanitize_email(submitted.get(PAYEE_EMAIL_FIELD, ""))
    if not email:
        return False
    order.billing_email = email
    order.save(update_fields=["billing_email", "updated_at"])
    return True
