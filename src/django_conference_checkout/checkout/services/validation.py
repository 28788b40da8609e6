"""Validation of the contact and per-ticket registration fields."""

import logging
from collections.abc import Mapping

from django.core.exceptions import ValidationError
from django.core.validators import validate_email

from django_conference_checkout.checkout.services.fields import (
    EMAIL,
    NAME,
    PAYEE_EMAIL_FIELD,
    PAYER_TYPE_FIELD,
    PHONE,
    ticket_field_key,
)
from django_conference_checkout.checkout.services.tickets import list_ticket_blocks

logger = logging.getLogger(__name__)


def is_blank(value: object) -> bool:
    """Return whether a submitted value is missing or whitespace only."""
    return value is None or not str(value).strip()


def is_valid_email(value: object) -> bool:
    """Return whether *value* is a syntactically valid email address."""
    if is_blank(value):
        return False
    try:
        validate_email(str(value).strip())
    except ValidationError:
        return False
    return True


def validate_checkout(submitted: Mapping[str, str], cart: object | None) -> list[str]:
    """Check the submitted checkout data and collect every problem found.

    Validation never stops at the first problem. The ticket blocks are
    recomputed from *cart*, which must be the cart the form was built from.

    Args:
        submitted: Field name to raw submitted value.
        cart: The current cart.

    Returns:
        Human readable error messages; empty when the submission is accepted.
    """
    errors = []
    if is_blank(submitted.get(PAYER_TYPE_FIELD)):
        errors.append("Please choose who you are paying for.")
    if not is_valid_email(submitted.get(PAYEE_EMAIL_FIELD)):
        errors.append("Please enter a valid Email address of payee.")

    for block in list_ticket_blocks(cart):
        if is_blank(submitted.get(ticket_field_key(block, NAME))):
            errors.append(f"Please enter the Full Name for {block.label}.")
        if not is_valid_email(submitted.get(ticket_field_key(block, EMAIL))):
            errors.append(f"Please enter a valid Email Address for {block.label}.")
        if is_blank(submitted.get(ticket_field_key(block, PHONE))):
            errors.append(f"Please enter the Phone Number for {block.label}.")

    logger.debug("Checkout validation produced %d error(s)", len(errors))
    return errors
