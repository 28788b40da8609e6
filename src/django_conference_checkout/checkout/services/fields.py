"""Checkout field schema: the standard billing form cut down and extended.

Contact fields take priorities 10 to 60, ticket blocks follow from 70 with one
slot per field, and the newsletter opt-in is pinned last at 9999.
"""

from django_conference_checkout.checkout.services.options import Options
from django_conference_checkout.checkout.services.tickets import TicketBlock, list_ticket_blocks
from django_conference_checkout.registration.forms import BILLING, FieldDefinition, FieldSchema

KEPT_BILLING_FIELDS = ("billing_first_name", "billing_last_name", "billing_country", "billing_address_1")

PAYER_TYPE_FIELD = "contact_payer_type"
PAYEE_EMAIL_FIELD = "contact_payee_email"
NEWSLETTER_FIELD = "newsletter_optin"

PAYER_TYPE_CHOICES = {
    "": "— Please choose —",
    "self": "I am paying for myself in order to attend or present at the conference",
    "behalf": "I am paying on behalf of someone else attending / presenting at the conference",
    "multiple": "I am paying for multiple people to attend or present at the conference",
}

TICKET_FIELDS_START = 70
NEWSLETTER_PRIORITY = 9999

# Per-block field suffixes, in rendering order.
HEADING = "heading"
NAME = "name"
EMAIL = "email"
PHONE = "phone"
PRESENTING = "presenting"
WAITLISTED = "waitlisted"
TICKET_DATA_FIELDS = (NAME, EMAIL, PHONE, PRESENTING, WAITLISTED)


def ticket_field_key(block: TicketBlock, suffix: str) -> str:
    """Return the form field name for *suffix* within *block*."""
    return f"{block.key}_{suffix}"


def _contact_fields() -> dict[str, FieldDefinition]:
    return {
        "billing_first_name": FieldDefinition(
            label="First name",
            required=True,
            css_class=["form-row-first"],
            priority=10,
        ),
        "billing_last_name": FieldDefinition(
            label="Last name",
            required=True,
            css_class=["form-row-last"],
            priority=20,
        ),
        "billing_country": FieldDefinition(
            label="Country / Region",
            type="country",
            required=True,
            css_class=["form-row-wide"],
            priority=30,
        ),
        PAYER_TYPE_FIELD: FieldDefinition(
            label="Who are you paying for?",
            type="select",
            required=True,
            options=dict(PAYER_TYPE_CHOICES),
            css_class=["form-row-wide"],
            priority=40,
        ),
        PAYEE_EMAIL_FIELD: FieldDefinition(
            label="Email address of payee",
            type="email",
            required=True,
            css_class=["form-row-wide"],
            priority=50,
            validate=["email"],
            placeholder="payee@example.com",
        ),
        "billing_address_1": FieldDefinition(
            label="Street address",
            required=True,
            css_class=["form-row-wide"],
            priority=60,
            placeholder="House number and street name",
        ),
    }


def ticket_fields(block: TicketBlock, priority: int) -> dict[str, FieldDefinition]:
    """Build the heading and data fields of one ticket block.

    Args:
        block: The ticket block to build fields for.
        priority: The priority of the first field; each following field takes
            the next integer.

    Returns:
        Six fields keyed by ``{block.key}_{suffix}``.
    """
    definitions = {
        HEADING: FieldDefinition(
            label=block.label,
            css_class=["form-row-wide", "wccc-ticket-heading"],
            custom_attributes={"readonly": "readonly", "tabindex": "-1", "aria-hidden": "true"},
            default=block.label,
        ),
        NAME: FieldDefinition(
            label="Full Name of Delegate / Attendee",
            required=True,
            css_class=["form-row-first"],
        ),
        EMAIL: FieldDefinition(
            label="Email Address",
            type="email",
            required=True,
            css_class=["form-row-last"],
            validate=["email"],
        ),
        PHONE: FieldDefinition(
            label="Phone Number",
            type="tel",
            required=True,
            css_class=["form-row-wide"],
        ),
        PRESENTING: FieldDefinition(
            label="I am presenting at the conference",
            type="checkbox",
            css_class=["form-row-wide"],
        ),
        WAITLISTED: FieldDefinition(
            label="I have a paper that is currently waitlisted",
            type="checkbox",
            css_class=["form-row-wide"],
        ),
    }
    result = {}
    for offset, (suffix, definition) in enumerate(definitions.items()):
        definition.priority = priority + offset
        result[ticket_field_key(block, suffix)] = definition
    return result


def build_checkout_fields(fields: FieldSchema, options: Options, cart: object | None) -> FieldSchema:
    """Replace the billing form with the contact and per-ticket registration form.

    Only first name, last name, country and street address survive from the
    incoming billing group; every other billing field is dropped. Groups other
    than billing pass through unchanged.

    Args:
        fields: The incoming field schema.
        options: Resolved checkout options (for the newsletter label).
        cart: The current cart; one field group is added per ticket.

    Returns:
        A new schema. *fields* is not modified.
    """
    schema = {group: dict(group_fields) for group, group_fields in fields.items()}
    billing = {key: value for key, value in schema.get(BILLING, {}).items() if key in KEPT_BILLING_FIELDS}
    billing.update(_contact_fields())

    priority = TICKET_FIELDS_START
    for block in list_ticket_blocks(cart):
        block_fields = ticket_fields(block, priority)
        billing.update(block_fields)
        priority += len(block_fields)

    billing[NEWSLETTER_FIELD] = FieldDefinition(
        label=options.newsletter_label,
        type="checkbox",
        css_class=["form-row-wide", "wccc-newsletter-optin"],
        priority=NEWSLETTER_PRIORITY,
    )

    schema[BILLING] = billing
    return schema
