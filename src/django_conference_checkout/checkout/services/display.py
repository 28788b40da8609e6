"""Markup and data the checkout layer contributes to pages, admin and email."""

from dataclasses import dataclass, field

from django.utils.html import format_html, format_html_join

from django_conference_checkout.checkout.services.order_meta import CONTACT_META_PREFIX, TICKET_META_SUFFIXES
from django_conference_checkout.settings import get_config


@dataclass(frozen=True, slots=True)
class Asset:
    """A static file to include on a page."""

    kind: str
    handle: str
    path: str
    version: str
    dependencies: tuple[str, ...] = field(default_factory=tuple)


def checkout_assets(*, on_checkout: bool) -> list[Asset]:
    """Return the checkout stylesheet and script, only on the checkout page."""
    if not on_checkout:
        return []
    assets = get_config().assets
    return [
        Asset(kind="css", handle="wccc-checkout", path=assets.stylesheet, version=assets.version),
        Asset(
            kind="js",
            handle="wccc-checkout",
            path=assets.script,
            version=assets.version,
            dependencies=("checkout",),
        ),
    ]


def heading_contact() -> str:
    """Heading rendered above the contact fields."""
    return format_html(
        '<div class="wccc-section wccc-section--contact"><h3>{}</h3></div>',
        "Contact Information",
    )


def heading_tickets() -> str:
    """Heading rendered above the ticket fields."""
    return format_html(
        '<div class="wccc-section wccc-section--tickets"><h3>{}</h3></div>',
        "Ticket Information",
    )


def is_conference_meta_key(key: str) -> bool:
    """Return whether *key* is one written by the registration meta writer."""
    return key.startswith(CONTACT_META_PREFIX) or key.endswith(tuple(TICKET_META_SUFFIXES.values()))


def conference_meta(order: object) -> list[tuple[str, str]]:
    """Return the order's registration metadata as ``(key, value)`` pairs in write order."""
    return [(meta.key, meta.value) for meta in order.meta.order_by("pk") if is_conference_meta_key(meta.key)]


def admin_meta_box(order: object) -> str:
    """Render the "Conference Details" block shown on the order admin page.

    Returns:
        The HTML fragment, or an empty string when the order carries no
        registration metadata.
    """
    rows = conference_meta(order)
    if not rows:
        return ""
    return format_html(
        '<div class="wccc-admin-meta"><h3>{}</h3>{}</div>',
        "Conference Details",
        format_html_join("", "<p><strong>{}:</strong> {}</p>", rows),
    )


def email_meta_fields(fields: dict[str, dict[str, str]], sent_to_admin: bool, order: object) -> dict[str, dict[str, str]]:  # noqa: ARG001, FBT001
    """Add the registration metadata to the fields listed in order emails.

    Args:
        fields: The email meta fields collected so far, keyed by identifier,
            each a ``{"label": ..., "value": ...}`` mapping.
        sent_to_admin: Whether the email goes to the shop administrator.
        order: The order the email is about.

    Returns:
        A new mapping with one entry per registration meta row appended.
    """
    result = dict(fields)
    for key, value in conference_meta(order):
        result[key] = {"label": key, "value": value}
    return result
