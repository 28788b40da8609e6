"""Template tags and filters for the registration app."""

from decimal import Decimal

from django import template
from django.templatetags.static import static
from django.utils.html import format_html, format_html_join

from django_conference_checkout.settings import get_config

register = template.Library()

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "CAD": "CA$",
    "AUD": "A$",
}


@register.filter
def format_currency(amount: Decimal | None, currency: str = "") -> str:
    """Format a decimal amount as a human-readable currency string.

    Handles ``None`` gracefully by treating it as zero. Without an explicit
    currency the configured ``DJANGO_CONFERENCE_CHECKOUT["currency"]`` is used.

    Usage in templates::

        {% load registration_tags %}
        {{ amount|format_currency }}
        {{ amount|format_currency:"EUR" }}

    Args:
        amount: The monetary amount, or ``None``.
        currency: An ISO 4217 currency code.

    Returns:
        A formatted string such as ``"£10.00"`` or ``"CHF 10.00"``.
    """
    if amount is None:
        amount = Decimal("0.00")

    currency_upper = (currency or get_config().currency).upper()
    symbol = CURRENCY_SYMBOLS.get(currency_upper, f"{currency_upper} ")
    return f"{symbol}{Decimal(amount):.2f}"


@register.simple_tag
def checkout_assets(assets: list) -> str:
    """Render stylesheet and script tags for the enqueued checkout assets.

    Each asset is versioned with a ``?ver=`` query string so browsers pick
    up new releases.

    Usage in templates::

        {% load registration_tags %}
        {% checkout_assets assets %}
    """
    styles = [(asset.handle, f"{static(asset.path)}?ver={asset.version}") for asset in assets if asset.kind == "css"]
    scripts = [(asset.handle, f"{static(asset.path)}?ver={asset.version}") for asset in assets if asset.kind == "js"]
    return format_html(
        "{}{}",
        format_html_join("\n", '<link rel="stylesheet" id="{}-css" href="{}">', styles),
        format_html_join("\n", '<script id="{}-js" src="{}" defer></script>', scripts),
    )
