"""Checkout options: configured defaults merged with the saved admin record.

Options are loaded once per request with :func:`get_options` and passed
explicitly to every component that needs them.
"""

from dataclasses import dataclass, fields, replace
from decimal import Decimal

from django_conference_checkout.checkout.models import CheckoutOptions
from django_conference_checkout.settings import get_config


@dataclass(frozen=True, slots=True)
class Options:
    """Resolved checkout options for a single request."""

    fee_enabled: bool
    fee_title: str
    fee_amount: Decimal
    fee_taxable: bool
    fee_tax_class: str
    fee_only_cod: bool
    newsletter_label: str


def default_options() -> Options:
    """Return the options built from ``DJANGO_CONFERENCE_CHECKOUT["defaults"]`` alone."""
    defaults = get_config().defaults
    return Options(**{f.name: getattr(defaults, f.name) for f in fields(Options)})


def merge_options(base: Options, saved: CheckoutOptions | None) -> Options:
    """Overlay every non-``None`` value of *saved* onto *base*.

    Args:
        base: The defaults to start from.
        saved: The persisted options record, or ``None`` when nothing has been
            saved yet.

    Returns:
        A new :class:`Options` instance.
    """
    if saved is None:
        return base
    overrides = {}
    for f in fields(Options):
        value = getattr(saved, f.name)
        if value is not None:
            overrides[f.name] = value
    if "fee_amount" in overrides:
        overrides["fee_amount"] = Decimal(str(overrides["fee_amount"]))
    return replace(base, **overrides)


def get_options() -> Options:
    """Load the checkout options for the current request.

    Returns:
        The configured defaults with the first saved ``CheckoutOptions`` row
        merged over them.
    """
    return merge_options(default_options(), CheckoutOptions.objects.order_by("pk").first())
