"""Typed configuration for django-conference-checkout.

Reads a single ``DJANGO_CONFERENCE_CHECKOUT`` dict from Django settings and
exposes it as composed, frozen dataclasses with sensible defaults.

Usage::

    from django_conference_checkout.settings import get_config

    config = get_config()
    config.defaults.fee_amount
    config.cod_payment_method
    config.assets.version
"""

import functools
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.test.signals import setting_changed


@dataclass(frozen=True, slots=True)
class OptionDefaults:
    """Default checkout options used when nothing has been saved in the admin."""

    fee_enabled: bool = True
    fee_title: str = "Pay on the Door Surcharge"
    fee_amount: Decimal = Decimal("10")
    fee_taxable: bool = False
    fee_tax_class: str = ""
    fee_only_cod: bool = True
    newsletter_label: str = "I agree to be added to the newsletter and receive conference updates (optional)"


@dataclass(frozen=True, slots=True)
class AssetsConfig:
    """Static assets loaded on the checkout page."""

    stylesheet: str = "django_conference_checkout/css/checkout.css"
    script: str = "django_conference_checkout/js/checkout.js"
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class CheckoutConfig:
    """Top-level django-conference-checkout configuration."""

    defaults: OptionDefaults = field(default_factory=OptionDefaults)
    assets: AssetsConfig = field(default_factory=AssetsConfig)
    cod_payment_method: str = "cod"
    order_reference_prefix: str = "ORD"
    currency: str = "GBP"
    send_order_emails: bool = True


@functools.lru_cache(maxsize=1)
def get_config() -> CheckoutConfig:
    """Build and return the checkout configuration.

    Reads ``settings.DJANGO_CONFERENCE_CHECKOUT`` (a plain dict) and returns a
    frozen :class:`CheckoutConfig`.  The result is cached; the cache is
    cleared automatically when Django's ``setting_changed`` signal fires
    (e.g. inside ``override_settings``).
    """
    raw = getattr(settings, "DJANGO_CONFERENCE_CHECKOUT", {})
    if not isinstance(raw, Mapping):
        msg = "DJANGO_CONFERENCE_CHECKOUT must be a mapping (dict-like object)"
        raise TypeError(msg)
    raw_data = dict(raw)

    defaults_data = raw_data.pop("defaults", {})
    assets_data = raw_data.pop("assets", {})
    if not isinstance(defaults_data, Mapping):
        msg = "DJANGO_CONFERENCE_CHECKOUT['defaults'] must be a mapping (dict-like object)"
        raise TypeError(msg)
    if not isinstance(assets_data, Mapping):
        msg = "DJANGO_CONFERENCE_CHECKOUT['assets'] must be a mapping (dict-like object)"
        raise TypeError(msg)

    defaults_data = dict(defaults_data)
    if "fee_amount" in defaults_data:
        defaults_data["fee_amount"] = _to_decimal(defaults_data["fee_amount"])

    config = CheckoutConfig(
        defaults=OptionDefaults(**defaults_data),
        assets=AssetsConfig(**dict(assets_data)),
        **raw_data,
    )
    _validate_checkout_config(config)
    return config


def _to_decimal(value: object) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation:
        msg = "DJANGO_CONFERENCE_CHECKOUT['defaults']['fee_amount'] must be a number"
        raise ValueError(msg) from None


def _validate_checkout_config(config: CheckoutConfig) -> None:
    """Validate high-impact configuration values with clear error messages."""
    if config.defaults.fee_amount < 0:
        msg = "DJANGO_CONFERENCE_CHECKOUT['defaults']['fee_amount'] must not be negative"
        raise ValueError(msg)
    for name in ("fee_enabled", "fee_taxable", "fee_only_cod"):
        if not isinstance(getattr(config.defaults, name), bool):
            msg = f"DJANGO_CONFERENCE_CHECKOUT['defaults']['{name}'] must be a boolean"
            raise TypeError(msg)
    if not isinstance(config.cod_payment_method, str) or not config.cod_payment_method.strip():
        msg = "DJANGO_CONFERENCE_CHECKOUT['cod_payment_method'] must be a non-empty string"
        raise ValueError(msg)
    if not isinstance(config.order_reference_prefix, str) or not config.order_reference_prefix.strip():
        msg = "DJANGO_CONFERENCE_CHECKOUT['order_reference_prefix'] must be a non-empty string"
        raise ValueError(msg)
    if not isinstance(config.currency, str) or not config.currency.strip():
        msg = "DJANGO_CONFERENCE_CHECKOUT['currency'] must be a non-empty string"
        raise ValueError(msg)


def _clear_config_cache(*, setting: str, **kwargs: object) -> None:  # noqa: ARG001
    """Clear the cached config when Django settings change during tests."""
    if setting == "DJANGO_CONFERENCE_CHECKOUT":
        get_config.cache_clear()


setting_changed.connect(
    _clear_config_cache,
    dispatch_uid="django_conference_checkout.settings.clear_config_cache",
)
