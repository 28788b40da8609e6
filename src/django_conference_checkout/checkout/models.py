"""Persisted checkout options for django-conference-checkout."""

from django.db import models


class CheckoutOptions(models.Model):
    """Saved overrides for the checkout options.

    Every column is nullable: ``None`` means "not saved", in which case the
    default from ``DJANGO_CONFERENCE_CHECKOUT["defaults"]`` applies. Only the
    first row is read, so the admin treats this model as a singleton.
    """

    fee_enabled = models.BooleanField(
        null=True,
        blank=True,
        help_text="Add the per-ticket surcharge at checkout.",
    )
    fee_title = models.CharField(max_length=200, null=True, blank=True)
    fee_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Surcharge added for every ticket in the cart.",
    )
    fee_taxable = models.BooleanField(null=True, blank=True)
    fee_tax_class = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        help_text="Leave empty for the standard rules (none if not taxable).",
    )
    fee_only_cod = models.BooleanField(
        null=True,
        blank=True,
        help_text="Only apply the surcharge when paying on the door.",
    )
    newsletter_label = models.CharField(max_length=500, null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "checkout options"
        verbose_name_plural = "checkout options"

    def __str__(self) -> str:
        return "Checkout options"
