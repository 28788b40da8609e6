"""Django admin configuration for the checkout options."""

from django.contrib import admin
from django.http import HttpRequest

from django_conference_checkout.checkout.models import CheckoutOptions


@admin.register(CheckoutOptions)
class CheckoutOptionsAdmin(admin.ModelAdmin):
    """Settings page for the checkout options.

    Only the first row is ever read, so adding is disabled once it exists.
    Empty fields fall back to the configured defaults.
    """

    list_display = ("__str__", "fee_enabled", "fee_amount", "fee_only_cod", "updated_at")
    fieldsets = (
        (
            "Per-ticket surcharge",
            {"fields": ("fee_enabled", "fee_title", "fee_amount", "fee_taxable", "fee_tax_class", "fee_only_cod")},
        ),
        ("Newsletter", {"fields": ("newsletter_label",)}),
    )

    def has_add_permission(self, request: HttpRequest) -> bool:  # noqa: ARG002, D102
        return not CheckoutOptions.objects.exists()
