"""Django admin configuration for the registration app."""

from django.contrib import admin
from django.http import HttpRequest
from django.utils.safestring import mark_safe

from django_conference_checkout.hooks import CheckoutEvent, hooks
from django_conference_checkout.registration.models import (
    Cart,
    CartFee,
    CartItem,
    Order,
    OrderFee,
    OrderLineItem,
    OrderMeta,
    TicketType,
)


@admin.register(TicketType)
class TicketTypeAdmin(admin.ModelAdmin):
    """Admin interface for managing ticket types.

    Provides filtering by active status, search by name, slug and SKU, and
    auto-population of the slug from the ticket name.
    """

    list_display = ("name", "sku", "price", "is_active", "order")
    list_filter = ("is_active",)
    search_fields = ("name", "slug", "sku")
    prepopulated_fields = {"slug": ("name",)}


class CartItemInline(admin.TabularInline):
    """Inline display of cart items within the cart admin.

    Items are shown as read-only since they are managed through the
    storefront, not directly in the admin.
    """

    model = CartItem
    extra = 0
    readonly_fields = ("key", "ticket_type", "quantity")


class CartFeeInline(admin.TabularInline):
    """Fee lines recalculated on every totals pass."""

    model = CartFee
    extra = 0
    readonly_fields = ("name", "amount", "taxable", "tax_class")


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    """Admin interface for viewing carts.

    Carts are primarily managed by the storefront; the admin provides a
    read-oriented view with inline items and fee lines.
    """

    list_display = ("session_key", "user", "status", "payment_method", "updated_at")
    list_filter = ("status", "payment_method")
    inlines = (CartItemInline, CartFeeInline)


class OrderLineItemInline(admin.TabularInline):
    """Inline display of order line items within the order admin.

    Line items are immutable snapshots from checkout and are shown read-only.
    """

    model = OrderLineItem
    extra = 0
    readonly_fields = ("description", "quantity", "unit_price", "line_total", "ticket_type")


class OrderFeeInline(admin.TabularInline):
    model = OrderFee
    extra = 0
    readonly_fields = ("name", "amount", "taxable", "tax_class")


class OrderMetaInline(admin.TabularInline):
    """Raw key/value metadata written during checkout."""

    model = OrderMeta
    extra = 0
    readonly_fields = ("key", "value")

    def has_add_permission(self, request: HttpRequest, obj: Order | None = None) -> bool:  # noqa: ARG002, D102
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin interface for managing orders.

    Money fields are read-only. The ``conference_details`` panel shows the
    markup contributed by ``ADMIN_ORDER_DATA`` handlers.
    """

    list_display = ("reference", "billing_name", "status", "payment_method", "total", "created_at")
    list_filter = ("status", "payment_method")
    search_fields = ("reference", "billing_email", "billing_last_name")
    readonly_fields = ("subtotal", "fee_total", "total", "conference_details")
    inlines = (OrderLineItemInline, OrderFeeInline, OrderMetaInline)

    @admin.display(description="Conference details")
    def conference_details(self, obj: Order) -> str:
        """Render the order data panels registered by customization apps."""
        if obj.pk is None:
            return "-"
        panels = [markup for markup in hooks.do_action(CheckoutEvent.ADMIN_ORDER_DATA, obj) if markup]
        return mark_safe("".join(panels)) if panels else "-"  # noqa: S308
