"""Ticket, cart, order, fee, and order metadata models for django-conference-checkout."""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models


def _new_item_key() -> str:
    return uuid.uuid4().hex


class TicketType(models.Model):
    """A purchasable conference ticket.

    Ticket types are the products of the storefront. Each unit of a ticket type
    in a cart becomes one attendee registration block at checkout, labelled
    with the ticket ``name`` and, when set, its ``sku``.
    """

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200, unique=True)
    sku = models.CharField(max_length=100, blank=True, default="")
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(max_digits=10, decimal_places=2)
    is_active = models.BooleanField(default=True)
    order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["order", "name"]

    def __str__(self) -> str:
        return f"{self.name} [{self.sku}]" if self.sku else self.name

    def get_name(self) -> str:
        """Return the display name used on checkout labels."""
        return self.name

    def get_sku(self) -> str:
        """Return the stock keeping unit, or an empty string."""
        return self.sku


class Cart(models.Model):
    """A visitor's shopping cart, tied to their session.

    Carts hold ticket selections, the chosen payment method and any fee lines
    computed for the current checkout. They transition from ``OPEN`` to
    ``CHECKED_OUT`` when an order is placed.
    """

    class Status(models.TextChoices):
        """Lifecycle states for a shopping cart."""

        OPEN = "open", "Open"
        CHECKED_OUT = "checked_out", "Checked Out"
        ABANDONED = "abandoned", "Abandoned"

    class PaymentMethod(models.TextChoices):
        """Payment methods a visitor can choose at checkout."""

        CARD = "card", "Credit / Debit Card"
        BANK_TRANSFER = "bacs", "Direct Bank Transfer"
        COD = "cod", "Pay on the Door"

    session_key = models.CharField(max_length=40, db_index=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="checkout_carts",
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.OPEN,
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        blank=True,
        default="",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Cart {self.pk} ({self.status})"

    def line_items(self) -> list["CartItem"]:
        """Return the cart's items in the order they were added."""
        return list(self.items.select_related("ticket_type").order_by("created_at", "pk"))

    def add_fee(
        self,
        name: str,
        amount: Decimal,
        *,
        taxable: bool = False,
        tax_class: str = "",
    ) -> "CartFee":
        """Attach a fee line to the cart."""
        return self.fees.create(name=name, amount=amount, taxable=taxable, tax_class=tax_class)

    def clear_fees(self) -> None:
        """Remove every fee line so totals can be recalculated from scratch."""
        self.fees.all().delete()


class CartItem(models.Model):
    """A ticket line in a cart.

    The ``key`` is a stable opaque identifier for the line. Registration
    field names at checkout are derived from it, so it must not change while
    the line exists.
    """

    cart = models.ForeignKey(
        Cart,
        on_delete=models.CASCADE,
        related_name="items",
    )
    key = models.CharField(max_length=32, default=_new_item_key, editable=False)
    ticket_type = models.ForeignKey(
        TicketType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cart_items",
    )
    quantity = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["cart", "key"], name="registration_cartitem_unique_key"),
        ]

    def __str__(self) -> str:
        return f"{self.quantity}x {self.ticket_type}"

    @property
    def product(self) -> TicketType | None:
        """The purchased ticket type, if it still exists."""
        return self.ticket_type

    @property
    def unit_price(self) -> Decimal:
        """Return the per-unit price of this cart item."""
        if self.ticket_type is not None:
            return self.ticket_type.price
        return Decimal("0.00")

    @property
    def line_total(self) -> Decimal:
        """Return the total price for this line (unit_price * quantity)."""
        return self.unit_price * self.quantity


class CartFee(models.Model):
    """A fee line added to a cart during total calculation."""

    cart = models.ForeignKey(
        Cart,
        on_delete=models.CASCADE,
        related_name="fees",
    )
    name = models.CharField(max_length=200)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    taxable = models.BooleanField(default=False)
    tax_class = models.CharField(max_length=100, blank=True, default="")

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.name}: {self.amount}"


class Order(models.Model):
    """A placed checkout with billing details and registration metadata.

    Orders capture a snapshot of the cart's pricing and fees at the time of
    purchase. Per-ticket registration details live in ``OrderMeta`` rows and
    are read and written through :meth:`update_meta_data` and
    :meth:`get_meta`.
    """

    class Status(models.TextChoices):
        """Lifecycle states for an order."""

        PENDING = "pending", "Pending Payment"
        PROCESSING = "processing", "Processing"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="checkout_orders",
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    payment_method = models.CharField(
        max_length=20,
        choices=Cart.PaymentMethod.choices,
        blank=True,
        default="",
    )
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    fee_total = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    billing_first_name = models.CharField(max_length=200, blank=True, default="")
    billing_last_name = models.CharField(max_length=200, blank=True, default="")
    billing_country = models.CharField(max_length=100, blank=True, default="")
    billing_address_1 = models.CharField(max_length=300, blank=True, default="")
    billing_email = models.EmailField(blank=True, default="")
    reference = models.CharField(
        max_length=100,
        unique=True,
        help_text='Unique order reference, e.g. "ORD-A1B2C3D4".',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.reference} ({self.status})"

    @property
    def billing_name(self) -> str:
        """First and last name joined for display."""
        return f"{self.billing_first_name} {self.billing_last_name}".strip()

    def update_meta_data(self, key: str, value: str) -> "OrderMeta":
        """Set the metadata *key* to *value*, replacing any existing value."""
        meta, _ = OrderMeta.objects.update_or_create(order=self, key=key, defaults={"value": value})
        return meta

    def get_meta(self, key: str, default: str = "") -> str:
        """Return the metadata value stored under *key*, or *default*."""
        meta = self.meta.filter(key=key).first()
        return meta.value if meta is not None else default


class OrderLineItem(models.Model):
    """A snapshot of a purchased ticket line at checkout time."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="line_items",
    )
    description = models.CharField(max_length=400)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    line_total = models.DecimalField(max_digits=10, decimal_places=2)
    ticket_type = models.ForeignKey(
        TicketType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_line_items",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.quantity}x {self.description}"


class OrderFee(models.Model):
    """A snapshot of a cart fee line at checkout time."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="fees",
    )
    name = models.CharField(max_length=200)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    taxable = models.BooleanField(default=False)
    tax_class = models.CharField(max_length=100, blank=True, default="")

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.name}: {self.amount}"


class OrderMeta(models.Model):
    """A free-form key/value pair attached to an order."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="meta",
    )
    # Ticket keys embed the full ticket name and SKU.
    key = models.CharField(max_length=500)
    value = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["order", "key"], name="registration_ordermeta_unique_key"),
        ]

    def __str__(self) -> str:
        return f"{self.key} = {self.value}"
