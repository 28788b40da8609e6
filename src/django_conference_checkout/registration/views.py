"""Views for the registration app.

Provides the session cart, the checkout page, a totals endpoint for payment
method changes, and the order confirmation page. Every customization of the
checkout reaches these views through :mod:`django_conference_checkout.hooks`.
"""

import logging

from django.contrib import messages
from django.core.exceptions import ValidationError
from django.db.models import QuerySet
from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.utils.safestring import mark_safe
from django.views import View
from django.views.generic import DetailView

from django_conference_checkout.hooks import CheckoutContext, CheckoutEvent, hooks
from django_conference_checkout.registration.forms import CartItemForm, PaymentMethodForm, build_form_class
from django_conference_checkout.registration.models import Cart, Order, TicketType
from django_conference_checkout.registration.services.cart import CartService, CartSummary
from django_conference_checkout.registration.services.checkout import CheckoutService
from django_conference_checkout.settings import get_config

logger = logging.getLogger(__name__)

ORDER_REFERENCES_SESSION_KEY = "checkout_order_references"


def _summary_payload(summary: CartSummary) -> dict[str, object]:
    return {
        "fees": [{"name": fee.name, "amount": str(fee.amount)} for fee in summary.fees],
        "subtotal": str(summary.subtotal),
        "fee_total": str(summary.fee_total),
        "total": str(summary.total),
        "currency": get_config().currency,
    }


class CartView(View):
    """Session cart view for adding and removing tickets.

    Handles multiple POST actions distinguished by a hidden ``action``
    field: ``add_item``, ``remove_item`` and ``update_quantity``.
    """

    template_name = "django_conference_checkout/registration/cart.html"

    def _build_context(self, cart: Cart) -> dict[str, object]:
        return {
            "cart": cart,
            "summary": CartService.calculate_totals(cart),
            "available_tickets": TicketType.objects.filter(is_active=True),
            "item_form": CartItemForm(),
            "currency": get_config().currency,
        }

    def get(self, request: HttpRequest) -> HttpResponse:
        """Render the cart page with current items and totals."""
        cart = CartService.get_or_create_cart(request)
        return render(request, self.template_name, self._build_context(cart))

    def post(self, request: HttpRequest) -> HttpResponse:
        """Handle cart actions dispatched by the ``action`` hidden field.

        Returns:
            A redirect back to the cart page.
        """
        cart = CartService.get_or_create_cart(request)
        handlers = {
            "add_item": self._handle_add_item,
            "remove_item": self._handle_remove_item,
            "update_quantity": self._handle_update_quantity,
        }
        handler = handlers.get(request.POST.get("action", ""))
        if handler is None:
            messages.error(request, "Unknown cart action.")
        else:
            try:
                handler(request, cart)
            except ValidationError as exc:
                for message in exc.messages:
                    messages.error(request, message)
        return redirect(reverse("registration:cart"))

    def _handle_add_item(self, request: HttpRequest, cart: Cart) -> None:
        form = CartItemForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Invalid item data.")
            return
        ticket_type = get_object_or_404(TicketType, pk=form.cleaned_data["ticket_type_id"], is_active=True)
        CartService.add_ticket(cart, ticket_type, form.cleaned_data["quantity"])
        messages.success(request, f"Added {ticket_type.name} to your cart.")

    def _handle_remove_item(self, request: HttpRequest, cart: Cart) -> None:
        CartService.remove_item(cart, request.POST.get("item_key", ""))
        messages.success(request, "Item removed from your cart.")

    def _handle_update_quantity(self, request: HttpRequest, cart: Cart) -> None:
        try:
            quantity = int(request.POST.get("quantity", ""))
        except ValueError:
            messages.error(request, "Quantity must be a number.")
            return
        CartService.update_quantity(cart, request.POST.get("item_key", ""), quantity)
        messages.success(request, "Cart updated.")


class CheckoutView(View):
    """Checkout view for turning the session cart into an order.

    The form is built from the filtered ``CHECKOUT_FIELDS`` schema. Markup
    returned by ``ENQUEUE_ASSETS`` and ``BEFORE_BILLING_FORM`` handlers is
    passed to the template. Validation notices raised by ``CHECKOUT_PROCESS``
    handlers are shown as error messages and block the order.
    """

    template_name = "django_conference_checkout/registration/checkout.html"

    def _get_open_cart(self, request: HttpRequest) -> Cart | None:
        cart = CartService.get_current_cart(request)
        if cart is None or not cart.items.exists():
            return None
        return cart

    def _render(self, request: HttpRequest, cart: Cart, context: CheckoutContext, form: object) -> HttpResponse:
        assets = [asset for result in hooks.do_action(CheckoutEvent.ENQUEUE_ASSETS, context) for asset in result]
        headings = "".join(hooks.do_action(CheckoutEvent.BEFORE_BILLING_FORM, context))
        return render(
            request,
            self.template_name,
            {
                "cart": cart,
                "form": form,
                "payment_form": PaymentMethodForm(initial={"payment_method": cart.payment_method}),
                "summary": CartService.calculate_totals(cart, context),
                "assets": assets,
                "before_billing_form": mark_safe(headings),  # noqa: S308
                "currency": get_config().currency,
            },
        )

    def get(self, request: HttpRequest) -> HttpResponse:
        """Render the checkout form with the cart summary.

        Returns:
            The rendered checkout page, or a redirect to the cart if no open
            cart with items exists.
        """
        cart = self._get_open_cart(request)
        if cart is None:
            messages.error(request, "Your cart is empty.")
            return redirect(reverse("registration:cart"))

        context = CheckoutContext(cart=cart, on_checkout=True)
        form_class = build_form_class(CheckoutService.checkout_fields(context))
        return self._render(request, cart, context, form_class())

    def post(self, request: HttpRequest) -> HttpResponse:
        """Validate the submission and place the order.

        Returns:
            A redirect to the order confirmation page on success, or the
            checkout page with error messages.
        """
        cart = self._get_open_cart(request)
        if cart is None:
            messages.error(request, "Your cart is empty.")
            return redirect(reverse("registration:cart"))

        context = CheckoutContext(cart=cart, submitted=request.POST, on_checkout=True)
        form = build_form_class(CheckoutService.checkout_fields(context))(request.POST)

        payment_method = request.POST.get("payment_method")
        if payment_method:
            try:
                CartService.set_payment_method(cart, payment_method)
            except ValidationError as exc:
                messages.error(request, exc.messages[0])
                return self._render(request, cart, context, form)

        notices = CheckoutService.validate(context)
        if notices or not form.is_valid():
            for notice in notices:
                messages.error(request, notice)
            return self._render(request, cart, context, form)

        try:
            order = CheckoutService.place_order(cart, context)
        except ValidationError as exc:
            for message in exc.messages:
                messages.error(request, message)
            return self._render(request, cart, context, form)

        references = request.session.get(ORDER_REFERENCES_SESSION_KEY, [])
        request.session[ORDER_REFERENCES_SESSION_KEY] = [*references, order.reference]
        return redirect(reverse("registration:order-confirmation", args=[order.reference]))


class CheckoutTotalsView(View):
    """Recalculate the cart totals after the payment method changes.

    Accepts a POSTed ``payment_method`` and returns the fee lines and totals
    as JSON for the checkout page to refresh its summary.
    """

    def post(self, request: HttpRequest) -> JsonResponse:
        cart = CartService.get_current_cart(request)
        if cart is None:
            return JsonResponse({"error": "No open cart."}, status=404)

        form = PaymentMethodForm(request.POST)
        if not form.is_valid():
            return JsonResponse({"error": "Unknown payment method."}, status=400)

        CartService.set_payment_method(cart, form.cleaned_data["payment_method"])
        summary = CartService.calculate_totals(cart, CheckoutContext(cart=cart, on_checkout=True))
        return JsonResponse(_summary_payload(summary))


class OrderConfirmationView(DetailView):
    """Confirmation page shown immediately after checkout.

    Only orders placed from the current session can be viewed.
    """

    template_name = "django_conference_checkout/registration/order_confirmation.html"
    context_object_name = "order"

    def get_object(self, queryset: QuerySet[Order] | None = None) -> Order:  # noqa: ARG002
        """Look up the order by reference.

        Raises:
            Http404: If no matching order exists or it was not placed from
                this session.
        """
        reference = self.kwargs["reference"]
        if reference not in self.request.session.get(ORDER_REFERENCES_SESSION_KEY, []):
            raise Http404
        return get_object_or_404(Order, reference=reference)

    def get_context_data(self, **kwargs: object) -> dict[str, object]:
        context = super().get_context_data(**kwargs)
        context["line_items"] = self.object.line_items.all()
        context["fees"] = self.object.fees.all()
        context["currency"] = get_config().currency
        return context
