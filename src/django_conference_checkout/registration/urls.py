"""URL configuration for the registration app.

Mount these under a prefix in the host project::

    urlpatterns = [
        path("registration/", include("django_conference_checkout.registration.urls")),
    ]
"""

from django.urls import path

from django_conference_checkout.registration.views import (
    CartView,
    CheckoutTotalsView,
    CheckoutView,
    OrderConfirmationView,
)

app_name = "registration"

urlpatterns = [
    path("cart/", CartView.as_view(), name="cart"),
    path("checkout/", CheckoutView.as_view(), name="checkout"),
    path("checkout/totals/", CheckoutTotalsView.as_view(), name="checkout-totals"),
    path("orders/<str:reference>/confirmation/", OrderConfirmationView.as_view(), name="order-confirmation"),
]
