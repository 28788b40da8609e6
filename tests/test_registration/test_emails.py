"""Tests for order confirmation emails."""

from decimal import Decimal

import pytest
from django.core import mail

from django_conference_checkout.registration.emails import order_meta_fields, send_order_confirmation
from django_conference_checkout.registration.models import Order, OrderFee, OrderLineItem


@pytest.fixture
def order(db):
    order = Order.objects.create(
        reference="ORD-MAIL0001",
        billing_first_name="Jane",
        billing_last_name="Doe",
        billing_email="jane@example.com",
        payment_method="cod",
        subtotal=Decimal("100.00"),
        fee_total=Decimal("10.00"),
        total=Decimal("110.00"),
    )
    OrderLineItem.objects.create(
        order=order,
        description="Student",
        quantity=1,
        unit_price=Decimal("100.00"),
        line_total=Decimal("100.00"),
    )
    OrderFee.objects.create(order=order, name="Pay on the Door Surcharge", amount=Decimal("10.00"))
    order.update_meta_data("Contact: Payer Type", "self")
    order.update_meta_data("Ticket 1 — Student (1 of 1): Delegate Name", "Ada Lovelace")
    return order


@pytest.mark.django_db
class TestOrderMetaFields:
    def test_registration_meta_listed(self, order):
        fields = order_meta_fields(order, sent_to_admin=False)

        assert fields["Contact: Payer Type"] == {"label": "Contact: Payer Type", "value": "self"}
        assert fields["Ticket 1 — Student (1 of 1): Delegate Name"]["value"] == "Ada Lovelace"


@pytest.mark.django_db
class TestSendOrderConfirmation:
    def test_customer_and_managers(self, order):
        assert send_order_confirmation(order) == 1

        assert len(mail.outbox) == 2
        admin_message, customer_message = mail.outbox
        assert admin_message.to == ["registrations@example.com"]
        assert "New order ORD-MAIL0001" in admin_message.subject
        assert customer_message.to == ["jane@example.com"]
        assert customer_message.subject == "Your order ORD-MAIL0001"
        assert "Delegate Name: Ada Lovelace" in customer_message.body
        assert "Pay on the Door Surcharge: £10.00" in customer_message.body
        assert "Total: £110.00" in customer_message.body
        assert "Ada Lovelace" in customer_message.alternatives[0][0]

    def test_without_billing_email(self, order):
        order.billing_email = ""
        order.save()

        assert send_order_confirmation(order) == 0
        assert len(mail.outbox) == 1
