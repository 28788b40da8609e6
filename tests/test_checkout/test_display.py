"""Tests for asset, heading, admin and email output."""

import pytest
from django.test import override_settings

from django_conference_checkout.checkout.services.display import (
    admin_meta_box,
    checkout_assets,
    conference_meta,
    email_meta_fields,
    heading_contact,
    heading_tickets,
    is_conference_meta_key,
)
from django_conference_checkout.registration.models import Order


@pytest.fixture
def order(db):
    order = Order.objects.create(reference="ORD-DISP0001")
    order.update_meta_data("_internal_flag", "x")
    order.update_meta_data("Contact: Payer Type", "self")
    order.update_meta_data("Ticket 1 — Early Bird (1 of 1): Delegate Name", "Ada <Lovelace>")
    order.update_meta_data("Contact: Newsletter Consent", "No")
    return order


class TestAssets:
    def test_only_on_checkout(self):
        assert checkout_assets(on_checkout=False) == []

    def test_stylesheet_and_script(self):
        css, js = checkout_assets(on_checkout=True)

        assert (css.kind, css.handle, css.path, css.version) == (
            "css",
            "wccc-checkout",
            "django_conference_checkout/css/checkout.css",
            "1.0.0",
        )
        assert js.kind == "js"
        assert js.path == "django_conference_checkout/js/checkout.js"
        assert js.dependencies == ("checkout",)

    def test_version_from_settings(self):
        with override_settings(DJANGO_CONFERENCE_CHECKOUT={"assets": {"version": "2.0.0"}}):
            assets = checkout_assets(on_checkout=True)

        assert {asset.version for asset in assets} == {"2.0.0"}


def test_headings():
    assert heading_contact() == '<div class="wccc-section wccc-section--contact"><h3>Contact Information</h3></div>'
    assert heading_tickets() == '<div class="wccc-section wccc-section--tickets"><h3>Ticket Information</h3></div>'


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("Contact: Payee Email", True),
        ("Ticket 3 — Student (1 of 1): Waitlisted", True),
        ("Ticket 3 — Student (1 of 1): Delegate Phone", True),
        ("_internal_flag", False),
        ("Delegate Name", False),
    ],
)
def test_is_conference_meta_key(key, expected):
    assert is_conference_meta_key(key) is expected


@pytest.mark.django_db
class TestOrderOutput:
    def test_conference_meta_in_write_order(self, order):
        assert conference_meta(order) == [
            ("Contact: Payer Type", "self"),
            ("Ticket 1 — Early Bird (1 of 1): Delegate Name", "Ada <Lovelace>"),
            ("Contact: Newsletter Consent", "No"),
        ]

    def test_admin_meta_box(self, order):
        html = admin_meta_box(order)

        assert html.startswith('<div class="wccc-admin-meta"><h3>Conference Details</h3>')
        assert "<p><strong>Contact: Payer Type:</strong> self</p>" in html
        assert "Ada &lt;Lovelace&gt;" in html
        assert "_internal_flag" not in html

    def test_admin_meta_box_empty(self, db):
        assert admin_meta_box(Order.objects.create(reference="ORD-EMPTY001")) == ""

    def test_email_meta_fields(self, order):
        existing = {"coupon": {"label": "Coupon", "value": "SPRING"}}

        result = email_meta_fields(existing, False, order)

        assert result is not existing
        assert list(result) == [
            "coupon",
            "Contact: Payer Type",
            "Ticket 1 — Early Bird (1 of 1): Delegate Name",
            "Contact: Newsletter Consent",
        ]
        assert result["Contact: Payer Type"] == {"label": "Contact: Payer Type", "value": "self"}
        assert existing == {"coupon": {"label": "Coupon", "value": "SPRING"}}
