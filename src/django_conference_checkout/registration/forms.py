"""Forms for the registration app.

The checkout form is not declared statically. The host describes it as a
:data:`FieldSchema` (see :func:`default_checkout_fields`), lets the
``CHECKOUT_FIELDS`` filter reshape it, and then turns the billing group into a
Django form class with :func:`build_form_class`.
"""

from dataclasses import dataclass, field

from django import forms

from django_conference_checkout.registration.models import Cart

BILLING = "billing"


@dataclass
class FieldDefinition:
    """Definition of a single checkout form field."""

    label: str = ""
    type: str = "text"
    required: bool = False
    css_class: list[str] = field(default_factory=list)
    priority: int = 0
    validate: list[str] = field(default_factory=list)
    default: str = ""
    placeholder: str = ""
    options: dict[str, str] = field(default_factory=dict)
    custom_attributes: dict[str, str] = field(default_factory=dict)

    @property
    def readonly(self) -> bool:
        """Whether the field is display-only."""
        return self.custom_attributes.get("readonly") == "readonly"


FieldSchema = dict[str, dict[str, FieldDefinition]]


def sorted_fields(schema: FieldSchema, group: str = BILLING) -> list[tuple[str, FieldDefinition]]:
    """Return the fields of *group* in rendering order (ascending priority)."""
    return sorted(schema.get(group, {}).items(), key=lambda pair: pair[1].priority)


def default_checkout_fields() -> FieldSchema:
    """Return the standard checkout form before any filtering."""
    return {
        BILLING: {
            "billing_first_name": FieldDefinition(label="First name", required=True, priority=10),
            "billing_last_name": FieldDefinition(label="Last name", required=True, priority=20),
            "billing_company": FieldDefinition(label="Company name", priority=30),
            "billing_country": FieldDefinition(label="Country / Region", type="country", required=True, priority=40),
            "billing_address_1": FieldDefinition(label="Street address", required=True, priority=50),
            "billing_address_2": FieldDefinition(label="Apartment, suite, unit, etc.", priority=60),
            "billing_city": FieldDefinition(label="Town / City", required=True, priority=70),
            "billing_state": FieldDefinition(label="County", priority=80),
            "billing_postcode": FieldDefinition(label="Postcode", required=True, priority=90),
            "billing_phone": FieldDefinition(label="Phone", type="tel", required=True, priority=100),
            "billing_email": FieldDefinition(
                label="Email address",
                type="email",
                required=True,
                priority=110,
                validate=["email"],
            ),
        },
        "order": {
            "order_comments": FieldDefinition(
                label="Order notes",
                type="textarea",
                placeholder="Notes about your order.",
            ),
        },
    }


def _widget_attrs(definition: FieldDefinition) -> dict[str, str]:
    attrs = dict(definition.custom_attributes)
    if definition.placeholder:
        attrs["placeholder"] = definition.placeholder
    return attrs


def build_form_field(definition: FieldDefinition) -> forms.Field:
    """Translate a :class:`FieldDefinition` into a Django form field.

    The definition's CSS classes are exposed as ``row_class`` on the returned
    field for the template to put on the surrounding row.
    """
    attrs = _widget_attrs(definition)
    common = {
        "label": definition.label,
        "required": definition.required and not definition.readonly,
        "initial": definition.default or None,
    }
    match definition.type:
        case "email":
            form_field = forms.EmailField(widget=forms.EmailInput(attrs=attrs), **common)
        case "tel":
            form_field = forms.CharField(widget=forms.TextInput(attrs={"type": "tel", **attrs}), **common)
        case "select":
            form_field = forms.ChoiceField(choices=list(definition.options.items()), **common)
        case "checkbox":
            common["required"] = definition.required
            form_field = forms.BooleanField(widget=forms.CheckboxInput(attrs=attrs), **common)
        case "textarea":
            form_field = forms.CharField(widget=forms.Textarea(attrs=attrs), **common)
        case _:
            form_field = forms.CharField(widget=forms.TextInput(attrs=attrs), **common)
    form_field.row_class = " ".join(["form-row", *definition.css_class])
    return form_field


def build_form_class(schema: FieldSchema, group: str = BILLING) -> type[forms.Form]:
    """Build a Django form class from one group of *schema*.

    Args:
        schema: The filtered checkout field schema.
        group: The field group to render.

    Returns:
        A ``forms.Form`` subclass whose fields follow the schema's priority
        order.
    """
    attrs = {key: build_form_field(definition) for key, definition in sorted_fields(schema, group)}
    return type("CheckoutForm", (forms.Form,), attrs)


class CartItemForm(forms.Form):
    """Form for adding tickets to the cart."""

    ticket_type_id = forms.IntegerField()
    quantity = forms.IntegerField(min_value=1, initial=1)


class PaymentMethodForm(forms.Form):
    """Form for choosing the payment method on the checkout page."""

    payment_method = forms.ChoiceField(choices=Cart.PaymentMethod.choices)
