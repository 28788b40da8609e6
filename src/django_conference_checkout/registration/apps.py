"""Django app configuration for the registration app."""

from django.apps import AppConfig


class ConferenceRegistrationConfig(AppConfig):
    """Configuration for the registration app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "django_conference_checkout.registration"
    label = "checkout_registration"
    verbose_name = "Registration"
