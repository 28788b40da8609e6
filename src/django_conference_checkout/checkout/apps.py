"""Django app configuration for the conference checkout app."""

from django.apps import AppConfig


class ConferenceCheckoutConfig(AppConfig):
    """Configuration for the conference checkout app.

    Registers the checkout handlers on the shared hook registry once the app
    registry is ready.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "django_conference_checkout.checkout"
    label = "conference_checkout"
    verbose_name = "Conference Checkout"

    def ready(self) -> None:
        """Wire the checkout handlers into the host's lifecycle events."""
        from django_conference_checkout.checkout import plugin  # noqa: PLC0415
        from django_conference_checkout.hooks import hooks  # noqa: PLC0415

        plugin.init(hooks)
