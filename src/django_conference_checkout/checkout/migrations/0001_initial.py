from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CheckoutOptions",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "fee_enabled",
                    models.BooleanField(blank=True, help_text="Add the per-ticket surcharge at checkout.", null=True),
                ),
                ("fee_title", models.CharField(blank=True, max_length=200, null=True)),
                (
                    "fee_amount",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Surcharge added for every ticket in the cart.",
                        max_digits=10,
                        null=True,
                    ),
                ),
                ("fee_taxable", models.BooleanField(blank=True, null=True)),
                (
                    "fee_tax_class",
                    models.CharField(
                        blank=True,
                        help_text="Leave empty for the standard rules (none if not taxable).",
                        max_length=100,
                        null=True,
                    ),
                ),
                (
                    "fee_only_cod",
                    models.BooleanField(
                        blank=True,
                        help_text="Only apply the surcharge when paying on the door.",
                        null=True,
                    ),
                ),
                ("newsletter_label", models.CharField(blank=True, max_length=500, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "checkout options",
                "verbose_name_plural": "checkout options",
            },
        ),
    ]
