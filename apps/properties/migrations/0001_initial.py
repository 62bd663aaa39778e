import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Property",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("slug", models.SlugField(blank=True, max_length=255, unique=True)),
                ("description", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("pending", "Under review"),
                            ("active", "Active"),
                            ("inactive", "Inactive"),
                        ],
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("city", models.CharField(max_length=100)),
                ("address_line", models.CharField(blank=True, max_length=255)),
                ("bedrooms", models.PositiveSmallIntegerField(default=1)),
                ("max_guests", models.PositiveSmallIntegerField(default=2)),
                (
                    "price_amount",
                    models.PositiveBigIntegerField(help_text="Rate per price period in minor units (kobo, cents)."),
                ),
                (
                    "currency",
                    models.CharField(
                        choices=[
                            ("NGN", "Nigerian naira"),
                            ("USD", "US dollar"),
                            ("EUR", "Euro"),
                            ("GBP", "Pound sterling"),
                        ],
                        default="NGN",
                        max_length=3,
                    ),
                ),
                (
                    "deposit_amount",
                    models.PositiveBigIntegerField(default=0, help_text="Refundable security deposit in minor units."),
                ),
                (
                    "service_charge_amount",
                    models.PositiveBigIntegerField(
                        default=0, help_text="Flat service charge per reservation in minor units."
                    ),
                ),
                (
                    "price_period",
                    models.CharField(
                        choices=[("night", "Per night"), ("month", "Per month")],
                        default="night",
                        max_length=10,
                    ),
                ),
                ("published_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="properties",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Property",
                "verbose_name_plural": "Properties",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="property_status_idx"),
                    models.Index(fields=["owner", "status"], name="property_owner_status_idx"),
                ],
            },
        ),
    ]
