import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("properties", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="TokenizedProperty",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("token_symbol", models.CharField(max_length=12, unique=True)),
                ("total_supply", models.PositiveBigIntegerField()),
                ("price_per_token", models.PositiveBigIntegerField(help_text="Issue price in minor units.")),
                ("currency", models.CharField(default="NGN", max_length=3)),
                (
                    "minimum_investment",
                    models.PositiveBigIntegerField(default=0, help_text="Smallest buy order value in minor units."),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Trading"), ("paused", "Paused")],
                        default="active",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "property",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tokenization",
                        to="properties.property",
                    ),
                ),
            ],
            options={
                "verbose_name": "Tokenized property",
                "verbose_name_plural": "Tokenized properties",
                "ordering": ["token_symbol"],
            },
        ),
        migrations.CreateModel(
            name="TokenHolding",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tokens_owned", models.PositiveBigIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "tokenized_property",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="holdings",
                        to="trading.tokenizedproperty",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="token_holdings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("user", "tokenized_property"), name="unique_token_holding"),
                ],
            },
        ),
        migrations.CreateModel(
            name="MarketOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("side", models.CharField(choices=[("buy", "Buy"), ("sell", "Sell")], max_length=4)),
                ("quantity", models.PositiveBigIntegerField()),
                ("price_per_token", models.PositiveBigIntegerField()),
                ("filled_quantity", models.PositiveBigIntegerField(default=0)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("active", "Active"),
                            ("partial", "Partially filled"),
                            ("filled", "Filled"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="active",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "tokenized_property",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="orders",
                        to="trading.tokenizedproperty",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="market_orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["tokenized_property", "status", "side"], name="market_order_book_idx"
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("filled_quantity__lte", models.F("quantity"))),
                        name="market_order_fill_within_quantity",
                    ),
                ],
            },
        ),
    ]
