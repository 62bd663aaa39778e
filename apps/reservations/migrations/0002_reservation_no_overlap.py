"""Exclusion constraint that forbids overlapping blocking reservations.

Only PostgreSQL supports it; on other backends the locked availability
query in ``apps.reservations.services`` is the only guard.
"""

from django.db import migrations

BLOCKING_STATUSES = ("pending", "awaiting_payment", "confirmed", "active")


def add_overlap_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    statuses = ", ".join(f"'{status}'" for status in BLOCKING_STATUSES)
    schema_editor.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    schema_editor.execute(
        "ALTER TABLE reservations_reservation "
        "ADD CONSTRAINT reservation_no_overlap "
        "EXCLUDE USING gist ("
        "property_id WITH =, "
        "daterange(check_in, check_out, '[)') WITH &&"
        f") WHERE (status IN ({statuses}))"
    )


def drop_overlap_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(
        "ALTER TABLE reservations_reservation DROP CONSTRAINT IF EXISTS reservation_no_overlap"
    )


class Migration(migrations.Migration):

    dependencies = [
        ("reservations", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(add_overlap_constraint, drop_overlap_constraint),
    ]
