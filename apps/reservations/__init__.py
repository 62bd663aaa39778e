"""Reservations app package.

This app encapsulates the reservation domain: pure pricing and
availability rules in ``domain``, the reservation model and the services
that persist reservations atomically. Date overlaps are rejected by a
locked query and, on PostgreSQL, by an exclusion constraint.
"""
