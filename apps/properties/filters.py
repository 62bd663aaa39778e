"""FilterSet definitions for property listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Property


class PropertyFilterSet(django_filters.FilterSet):
    """FilterSet for Property with the filters used by the listing page."""

    city = django_filters.CharFilter(field_name="city", lookup_expr="icontains")
    currency = django_filters.CharFilter(field_name="currency", lookup_expr="iexact")
    price_period = django_filters.CharFilter(field_name="price_period", lookup_expr="exact")
    price_min = django_filters.NumberFilter(field_name="price_amount", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="price_amount", lookup_expr="lte")
    bedrooms_min = django_filters.NumberFilter(field_name="bedrooms", lookup_expr="gte")
    guests = django_filters.NumberFilter(field_name="max_guests", lookup_expr="gte")

    class Meta:
        model = Property
        fields = ["city", "currency", "price_period", "status"]
