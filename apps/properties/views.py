"""Property API views."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.reservations.domain.availability import disabled_dates
from apps.reservations.services import booked_intervals

from .filters import PropertyFilterSet
from .models import Property
from .serializers import BookedDatesSerializer, PropertySerializer, PropertyWriteSerializer


class IsPropertyOwnerOrAdmin(permissions.BasePermission):
    """Lets agents manage their own listings and admins manage every listing."""

    def has_permission(self, request, view):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if not user.is_authenticated:
            return False
        if hasattr(user, "is_platform_admin") and user.is_platform_admin():
            return True
        return hasattr(user, "is_agent") and user.is_agent()

    def has_object_permission(self, request, view, obj: Property):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if hasattr(user, "is_platform_admin") and user.is_platform_admin():
            return True
        return obj.owner_id == user.id


class PropertyViewSet(viewsets.ModelViewSet):
    """Viewset for the property catalogue."""

    queryset = Property.objects.select_related("owner")
    permission_classes = [IsPropertyOwnerOrAdmin]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = PropertyFilterSet
    ordering_fields = [
        "price_amount",
        "created_at",
        "bedrooms",
        "max_guests",
    ]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if not user.is_authenticated:
            return qs.filter(status=Property.Status.ACTIVE)
        if hasattr(user, "is_platform_admin") and user.is_platform_admin():
            return qs
        if hasattr(user, "is_agent") and user.is_agent():
            return qs.filter(Q(owner=user) | Q(status=Property.Status.ACTIVE))
        return qs.filter(status=Property.Status.ACTIVE)

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return PropertyWriteSerializer
        return PropertySerializer

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        property_obj = serializer.save()
        read_serializer = PropertySerializer(property_obj, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=True, methods=["get"], url_path="booked-dates", permission_classes=[permissions.AllowAny])
    def booked_dates(self, request, pk=None):  # type: ignore
        """
        Booked ranges and nights to disable in the date picker

        Intervals are read from the database on every request so the
        calendar never shows stale availability.
        """
        property_obj: Property = self.get_object()  # type: ignore
        today = timezone.localdate()
        ranges = booked_intervals(property_obj, since=today)
        payload = {
            "property_id": property_obj.id,
            "today": today,
            "booked_ranges": ranges,
            "disabled_dates": disabled_dates(ranges),
        }
        return Response(BookedDatesSerializer(payload).data)

    @action(detail=True, methods=["post"])
    def publish(self, request, pk=None):  # type: ignore
        property_obj: Property = self.get_object()  # type: ignore
        property_obj.activate()
        return Response({"status": property_obj.status})

    @action(detail=True, methods=["post"])
    def unpublish(self, request, pk=None):  # type: ignore
        property_obj: Property = self.get_object()  # type: ignore
        property_obj.deactivate()
        return Response({"status": property_obj.status})
