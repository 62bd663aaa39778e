"""API views for the reservation domain."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .domain.errors import ReservationError
from .models import Reservation
from .serializers import (
    ReservationCancelSerializer,
    ReservationCreateSerializer,
    ReservationQuoteSerializer,
    ReservationSerializer,
)
from .services import cancel_reservation


class IsReservationStakeholder(permissions.BasePermission):
    """Guests, listing agents and platform admins may access a reservation."""

    def has_object_permission(self, request, view, obj: Reservation):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if hasattr(user, "is_platform_admin") and user.is_platform_admin():
            return True
        if obj.property.owner_id == user.id:
            return True
        return obj.guest_id == user.id


class ReservationViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset for quoting, creating and cancelling reservations."""

    queryset = Reservation.objects.select_related("property", "guest", "property__owner").all()
    permission_classes = [permissions.IsAuthenticated, IsReservationStakeholder]
    filterset_fields = ["status", "payment_status", "property"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return ReservationCreateSerializer
        if self.action == "quote":
            return ReservationQuoteSerializer
        if self.action == "cancel":
            return ReservationCancelSerializer
        return ReservationSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if not user.is_authenticated:
            return qs.none()
        if hasattr(user, "is_platform_admin") and user.is_platform_admin():
            return qs
        if hasattr(user, "is_agent") and user.is_agent():
            return qs.filter(property__owner=user)
        return qs.filter(guest=user)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reservation = serializer.save()
        read_serializer = ReservationSerializer(reservation, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=False, methods=["post"])
    def quote(self, request):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(serializer.quote())

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        reservation: Reservation = self.get_object()  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        if reservation.guest_id == user.id:
            source = Reservation.CancellationSource.GUEST
        elif reservation.property.owner_id == user.id:
            source = Reservation.CancellationSource.AGENT
        else:
            source = Reservation.CancellationSource.SYSTEM

        try:
            cancel_reservation(reservation, source, serializer.validated_data["reason"])
        except ReservationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"status": reservation.status}, status=status.HTTP_200_OK)
