"""API views for the token secondary market."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .domain.errors import OrderBookError
from .models import MarketOrder, TokenizedProperty
from .serializers import (
    EstimateQuerySerializer,
    MarketDepthSerializer,
    MarketOrderCreateSerializer,
    MarketOrderSerializer,
    TokenizedPropertySerializer,
)
from .services import cancel_order, estimate_order, market_depth


class MarketViewSet(viewsets.ReadOnlyModelViewSet):
    """Tokenized properties with their depth and market-order estimates."""

    queryset = TokenizedProperty.objects.select_related("property")
    serializer_class = TokenizedPropertySerializer
    permission_classes = [permissions.AllowAny]

    @action(detail=True, methods=["get"])
    def depth(self, request, pk=None):  # type: ignore
        depth = market_depth(self.get_object())
        return Response(MarketDepthSerializer(depth.to_dict()).data)

    @action(detail=True, methods=["get"])
    def estimate(self, request, pk=None):  # type: ignore
        query = EstimateQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        try:
            estimate = estimate_order(
                self.get_object(),
                query.validated_data["side"],
                query.validated_data["quantity"],
            )
        except OrderBookError as exc:
            return Response({"non_field_errors": [str(exc)]}, status=status.HTTP_400_BAD_REQUEST)
        return Response(estimate.to_dict())


class MarketOrderViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """The caller's own orders."""

    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["tokenized_property", "side", "status"]

    def get_queryset(self):  # type: ignore
        return MarketOrder.objects.filter(user=self.request.user).select_related("tokenized_property")

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return MarketOrderCreateSerializer
        return MarketOrderSerializer

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = serializer.save()
        return Response(MarketOrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        order: MarketOrder = self.get_object()  # type: ignore
        try:
            cancel_order(order)
        except OrderBookError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"status": order.status})
