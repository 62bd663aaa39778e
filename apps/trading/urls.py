"""URL routing for the trading domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import MarketOrderViewSet, MarketViewSet

router = DefaultRouter()
router.register(r"markets", MarketViewSet, basename="market")
router.register(r"orders", MarketOrderViewSet, basename="market-order")

urlpatterns = [
    path("", include(router.urls)),
]
