"""Catalog URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.catalog.views import CatalogProductViewSet

router = DefaultRouter(trailing_slash=True)
router.register("catalog", CatalogProductViewSet, basename="catalog-product")

urlpatterns = router.urls
