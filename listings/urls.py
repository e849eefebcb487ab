"""URL routes for the listings app (v1)."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import CommentViewSet, ProductionListingViewSet, ProductViewSet

router = SimpleRouter()
router.register(r"products", ProductViewSet, basename="product")
router.register(r"production-listings", ProductionListingViewSet, basename="production-listing")
router.register(r"comments", CommentViewSet, basename="comment")

urlpatterns = [path("", include(router.urls))]
