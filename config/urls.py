"""Root URL configuration: admin, API schema, health and the v1 API."""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from .auth import RefreshView, TokenView
from .health import health

admin.site.site_header = "Uretix Admin"
admin.site.index_title = "Admin"

urlpatterns = [
    path("admin/", admin.site.urls),
    # API schema and Swagger UI
    path("api/schema/", SpectacularAPIView.as_view(), name="api-schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="api-schema"), name="api-docs"),
    # Healthcheck
    path("health/", health, name="health"),
    # Token issuance
    path("api/v1/auth/token/", TokenView.as_view(), name="token-obtain"),
    path("api/v1/auth/token/refresh/", RefreshView.as_view(), name="token-refresh"),
    # Versioned v1 routes only
    path("api/v1/listings/", include("listings.urls")),
    path("api/v1/cart/", include("cart.urls")),
    path("api/v1/orders/", include("orders.urls")),
    path("api/v1/notifications/", include("notifications.urls")),
]
