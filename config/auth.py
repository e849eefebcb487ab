"""JWT issuance endpoints, throttled under the ``token`` scope."""

import logging

from drf_spectacular.utils import extend_schema
from rest_framework.throttling import ScopedRateThrottle
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

logger = logging.getLogger("uretix.auth")


def _log(action: str, request, response) -> None:
    logger.info(
        f"auth.{action}",
        extra={
            "event": f"auth.{action}",
            "status": "success" if response.status_code == 200 else "failed",
            "ip": request.META.get("REMOTE_ADDR"),
        },
    )


class TokenView(TokenObtainPairView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "token"

    @extend_schema(tags=["Auth"], summary="Obtain access and refresh tokens")
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        _log("token", request, resp)
        return resp


class RefreshView(TokenRefreshView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "token"

    @extend_schema(tags=["Auth"], summary="Refresh an access token")
    def post(self, request, *args, **kwargs):
        resp = super().post(request, *args, **kwargs)
        _log("token_refresh", request, resp)
        return resp
