"""Notification inbox endpoints for the authenticated user."""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from . import selectors
from .serializers import MarkAllReadSerializer, NotificationSerializer, UnreadCountSerializer
from .services import mark_all_as_read, mark_as_read

TRUTHY = {"1", "true", "yes", "on"}


class NotificationPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100


class NotificationListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer
    pagination_class = NotificationPagination
    throttle_scope = "notifications"

    def get_queryset(self):
        unread_only = self.request.query_params.get("unread_only", "").lower() in TRUTHY
        return selectors.list_notifications(user=self.request.user, unread_only=unread_only)

    @extend_schema(
        tags=["Notifications"],
        summary="List my notifications",
        parameters=[
            OpenApiParameter(name="unread_only", description="Only unread notifications", required=False, type=bool),
            OpenApiParameter(name="page", description="Page number", required=False, type=int),
            OpenApiParameter(name="page_size", description="Items per page", required=False, type=int),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class UnreadCountView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "notifications"

    @extend_schema(tags=["Notifications"], summary="Unread notification count", responses=UnreadCountSerializer)
    def get(self, request):
        return Response({"unread_count": selectors.unread_count(user=request.user)})


class MarkReadView(APIView):
    """Mark one of the caller's notifications read; repeated calls are harmless."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "notifications"

    @extend_schema(tags=["Notifications"], summary="Mark notification read", request=None, responses=NotificationSerializer)
    def post(self, request, notification_id: int):
        notification = mark_as_read(user=request.user, notification_id=notification_id)
        return Response(NotificationSerializer(notification).data)


class MarkAllReadView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "notifications"

    @extend_schema(
        tags=["Notifications"], summary="Mark all notifications read", request=None, responses=MarkAllReadSerializer
    )
    def post(self, request):
        return Response({"updated": mark_all_as_read(user=request.user)})
