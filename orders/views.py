"""Orders API endpoints for buyers and sellers.

Buyers see and cancel their own orders; sellers (producers) see their sales
and move them through the status flow.
"""

from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from producers.selectors import get_producer_for_user, require_producer
from rest_framework import generics
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from . import selectors
from .idempotency import compute_request_hash, with_idempotency
from .serializers import OrderSerializer, OrderStatusUpdateSerializer, PaymentStatusUpdateSerializer
from .services import cancel_order, update_order_status, update_payment_status

LIST_PARAMETERS = [
    OpenApiParameter(name="status", description="Order status filter", required=False, type=str),
    OpenApiParameter(name="order_number", description="Order number exact match", required=False, type=str),
    OpenApiParameter(name="start", description="Created at >= start (ISO)", required=False, type=str),
    OpenApiParameter(name="end", description="Created at <= end (ISO)", required=False, type=str),
    OpenApiParameter(name="page", description="Page number", required=False, type=int),
    OpenApiParameter(name="page_size", description="Items per page", required=False, type=int),
]


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"


class BaseOrderListView(generics.ListAPIView):
    """Shared query-param filters for order lists."""

    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    pagination_class = DefaultPagination
    throttle_scope = "orders"

    def base_queryset(self):
        raise NotImplementedError

    def get_queryset(self):
        qs = self.base_queryset()
        params = self.request.query_params
        if params.get("status"):
            qs = qs.filter(status=params["status"])
        if params.get("order_number"):
            qs = qs.filter(order_number=params["order_number"])
        if params.get("start"):
            qs = qs.filter(created_at__gte=params["start"])
        if params.get("end"):
            qs = qs.filter(created_at__lte=params["end"])
        return qs


class OrderListView(BaseOrderListView):
    """List the authenticated buyer's orders."""

    def base_queryset(self):
        return selectors.list_orders_for_buyer(user=self.request.user)

    @extend_schema(tags=["Orders"], summary="List my orders", parameters=LIST_PARAMETERS)
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class SalesListView(BaseOrderListView):
    """List orders received by the authenticated producer."""

    def base_queryset(self):
        return selectors.list_orders_for_seller(producer=require_producer(self.request.user))

    @extend_schema(tags=["Orders"], summary="List my sales", parameters=LIST_PARAMETERS)
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


def _participant_order(request, order_id: int):
    return selectors.get_order_for_participant(
        order_id=order_id, user=request.user, producer=get_producer_for_user(request.user)
    )


class OrderDetailView(APIView):
    """Retrieve an order for its buyer or seller."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"

    @extend_schema(
        tags=["Orders"],
        summary="Get order detail",
        responses=OrderSerializer,
        examples=[
            OpenApiExample(
                "Order",
                value={
                    "id": 12,
                    "order_number": "UX-7K2M9Q4P",
                    "status": "pending",
                    "payment_status": "pending",
                    "total_amount": "900.00",
                    "currency": "TL",
                    "items": [
                        {
                            "id": 30,
                            "product": 3,
                            "variant": 7,
                            "product_name": "Linen shirt",
                            "size": "M",
                            "color": "white",
                            "quantity": 2,
                            "unit_price": "450.00",
                            "total_price": "900.00",
                        }
                    ],
                },
                response_only=True,
            )
        ],
    )
    def get(self, request, order_id: int):
        return Response(OrderSerializer(_participant_order(request, order_id)).data)


class OrderStatusView(APIView):
    """Seller moves an order forward in the status flow."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Update order status",
        description=(
            "Seller-only. Statuses move forward (pending → onaylandı → hazırlanıyor → kargoda → teslim edildi); "
            "steps may be skipped but never reversed. Delivered and cancelled orders are final."
        ),
        request=OrderStatusUpdateSerializer,
        responses=OrderSerializer,
    )
    def patch(self, request, order_id: int):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = _participant_order(request, order_id)
        updated = update_order_status(
            order=order, status=serializer.validated_data["status"], producer=get_producer_for_user(request.user)
        )
        return Response(OrderSerializer(updated).data)


class OrderPaymentStatusView(APIView):
    """Seller records the payment state of an order."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Update payment status",
        request=PaymentStatusUpdateSerializer,
        responses=OrderSerializer,
    )
    def patch(self, request, order_id: int):
        serializer = PaymentStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = _participant_order(request, order_id)
        updated = update_payment_status(
            order=order,
            payment_status=serializer.validated_data["payment_status"],
            producer=get_producer_for_user(request.user),
        )
        return Response(OrderSerializer(updated).data)


class OrderCancelView(APIView):
    """Cancel a pending order for its buyer.

    Idempotent when `Idempotency-Key` is provided. Returns 409 on key reuse with different payload.
    """

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Cancel order",
        description="Cancels a pending order and returns its units to stock.",
        request=None,
        parameters=[
            OpenApiParameter(
                name="Idempotency-Key",
                location=OpenApiParameter.HEADER,
                required=False,
                description="Makes the request idempotent within scope+path+method",
                type=str,
            )
        ],
        responses=OrderSerializer,
    )
    def post(self, request, order_id: int):
        order = _participant_order(request, order_id)

        def _handler():
            updated = cancel_order(order=order, user=request.user)
            return OrderSerializer(updated).data, 200

        idem_key = request.headers.get("Idempotency-Key")
        if idem_key:
            body, code = with_idempotency(
                key=idem_key,
                user=request.user,
                path=str(request.path),
                method=str(request.method),
                request_hash=compute_request_hash(getattr(request, "data", None)),
                handler=_handler,
            )
            return Response(body, status=code)

        body, code = _handler()
        return Response(body, status=code)
