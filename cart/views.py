"""DRF views for cart operations."""

from common.exceptions import NotFoundError
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from orders.idempotency import compute_request_hash, with_idempotency
from orders.serializers import OrderSerializer
from orders.services import checkout_cart
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import CartItem
from .selectors import get_cart_for_user
from .serializers import (
    AddItemSerializer,
    CartItemReadSerializer,
    CartReadSerializer,
    CheckoutSerializer,
    UpdateItemQuantitySerializer,
)
from .services import clear_cart, remove_item


def _cart_response(user, code=status.HTTP_200_OK) -> Response:
    return Response(CartReadSerializer(get_cart_for_user(user=user)).data, status=code)


class CartDetailView(APIView):
    """Return the authenticated buyer's cart."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart",
        description="Returns the buyer's cart with its lines and derived totals.",
        responses=CartReadSerializer,
        examples=[
            OpenApiExample(
                "Cart",
                value={
                    "id": 1,
                    "items": [
                        {
                            "id": 10,
                            "product_id": 3,
                            "product_name": "Linen shirt",
                            "seller_id": 2,
                            "variant_id": 7,
                            "size": "M",
                            "color": "white",
                            "quantity": 2,
                            "unit_price": "450.00",
                            "total_price": "900.00",
                        }
                    ],
                    "item_count": 2,
                    "total_amount": "900.00",
                },
                response_only=True,
            )
        ],
    )
    def get(self, request):
        return _cart_response(request.user)


class CartAddItemView(APIView):
    """Add a product to the cart, merging with an existing line."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Add item to cart",
        description=(
            "Adds a product to the cart. Products with variants need the `size` and `color` of one variant. "
            "Stock is checked but not taken until checkout."
        ),
        request=AddItemSerializer,
        responses={201: CartItemReadSerializer},
        examples=[OpenApiExample("Add", value={"product_id": 3, "quantity": 2, "size": "M", "color": "white"})],
    )
    def post(self, request):
        serializer = AddItemSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        item = serializer.save()
        return Response(CartItemReadSerializer(item).data, status=status.HTTP_201_CREATED)


class CartItemView(APIView):
    """Update or remove one cart line."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    def _get_item(self, request, item_id: int) -> CartItem:
        item = CartItem.objects.filter(id=item_id, cart__user_id=request.user.id).first()
        if item is None:
            raise NotFoundError("Cart item not found.")
        return item

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Update cart item quantity",
        description="Sets the line quantity after re-checking stock and the current price.",
        request=UpdateItemQuantitySerializer,
        responses=CartItemReadSerializer,
    )
    def patch(self, request, item_id: int):
        item = self._get_item(request, item_id)
        serializer = UpdateItemQuantitySerializer(instance=item, data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        item = serializer.save()
        return Response(CartItemReadSerializer(item).data)

    @extend_schema(tags=["Cart Endpoints"], summary="Delete cart item", responses={204: None})
    def delete(self, request, item_id: int):
        remove_item(user=request.user, item_id=item_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CartClearView(APIView):
    """Remove every line from the cart."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(tags=["Cart Endpoints"], summary="Clear cart", request=None, responses=CartReadSerializer)
    def post(self, request):
        clear_cart(user=request.user)
        return _cart_response(request.user)


class CartCheckoutView(APIView):
    """Turn the cart into one order per seller."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Checkout cart",
        description=(
            "Creates one order per seller, takes stock and empties the cart in a single transaction. "
            "Either every order is created or none is."
        ),
        request=CheckoutSerializer,
        parameters=[
            OpenApiParameter(
                name="Idempotency-Key",
                location=OpenApiParameter.HEADER,
                required=False,
                description="When provided, checkout becomes idempotent for this user+path+method",
                type=str,
            )
        ],
        responses={
            201: inline_serializer(
                name="CheckoutResponse",
                fields={"count": rf_serializers.IntegerField(), "orders": OrderSerializer(many=True)},
            ),
            409: inline_serializer(
                name="CheckoutConflict",
                fields={"detail": rf_serializers.CharField(), "code": rf_serializers.CharField()},
            ),
        },
        examples=[
            OpenApiExample(
                "Checkout",
                value={"shipping_address": {"city": "Istanbul", "line1": "Bagdat Cd. 1"}, "payment_method": "card"},
                request_only=True,
            ),
            OpenApiExample(
                "Empty cart",
                value={"detail": "Your cart is empty.", "code": "cart_empty"},
                response_only=True,
                status_codes=["409"],
            ),
        ],
    )
    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        def _checkout_handler():
            orders = checkout_cart(user=request.user, **serializer.validated_data)
            return {"count": len(orders), "orders": OrderSerializer(orders, many=True).data}, 201

        idem_key = request.headers.get("Idempotency-Key")
        if idem_key:
            body, code = with_idempotency(
                key=idem_key,
                user=request.user,
                path=str(request.path),
                method=str(request.method),
                request_hash=compute_request_hash(request.data),
                handler=_checkout_handler,
            )
            return Response(body, status=code)

        body, code = _checkout_handler()
        return Response(body, status=code)
