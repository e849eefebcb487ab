"""DRF serializers for orders.

Orders are read-only over the API apart from status changes, which go
through `orders.services`.
"""

from common.choices import OrderStatus, PaymentStatus
from rest_framework import serializers

from .models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product",
            "variant",
            "product_name",
            "size",
            "color",
            "quantity",
            "unit_price",
            "total_price",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """API representation for an order with its frozen lines."""

    items = OrderItemSerializer(many=True, read_only=True)
    seller_name = serializers.CharField(source="seller.company_name", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "buyer",
            "seller",
            "seller_name",
            "status",
            "payment_status",
            "payment_method",
            "delivery_method",
            "total_amount",
            "currency",
            "shipping_address",
            "billing_address",
            "notes",
            "estimated_delivery_date",
            "actual_delivery_date",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class PaymentStatusUpdateSerializer(serializers.Serializer):
    payment_status = serializers.ChoiceField(choices=PaymentStatus.choices)
