"""Cart serializers for read and write operations."""

from rest_framework import serializers

from .models import Cart, CartItem
from .selectors import cart_lines
from .services import add_item, update_item_quantity


class CartItemReadSerializer(serializers.ModelSerializer):
    """Read serializer for a cart line."""

    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    seller_id = serializers.IntegerField(source="product.producer_id", read_only=True)
    variant_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "seller_id",
            "variant_id",
            "size",
            "color",
            "quantity",
            "unit_price",
            "total_price",
        ]


class CartReadSerializer(serializers.ModelSerializer):
    """Read serializer for the cart summary and its lines."""

    items = serializers.SerializerMethodField()

    class Meta:
        model = Cart
        fields = ["id", "items", "item_count", "total_amount", "updated_at"]

    def get_items(self, cart):
        return CartItemReadSerializer(cart_lines(cart=cart), many=True).data


class AddItemSerializer(serializers.Serializer):
    """Write serializer for adding a product (variant) to the cart."""

    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    size = serializers.CharField(max_length=40, required=False, allow_blank=True, default="")
    color = serializers.CharField(max_length=40, required=False, allow_blank=True, default="")

    def create(self, validated_data):  # type: ignore[override]
        user = self.context["request"].user
        return add_item(user=user, **validated_data)


class UpdateItemQuantitySerializer(serializers.Serializer):
    """Write serializer for updating a cart line quantity."""

    quantity = serializers.IntegerField(min_value=1)

    def update(self, instance, validated_data):  # type: ignore[override]
        user = self.context["request"].user
        return update_item_quantity(user=user, item_id=instance.id, quantity=validated_data["quantity"])


class CheckoutSerializer(serializers.Serializer):
    """Checkout payload; billing defaults to the shipping address."""

    shipping_address = serializers.DictField()
    billing_address = serializers.DictField(required=False, allow_null=True)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")
    payment_method = serializers.CharField(max_length=40, required=False, allow_blank=True, default="")
    delivery_method = serializers.CharField(max_length=40, required=False, allow_blank=True, default="")

    def validate_shipping_address(self, value):
        if not value:
            raise serializers.ValidationError("Shipping address is required.")
        return value
