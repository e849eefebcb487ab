"""Serializers for the listings app.

Write serializers only validate input; persistence goes through
`listings.lifecycle` and `listings.interactions`.
"""

from common.choices import CommentReaction, Currency, OfferStatus
from producers.models import Producer
from rest_framework import serializers

from .models import (
    CommentReply,
    Product,
    ProductComment,
    ProductionListing,
    ProductionOffer,
    ProductOrderRecord,
    ProductVariant,
)

LIFECYCLE_READ_ONLY = [
    "id",
    "producer",
    "last_activated_at",
    "auto_deactivate_at",
    "total_likes",
    "created_at",
    "updated_at",
]


class ProducerSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Producer
        fields = ["id", "company_name", "city", "is_verified"]


class ProductVariantSerializer(serializers.ModelSerializer):
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    stock = serializers.IntegerField(min_value=0, required=False, default=0)

    class Meta:
        model = ProductVariant
        fields = ["id", "size", "color", "price", "stock"]
        read_only_fields = ["id"]


class ProductSerializer(serializers.ModelSerializer):
    producer = ProducerSummarySerializer(read_only=True)
    variants = ProductVariantSerializer(many=True, required=False)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)

    class Meta:
        model = Product
        fields = [
            "id",
            "producer",
            "name",
            "description",
            "images",
            "price",
            "currency",
            "category",
            "sub_category",
            "tags",
            "min_order_quantity",
            "available_quantity",
            "production_location",
            "payment_type",
            "is_featured",
            "is_active",
            "auto_deactivate_enabled",
            "last_activated_at",
            "auto_deactivate_at",
            "variants",
            "rating",
            "total_ratings",
            "total_likes",
            "total_comments",
            "total_orders",
            "total_revenue",
            "created_at",
            "updated_at",
        ]
        read_only_fields = LIFECYCLE_READ_ONLY + [
            "is_featured",
            "rating",
            "total_ratings",
            "total_comments",
            "total_orders",
            "total_revenue",
        ]

    def validate_variants(self, value):
        seen = set()
        for variant in value:
            key = (variant.get("size") or "", variant.get("color") or "")
            if key in seen:
                raise serializers.ValidationError(f"Duplicate variant size/color: {key[0]}/{key[1]}")
            seen.add(key)
        return value


class ProductionListingSerializer(serializers.ModelSerializer):
    producer = ProducerSummarySerializer(read_only=True)

    class Meta:
        model = ProductionListing
        fields = [
            "id",
            "producer",
            "title",
            "description",
            "category",
            "sub_category",
            "sub_sub_category",
            "location",
            "work_type",
            "salary_min",
            "salary_max",
            "currency",
            "benefits",
            "cover_image",
            "video_url",
            "detail_images",
            "documents",
            "technical_details",
            "production_time",
            "delivery_time",
            "logistics_model",
            "production_location",
            "is_active",
            "auto_deactivate_enabled",
            "last_activated_at",
            "auto_deactivate_at",
            "total_likes",
            "total_offers",
            "total_views",
            "created_at",
            "updated_at",
        ]
        read_only_fields = LIFECYCLE_READ_ONLY + ["total_offers", "total_views"]

    def validate(self, attrs):
        salary_min = attrs.get("salary_min", getattr(self.instance, "salary_min", None))
        salary_max = attrs.get("salary_max", getattr(self.instance, "salary_max", None))
        if salary_min is not None and salary_max is not None and salary_max < salary_min:
            raise serializers.ValidationError({"salary_max": "Must be greater than or equal to salary_min."})
        return attrs


class ListingSettingsSerializer(serializers.Serializer):
    """Owner preferences; fields a listing type does not have are rejected by the service."""

    auto_deactivate_enabled = serializers.BooleanField(required=False)
    notify_new_like = serializers.BooleanField(required=False)
    notify_auto_deactivate_reminder = serializers.BooleanField(required=False)
    notify_new_comment = serializers.BooleanField(required=False)
    notify_new_order = serializers.BooleanField(required=False)
    notify_new_offer = serializers.BooleanField(required=False)


class LikeStatusSerializer(serializers.Serializer):
    is_liked = serializers.BooleanField()
    total_likes = serializers.IntegerField()


class CommentReplySerializer(serializers.ModelSerializer):
    producer = serializers.CharField(source="producer.company_name", read_only=True)

    class Meta:
        model = CommentReply
        fields = ["id", "producer", "text", "created_at"]


class CommentSerializer(serializers.ModelSerializer):
    user = serializers.IntegerField(source="user_id", read_only=True)
    username = serializers.CharField(source="user.username", read_only=True)
    replies = CommentReplySerializer(many=True, read_only=True)

    class Meta:
        model = ProductComment
        fields = [
            "id",
            "user",
            "username",
            "text",
            "rating",
            "helpful_count",
            "like_count",
            "dislike_count",
            "replies",
            "created_at",
        ]


class CommentCreateSerializer(serializers.Serializer):
    text = serializers.CharField(max_length=2000)
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False, allow_null=True)


class CommentReactionSerializer(serializers.Serializer):
    reaction = serializers.ChoiceField(choices=CommentReaction.choices)


class ReplyCreateSerializer(serializers.Serializer):
    text = serializers.CharField(max_length=1000)


class OfferSerializer(serializers.ModelSerializer):
    user = serializers.IntegerField(source="user_id", read_only=True)

    class Meta:
        model = ProductionOffer
        fields = ["id", "reference", "user", "price", "currency", "message", "delivery_time", "status", "created_at"]


class OfferCreateSerializer(serializers.Serializer):
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    currency = serializers.ChoiceField(choices=Currency.choices, default=Currency.TRY)
    delivery_time = serializers.CharField(max_length=120)
    message = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")


class OfferStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[OfferStatus.ACCEPTED, OfferStatus.REJECTED])


class OrderInteractionCreateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
    variant_id = serializers.IntegerField(required=False, allow_null=True)


class OrderRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductOrderRecord
        fields = ["id", "reference", "variant", "quantity", "unit_price", "total_price", "status", "created_at"]
