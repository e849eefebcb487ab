"""Viewsets for products, production listings and their interactions.

Reads are public and show active listings (plus the caller's own); writes go
through `listings.lifecycle` and `listings.interactions`.
"""

from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from producers.selectors import get_producer_for_user, require_producer
from rest_framework import filters as drf_filters
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle

from . import interactions, lifecycle, selectors
from .models import Product, ProductComment, ProductionListing
from .serializers import (
    CommentCreateSerializer,
    CommentReactionSerializer,
    CommentReplySerializer,
    CommentSerializer,
    LikeStatusSerializer,
    ListingSettingsSerializer,
    OfferCreateSerializer,
    OfferSerializer,
    OfferStatusUpdateSerializer,
    OrderInteractionCreateSerializer,
    OrderRecordSerializer,
    ProductionListingSerializer,
    ProductSerializer,
    ReplyCreateSerializer,
)
from .throttling import ListingsScopedRateThrottle

THROTTLES = [ListingsScopedRateThrottle, UserRateThrottle, AnonRateThrottle]


class ListingViewSetMixin:
    """CRUD plus activation, settings and like endpoints for one listing model."""

    listing_model = None
    lookup_value_regex = "[0-9]+"
    permission_classes = [IsAuthenticatedOrReadOnly]
    throttle_classes = THROTTLES
    filter_backends = [filters.DjangoFilterBackend, drf_filters.OrderingFilter, drf_filters.SearchFilter]

    def current_producer(self):
        if not hasattr(self, "_producer"):
            self._producer = get_producer_for_user(self.request.user)
        return self._producer

    def get_object(self):
        listing = selectors.get_visible_listing(
            model=self.listing_model, pk=self.kwargs[self.lookup_field], producer=self.current_producer()
        )
        self.check_object_permissions(self.request, listing)
        return listing

    def _split_variants(self, validated_data):
        data = dict(validated_data)
        return data, data.pop("variants", None)

    def create(self, request, *args, **kwargs):
        producer = require_producer(request.user)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data, variants = self._split_variants(serializer.validated_data)
        listing = lifecycle.create_listing(model=self.listing_model, producer=producer, data=data, variants=variants)
        return Response(self.get_serializer(listing).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        listing = self.get_object()
        lifecycle.ensure_owner(listing, self.current_producer())
        serializer = self.get_serializer(listing, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        data, variants = self._split_variants(serializer.validated_data)
        listing = lifecycle.update_listing(
            listing=listing, producer=self.current_producer(), data=data, variants=variants
        )
        return Response(self.get_serializer(listing).data)

    def destroy(self, request, *args, **kwargs):
        listing = self.get_object()
        lifecycle.delete_listing(listing=listing, producer=self.current_producer())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Listing Endpoints"], summary="Activate listing", request=None)
    @action(detail=True, methods=["post"], permission_classes=[IsAuthenticated])
    def activate(self, request, pk=None):
        listing = lifecycle.activate_listing(listing=self.get_object(), producer=self.current_producer())
        return Response(self.get_serializer(listing).data)

    @extend_schema(tags=["Listing Endpoints"], summary="Deactivate listing", request=None)
    @action(detail=True, methods=["post"], permission_classes=[IsAuthenticated])
    def deactivate(self, request, pk=None):
        listing = lifecycle.deactivate_listing(listing=self.get_object(), producer=self.current_producer())
        return Response(self.get_serializer(listing).data)

    @extend_schema(
        tags=["Listing Endpoints"],
        summary="Update listing settings",
        description="Auto-deactivation and notification preferences of the owner.",
        request=ListingSettingsSerializer,
    )
    @action(
        detail=True,
        methods=["patch"],
        url_path="settings",
        url_name="settings",
        permission_classes=[IsAuthenticated],
    )
    def update_settings(self, request, pk=None):
        serializer = ListingSettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        listing = lifecycle.update_listing_settings(
            listing=self.get_object(),
            producer=self.current_producer(),
            changes=dict(serializer.validated_data),
        )
        return Response(self.get_serializer(listing).data)

    @extend_schema(tags=["Listing Endpoints"], summary="Toggle like", request=None, responses=LikeStatusSerializer)
    @action(detail=True, methods=["post"], permission_classes=[IsAuthenticated])
    def like(self, request, pk=None):
        listing = interactions.toggle_like(listing=self.get_object(), user=request.user)
        return Response({"is_liked": listing.is_liked, "total_likes": listing.total_likes})

    @extend_schema(tags=["Listing Endpoints"], summary="Like status", responses=LikeStatusSerializer)
    @action(detail=True, methods=["get"], url_path="like-status", permission_classes=[AllowAny])
    def like_status(self, request, pk=None):
        listing = self.get_object()
        return Response(
            {"is_liked": selectors.is_liked(listing=listing, user=request.user), "total_likes": listing.total_likes}
        )


class ProductFilterSet(filters.FilterSet):
    min_price = filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = filters.NumberFilter(field_name="price", lookup_expr="lte")

    class Meta:
        model = Product
        fields = ["category", "sub_category", "producer", "is_active", "is_featured", "currency"]


@extend_schema_view(
    list=extend_schema(
        summary="List products",
        description="Active products plus the caller's own. Supports filtering, `search` and `ordering`.",
        tags=["Listing Endpoints"],
        parameters=[
            OpenApiParameter("category", OpenApiTypes.STR, location="query", description="Filter by category"),
            OpenApiParameter("min_price", OpenApiTypes.NUMBER, location="query", description="Minimum price"),
            OpenApiParameter("max_price", OpenApiTypes.NUMBER, location="query", description="Maximum price"),
        ],
    ),
    retrieve=extend_schema(summary="Get product", tags=["Listing Endpoints"]),
    create=extend_schema(summary="Create product", tags=["Listing Endpoints"]),
    update=extend_schema(summary="Replace product", tags=["Listing Endpoints"]),
    partial_update=extend_schema(summary="Update product", tags=["Listing Endpoints"]),
    destroy=extend_schema(summary="Delete product", tags=["Listing Endpoints"]),
)
class ProductViewSet(ListingViewSetMixin, viewsets.ModelViewSet):
    listing_model = Product
    serializer_class = ProductSerializer
    filterset_class = ProductFilterSet
    ordering_fields = ["created_at", "price", "rating", "total_likes", "total_orders"]
    search_fields = ["name", "description", "category", "sub_category"]

    def get_queryset(self):
        return selectors.list_products(producer=self.current_producer())

    @extend_schema(tags=["Listing Endpoints"], summary="Product statistics")
    @action(detail=True, methods=["get"])
    def stats(self, request, pk=None):
        return Response(selectors.product_stats(product=self.get_object()))

    @extend_schema(
        tags=["Listing Endpoints"],
        summary="List or add comments",
        request=CommentCreateSerializer,
        responses=CommentSerializer,
    )
    @action(detail=True, methods=["get", "post"])
    def comments(self, request, pk=None):
        product = self.get_object()
        if request.method == "GET":
            page = self.paginate_queryset(selectors.list_comments(product=product))
            return self.get_paginated_response(CommentSerializer(page, many=True).data)

        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = interactions.add_comment(product=product, user=request.user, **serializer.validated_data)
        return Response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Listing Endpoints"],
        summary="Order from product page",
        request=OrderInteractionCreateSerializer,
        responses=OrderRecordSerializer,
    )
    @action(detail=True, methods=["post"], permission_classes=[IsAuthenticated])
    def orders(self, request, pk=None):
        serializer = OrderInteractionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = interactions.add_order_interaction(
            product=self.get_object(), user=request.user, **serializer.validated_data
        )
        return Response(OrderRecordSerializer(record).data, status=status.HTTP_201_CREATED)


class ProductionListingFilterSet(filters.FilterSet):
    class Meta:
        model = ProductionListing
        fields = ["category", "sub_category", "work_type", "location", "producer", "is_active"]


@extend_schema_view(
    list=extend_schema(
        summary="List production listings",
        description="Active production listings plus the caller's own.",
        tags=["Listing Endpoints"],
    ),
    retrieve=extend_schema(
        summary="Get production listing",
        description="Counts a view unless the caller owns the listing.",
        tags=["Listing Endpoints"],
    ),
    create=extend_schema(summary="Create production listing", tags=["Listing Endpoints"]),
    update=extend_schema(summary="Replace production listing", tags=["Listing Endpoints"]),
    partial_update=extend_schema(summary="Update production listing", tags=["Listing Endpoints"]),
    destroy=extend_schema(summary="Delete production listing", tags=["Listing Endpoints"]),
)
class ProductionListingViewSet(ListingViewSetMixin, viewsets.ModelViewSet):
    listing_model = ProductionListing
    serializer_class = ProductionListingSerializer
    filterset_class = ProductionListingFilterSet
    ordering_fields = ["created_at", "total_likes", "total_offers", "total_views"]
    search_fields = ["title", "description", "category", "location"]

    def get_queryset(self):
        return selectors.list_production_listings(producer=self.current_producer())

    def retrieve(self, request, *args, **kwargs):
        listing = self.get_object()
        interactions.record_view(listing=listing, user=request.user)
        return Response(self.get_serializer(listing).data)

    @extend_schema(tags=["Listing Endpoints"], summary="Production listing statistics")
    @action(detail=True, methods=["get"], permission_classes=[IsAuthenticated])
    def stats(self, request, pk=None):
        listing = self.get_object()
        lifecycle.ensure_owner(listing, self.current_producer())
        return Response(selectors.production_listing_stats(listing=listing))

    @extend_schema(
        tags=["Listing Endpoints"],
        summary="List (owner) or submit offers",
        request=OfferCreateSerializer,
        responses=OfferSerializer,
    )
    @action(detail=True, methods=["get", "post"], permission_classes=[IsAuthenticated])
    def offers(self, request, pk=None):
        listing = self.get_object()
        if request.method == "GET":
            lifecycle.ensure_owner(listing, self.current_producer())
            page = self.paginate_queryset(selectors.list_offers(listing=listing))
            return self.get_paginated_response(OfferSerializer(page, many=True).data)

        serializer = OfferCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        offer = interactions.add_offer(listing=listing, user=request.user, **serializer.validated_data)
        return Response(OfferSerializer(offer).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Listing Endpoints"], summary="Caller's offer on this listing", responses=OfferSerializer)
    @action(detail=True, methods=["get"], url_path="offer-status", permission_classes=[IsAuthenticated])
    def offer_status(self, request, pk=None):
        offer = selectors.offer_for_user(listing=self.get_object(), user=request.user)
        if offer is None:
            return Response({"has_offer": False, "offer": None})
        return Response({"has_offer": True, "offer": OfferSerializer(offer).data})

    @extend_schema(
        tags=["Listing Endpoints"],
        summary="Accept or reject an offer",
        request=OfferStatusUpdateSerializer,
        responses=OfferSerializer,
    )
    @action(
        detail=True,
        methods=["patch"],
        url_path=r"offers/(?P<offer_id>[0-9]+)/status",
        permission_classes=[IsAuthenticated],
    )
    def set_offer_status(self, request, pk=None, offer_id=None):
        serializer = OfferStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        offer = interactions.update_offer_status(
            listing=self.get_object(),
            offer_id=int(offer_id),
            status=serializer.validated_data["status"],
            producer=self.current_producer(),
        )
        return Response(OfferSerializer(offer).data)


class CommentViewSet(viewsets.GenericViewSet):
    """Reactions and producer replies on product comments."""

    queryset = ProductComment.objects.all()
    serializer_class = CommentSerializer
    lookup_value_regex = "[0-9]+"
    permission_classes = [IsAuthenticated]
    throttle_classes = THROTTLES

    @extend_schema(tags=["Listing Endpoints"], summary="React to a comment", request=CommentReactionSerializer)
    @action(detail=True, methods=["post"])
    def react(self, request, pk=None):
        serializer = CommentReactionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = interactions.react_to_comment(
            comment_id=int(pk), user=request.user, reaction=serializer.validated_data["reaction"]
        )
        return Response(CommentSerializer(comment).data)

    @extend_schema(
        tags=["Listing Endpoints"],
        summary="Reply to a comment",
        description="Only the producer owning the commented product may reply.",
        request=ReplyCreateSerializer,
        responses=CommentReplySerializer,
    )
    @action(detail=True, methods=["post"])
    def reply(self, request, pk=None):
        serializer = ReplyCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reply = interactions.reply_to_comment(
            comment_id=int(pk), producer=require_producer(request.user), text=serializer.validated_data["text"]
        )
        return Response(CommentReplySerializer(reply).data, status=status.HTTP_201_CREATED)
