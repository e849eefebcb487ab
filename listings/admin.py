"""Admin registration for listings models."""

from django.contrib import admin
from django.utils import timezone

from .lifecycle import stamp_activation
from .models import (
    CommentReply,
    Product,
    ProductComment,
    ProductionListing,
    ProductionOffer,
    ProductOrderRecord,
    ProductVariant,
)


class ProductVariantInline(admin.TabularInline):
    model = ProductVariant
    extra = 0
    fields = ("size", "color", "price", "stock")


class ListingAdmin(admin.ModelAdmin):
    list_filter = ("is_active", "auto_deactivate_enabled")
    readonly_fields = ("last_activated_at", "auto_deactivate_at", "total_likes", "created_at", "updated_at")
    raw_id_fields = ("producer",)
    actions = ["activate_selected", "deactivate_selected"]

    @admin.action(description="Activate selected listings (restart expiry window)")
    def activate_selected(self, request, queryset):
        now = timezone.now()
        for listing in queryset:
            stamp_activation(listing, now)
            listing.save(update_fields=["is_active", "last_activated_at", "auto_deactivate_at", "updated_at"])

    @admin.action(description="Deactivate selected listings")
    def deactivate_selected(self, request, queryset):
        queryset.update(is_active=False)


@admin.register(Product)
class ProductAdmin(ListingAdmin):
    list_display = ("name", "producer", "price", "available_quantity", "is_active", "auto_deactivate_at")
    search_fields = ("name", "category", "producer__company_name")
    list_filter = ListingAdmin.list_filter + ("category", "is_featured")
    inlines = [ProductVariantInline]


@admin.register(ProductionListing)
class ProductionListingAdmin(ListingAdmin):
    list_display = ("title", "producer", "work_type", "total_offers", "is_active", "auto_deactivate_at")
    search_fields = ("title", "category", "producer__company_name")
    list_filter = ListingAdmin.list_filter + ("work_type",)


class CommentReplyInline(admin.TabularInline):
    model = CommentReply
    extra = 0
    raw_id_fields = ("producer",)


@admin.register(ProductComment)
class ProductCommentAdmin(admin.ModelAdmin):
    list_display = ("id", "listing", "user", "rating", "created_at")
    list_filter = ("rating",)
    raw_id_fields = ("listing", "user")
    inlines = [CommentReplyInline]


@admin.register(ProductionOffer)
class ProductionOfferAdmin(admin.ModelAdmin):
    list_display = ("reference", "listing", "user", "price", "currency", "status", "created_at")
    list_filter = ("status", "currency")
    search_fields = ("reference",)
    raw_id_fields = ("listing", "user")


@admin.register(ProductOrderRecord)
class ProductOrderRecordAdmin(admin.ModelAdmin):
    list_display = ("reference", "listing", "user", "quantity", "total_price", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("reference",)
    raw_id_fields = ("listing", "user", "variant")
