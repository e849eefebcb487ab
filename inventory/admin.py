"""Admin registrations for inventory app."""

from django.contrib import admin

from .models import StockMovement


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ("id", "product", "variant", "movement_type", "quantity", "reason", "reference", "created_at")
    list_filter = ("movement_type",)
    search_fields = ("product__name", "reference")
    readonly_fields = ("product", "variant", "movement_type", "quantity", "reason", "reference")
