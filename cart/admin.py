"""Admin registration for cart models.

Carts show their lines inline; totals are read-only because the cart
services derive them.
"""

from common.exceptions import MarketplaceError
from django.contrib import admin, messages

from .models import Cart, CartItem
from .services import clear_cart


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    fields = ("product", "variant", "size", "color", "quantity", "unit_price", "total_price")
    readonly_fields = ("unit_price", "total_price")
    raw_id_fields = ("product", "variant")


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "item_count", "total_amount", "updated_at")
    search_fields = ("user__username", "user__email")
    ordering = ("-updated_at",)
    readonly_fields = ("item_count", "total_amount", "created_at", "updated_at")
    inlines = [CartItemInline]
    list_select_related = ("user",)
    actions = ["action_clear_cart"]

    @admin.action(description="Clear cart")
    def action_clear_cart(self, request, queryset):
        cleared = 0
        for cart in queryset.select_related("user"):
            try:
                clear_cart(user=cart.user)
            except MarketplaceError as exc:
                messages.error(request, f"Cart #{cart.id}: {exc.detail}")
                continue
            cleared += 1
        if cleared:
            messages.success(request, f"Cleared {cleared} cart(s).")


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("id", "cart", "product", "size", "color", "quantity", "total_price", "updated_at")
    search_fields = ("product__name", "cart__user__email")
    ordering = ("id",)
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("cart", "product", "variant")
