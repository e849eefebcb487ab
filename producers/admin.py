from django.contrib import admin

from .models import Producer


@admin.register(Producer)
class ProducerAdmin(admin.ModelAdmin):
    list_display = ("id", "company_name", "user", "city", "is_verified", "created_at")
    list_filter = ("is_verified", "city")
    search_fields = ("company_name", "tax_id_number", "user__username", "user__email")
    raw_id_fields = ("user",)
