from django.contrib import admin
from django.utils import timezone

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "type", "title", "is_read", "created_at")
    list_filter = ("type", "is_read")
    search_fields = ("title", "message", "user__username", "user__email")
    raw_id_fields = ("user",)
    readonly_fields = ("created_at", "read_at")
    actions = ["mark_selected_read"]

    @admin.action(description="Mark selected notifications as read")
    def mark_selected_read(self, request, queryset):
        updated = queryset.filter(is_read=False).update(is_read=True, read_at=timezone.now())
        self.message_user(request, f"Marked {updated} notification(s) as read.")
