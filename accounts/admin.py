from django.contrib import admin

from .models import InviteCode, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("id", "username", "is_admin", "has_post_access", "created_at", "last_login")
    list_filter = ("is_admin", "has_post_access")
    search_fields = ("username",)
    ordering = ("id",)
    exclude = ("password",)
    readonly_fields = ("created_at", "last_login")


@admin.register(InviteCode)
class InviteCodeAdmin(admin.ModelAdmin):
    list_display = ("code", "created_by", "used_by", "created_at", "used_at")
    list_filter = ("used_at",)
    search_fields = ("code", "created_by__username", "used_by__username")
    ordering = ("-created_at",)
    readonly_fields = ("used_by", "used_at")
