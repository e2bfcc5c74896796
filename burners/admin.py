from django.contrib import admin

from .models import BurnerProfile, Post


@admin.register(BurnerProfile)
class BurnerProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "codename", "user", "is_active", "is_ai", "is_archive", "post_count", "last_post_at")
    list_filter = ("is_active", "is_ai", "is_archive")
    search_fields = ("codename", "user__username", "personality")
    ordering = ("-created_at",)
    readonly_fields = ("post_count", "last_post_at", "created_at")


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ("id", "burner", "created_at")
    list_filter = ("burner__is_ai",)
    search_fields = ("original_content", "transformed_content", "burner__codename")
    ordering = ("-created_at",)

    def has_change_permission(self, request, obj=None):
        return False
