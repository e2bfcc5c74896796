from django.contrib import admin

from .models import ArchiveImport


@admin.register(ArchiveImport)
class ArchiveImportAdmin(admin.ModelAdmin):
    list_display = ("id", "username", "account_id", "burner", "status", "imported_count", "next_offset", "updated_at")
    list_filter = ("status",)
    search_fields = ("username", "account_id", "burner__codename")
    ordering = ("-created_at",)
    readonly_fields = ("next_offset", "imported_count", "skipped_count", "error", "created_at", "updated_at")
