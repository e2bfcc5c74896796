from django.contrib import admin

from .models import IdentityGuess


@admin.register(IdentityGuess)
class IdentityGuessAdmin(admin.ModelAdmin):
    list_display = ("id", "post", "guesser", "guessed_user", "is_correct", "created_at")
    list_filter = ("is_correct",)
    search_fields = ("guesser__username", "guessed_user__username")
    ordering = ("-created_at",)

    def has_change_permission(self, request, obj=None):
        return False
