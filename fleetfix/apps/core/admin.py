from django.contrib import admin


class MediaInline(admin.TabularInline):
    """Base inline for models that inherit from AbstractMedia.

    Subclasses need only set ``model``.
    """

    extra = 0
    fields = ("media_type", "file", "display_order", "created_at")
    readonly_fields = ("created_at",)
