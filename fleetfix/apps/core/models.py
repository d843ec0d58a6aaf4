from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import models

if TYPE_CHECKING:
    from typing import ClassVar


class TimeStampedMixin(models.Model):
    """Mixin providing created_at and updated_at timestamp fields."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class AbstractMedia(TimeStampedMixin):
    """
    Abstract base class for photos and videos attached to portal submissions.

    Subclasses must:
    1. Define a ForeignKey to their parent model with related_name="media"
    2. Set the `parent_field_name` class attribute (e.g., "report", "submission_item")
    3. Provide an `upload_to` callable for the file field
    """

    # Subclasses must define this to indicate which FK field points to the parent
    parent_field_name: ClassVar[str]

    class MediaType(models.TextChoices):
        PHOTO = "photo", "Photo"
        VIDEO = "video", "Video"

    media_type = models.CharField(max_length=20, choices=MediaType.choices)
    file = models.FileField(max_length=255)  # upload_to set by subclass
    display_order = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        abstract = True
        ordering = ["display_order", "created_at"]

    def __str__(self) -> str:
        return f"{self.get_media_type_display()} {self.file.name}"

    @property
    def is_video(self) -> bool:
        return self.media_type == self.MediaType.VIDEO

    def get_parent(self):
        """Return the parent object this media is attached to."""
        return getattr(self, self.parent_field_name)
