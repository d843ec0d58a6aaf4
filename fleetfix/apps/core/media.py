"""Media type configuration and upload limits.

Single source of truth for what operators may attach to portal submissions:
- accepted extensions for photos and videos
- per-file size caps (images 10MB, videos 80MB)
- per-report and per-checklist-item count caps
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from django.core.files.uploadedfile import UploadedFile

ALLOWED_VIDEO_EXTENSIONS = {".mp4", ".mov", ".m4v", ".webm", ".hevc"}
ALLOWED_HEIC_EXTENSIONS = {".heic", ".heif"}
ALLOWED_PHOTO_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"} | ALLOWED_HEIC_EXTENSIONS

MEDIA_ACCEPT_ATTR = "image/*,video/*,.heic,.heif,image/heic,image/heif"

MB = 1024 * 1024
IMAGE_MAX_BYTES = 10 * MB
VIDEO_MAX_BYTES = 80 * MB


@dataclass(frozen=True)
class MediaLimits:
    """How many attachments a single report or checklist item may carry."""

    max_files: int
    max_videos: int
    max_photos: int | None = None


DEFECT_REPORT_LIMITS = MediaLimits(max_files=7, max_photos=5, max_videos=2)
PRESTART_ITEM_LIMITS = MediaLimits(max_files=5, max_videos=2)


def is_video_file(uploaded_file: UploadedFile) -> bool:
    """Check if an uploaded file is a video based on content type and extension."""
    content_type = (getattr(uploaded_file, "content_type", "") or "").lower()
    ext = Path(getattr(uploaded_file, "name", "")).suffix.lower()
    return content_type.startswith("video/") or ext in ALLOWED_VIDEO_EXTENSIONS


def max_bytes_for(uploaded_file: UploadedFile) -> int:
    return VIDEO_MAX_BYTES if is_video_file(uploaded_file) else IMAGE_MAX_BYTES


def count_media(files: Sequence[UploadedFile]) -> tuple[int, int]:
    """Return ``(photos, videos)`` for a list of uploads."""
    videos = sum(1 for f in files if is_video_file(f))
    return len(files) - videos, videos


def media_limit_error(
    files: Sequence[UploadedFile], limits: MediaLimits, label: str = ""
) -> str | None:
    """Return the user-facing message for the first limit ``files`` breaks, or None.

    ``label`` prefixes per-item messages ("Hydraulics can include up to 2 videos");
    report-level messages use the "Up to N photos are allowed" form.
    """
    photos, videos = count_media(files)
    if label:
        if len(files) > limits.max_files:
            return f"{label} can include up to {limits.max_files} files"
        if videos > limits.max_videos:
            return f"{label} can include up to {limits.max_videos} videos"
        return None

    if limits.max_photos is not None and photos > limits.max_photos:
        return f"Up to {limits.max_photos} photos are allowed"
    if videos > limits.max_videos:
        return f"Up to {limits.max_videos} videos are allowed"
    return None
