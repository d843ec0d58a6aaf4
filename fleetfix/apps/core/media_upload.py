"""Media upload orchestration.

Writes uploaded files to storage under a caller-chosen folder and creates
the matching media rows. Storage writes are not transactional, so the
uploader remembers every path it wrote and can delete them again when the
surrounding database transaction rolls back.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from django.core.files.storage import Storage, default_storage
from django.core.files.uploadedfile import UploadedFile

from fleetfix.apps.core.media import is_video_file, max_bytes_for

logger = logging.getLogger(__name__)


class UploadFailure(Exception):
    """Storage rejected or failed to write an uploaded file."""


class MediaUploader:
    """Attach uploaded files to a parent row, tracking what was written to storage.

    Use one uploader per submission::

        uploader = MediaUploader()
        try:
            with transaction.atomic():
                ...
                uploader.attach(files, parent=report, media_model=DefectReportMedia, folder=...)
        except Exception:
            uploader.discard()
            raise
    """

    def __init__(self, storage: Storage | None = None):
        self.storage = storage or default_storage
        self.stored_paths: list[str] = []

    def store(self, uploaded_file: UploadedFile, folder: str) -> str:
        max_bytes = max_bytes_for(uploaded_file)
        if uploaded_file.size and uploaded_file.size > max_bytes:
            raise UploadFailure(
                f"{uploaded_file.name} exceeds the {max_bytes // (1024 * 1024)}MB upload limit"
            )

        ext = Path(uploaded_file.name or "").suffix.lower()
        target = f"{folder.strip('/')}/{uuid.uuid4().hex}{ext}"
        try:
            uploaded_file.seek(0)
            path = self.storage.save(target, uploaded_file)
        except OSError as err:
            raise UploadFailure(f"Could not store {uploaded_file.name}") from err

        self.stored_paths.append(path)
        return path

    def attach(
        self,
        media_files: Sequence[UploadedFile],
        *,
        parent: object,
        media_model: type[Any],
        folder: str,
    ) -> list[Any]:
        """Store each file and create a ``media_model`` row pointing at ``parent``.

        ``media_model`` must be a concrete ``AbstractMedia`` subclass. Must be
        called inside ``transaction.atomic()``.
        """
        created: list[Any] = []
        for order, media_file in enumerate(media_files):
            path = self.store(media_file, folder)
            media = media_model(
                **{media_model.parent_field_name: parent},
                media_type=(
                    media_model.MediaType.VIDEO
                    if is_video_file(media_file)
                    else media_model.MediaType.PHOTO
                ),
                display_order=order,
            )
            media.file.name = path
            media.save()
            created.append(media)
        return created

    def discard(self) -> None:
        """Delete every file this uploader wrote."""
        for path in self.stored_paths:
            try:
                self.storage.delete(path)
            except OSError:
                logger.warning("media_cleanup_failed", extra={"path": path}, exc_info=True)
        if self.stored_paths:
            logger.info("media_discarded", extra={"count": len(self.stored_paths)})
        self.stored_paths = []
