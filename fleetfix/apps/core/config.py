"""Portal configuration.

Deployment values the portal needs (public base URL for QR codes and the
storage folders for uploaded media) are collected once into an immutable
``PortalConfig`` and handed to the components that use them.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from django.conf import settings


@dataclass(frozen=True)
class PortalConfig:
    site_url: str
    qr_media_bucket: str
    prestart_media_bucket: str

    @classmethod
    def from_settings(cls) -> PortalConfig:
        return cls(
            site_url=settings.SITE_URL.rstrip("/"),
            qr_media_bucket=settings.QR_MEDIA_BUCKET,
            prestart_media_bucket=settings.PRESTART_MEDIA_BUCKET,
        )


@lru_cache(maxsize=1)
def get_portal_config() -> PortalConfig:
    """Return the process-wide portal configuration, read from settings on first use."""
    return PortalConfig.from_settings()


def _reset_portal_config(**kwargs) -> None:
    get_portal_config.cache_clear()
