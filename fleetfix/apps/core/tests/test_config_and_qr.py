"""Tests for portal configuration and QR code generation."""

import base64

from django.test import SimpleTestCase, TestCase, override_settings, tag

from fleetfix.apps.core.config import PortalConfig, get_portal_config
from fleetfix.apps.core.qr import (
    equipment_portal_url,
    generate_qr_code,
    generate_qr_code_base64,
    generate_qr_code_png,
)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@tag("unit")
class PortalConfigTests(TestCase):
    def setUp(self):
        get_portal_config.cache_clear()

    @override_settings(
        SITE_URL="https://fleet.example.com/",
        QR_MEDIA_BUCKET="qr",
        PRESTART_MEDIA_BUCKET="checks",
    )
    def test_reads_settings_and_strips_trailing_slash(self):
        config = get_portal_config()
        self.assertEqual(
            config,
            PortalConfig(
                site_url="https://fleet.example.com",
                qr_media_bucket="qr",
                prestart_media_bucket="checks",
            ),
        )

    def test_settings_change_resets_cached_config(self):
        with override_settings(SITE_URL="https://one.example.com"):
            self.assertEqual(get_portal_config().site_url, "https://one.example.com")
        with override_settings(SITE_URL="https://two.example.com"):
            self.assertEqual(get_portal_config().site_url, "https://two.example.com")


@tag("unit")
class QRCodeTests(SimpleTestCase):
    def test_portal_url_uses_site_url(self):
        config = PortalConfig("https://fleet.example.com", "qr", "checks")
        self.assertEqual(equipment_portal_url(config, 42), "https://fleet.example.com/qr/42/")

    def test_png_output(self):
        png = generate_qr_code_png("https://fleet.example.com/qr/1/")
        self.assertTrue(png.startswith(PNG_SIGNATURE))

    def test_base64_decodes_to_png(self):
        encoded = generate_qr_code_base64("https://fleet.example.com/qr/1/")
        self.assertTrue(base64.b64decode(encoded).startswith(PNG_SIGNATURE))

    def test_bulk_box_size_produces_smaller_image(self):
        url = "https://fleet.example.com/qr/1/"
        self.assertLess(generate_qr_code(url, box_size=6).size, generate_qr_code(url).size)
