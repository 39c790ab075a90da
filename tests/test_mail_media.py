from datetime import date
from decimal import Decimal

import pytest
import requests

from hotelbook.config import settings
from hotelbook.services import mail, media

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class TestMail:
    def test_skips_when_mailgun_is_not_configured(self, monkeypatch):
        monkeypatch.setattr(settings, "MAILGUN_API_KEY", "")
        assert mail.send_email("guest@example.com", "Hi", "<p>Hi</p>") is False

    def test_confirmation_is_posted_to_mailgun(self, monkeypatch):
        monkeypatch.setattr(settings, "MAILGUN_API_KEY", "key-123")
        monkeypatch.setattr(settings, "MAILGUN_DOMAIN", "mg.example.com")
        sent = {}

        class FakeResponse:
            def raise_for_status(self):
                pass

        def fake_post(url, auth, data, timeout):
            sent.update(url=url, auth=auth, data=data)
            return FakeResponse()

        monkeypatch.setattr(mail.requests, "post", fake_post)

        ok = mail.send_booking_confirmation_email(
            "guest@example.com", "HB-1A2B3C4D", "Ada Lovelace",
            date(2024, 6, 10), date(2024, 6, 13), "Seaside", Decimal("1268.80"),
        )

        assert ok is True
        assert sent["url"] == "https://api.mailgun.net/v3/mg.example.com/messages"
        assert sent["auth"] == ("api", "key-123")
        assert sent["data"]["to"] == ["guest@example.com"]
        assert "HB-1A2B3C4D" in sent["data"]["subject"]
        assert "1,268.80" in sent["data"]["html"]
        assert "Seaside" in sent["data"]["html"]

    def test_transport_errors_are_reported_not_raised(self, monkeypatch):
        monkeypatch.setattr(settings, "MAILGUN_API_KEY", "key-123")
        monkeypatch.setattr(settings, "MAILGUN_DOMAIN", "mg.example.com")

        def failing_post(*args, **kwargs):
            raise requests.exceptions.ConnectionError("down")

        monkeypatch.setattr(mail.requests, "post", failing_post)

        assert mail.send_email("guest@example.com", "Hi", "<p>Hi</p>") is False


class TestMedia:
    @pytest.mark.parametrize(
        "data, kind",
        [
            (PNG, "png"),
            (b"\xFF\xD8\xFF" + b"\x00" * 16, "jpg"),
            (b"GIF89a" + b"\x00" * 16, "gif"),
            (b"RIFF\x00\x00\x00\x00WEBP" + b"\x00" * 8, "webp"),
            (b"%PDF-1.7" + b"\x00" * 16, None),
            (b"", None),
        ],
    )
    def test_sniff_image_type(self, data, kind):
        assert media.sniff_image_type(data) == kind

    def test_saves_locally_without_cloudinary(self, monkeypatch, tmp_path):
        monkeypatch.setattr(media, "UPLOAD_DIR", tmp_path)
        monkeypatch.setattr(settings, "CLOUDINARY_URL", "")
        monkeypatch.delenv("CLOUDINARY_URL", raising=False)

        url = media.save_image(PNG, "room.png", folder="hotelbook/rooms")

        assert url.startswith("/static/uploads/hotelbook_rooms/")
        assert url.endswith(".png")
        stored = tmp_path / "hotelbook_rooms" / url.rsplit("/", 1)[1]
        assert stored.read_bytes() == PNG

    def test_rejects_non_images_and_oversized_files(self, monkeypatch, tmp_path):
        monkeypatch.setattr(media, "UPLOAD_DIR", tmp_path)
        assert media.save_image(b"not an image at all", "x.txt") is None
        monkeypatch.setattr(settings, "UPLOAD_IMAGE_MAX_BYTES", 8)
        assert media.save_image(PNG, "room.png") is None
