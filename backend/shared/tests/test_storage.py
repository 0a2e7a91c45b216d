"""Tests for local still storage."""

import stat

import pytest

from shared.storage import MAX_STILL_BYTES, LocalStillStorage, StillRejectedError

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def storage(tmp_path):
    return LocalStillStorage(tmp_path / "stills", "/stills/")


class TestValidate:
    @pytest.mark.parametrize(
        ("content_type", "ext"),
        [("image/jpeg", "jpg"), ("image/png", "png"), ("image/webp", "webp"), ("image/gif", "gif")],
    )
    def test_allowed_types(self, storage, content_type, ext):
        assert storage.validate(content_type, 10) == ext

    @pytest.mark.parametrize("content_type", ["image/svg+xml", "text/plain", None])
    def test_rejects_other_types(self, storage, content_type):
        with pytest.raises(StillRejectedError, match="Invalid file type. Allowed: JPEG, PNG, WebP, GIF"):
            storage.validate(content_type, 10)

    def test_size_limit_is_inclusive(self, storage):
        storage.validate("image/png", MAX_STILL_BYTES)
        with pytest.raises(StillRejectedError, match="File too large. Maximum size: 5MB"):
            storage.validate("image/png", MAX_STILL_BYTES + 1)

    def test_rejection_is_a_value_error(self, storage):
        with pytest.raises(ValueError):
            storage.validate("application/pdf", 1)


class TestSaveStill:
    def test_writes_file_under_random_name(self, storage):
        stored = storage.save_still(PNG_BYTES, content_type="image/png", filename="Season 3 Episode 12.PNG")

        name = stored.path.removeprefix("stills/")
        assert stored.url == f"/stills/{name}"
        stem, ext = name.split(".")
        assert ext == "png"
        assert len(stem) == 32
        assert "Season" not in name
        assert (storage.stills_dir / name).read_bytes() == PNG_BYTES

    def test_falls_back_to_content_type_extension(self, storage):
        stored = storage.save_still(PNG_BYTES, content_type="image/jpeg", filename="blob")
        assert stored.path.endswith(".jpg")

    def test_names_are_unique(self, storage):
        first = storage.save_still(PNG_BYTES, content_type="image/png")
        second = storage.save_still(PNG_BYTES, content_type="image/png")
        assert first.path != second.path

    def test_file_is_world_readable(self, storage):
        stored = storage.save_still(PNG_BYTES, content_type="image/png")
        path = storage.stills_dir / stored.path.removeprefix("stills/")
        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_rejected_upload_writes_nothing(self, storage):
        with pytest.raises(StillRejectedError):
            storage.save_still(b"<svg/>", content_type="image/svg+xml", filename="x.svg")
        assert not storage.stills_dir.exists() or list(storage.stills_dir.iterdir()) == []

    def test_custom_limit(self, tmp_path):
        storage = LocalStillStorage(tmp_path, "/media", max_bytes=4)
        with pytest.raises(StillRejectedError):
            storage.save_still(PNG_BYTES, content_type="image/png")
