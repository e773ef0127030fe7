import pytest

from civic_reporter import media
from civic_reporter.errors import ValidationFailure


def test_image_saved_under_owner_folder(tmp_path):
    key = media.save_issue_image("user/../1", b"data", "photo.JPG", "image/jpeg", root=tmp_path)

    assert key.startswith("issue-images/user____1/")
    assert key.endswith(".jpg")
    assert (tmp_path / key).read_bytes() == b"data"
    assert media.public_url(key) == f"/media/{key}"


def test_extension_ignores_client_filename(tmp_path):
    key = media.save_issue_image("u1", b"<script>alert(1)</script>", "evil.html", "image/png", root=tmp_path)
    assert key.endswith(".png")
    assert not list(tmp_path.rglob("*.html"))


def test_extension_from_content_type():
    assert media.image_extension("image/webp") == "webp"
    assert media.image_extension("IMAGE/JPEG") == "jpg"


@pytest.mark.parametrize("content_type", ["image/svg+xml", "image/unknown", "text/html"])
def test_unlisted_types_rejected(content_type):
    with pytest.raises(ValidationFailure):
        media.image_extension(content_type)


def test_too_large(tmp_path):
    with pytest.raises(ValidationFailure):
        media.save_issue_image("u1", b"x" * (media.MAX_IMAGE_BYTES + 1), "a.png", "image/png", root=tmp_path)


def test_non_image(tmp_path):
    with pytest.raises(ValidationFailure):
        media.save_issue_image("u1", b"x", "a.exe", "application/octet-stream", root=tmp_path)
