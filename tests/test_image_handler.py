"""Tests for image loading and measurement."""

import base64

import pytest
import requests

from deckforge.image_handler import ImageHandler


class FakeResponse:
    def __init__(self, content: bytes, content_type: str = 'image/png', status: int = 200):
        self.content = content
        self.headers = {'content-type': content_type}
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.exceptions.HTTPError(f"{self.status} error")

    def iter_content(self, chunk_size=8192):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start:start + chunk_size]


@pytest.fixture
def trusted_handler(tmp_path) -> ImageHandler:
    return ImageHandler(cache_dir=str(tmp_path / 'trusted_cache'), allow_remote=True)


class TestLoad:
    """Tests for resolving image sources."""

    def test_data_uri(self, image_handler, png_bytes, logo_data_uri):
        assert image_handler.load(logo_data_uri) == png_bytes

    def test_data_uri_without_base64(self, image_handler):
        assert image_handler.load('data:image/svg+xml,<svg/>') is None

    def test_paths_and_urls_need_opt_in(self, image_handler, png_bytes, tmp_path, monkeypatch):
        path = tmp_path / 'logo.png'
        path.write_bytes(png_bytes)
        calls = []
        monkeypatch.setattr(image_handler.session, 'get',
                            lambda url, timeout, stream: calls.append(url))

        assert image_handler.load(str(path)) is None
        assert image_handler.load('http://169.254.169.254/latest/meta-data') is None
        assert calls == []

    def test_local_file(self, trusted_handler, png_bytes, tmp_path):
        path = tmp_path / 'logo.png'
        path.write_bytes(png_bytes)
        assert trusted_handler.load(str(path)) == png_bytes

    def test_missing_file(self, trusted_handler):
        assert trusted_handler.load('/does/not/exist.png') is None
        assert trusted_handler.load(None) is None
        assert trusted_handler.load('') is None

    def test_download_is_cached(self, trusted_handler, png_bytes, monkeypatch):
        calls = []

        def fake_get(url, timeout, stream):
            calls.append(url)
            return FakeResponse(png_bytes)

        monkeypatch.setattr(trusted_handler.session, 'get', fake_get)
        url = 'https://example.com/brand/logo.png'

        assert trusted_handler.load(url) == png_bytes
        assert trusted_handler.load(url) == png_bytes
        assert calls == [url]
        assert trusted_handler.get_cache_path(url).suffix == '.png'

    def test_download_failure(self, trusted_handler, monkeypatch):
        monkeypatch.setattr(trusted_handler.session, 'get',
                            lambda url, timeout, stream: FakeResponse(b'', status=404))
        assert trusted_handler.load('https://example.com/missing.png') is None


class TestMeasure:
    """Tests for dimensions, fitting and palette sampling."""

    def test_image_info(self, png_bytes):
        assert ImageHandler.get_image_info(png_bytes) == (40, 20)
        assert ImageHandler.get_image_info(b'garbage') is None

    def test_contain_box_wide_image(self):
        left, top, width, height = ImageHandler.contain_box(200, 100, 1, 1, 2, 2)
        assert (left, top, width, height) == (1, 1.5, 2, 1)

    def test_contain_box_tall_image(self):
        left, top, width, height = ImageHandler.contain_box(50, 100, 0, 0, 4, 2)
        assert (left, top, width, height) == (1.5, 0, 1, 2)

    def test_contain_box_degenerate(self):
        assert ImageHandler.contain_box(0, 0, 1, 2, 3, 4) == (1, 2, 3, 4)

    def test_sample_palette(self, png_bytes):
        assert ImageHandler.sample_palette(png_bytes) == ['#ff0000', '#008000', '#0000ff']

    def test_sample_palette_garbage(self):
        assert ImageHandler.sample_palette(base64.b64decode('AAAA')) == []
