"""
This module contains the ImageHandler class for loading theme logos.
"""
import base64
import binascii
import hashlib
import io
import logging
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import urlparse

import requests
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Relative sample points used to suggest primary, secondary and accent colours
PALETTE_SAMPLE_POINTS = ((0.1, 0.1), (0.5, 0.5), (0.9, 0.1))


class ImageHandler:
    """Loads images from data URIs and, when allowed, from URLs or files"""

    def __init__(self, cache_dir: str = ".image_cache", allow_remote: bool = False):
        """
        Initialize the image handler

        Args:
            cache_dir: Directory to cache downloaded images
            allow_remote: Also resolve http(s) URLs and local paths; only
                for trusted sources, request data stays data-URI only
        """
        self.cache_dir = Path(cache_dir)
        self.allow_remote = allow_remote
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': 'Mozilla/5.0 (compatible; DeckForge/1.0)'
        })

    def get_cache_path(self, url: str) -> Path:
        """
        Generate cache file path for a given URL

        Args:
            url: The image URL

        Returns:
            Path to the cache file
        """
        url_hash = hashlib.md5(url.encode()).hexdigest()

        path = urlparse(url).path
        ext = path.rsplit('.', 1)[-1].lower() if '.' in path else 'png'
        if ext not in ['jpg', 'jpeg', 'png', 'gif', 'bmp', 'webp']:
            ext = 'png'

        return self.cache_dir / f"{url_hash}.{ext}"

    def load(self, source: Optional[str]) -> Optional[bytes]:
        """
        Resolve an image reference to raw bytes

        Args:
            source: ``data:`` URI, or an http(s) URL or local file path
                when remote sources are allowed

        Returns:
            Image bytes, or None if the source is empty or unreadable
        """
        if not source:
            return None
        if source.startswith('data:'):
            return self.decode_data_uri(source)
        if not self.allow_remote:
            logger.warning("Ignoring non-embedded image source: %s", source[:60])
            return None
        if source.startswith(('http://', 'https://')):
            path = self.download_image(source)
            return path.read_bytes() if path else None

        path = Path(source)
        try:
            if path.is_file():
                return path.read_bytes()
        except OSError as e:
            logger.warning("Could not read image file %s: %s", source[:60], e)
            return None
        logger.warning("Image source not found: %s", source[:60])
        return None

    @staticmethod
    def decode_data_uri(uri: str) -> Optional[bytes]:
        """Decode a base64 ``data:`` URI"""
        header, _, payload = uri.partition(',')
        if ';base64' not in header:
            logger.warning("Unsupported data URI encoding: %s", header[:40])
            return None
        try:
            return base64.b64decode(payload, validate=False)
        except (binascii.Error, ValueError) as e:
            logger.warning("Could not decode data URI: %s", e)
            return None

    def download_image(self, url: str) -> Optional[Path]:
        """
        Download an image from URL and cache it

        Args:
            url: The image URL to download

        Returns:
            Path to the downloaded image file, or None if failed
        """
        cache_path = self.get_cache_path(url)

        if cache_path.exists():
            logger.info("Using cached image: %s", cache_path.name)
            return cache_path

        try:
            logger.info("Downloading image from: %s", url)
            response = self.session.get(url, timeout=30, stream=True)
            response.raise_for_status()

            content_type = response.headers.get('content-type', '')
            if not content_type.startswith('image/'):
                logger.warning("URL does not appear to be an image: %s", content_type)

            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with open(cache_path, 'wb') as f:
                for chunk in response.iter_content(chunk_size=8192):
                    if chunk:
                        f.write(chunk)

            logger.info("Image downloaded successfully: %s", cache_path.name)
            return cache_path

        except requests.exceptions.RequestException as e:
            logger.error("Error downloading image from %s: %s", url, str(e))
            return None

    @staticmethod
    def get_image_info(data: bytes) -> Optional[Tuple[int, int]]:
        """
        Get image dimensions

        Args:
            data: Raw image bytes

        Returns:
            Tuple of (width, height) or None if the bytes are not an image
        """
        try:
            with Image.open(io.BytesIO(data)) as img:
                return img.size
        except (UnidentifiedImageError, OSError) as e:
            logger.error("Error reading image info: %s", str(e))
            return None

    @staticmethod
    def contain_box(image_width: float, image_height: float,
                    left: float, top: float,
                    max_width: float, max_height: float) -> Tuple[float, float, float, float]:
        """
        Fit an image inside a box keeping its aspect ratio, centred

        Returns:
            Tuple of (left, top, width, height) in the box's units
        """
        if image_width <= 0 or image_height <= 0:
            return (left, top, max_width, max_height)

        scale = min(max_width / image_width, max_height / image_height)
        width = image_width * scale
        height = image_height * scale
        return (left + (max_width - width) / 2, top + (max_height - height) / 2, width, height)

    @staticmethod
    def sample_palette(data: bytes) -> List[str]:
        """
        Suggest theme colours by sampling pixels of a logo

        Returns:
            Hex colours sampled at the top-left, centre and top-right
            areas, or an empty list if the bytes are not an image
        """
        try:
            with Image.open(io.BytesIO(data)) as img:
                rgb = img.convert('RGB')
                width, height = rgb.size
                colors = []
                for rel_x, rel_y in PALETTE_SAMPLE_POINTS:
                    x = min(int(width * rel_x), width - 1)
                    y = min(int(height * rel_y), height - 1)
                    red, green, blue = rgb.getpixel((x, y))
                    colors.append(f"#{red:02x}{green:02x}{blue:02x}")
                return colors
        except (UnidentifiedImageError, OSError) as e:
            logger.error("Error sampling logo colours: %s", str(e))
            return []
