"""Image utilities - probing, listing, natural size lookup."""

from __future__ import annotations
import os
import struct
from typing import Optional, Tuple, List

from PIL import Image, UnidentifiedImageError

from .config import IMG_EXTS, MAX_FILE_SIZE_MB
from .errors import ImageLoadError
from .types import ImageInfo


def probe_image_dimensions(filepath: str) -> Optional[Tuple[int, int]]:
    """Quickly read image dimensions from file header without decoding the image.

    Args:
        filepath: Path to image file.

    Returns:
        Tuple of (width, height) or None if unable to determine.
    """
    ext = os.path.splitext(filepath)[1].lower()
    try:
        with open(filepath, 'rb') as f:
            header = f.read(64 * 1024)
    except OSError:
        return None

    if ext in ('.jpg', '.jpeg'):
        return _probe_jpeg(header)
    elif ext == '.png':
        return _probe_png(header)
    return None


def _probe_jpeg(data: bytes) -> Optional[Tuple[int, int]]:
    """Extract dimensions from JPEG header."""
    i = 0
    while i + 9 < len(data):
        if data[i] == 0xFF:
            marker = data[i + 1]
            # SOF markers contain dimensions
            if marker in (0xC0, 0xC1, 0xC2, 0xC3):
                height = struct.unpack('>H', data[i + 5:i + 7])[0]
                width = struct.unpack('>H', data[i + 7:i + 9])[0]
                return (width, height)
            elif marker not in (0x00, 0xFF, 0xD8) and i + 3 < len(data):
                seg_len = struct.unpack('>H', data[i + 2:i + 4])[0]
                i += 2 + seg_len
            else:
                i += 1
        else:
            i += 1
    return None


def _probe_png(data: bytes) -> Optional[Tuple[int, int]]:
    """Extract dimensions from PNG header."""
    if len(data) < 24 or data[:8] != b'\x89PNG\r\n\x1a\n':
        return None
    width = struct.unpack('>I', data[16:20])[0]
    height = struct.unpack('>I', data[20:24])[0]
    return (width, height)


def get_file_size_mb(filepath: str) -> float:
    """Get file size in megabytes."""
    try:
        return os.path.getsize(filepath) / (1024 * 1024)
    except OSError:
        return 0.0


def read_image_info(href: str) -> ImageInfo:
    """Natural size of the image at href.

    The header probe handles PNG/JPEG; everything else is opened with Pillow
    (which only reads the header until pixel data is requested).

    Raises:
        ImageLoadError: if the file is missing, too large or not an image.
    """
    if not os.path.isfile(href):
        raise ImageLoadError(href, "no such file")
    size_mb = get_file_size_mb(href)
    if size_mb > MAX_FILE_SIZE_MB:
        raise ImageLoadError(href, f"file too large: {size_mb:.1f}MB")

    dims = probe_image_dimensions(href)
    if dims is None:
        try:
            with Image.open(href) as img:
                dims = img.size
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise ImageLoadError(href, str(e)) from e

    w, h = dims
    if w <= 0 or h <= 0:
        raise ImageLoadError(href, "empty image")
    return ImageInfo(href=href, width=int(w), height=int(h))


def list_images(dirpath: str) -> List[str]:
    """List all supported image files in directory, sorted by name.

    Args:
        dirpath: Directory path to scan.

    Returns:
        List of full paths to image files.
    """
    try:
        names = sorted(os.listdir(dirpath))
    except OSError:
        return []

    result = []
    for name in names:
        path = os.path.join(dirpath, name)
        if os.path.isfile(path) and is_supported_image(name):
            result.append(path)
    return result


def is_supported_image(filepath: str) -> bool:
    """Check if file has a supported image extension."""
    ext = os.path.splitext(filepath)[1].lower()
    return ext in IMG_EXTS
