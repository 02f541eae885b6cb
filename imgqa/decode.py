"""
Image decoding collaborator: turns payloads into RGBA pixel buffers.
"""
from __future__ import annotations

import base64
import binascii
import math
from io import BytesIO
from typing import Optional
from urllib.error import URLError
from urllib.request import Request, urlopen

from PIL import Image

from .buffer import PixelBuffer
from .config import settings
from .errors import DecodeFailure


def buffer_from_image(image: Image.Image, max_pixels: Optional[int] = None) -> PixelBuffer:
    rgba = image.convert("RGBA")
    width, height = rgba.size
    if max_pixels and width * height > max_pixels:
        scale = math.sqrt(max_pixels / float(width * height))
        size = (max(1, int(width * scale)), max(1, int(height * scale)))
        rgba = rgba.resize(size, Image.Resampling.LANCZOS)
        width, height = rgba.size
    return PixelBuffer(width=width, height=height, pixels=rgba.tobytes())


def _format_for(mime_type: Optional[str]) -> Optional[str]:
    if not mime_type:
        return None
    mime = mime_type.split(";", 1)[0].strip().lower()
    if not mime.startswith("image/"):
        raise DecodeFailure(f"unsupported mime type {mime_type!r}")
    Image.init()
    for fmt, registered in Image.MIME.items():
        if registered == mime:
            return fmt
    return None


def decode_image_bytes(
    data: bytes, max_pixels: Optional[int] = None, mime_type: Optional[str] = None
) -> PixelBuffer:
    if max_pixels is None:
        max_pixels = settings.max_pixels
    fmt = _format_for(mime_type)
    try:
        with Image.open(BytesIO(data), formats=[fmt] if fmt else None) as image:
            image.load()
            return buffer_from_image(image, max_pixels=max_pixels)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise DecodeFailure(f"could not decode image: {exc}") from exc


def decode_base64_image(
    payload: str, max_pixels: Optional[int] = None, mime_type: Optional[str] = None
) -> PixelBuffer:
    raw = payload
    if "," in payload and payload.strip().startswith("data:image"):
        raw = payload.split(",", 1)[1]
    try:
        data = base64.b64decode(raw, validate=False)
    except (binascii.Error, ValueError) as exc:
        raise DecodeFailure(f"invalid base64 payload: {exc}") from exc
    return decode_image_bytes(data, max_pixels=max_pixels, mime_type=mime_type)


def fetch_url_image(
    url: str,
    timeout: Optional[float] = None,
    max_pixels: Optional[int] = None,
    mime_type: Optional[str] = None,
) -> PixelBuffer:
    if timeout is None:
        timeout = settings.fetch_timeout
    req = Request(url, headers={"User-Agent": "imgqa/0.1"})
    try:
        with urlopen(req, timeout=timeout) as response:
            data = response.read()
    except (URLError, OSError, ValueError) as exc:
        raise DecodeFailure(f"could not fetch {url}: {exc}") from exc
    return decode_image_bytes(data, max_pixels=max_pixels, mime_type=mime_type)
