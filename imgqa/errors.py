from __future__ import annotations


class ImageQualityError(Exception):
    """Base class for errors raised by imgqa."""


class MalformedBuffer(ImageQualityError, ValueError):
    """Pixel buffer dimensions do not match its byte length."""


class DecodeFailure(ImageQualityError):
    """Image payload could not be turned into a pixel buffer."""
