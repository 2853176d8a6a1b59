"""
Decoded image buffer and the decode service that produces it.

Decoding is handed to OpenCV. Everything downstream works on RawImage, a
read-only RGB(A) pixel buffer with a single bounds-checked read path.
"""

import base64
import binascii
import logging
import os
import re
from dataclasses import dataclass

import cv2
import numpy as np

from autocrop.core.errors import DecodeError, InvalidEncodingError, PixelOutOfBoundsError

logger = logging.getLogger(__name__)

DATA_URI_PREFIX = re.compile(r"^data:(.+?);base64,")


@dataclass(frozen=True)
class RawImage:
    """Row-major pixel buffer of shape (height, width, channels), R,G,B first."""

    pixels: np.ndarray
    source: str = "<buffer>"

    def __post_init__(self):
        pixels = np.asarray(self.pixels)
        if pixels.ndim != 3 or pixels.shape[2] < 3:
            raise ValueError(f"Expected an (h, w, >=3) pixel array, got shape {pixels.shape}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError("Image has no pixels")
        view = pixels.view()
        view.flags.writeable = False
        object.__setattr__(self, "pixels", view)

    @classmethod
    def from_array(cls, array, source="<buffer>"):
        """Wrap an RGB, RGBA or grayscale array."""
        array = np.asarray(array, dtype=np.uint8)
        if array.ndim == 2:
            array = cv2.cvtColor(array, cv2.COLOR_GRAY2RGB)
        return cls(array, source)

    @property
    def width(self):
        return self.pixels.shape[1]

    @property
    def height(self):
        return self.pixels.shape[0]

    @property
    def channels(self):
        return self.pixels.shape[2]

    @property
    def aspect_ratio(self):
        return self.width / self.height

    def pixel_at(self, x, y):
        """Returns the channel values of the pixel at (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise PixelOutOfBoundsError(x, y, self.width, self.height)
        return self.pixels[y, x]


# ---------------------------------------------------------------------------
# Decode Service
# ---------------------------------------------------------------------------
def _from_bgr(img, source):
    if img is None:
        raise DecodeError(f"Could not decode image: {source}")
    rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    logger.debug("Decoded %s (%dx%d)", source, rgb.shape[1], rgb.shape[0])
    return RawImage(rgb, source)


def decode_file(path):
    """Decode an image file from disk."""
    path = os.fspath(path)
    if not os.path.isfile(path):
        raise DecodeError(f"No such file: {path}")
    try:
        img = cv2.imread(path, cv2.IMREAD_COLOR)
    except cv2.error as exc:
        raise DecodeError(f"Could not decode image: {path}") from exc
    return _from_bgr(img, path)


def decode_buffer(data):
    """Decode encoded image bytes (JPEG, PNG, ...)."""
    buf = np.frombuffer(bytes(data), dtype=np.uint8)
    if buf.size == 0:
        raise DecodeError("Empty image buffer")
    try:
        img = cv2.imdecode(buf, cv2.IMREAD_COLOR)
    except cv2.error as exc:
        raise DecodeError("Could not decode image buffer") from exc
    return _from_bgr(img, "<buffer>")


def decode_base64(string):
    """
    Decode a data URI of the form 'data:<mime>;base64,<payload>'.

    A string without that prefix raises InvalidEncodingError before any
    decoding is attempted.
    """
    match = DATA_URI_PREFIX.match(string)
    if match is None:
        raise InvalidEncodingError("Not a base64 image string.")
    try:
        data = base64.b64decode(string[match.end():], validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Invalid base64 payload: {exc}") from exc
    return decode_buffer(data)
