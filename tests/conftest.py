"""
Shared fixtures: synthetic scans with a uniform border around flat content.
"""

import cv2
import numpy as np
import pytest

from autocrop.core.image import RawImage


def make_scan(width, height, border, border_color=(0, 0, 0), content_color=(255, 255, 255)):
    """
    Build an RGB canvas with a flat content rectangle inset by `border`.

    Args:
        border: int for all sides, or (top, right, bottom, left)
    """
    if isinstance(border, int):
        border = (border, border, border, border)
    top, right, bottom, left = border
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[:, :] = border_color
    pixels[top:height - bottom, left:width - right] = content_color
    return pixels


def encode_png(pixels):
    ok, buf = cv2.imencode(".png", cv2.cvtColor(pixels, cv2.COLOR_RGB2BGR))
    assert ok
    return buf.tobytes()


@pytest.fixture
def scan():
    """Factory returning a RawImage of a synthetic scan."""
    def _scan(width=100, height=100, border=10, **colors):
        return RawImage(make_scan(width, height, border, **colors), "<synthetic>")
    return _scan


@pytest.fixture
def white_border_scan(scan):
    """100x100 canvas, 10px white border, black content."""
    return scan(border=10, border_color=(255, 255, 255), content_color=(0, 0, 0))


@pytest.fixture
def scan_file(tmp_path):
    """Factory writing a synthetic scan to a PNG file and returning its path."""
    def _scan_file(name="scan.png", width=100, height=100, border=10, **colors):
        path = tmp_path / name
        path.write_bytes(encode_png(make_scan(width, height, border, **colors)))
        return path
    return _scan_file
