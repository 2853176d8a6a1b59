"""
Side geometry: maps a side of the canvas plus an (along, depth) offset to
absolute pixel coordinates, and sizes the scanned region of each side.

"along" runs parallel to the side (x for top/bottom, y for left/right) and
"depth" runs from the side into the image.
"""

from enum import Enum

from autocrop.core.errors import InvalidSideError


class Side(Enum):
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


SIDES = (Side.TOP, Side.RIGHT, Side.BOTTOM, Side.LEFT)


def side_axes(side, width, height):
    """
    Returns:
        tuple: (along_length, depth_length) for the given side
    """
    if side in (Side.TOP, Side.BOTTOM):
        return width, height
    if side in (Side.LEFT, Side.RIGHT):
        return height, width
    raise InvalidSideError(side, width, height)


def pixel_from_edge(side, along, depth, width, height):
    """Returns the (x, y) coordinate `depth` pixels in from `side`."""
    if side is Side.TOP:
        return along, depth
    if side is Side.BOTTOM:
        return along, height - 1 - depth
    if side is Side.LEFT:
        return depth, along
    if side is Side.RIGHT:
        return width - 1 - depth, along
    raise InvalidSideError(side, width, height)


def correct_scan_ratio(scan_length, image_ratio, canvas_ratio, apply):
    """Shrink a scan length by the ratio between the two aspect ratios."""
    if not apply or image_ratio == canvas_ratio:
        return scan_length
    factor = min(image_ratio, canvas_ratio) / max(image_ratio, canvas_ratio)
    return scan_length * factor


def side_scan_length(side, width, height, image_ratio, canvas_ratio):
    """
    Length of the region scanned along a side.

    A canvas wider than the expected image has pillarbox bars, so the top and
    bottom scans narrow to the content width. A canvas taller than the
    expected image has letterbox bars, so the left and right scans narrow to
    the content height.
    """
    if side in (Side.TOP, Side.BOTTOM):
        return correct_scan_ratio(width, image_ratio, canvas_ratio, image_ratio < canvas_ratio)
    if side in (Side.LEFT, Side.RIGHT):
        return correct_scan_ratio(height, image_ratio, canvas_ratio, image_ratio > canvas_ratio)
    raise InvalidSideError(side, width, height)
