"""
Ray caster: probes one side of the canvas with a row of rays running inward
and reduces the first brightness transition of each ray to one edge position.

Each ray walks from the side toward the center and stops at the first two
consecutive pixels whose normalized brightness is above the threshold. The
two hits are interpolated to a sub-pixel depth. The side's edge is the
shallowest depth found by any ray.
"""

import logging
import math
from dataclasses import dataclass

from autocrop.core.color import clamp8, normalized_brightness
from autocrop.core.errors import EdgeNotFoundError, NormalizationRangeError
from autocrop.core.geometry import pixel_from_edge, side_axes, side_scan_length

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanGeometry:
    along_length: int
    depth_length: int
    scan_length: float
    offset_start: float
    offset_end: float
    ray_count: int
    ray_step: float
    max_depth: int


def round_half_up(value):
    return int(math.floor(value + 0.5))


def scan_geometry(side, width, height, image_ratio, settings):
    """
    Compute where the rays of one side start and how deep they search.

    The probed region is centered on the side and inset by `ray_margin`.
    When the expected image ratio differs from the canvas ratio the region
    shrinks to the expected content (see side_scan_length).
    """
    canvas_ratio = width / height
    if not image_ratio:
        image_ratio = canvas_ratio

    along, depth = side_axes(side, width, height)
    scan_length = side_scan_length(side, width, height, image_ratio, canvas_ratio)

    offset_start = scan_length * settings.ray_margin + (along - scan_length) / 2
    offset_end = along - offset_start
    ray_count = max(int(math.floor(scan_length * settings.ray_amount)), settings.ray_amount_min)

    return ScanGeometry(
        along_length=along,
        depth_length=depth,
        scan_length=scan_length,
        offset_start=offset_start,
        offset_end=offset_end,
        ray_count=ray_count,
        ray_step=offset_end / ray_count,
        max_depth=int(math.floor(depth * settings.ray_max_depth)),
    )


def ray_positions(geometry):
    """Along-side coordinate of every ray, kept inside the canvas."""
    last = geometry.along_length - 1
    return [
        min(max(round_half_up(n * geometry.ray_step + geometry.offset_start), 0), last)
        for n in range(geometry.ray_count)
    ]


def interpolate_hits(hits):
    """
    Estimate the sub-pixel edge between two consecutive hits.

    Levels are rescaled so the brighter hit is 1.0; the position moves from
    the dimmer hit toward the brighter one by one minus the product of the
    two rescaled levels.

    Args:
        hits: [(depth, level), (depth, level)] with levels in [0, 255]
    """
    (a_pos, a_level), (b_pos, b_level) = hits
    a_level /= 255
    b_level /= 255

    direction = a_level > b_level
    factor = 1 / a_level if direction else 1 / b_level

    diff = b_pos - a_pos
    weight = (a_level * factor) * (b_level * factor)
    if direction:
        return b_pos - diff * (1 - weight)
    return a_pos + diff * (1 - weight)


def cast_ray(image, side, along, max_depth, background, settings, invert=False):
    """
    Cast a single ray inward from `side` at position `along`.

    A dip below the threshold discards a partial streak, so the two hits are
    always adjacent pixels.

    Returns:
        float sub-pixel depth of the edge, or None if the ray found no edge
        before max_depth
    """
    black = settings.ray_black + background
    hits = []
    for depth in range(max_depth):
        x, y = pixel_from_edge(side, along, depth, image.width, image.height)
        r, g, b = (int(c) for c in image.pixel_at(x, y)[:3])
        if invert:
            r, g, b = 255 - r, 255 - g, 255 - b

        level = normalized_brightness(r, g, b, black, settings.ray_white, settings.ray_gamma)
        if level > settings.ray_threshold:
            hits.append((depth, level))
        elif hits:
            hits = []

        if len(hits) >= 2:
            return interpolate_hits(hits)
    return None


def find_edge(image, side, background, image_ratio, settings, invert=False):
    """
    Find the edge of the visible image on one side.

    Args:
        image: RawImage to scan
        side: Side to scan from
        background: background brightness, already inverted when `invert` is set
        image_ratio: expected aspect ratio of the visible image, or None
        settings: Settings for this run
        invert: read inverted channels, for borders lighter than the content

    Raises:
        NormalizationRangeError: the background leaves no room between the
            black and white points
        EdgeNotFoundError: no ray found an edge
    """
    if clamp8(settings.ray_black + background) >= settings.ray_white:
        raise NormalizationRangeError(
            f"Background brightness {background:.1f} puts the black point at or "
            f"above the white point {settings.ray_white:g}"
        )

    geometry = scan_geometry(side, image.width, image.height, image_ratio, settings)
    logger.debug("%s: %s", side.value, geometry)

    depths = []
    for along in ray_positions(geometry):
        depth = cast_ray(image, side, along, geometry.max_depth, background, settings, invert)
        if depth is not None:
            depths.append(depth)

    if not depths:
        raise EdgeNotFoundError(side, geometry.max_depth)

    edge = min(depths)
    logger.debug("%s edge at %.3f (%d/%d rays hit)", side.value, edge, len(depths), geometry.ray_count)
    return edge
