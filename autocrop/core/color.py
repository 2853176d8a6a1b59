"""
Brightness and normalization math used by the ray caster.

Brightness uses the Rec. 601 luma weights.
"""

from autocrop.core.errors import NormalizationRangeError


def clamp(value, low=0.0, high=1.0):
    return max(low, min(high, value))


def clamp8(value):
    """Clamp a value to the 8-bit range [0, 255]."""
    return clamp(value, 0.0, 255.0)


def brightness(r, g, b):
    """Perceived brightness of an RGB color."""
    return 0.299 * r + 0.587 * g + 0.114 * b


def normalize_color(value, black, white, gamma):
    """
    Stretch a channel value so that `black` maps to 0 and `white` to 255.

    The black and white points are clamped to [0, 255] and the white point
    is raised to the black point if it lies below it. A white point equal to
    the black point leaves nothing to stretch and raises
    NormalizationRangeError.
    """
    black = clamp8(black)
    white = clamp(clamp8(white), black, 255.0)
    if white == black:
        raise NormalizationRangeError(
            f"White point {white} must be above black point {black}"
        )
    ratio = max(0.0, (clamp8(value) - black) / (white - black))
    return clamp8(ratio ** (1.0 / gamma) * 255.0)


def normalized_brightness(r, g, b, black, white, gamma):
    return brightness(
        normalize_color(r, black, white, gamma),
        normalize_color(g, black, white, gamma),
        normalize_color(b, black, white, gamma),
    )
