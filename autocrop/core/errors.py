"""
Exceptions raised by the crop box engine.

Every error is terminal for the call that raised it. Callers treat a failed
detection as "could not auto-crop this input" and fall back to the original.
"""


class AutocropError(Exception):
    """Base class for all crop box engine errors."""


class NotLoadedError(AutocropError):
    """Detection was requested before an image was loaded."""

    def __init__(self, message="No image loaded."):
        super().__init__(message)


class InvalidEncodingError(AutocropError, ValueError):
    """A base64 string is missing its 'data:<mime>;base64,' prefix."""


class DecodeError(AutocropError):
    """The image bytes could not be decoded."""


class InvalidSideError(AutocropError, ValueError):
    def __init__(self, side, width=None, height=None):
        super().__init__(f"Invalid side: {side!r} (w={width}, h={height})")
        self.side = side


class NormalizationRangeError(AutocropError, ValueError):
    """The white point does not lie above the black point."""


class DetectionError(AutocropError):
    """Detection finished but produced an unusable crop box."""


class EdgeNotFoundError(DetectionError):
    """No ray on a side found two consecutive pixels above the threshold."""

    def __init__(self, side, max_depth=None):
        name = getattr(side, "value", side)
        message = f"No image edge found on the {name} side"
        if max_depth is not None:
            message += f" within {max_depth}px"
        super().__init__(message)
        self.side = side
        self.max_depth = max_depth


class PixelOutOfBoundsError(AutocropError, IndexError):
    def __init__(self, x, y, width, height):
        super().__init__(f"Pixel ({x}, {y}) is outside the {width}x{height} canvas")
        self.x = x
        self.y = y
