"""
Crop Box Detector

Samples the background from the top-left corner, casts rays from all four
sides and turns the four edges into a crop box.

Usage:
    detector = CropDetector(aspect_ratio=4 / 3).load_file("scan.jpg")
    result = detector.detect_crop_box()
    left, top, right, bottom = result.box()
"""

import logging
from dataclasses import dataclass

from autocrop.core.color import brightness
from autocrop.core.errors import DetectionError, NotLoadedError
from autocrop.core.geometry import Side
from autocrop.core.image import RawImage, decode_base64, decode_buffer, decode_file
from autocrop.core.rays import find_edge, round_half_up
from autocrop.core.settings import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)

# Backgrounds brighter than this are treated as light borders in "auto" mode.
POLARITY_MIDPOINT = 127.5


@dataclass(frozen=True)
class Edges:
    top: float
    right: float
    bottom: float
    left: float

    def to_dict(self):
        return {"top": self.top, "right": self.right, "bottom": self.bottom, "left": self.left}


@dataclass(frozen=True)
class CropBoxResult:
    width: int
    height: int
    cropped_width: float
    cropped_height: float
    corrected_width: float
    corrected_height: float
    edges: Edges
    target_aspect_ratio: float
    background_brightness: float
    polarity: str

    @property
    def aspect_ratio(self):
        return self.width / self.height

    @property
    def cropped_aspect_ratio(self):
        return self.cropped_width / self.cropped_height

    def box(self):
        """
        Integer pixel box of the visible image.

        Returns:
            tuple: (left, top, right, bottom), right/bottom exclusive
        """
        left = round_half_up(self.edges.left)
        top = round_half_up(self.edges.top)
        right = self.width - round_half_up(self.edges.right)
        bottom = self.height - round_half_up(self.edges.bottom)
        return left, top, right, bottom

    def to_dict(self):
        return {
            "source": {
                "width": self.width,
                "height": self.height,
                "aspectRatio": self.aspect_ratio,
            },
            "cropped": {
                "width": self.cropped_width,
                "height": self.cropped_height,
                "aspectRatio": self.cropped_aspect_ratio,
                "correctedWidth": self.corrected_width,
                "correctedHeight": self.corrected_height,
                "edges": self.edges.to_dict(),
            },
            "target": {
                "aspectRatio": self.target_aspect_ratio,
            },
            "image": {
                "backgroundBrightness": self.background_brightness,
                "polarity": self.polarity,
            },
        }


def background_brightness(image):
    """Average brightness of the 2x2 block in the top-left corner."""
    coords = [(0, 0), (1, 0), (0, 1), (1, 1)]
    # Single-pixel rows or columns repeat the corner pixel.
    levels = []
    for x, y in coords:
        r, g, b = (int(c) for c in image.pixel_at(min(x, image.width - 1), min(y, image.height - 1))[:3])
        levels.append(brightness(r, g, b))
    return sum(levels) / len(levels)


def resolve_polarity(settings, background):
    if settings.ray_polarity != "auto":
        return settings.ray_polarity
    return "light" if background > POLARITY_MIDPOINT else "dark"


def find_edges(image, background, image_ratio, settings, polarity="dark"):
    invert = polarity == "light"
    if invert:
        background = 255 - background
    return Edges(
        top=find_edge(image, Side.TOP, background, image_ratio, settings, invert),
        right=find_edge(image, Side.RIGHT, background, image_ratio, settings, invert),
        bottom=find_edge(image, Side.BOTTOM, background, image_ratio, settings, invert),
        left=find_edge(image, Side.LEFT, background, image_ratio, settings, invert),
    )


def corrected_size(width, height, image_ratio, cropped_ratio):
    """
    Scale the canvas by the ratio between the target and the cropped area.

    A target wider than the cropped area widens the width; otherwise the
    height is scaled by the same factor and the width is kept.
    """
    if image_ratio > cropped_ratio:
        return width * (image_ratio / cropped_ratio), height
    return width, height * (image_ratio / cropped_ratio)


class CropDetector:
    """
    Detector without an image. Loading returns a LoadedCropDetector.

    Args:
        aspect_ratio: expected ratio of the visible image; None derives it
            from the canvas
        settings: Settings used by detect_crop_box unless overridden
    """

    def __init__(self, aspect_ratio=None, settings=None):
        if aspect_ratio is not None and aspect_ratio < 0:
            raise ValueError(f"aspect_ratio must be positive, got {aspect_ratio}")
        # 0 and None both mean "derive from the canvas".
        self.aspect_ratio = aspect_ratio or None
        self.settings = settings or DEFAULT_SETTINGS

    def load_image(self, image):
        return LoadedCropDetector(image, self.aspect_ratio, self.settings)

    def load_file(self, filepath):
        return self.load_image(decode_file(filepath))

    def load_buffer(self, buffer):
        return self.load_image(decode_buffer(buffer))

    def load_base64(self, string):
        return self.load_image(decode_base64(string))

    def detect_crop_box(self, settings=None):
        raise NotLoadedError()


class LoadedCropDetector(CropDetector):
    """Detector holding one decoded image."""

    def __init__(self, image, aspect_ratio=None, settings=None):
        super().__init__(aspect_ratio, settings)
        if not isinstance(image, RawImage):
            image = RawImage.from_array(image)
        self.image = image

    @property
    def filepath(self):
        return self.image.source

    def detect_crop_box(self, settings=None):
        """
        Run crop box detection on the loaded image.

        Raises:
            EdgeNotFoundError: a side has no detectable edge
            NormalizationRangeError: the background is too bright for the
                configured black/white points
            DetectionError: the edges leave no visible area
        """
        settings = settings or self.settings
        image = self.image
        width, height = image.width, image.height

        bg = background_brightness(image)
        polarity = resolve_polarity(settings, bg)
        image_ratio = self.aspect_ratio or image.aspect_ratio
        edges = find_edges(image, bg, self.aspect_ratio, settings, polarity)

        cropped_width = width - edges.left - edges.right
        cropped_height = height - edges.top - edges.bottom
        if cropped_width <= 0 or cropped_height <= 0:
            raise DetectionError(
                f"Edges {edges.to_dict()} leave no visible area in {width}x{height}"
            )

        cropped_ratio = cropped_width / cropped_height
        corrected_width, corrected_height = corrected_size(width, height, image_ratio, cropped_ratio)

        logger.info(
            "%s: %dx%d -> %.1fx%.1f (bg=%.1f, %s)",
            image.source, width, height, cropped_width, cropped_height, bg, polarity,
        )
        return CropBoxResult(
            width=width,
            height=height,
            cropped_width=cropped_width,
            cropped_height=cropped_height,
            corrected_width=corrected_width,
            corrected_height=corrected_height,
            edges=edges,
            target_aspect_ratio=image_ratio,
            background_brightness=bg,
            polarity=polarity,
        )


def detect_crop_box(source, aspect_ratio=None, settings=None):
    """
    Detect the crop box of a file path, encoded bytes, data URI or RawImage.

    Returns:
        CropBoxResult
    """
    detector = CropDetector(aspect_ratio, settings)
    if isinstance(source, RawImage):
        loaded = detector.load_image(source)
    elif isinstance(source, (bytes, bytearray, memoryview)):
        loaded = detector.load_buffer(source)
    elif isinstance(source, str) and source.startswith("data:"):
        loaded = detector.load_base64(source)
    else:
        loaded = detector.load_file(source)
    return loaded.detect_crop_box(settings)
