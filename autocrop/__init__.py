"""
Scan Auto-Crop: crop box detection for scans with a uniform border.
"""

from autocrop.core.detector import CropDetector, LoadedCropDetector, detect_crop_box
from autocrop.core.settings import Settings

__version__ = "1.0.0"

__all__ = ["CropDetector", "LoadedCropDetector", "Settings", "detect_crop_box"]
