"""
Scan Auto-Crop: batch processing

Detects the crop box of every scan in a folder, crops it and saves the
result next to the originals in '{folder} - Cropped'. Scans whose border
cannot be detected are saved unchanged.
"""

import argparse
import json
import logging
import os

import cv2
import numpy as np
from PIL import Image

from autocrop.core.detector import CropDetector
from autocrop.core.errors import AutocropError, DecodeError
from autocrop.core.settings import Settings

logger = logging.getLogger(__name__)

VALID_EXTS = ('.jpg', '.jpeg', '.png', '.bmp', '.tif', '.tiff')


def crop_image(image, result):
    """
    Cut the detected crop box out of a decoded image.

    Returns:
        numpy array (RGB) of the visible image
    """
    left, top, right, bottom = result.box()
    return np.ascontiguousarray(image.pixels[top:bottom, left:right, :3])


def _save_rgb(pixels, output_path):
    Image.fromarray(pixels).save(output_path, quality=100, subsampling=0)


def process_single_image(input_path, output_path, aspect_ratio=None, settings=None):
    """
    Process one image: detect, crop and save at 100% JPEG quality.

    Returns:
        dict with keys: success, status, filename, original_size,
        cropped_size, edges, error
    """
    filename = os.path.basename(input_path)
    detector = CropDetector(aspect_ratio, settings)

    try:
        loaded = detector.load_file(input_path)
    except DecodeError as exc:
        logger.warning("Could not read %s: %s", filename, exc)
        return {
            "success": False,
            "status": "read_error",
            "filename": filename,
            "original_size": None,
            "cropped_size": None,
            "edges": None,
            "error": str(exc),
        }

    image = loaded.image
    original_size = (image.width, image.height)

    try:
        result = loaded.detect_crop_box()
    except AutocropError as exc:
        # Could not auto-crop: keep the original
        logger.warning("No crop box for %s, saving original: %s", filename, exc)
        original = np.ascontiguousarray(image.pixels[:, :, :3])
        cv2.imwrite(output_path, cv2.cvtColor(original, cv2.COLOR_RGB2BGR), [cv2.IMWRITE_JPEG_QUALITY, 100])
        return {
            "success": True,
            "status": "original",
            "filename": filename,
            "original_size": original_size,
            "cropped_size": original_size,
            "edges": None,
            "error": str(exc),
        }

    cropped = crop_image(image, result)
    _save_rgb(cropped, output_path)
    ch, cw = cropped.shape[:2]
    logger.info("Cropped %s: %dx%d -> %dx%d", filename, image.width, image.height, cw, ch)

    return {
        "success": True,
        "status": "cropped",
        "filename": filename,
        "original_size": original_size,
        "cropped_size": (cw, ch),
        "edges": result.edges.to_dict(),
        "error": None,
    }


def list_images(folder):
    files = [f for f in os.listdir(folder) if f.lower().endswith(VALID_EXTS)]
    files.sort()
    return files


def default_output_folder(input_folder):
    return input_folder.rstrip("/\\") + " - Cropped"


def batch_process(input_folder, output_folder=None, aspect_ratio=None, settings=None):
    """
    Process all images in a folder.

    Args:
        input_folder: Path to folder with scanned images
        output_folder: Path to output (defaults to '{input_folder} - Cropped')
        aspect_ratio: Expected aspect ratio of the scanned photos
        settings: Settings for every detection run

    Returns:
        list of result dicts from process_single_image
    """
    if output_folder is None:
        output_folder = default_output_folder(input_folder)

    os.makedirs(output_folder, exist_ok=True)

    results = []
    for filename in list_images(input_folder):
        input_path = os.path.join(input_folder, filename)
        output_path = os.path.join(output_folder, filename)

        result = process_single_image(input_path, output_path, aspect_ratio, settings)
        results.append(result)

    return results


def summarize(results):
    """Count results per status."""
    stats = {}
    for r in results:
        s = r["status"]
        stats[s] = stats.get(s, 0) + 1
    return stats


# ---------------------------------------------------------------------------
# CLI Entry Point
# ---------------------------------------------------------------------------
def main(argv=None):
    parser = argparse.ArgumentParser(description="Crop the uniform border off scanned images.")
    parser.add_argument("input_folder")
    parser.add_argument("output_folder", nargs="?")
    parser.add_argument("--aspect-ratio", type=float, default=None,
                        help="expected width/height of the scanned photos")
    parser.add_argument("--config", default=None,
                        help="JSON file with ray settings (rayMaxDepth, ray_threshold, ...)")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not os.path.isdir(args.input_folder):
        print(f"Folder not found: {args.input_folder}")
        return 1

    settings = None
    if args.config:
        with open(args.config) as f:
            settings = Settings.from_config(json.load(f))

    print(f"Processing: {args.input_folder}")
    results = batch_process(args.input_folder, args.output_folder, args.aspect_ratio, settings)
    stats = summarize(results)

    total = len(results)
    print(f"\n{'='*50}")
    print(f"BATCH RESULTS: {total} images")
    for s, count in sorted(stats.items(), key=lambda x: -x[1]):
        print(f"  {s:15}: {count} ({count/total*100:4.1f}%)")
    print(f"{'='*50}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
