"""
Scan Auto-Crop: FastAPI backend
Serves crop box detection and folder cropping as a REST API.
"""

import base64
import io
import json
import logging
import os

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from PIL import Image

from autocrop import __version__
from autocrop.batch import batch_process, crop_image, default_output_folder, summarize
from autocrop.core.detector import CropDetector
from autocrop.core.errors import (
    AutocropError,
    DecodeError,
    DetectionError,
    InvalidEncodingError,
    NormalizationRangeError,
)
from autocrop.core.settings import Settings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App Setup
# ---------------------------------------------------------------------------
app = FastAPI(title="Scan Auto-Crop", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _make_thumbnail(pixels, max_size=300):
    """Create a base64-encoded JPEG thumbnail from an RGB array."""
    img = Image.fromarray(pixels)
    img.thumbnail((max_size, max_size), Image.LANCZOS)
    buffer = io.BytesIO()
    img.save(buffer, format="JPEG", quality=70)
    return base64.b64encode(buffer.getvalue()).decode("utf-8")


def _error_status(exc):
    if isinstance(exc, InvalidEncodingError):
        return 400
    if isinstance(exc, DecodeError):
        return 415
    if isinstance(exc, (DetectionError, NormalizationRangeError)):
        return 422
    return 500


def _parse_settings(settings):
    """Build Settings from a JSON object of ray settings, or the defaults."""
    if not settings:
        return None
    try:
        config = json.loads(settings)
        if not isinstance(config, dict):
            raise ValueError("settings must be a JSON object")
        return Settings.from_config(config)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid settings: {exc}")


def _detect(load, aspect_ratio, thumbnail, settings=None):
    if aspect_ratio is not None and aspect_ratio <= 0:
        raise HTTPException(status_code=400, detail="aspect_ratio must be positive")
    settings = _parse_settings(settings)
    try:
        loaded = load(CropDetector(aspect_ratio, settings))
        result = loaded.detect_crop_box()
    except AutocropError as exc:
        logger.info("Detection failed: %s", exc)
        raise HTTPException(status_code=_error_status(exc), detail=str(exc))

    response = result.to_dict()
    response["box"] = list(result.box())
    if thumbnail:
        response["cropped_thumbnail"] = _make_thumbnail(crop_image(loaded.image, result))
    return response


# ---------------------------------------------------------------------------
# API Routes
# ---------------------------------------------------------------------------

@app.get("/api/status")
def health_check():
    return {"status": "ok", "engine": "ray-cast", "version": __version__}


@app.post("/api/detect")
def detect_upload(
    file: UploadFile = File(...),
    aspect_ratio: float | None = Form(None),
    thumbnail: bool = Form(False),
    settings: str | None = Form(None),
):
    """
    Detect the crop box of an uploaded image.
    Returns the crop box structure plus the integer pixel box.
    """
    content = file.file.read()
    return _detect(lambda d: d.load_buffer(content), aspect_ratio, thumbnail, settings)


@app.post("/api/detect-base64")
def detect_base64(
    data: str = Form(...),
    aspect_ratio: float | None = Form(None),
    thumbnail: bool = Form(False),
    settings: str | None = Form(None),
):
    """Detect the crop box of a 'data:<mime>;base64,' image string."""
    return _detect(lambda d: d.load_base64(data), aspect_ratio, thumbnail, settings)


@app.post("/api/crop-folder")
def crop_folder(
    folder_path: str = Form(...),
    aspect_ratio: float | None = Form(None),
    settings: str | None = Form(None),
):
    """
    Crop all images in a local folder path.
    Saves output to '{folder} - Cropped/' next to originals.
    """
    if not os.path.isdir(folder_path):
        raise HTTPException(status_code=400, detail=f"Folder not found: {folder_path}")

    output_folder = default_output_folder(folder_path)
    results = batch_process(folder_path, output_folder, aspect_ratio, _parse_settings(settings))
    stats = summarize(results)

    total = len(results)
    cropped_count = stats.get("cropped", 0)

    return {
        "total": total,
        "cropped": cropped_count,
        "unchanged": total - cropped_count,
        "output_folder": output_folder,
        "success_rate": round(cropped_count / total * 100, 1) if total > 0 else 0,
        "stats": stats,
        "results": results,
    }
