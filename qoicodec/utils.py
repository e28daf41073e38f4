import logging

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

RAW_EXTENSIONS = ("dng", "cr2", "nef", "arw", "raw")


def load_image(filepath: str) -> tuple[np.ndarray, dict]:
    """Load an image and return pixel data as numpy array + description."""

    ext = str(filepath).lower().split(".")[-1]

    if ext in RAW_EXTENSIONS:
        # RAW formats - requires rawpy
        import rawpy

        with rawpy.imread(str(filepath)) as raw:
            rgb = raw.postprocess()
        img = normalize_mode(Image.fromarray(rgb))
        pixel_data = np.array(img)
    else:
        # Standard formats (PNG, JPEG, etc.)
        with Image.open(filepath) as src:
            img = normalize_mode(src)
            pixel_data = np.array(img)

    logger.debug("Loaded %s: %dx%d %s", filepath, img.size[0], img.size[1], img.mode)

    return pixel_data, {
        "width": img.size[0],
        "height": img.size[1],
        "channels": len(img.getbands()),
        "colorspace": 0,
    }


def normalize_mode(img: Image.Image) -> Image.Image:
    """Convert to RGB or RGBA, keeping transparency when the source has any."""
    if img.mode == "RGBA":
        return img
    if img.mode in ("LA", "PA") or (img.mode == "P" and "transparency" in img.info):
        return img.convert("RGBA")
    if img.mode == "RGB":
        return img
    return img.convert("RGB")


def array_to_description(arr: np.ndarray, colorspace: int = 0) -> dict:
    """Description dict for a (height, width, 3|4) uint8 array."""
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"Expected a (height, width, 3|4) array, got shape {arr.shape}")
    if arr.dtype != np.uint8:
        raise ValueError(f"Expected uint8 pixel data, got {arr.dtype}")

    return {
        "width": arr.shape[1],
        "height": arr.shape[0],
        "channels": arr.shape[2],
        "colorspace": colorspace,
    }


def image_to_array(decoded: dict) -> np.ndarray:
    """Reshape the result of QOIDecoder.decode into a (height, width, channels) array."""
    return np.frombuffer(decoded["data"], dtype=np.uint8).reshape(
        decoded["height"], decoded["width"], decoded["channels"]
    )
