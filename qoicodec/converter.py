import logging
from pathlib import Path

import numpy as np
from PIL import Image

from .decoder import QOIDecoder
from .encoder import QOIEncoder
from .utils import array_to_description, image_to_array, load_image

logger = logging.getLogger(__name__)


def write_qoi(qoi_path, pixel_data: np.ndarray, colorspace: int = 0) -> int:
    """Encode a (height, width, 3|4) uint8 array to qoi_path, returns the bytes written."""
    description = array_to_description(pixel_data, colorspace)
    encoded = QOIEncoder.encode(np.ascontiguousarray(pixel_data), description)
    Path(qoi_path).write_bytes(encoded)
    return len(encoded)


def read_qoi(qoi_path) -> np.ndarray:
    """Decode qoi_path into a (height, width, channels) uint8 array."""
    return image_to_array(QOIDecoder.decode(Path(qoi_path).read_bytes()))


def png_to_qoi(png_path, qoi_path, colorspace: int = 0) -> int:
    """Convert any image Pillow (or rawpy) can read into a QOI file."""
    pixel_data, desc = load_image(png_path)
    written = write_qoi(qoi_path, pixel_data, colorspace)
    logger.info(
        "Converted %s (%dx%d, %d channels) to %s, %d bytes",
        png_path,
        desc["width"],
        desc["height"],
        desc["channels"],
        qoi_path,
        written,
    )
    return written


def qoi_to_png(qoi_path, png_path) -> None:
    """Decode a QOI file and save it with Pillow, format chosen from png_path's extension."""
    decoded = QOIDecoder.decode(Path(qoi_path).read_bytes())
    mode = "RGBA" if decoded["channels"] == 4 else "RGB"

    img = Image.frombytes(mode, (decoded["width"], decoded["height"]), decoded["data"])
    img.save(png_path)
    logger.info("Converted %s to %s", qoi_path, png_path)
