import logging
from collections import Counter

from .cache import ColorCache, pixel_hash
from .chunks import (
    DIFF,
    INDEX,
    LUMA,
    RGB,
    RGBA,
    RUN,
    op_diff,
    op_index,
    op_luma,
    op_rgb,
    op_rgba,
    op_run,
    signed_delta,
)
from .constants import QOI_END_MARKER, QOI_MAX_RUN_LENGTH, QOI_PIXELS_MAX
from .errors import ContractViolation
from .header import write_header
from .pixel import INITIAL_PIXEL, Pixel, check_pixel, iter_pixels

logger = logging.getLogger(__name__)


class PixelStreamEncoder:
    """
    Turns pixels, fed one at a time in raster order, into QOI chunks.

    Chunks are appended to ``out``. When several chunks could encode a pixel
    the first match of RUN, INDEX, DIFF, LUMA, RGB/RGBA wins, so the same
    pixels always produce the same bytes.
    """

    def __init__(self, total_pixels: int, out: bytearray = None):
        self.total_pixels = total_pixels
        self.out = bytearray() if out is None else out
        self.cache = ColorCache()
        self.previous = INITIAL_PIXEL
        self.run = 0
        self.position = 0
        self.stats = Counter()

    def push(self, pixel: Pixel) -> int:
        """
        Encode the next pixel.

        :return: Number of bytes appended to ``out`` (0 while a run is pending).
        """
        if self.position >= self.total_pixels:
            raise ContractViolation(
                f"QOI.encode: More than the declared {self.total_pixels} pixels"
            )
        start = len(self.out)
        self.position += 1

        # Check for run
        if pixel == self.previous:
            self.run += 1
            # If we hit max run length (62) or it's the very last pixel
            if self.run == QOI_MAX_RUN_LENGTH or self.position == self.total_pixels:
                self._flush_run()
            return len(self.out) - start

        # If we were in a run, end it before processing the new pixel
        if self.run > 0:
            self._flush_run()

        prev = self.previous
        index_pos = pixel_hash(pixel)

        if self.cache.lookup(index_pos) == pixel:
            kind, chunk = INDEX, op_index(index_pos)
        elif pixel.a == prev.a:
            dr = signed_delta(pixel.r, prev.r)
            dg = signed_delta(pixel.g, prev.g)
            db = signed_delta(pixel.b, prev.b)
            dr_dg = dr - dg
            db_dg = db - dg

            if -2 <= dr <= 1 and -2 <= dg <= 1 and -2 <= db <= 1:
                kind, chunk = DIFF, op_diff(dr, dg, db)
            elif -32 <= dg <= 31 and -8 <= dr_dg <= 7 and -8 <= db_dg <= 7:
                kind, chunk = LUMA, op_luma(dg, dr_dg, db_dg)
            else:
                kind, chunk = RGB, op_rgb(pixel.r, pixel.g, pixel.b)
        else:
            kind, chunk = RGBA, op_rgba(*pixel)

        self.out += chunk
        self.stats[kind] += 1

        self.cache.insert(pixel)
        self.previous = pixel
        return len(self.out) - start

    def finish(self) -> None:
        """Append the end marker once every declared pixel has been pushed."""
        if self.position != self.total_pixels:
            raise ContractViolation(
                f"QOI.encode: Got {self.position} pixels, expected {self.total_pixels}"
            )
        # push() already flushes on the last pixel
        if self.run > 0:
            self._flush_run()
        self.out += QOI_END_MARKER

    def _flush_run(self) -> None:
        self.out += op_run(self.run)
        self.stats[RUN] += 1
        self.run = 0


def encode_pixels(
    pixels, width, height, channels=4, colorspace=0, max_pixels=QOI_PIXELS_MAX
) -> bytes:
    """
    Encode a sequence of pixels into a complete QOI file.

    :param pixels: Sequence of (r, g, b[, a]) tuples, width * height long, row-major.
    :param width: Image width.
    :param height: Image height.
    :param channels: 3 (RGB) or 4 (RGBA).
    :param colorspace: 0 (sRGB) or 1 (Linear), stored as is.
    :return: bytes object containing the QOI file content.
    """
    header = write_header(width, height, channels, colorspace, max_pixels)

    total_pixels = width * height
    if len(pixels) != total_pixels:
        raise ContractViolation(
            f"QOI.encode: Got {len(pixels)} pixels for a {width}x{height} image"
        )

    encoder = PixelStreamEncoder(total_pixels, bytearray(header))
    for pixel in pixels:
        encoder.push(check_pixel(pixel, channels))
    encoder.finish()

    _log_summary(width, height, channels, encoder)
    return bytes(encoder.out)


def _as_bytes(color_data) -> bytes:
    # numpy arrays, memoryviews and array.array all expose tobytes()
    if hasattr(color_data, "tobytes"):
        return color_data.tobytes()
    try:
        return bytes(color_data)
    except (TypeError, ValueError) as e:
        raise ContractViolation(f"QOI.encode: Invalid color data: {e}") from e


def _log_summary(width, height, channels, encoder: PixelStreamEncoder) -> None:
    logger.debug(
        "Encoded %dx%d image (%d channels) into %d bytes, chunks: %s",
        width,
        height,
        channels,
        len(encoder.out),
        dict(encoder.stats),
    )


class QOIEncoder:
    @staticmethod
    def encode(color_data, description: dict, max_pixels: int = QOI_PIXELS_MAX) -> bytes:
        """
        Encode a QOI file.

        :param color_data: Bytes-like object (bytes, bytearray, list of ints, uint8 numpy array) containing pixel data.
        :param description: Dictionary containing 'width', 'height', 'channels', 'colorspace'.
        :param max_pixels: Largest width * height accepted.
        :return: bytes object containing the QOI file content.
        """
        width = description.get("width")
        height = description.get("height")
        channels = description.get("channels")
        colorspace = description.get("colorspace", 0)

        if width is None or height is None or channels is None:
            raise ContractViolation(
                "QOI.encode: description needs 'width', 'height' and 'channels'"
            )

        # --- Validation ---
        header = write_header(width, height, channels, colorspace, max_pixels)

        color_data = _as_bytes(color_data)
        pixel_length = width * height * channels
        if len(color_data) != pixel_length:
            raise ContractViolation(
                f"QOI.encode: The length of colorData is incorrect, "
                f"expected {pixel_length} bytes, got {len(color_data)}"
            )

        # --- Pixel Loop ---
        encoder = PixelStreamEncoder(width * height, bytearray(header))
        for pixel in iter_pixels(color_data, channels):
            encoder.push(pixel)
        encoder.finish()

        _log_summary(width, height, channels, encoder)
        return bytes(encoder.out)


encode = QOIEncoder.encode
