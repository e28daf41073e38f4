import struct
from typing import NamedTuple

from .constants import (
    QOI_CHANNELS_RGB,
    QOI_CHANNELS_RGBA,
    QOI_HEADER_SIZE,
    QOI_LINEAR,
    QOI_MAGIC,
    QOI_PIXELS_MAX,
    QOI_SRGB,
    QOI_UINT32_MAX,
)
from .errors import (
    BadMagic,
    InvalidChannels,
    InvalidColorspace,
    InvalidDimensions,
    TruncatedInput,
)

# > : Big Endian
# 4s: 4-byte string (magic)
# I : unsigned int (4 bytes)
# B : unsigned char (1 byte)
_HEADER_STRUCT = struct.Struct(">4sIIBB")


class Header(NamedTuple):
    width: int
    height: int
    channels: int
    colorspace: int

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def to_bytes(self) -> bytes:
        return write_header(self.width, self.height, self.channels, self.colorspace)

    def as_description(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "channels": self.channels,
            "colorspace": self.colorspace,
        }


def validate_header(
    width, height, channels, colorspace, max_pixels=QOI_PIXELS_MAX, op="QOI"
) -> None:
    """
    Check the four header fields, raising the matching QOIError.

    :param op: Prefix used in the error messages ("QOI.encode", "QOI.decode"...).
    """
    if not (0 < width <= QOI_UINT32_MAX):
        raise InvalidDimensions(f"{op}: Invalid width {width}")

    if not (0 < height <= QOI_UINT32_MAX):
        raise InvalidDimensions(f"{op}: Invalid height {height}")

    # Checked before anything gets allocated for the pixel data
    if width * height > max_pixels:
        raise InvalidDimensions(
            f"{op}: Image of {width}x{height} exceeds the limit of {max_pixels} pixels"
        )

    if channels not in (QOI_CHANNELS_RGB, QOI_CHANNELS_RGBA):
        raise InvalidChannels(f"{op}: Invalid channels {channels}, must be 3 or 4")

    if colorspace not in (QOI_SRGB, QOI_LINEAR):
        raise InvalidColorspace(
            f"{op}: Invalid colorspace {colorspace}, must be 0 or 1"
        )


def write_header(width, height, channels, colorspace, max_pixels=QOI_PIXELS_MAX) -> bytes:
    """
    Build the 14 byte QOI header.

    0-3: magic "qoif", 4-7: width, 8-11: height (both big endian),
    12: channels, 13: colorspace.
    """
    validate_header(width, height, channels, colorspace, max_pixels, "QOI.write_header")
    return _HEADER_STRUCT.pack(QOI_MAGIC, width, height, channels, colorspace)


def read_header(data, max_pixels=QOI_PIXELS_MAX) -> Header:
    """
    Parse the header at the start of ``data``.

    Only the first 14 bytes are looked at, anything after them is ignored.
    """
    if len(data) < QOI_HEADER_SIZE:
        raise TruncatedInput(
            f"QOI.read_header: Need {QOI_HEADER_SIZE} bytes for the header, got {len(data)}"
        )

    magic, width, height, channels, colorspace = _HEADER_STRUCT.unpack(
        bytes(data[:QOI_HEADER_SIZE])
    )

    if magic != QOI_MAGIC:
        raise BadMagic(f"QOI.read_header: The signature {magic!r} is not {QOI_MAGIC!r}")

    validate_header(width, height, channels, colorspace, max_pixels, "QOI.read_header")
    return Header(width, height, channels, colorspace)
