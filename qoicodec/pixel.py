import numbers
from typing import Iterator, NamedTuple

from .errors import ContractViolation


class Pixel(NamedTuple):
    r: int
    g: int
    b: int
    a: int = 255


# Both encoder and decoder start from opaque black
INITIAL_PIXEL = Pixel(0, 0, 0, 255)
EMPTY_PIXEL = Pixel(0, 0, 0, 0)


def iter_pixels(color_data, channels: int) -> Iterator[Pixel]:
    """
    Walk an interleaved RGB/RGBA buffer pixel by pixel.

    :param color_data: Bytes-like object (bytes, bytearray, list of ints, flat numpy array).
    :param channels: 3 (alpha is filled in as 255) or 4.
    """
    if channels == 4:
        for i in range(0, len(color_data), 4):
            yield Pixel(
                color_data[i], color_data[i + 1], color_data[i + 2], color_data[i + 3]
            )
    else:
        for i in range(0, len(color_data), 3):
            yield Pixel(color_data[i], color_data[i + 1], color_data[i + 2], 255)


def check_pixel(pixel, channels: int) -> Pixel:
    """Coerce ``pixel`` to a Pixel, rejecting values a QOI stream cannot carry."""
    if len(pixel) == 3:
        pixel = Pixel(pixel[0], pixel[1], pixel[2], 255)
    elif len(pixel) == 4:
        pixel = Pixel(*pixel)
    else:
        raise ContractViolation(f"QOI.encode: Pixel {pixel!r} needs 3 or 4 channel values")

    for value in pixel:
        if not isinstance(value, numbers.Integral) or not (0 <= value <= 255):
            raise ContractViolation(f"QOI.encode: Channel value {value!r} is not an integer in 0..255")

    # An RGB image has no way to express a different alpha
    if channels == 3 and pixel.a != 255:
        raise ContractViolation(
            f"QOI.encode: Pixel {pixel!r} has alpha {pixel.a} but the image has 3 channels"
        )

    # numpy scalars would overflow in pixel_hash
    return Pixel(*(int(value) for value in pixel))
