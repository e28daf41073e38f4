from .constants import QOI_CACHE_SIZE
from .pixel import EMPTY_PIXEL, Pixel


def pixel_hash(pixel) -> int:
    """Calculates the index position for the color array."""
    r, g, b, a = pixel
    return (r * 3 + g * 5 + b * 7 + a * 11) % 64


class ColorCache:
    """
    The 64 entry array of previously seen pixels.

    Encoder and decoder each own one and update it the same way, so a
    QOI_OP_INDEX chunk only has to carry the slot number. A new pixel simply
    overwrites whatever was in its slot before.
    """

    __slots__ = ("_slots",)

    def __init__(self):
        self._slots = [EMPTY_PIXEL] * QOI_CACHE_SIZE

    def lookup(self, index: int) -> Pixel:
        return self._slots[index]

    def insert(self, pixel: Pixel) -> int:
        index = pixel_hash(pixel)
        self._slots[index] = pixel
        return index

    def snapshot(self) -> tuple:
        return tuple(self._slots)

    def __len__(self):
        return QOI_CACHE_SIZE
