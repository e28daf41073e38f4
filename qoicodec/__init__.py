from .cache import ColorCache, pixel_hash
from .decoder import PixelStreamDecoder, QOIDecoder, decode, decode_pixels
from .encoder import PixelStreamEncoder, QOIEncoder, encode, encode_pixels
from .errors import (
    BadMagic,
    ContractViolation,
    InvalidChannels,
    InvalidColorspace,
    InvalidDimensions,
    QOIError,
    TrailingDataMismatch,
    TruncatedInput,
    UnexpectedEndOfStream,
)
from .header import Header, read_header, write_header
from .pixel import Pixel
from .utils import load_image

__version__ = "0.2.0"

__all__ = [
    "QOIEncoder",
    "QOIDecoder",
    "PixelStreamEncoder",
    "PixelStreamDecoder",
    "encode",
    "decode",
    "encode_pixels",
    "decode_pixels",
    "Header",
    "read_header",
    "write_header",
    "Pixel",
    "ColorCache",
    "pixel_hash",
    "load_image",
    "QOIError",
    "InvalidDimensions",
    "InvalidChannels",
    "InvalidColorspace",
    "BadMagic",
    "TruncatedInput",
    "UnexpectedEndOfStream",
    "TrailingDataMismatch",
    "ContractViolation",
]
