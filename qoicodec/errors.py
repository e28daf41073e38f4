class QOIError(ValueError):
    """Base class for every error caused by malformed QOI data or header fields."""


class InvalidDimensions(QOIError):
    """Width/height is zero, does not fit in uint32 or exceeds the pixel limit.

    Also the parent of the other header field errors, so a caller can treat
    any rejected header field as a dimension problem.
    """


class InvalidChannels(InvalidDimensions):
    """The channel count is not 3 (RGB) or 4 (RGBA)."""


class InvalidColorspace(InvalidDimensions):
    """The colorspace tag is not 0 (sRGB) or 1 (linear)."""


class BadMagic(QOIError):
    """The stream does not start with ``qoif``."""


class TruncatedInput(QOIError):
    """Fewer than 14 bytes are available for the header."""


class UnexpectedEndOfStream(QOIError):
    """The chunk stream ran out before every pixel was decoded."""


class TrailingDataMismatch(QOIError):
    """The end marker is missing or does not match ``00 00 00 00 00 00 00 01``."""


class ContractViolation(Exception):
    """
    The caller broke the API contract (wrong buffer length, out of range
    channel values, alpha on an RGB image...).

    This is a bug in the calling code, not bad input data, so it is
    intentionally not a QOIError.
    """
