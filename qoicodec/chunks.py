"""
Byte layouts of the six QOI chunks.

Every ``op_*`` function returns the encoded chunk, ``chunk_kind`` maps a tag
byte back to the chunk it starts.
"""
from .constants import (
    QOI_MASK_2,
    QOI_OP_DIFF,
    QOI_OP_INDEX,
    QOI_OP_LUMA,
    QOI_OP_RGB,
    QOI_OP_RGBA,
    QOI_OP_RUN,
)

INDEX = "INDEX"
DIFF = "DIFF"
LUMA = "LUMA"
RUN = "RUN"
RGB = "RGB"
RGBA = "RGBA"

# Bytes following the tag byte
PAYLOAD_SIZE = {INDEX: 0, DIFF: 0, LUMA: 1, RUN: 0, RGB: 3, RGBA: 4}


def signed_delta(current: int, previous: int) -> int:
    """Byte-wrapped difference of two channel values, shifted to -128..127."""
    diff = (current - previous) & 0xFF
    return diff - 256 if diff > 127 else diff


def op_run(run: int) -> bytes:
    # run is stored with a bias of -1, so 1..62 maps to 0..61
    return bytes((QOI_OP_RUN | (run - 1),))


def op_index(index: int) -> bytes:
    return bytes((QOI_OP_INDEX | index,))


def op_diff(dr: int, dg: int, db: int) -> bytes:
    return bytes((QOI_OP_DIFF | ((dr + 2) << 4) | ((dg + 2) << 2) | (db + 2),))


def op_luma(dg: int, dr_dg: int, db_dg: int) -> bytes:
    return bytes((QOI_OP_LUMA | (dg + 32), ((dr_dg + 8) << 4) | (db_dg + 8)))


def op_rgb(r: int, g: int, b: int) -> bytes:
    return bytes((QOI_OP_RGB, r, g, b))


def op_rgba(r: int, g: int, b: int, a: int) -> bytes:
    return bytes((QOI_OP_RGBA, r, g, b, a))


def chunk_kind(tag: int) -> str:
    # The 8-bit tags have to be tested first, they share the 11 prefix with RUN
    if tag == QOI_OP_RGB:
        return RGB
    if tag == QOI_OP_RGBA:
        return RGBA

    prefix = tag & QOI_MASK_2
    if prefix == QOI_OP_INDEX:
        return INDEX
    if prefix == QOI_OP_DIFF:
        return DIFF
    if prefix == QOI_OP_LUMA:
        return LUMA
    return RUN
