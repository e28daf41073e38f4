# QOI Constants
QOI_MAGIC = b"qoif"
QOI_HEADER_SIZE = 14
QOI_END_MARKER = b"\x00\x00\x00\x00\x00\x00\x00\x01"

# Chunk tags. The 2-bit tags live in the top two bits of the tag byte,
# QOI_OP_RGB / QOI_OP_RGBA are full 8-bit tags carved out of the RUN range.
QOI_OP_INDEX = 0x00  # 00xxxxxx
QOI_OP_DIFF = 0x40  # 01xxxxxx
QOI_OP_LUMA = 0x80  # 10xxxxxx
QOI_OP_RUN = 0xC0  # 11xxxxxx
QOI_OP_RGB = 0xFE  # 11111110
QOI_OP_RGBA = 0xFF  # 11111111

QOI_MASK_2 = 0xC0

# Run lengths 63 and 64 would collide with QOI_OP_RGB / QOI_OP_RGBA
QOI_MAX_RUN_LENGTH = 62

QOI_CACHE_SIZE = 64

QOI_CHANNELS_RGB = 3
QOI_CHANNELS_RGBA = 4

QOI_SRGB = 0
QOI_LINEAR = 1

QOI_UINT32_MAX = 0xFFFFFFFF
QOI_PIXELS_MAX = 400000000  # Safety limit (400MP)
