import logging

from .cache import ColorCache
from .chunks import DIFF, INDEX, LUMA, PAYLOAD_SIZE, RGB, RGBA, chunk_kind
from .constants import QOI_END_MARKER, QOI_HEADER_SIZE, QOI_PIXELS_MAX
from .errors import ContractViolation, TrailingDataMismatch, UnexpectedEndOfStream
from .header import read_header
from .pixel import INITIAL_PIXEL, Pixel

logger = logging.getLogger(__name__)


class PixelStreamDecoder:
    """
    Reads QOI chunks from ``data`` and hands back one pixel per call.

    Keeps the same previous pixel / color cache state as the encoder, so
    after every pixel both caches hold the same 64 entries.
    """

    def __init__(self, data, total_pixels: int, offset: int = QOI_HEADER_SIZE):
        self.data = data
        self.pos = offset
        self.total_pixels = total_pixels
        self.produced = 0
        self.cache = ColorCache()
        self.previous = INITIAL_PIXEL
        self.run = 0

    def next_pixel(self) -> Pixel:
        if self.produced >= self.total_pixels:
            raise ContractViolation(
                f"QOI.decode: All {self.total_pixels} pixels were already decoded"
            )
        self.produced += 1

        # 1. Handle Run-Length Decoding
        # We skip reading a byte and just output the previous pixel again
        if self.run > 0:
            self.run -= 1
            return self.previous

        # 2. Read Next Op-Code
        data = self.data
        self._need(1)
        b1 = data[self.pos]
        kind = chunk_kind(b1)
        self._need(1 + PAYLOAD_SIZE[kind])
        p = self.pos + 1
        self.pos = p + PAYLOAD_SIZE[kind]
        r, g, b, a = self.previous

        if kind == RGB:
            pixel = Pixel(data[p], data[p + 1], data[p + 2], a)

        elif kind == RGBA:
            pixel = Pixel(data[p], data[p + 1], data[p + 2], data[p + 3])

        elif kind == INDEX:
            pixel = self.cache.lookup(b1)

        elif kind == DIFF:
            # Extract 2-bit differences and subtract bias of 2
            pixel = Pixel(
                (r + ((b1 >> 4) & 0x03) - 2) & 0xFF,
                (g + ((b1 >> 2) & 0x03) - 2) & 0xFF,
                (b + (b1 & 0x03) - 2) & 0xFF,
                a,
            )

        elif kind == LUMA:
            b2 = data[p]
            dg = (b1 & 0x3F) - 32
            dr_dg = ((b2 >> 4) & 0x0F) - 8
            db_dg = (b2 & 0x0F) - 8
            pixel = Pixel(
                (r + dg + dr_dg) & 0xFF,
                (g + dg) & 0xFF,
                (b + dg + db_dg) & 0xFF,
                a,
            )

        else:
            # This pixel is the first of the run, the rest come from self.run
            self.run = b1 & 0x3F
            return self.previous

        # 3. Update Index
        self.cache.insert(pixel)
        self.previous = pixel
        return pixel

    def finish(self) -> int:
        """
        Check the end marker that follows the last chunk.

        A run reaching past the last pixel is dropped. Bytes after the marker are ignored.

        :return: Offset just past the end marker.
        """
        marker = bytes(self.data[self.pos : self.pos + len(QOI_END_MARKER)])
        if marker != QOI_END_MARKER:
            raise TrailingDataMismatch(
                f"QOI.decode: Expected end marker at offset {self.pos}, found {marker.hex() or 'nothing'}"
            )
        return self.pos + len(QOI_END_MARKER)

    def _need(self, count: int) -> None:
        if self.pos + count > len(self.data):
            raise UnexpectedEndOfStream(
                f"QOI.decode: Stream ended at offset {len(self.data)} "
                f"after {self.produced - 1} of {self.total_pixels} pixels"
            )


def decode_pixels(data, max_pixels: int = QOI_PIXELS_MAX) -> tuple:
    """
    Decode a complete QOI file into its header and a list of pixels.

    :return: (Header, list of Pixel) with width * height pixels in raster order.
    """
    header = read_header(data, max_pixels)
    decoder = PixelStreamDecoder(data, header.pixel_count)
    pixels = [decoder.next_pixel() for _ in range(header.pixel_count)]
    decoder.finish()
    return header, pixels


class QOIDecoder:
    """
    A class to decode QOI (Quite OK Image) files into raw pixel data.
    """

    @staticmethod
    def decode(
        file_data: bytes,
        byte_offset: int = 0,
        byte_length: int = None,
        output_channels: int = None,
        max_pixels: int = QOI_PIXELS_MAX,
    ) -> dict:
        """
        Decode a QOI file given as a bytes/bytearray object.

        :param file_data: Bytes containing the QOI file.
        :param byte_offset: Offset to the start of the QOI file in file_data.
        :param byte_length: Length of the QOI file in bytes.
        :param output_channels: Number of channels to include in the decoded array (3 or 4).
                                If None, uses the channels defined in the file header.
        :param max_pixels: Largest width * height accepted from the header.
        :return: Dictionary containing width, height, colorspace, channels, and data (bytes).
        """
        # --- Handle Slicing ---
        if byte_length is None:
            byte_length = len(file_data) - byte_offset

        # memoryview keeps large inputs from being copied
        data = memoryview(file_data)[byte_offset : byte_offset + byte_length]

        # --- Header Parsing ---
        header = read_header(data, max_pixels)

        if output_channels is None:
            output_channels = header.channels

        if output_channels not in (3, 4):
            raise ContractViolation(
                "QOI.decode: The number of channels for the output is invalid"
            )

        # --- Decoding Loop ---
        total_pixels = header.pixel_count
        result = bytearray(total_pixels * output_channels)
        decoder = PixelStreamDecoder(data, total_pixels)

        write_pos = 0
        if output_channels == 4:
            for _ in range(total_pixels):
                result[write_pos : write_pos + 4] = decoder.next_pixel()
                write_pos += 4
        else:
            for _ in range(total_pixels):
                r, g, b, _a = decoder.next_pixel()
                result[write_pos : write_pos + 3] = (r, g, b)
                write_pos += 3

        end = decoder.finish()
        logger.debug(
            "Decoded %dx%d image (%d channels) from %d of %d bytes",
            header.width,
            header.height,
            header.channels,
            end,
            len(data),
        )

        return {
            "width": header.width,
            "height": header.height,
            "colorspace": header.colorspace,
            "channels": output_channels,
            "data": bytes(result),
        }


decode = QOIDecoder.decode
