import numpy as np
import pytest

from qoicodec import (
    ContractViolation,
    InvalidChannels,
    InvalidDimensions,
    Pixel,
    PixelStreamEncoder,
    QOIEncoder,
    encode_pixels,
    write_header,
)

END = bytes([0, 0, 0, 0, 0, 0, 0, 1])


def chunks_of(pixels, channels=3):
    """Encode a single-row image and strip header and end marker."""
    encoded = encode_pixels(pixels, len(pixels), 1, channels)
    assert encoded[:14] == write_header(len(pixels), 1, channels, 0)
    assert encoded[-8:] == END
    return encoded[14:-8]


def test_encode_rgb():
    pixels = [(100, 100, 100), (200, 200, 200), (100, 101, 100)]
    assert encode_pixels(pixels, 3, 1, channels=3, colorspace=1) == bytes(
        [
            0x71, 0x6F, 0x69, 0x66, 0x00, 0x00, 0x00, 0x03, 0x00, 0x00, 0x00, 0x01, 0x03, 0x01,
            0xFE, 0x64, 0x64, 0x64, 0xFE, 0xC8, 0xC8, 0xC8, 0xFE, 0x64, 0x65, 0x64,
        ]
    ) + END


def test_encode_rgba():
    pixels = [(100, 100, 100, 200), (200, 200, 200, 100), (100, 101, 100, 255)]
    assert encode_pixels(pixels, 3, 1, channels=4, colorspace=1)[14:] == bytes(
        [
            0xFF, 0x64, 0x64, 0x64, 0xC8, 0xFF, 0xC8, 0xC8, 0xC8, 0x64,
            0xFF, 0x64, 0x65, 0x64, 0xFF,
        ]
    ) + END


def test_encode_mixed_rgba():
    """RGB chunk when only the colour changes, RGBA as soon as alpha does."""
    pixels = [
        (100, 100, 100, 200),
        (200, 200, 200, 100),
        (100, 101, 100, 100),
        (100, 101, 100, 255),
    ]
    assert chunks_of(pixels, channels=4) == bytes(
        [
            0xFF, 0x64, 0x64, 0x64, 0xC8, 0xFF, 0xC8, 0xC8, 0xC8, 0x64,
            0xFE, 0x64, 0x65, 0x64, 0xFF, 0x64, 0x65, 0x64, 0xFF,
        ]
    )


def test_encode_index():
    pixels = [
        (100, 100, 100),
        (200, 200, 200),
        (100, 100, 100),
        (0, 0, 0),
        (200, 200, 200),
        (0, 0, 0),
    ]
    assert encode_pixels(pixels, 3, 2, channels=3)[14:-8] == bytes(
        [0xFE, 0x64, 0x64, 0x64, 0xFE, 0xC8, 0xC8, 0xC8, 0x11, 0xFE, 0x00, 0x00, 0x00, 0x2D, 0x35]
    )


def test_index_takes_priority_over_run():
    pixels = [(100, 100, 100, 100), (200, 200, 200, 255)] + [(100, 100, 100, 100)] * 7
    assert chunks_of(pixels, channels=4) == bytes(
        [0xFF, 0x64, 0x64, 0x64, 0x64, 0xFF, 0xC8, 0xC8, 0xC8, 0xFF, 0x28, 0xC5]
    )


def test_encode_diff():
    pixels = [(1, 1, 1), (2, 2, 2), (0, 0, 0), (255, 255, 255)]
    assert chunks_of(pixels) == bytes([0x7F, 0x7F, 0x40, 0x55])


def test_encode_luma():
    pixels = [(25, 30, 35), (20, 15, 3), (36, 29, 17), (33, 30, 25)]
    assert chunks_of(pixels) == bytes([0xBE, 0x3D, 0xFE, 0x14, 0x0F, 0x03, 0xAE, 0xA8, 0xA1, 0x4F])


def test_encode_run():
    pixels = [(127, 127, 127)] * 20
    assert encode_pixels(pixels, 5, 4, channels=3)[14:-8] == bytes([0xFE, 0x7F, 0x7F, 0x7F, 0xD2])


def test_run_of_62_then_different_pixel():
    # The first pixel equals the implicit previous pixel, so everything is one run
    pixels = [(0, 0, 0, 255)] * 62 + [(1, 1, 1, 255)]
    assert chunks_of(pixels, channels=4) == bytes([0xFD, 0x7F])


def test_run_of_63_splits():
    pixels = [(0, 0, 0, 255)] * 63
    assert chunks_of(pixels, channels=4) == bytes([0xFD, 0xC0])


def test_run_never_produces_rgb_or_rgba_tags():
    chunks = chunks_of([(0, 0, 0)] * (62 * 3 + 10))
    assert chunks == bytes([0xFD, 0xFD, 0xFD, 0xC9])


@pytest.mark.parametrize(
    "pixel, expected",
    [
        # (dr, dg, db) = (1, 1, -2)
        ((11, 11, 8), bytes([0x7C])),
        # (-2, -2, 1)
        ((8, 8, 11), bytes([0x43])),
        # (2, 1, -2): dr out of DIFF range, LUMA with dr-dg=1, db-dg=-3
        ((12, 11, 8), bytes([0xA1, 0x95])),
        # (3, 0, 0)
        ((13, 10, 10), bytes([0xA0, 0xB8])),
        # dg=-32 .. 31 edges
        ((232, 234, 234), bytes([0x80, 0x68])),
        ((41, 41, 41), bytes([0xBF, 0x88])),
        # dg out of LUMA range
        ((42, 42, 42), bytes([0xFE, 42, 42, 42])),
    ],
)
def test_delta_boundaries(pixel, expected):
    # (10, 10, 10) after opaque black is LUMA dg=10
    assert chunks_of([(10, 10, 10), pixel]) == bytes([0xAA, 0x88]) + expected


def test_end_to_end_example():
    encoded = encode_pixels([(10, 20, 30, 255), (10, 20, 30, 255)], 2, 1, channels=4)
    assert encoded == write_header(2, 1, 4, 0) + bytes([0xFE, 10, 20, 30, 0xC0]) + END


def test_stream_encoder_push():
    out = bytearray()
    encoder = PixelStreamEncoder(3, out)
    assert encoder.push(Pixel(200, 5, 5, 255)) == 4
    assert encoder.push(Pixel(200, 5, 5, 255)) == 0
    assert encoder.run == 1
    # Last pixel closes the run
    assert encoder.push(Pixel(200, 5, 5, 255)) == 1
    encoder.finish()
    assert out == bytes([0xFE, 200, 5, 5, 0xC1]) + END
    assert encoder.stats == {"RGB": 1, "RUN": 1}


def test_stream_encoder_pixel_count_contract():
    encoder = PixelStreamEncoder(1)
    encoder.push(Pixel(1, 2, 3, 255))
    with pytest.raises(ContractViolation):
        encoder.push(Pixel(1, 2, 3, 255))

    encoder = PixelStreamEncoder(2)
    encoder.push(Pixel(1, 2, 3, 255))
    with pytest.raises(ContractViolation):
        encoder.finish()


def test_determinism(synthetic_image):
    arr = synthetic_image(16, 24, 4, seed=7)
    desc = {"width": 24, "height": 16, "channels": 4, "colorspace": 0}
    assert QOIEncoder.encode(arr, desc) == QOIEncoder.encode(arr.tobytes(), desc)
    assert QOIEncoder.encode(arr, desc) == QOIEncoder.encode(arr, desc)


def test_raw_and_pixel_apis_agree(synthetic_image):
    arr = synthetic_image(9, 11, 3, seed=3)
    pixels = [tuple(int(v) for v in px) for px in arr.reshape(-1, 3)]
    desc = {"width": 11, "height": 9, "channels": 3, "colorspace": 1}
    assert QOIEncoder.encode(arr, desc) == encode_pixels(pixels, 11, 9, 3, 1)
    assert QOIEncoder.encode(list(arr.tobytes()), desc) == encode_pixels(pixels, 11, 9, 3, 1)


def test_encode_rejects_wrong_buffer_length():
    with pytest.raises(ContractViolation):
        QOIEncoder.encode(bytes(11), {"width": 2, "height": 2, "channels": 3, "colorspace": 0})
    with pytest.raises(ContractViolation):
        encode_pixels([(0, 0, 0)] * 3, 2, 2, channels=3)


def test_encode_rejects_alpha_on_rgb_image():
    with pytest.raises(ContractViolation):
        encode_pixels([(0, 0, 0, 255), (1, 2, 3, 128)], 2, 1, channels=3)


def test_encode_rejects_out_of_range_values():
    with pytest.raises(ContractViolation):
        encode_pixels([(256, 0, 0)], 1, 1, channels=3)
    with pytest.raises(ContractViolation):
        QOIEncoder.encode([300, 0, 0], {"width": 1, "height": 1, "channels": 3})
    with pytest.raises(ContractViolation):
        encode_pixels([(1, 2)], 1, 1, channels=3)


def test_encode_rejects_invalid_description():
    with pytest.raises(InvalidDimensions):
        QOIEncoder.encode(b"", {"width": 0, "height": 1, "channels": 3, "colorspace": 0})
    with pytest.raises(InvalidChannels):
        QOIEncoder.encode(bytes(5), {"width": 1, "height": 1, "channels": 5, "colorspace": 0})
    with pytest.raises(ContractViolation):
        QOIEncoder.encode(bytes(3), {"width": 1, "height": 1})


def test_encode_numpy_input(synthetic_image):
    arr = synthetic_image(4, 4, 4, seed=1)
    desc = {"width": 4, "height": 4, "channels": 4, "colorspace": 0}
    assert QOIEncoder.encode(arr, desc) == QOIEncoder.encode(np.ascontiguousarray(arr).tobytes(), desc)


def test_encode_rejects_non_integer_values():
    with pytest.raises(ContractViolation):
        encode_pixels([(1.5, 2, 3)], 1, 1, channels=3)
    with pytest.raises(ContractViolation):
        encode_pixels([(1, 2, 3, "255")], 1, 1, channels=4)
    # numpy integers are fine
    assert encode_pixels([tuple(np.array([1, 2, 3], dtype=np.uint8))], 1, 1, channels=3)
