import numpy as np
import pytest


def make_image(height, width, channels, seed=0):
    """
    Build a (height, width, channels) uint8 image that exercises every chunk type:
    runs, palette repeats (INDEX), small deltas (DIFF/LUMA) and big jumps (RGB/RGBA).
    """
    rng = np.random.default_rng(seed)
    total = height * width

    palette = rng.integers(0, 256, size=(12, channels))
    idx = rng.integers(0, len(palette), size=total // 3 + 1)
    img = palette[np.repeat(idx, 3)[:total]].astype(np.int16)

    small = rng.random(total) < 0.3
    img[small] += rng.integers(-2, 2, size=(int(small.sum()), channels))

    medium = rng.random(total) < 0.1
    img[medium] += rng.integers(-20, 20, size=(int(medium.sum()), channels))

    return (img % 256).astype(np.uint8).reshape(height, width, channels)


@pytest.fixture
def synthetic_image():
    return make_image
