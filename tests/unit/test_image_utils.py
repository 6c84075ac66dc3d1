import cv2
import numpy as np
import pytest
from blurguard.core.exceptions import ImageDecodeError, ImageEncodeError
from blurguard.utils.image_utils import ImageBuffer
from image_helpers import write_noise_image, write_rotated_jpeg

def test_decode_reports_dimensions(tmp_path):
    path = tmp_path / "wide.png"
    write_noise_image(path, 64, 32)
    image = ImageBuffer.decode(path)

    assert image.width == 64
    assert image.height == 32

def test_decode_keeps_alpha(tmp_path):
    path = tmp_path / "alpha.png"
    write_noise_image(path, 16, 16, channels=4)
    assert ImageBuffer.decode(path).pixels.shape == (16, 16, 4)

def test_decode_missing_file(tmp_path):
    with pytest.raises(ImageDecodeError):
        ImageBuffer.decode(tmp_path / "missing.png")

def test_decode_garbage(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not a png")
    with pytest.raises(ImageDecodeError):
        ImageBuffer.decode(path)

def test_crop_blur_composite():
    pixels = np.random.default_rng(1).integers(0, 256, size=(50, 80, 3), dtype=np.uint8)
    image = ImageBuffer(pixels.copy())

    patch = image.crop(10, 5, 20, 15)
    assert patch.pixels.shape == (15, 20, 3)

    blurred = patch.blur(3)
    assert blurred.pixels.shape == patch.pixels.shape
    assert not np.array_equal(blurred.pixels, patch.pixels)

    image.composite(blurred, 10, 5)
    assert np.array_equal(image.pixels[5:20, 10:30], blurred.pixels)
    # everything else untouched
    image.pixels[5:20, 10:30] = pixels[5:20, 10:30]
    assert np.array_equal(image.pixels, pixels)

def test_crop_is_a_copy():
    image = ImageBuffer(np.zeros((10, 10, 3), dtype=np.uint8))
    patch = image.crop(0, 0, 5, 5)
    patch.pixels[:] = 255
    assert image.pixels.max() == 0

def test_blur_single_pixel_region():
    image = ImageBuffer(np.full((1, 1, 3), 128, dtype=np.uint8))
    assert image.blur(50).pixels.shape == (1, 1, 3)

def test_encode_and_write_roundtrip(tmp_path):
    path = tmp_path / "out.png"
    pixels = np.random.default_rng(2).integers(0, 256, size=(12, 9, 3), dtype=np.uint8)
    ImageBuffer(pixels).encode_and_write(path)

    assert np.array_equal(cv2.imread(str(path)), pixels)
    assert list(tmp_path.iterdir()) == [path]

def test_encode_unknown_extension_leaves_file(tmp_path):
    path = tmp_path / "photo.xyz"
    path.write_bytes(b"original")
    with pytest.raises(ImageEncodeError):
        ImageBuffer(np.zeros((4, 4, 3), dtype=np.uint8)).encode_and_write(path)
    assert path.read_bytes() == b"original"

def test_decode_applies_exif_orientation(tmp_path):
    path = tmp_path / "portrait.jpg"
    write_rotated_jpeg(path, 200, 100, orientation=6)

    image = ImageBuffer.decode(path)

    # stored 200x100, displayed rotated 90 degrees
    assert image.width == 100
    assert image.height == 200
