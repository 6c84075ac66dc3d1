import pytest
from image_helpers import write_noise_image


@pytest.fixture
def noise_png(tmp_path):
    path = tmp_path / "photo.png"
    write_noise_image(path, 200, 100)
    return path
