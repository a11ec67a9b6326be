import cv2
import numpy as np
import pytest

from conftest import rgb_buffer
from sketchcam.errors import EmptyExport
from sketchcam.export import encode_png, save_png


@pytest.fixture
def frame():
    rng = np.random.default_rng(3)
    return rgb_buffer(rng.integers(0, 256, size=(7, 9, 3)))


def test_png_is_lossless(frame):
    data = encode_png(frame)
    assert data[:8] == b"\x89PNG\r\n\x1a\n"
    decoded = cv2.imdecode(np.frombuffer(data, np.uint8), cv2.IMREAD_UNCHANGED)
    np.testing.assert_array_equal(cv2.cvtColor(decoded, cv2.COLOR_BGRA2RGBA), frame.data)


def test_encode_without_frame_reports_nothing_to_save():
    with pytest.raises(EmptyExport, match="Nothing to save"):
        encode_png(None)


def test_save_png_creates_parent_dirs(tmp_path, frame):
    target = tmp_path / "shots" / "camera-drawing.png"
    saved = save_png(frame, target)
    assert saved == target
    img = cv2.imread(str(target), cv2.IMREAD_UNCHANGED)
    assert img.shape == (7, 9, 4)


def test_save_png_without_frame_writes_nothing(tmp_path):
    target = tmp_path / "out.png"
    with pytest.raises(EmptyExport):
        save_png(None, target)
    assert not target.exists()
