"""OpenCV capture and output adapters against real files in tmp_path.

Run:
    pytest tests/test_devices.py -v
"""
import cv2
import numpy as np
import pytest

from conftest import write_video
from sketchcam.devices import CameraSource, VideoFileSink, WindowSink
from sketchcam.errors import AcquisitionFailure, EndOfStream
from sketchcam.pixel_buffer import PixelBuffer


class ScriptedCapture:
    """Replaces cv2.VideoCapture with a fixed list of read() results."""

    def __init__(self, results):
        self.results = list(results)
        self.released = False

    def read(self):
        return self.results.pop(0)

    def release(self):
        self.released = True


@pytest.fixture
def clip(tmp_path):
    return write_video(tmp_path / "clip.avi", frames=4)


def test_missing_video_file_fails_to_open(tmp_path):
    with pytest.raises(AcquisitionFailure, match="Cannot open"):
        CameraSource(str(tmp_path / "nope.mp4"), mirror=False)


def test_file_source_reads_until_end_of_stream(clip):
    frames = []
    with CameraSource(clip, mirror=False) as source:
        with pytest.raises(EndOfStream):
            for _ in range(10):
                frames.append(source.read())
    assert len(frames) == 4
    for buf in frames:
        assert (buf.width, buf.height) == (32, 24)
        assert np.all(buf.data[..., 3] == 255)
    assert source.size == (32, 24)


def test_mirror_flips_horizontally(clip):
    with CameraSource(clip, mirror=False) as plain, CameraSource(clip, mirror=True) as mirrored:
        a = plain.read()
        b = mirrored.read()
    np.testing.assert_array_equal(b.data, a.data[:, ::-1])


def test_frame_size_change_is_an_acquisition_failure(clip):
    source = CameraSource(clip, mirror=False)
    source.cap.release()
    source.cap = ScriptedCapture([
        (True, np.zeros((24, 32, 3), dtype=np.uint8)),
        (True, np.zeros((12, 16, 3), dtype=np.uint8)),
    ])
    assert source.read().shape == (24, 32)
    with pytest.raises(AcquisitionFailure, match="size changed") as exc:
        source.read()
    assert not isinstance(exc.value, EndOfStream)
    source.close()
    assert source.cap.released


def test_failed_camera_read_is_not_end_of_stream(clip):
    source = CameraSource(clip, mirror=False)
    source.cap.release()
    source.is_file = False
    source.cap = ScriptedCapture([(False, None)])
    with pytest.raises(AcquisitionFailure) as exc:
        source.read()
    assert not isinstance(exc.value, EndOfStream)


def test_video_sink_writes_readable_file(tmp_path):
    target = tmp_path / "out.avi"
    frame = PixelBuffer.solid(32, 24, (200, 100, 50))
    with VideoFileSink(str(target), fps=10, fourcc="MJPG") as sink:
        for _ in range(3):
            sink.show(frame)
    assert sink.frames_written == 3
    assert sink.writer is None

    cap = cv2.VideoCapture(str(target))
    read = 0
    while True:
        ok, img = cap.read()
        if not ok:
            break
        assert img.shape == (24, 32, 3)
        read += 1
    cap.release()
    assert read == 3


def test_window_close_before_first_frame_is_noop():
    with WindowSink("never shown") as sink:
        pass
    assert not sink._opened


def test_video_sink_without_frames_writes_nothing(tmp_path):
    target = tmp_path / "out.mp4"
    with VideoFileSink(str(target), fps=12) as sink:
        assert sink.writer is None
    assert sink.frames_written == 0
    assert not target.exists()
