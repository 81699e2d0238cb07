"""
Test Configuration
==================

Pytest fixtures and test doubles for tronglerize.
"""

import threading
import time
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np
import pytest

from tronglerize.models.job import FrameJob
from tronglerize.models.mesh import Mesh
from tronglerize.triangulation.engine import TriangulationParams, TriangulationResult


# One triangle, (0,0) (100,0) (0,100), pure red
SCENARIO_MESH = Mesh(vertices=(0, 0, 100, 0, 0, 100), colors=b"\xff\x00\x00")
SCENARIO_BYTES = bytes.fromhex("0006" "0000" "0000" "0064" "0000" "0000" "0064" "ff0000")


def make_mesh(triangles: int, offset: int = 0) -> Mesh:
    """Mesh of `triangles` distinct triangles with distinct colors."""
    vertices = []
    colors = []
    for i in range(triangles):
        base = offset + i
        vertices.extend([base, 0, base + 10, 0, base, 10])
        colors.extend([(base * 7) % 256, (base * 13) % 256, (base * 31) % 256])
    return Mesh(vertices=tuple(vertices), colors=bytes(colors))


class FakeEngine:
    """
    Triangulation engine returning a fixed two-triangle mesh.

    Optionally sleeps to make overlapping executions observable and
    records the peak number of concurrent calls.
    """

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.calls = 0
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()

    def triangulate(self, image: np.ndarray, params: TriangulationParams) -> TriangulationResult:
        with self._lock:
            self.calls += 1
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            return TriangulationResult(
                vertices=np.array([0, 0, 10, 0, 0, 10, 10, 0, 10, 10, 0, 10], dtype=np.uint16),
                colors=np.array([255, 0, 0, 0, 0, 255], dtype=np.uint8),
            )
        finally:
            with self._lock:
                self.active -= 1


class StubEngine:
    """Triangulation engine returning a preset result or raising a preset error."""

    def __init__(self, result: Optional[TriangulationResult] = None, error: Optional[Exception] = None):
        self.result = result
        self.error = error

    def triangulate(self, image: np.ndarray, params: TriangulationParams) -> TriangulationResult:
        if self.error is not None:
            raise self.error
        return self.result


def blank_image_loader(path: Path) -> np.ndarray:
    """Image loader that never touches the filesystem."""
    return np.zeros((16, 16, 3), dtype=np.uint8)


class RecordingRenderer:
    """
    Renderer that records every call instead of drawing.

    Attributes:
        calls: Method names in call order
        uploads: Vertex arrays passed to upload_vertices
        draws: (rgb, start_index) pairs per draw_triangle
        stop_after: poll_events() returns True once this many frames were swapped
    """

    def __init__(self, stop_after: Optional[int] = None) -> None:
        self.stop_after = stop_after
        self.calls: List[str] = []
        self.uploads: List[np.ndarray] = []
        self.draws: List[tuple] = []
        self.swaps = 0
        self.title: Optional[str] = None
        self._color = None

    def open(self, title: str) -> None:
        self.title = title
        self.calls.append("open")

    def upload_vertices(self, vertices: np.ndarray) -> None:
        self.calls.append("upload_vertices")
        self.uploads.append(np.array(vertices))

    def clear(self) -> None:
        self.calls.append("clear")

    def set_triangle_color(self, rgb) -> None:
        self.calls.append("set_triangle_color")
        self._color = tuple(rgb)

    def draw_triangle(self, start_index: int) -> None:
        self.calls.append("draw_triangle")
        self.draws.append((self._color, start_index))

    def swap_buffers(self) -> None:
        self.calls.append("swap_buffers")
        self.swaps += 1

    def poll_events(self) -> bool:
        self.calls.append("poll_events")
        return self.stop_after is not None and self.swaps >= self.stop_after

    def close(self) -> None:
        self.calls.append("close")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def write_test_image(path: Path, width: int = 64, height: int = 48) -> Path:
    """Write a JPEG with a diagonal edge so triangulation has features."""
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:, : width // 2] = (40, 120, 200)
    cv2.line(image, (0, 0), (width - 1, height - 1), (255, 255, 255), 3)
    cv2.rectangle(image, (width // 4, height // 4), (width // 2, height // 2), (0, 200, 0), -1)
    assert cv2.imwrite(str(path), image)
    return path


@pytest.fixture
def frames_dir(tmp_path):
    """Directory with five small extracted frames."""
    directory = tmp_path / "frames"
    directory.mkdir()
    for i in range(1, 6):
        write_test_image(directory / f"frame{i:06d}.jpg")
    return directory


@pytest.fixture
def output_dir(tmp_path):
    directory = tmp_path / "out"
    directory.mkdir()
    return directory


@pytest.fixture
def make_jobs(tmp_path):
    """Factory for FrameJobs over fake source paths."""

    def _make(count: int, failing: Optional[set] = None, output: Optional[Path] = None):
        failing = failing or set()
        output = output or tmp_path / "jobs_out"
        output.mkdir(exist_ok=True)
        jobs = []
        for i in range(count):
            name = f"bad{i}.jpg" if i in failing else f"frame{i}.jpg"
            jobs.append(
                FrameJob(
                    source_path=tmp_path / "src" / name,
                    destination_path=output / f"frame{i}.bin",
                    sequence_index=i,
                )
            )
        return jobs

    return _make


def failing_loader(path: Path) -> np.ndarray:
    """Image loader that fails for sources named bad*."""
    if Path(path).name.startswith("bad"):
        raise OSError(f"cannot open {path}")
    return blank_image_loader(path)


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def recording_renderer():
    return RecordingRenderer()


@pytest.fixture
def fake_clock():
    return FakeClock()
