"""
Renderer
========

Presentation surface driven by the playback sequencer.

The sequencer only needs flat-color triangle drawing:

    open(title)                  once, before the first frame
    upload_vertices(vertices)    once per scene change
    clear()                      once per presented frame
    set_triangle_color(rgb)  \\
    draw_triangle(start_index)  } once per triangle per presented frame
    swap_buffers()               once per presented frame
    poll_events() -> bool        once per presented frame; True = shut down
    close()                      once, after the last frame

`start_index` counts vertices (x, y pairs) in the uploaded buffer, so
triangle i starts at vertex 3 * i.

OpenCVRenderer is the default implementation: a numpy canvas filled with
cv2.fillConvexPoly and shown with cv2.imshow.
"""

import logging
from typing import Optional, Protocol, Sequence, Tuple

import cv2
import numpy as np


logger = logging.getLogger(__name__)


RGB = Tuple[int, int, int]

_ESC = 27


class Renderer(Protocol):
    """Protocol for presentation surfaces."""

    def open(self, title: str) -> None:
        ...

    def upload_vertices(self, vertices: np.ndarray) -> None:
        """Replace the vertex buffer with (N, 2) integer points."""
        ...

    def clear(self) -> None:
        ...

    def set_triangle_color(self, rgb: RGB) -> None:
        ...

    def draw_triangle(self, start_index: int) -> None:
        """Draw vertices start_index..start_index+2 with the current color."""
        ...

    def swap_buffers(self) -> None:
        ...

    def poll_events(self) -> bool:
        """Process window events; return True when playback should stop."""
        ...

    def close(self) -> None:
        ...


class OpenCVRenderer:
    """
    Software renderer using an OpenCV window.

    Mesh coordinates are pixel positions on a `width` x `height` canvas.

    Controls: q/ESC or closing the window stops playback.

    Attributes:
        width: Canvas width in pixels
        height: Canvas height in pixels
        background: RGB clear color
    """

    def __init__(
        self,
        width: int = 1920,
        height: int = 1080,
        background: RGB = (0, 0, 0),
        window_scale: float = 0.5,
    ) -> None:
        self.width = width
        self.height = height
        self.background = background
        self.window_scale = window_scale

        self._window_name: Optional[str] = None
        self._canvas = np.zeros((height, width, 3), dtype=np.uint8)
        self._vertices = np.empty((0, 2), dtype=np.int32)
        self._color_bgr: Tuple[int, int, int] = (255, 255, 255)

    @property
    def canvas(self) -> np.ndarray:
        """Current back buffer (BGR)."""
        return self._canvas

    def open(self, title: str) -> None:
        cv2.namedWindow(title, cv2.WINDOW_NORMAL)
        self._window_name = title
        cv2.resizeWindow(
            title,
            max(1, int(self.width * self.window_scale)),
            max(1, int(self.height * self.window_scale)),
        )
        logger.info(f"Opened window '{title}' ({self.width}x{self.height})")

    def upload_vertices(self, vertices: np.ndarray) -> None:
        self._vertices = np.asarray(vertices, dtype=np.int32).reshape(-1, 2)

    def clear(self) -> None:
        r, g, b = self.background
        self._canvas[:] = (b, g, r)

    def set_triangle_color(self, rgb: Sequence[int]) -> None:
        r, g, b = rgb
        self._color_bgr = (int(b), int(g), int(r))

    def draw_triangle(self, start_index: int) -> None:
        points = self._vertices[start_index:start_index + 3]
        if len(points) != 3:
            return
        cv2.fillConvexPoly(self._canvas, points, self._color_bgr, lineType=cv2.LINE_8)

    def swap_buffers(self) -> None:
        if self._window_name is not None:
            cv2.imshow(self._window_name, self._canvas)

    def poll_events(self) -> bool:
        if self._window_name is None:
            return True

        key = cv2.waitKey(1) & 0xFF
        if key == ord("q") or key == _ESC:
            logger.info("Playback stopped by user")
            return True

        if cv2.getWindowProperty(self._window_name, cv2.WND_PROP_VISIBLE) < 1:
            logger.info("Playback window closed")
            return True

        return False

    def close(self) -> None:
        if self._window_name is not None:
            cv2.destroyWindow(self._window_name)
            self._window_name = None
