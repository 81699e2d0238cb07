"""
Delaunay Triangulation
======================

Default low-poly engine built on OpenCV.

Algorithm:
    1. Optional grayscale, Gaussian blur (radius/sigma from params)
    2. Sobel gradient magnitude; pixels above sobel_threshold are edges
    3. Sample a fraction (point_rate) of edge pixels, capped at max_points
    4. Add image corners and border midpoints so the mesh covers the frame
    5. Delaunay subdivision (cv2.Subdiv2D)
    6. Color each triangle with the source pixel at its centroid

Only blur_radius, blur_factor, sobel_threshold, points_threshold,
point_rate, max_points, noise, grayscale and seed are read; the remaining
parameters are stroke/wireframe settings that do not apply to flat fills.
"""

import logging

import cv2
import numpy as np

from tronglerize.triangulation.engine import TriangulationParams, TriangulationResult


logger = logging.getLogger(__name__)


class DelaunayTriangulationEngine:
    """
    Edge-sampled Delaunay triangulation.

    Deterministic for a given image and params (point sampling is seeded).
    """

    def triangulate(
        self,
        image: np.ndarray,
        params: TriangulationParams,
    ) -> TriangulationResult:
        """
        Triangulate a BGR image.

        Raises:
            ValueError: If the image has an invalid shape or dtype
        """
        if image.ndim != 3 or image.shape[2] != 3:
            raise ValueError(f"Image must be BGR (H, W, 3). Got shape: {image.shape}")
        if image.dtype != np.uint8:
            raise ValueError(f"Image must be uint8. Got: {image.dtype}")

        height, width = image.shape[:2]
        if height < 2 or width < 2:
            raise ValueError(f"Image too small to triangulate: {width}x{height}")

        source = image
        if params.grayscale:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
            source = cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)

        points = self._sample_points(source, params)
        triangles = self._delaunay(points, width, height)
        colors = self._centroid_colors(source, triangles, params)

        logger.debug(
            f"Triangulated {width}x{height} image: "
            f"{len(points)} points, {len(triangles)} triangles"
        )

        return TriangulationResult(
            vertices=triangles.reshape(-1).astype(np.uint16),
            colors=colors.reshape(-1).astype(np.uint8),
        )

    def _sample_points(self, image: np.ndarray, params: TriangulationParams) -> np.ndarray:
        """Return (N, 2) float32 (x, y) points: sampled edges plus border."""
        height, width = image.shape[:2]

        blurred = image
        if params.blur_radius > 0:
            ksize = 2 * params.blur_radius + 1
            blurred = cv2.GaussianBlur(image, (ksize, ksize), params.blur_factor)

        gray = cv2.cvtColor(blurred, cv2.COLOR_BGR2GRAY)
        gx = cv2.Sobel(gray, cv2.CV_32F, 1, 0, ksize=3)
        gy = cv2.Sobel(gray, cv2.CV_32F, 0, 1, ksize=3)
        magnitude = cv2.magnitude(gx, gy)

        edge_yx = np.argwhere(magnitude > params.sobel_threshold)

        wanted = max(int(len(edge_yx) * params.point_rate), params.points_threshold)
        count = min(wanted, params.max_points, len(edge_yx))

        rng = np.random.default_rng(params.seed)
        if count > 0:
            chosen = edge_yx[rng.choice(len(edge_yx), size=count, replace=False)]
            sampled = chosen[:, ::-1].astype(np.float32)
        else:
            sampled = np.empty((0, 2), dtype=np.float32)

        x_max, y_max = width - 1, height - 1
        border = np.array(
            [
                (0, 0), (x_max, 0), (0, y_max), (x_max, y_max),
                (x_max // 2, 0), (x_max // 2, y_max),
                (0, y_max // 2), (x_max, y_max // 2),
            ],
            dtype=np.float32,
        )

        return np.unique(np.vstack([border, sampled]), axis=0)

    def _delaunay(self, points: np.ndarray, width: int, height: int) -> np.ndarray:
        """Return (T, 6) int64 triangles fully inside the image."""
        subdiv = cv2.Subdiv2D((0, 0, width, height))
        subdiv.insert([(float(x), float(y)) for x, y in points])

        triangles = subdiv.getTriangleList()
        if len(triangles) == 0:
            return np.empty((0, 6), dtype=np.int64)

        xs = triangles[:, 0::2]
        ys = triangles[:, 1::2]
        inside = (
            (xs >= 0).all(axis=1) & (xs <= width - 1).all(axis=1)
            & (ys >= 0).all(axis=1) & (ys <= height - 1).all(axis=1)
        )
        triangles = np.rint(triangles[inside]).astype(np.int64)

        # Drop triangles that collapsed to zero area after rounding
        x1, y1, x2, y2, x3, y3 = triangles.T
        area2 = (x2 - x1) * (y3 - y1) - (x3 - x1) * (y2 - y1)
        return triangles[area2 != 0]

    def _centroid_colors(
        self,
        image: np.ndarray,
        triangles: np.ndarray,
        params: TriangulationParams,
    ) -> np.ndarray:
        """Return (T, 3) uint8 RGB colors sampled at triangle centroids."""
        if len(triangles) == 0:
            return np.empty((0, 3), dtype=np.uint8)

        height, width = image.shape[:2]
        cx = np.clip(triangles[:, 0::2].mean(axis=1).astype(np.int64), 0, width - 1)
        cy = np.clip(triangles[:, 1::2].mean(axis=1).astype(np.int64), 0, height - 1)

        rgb = image[cy, cx][:, ::-1].astype(np.float32)

        if params.noise > 0:
            rng = np.random.default_rng(params.seed + 1)
            rgb += rng.uniform(-params.noise, params.noise, size=rgb.shape)

        return np.clip(rgb, 0, 255).astype(np.uint8)
