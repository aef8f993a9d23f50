"""Example sketch: scatter spaced dots and keep the ones inside a wobbly ring."""

import math
import sys

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from artgeom import Path, PathStyle, Rect, points_inside, scatter


def _ring(center, radius, wobble, rng, steps=180):
    points = []
    for k in range(steps):
        theta = 2.0 * math.pi * k / steps
        r = radius + rng.uniform(-wobble, wobble)
        points.append((center[0] + r * math.cos(theta), center[1] + r * math.sin(theta)))
    return Path(points, PathStyle(stroke="#333", stroke_weight=1.0))


def main() -> None:
    rng = np.random.default_rng(2024)
    bounds = Rect.from_bounds(0.0, 0.0, 800.0, 800.0)

    dots = scatter(bounds, 3000, 9.0, rng=rng, resolution=64, sequence="halton")
    ring = _ring(bounds.center, 300.0, 12.0, rng)
    inside = points_inside(ring, dots.points())

    print(f"Scattered: {len(dots)}")
    print(f"Ring length: {ring.length():.2f}")
    print(f"Inside ring: {len(inside)}")

    if len(sys.argv) > 1:
        fig, ax = plt.subplots(figsize=(6, 6))
        xs, ys = zip(*ring.points)
        ax.plot(xs + xs[:1], ys + ys[:1], color=ring.style.stroke, linewidth=ring.style.stroke_weight)
        if inside:
            ax.scatter([p.x for p in inside], [p.y for p in inside], s=2, c="#1f77b4")
        ax.set_aspect("equal")
        ax.invert_yaxis()
        fig.savefig(sys.argv[1], dpi=150)
        print(f"Saved plot to {sys.argv[1]}")


if __name__ == "__main__":
    main()
