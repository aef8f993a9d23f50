import argparse
import json
import logging
from pathlib import Path as FilePath
from typing import List, Optional, Sequence, Tuple

import numpy as np

from artgeom import Path, PointMapOptions, Rect, ScatterOptions, points_inside, scatter
from artgeom.config import CANDIDATE_SEQUENCES, INDEXING_MODES

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _parse_polygon(value: str) -> List[Tuple[float, float]]:
    points: List[Tuple[float, float]] = []
    for chunk in value.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        parts = [part.strip() for part in chunk.split(",")]
        if len(parts) != 2:
            raise argparse.ArgumentTypeError(f"polygon vertex must be 'x,y', got {chunk!r}")
        try:
            points.append((float(parts[0]), float(parts[1])))
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"polygon vertex must be numeric, got {chunk!r}") from exc
    if len(points) < 3:
        raise argparse.ArgumentTypeError("polygon needs at least three vertices")
    return points


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="artgeom", description="Procedural geometry helpers")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    scatter_cmd = commands.add_parser("scatter", help="Scatter points with a minimum spacing")
    scatter_cmd.add_argument(
        "--bounds",
        type=float,
        nargs=4,
        metavar=("X", "Y", "WIDTH", "HEIGHT"),
        default=(0.0, 0.0, 1000.0, 1000.0),
        help="Sampling domain (default: 0 0 1000 1000)",
    )
    scatter_cmd.add_argument("--count", type=int, default=ScatterOptions.count)
    scatter_cmd.add_argument("--min-distance", type=float, default=ScatterOptions.min_distance)
    scatter_cmd.add_argument("--resolution", type=int, default=ScatterOptions.resolution)
    scatter_cmd.add_argument("--max-attempts", type=int, default=None)
    scatter_cmd.add_argument("--seed", type=int, default=None, help="Random seed (default: fresh entropy)")
    scatter_cmd.add_argument("--sequence", choices=CANDIDATE_SEQUENCES, default=ScatterOptions.sequence)
    scatter_cmd.add_argument("--indexing", choices=INDEXING_MODES, default="grid")
    scatter_cmd.add_argument(
        "--polygon",
        type=_parse_polygon,
        help="Keep only points inside this polygon, e.g. '0,0;100,0;100,100;0,100'",
    )
    scatter_cmd.add_argument("--output", help="Write the scattered points as JSON to this path")
    return parser


def _run_scatter(args: argparse.Namespace) -> dict:
    options = ScatterOptions(
        count=args.count,
        min_distance=args.min_distance,
        resolution=args.resolution,
        sequence=args.sequence,
        max_attempts=args.max_attempts,
        seed=args.seed,
    )
    bounds = Rect.from_bounds(*args.bounds)
    rng = np.random.default_rng(options.seed)

    logger.info("Scattering %d point(s) in %s", options.count, bounds)
    index = scatter(
        bounds,
        options.count,
        options.min_distance,
        rng=rng,
        resolution=options.resolution,
        sequence=options.sequence,
        max_attempts=options.max_attempts,
        options=PointMapOptions(indexing=args.indexing),
    )
    points = index.points()

    if args.polygon is not None:
        before = len(points)
        points = points_inside(Path(args.polygon), points)
        logger.info("Polygon filter kept %d of %d point(s)", len(points), before)

    return {
        "bounds": list(args.bounds),
        "requested": options.count,
        "count": len(points),
        "points": [[p.x, p.y] for p in points],
    }


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    try:
        result = _run_scatter(args)
    except ValueError as exc:
        logger.error("%s", exc)
        raise SystemExit(2) from exc

    if args.output:
        out_path = FilePath(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(result, indent=2), encoding="utf-8")
        logger.info("Wrote %d point(s) to %s", result["count"], out_path)

    print(f"placed {result['count']} of {result['requested']} point(s)")


if __name__ == "__main__":
    main()
