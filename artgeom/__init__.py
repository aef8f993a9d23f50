from .shapes import Circle, FillRule, HasCenter, PathStyle, Point, Rect, SplitDirection
from .config import PointMapOptions, ScatterOptions, get_default_options, set_default_options
from .pointmap import OutOfBoundsError, PointMap
from .polyline import bounding_box, contains, edges, length, polylines_intersect, segments_intersect
from .path import Path
from .sampling import map_range, points_inside, scatter, weighted_random

__all__ = [
    'Circle',
    'FillRule',
    'HasCenter',
    'PathStyle',
    'Point',
    'Rect',
    'SplitDirection',
    'PointMapOptions',
    'ScatterOptions',
    'get_default_options',
    'set_default_options',
    'OutOfBoundsError',
    'PointMap',
    'bounding_box',
    'contains',
    'edges',
    'length',
    'polylines_intersect',
    'segments_intersect',
    'Path',
    'map_range',
    'points_inside',
    'scatter',
    'weighted_random',
]
