import math

import numpy as np
import pytest

from artgeom import Circle, OutOfBoundsError, Path, Point, PointMap, PointMapOptions, Rect

BOUNDS = Rect.from_bounds(0.0, 0.0, 100.0, 100.0)
LEGACY = PointMapOptions(indexing='legacy')
GRID = PointMapOptions(indexing='grid')


@pytest.mark.parametrize('options', [GRID, LEGACY], ids=['grid', 'legacy'])
def test_far_corner_is_not_a_neighbor(options):
    index = PointMap(BOUNDS, 10, options)
    near = Point(5.0, 5.0)
    far = Point(95.0, 95.0)
    index.insert(near)
    index.insert(far)

    assert index.neighbors(near, 20.0) == [near]


@pytest.mark.parametrize('options', [GRID, LEGACY], ids=['grid', 'legacy'])
@pytest.mark.parametrize(
    'center',
    [(100.0, 50.0), (50.0, 100.0), (-0.5, 50.0), (50.0, -0.5), (150.0, 150.0)],
)
def test_insert_rejects_centers_outside_bounds(options, center):
    index = PointMap(BOUNDS, 10, options)

    with pytest.raises(OutOfBoundsError) as excinfo:
        index.insert(Point(*center))

    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.center == center
    assert excinfo.value.bounds is BOUNDS
    assert len(index) == 0


@pytest.mark.parametrize('options', [GRID, LEGACY], ids=['grid', 'legacy'])
@pytest.mark.parametrize('center', [(0.0, 0.0), (0.0, 99.999), (99.999, 0.0), (50.0, 50.0)])
def test_insert_accepts_centers_on_near_edges_and_inside(options, center):
    index = PointMap(BOUNDS, 10, options)

    index.insert(Point(*center))

    assert index.points() == [Point(*center)]


@pytest.mark.parametrize('resolution', [0, -3, 2.5, True, '10'])
def test_resolution_must_be_positive_integer(resolution):
    with pytest.raises(ValueError):
        PointMap(BOUNDS, resolution)


@pytest.mark.parametrize('options', [GRID, LEGACY], ids=['grid', 'legacy'])
def test_every_inserted_shape_is_its_own_neighbor(options):
    rng = np.random.default_rng(7)
    index = PointMap(BOUNDS, 8, options)
    shapes = [Point(float(x), float(y)) for x, y in rng.uniform(0.0, 100.0, size=(200, 2))]
    for shape in shapes:
        index.insert(shape)

    for shape in shapes:
        assert shape in index.neighbors(shape)


@pytest.mark.parametrize('options', [GRID, LEGACY], ids=['grid', 'legacy'])
@pytest.mark.parametrize('max_distance', [0.5, 5.0, 12.5, 40.0])
def test_neighbors_respect_max_distance(options, max_distance):
    rng = np.random.default_rng(11)
    index = PointMap(BOUNDS, 10, options)
    for x, y in rng.uniform(0.0, 100.0, size=(300, 2)):
        index.insert(Point(float(x), float(y)))

    for query in [Point(50.0, 50.0), Point(1.0, 99.0), Point(73.2, 12.8)]:
        found = index.neighbors(query, max_distance)
        assert all(query.distance_to(other) < max_distance for other in found)
        assert found == index.neighbors(query, max_distance)


def test_distance_filter_is_strict():
    index = PointMap(BOUNDS, 10)
    a = Point(10.0, 10.0)
    b = Point(13.0, 14.0)
    index.insert(a)
    index.insert(b)

    assert index.neighbors(a, 5.0) == [a]
    assert set(index.neighbors(a, 5.0001)) == {a, b}


def test_neighbors_never_fail_for_unknown_or_outside_queries():
    index = PointMap(BOUNDS, 10)
    index.insert(Point(5.0, 5.0))

    assert index.neighbors(Point(500.0, 500.0)) == []
    assert index.neighbors(Point(-1.0, -1.0), 0.5) == []
    assert PointMap(BOUNDS, 10).neighbors(Point(5.0, 5.0)) == []


@pytest.mark.parametrize('options', [GRID, LEGACY], ids=['grid', 'legacy'])
@pytest.mark.parametrize(
    'query',
    [
        Point(math.inf, 5.0),
        Point(5.0, -math.inf),
        Point(math.nan, 5.0),
        Point(math.nan, math.nan),
    ],
)
def test_neighbors_of_non_finite_queries_are_empty(options, query):
    index = PointMap(BOUNDS, 10, options)
    index.insert(Point(5.0, 5.0))

    assert index.neighbors(query) == []
    assert index.neighbors(query, 3.0) == []


@pytest.mark.parametrize('center', [Point(math.inf, 5.0), Point(math.nan, 5.0)])
def test_insert_rejects_non_finite_centers(center):
    with pytest.raises(OutOfBoundsError):
        PointMap(BOUNDS, 10).insert(center)


def test_grid_cells_are_origin_relative():
    index = PointMap(Rect.from_bounds(-50.0, -50.0, 100.0, 100.0), 10)

    assert index.cell_of((-45.0, -45.0)) == (0, 0)
    assert index.cell_of((49.9, 0.0)) == (9, 5)
    assert index.cell_of((-50.0, 49.999)) == (0, 9)


def test_grid_neighbors_without_distance_cover_the_3x3_block():
    index = PointMap(BOUNDS, 10)
    origin = Point(5.0, 5.0)
    diagonal = Point(15.0, 15.0)
    two_cells_away = Point(25.0, 5.0)
    for shape in (origin, diagonal, two_cells_away):
        index.insert(shape)

    assert set(index.neighbors(origin)) == {origin, diagonal}


def test_grid_search_widens_for_large_distances():
    near = Point(5.0, 5.0)
    across = Point(40.0, 5.0)

    widened = PointMap(BOUNDS, 10)
    fixed = PointMap(BOUNDS, 10, PointMapOptions(widen_search=False))
    for index in (widened, fixed):
        index.insert(near)
        index.insert(across)

    assert set(widened.neighbors(near, 50.0)) == {near, across}
    assert fixed.neighbors(near, 50.0) == [near]


def test_legacy_cell_index_formula():
    index = PointMap(BOUNDS, 10, LEGACY)

    assert index.cell_of((5.0, 5.0)) == 0
    assert index.cell_of((15.0, 5.0)) == 0
    assert index.cell_of((25.0, 35.0)) == 31
    assert index.cell_of((95.0, 95.0)) == 98

    offset = PointMap(Rect.from_bounds(50.0, 50.0, 100.0, 100.0), 10, LEGACY)
    assert offset.cell_of((75.0, 75.0)) == 54


def test_legacy_buckets_grow_without_gaps():
    index = PointMap(BOUNDS, 10, LEGACY)
    far = Point(95.0, 95.0)
    near = Point(5.0, 5.0)

    index.insert(far)
    assert index.bucket_count == 99

    index.insert(near)
    assert index.bucket_count == 99
    assert index.points() == [near, far]


def test_legacy_rejects_indices_past_the_grid():
    bounds = Rect.from_bounds(-100.0, -100.0, 100.0 - 1e-4, 100.0 - 1e-4)
    index = PointMap(bounds, 10, LEGACY)

    assert index.cell_of((-100.0, -100.0)) > 100
    with pytest.raises(ValueError, match='legacy index'):
        index.insert(Point(-100.0, -100.0))
    assert index.bucket_count == 0
    assert len(index) == 0


def test_legacy_neighbor_step_follows_bucket_count():
    index = PointMap(BOUNDS, 10, LEGACY)
    shapes = {
        'same_bucket': Point(15.0, 5.0),
        'next_bucket': Point(25.0, 5.0),
        'row_below': Point(5.0, 15.0),
        'far': Point(95.0, 95.0),
    }
    query = Point(5.0, 5.0)
    index.insert(query)
    for shape in shapes.values():
        index.insert(shape)

    found = index.neighbors(query)

    assert set(found) == {query, shapes['same_bucket'], shapes['next_bucket'], shapes['row_below']}
    assert len(found) == 4


def test_points_iteration_and_len():
    index = PointMap(BOUNDS, 10)
    late = Point(95.0, 95.0)
    early = Point(5.0, 5.0)
    index.insert(late)
    index.insert(early)

    assert len(index) == 2
    assert index.points() == [early, late]
    assert list(index) == index.points()
    assert index.bucket_count == 2


def test_insert_many_collects_rejections():
    index = PointMap(BOUNDS, 10)
    inside = [Point(1.0, 1.0), Point(50.0, 50.0)]
    outside = [Point(100.0, 100.0), Point(-5.0, 3.0)]

    rejected = index.insert_many(inside + outside)

    assert rejected == outside
    assert sorted(index.points()) == sorted(inside)


def test_index_stores_any_shape_with_a_center():
    index = PointMap(BOUNDS, 10)
    circle = Circle(Point(50.0, 50.0), 3.0)
    rect = Rect.from_bounds(40.0, 40.0, 10.0, 10.0)
    path = Path([(52.0, 48.0), (56.0, 48.0), (56.0, 52.0)])
    for shape in (circle, rect, path):
        index.insert(shape)

    found = index.neighbors(circle, 10.0)

    assert circle in found
    assert rect in found
    assert path in found


def test_index_does_not_rebucket_mutated_shapes():
    index = PointMap(BOUNDS, 10)
    path = Path([(5.0, 5.0), (6.0, 6.0)])
    index.insert(path)

    path.add_point((95.0, 95.0))

    assert index.neighbors(Point(5.0, 5.0)) == [path]
