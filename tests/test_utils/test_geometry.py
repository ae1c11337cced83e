"""Tests for leaf geometry helpers."""

import math

import numpy as np
import pytest

from polysplit.errors import InvalidPathError
from polysplit.utils.geometry import (
    approx,
    as_path_array,
    characteristic_scale,
    cleanup_path,
    line_normal,
    point_in_polygon,
    signed_area,
    unwrap,
    winding_number,
)
from polysplit.utils.math_helpers import modang, turn_angle
from tests.conftest import PENTAGRAM, UNIT_SQUARE


def test_signed_area_ccw_positive():
    assert math.isclose(signed_area(UNIT_SQUARE), 1.0)
    assert math.isclose(signed_area(list(reversed(UNIT_SQUARE))), -1.0)


def test_signed_area_ignores_repeated_closing_point():
    closed = UNIT_SQUARE + [UNIT_SQUARE[0]]
    assert math.isclose(signed_area(closed), 1.0)


def test_signed_area_degenerate():
    assert signed_area([(0, 0), (1, 1)]) == 0.0


def test_winding_number_square():
    assert winding_number((0.5, 0.5), UNIT_SQUARE) == 1
    assert winding_number((0.5, 0.5), list(reversed(UNIT_SQUARE))) == -1
    assert winding_number((2.0, 0.5), UNIT_SQUARE) == 0


def test_point_in_polygon_classes():
    assert point_in_polygon((0.5, 0.5), UNIT_SQUARE) == 1
    assert point_in_polygon((1.0, 0.5), UNIT_SQUARE) == 0
    assert point_in_polygon((0.0, 0.0), UNIT_SQUARE) == 0
    assert point_in_polygon((1.5, 0.5), UNIT_SQUARE) == -1


def test_point_in_polygon_fill_rules_on_pentagram_center():
    # The centre of a pentagram is wound twice
    assert abs(winding_number((0.0, 0.0), PENTAGRAM)) == 2
    assert point_in_polygon((0.0, 0.0), PENTAGRAM, nonzero=True) == 1
    assert point_in_polygon((0.0, 0.0), PENTAGRAM, nonzero=False) == -1


def test_cleanup_removes_consecutive_duplicates_and_closing_point():
    path = [(0, 0), (0, 0), (1, 0), (1, 1e-12), (1, 1), (0, 1), (0, 0)]
    cleaned = cleanup_path(path, closed=True, eps=1e-9)
    assert cleaned.tolist() == [[0, 0], [1, 0], [1, 1], [0, 1]]


def test_cleanup_is_idempotent():
    path = [(0, 0), (1, 0), (1, 0), (1, 1), (0, 1), (0, 1e-10)]
    once = cleanup_path(path)
    twice = cleanup_path(once)
    assert np.array_equal(once, twice)


def test_cleanup_open_path_keeps_closing_point():
    path = [(0, 0), (1, 0), (0, 0)]
    assert len(cleanup_path(path, closed=False)) == 3


def test_unwrap():
    assert unwrap([(0, 0), (1, 0), (0, 1), (0, 0)]) == [(0, 0), (1, 0), (0, 1)]
    assert unwrap([(0, 0), (1, 0)]) == [(0, 0), (1, 0)]


def test_approx_uses_distance():
    assert approx((0, 0), (0, 1e-10), eps=1e-9)
    assert not approx((0, 0), (0, 1e-6), eps=1e-9)


def test_line_normal_points_left():
    nx, ny = line_normal((0, 0), (2, 0))
    assert (nx, ny) == (0.0, 1.0)
    assert line_normal((1, 1), (1, 1)) == (0.0, 0.0)


def test_characteristic_scale():
    assert math.isclose(characteristic_scale(UNIT_SQUARE), math.sqrt(2))
    assert characteristic_scale([(3, 3), (3, 3)]) == 1.0


@pytest.mark.parametrize(
    "bad",
    [
        [(0, 0)],
        [],
        [(0, 0, 0), (1, 1, 1)],
        [(0, 0), (float("nan"), 1), (1, 1)],
        [(0, 0), (float("inf"), 1)],
        "not a path",
    ],
)
def test_as_path_array_rejects_malformed(bad):
    with pytest.raises(InvalidPathError):
        as_path_array(bad)


def test_as_path_array_accepts_lists():
    arr = as_path_array([[0, 0], [1, 2]])
    assert arr.shape == (2, 2)
    assert arr.dtype == np.float64


@pytest.mark.parametrize(
    "angle, expected",
    [(0, 0), (180, 180), (-180, 180), (540, 180), (-190, 170), (190, -170), (359, -1)],
)
def test_modang(angle, expected):
    assert math.isclose(modang(angle), expected, abs_tol=1e-12)


def test_turn_angle_signs():
    assert math.isclose(turn_angle((1, 0), (0, 1)), 90.0)
    assert math.isclose(turn_angle((1, 0), (0, -1)), -90.0)
    assert math.isclose(turn_angle((1, 0), (-1, 0)), 180.0)
    assert turn_angle((1, 0), (2, 0)) == 0.0
