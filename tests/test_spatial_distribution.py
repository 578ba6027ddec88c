"""
Tests for spatial distribution classification of displacement layouts.
"""

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).parent.parent / "src"))

from reticle_registration.alignment.spatial_distribution import (
    Distribution,
    Span,
    SpatialDistribution,
)
from reticle_registration.displacement.displacement import Displacement

NAN = float("nan")


def _classify(points):
    return SpatialDistribution.of(points).classify()


def test_area_distribution():
    """Test a rectangle of sites."""
    points = [
        Displacement.at(0, 0, 0, 0, 0, 0),
        Displacement.at(1, 1, 0, 140000, 0, 140000),
        Displacement.at(2, 2, 150000, 140000, 150000, 140000),
        Displacement.at(3, 3, 150000, 0, 150000, 0),
        Displacement.at(4, 4, 75000, 70000, NAN, NAN),
    ]
    assert _classify(points) is Distribution.AREA


def test_horizontal_distribution():
    """Test sites on a horizontal line."""
    points = [
        Displacement.at(0, 0, 0, 70000, 0, 70000),
        Displacement.at(1, 1, 0, 70000, 0, 70000),
        Displacement.at(2, 2, 150000, 70000, 150000, 70000),
        Displacement.at(3, 3, 150000, 70000, 150000, 70000),
        Displacement.at(4, 4, 75000, 70000, NAN, NAN),
    ]
    assert _classify(points) is Distribution.HORIZONTAL


def test_vertical_distribution():
    """Test sites on a vertical line."""
    points = [
        Displacement.at(0, 0, 0, 0, 0, 0),
        Displacement.at(1, 1, 0, 140000, 0, 140000),
        Displacement.at(2, 2, 0, 140000, 0, 140000),
        Displacement.at(3, 3, 0, 0, 0, 0),
        Displacement.at(4, 4, 0, 70000, NAN, NAN),
    ]
    assert _classify(points) is Distribution.VERTICAL


def test_coincident_points_are_singular():
    """Test coincident sites."""
    points = [Displacement.at(i, i, 0, 140000, 0, 140000) for i in range(4)]
    points.append(Displacement.at(4, 4, 0, 70000, NAN, NAN))
    assert _classify(points) is Distribution.SINGULARITY


def test_single_point_with_one_axis_is_singular():
    """Test a single site measured on one axis."""
    assert _classify([Displacement.at(0, 0, 0, NAN, 0, NAN)]) is Distribution.SINGULARITY
    assert _classify([Displacement.at(0, 0, NAN, 14000, NAN, 14000)]) is Distribution.SINGULARITY


def test_empty_input_fails():
    """Test that classifying nothing raises."""
    with pytest.raises(RuntimeError, match="no valid displacements have been processed yet"):
        _classify([])


def test_only_unmeasured_points_fail():
    """Test that unmeasured sites do not count."""
    points = [Displacement.at(0, 0, 0, 0, NAN, NAN), Displacement.at(1, 1, 10, 10, NAN, NAN)]
    with pytest.raises(RuntimeError, match="no valid displacements"):
        _classify(points)


def test_consume_is_order_independent_and_immutable():
    """Test that the fold is order independent and leaves accumulators unchanged."""
    points = [
        Displacement.at(0, 0, 0, 0, 0, 0),
        Displacement.at(1, 1, 100, 0, 100, 0),
        Displacement.at(2, 2, 50, 0, NAN, 0),
    ]
    empty = SpatialDistribution()
    forward = SpatialDistribution.of(points)
    backward = SpatialDistribution.of(reversed(points))

    assert forward == backward
    assert forward.count == 3
    assert empty.count == 0
    assert forward.classify() is Distribution.HORIZONTAL


def test_span_ignores_non_finite_values():
    """Test that spans skip NaN and infinite values."""
    span = Span().include(NAN).include(1.0).include(float("inf")).include(3.0)

    assert span.width == pytest.approx(2.0)
    assert span.varies()
    assert not Span().varies()
