"""
Unit tests for the centering transform.

These tests verify:
- Mean computation over the selected, finite design coordinates
- Exact reversal using the stored means
- Fallback when the selection holds no finite coordinate
"""

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).parent.parent / "src"))

from reticle_registration.alignment.translate_to_center import Translate, TranslateToCenter
from reticle_registration.displacement.displacement import Displacement, DisplacementClass

NAN = float("nan")


@pytest.fixture
def displacements():
    return [
        Displacement.at(0, 0, 146000.0, 6652000.0, 146000.5, 6652000.25, DisplacementClass.ALIGN),
        Displacement.at(1, 1, 148000.0, 6652000.0, 148000.5, 6651999.75, DisplacementClass.ALIGN),
        Displacement.at(2, 2, 148000.0, 6654000.0, NAN, 6654000.5, DisplacementClass.ALIGN),
        Displacement.at(3, 3, 146000.0, 6654000.0, 146000.25, NAN, DisplacementClass.ALIGN),
        Displacement.at(4, 4, 100000.0, 100000.0, 100001.0, 100001.0, DisplacementClass.REG),
    ]


def _is_align(d):
    return d.is_of_type(DisplacementClass.ALIGN)


def test_means_over_selection(displacements):
    """Test the mean design position of the selection."""
    centering = TranslateToCenter.over(displacements, _is_align)

    assert centering.mean_x == pytest.approx(147000.0)
    assert centering.mean_y == pytest.approx(6653000.0)


def test_apply_centers_selection(displacements):
    """Test that centering moves the selection mean to the origin."""
    centering = TranslateToCenter.over(displacements, _is_align)
    centered = centering.apply(displacements)

    assert len(centered) == len(displacements)
    assert centered[0].x == pytest.approx(-1000.0)
    assert centered[0].y == pytest.approx(-1000.0)
    # Deviations are preserved by a pure translation
    for before, after in zip(displacements, centered):
        if before.xd == before.xd:
            assert after.dx == pytest.approx(before.dx, abs=1e-6)
    assert centered[2].xd != centered[2].xd  # NaN stays NaN


def test_reverse_restores_original_frame(displacements):
    """Test that reversing restores the original coordinates."""
    centering = TranslateToCenter.over(displacements, _is_align)
    restored = centering.reverse()(centering.apply(displacements))

    for before, after in zip(displacements, restored):
        assert after.index == before.index
        assert after.x == pytest.approx(before.x, rel=1e-15, abs=1e-9)
        assert after.y == pytest.approx(before.y, rel=1e-15, abs=1e-9)
        assert after.yd == pytest.approx(before.yd, nan_ok=True, abs=1e-9)


def test_reverse_is_translation_by_means(displacements):
    """Test forward and reverse translations."""
    centering = TranslateToCenter.over(displacements, _is_align)

    assert centering.reverse() == Translate(centering.mean_x, centering.mean_y)
    assert centering.forward() == Translate(-centering.mean_x, -centering.mean_y)


def test_empty_selection_does_not_move(displacements):
    """Test that an empty selection does not move anything."""
    centering = TranslateToCenter.over(displacements, lambda d: False)

    assert centering.mean_x == 0.0
    assert centering.mean_y == 0.0
    centered = centering.apply(displacements)
    assert [d.x for d in centered] == [d.x for d in displacements]

