"""
Tests for alignment and calculation site selection.
"""

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).parent.parent / "src"))

from reticle_registration.correction.site_selection import (
    SiteSelection,
    of_types,
    select_all,
    select_none,
)
from reticle_registration.displacement.displacement import Displacement, DisplacementClass


def _of(site_class):
    return Displacement.at(0, 0, 0.0, 0.0, site_class=site_class)


ALIGN = _of(DisplacementClass.ALIGN)
REG = _of(DisplacementClass.REG)
REG_ALIGN = _of(DisplacementClass.REG_ALIGN)
INFO = _of(DisplacementClass.INFO_ONLY)


def test_default_selects_everything():
    """Test that the default selection accepts every site."""
    selection = SiteSelection()

    assert all(selection.alignment(d) for d in (ALIGN, REG, INFO))
    assert all(selection.calculation(d) for d in (ALIGN, REG, INFO))


def test_constant_predicates():
    """Test select_all and select_none."""
    assert select_all(REG)
    assert not select_none(REG)


def test_of_types_matches_any_class():
    """Test that of_types matches any of its classes."""
    predicate = of_types(DisplacementClass.ALIGN, DisplacementClass.REG_ALIGN)

    assert predicate(ALIGN)
    assert predicate(REG_ALIGN)
    assert not predicate(REG)


def test_from_classes():
    """Test building predicates from class names."""
    selection = SiteSelection.from_classes(["ALIGN"], ["reg", "reg_align"])

    assert selection.alignment(ALIGN)
    assert not selection.alignment(REG_ALIGN)
    assert selection.calculation(REG)
    assert not selection.calculation(ALIGN)


def test_from_classes_with_exclusion():
    """Test that excluded classes leave both selections."""
    selection = SiteSelection.from_classes(["ALIGN", "INFO_ONLY"], None, ["INFO_ONLY"])

    assert selection.alignment(ALIGN)
    assert not selection.alignment(INFO)
    assert selection.calculation(REG)
    assert not selection.calculation(INFO)


def test_remove_returns_new_selection():
    """Test that remove narrows a copy."""
    selection = SiteSelection()
    narrowed = selection.remove(of_types(DisplacementClass.REG))

    assert selection.calculation(REG)
    assert not narrowed.calculation(REG)
    assert not narrowed.alignment(REG)
    assert narrowed.alignment(ALIGN)


def test_unknown_class_name():
    """Test that an unknown class name is rejected."""
    with pytest.raises(ValueError, match="Unknown displacement class"):
        SiteSelection.from_classes(["MARK"])


def test_none_predicate_rejected():
    """Test that a missing predicate is rejected."""
    with pytest.raises(ValueError, match="must not be None"):
        SiteSelection.of(select_all, None)
