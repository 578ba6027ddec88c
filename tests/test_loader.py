"""
Test suite for the displacement loader
"""

import math
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).parent.parent / "src"))

from reticle_registration.displacement import DisplacementClass
from reticle_registration.preprocessing.loader import DisplacementLoader

DEMO_FILE = Path(__file__).parent.parent / "data" / "demo_4point.csv"


@pytest.fixture
def loader():
    return DisplacementLoader()


def test_load_demo_file(loader):
    """Test loading the bundled demo table."""
    displacements = loader.load(str(DEMO_FILE))

    assert len(displacements) == 10
    assert [d.index for d in displacements] == list(range(10))
    assert displacements[0].id == 1
    assert displacements[0].site_class is DisplacementClass.ALIGN
    assert displacements[4].site_class is DisplacementClass.REG
    assert displacements[9].site_class is DisplacementClass.INFO_ONLY
    assert displacements[0].dx == pytest.approx(10.012)
    assert displacements[0].dy == pytest.approx(-4.996)


def test_empty_cells_are_unmeasured(loader):
    """Test that empty cells become NaN."""
    displacements = loader.load(str(DEMO_FILE))

    y_only = displacements[8]
    assert math.isnan(y_only.xd)
    assert y_only.yd == pytest.approx(9002.997)
    assert math.isnan(displacements[7].yd)
    assert displacements[7].has_measurement()


def test_optional_columns_default(tmp_path, loader):
    """Test defaults for missing id and type columns."""
    path = tmp_path / "plain.csv"
    path.write_text("X, Y, XD, YD\n0,0,0.5,0.25\n10,0,10.5,\n")

    displacements = loader.load(str(path))

    assert [d.id for d in displacements] == [0, 1]
    assert all(d.site_class is DisplacementClass.REG for d in displacements)
    assert displacements[0].dx == pytest.approx(0.5)
    assert math.isnan(displacements[1].yd)


def test_custom_delimiter(tmp_path):
    """Test loading with a non-default delimiter."""
    path = tmp_path / "semicolon.csv"
    path.write_text("id;x;y;xd;yd;type\n7;1;2;1.5;2.5;reg_align\n")

    displacements = DisplacementLoader(delimiter=";").load(str(path))

    assert displacements[0].id == 7
    assert displacements[0].site_class is DisplacementClass.REG_ALIGN


def test_missing_column(tmp_path, loader):
    """Test that a missing required column is reported."""
    path = tmp_path / "missing.csv"
    path.write_text("x,y,xd\n1,2,3\n")

    with pytest.raises(ValueError, match="Missing required columns"):
        loader.load(str(path))


def test_invalid_values(tmp_path, loader):
    """Test that non-numeric coordinates are reported."""
    path = tmp_path / "invalid.csv"
    path.write_text("x,y,xd,yd\n1,2,abc,4\n")

    with pytest.raises(ValueError, match="Invalid coordinate values"):
        loader.load(str(path))


def test_unknown_class(tmp_path, loader):
    """Test that an unknown type value is reported."""
    path = tmp_path / "unknown.csv"
    path.write_text("x,y,xd,yd,type\n1,2,3,4,FIDUCIAL\n")

    with pytest.raises(ValueError, match="Unknown displacement class"):
        loader.load(str(path))


def test_missing_file(loader, tmp_path):
    """Test that a missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        loader.load(str(tmp_path / "absent.csv"))
