"""
Displacement Data Loader

This module loads measured displacements from CSV tables.

Expected columns (header names are case-insensitive):
- x, y: design coordinates (required)
- xd, yd: measured coordinates (required; empty cells mean "not measured")
- id: site label (optional, defaults to the row index)
- type: DisplacementClass name (optional, defaults to REG)
"""

from pathlib import Path
from typing import List

import numpy as np
import pandas as pd

from ..displacement.displacement import Displacement, DisplacementClass
from ..utils.logging import setup_logger

logger = setup_logger(__name__)

REQUIRED_COLUMNS = ("x", "y", "xd", "yd")


class DisplacementLoader:
    """
    Load displacements from delimited text files.

    Features:
    - Missing measured values become NaN (single-axis metrology)
    - Site classes parsed from an optional ``type`` column
    - Row order defines the displacement index
    """

    def __init__(self, *, delimiter: str = ","):
        """
        Initialize the loader.

        Args:
            delimiter: Column delimiter (default ",")
        """
        self.delimiter = delimiter

    def load(self, file_path: str) -> List[Displacement]:
        """
        Load a displacement table.

        Args:
            file_path: Path to the CSV file

        Returns:
            List of Displacement objects in file order

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If required columns are missing or values are invalid
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        logger.info(f"Loading displacements from {file_path}")

        df = pd.read_csv(file_path, sep=self.delimiter, skipinitialspace=True)
        df.columns = [str(c).strip().lower() for c in df.columns]

        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Missing required columns {missing} in {file_path}")

        try:
            coords = df[list(REQUIRED_COLUMNS)].apply(pd.to_numeric, errors="raise").to_numpy(dtype=float)
        except (ValueError, TypeError) as e:
            raise ValueError(f"Invalid coordinate values in {file_path}: {e}")

        ids = df["id"].to_numpy(dtype=int) if "id" in df.columns else np.arange(len(df))
        if "type" in df.columns:
            classes = [
                DisplacementClass.REG if pd.isna(t) else DisplacementClass.from_string(t)
                for t in df["type"]
            ]
        else:
            classes = [DisplacementClass.REG] * len(df)

        displacements = [
            Displacement(
                index=i,
                id=int(ids[i]),
                x=coords[i, 0],
                y=coords[i, 1],
                xd=coords[i, 2],
                yd=coords[i, 3],
                site_class=classes[i],
            )
            for i in range(len(df))
        ]

        n_partial = sum(1 for d in displacements if not (np.isfinite(d.xd) and np.isfinite(d.yd)))
        logger.info(
            f"Loaded {len(displacements)} displacements ({n_partial} with missing measurements)"
        )
        return displacements
