"""
Configuration management for reticle-registration.

Provides a typed pydantic model and YAML loader with sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Literal, List, Any, Dict

from pydantic import BaseModel, Field, ValidationError, field_validator
import yaml

from ..displacement.displacement import DisplacementClass


# -----------------------
# Typed config structures
# -----------------------

_SITE_CLASSES = frozenset(DisplacementClass.__members__)


def _normalize_classes(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    normalized = [str(v).strip().upper() for v in values]
    unknown = [v for v in normalized if v not in _SITE_CLASSES]
    if unknown:
        raise ValueError(f"Unknown displacement classes {unknown}; expected any of {sorted(_SITE_CLASSES)}")
    return normalized


class CorrectionConfig(BaseModel):
    alignment: Literal["all", "selected", "scanner_selected", "unaligned"] = Field(
        default="selected",
        description="Which sites define the rigid alignment (translation + rotation)",
    )
    compensations: List[Literal["scale", "ortho", "magnification"]] = Field(
        default_factory=lambda: ["scale", "ortho"],
        description="First order distortion terms removed by the correction",
    )


class SelectionConfig(BaseModel):
    alignment_classes: List[str] = Field(
        default_factory=lambda: ["ALIGN", "REG_ALIGN"],
        description="Displacement classes used for alignment",
    )
    calculation_classes: Optional[List[str]] = Field(
        default=None,
        description="Displacement classes used for calculation (None = all classes)",
    )
    excluded_classes: List[str] = Field(
        default_factory=lambda: ["INFO_ONLY"],
        description="Displacement classes excluded from alignment and calculation",
    )

    @field_validator("alignment_classes", "calculation_classes", "excluded_classes")
    @classmethod
    def _known_classes(cls, values):
        return _normalize_classes(values)


class InputConfig(BaseModel):
    delimiter: str = Field(default=",", description="Column delimiter of displacement CSV files")


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    file: Optional[str] = Field(default=None)


class AppConfig(BaseModel):
    correction: CorrectionConfig = Field(default_factory=CorrectionConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    input: InputConfig = Field(default_factory=InputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# -----------------------
# Loader
# -----------------------


def _project_root() -> Path:
    """
    Resolve the repository root directory.

    File is at: repo_root/src/reticle_registration/utils/config.py
    """
    return Path(__file__).resolve().parents[3]


def load_config(path: Optional[str | Path] = None, *, allow_missing: bool = True) -> AppConfig:
    """
    Load configuration from YAML into a typed AppConfig.

    Search order when path is None:
    1) repo_root/config/default.yaml
    2) if missing and allow_missing=True: return default AppConfig()

    Args:
        path: Explicit YAML file path.
        allow_missing: If True, returns defaults when file missing; otherwise raises.

    Returns:
        AppConfig instance
    """
    cfg_path: Path
    if path is None:
        cfg_path = _project_root() / "config" / "default.yaml"
    else:
        cfg_path = Path(path)
        if not cfg_path.is_absolute() and not cfg_path.exists():
            cfg_path = _project_root() / cfg_path

    if not cfg_path.exists():
        if allow_missing:
            return AppConfig()
        raise FileNotFoundError(f"Config file not found: {cfg_path}")

    with cfg_path.open("r", encoding="utf-8") as f:
        raw: Dict[str, Any] = yaml.safe_load(f) or {}

    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        # Re-raise with context to help users fix the YAML
        raise ValueError(f"Invalid configuration in {cfg_path}: {e}")
