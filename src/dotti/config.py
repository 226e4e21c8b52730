"""YAML config loader — reads dotti.yml into DottiConfig."""

from pathlib import Path

import yaml

from dotti.schemas.config import DottiConfig

DEFAULT_CONFIG_NAME = "dotti.yml"


def load_config(path: str | Path) -> DottiConfig:
    """Load and validate a dotti config file.

    Raises ``FileNotFoundError`` if the path doesn't exist and
    ``pydantic.ValidationError`` if the YAML content is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = yaml.safe_load(path.read_text())
    if raw is None:
        return DottiConfig()
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    # A key with only commented-out items loads as None; fall back to the default.
    for key in ("targets", "policy"):
        if key in raw and raw[key] is None:
            del raw[key]
    if isinstance(raw.get("targets"), list):
        raw["targets"] = [item for item in raw["targets"] if item]

    return DottiConfig(**raw)


def load_project_config(project_root: str | Path) -> DottiConfig:
    """Load ``dotti.yml`` from a project root, or the defaults if there is none."""
    candidate = Path(project_root) / DEFAULT_CONFIG_NAME
    if candidate.exists():
        return load_config(candidate)
    return DottiConfig()
