"""
Deployment modes and their compose configuration files.
"""

from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union


class Mode(Enum):
    """Deployment configuration targeted by an invocation."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"


DEFAULT_MODE = Mode.DEVELOPMENT

# Fixed table, one compose file per mode
CONFIG_REFERENCES: Dict[Mode, str] = {
    Mode.DEVELOPMENT: "docker/compose.development.yaml",
    Mode.PRODUCTION: "docker/compose.production.yaml",
}

_ALIASES: Dict[str, Mode] = {
    "dev": Mode.DEVELOPMENT,
    "development": Mode.DEVELOPMENT,
    "prod": Mode.PRODUCTION,
    "production": Mode.PRODUCTION,
}


def resolve_mode(value: Union[Mode, str, None] = None) -> Mode:
    """
    Resolve a caller-supplied mode.

    Args:
        value: Mode, one of dev/development/prod/production, or None

    Returns:
        Mode: Resolved mode (development when value is None or empty)

    Raises:
        ValueError: If the string does not name a known mode
    """
    if value is None:
        return DEFAULT_MODE
    if isinstance(value, Mode):
        return value

    key = value.strip().lower()
    if not key:
        return DEFAULT_MODE
    if key not in _ALIASES:
        raise ValueError(f"Unknown mode: {value!r} (expected one of: {', '.join(_ALIASES)})")
    return _ALIASES[key]


def config_reference_for(mode: Mode, project_dir: Optional[Path] = None) -> str:
    """
    Get the compose file for a mode.

    Args:
        mode: Deployment mode
        project_dir: Optional project root the reference is resolved against

    Returns:
        str: Compose file path
    """
    reference = CONFIG_REFERENCES[mode]
    if project_dir is None:
        return reference
    return str(Path(project_dir) / reference)
