"""
Runtime settings read from the process environment.

Everything environment-derived is read once here and passed on as plain
objects; the rest of the package never touches os.environ directly.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional


USERNAME_VAR = "MONGO_INITDB_ROOT_USERNAME"
PASSWORD_VAR = "MONGO_INITDB_ROOT_PASSWORD"
DATABASE_VAR = "MONGO_DATABASE"

DEFAULT_HEALTH_URL = "http://localhost:5921"
DEFAULT_BACKUP_DIR = "backups"


class MissingCredentialError(ValueError):
    """Raised when a database verb runs without its required environment."""

    def __init__(self, variable: str):
        super().__init__(f"Missing required environment variable: {variable}")
        self.variable = variable


@dataclass(frozen=True)
class DatabaseCredentials:
    """Root credentials for the development database."""
    username: str
    password: str = field(repr=False)
    database: str

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DatabaseCredentials":
        """
        Read credentials from the environment.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            DatabaseCredentials: Populated credentials

        Raises:
            MissingCredentialError: If any variable is absent or empty
        """
        env = os.environ if environ is None else environ
        values = {}
        for name in (USERNAME_VAR, PASSWORD_VAR, DATABASE_VAR):
            value = env.get(name)
            if not value:
                raise MissingCredentialError(name)
            values[name] = value

        return cls(
            username=values[USERNAME_VAR],
            password=values[PASSWORD_VAR],
            database=values[DATABASE_VAR],
        )


@dataclass(frozen=True)
class StackSettings:
    """Locations and endpoints used by the dispatcher and its helpers."""
    project_dir: Path = Path(".")
    backup_dir: Path = Path(DEFAULT_BACKUP_DIR)
    health_url: str = DEFAULT_HEALTH_URL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StackSettings":
        """Build settings from STACKCTL_* variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        project_dir = Path(env.get("STACKCTL_PROJECT_DIR", "."))
        backup_dir = Path(env.get("STACKCTL_BACKUP_DIR", str(project_dir / DEFAULT_BACKUP_DIR)))
        return cls(
            project_dir=project_dir,
            backup_dir=backup_dir,
            health_url=env.get("STACKCTL_HEALTH_URL", DEFAULT_HEALTH_URL).rstrip("/"),
        )

    @property
    def backend_dir(self) -> Path:
        return self.project_dir / "backend"
