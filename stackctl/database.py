"""
Database verbs against the development MongoDB service.

All of these run through the development compose file regardless of the
active mode. Credentials are passed in explicitly and masked in logs.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .dispatcher import Dispatcher
from .guard import DestructiveActionGuard, GuardOutcome
from .modes import Mode
from .settings import DatabaseCredentials

logger = logging.getLogger(__name__)

MONGO_SERVICE = "mongo"
BACKUP_PREFIX = "backup_"
BACKUP_SUFFIX = ".archive"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

RESET_QUESTION = "Delete all data?"


def _secrets(credentials: DatabaseCredentials) -> List[str]:
    return [credentials.username, credentials.password]


def _mongosh(dispatcher: Dispatcher, credentials: DatabaseCredentials) -> List[str]:
    return dispatcher.compose(Mode.DEVELOPMENT) + [
        "exec", MONGO_SERVICE, "mongosh",
        "-u", credentials.username,
        "-p", credentials.password,
    ]


def backup_filename(moment: datetime) -> str:
    """
    Archive name for a backup taken at the given moment.

    Args:
        moment: Time of the backup

    Returns:
        str: Name in format backup_YYYYMMDD_HHMMSS.archive
    """
    return f"{BACKUP_PREFIX}{moment.strftime(TIMESTAMP_FORMAT)}{BACKUP_SUFFIX}"


def next_backup_path(backup_dir: Path, moment: datetime) -> Path:
    """
    First unused archive path for the moment.

    A numeric suffix is added when an archive with the same timestamp
    already exists, so earlier archives are never reused.
    """
    path = backup_dir / backup_filename(moment)
    counter = 1
    while path.exists():
        stem = f"{BACKUP_PREFIX}{moment.strftime(TIMESTAMP_FORMAT)}_{counter}"
        path = backup_dir / f"{stem}{BACKUP_SUFFIX}"
        counter += 1
    return path


def db_backup(
    dispatcher: Dispatcher,
    credentials: DatabaseCredentials,
    backup_dir: Path,
    clock: Callable[[], datetime] = datetime.now,
) -> Tuple[int, Optional[Path]]:
    """
    Dump the development database into a new timestamped archive.

    Args:
        dispatcher: Dispatcher providing the compose invocation and runner
        credentials: Database root credentials
        backup_dir: Directory for archives (created if missing)
        clock: Source of the backup timestamp

    Returns:
        Tuple of (exit status, archive path). The path is None when the
        dump failed; the incomplete archive is removed in that case.
    """
    backup_dir = Path(backup_dir)
    backup_dir.mkdir(parents=True, exist_ok=True)
    archive = next_backup_path(backup_dir, clock())

    argv = dispatcher.compose(Mode.DEVELOPMENT) + [
        "exec", "-T", MONGO_SERVICE, "mongodump",
        f"--username={credentials.username}",
        f"--password={credentials.password}",
        f"--db={credentials.database}",
        "--archive",
    ]

    logger.info(f"Backing up {credentials.database} to {archive}")
    try:
        with open(archive, "xb") as output:
            status = dispatcher.runner.run(argv, stdout=output, secrets=_secrets(credentials))
    except BaseException:
        archive.unlink(missing_ok=True)
        raise

    if status != 0:
        logger.error(f"mongodump failed with status {status}")
        archive.unlink()
        return status, None

    return status, archive


def db_reset(
    dispatcher: Dispatcher,
    credentials: DatabaseCredentials,
    guard: DestructiveActionGuard,
) -> Tuple[GuardOutcome, int]:
    """Drop the development database after operator confirmation."""
    argv = _mongosh(dispatcher, credentials) + [
        "--eval", f"db.getSiblingDB('{credentials.database}').dropDatabase()",
    ]
    return guard.run(
        RESET_QUESTION,
        lambda: dispatcher.runner.run(argv, secrets=_secrets(credentials)),
    )


def db_shell(dispatcher: Dispatcher, credentials: DatabaseCredentials) -> int:
    """Open an interactive mongosh session in the development database."""
    return dispatcher.runner.run(_mongosh(dispatcher, credentials), secrets=_secrets(credentials))
