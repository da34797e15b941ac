"""
Best-effort teardown of both deployment configurations.
"""

import logging
import subprocess
from typing import Sequence, Tuple

from .dispatcher import Dispatcher, Operation
from .guard import DestructiveActionGuard, GuardOutcome
from .modes import Mode

logger = logging.getLogger(__name__)

VOLUMES_QUESTION = "Delete all volumes?"


def teardown_all(dispatcher: Dispatcher, extra_args: Sequence[str] = ()) -> int:
    """
    Run "down" against the development and then the production config.

    Both are always attempted. Errors are logged and otherwise ignored,
    so the result is always 0.
    """
    for mode in (Mode.DEVELOPMENT, Mode.PRODUCTION):
        argv = dispatcher.build_command(Operation.STOP, mode, extra_args=extra_args)
        try:
            status = dispatcher.runner.run(argv, stderr=subprocess.DEVNULL)
        except OSError as e:
            logger.warning(f"Teardown of {mode.value} failed: {e}")
            continue
        if status != 0:
            logger.warning(f"Teardown of {mode.value} exited with status {status}")
    return 0


def clean(dispatcher: Dispatcher) -> int:
    """Remove containers and networks for both configurations."""
    return teardown_all(dispatcher)


def clean_all(dispatcher: Dispatcher) -> int:
    """Remove containers, networks, volumes and images for both configurations."""
    return teardown_all(dispatcher, ["-v", "--rmi", "all"])


def clean_volumes(dispatcher: Dispatcher, guard: DestructiveActionGuard) -> Tuple[GuardOutcome, int]:
    """Remove volumes for both configurations after operator confirmation."""
    return guard.run(VOLUMES_QUESTION, lambda: teardown_all(dispatcher, ["-v"]))
