"""
Backend npm tasks run outside of docker.
"""

import logging
from pathlib import Path
from typing import Dict, List

from .runner import CommandRunner

logger = logging.getLogger(__name__)

BACKEND_TASKS: Dict[str, List[str]] = {
    "build": ["npm", "run", "build"],
    "install": ["npm", "install"],
    "type-check": ["npm", "run", "type-check"],
    "dev": ["npm", "run", "dev"],
}


def run_backend_task(task: str, backend_dir: Path, runner: CommandRunner = None) -> int:
    """
    Run an npm task inside the backend directory.

    Args:
        task: One of BACKEND_TASKS
        backend_dir: Backend source directory
        runner: Command runner to use

    Returns:
        npm exit status

    Raises:
        KeyError: If the task is unknown
    """
    if task not in BACKEND_TASKS:
        raise KeyError(f"Unknown backend task: {task}")

    runner = runner or CommandRunner()
    logger.info(f"Running backend task {task} in {backend_dir}")
    return runner.run(BACKEND_TASKS[task], cwd=backend_dir)
