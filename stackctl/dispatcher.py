"""
Command dispatcher that turns operations into docker compose invocations.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .modes import Mode, resolve_mode, config_reference_for
from .runner import CommandRunner

logger = logging.getLogger(__name__)


class Operation(Enum):
    """Operations understood by the dispatcher."""
    START = "start"
    STOP = "stop"
    BUILD = "build"
    LOGS = "logs"
    RESTART = "restart"
    SHELL = "shell"
    STATUS = "status"


# Compose verb (plus fixed flags) for each operation
COMPOSE_VERBS = {
    Operation.START: ["up", "-d"],
    Operation.STOP: ["down"],
    Operation.BUILD: ["build"],
    Operation.LOGS: ["logs", "-f"],
    Operation.RESTART: ["restart"],
    Operation.SHELL: ["exec"],
    Operation.STATUS: ["ps"],
}

# Tried in order until one exits zero
SHELL_BINARIES = ("/bin/sh", "/bin/bash")
DEFAULT_SHELL_SERVICE = "backend"

ModeLike = Union[Mode, str, None]


class Dispatcher:
    """
    Single entry point for every compose-backed operation.

    Each call resolves the mode to its compose file, builds one argument
    vector and hands it to the runner. The child's exit status is returned
    unchanged.
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        project_dir: Optional[Path] = None,
        compose_command: Sequence[str] = ("docker", "compose"),
    ):
        self.runner = runner or CommandRunner()
        self.project_dir = project_dir
        self.compose_command = list(compose_command)

    def compose(self, mode: ModeLike = None) -> List[str]:
        """Base compose invocation bound to the mode's configuration file."""
        reference = config_reference_for(resolve_mode(mode), self.project_dir)
        return self.compose_command + ["-f", reference]

    def build_command(
        self,
        operation: Operation,
        mode: ModeLike = None,
        selector: Optional[str] = None,
        extra_args: Sequence[str] = (),
        shell_binary: str = SHELL_BINARIES[0],
    ) -> List[str]:
        """
        Build the argument vector for an operation.

        Args:
            operation: Operation to perform
            mode: Deployment mode (development when omitted)
            selector: Service name; ignored by operations that do not take one
            extra_args: Tokens appended verbatim for start/stop/build/restart
            shell_binary: Shell executed by the shell operation

        Returns:
            List of command tokens
        """
        argv = self.compose(mode) + COMPOSE_VERBS[operation]

        if operation == Operation.SHELL:
            argv += [selector or DEFAULT_SHELL_SERVICE, shell_binary]
        elif operation == Operation.LOGS:
            if selector:
                argv.append(selector)
        elif operation != Operation.STATUS:
            argv += list(extra_args)

        return argv

    def run(
        self,
        operation: Operation,
        mode: ModeLike = None,
        selector: Optional[str] = None,
        extra_args: Sequence[str] = (),
    ) -> int:
        """Perform an operation and return its exit status."""
        if operation == Operation.SHELL:
            return self.shell(mode, selector)
        if operation == Operation.LOGS:
            return self.logs(mode, selector)
        if operation == Operation.STATUS:
            return self.status(mode)

        argv = self.build_command(operation, mode, extra_args=extra_args)
        return self.runner.run(argv)

    def start(self, mode: ModeLike = None, extra_args: Sequence[str] = ()) -> int:
        return self.run(Operation.START, mode, extra_args=extra_args)

    def stop(self, mode: ModeLike = None, extra_args: Sequence[str] = ()) -> int:
        return self.run(Operation.STOP, mode, extra_args=extra_args)

    def build(self, mode: ModeLike = None, extra_args: Sequence[str] = ()) -> int:
        return self.run(Operation.BUILD, mode, extra_args=extra_args)

    def restart(self, mode: ModeLike = None, extra_args: Sequence[str] = ()) -> int:
        return self.run(Operation.RESTART, mode, extra_args=extra_args)

    def logs(self, mode: ModeLike = None, selector: Optional[str] = None) -> int:
        """Follow logs for one service, or all services when selector is unset."""
        argv = self.build_command(Operation.LOGS, mode, selector)
        return self.runner.stream(argv)

    def shell(self, mode: ModeLike = None, selector: Optional[str] = None) -> int:
        """
        Open an interactive shell inside a service container.

        /bin/sh is tried first; if it fails, /bin/bash is tried against the
        same service. The first zero status, or the last failing one, is
        returned.

        Args:
            mode: Deployment mode
            selector: Service name (backend when omitted)

        Returns:
            Exit status of the last shell attempted
        """
        status = 0
        for binary in SHELL_BINARIES:
            argv = self.build_command(Operation.SHELL, mode, selector, shell_binary=binary)
            status = self.runner.run(argv)
            if status == 0:
                break
            logger.info(f"{binary} failed with status {status}")
        return status

    def status(self, mode: ModeLike = None) -> int:
        """List containers for the mode's configuration."""
        return self.runner.run(self.build_command(Operation.STATUS, mode))
