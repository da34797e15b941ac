"""
Subprocess execution for external tools (docker compose, npm).
"""

import subprocess
import logging
from typing import Callable, IO, Iterable, List, Optional, Sequence, Union
from pathlib import Path

import click

logger = logging.getLogger(__name__)

# Conventional shell statuses
EXIT_COMMAND_NOT_FOUND = 127
EXIT_INTERRUPTED = 130

REDACTED = "[REDACTED]"


def redact_argv(argv: Sequence[str], secrets: Iterable[str] = ()) -> List[str]:
    """
    Mask secret values inside an argument vector.

    Args:
        argv: Command tokens
        secrets: Values that must never appear in logs

    Returns:
        Copy of argv with every secret occurrence replaced
    """
    secrets = [s for s in secrets if s]
    redacted = []
    for token in argv:
        for secret in secrets:
            token = token.replace(secret, REDACTED)
        redacted.append(token)
    return redacted


class CommandRunner:
    """Runs one external command at a time and reports its exit status."""

    def __init__(self, echo: Callable[[str], None] = None, grace_period: float = 5.0):
        self.echo = echo or (lambda line: click.echo(line, nl=False))
        self.grace_period = grace_period

    def run(
        self,
        argv: Sequence[str],
        cwd: Optional[Union[str, Path]] = None,
        stdout: Optional[Union[int, IO]] = None,
        stderr: Optional[Union[int, IO]] = None,
        secrets: Iterable[str] = (),
    ) -> int:
        """
        Run a command attached to the terminal (or the given streams).

        Args:
            argv: Command tokens
            cwd: Working directory
            stdout: Redirect target for stdout, inherited when None
            stderr: Redirect target for stderr, inherited when None
            secrets: Values to mask when logging the command

        Returns:
            Child exit status (127 if the executable is missing)
        """
        logger.debug(f"Running: {' '.join(redact_argv(argv, secrets))}")
        try:
            completed = subprocess.run(list(argv), cwd=cwd, stdout=stdout, stderr=stderr)
        except FileNotFoundError:
            logger.error(f"Command not found: {argv[0]}")
            return EXIT_COMMAND_NOT_FOUND

        if completed.returncode != 0:
            logger.debug(f"{argv[0]} exited with status {completed.returncode}")
        return completed.returncode

    def stream(self, argv: Sequence[str], cwd: Optional[Union[str, Path]] = None) -> int:
        """
        Run a long-lived command and echo its output line by line.

        Output is forwarded as soon as the child flushes it; undecodable
        bytes are replaced. Ctrl+C terminates the child and returns 130. The
        child is also stopped if echoing fails for any other reason.

        Args:
            argv: Command tokens
            cwd: Working directory

        Returns:
            Child exit status
        """
        logger.debug(f"Streaming: {' '.join(argv)}")
        try:
            process = subprocess.Popen(
                list(argv),
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except FileNotFoundError:
            logger.error(f"Command not found: {argv[0]}")
            return EXIT_COMMAND_NOT_FOUND

        try:
            for line in process.stdout:
                self.echo(line)
            return process.wait()
        except KeyboardInterrupt:
            self._stop(process)
            return EXIT_INTERRUPTED
        finally:
            if process.poll() is None:
                self._stop(process)
            process.stdout.close()

    def _stop(self, process: subprocess.Popen) -> None:
        """Terminate a child, killing it if it ignores the request."""
        process.terminate()
        try:
            process.wait(timeout=self.grace_period)
        except subprocess.TimeoutExpired:
            logger.warning(f"Process {process.pid} did not exit, killing it")
            process.kill()
            process.wait()
