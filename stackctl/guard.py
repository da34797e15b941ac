"""
Confirmation gate for irreversible operations.
"""

import logging
from enum import Enum
from typing import Callable, Tuple

import click

logger = logging.getLogger(__name__)

# Takes the question, returns the operator's raw answer
ConfirmationProvider = Callable[[str], str]


class GuardOutcome(Enum):
    """How a guarded action ended."""
    COMPLETED = "completed"
    DECLINED = "declined"


def prompt_operator(question: str) -> str:
    """Ask on the terminal; an empty answer or closed stdin means no."""
    try:
        return click.prompt(f"{question} [y/N]", default="", show_default=False)
    except click.Abort:
        click.echo()
        return ""


def is_affirmative(answer: str) -> bool:
    return (answer or "").strip().lower() == "y"


class DestructiveActionGuard:
    """Runs an action only after the operator answers "y"."""

    def __init__(self, confirm: ConfirmationProvider = None):
        self.confirm = confirm or prompt_operator

    def run(self, question: str, action: Callable[[], int]) -> Tuple[GuardOutcome, int]:
        """
        Ask for confirmation, then run the action once.

        Args:
            question: Prompt shown to the operator
            action: Zero-argument callable returning an exit status

        Returns:
            Tuple of (outcome, exit status). A declined prompt returns
            status 0 without calling the action.
        """
        if not is_affirmative(self.confirm(question)):
            logger.info(f"Declined: {question}")
            return GuardOutcome.DECLINED, 0

        return GuardOutcome.COMPLETED, action()
