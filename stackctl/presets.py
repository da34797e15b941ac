"""
Named presets that bind fixed parameters and forward to the dispatcher.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .dispatcher import Dispatcher, Operation, ModeLike
from .modes import Mode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Preset:
    """Pre-bound shortcut for a dispatcher operation."""
    name: str
    operation: Operation
    mode: Optional[Mode]            # None = use the caller's current mode
    selector: Optional[str] = None
    extra_args: Tuple[str, ...] = ()
    help: str = ""

    def run(self, dispatcher: Dispatcher, current_mode: ModeLike = None) -> int:
        """Forward to the dispatcher with this preset's bindings."""
        mode = self.mode if self.mode is not None else current_mode
        logger.debug(f"Preset {self.name} -> {self.operation.value}")
        return dispatcher.run(self.operation, mode, self.selector, self.extra_args)


DEV = Mode.DEVELOPMENT
PROD = Mode.PRODUCTION

# Registry of all presets, in help order
PRESETS: List[Preset] = [
    Preset("dev-up", Operation.START, DEV, extra_args=("--build",), help="Start development environment"),
    Preset("dev-down", Operation.STOP, DEV, help="Stop development environment"),
    Preset("dev-build", Operation.BUILD, DEV, help="Build development containers"),
    Preset("dev-logs", Operation.LOGS, DEV, help="View development logs"),
    Preset("dev-restart", Operation.RESTART, DEV, help="Restart development services"),
    Preset("dev-shell", Operation.SHELL, DEV, selector="backend", help="Open shell in backend container"),
    Preset("dev-ps", Operation.STATUS, DEV, help="Show running development containers"),
    Preset("backend-shell", Operation.SHELL, None, selector="backend", help="Open shell in backend container"),
    Preset("gateway-shell", Operation.SHELL, None, selector="gateway", help="Open shell in gateway container"),
    Preset("prod-up", Operation.START, PROD, extra_args=("--build", "-d"), help="Start production environment"),
    Preset("prod-down", Operation.STOP, PROD, help="Stop production environment"),
    Preset("prod-build", Operation.BUILD, PROD, help="Build production containers"),
    Preset("prod-logs", Operation.LOGS, PROD, help="View production logs"),
    Preset("prod-restart", Operation.RESTART, PROD, help="Restart production services"),
]

_BY_NAME: Dict[str, Preset] = {preset.name: preset for preset in PRESETS}


def list_presets() -> List[str]:
    """List all preset names."""
    return [preset.name for preset in PRESETS]


def get_preset(name: str) -> Preset:
    """
    Look up a preset by name.

    Raises:
        KeyError: If no preset has that name
    """
    if name not in _BY_NAME:
        raise KeyError(f"Unknown preset: {name}")
    return _BY_NAME[name]


def run_preset(name: str, dispatcher: Dispatcher, current_mode: ModeLike = None) -> int:
    """Run a preset by name and return the forwarded exit status."""
    return get_preset(name).run(dispatcher, current_mode)
