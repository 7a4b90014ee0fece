"""
Application settings.

Defaults for the main loop, collected in one place so callers can tweak them
without subclassing Application.
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from .terminal import DEFAULT_SIZE

# Ctrl+C arrives as a plain character while the terminal is in raw mode.
CTRL_C = '\x03'


@dataclass
class AppConfig:
    """Settings for Application.

    Attributes:
        inkey_timeout: Seconds to wait for a key before checking for a pending
            resize; None blocks until a key arrives
        quit_keys: Keys that end the main loop
        default_size: (rows, cols) used when the terminal size is unknown
        distribute_remainder: Give flex-grow rounding leftovers to the last
            growing child (see LayoutEngine)
        register_resize_handler: Install the SIGWINCH handler on construction
    """
    inkey_timeout: Optional[float] = 0.1
    quit_keys: FrozenSet[str] = frozenset({'q', 'Q', CTRL_C})
    default_size: Tuple[int, int] = DEFAULT_SIZE
    distribute_remainder: bool = True
    register_resize_handler: bool = True
