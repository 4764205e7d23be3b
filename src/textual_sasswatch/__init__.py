"""textual-sasswatch: Embeddable TUI for sass directory watching."""

__version__ = "0.1.0"

# Public API
from textual_sasswatch.controller import SassWatchController

__all__ = [
    "__version__",
    # Primary components
    "SassWatchController",
]
