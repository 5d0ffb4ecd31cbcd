"""
Console helpers shared by the CLI and the dashboard.
"""

from rich.console import Console

from stackmon import __version__

VERSION = __version__

console = Console()

_STATUS_STYLES = {
    "info": ("ℹ", "cyan"),
    "success": ("✓", "green"),
    "warning": ("⚠", "yellow"),
    "error": ("✗", "red"),
}


def cx_print(message: str, status: str = "info", target: Console | None = None) -> None:
    """
    Print a status-prefixed message.

    Args:
        message: Text to print (rich markup allowed)
        status: One of "info", "success", "warning", "error"
        target: Console to print to, defaults to the shared console
    """
    icon, style = _STATUS_STYLES.get(status, _STATUS_STYLES["info"])
    (target or console).print(f"[{style}]{icon}[/{style}] {message}")
