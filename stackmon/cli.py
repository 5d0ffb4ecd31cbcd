"""stackmon CLI - main entry point."""

import argparse
import logging
import math
import signal
import sys

from rich.live import Live
from rich.markdown import Markdown
from rich.panel import Panel

from stackmon.branding import VERSION, console, cx_print
from stackmon.config import MonitorSettings
from stackmon.exceptions import RegistryError, RuntimeUnavailableError
from stackmon.monitor import DashboardUI, RefreshScheduler, StatusCollector
from stackmon.registry import DEFAULT_SERVICES, ServiceRegistry, load_registry
from stackmon.runtime import connect

logger = logging.getLogger(__name__)

HELP_TEXT = """
# stackmon

**Live health dashboard for the local container stack**

## Usage
```bash
stackmon [INTERVAL] [--services FILE] [--verbose] [--log-file PATH]
```

## Examples
- `stackmon`           - Default refresh (300ms)
- `stackmon 0.1`       - Fast refresh (100ms)
- `stackmon 1`         - Standard refresh (1s)
- `stackmon -h`        - Show this help

## Options
- `INTERVAL`           - Refresh interval in seconds (fractions allowed)
- `--services FILE`    - YAML file listing the services to track
- `--verbose`, `-v`    - Debug logging
- `--log-file PATH`    - Write logs to PATH instead of stderr

Press `Ctrl+C` to exit.
"""


def show_help() -> None:
    console.print(Panel(Markdown(HELP_TEXT), title=f"stackmon {VERSION}", border_style="cyan"))


def parse_interval(value: str | None) -> float | None:
    """
    Parse the positional interval argument.

    Returns:
        Interval in seconds, or None when the value is missing, unparsable
        or not positive (the configured interval then applies)
    """
    if value is None:
        return None
    try:
        interval = float(value)
    except ValueError:
        logger.debug("Ignoring unparsable interval %r", value)
        return None
    if not math.isfinite(interval) or interval <= 0:
        logger.debug("Ignoring out-of-range interval %r", value)
        return None
    return interval


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stackmon", add_help=False)
    parser.add_argument("interval", nargs="?", default=None)
    parser.add_argument("-h", "--help", action="store_true", dest="help")
    parser.add_argument("--services", metavar="FILE", default=None)
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--log-file", metavar="PATH", default=None)
    parser.add_argument("--version", "-V", action="version", version=f"stackmon {VERSION}")
    return parser


def configure_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """Route logs to stderr (or a file); WARNING by default, DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(asctime)s: %(name)s | %(message)s",
        filename=log_file,
        force=True,
    )
    # Suppress noisy log messages
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("docker").setLevel(logging.WARNING)


def install_signal_handlers(scheduler: RefreshScheduler) -> None:
    def handle(signum, frame):
        logger.debug("Received signal %s, stopping", signum)
        scheduler.stop()

    signal.signal(signal.SIGINT, handle)
    signal.signal(signal.SIGTERM, handle)


def run_monitor(
    registry: ServiceRegistry, settings: MonitorSettings, install_signals: bool = True
) -> int:
    """Connect to the runtime and run the dashboard until interrupted."""
    try:
        runtime = connect(timeout=settings.runtime_timeout)
    except RuntimeUnavailableError as exc:
        cx_print(str(exc), "error")
        cx_print("Make sure Docker is running and accessible", "info")
        return 1

    console.print(
        f"[cyan]🚀 Starting monitor ({settings.interval * 1000:.1f}ms refresh)...[/cyan]"
    )

    try:
        with StatusCollector(
            registry, runtime, collect_timeout=settings.collect_timeout
        ) as collector:
            with Live(console=console, auto_refresh=False, screen=False) as live:

                def display(renderable) -> None:
                    live.update(renderable, refresh=True)

                scheduler = RefreshScheduler(
                    collector,
                    registry,
                    display=display,
                    interval=settings.interval,
                    ui=DashboardUI(),
                )
                if install_signals:
                    install_signal_handlers(scheduler)
                try:
                    scheduler.run()
                except KeyboardInterrupt:
                    pass
    finally:
        runtime.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the stackmon CLI."""
    parser = create_parser()
    args, unknown = parser.parse_known_args(argv)

    if args.help:
        show_help()
        return 0

    configure_logging(verbose=args.verbose, log_file=args.log_file)

    if unknown:
        logger.debug("Ignoring unrecognized arguments: %s", " ".join(unknown))

    settings = MonitorSettings.from_env().with_interval(parse_interval(args.interval))

    registry = DEFAULT_SERVICES
    if args.services:
        try:
            registry = load_registry(args.services)
        except RegistryError as exc:
            cx_print(f"Error: {exc}", "error")
            return 1

    return run_monitor(registry, settings)


if __name__ == "__main__":
    sys.exit(main())
