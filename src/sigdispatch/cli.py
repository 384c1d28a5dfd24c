"""Click CLI command definitions for sigdispatch."""

from __future__ import annotations

import signal

import click

from sigdispatch import __version__


@click.group()
@click.version_option(version=__version__, prog_name="sigdispatch")
def main() -> None:
    """sigdispatch: fan process signals out to registered handlers."""


# --- Config commands ---

@main.group()
def config() -> None:
    """Manage configuration."""


@config.command("init")
@click.option("--force", is_flag=True, help="Overwrite existing config")
def config_init(force: bool) -> None:
    """Create default configuration file."""
    from sigdispatch.config import init_config
    try:
        path = init_config(force=force)
        click.echo(f"Config created: {path}")
    except FileExistsError as e:
        click.echo(str(e), err=True)
        raise SystemExit(1)


@config.command("show")
def config_show() -> None:
    """Show current configuration."""
    from sigdispatch.config import CONFIG_FILE
    if not CONFIG_FILE.exists():
        click.echo(f"No config file found at {CONFIG_FILE}", err=True)
        click.echo("Run 'sigdispatch config init' to create one.", err=True)
        raise SystemExit(1)
    click.echo(CONFIG_FILE.read_text())


# --- Signal commands ---

def _parse_signal(value: str) -> signal.Signals:
    from sigdispatch.config import parse_signal
    try:
        return parse_signal(value)
    except ValueError:
        raise click.BadParameter(
            f"Expected a signal name (e.g. hup, SIGTERM) or number, got: {value!r}"
        ) from None


@main.command("signals")
def signals_list() -> None:
    """List dispatched signals and which ones the watcher handles."""
    from sigdispatch import constants
    from sigdispatch.config import handled_signals
    try:
        handled = set(handled_signals())
    except ValueError as e:
        click.echo(f"Invalid [signals] handle setting: {e}", err=True)
        raise SystemExit(1)
    for sig in constants.DEFAULT_SIGNALS:
        mark = "*" if sig in handled else " "
        role = ""
        if sig in constants.SHUTDOWN_SIGNALS:
            role = "shutdown"
        elif sig == constants.RELOAD:
            role = "reload"
        click.echo(f"{mark} {sig.name:<8} {int(sig):>3}  {role}".rstrip())


@main.command()
@click.argument("signal_name")
@click.option("--pid", type=int, default=None, help="Target PID (default: the running watcher)")
def send(signal_name: str, pid: int | None) -> None:
    """Send SIGNAL_NAME to the watcher or to --pid."""
    from sigdispatch.daemon.runner import send_signal
    send_signal(_parse_signal(signal_name), pid)


# --- Watcher commands ---

@main.command()
@click.option("--foreground", is_flag=True, help="Run in foreground instead of daemonizing")
def watch(foreground: bool) -> None:
    """Start the sigdispatch watcher."""
    from sigdispatch.daemon.runner import start_watcher
    start_watcher(foreground)


@main.command()
def stop() -> None:
    """Stop the watcher with SIGTERM."""
    from sigdispatch import constants
    from sigdispatch.daemon.runner import send_signal
    send_signal(constants.SHUTDOWN)


@main.command()
def status() -> None:
    """Show whether the watcher is running."""
    from sigdispatch.daemon.runner import show_status
    show_status()
