"""Command Line Interface for devbridge."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .adb import BridgeError, DeviceManager, PackageManager, PropertyReader
from .config import BridgeConfig, load_config
from .util import setup_logging

console = Console()
# logs stay off stdout so command output can be piped
log_console = Console(stderr=True)


def _fail(message: str) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]")
    sys.exit(1)


def setup_cli_logging(settings: BridgeConfig, verbose: bool = False, log_file: Optional[Path] = None):
    """Setup logging for CLI."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_file=log_file or settings.log_file,
        console=log_console,
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--config", "-c", type=click.Path(exists=True, path_type=Path), help="Configuration file path")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), help="Write debug logs to this file")
@click.pass_context
def cli(ctx, verbose: bool, config: Optional[Path], log_file: Optional[Path]):
    """devbridge - inspect and drive Android devices over adb."""
    settings = load_config(config) if config else BridgeConfig()
    setup_cli_logging(settings, verbose=verbose, log_file=log_file)

    ctx.ensure_object(dict)
    ctx.obj["config"] = settings
    ctx.obj["client"] = settings.create_client()


@cli.command("devices")
@click.pass_context
def devices_cmd(ctx):
    """List connected devices and emulators."""
    try:
        devices = DeviceManager(ctx.obj["client"]).list_devices()
    except BridgeError as e:
        _fail(str(e))
        return

    if not devices:
        console.print("[yellow]No devices found[/yellow]")
        return

    table = Table(title="Connected Devices")
    table.add_column("Identifier", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Kind", style="white")
    table.add_column("Authorized", style="green")

    for device in devices:
        authorized = "yes" if device.is_authorized else "[red]no[/red]"
        table.add_row(device.identifier, device.display_name, device.kind.value, authorized)

    console.print(table)


@cli.command("booted")
@click.argument("name", required=False)
@click.pass_context
def booted_cmd(ctx, name: Optional[str]):
    """Check whether a device (identifier or name) is connected."""
    try:
        device = DeviceManager(ctx.obj["client"]).is_device_booted(name)
    except BridgeError as e:
        _fail(str(e))
        return

    if device is None:
        console.print(f"[yellow]{name or 'No device'} is not booted[/yellow]")
        sys.exit(1)

    console.print(f"[green]{device.display_name}[/green] ({device.identifier}) is booted")


@cli.command("props")
@click.argument("serial")
@click.option("--filter", "-f", "prefix", help="Only show properties starting with this prefix")
@click.pass_context
def props_cmd(ctx, serial: str, prefix: Optional[str]):
    """Show device properties."""
    try:
        properties = PropertyReader(ctx.obj["client"]).get_properties(serial)
    except BridgeError as e:
        _fail(str(e))
        return

    table = Table(title=f"Properties - {serial}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    for key in sorted(properties):
        if prefix and not key.startswith(prefix):
            continue
        table.add_row(key, properties[key])

    console.print(table)


@cli.command("abis")
@click.argument("serial")
@click.pass_context
def abis_cmd(ctx, serial: str):
    """Show supported ABIs in preference order."""
    try:
        abis = PropertyReader(ctx.obj["client"]).get_device_abis(serial)
    except BridgeError as e:
        _fail(str(e))
        return

    for abi in abis:
        console.print(abi)


@cli.command("installed")
@click.argument("serial")
@click.argument("package")
@click.pass_context
def installed_cmd(ctx, serial: str, package: str):
    """Check if a package is installed."""
    try:
        installed = PackageManager(ctx.obj["client"]).is_package_installed(serial, package)
    except BridgeError as e:
        _fail(str(e))
        return

    if installed:
        console.print(f"[green]{package} is installed[/green]")
    else:
        console.print(f"[yellow]{package} is not installed[/yellow]")
        sys.exit(1)


@cli.command("launch")
@click.argument("serial")
@click.argument("activity")
@click.pass_context
def launch_cmd(ctx, serial: str, activity: str):
    """Launch an activity (package/.Activity)."""
    try:
        PackageManager(ctx.obj["client"]).launch_activity(serial, activity)
    except BridgeError as e:
        _fail(str(e))
        return

    console.print(f"[green]Launched {activity}[/green]")


@cli.command("open")
@click.argument("serial")
@click.argument("app_id")
@click.pass_context
def open_cmd(ctx, serial: str, app_id: str):
    """Open an app by application id."""
    try:
        PackageManager(ctx.obj["client"]).open_app(serial, app_id)
    except BridgeError as e:
        _fail(str(e))
        return

    console.print(f"[green]Opened {app_id}[/green]")


@cli.command("wait-boot")
@click.argument("serial", required=False)
@click.option("--timeout", "-t", type=float, help="Seconds to wait")
@click.pass_context
def wait_boot_cmd(ctx, serial: Optional[str], timeout: Optional[float]):
    """Wait until the boot animation has finished."""
    settings = ctx.obj["config"]
    reader = PropertyReader(ctx.obj["client"])

    with console.status("Waiting for boot..."):
        try:
            reader.wait_for_boot(
                serial,
                timeout=timeout or settings.boot_timeout,
                interval=settings.boot_poll_interval,
            )
        except BridgeError as e:
            _fail(str(e))
            return

    console.print("[green]Device booted[/green]")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
