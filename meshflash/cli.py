"""CLI entry point for meshflash."""

import asyncio
import json as jsonmod
import logging
import os
import signal
import sys
from pathlib import Path

import click

from meshflash.catalog import (
    FLAGS,
    boards_for_variant,
    environment_name,
    get_board,
    get_flag,
    get_variant,
    list_boards,
    list_presets,
    list_variants,
    preset_flags,
    ui_field_groups,
    variants_for_board,
)
from meshflash.config import (
    get_config_value,
    list_config,
    load_project_config_or_default,
    set_config_value,
)
from meshflash.environment import CUSTOM_CONFIG_NAME, CUSTOM_SUFFIX
from meshflash.errors import InvalidConfigurationError, MeshflashError
from meshflash.flags import compile_flags, format_flag
from meshflash.orchestrator import BuildRequest, Operation, Orchestrator
from meshflash.serial.port import (
    SerialError,
    list_serial_ports,
    open_serial,
    reset_device,
    resolve_port_and_baud,
)
from meshflash.serial.reader import serial_monitor
from meshflash.toolchain import PlatformIOToolchain, format_command


def _setup_logging(verbose: int) -> None:
    if verbose:
        fmt = "%(levelname)s %(name)s: %(message)s"
    else:
        fmt = "%(message)s"
    if verbose > 1:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=fmt, stream=sys.stderr, force=True)


def _fail(error: MeshflashError, use_json: bool = False):
    if use_json:
        click.echo(jsonmod.dumps(error.to_dict()), err=True)
    else:
        click.echo(f"Error: {error.message}", err=True)
    raise SystemExit(error.exit_code)


@click.group()
@click.option("-v", "--verbose", count=True, help="More log output (-vv for debug).")
@click.version_option(package_name="meshflash")
def main(verbose):
    """Build and flash MeshCore firmware for LoRa boards."""
    _setup_logging(verbose)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

@main.command()
@click.option("--variant", type=str, help="Only boards that support this variant.")
@click.option("--json", "use_json", is_flag=True, help="Output JSON.")
def boards(variant, use_json):
    """List supported boards."""
    if variant:
        try:
            get_variant(variant)
        except MeshflashError as e:
            _fail(e, use_json)
        board_list = boards_for_variant(variant)
    else:
        board_list = list_boards()

    if use_json:
        data = [{
            "id": b.id,
            "name": b.name,
            "platform": b.platform,
            "framework": b.framework,
            "variants": list(b.variants),
            "post_process": b.post_process,
        } for b in board_list]
        click.echo(jsonmod.dumps(data, indent=2))
        return

    click.echo(f"Supported boards ({len(board_list)}):\n")
    for b in board_list:
        click.echo(f"  {b.id:<30} {b.name:<28} {b.platform}")


@main.command()
@click.option("--board", type=str, help="Only variants this board supports.")
@click.option("--json", "use_json", is_flag=True, help="Output JSON.")
def variants(board, use_json):
    """List firmware variants (roles)."""
    if board:
        try:
            get_board(board)
        except MeshflashError as e:
            _fail(e, use_json)
        variant_list = variants_for_board(board)
    else:
        variant_list = list_variants()

    if use_json:
        data = [{
            "id": v.id,
            "name": v.name,
            "description": v.description,
            "required_flags": list(v.required_flags),
            "optional_flags": list(v.optional_flags),
        } for v in variant_list]
        click.echo(jsonmod.dumps(data, indent=2))
        return

    for v in variant_list:
        click.echo(f"  {v.id:<16} {v.name:<16} {v.description}")


@main.command()
@click.argument("variant")
@click.option("--json", "use_json", is_flag=True, help="Output JSON.")
def fields(variant, use_json):
    """Show the settings a variant accepts, grouped for editing."""
    try:
        groups = ui_field_groups(get_variant(variant))
    except MeshflashError as e:
        _fail(e, use_json)

    if use_json:
        data = {
            group: [{
                "key": f.key,
                "label": f.definition.label,
                "type": f.definition.kind.value,
                "required": f.required,
                "default": f.default,
                "options": list(f.definition.options),
                "min": f.definition.minimum,
                "max": f.definition.maximum,
            } for f in specs]
            for group, specs in groups.items()
        }
        click.echo(jsonmod.dumps(data, indent=2))
        return

    for group, specs in groups.items():
        click.echo(f"{group}:")
        for f in specs:
            marker = "*" if f.required else " "
            click.echo(f"  {marker} {f.key:<24} {f.definition.label:<24} default={f.default!r}")
        click.echo()


@main.command()
def presets():
    """List regional LoRa presets."""
    for p in list_presets():
        click.echo(f"  {p.id:<10} {p.name:<26} {p.description}")


# ---------------------------------------------------------------------------
# Build / upload
# ---------------------------------------------------------------------------

def _build_options(func):
    func = click.option("--preset", type=str, help="Regional LoRa preset (see 'meshflash presets').")(func)
    func = click.option("--custom", "custom_flags", type=str, help="Extra flags, e.g. \"-DFOO=1 -DBAR=2\".")(func)
    func = click.option("--flag", "flag_items", multiple=True, metavar="NAME=VALUE", help="Set a variant flag.")(func)
    func = click.option("--variant", type=str, help="Firmware variant, e.g. repeater.")(func)
    func = click.option("--board", type=str, help="Board id. Use 'meshflash boards' to list.")(func)
    return func


def _parse_flag_values(items) -> dict:
    values = {}
    for name, raw in items:
        definition = get_flag(name)
        if definition is None:
            raise click.BadParameter(f"Unknown flag: {name}. Use --custom for arbitrary defines.", param_hint="--flag")
        try:
            values[name] = definition.validate(raw)
        except InvalidConfigurationError as e:
            raise click.BadParameter(e.message, param_hint="--flag") from e
    return values


def _split_flag_item(item: str) -> tuple[str, str]:
    if "=" not in item:
        raise click.BadParameter(f"Expected NAME=VALUE, got {item!r}", param_hint="--flag")
    name, value = item.split("=", 1)
    return name.strip(), value


def _preset_tokens(preset_id: str) -> str:
    tokens = []
    for name, value in preset_flags(preset_id).items():
        rendered = format_flag(FLAGS[name], value)
        if rendered:
            tokens.append(rendered)
    return " ".join(tokens)


def _make_request(config, board, variant, flag_items, custom_flags, preset, port=None, erase_first=False) -> BuildRequest:
    board = board or config.build.board
    variant = variant or config.build.variant
    if not board:
        raise click.UsageError("No board specified. Use --board or set build.board in meshflash.toml")
    if not variant:
        raise click.UsageError("No variant specified. Use --variant or set build.variant in meshflash.toml")

    values = _parse_flag_values(config.flags.items())
    values.update(_parse_flag_values(_split_flag_item(i) for i in flag_items))

    custom = custom_flags if custom_flags is not None else config.build.custom_flags
    preset = preset or config.build.preset
    if preset:
        try:
            custom = " ".join(t for t in (custom, _preset_tokens(preset)) if t)
        except MeshflashError as e:
            raise click.BadParameter(e.message, param_hint="--preset") from e

    return BuildRequest(
        board=board,
        variant=variant,
        port=port,
        flags=values,
        custom_flags=custom or "",
        erase_first=erase_first,
    )


async def _run_with_interrupt(orchestrator: Orchestrator, operation: Operation, request: BuildRequest, echo_err: bool):
    """Run an operation; Ctrl-C asks the orchestrator to stop instead of killing us."""
    loop = asyncio.get_running_loop()
    stops = []
    handle_sigint = os.name == "posix"
    if handle_sigint:
        loop.add_signal_handler(signal.SIGINT, lambda: stops.append(loop.create_task(orchestrator.stop())))
    try:
        return await orchestrator.start(
            operation, request, on_output=lambda text: click.echo(text, nl=False, err=echo_err),
        )
    finally:
        if handle_sigint:
            loop.remove_signal_handler(signal.SIGINT)
        if stops:
            await asyncio.gather(*stops)


def _run_operation(operation: Operation, request: BuildRequest, config, use_json: bool):
    orchestrator = Orchestrator(PlatformIOToolchain(config.toolchain_paths()))
    try:
        result = asyncio.run(_run_with_interrupt(orchestrator, operation, request, echo_err=use_json))
    except MeshflashError as e:
        _fail(e, use_json)

    if use_json:
        click.echo(jsonmod.dumps(result.to_dict(), indent=2))
    else:
        click.echo(f"\n{result.message}")


@main.command()
@_build_options
@click.option("--json", "use_json", is_flag=True, help="Output a JSON result (build output goes to stderr).")
def build(board, variant, flag_items, custom_flags, preset, use_json):
    """Compile firmware for a board and variant."""
    config = load_project_config_or_default(Path.cwd())
    request = _make_request(config, board, variant, flag_items, custom_flags, preset)
    _run_operation(Operation.BUILD, request, config, use_json)


@main.command()
@_build_options
@click.option("--port", type=str, help="Serial port of the board.")
@click.option("--erase", "erase_first", is_flag=True, default=None, help="Erase flash before uploading.")
@click.option("--json", "use_json", is_flag=True, help="Output a JSON result (build output goes to stderr).")
def upload(board, variant, flag_items, custom_flags, preset, port, erase_first, use_json):
    """Compile and flash firmware to a connected board."""
    config = load_project_config_or_default(Path.cwd())
    port = port or config.serial.port
    if erase_first is None:
        erase_first = config.build.erase_first
    request = _make_request(config, board, variant, flag_items, custom_flags, preset, port=port, erase_first=erase_first)
    _run_operation(Operation.UPLOAD, request, config, use_json)


@main.command("flags")
@_build_options
@click.option("--port", type=str, help="Show the upload command for this port.")
@click.option("--json", "use_json", is_flag=True, help="Output JSON.")
def flags_cmd(board, variant, flag_items, custom_flags, preset, port, use_json):
    """Show the compile definitions and command a build would use."""
    config = load_project_config_or_default(Path.cwd())
    request = _make_request(config, board, variant, flag_items, custom_flags, preset, port=port)
    try:
        board_def = get_board(request.board)
        variant_def = get_variant(request.variant)
        env = environment_name(board_def.id, variant_def.id)
    except MeshflashError as e:
        _fail(e, use_json)

    compiled = compile_flags(board_def, variant_def, request.flags, request.custom_flags)
    toolchain = PlatformIOToolchain(config.toolchain_paths())
    config_path = None
    if compiled:
        config_path = toolchain.paths.work_dir / CUSTOM_CONFIG_NAME
        env_for_command = env + CUSTOM_SUFFIX
    else:
        env_for_command = env
    if port:
        command = toolchain.upload_command(env_for_command, port, config_path=config_path)
    else:
        command = toolchain.compile_command(env_for_command, config_path)

    if use_json:
        click.echo(jsonmod.dumps({"environment": env, "flags": compiled, "command": command}, indent=2))
        return

    click.echo(f"Environment: {env}")
    click.echo("Flags:")
    for flag in compiled:
        click.echo(f"  -D{flag}")
    click.echo(f"Command: {format_command(command)}")


@main.command()
def doctor():
    """Check the PlatformIO runtime, MeshCore tree and serial ports."""
    ok = True
    config = load_project_config_or_default(Path.cwd())
    toolchain = PlatformIOToolchain(config.toolchain_paths())

    result = toolchain.doctor()
    if result["ok"]:
        click.echo(f"[OK] {toolchain.name}: {result['message']}")
    else:
        click.echo(f"[!!] {toolchain.name}: {result['message']}")
        ok = False

    ports = [p for p in list_serial_ports() if p.likely_dev_board]
    if ports:
        click.echo("[OK] Development boards found:")
        for p in ports:
            click.echo(f"     {p.display_name}")
    else:
        click.echo("[!!] No development boards detected. Is a board connected via USB?")
        ok = False

    import serial as pyserial
    click.echo(f"[OK] pyserial installed: {pyserial.__version__}")

    if ok:
        click.echo("\nAll checks passed. Ready to build.")
    else:
        click.echo("\nSome checks failed. Fix the issues above.")


# ---------------------------------------------------------------------------
# Serial command group
# ---------------------------------------------------------------------------

@main.group()
def serial():
    """Serial port tools."""
    pass


@serial.command("ports")
@click.option("--all", "show_all", is_flag=True, help="Include ports that don't look like dev boards.")
@click.option("--json", "use_json", is_flag=True, help="Output JSON.")
def serial_ports_cmd(show_all, use_json):
    """List available serial ports."""
    ports = list_serial_ports()
    if not show_all:
        ports = [p for p in ports if p.likely_dev_board]
    if use_json:
        click.echo(jsonmod.dumps([p.to_dict() for p in ports], indent=2))
        return
    if not ports:
        click.echo("No serial ports found.")
        return
    for p in ports:
        click.echo(f"  {p.device:<25} {p.display_name}")


def _open_from_cli(port, baud):
    try:
        port, baud = resolve_port_and_baud(port, baud, Path.cwd())
    except click.UsageError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(1)
    try:
        return open_serial(port, baud)
    except SerialError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(e.exit_code)


@serial.command("reset")
@click.option("--port", type=str, help="Serial port.")
@click.option("--baud", type=int, help="Baud rate.")
def serial_reset_cmd(port, baud):
    """Reset the board by toggling DTR/RTS."""
    ser = _open_from_cli(port, baud)
    try:
        reset_device(ser)
    except SerialError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise SystemExit(e.exit_code)
    finally:
        ser.close()
    click.echo(f"Reset {ser.port}")


@serial.command("monitor")
@click.option("--port", type=str, help="Serial port.")
@click.option("--baud", type=int, help="Baud rate.")
@click.option("--duration", type=float, help="Monitor duration in seconds.")
@click.option("--log", "log_path", type=click.Path(dir_okay=False), help="Append received lines to a file.")
@click.option("--timestamps", is_flag=True, help="Prefix lines with a UTC timestamp.")
def serial_monitor_cmd(port, baud, duration, log_path, timestamps):
    """Stream serial output continuously."""
    ser = _open_from_cli(port, baud)
    try:
        serial_monitor(ser, duration=duration, log_path=log_path, output_callback=click.echo, timestamps=timestamps)
    finally:
        ser.close()


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

@main.command("config")
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.option("--list", "show_list", is_flag=True, help="Show all config values.")
def config_cmd(key, value, show_list):
    """Get or set meshflash.toml configuration values."""
    project_dir = Path.cwd()

    if show_list:
        values = list_config(project_dir)
        if not values:
            click.echo("No configuration found.")
            return
        for k, v in sorted(values.items()):
            click.echo(f"  {k} = {v}")
        return

    if key and value:
        try:
            set_config_value(project_dir, key, value)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1)
        click.echo(f"Set {key} = {value}")
        return

    if key:
        val = get_config_value(project_dir, key)
        if val is None:
            click.echo(f"{key} is not set.")
        else:
            click.echo(f"{key} = {val}")
        return

    click.echo("Usage: meshflash config <KEY> [VALUE] or meshflash config --list")
