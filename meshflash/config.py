"""Project configuration for meshflash."""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from meshflash.toolchain import ToolchainPaths

CONFIG_FILE = "meshflash.toml"


@dataclass
class PathsConfig:
    work_dir: str | None = None
    pio: str | None = None
    python: str | None = None


@dataclass
class SerialConfig:
    port: str | None = None
    baud_rate: int = 115200


@dataclass
class BuildConfig:
    board: str | None = None
    variant: str | None = None
    erase_first: bool = False
    custom_flags: str = ""
    preset: str | None = None


@dataclass
class ProjectConfig:
    paths: PathsConfig = field(default_factory=PathsConfig)
    serial: SerialConfig = field(default_factory=SerialConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    flags: dict = field(default_factory=dict)

    def toolchain_paths(self) -> ToolchainPaths:
        """Bundled layout, with any [paths] entries taking precedence."""
        paths = ToolchainPaths.bundled()
        if self.paths.work_dir:
            paths.work_dir = Path(self.paths.work_dir).expanduser()
        if self.paths.pio:
            paths.pio = Path(self.paths.pio).expanduser()
        if self.paths.python:
            paths.python = Path(self.paths.python).expanduser()
        return paths


def _read_toml(toml_path: Path) -> dict:
    with open(toml_path, "rb") as f:
        return tomllib.load(f)


def load_project_config(project_dir: Path | str) -> ProjectConfig:
    """Parse meshflash.toml and return a typed ProjectConfig."""
    project_dir = Path(project_dir)
    toml_path = project_dir / CONFIG_FILE
    if not toml_path.exists():
        raise FileNotFoundError(f"{CONFIG_FILE} not found in {project_dir}")

    data = _read_toml(toml_path)
    paths_data = data.get("paths", {})
    serial_data = data.get("serial", {})
    build_data = data.get("build", {})

    return ProjectConfig(
        paths=PathsConfig(
            work_dir=paths_data.get("work_dir"),
            pio=paths_data.get("pio"),
            python=paths_data.get("python"),
        ),
        serial=SerialConfig(
            port=serial_data.get("port"),
            baud_rate=serial_data.get("baud_rate", 115200),
        ),
        build=BuildConfig(
            board=build_data.get("board"),
            variant=build_data.get("variant"),
            erase_first=build_data.get("erase_first", False),
            custom_flags=build_data.get("custom_flags", ""),
            preset=build_data.get("preset"),
        ),
        flags=dict(data.get("flags", {})),
    )


def load_project_config_or_default(project_dir: Path | str) -> ProjectConfig:
    try:
        return load_project_config(project_dir)
    except FileNotFoundError:
        return ProjectConfig()


def get_config_value(project_dir: Path | str, key: str):
    """Dotted key lookup, e.g. 'build.board', 'serial.baud_rate'."""
    toml_path = Path(project_dir) / CONFIG_FILE
    if not toml_path.exists():
        return None

    data = _read_toml(toml_path)
    parts = key.split(".", 1)
    if len(parts) == 2:
        section, k = parts
        return data.get(section, {}).get(k)
    return data.get(key)


def _toml_literal(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def set_config_value(project_dir: Path | str, key: str, value) -> None:
    """Write a value to meshflash.toml using line-based editing."""
    toml_path = Path(project_dir) / CONFIG_FILE

    # Coerce integer-like and boolean-like strings
    if isinstance(value, str):
        if value.lower() in ("true", "false"):
            value = value.lower() == "true"
        else:
            try:
                value = int(value)
            except ValueError:
                pass

    parts = key.split(".", 1)
    if len(parts) != 2:
        raise ValueError(f"Key must be dotted (section.key), got: {key}")
    section, k = parts
    val_str = _toml_literal(value)

    if toml_path.exists():
        lines = toml_path.read_text().splitlines(keepends=True)
    else:
        lines = []

    section_header = f"[{section}]"
    section_idx = None
    key_idx = None
    next_section_idx = None

    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped == section_header:
            section_idx = i
        elif section_idx is not None and next_section_idx is None:
            if stripped.startswith("[") and stripped.endswith("]"):
                next_section_idx = i
            elif re.match(rf"^{re.escape(k)}\s*=", stripped):
                key_idx = i

    if key_idx is not None:
        lines[key_idx] = f"{k} = {val_str}\n"
    elif section_idx is not None:
        insert_at = next_section_idx if next_section_idx is not None else len(lines)
        if insert_at > 0 and not lines[insert_at - 1].endswith("\n"):
            lines[insert_at - 1] += "\n"
        lines.insert(insert_at, f"{k} = {val_str}\n")
    else:
        if lines and not lines[-1].endswith("\n"):
            lines.append("\n")
        if lines:
            lines.append("\n")
        lines.append(f"{section_header}\n")
        lines.append(f"{k} = {val_str}\n")

    toml_path.write_text("".join(lines))


def list_config(project_dir: Path | str) -> dict:
    """Return a flat dotted-key dict of all config values."""
    toml_path = Path(project_dir) / CONFIG_FILE
    if not toml_path.exists():
        return {}

    result = {}
    for section, values in _read_toml(toml_path).items():
        if isinstance(values, dict):
            for k, v in values.items():
                result[f"{section}.{k}"] = v
        else:
            result[section] = values
    return result
