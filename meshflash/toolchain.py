"""PlatformIO toolchain for meshflash."""

from __future__ import annotations

import os
import shlex
import sys
from dataclasses import dataclass
from pathlib import Path

import click

from meshflash.errors import DependenciesUnavailableError

APP_NAME = "meshflash"


def default_resources_dir() -> Path:
    """Where the bundled Python, PlatformIO and MeshCore tree live."""
    return Path(click.get_app_dir(APP_NAME)) / "resources"


def bundled_pio_path(resources: Path, platform: str | None = None) -> Path:
    platform = platform or sys.platform
    if platform == "win32":
        return resources / "platformio" / "penv" / "Scripts" / "pio.exe"
    return resources / "platformio" / "penv" / "bin" / "pio"


def bundled_python_path(resources: Path, platform: str | None = None) -> Path:
    platform = platform or sys.platform
    if platform == "win32":
        return resources / "python" / "python.exe"
    return resources / "python" / "bin" / "python3"


@dataclass
class ToolchainPaths:
    """Filesystem locations handed over by provisioning."""
    work_dir: Path
    pio: Path
    python: Path | None = None

    @classmethod
    def bundled(cls, resources: Path | None = None) -> "ToolchainPaths":
        resources = resources or default_resources_dir()
        return cls(
            work_dir=resources / "meshcore",
            pio=bundled_pio_path(resources),
            python=bundled_python_path(resources),
        )


def format_command(argv: list[str]) -> str:
    """Shell-style rendering of an argv list, for display only."""
    return shlex.join(argv)


class PlatformIOToolchain:
    """Builds `pio` command lines and the environment they run in."""

    name = "platformio"

    def __init__(self, paths: ToolchainPaths):
        self.paths = paths

    def _env_args(self, environment: str, config_path: Path | None) -> list[str]:
        if config_path is not None:
            return ["-c", str(config_path), "-e", environment]
        return ["-e", environment]

    def compile_command(self, environment: str, config_path: Path | None = None) -> list[str]:
        """`pio run -e <env>`, or `-c <ini> -e <env>` for a derived environment."""
        return [str(self.paths.pio), "run", *self._env_args(environment, config_path)]

    def upload_command(
        self,
        environment: str,
        port: str,
        *,
        erase_first: bool = False,
        config_path: Path | None = None,
    ) -> list[str]:
        targets = ["--target", "erase"] if erase_first else []
        targets += ["--target", "upload"]
        return [*self.compile_command(environment, config_path), *targets, "--upload-port", port]

    def process_env(self, base: dict[str, str] | None = None) -> dict[str, str]:
        """Environment for the child: bundled pio first on PATH."""
        env = dict(os.environ if base is None else base)
        path = env.get("PATH", "")
        pio_dir = str(self.paths.pio.parent)
        env["PATH"] = f"{pio_dir}{os.pathsep}{path}" if path else pio_dir
        if self.paths.python is not None:
            env["PYTHONPATH"] = str(self.paths.python.parent)
        return env

    def missing_dependencies(self) -> list[str]:
        missing = []
        if not self.paths.work_dir.exists():
            missing.append(f"MeshCore source tree not found at {self.paths.work_dir}")
        if self.paths.python is not None and not self.paths.python.exists():
            missing.append(f"Python runtime not found at {self.paths.python}")
        if not self.paths.pio.exists():
            missing.append(f"PlatformIO not found at {self.paths.pio}")
        return missing

    def check_dependencies(self) -> None:
        """Raise DependenciesUnavailableError if anything provisioning owns is absent."""
        missing = self.missing_dependencies()
        if missing:
            raise DependenciesUnavailableError("; ".join(missing))

    def doctor(self) -> dict:
        """Check if the toolchain is installed. Returns {"ok": bool, "message": str}."""
        missing = self.missing_dependencies()
        if missing:
            return {"ok": False, "message": "; ".join(missing)}
        return {"ok": True, "message": f"PlatformIO found at {self.paths.pio}"}
