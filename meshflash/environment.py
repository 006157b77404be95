"""Derived PlatformIO environments for injecting extra build flags."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from meshflash.catalog import Board, Variant, environment_name
from meshflash.errors import DependenciesUnavailableError

logger = logging.getLogger(__name__)

BASE_CONFIG_NAME = "platformio.ini"
CUSTOM_CONFIG_NAME = "platformio_custom.ini"
CUSTOM_SUFFIX = "_custom"


@dataclass(frozen=True)
class SynthesizedEnvironment:
    name: str
    base: str
    config_path: Path


def render_environment_section(base_env: str, flags: Sequence[str]) -> str:
    """The [env:...] block that extends base_env and appends -D flags."""
    lines = [
        "",
        f"[env:{base_env}{CUSTOM_SUFFIX}]",
        f"extends = env:{base_env}",
        "build_flags = ",
        f"    ${{env:{base_env}.build_flags}}",
    ]
    lines.extend(f"    -D{flag}" for flag in flags)
    return "\n".join(lines) + "\n"


class EnvironmentSynthesizer:
    """Writes platformio_custom.ini next to the project's platformio.ini.

    The base file is only read. The derived file is the base content plus
    one appended environment section, so `pio -c` sees every base
    environment as well.
    """

    def __init__(self, work_dir: Path | str):
        self.work_dir = Path(work_dir)

    @property
    def base_config_path(self) -> Path:
        return self.work_dir / BASE_CONFIG_NAME

    @property
    def config_path(self) -> Path:
        return self.work_dir / CUSTOM_CONFIG_NAME

    def materialize(self, board: Board, variant: Variant, flags: Sequence[str]) -> SynthesizedEnvironment:
        base_env = environment_name(board.id, variant.id)
        try:
            base_content = self.base_config_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise DependenciesUnavailableError(
                f"{BASE_CONFIG_NAME} not found in {self.work_dir}. Is the MeshCore source tree installed?"
            ) from None

        section = render_environment_section(base_env, flags)
        self.config_path.write_text(base_content + section, encoding="utf-8")
        env = SynthesizedEnvironment(name=base_env + CUSTOM_SUFFIX, base=base_env, config_path=self.config_path)
        logger.info("Created custom environment %s in %s", env.name, env.config_path)
        logger.debug("Custom environment section:%s", section)
        return env

    def cleanup(self) -> None:
        """Remove the derived config. Never raises."""
        try:
            self.config_path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Failed to clean up %s: %s", self.config_path, e)
        else:
            logger.debug("Cleaned up %s", self.config_path)

    @asynccontextmanager
    async def synthesized(
        self, board: Board, variant: Variant, flags: Sequence[str]
    ) -> AsyncIterator[SynthesizedEnvironment]:
        """Materialize off the event loop; always clean up on the way out."""
        try:
            yield await asyncio.to_thread(self.materialize, board, variant, flags)
        finally:
            self.cleanup()
