"""Build and upload orchestration for meshflash.

One Orchestrator owns at most one PlatformIO process at a time. It turns a
BuildRequest into a `pio run` invocation, streams the merged output back to
the caller and reports exactly one terminal outcome per operation.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import signal
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from meshflash.catalog import (
    Board,
    FieldSpec,
    Variant,
    environment_name,
    get_board,
    get_variant,
    list_boards,
    list_variants,
    ui_field_groups,
    variants_for_board,
)
from meshflash.environment import EnvironmentSynthesizer
from meshflash.errors import (
    AlreadyRunningError,
    InvalidConfigurationError,
    MeshflashError,
    ProcessFailureError,
    SpawnFailureError,
    StoppedByUserError,
)
from meshflash.flags import compile_flags
from meshflash.toolchain import PlatformIOToolchain, format_command

logger = logging.getLogger(__name__)

GRACE_PERIOD = 5.0
_READ_SIZE = 4096


class Operation(Enum):
    BUILD = "build"
    UPLOAD = "upload"


class State(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class BuildRequest:
    board: str
    variant: str
    port: str | None = None
    flags: dict[str, object] = field(default_factory=dict)
    custom_flags: str = ""
    erase_first: bool = False


@dataclass
class BuildResult:
    success: bool
    returncode: int
    message: str
    command: list[str] = field(default_factory=list)
    environment: str = ""
    flags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "returncode": self.returncode,
            "message": self.message,
            "command": self.command,
            "environment": self.environment,
            "flags": self.flags,
        }


OutputCallback = Callable[[str], None]
CompleteCallback = Callable[[BuildResult], None]
ErrorCallback = Callable[[Exception], None]


def _notify(callback, value) -> None:
    if callback is not None:
        callback(value)


class Orchestrator:
    """Runs builds and uploads, one at a time.

    `spawn` defaults to asyncio.create_subprocess_exec and is swapped out in
    tests.
    """

    def __init__(
        self,
        toolchain: PlatformIOToolchain,
        *,
        grace_period: float = GRACE_PERIOD,
        spawn=None,
    ):
        self.toolchain = toolchain
        self.grace_period = grace_period
        self._spawn = spawn or asyncio.create_subprocess_exec
        self._state = State.IDLE
        self._last_outcome: State | None = None
        self._process: asyncio.subprocess.Process | None = None
        self._stop_requested = False
        self._exited: asyncio.Event | None = None
        self._idle: asyncio.Event | None = None

    @property
    def state(self) -> State:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is State.RUNNING

    @property
    def last_outcome(self) -> State | None:
        """COMPLETED, FAILED or CANCELLED for the previous operation."""
        return self._last_outcome

    # --- Catalog surface ---

    def list_boards(self) -> list[Board]:
        return list_boards()

    def list_variants(self, board_id: str | None = None) -> list[Variant]:
        if board_id is None:
            return list_variants()
        get_board(board_id)
        return variants_for_board(board_id)

    def variant_fields(self, variant_id: str) -> dict[str, list[FieldSpec]]:
        return ui_field_groups(get_variant(variant_id))

    # --- Operations ---

    async def start_build(
        self,
        request: BuildRequest,
        on_output: OutputCallback | None = None,
        on_complete: CompleteCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> BuildResult:
        return await self.start(Operation.BUILD, request, on_output, on_complete, on_error)

    async def start_upload(
        self,
        request: BuildRequest,
        on_output: OutputCallback | None = None,
        on_complete: CompleteCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> BuildResult:
        return await self.start(Operation.UPLOAD, request, on_output, on_complete, on_error)

    async def start(
        self,
        operation: Operation,
        request: BuildRequest,
        on_output: OutputCallback | None = None,
        on_complete: CompleteCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> BuildResult:
        """Run one operation to completion.

        Returns the BuildResult on success. Every failure is passed to
        on_error and then raised, so awaiting callers see it too.
        """
        # Check-and-set happens before the first await.
        if self._state is not State.IDLE:
            error = AlreadyRunningError()
            logger.warning("Rejected %s of %s/%s: %s", operation.value, request.board, request.variant, error)
            _notify(on_error, error)
            raise error

        self._state = State.RUNNING
        self._stop_requested = False
        self._process = None
        self._exited = asyncio.Event()
        self._idle = asyncio.Event()

        try:
            result = await self._run(operation, request, on_output)
        except StoppedByUserError as e:
            self._finish(State.CANCELLED)
            _notify(on_error, e)
            raise
        except MeshflashError as e:
            self._finish(State.FAILED)
            _notify(on_error, e)
            raise
        except asyncio.CancelledError:
            self._finish(State.CANCELLED)
            _notify(on_error, StoppedByUserError("Operation cancelled"))
            raise
        except Exception as e:
            logger.exception("Unexpected error during %s", operation.value)
            self._finish(State.FAILED)
            _notify(on_error, e)
            raise

        self._finish(State.COMPLETED)
        _notify(on_complete, result)
        return result

    async def stop(self) -> None:
        """Terminate the running process; no-op when idle.

        Sends SIGTERM, then SIGKILL if the process is still alive after the
        grace period. Returns once the process has exited and the
        orchestrator is idle again.
        """
        if self._state is not State.RUNNING:
            logger.debug("No active process to stop")
            return

        self._stop_requested = True
        idle = self._idle
        exited = self._exited
        process = self._process
        if process is not None and process.returncode is None:
            logger.info("Terminating PlatformIO process %s", process.pid)
            self._signal(process, force=False)
            try:
                await asyncio.wait_for(exited.wait(), self.grace_period)
            except asyncio.TimeoutError:
                logger.warning("PlatformIO did not exit within %.1fs, killing it", self.grace_period)
                self._signal(process, force=True)
        await idle.wait()
        logger.info("PlatformIO process terminated")

    # --- Internals ---

    def _finish(self, outcome: State) -> None:
        self._last_outcome = outcome
        self._state = State.IDLE
        self._process = None
        self._exited.set()
        self._idle.set()

    def _validate(self, operation: Operation, request: BuildRequest) -> tuple[Board, Variant]:
        board = get_board(request.board)
        variant = get_variant(request.variant)
        if variant.id not in board.variants:
            raise InvalidConfigurationError(f"{board.name} does not support the {variant.name} variant")
        if operation is Operation.UPLOAD and not request.port:
            raise InvalidConfigurationError("No serial port specified for upload")
        return board, variant

    def _command(
        self,
        operation: Operation,
        request: BuildRequest,
        environment: str,
        config_path: Path | None,
    ) -> list[str]:
        if operation is Operation.UPLOAD:
            return self.toolchain.upload_command(
                environment, request.port, erase_first=request.erase_first, config_path=config_path
            )
        return self.toolchain.compile_command(environment, config_path)

    async def _run(self, operation: Operation, request: BuildRequest, on_output) -> BuildResult:
        board, variant = self._validate(operation, request)
        await asyncio.to_thread(self.toolchain.check_dependencies)

        base_env = environment_name(board.id, variant.id)
        flags = compile_flags(board, variant, request.flags, request.custom_flags)

        if not flags:
            command = self._command(operation, request, base_env, None)
            returncode = await self._execute(command, on_output)
            return self._classify(operation, returncode, command, base_env, flags)

        logger.info("Build flags: %s", " ".join(f"-D{flag}" for flag in flags))
        synthesizer = EnvironmentSynthesizer(self.toolchain.paths.work_dir)
        async with synthesizer.synthesized(board, variant, flags) as env:
            command = self._command(operation, request, env.name, env.config_path)
            returncode = await self._execute(command, on_output)
            return self._classify(operation, returncode, command, env.name, flags)

    def _classify(
        self,
        operation: Operation,
        returncode: int,
        command: list[str],
        environment: str,
        flags: list[str],
    ) -> BuildResult:
        if self._stop_requested and returncode != 0:
            raise StoppedByUserError(returncode=returncode)
        if returncode < 0:
            raise ProcessFailureError(returncode, f"PlatformIO was terminated by signal {-returncode}")
        if returncode != 0:
            raise ProcessFailureError(returncode)
        noun = "Upload" if operation is Operation.UPLOAD else "Build"
        return BuildResult(
            success=True,
            returncode=returncode,
            message=f"{noun} completed successfully",
            command=command,
            environment=environment,
            flags=flags,
        )

    async def _execute(self, command: list[str], on_output) -> int:
        if self._stop_requested:
            raise StoppedByUserError()

        logger.info("Running: %s", format_command(command))
        try:
            process = await self._spawn(
                *command,
                cwd=str(self.toolchain.paths.work_dir),
                env=self.toolchain.process_env(),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                start_new_session=os.name == "posix",
            )
        except OSError as e:
            raise SpawnFailureError(f"Could not start {command[0]}: {e}") from e

        self._process = process
        kill_timer = None
        if self._stop_requested:
            # stop() arrived while we were spawning
            logger.info("Terminating PlatformIO process %s", process.pid)
            self._signal(process, force=False)
            kill_timer = asyncio.get_running_loop().call_later(self.grace_period, self._escalate, process)

        try:
            await self._pump(process.stdout, on_output)
            return await process.wait()
        finally:
            if kill_timer is not None:
                kill_timer.cancel()
            if process.returncode is None:
                self._signal(process, force=True)
                await process.wait()
            self._exited.set()

    async def _pump(self, stream: asyncio.StreamReader, on_output) -> None:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            chunk = await stream.read(_READ_SIZE)
            if not chunk:
                break
            text = decoder.decode(chunk)
            if text:
                _notify(on_output, text)
        tail = decoder.decode(b"", final=True)
        if tail:
            _notify(on_output, tail)

    def _escalate(self, process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            logger.warning("PlatformIO did not exit within %.1fs, killing it", self.grace_period)
            self._signal(process, force=True)

    def _signal(self, process: asyncio.subprocess.Process, *, force: bool) -> None:
        try:
            if os.name == "posix":
                # The child leads its own session, so this reaches scons/esptool too.
                os.killpg(process.pid, signal.SIGKILL if force else signal.SIGTERM)
            elif force:
                process.kill()
            else:
                process.terminate()
        except (ProcessLookupError, PermissionError):
            logger.debug("Process %s already exited", process.pid)
