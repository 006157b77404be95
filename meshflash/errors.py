"""Error taxonomy for meshflash."""

from __future__ import annotations


class MeshflashError(Exception):
    """Structured error with a stable code and a CLI exit code."""

    code = "error"

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code, "exit_code": self.exit_code}


class ConfigurationMissingError(MeshflashError):
    """The catalog has no environment for an advertised board/variant pair."""

    code = "configuration_missing"


class InvalidConfigurationError(MeshflashError):
    """The caller asked for an unknown board/variant or omitted a flash port."""

    code = "invalid_configuration"

    def __init__(self, message: str, exit_code: int = 2):
        super().__init__(message, exit_code)


class BoardNotFoundError(InvalidConfigurationError):
    """Raised when a board id is not found."""


class VariantNotFoundError(InvalidConfigurationError):
    """Raised when a variant id is not found."""


class DependenciesUnavailableError(MeshflashError):
    """The PlatformIO runtime or the MeshCore source tree is missing."""

    code = "dependencies_unavailable"

    def __init__(self, message: str, exit_code: int = 3):
        super().__init__(message, exit_code)


class AlreadyRunningError(MeshflashError):
    """A build or upload is already in progress."""

    code = "already_running"

    def __init__(self, message: str = "Build/upload already in progress", exit_code: int = 4):
        super().__init__(message, exit_code)


class SpawnFailureError(MeshflashError):
    """The operating system could not start the build tool."""

    code = "spawn_failure"

    def __init__(self, message: str, exit_code: int = 5):
        super().__init__(message, exit_code)


class ProcessFailureError(MeshflashError):
    """The build tool ran and exited with a non-zero code."""

    code = "process_failure"

    def __init__(self, returncode: int, message: str | None = None):
        super().__init__(message or f"PlatformIO exited with code {returncode}", exit_code=1)
        self.returncode = returncode

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["returncode"] = self.returncode
        return data


class StoppedByUserError(MeshflashError):
    """The operation was cancelled. Not a failure of the tool."""

    code = "stopped_by_user"

    def __init__(self, message: str = "Build stopped by user", returncode: int | None = None):
        super().__init__(message, exit_code=130)
        self.returncode = returncode
