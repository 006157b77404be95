"""Serial port utilities for meshflash."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

import click
import serial
from serial.tools.list_ports import comports

from meshflash.config import load_project_config

# USB vendor ids of the bridges and MCUs MeshCore boards ship with.
KNOWN_VENDORS = {
    0x10C4,  # Silicon Labs (CP210x)
    0x1A86,  # QinHeng (CH340)
    0x0403,  # FTDI
    0x2341,  # Arduino
    0x2886,  # Seeed Studio
    0x1915,  # Nordic Semiconductor
    0x239A,  # Adafruit
    0x04D8,  # Microchip
    0x16C0,  # Van Ooijen Technische Informatica
    0x1B4F,  # SparkFun
    0x303A,  # Espressif
}

KNOWN_MANUFACTURERS = (
    "silicon labs", "ftdi", "arduino", "seeed", "adafruit", "espressif",
    "nordic", "microchip", "sparkfun", "wch", "qinheng",
)

COMMON_BAUD_RATES = [9600, 19200, 38400, 57600, 115200, 230400, 460800, 921600]

RESET_PULSE_SECONDS = 0.1


@dataclass
class PortInfo:
    device: str
    description: str
    hwid: str
    manufacturer: str | None = None
    vid: int | None = None
    pid: int | None = None
    likely_dev_board: bool = False

    @property
    def display_name(self) -> str:
        if self.manufacturer:
            if self.pid is not None:
                return f"{self.device} ({self.manufacturer} - {self.pid:04x})"
            return f"{self.device} ({self.manufacturer})"
        if self.vid is not None:
            pid = f"{self.pid:04x}" if self.pid is not None else "unknown"
            return f"{self.device} ({self.vid:04x}:{pid})"
        return self.device

    def to_dict(self) -> dict:
        return {
            "device": self.device,
            "description": self.description,
            "hwid": self.hwid,
            "manufacturer": self.manufacturer,
            "vid": self.vid,
            "pid": self.pid,
            "likely_dev_board": self.likely_dev_board,
            "display_name": self.display_name,
        }


class SerialError(Exception):
    """Structured serial error with exit code."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def to_dict(self) -> dict:
        return {"error": self.message, "exit_code": self.exit_code}


def is_likely_dev_board(vid: int | None, manufacturer: str | None) -> bool:
    if vid is not None and vid in KNOWN_VENDORS:
        return True
    if manufacturer:
        lowered = manufacturer.lower()
        return any(m in lowered for m in KNOWN_MANUFACTURERS)
    return False


def list_serial_ports() -> list[PortInfo]:
    """List available serial ports, marking the ones that look like dev boards."""
    ports = []
    for p in comports():
        manufacturer = getattr(p, "manufacturer", None)
        vid = getattr(p, "vid", None)
        ports.append(PortInfo(
            device=p.device,
            description=p.description,
            hwid=p.hwid,
            manufacturer=manufacturer,
            vid=vid,
            pid=getattr(p, "pid", None),
            likely_dev_board=is_likely_dev_board(vid, manufacturer),
        ))
    return ports


def open_serial(port: str, baud_rate: int, timeout: float = 1) -> serial.Serial:
    """Open a serial port with structured error handling.

    Exit codes:
        0: success
        2: port not found / device disconnected
        3: port busy
        4: permission denied
    """
    try:
        return serial.Serial(port, baud_rate, timeout=timeout)
    except PermissionError as e:
        raise SerialError(str(e), exit_code=4) from e
    except serial.SerialException as e:
        msg = str(e).lower()
        if "busy" in msg or "resource" in msg:
            raise SerialError(str(e), exit_code=3) from e
        raise SerialError(str(e), exit_code=2) from e


def reset_device(ser: serial.Serial) -> None:
    """Pulse DTR/RTS, which resets most ESP32 and nRF52 boards."""
    try:
        ser.dtr = False
        ser.rts = False
        time.sleep(RESET_PULSE_SECONDS)
        ser.dtr = True
        ser.rts = True
        time.sleep(RESET_PULSE_SECONDS)
        ser.dtr = False
        ser.rts = False
    except serial.SerialException as e:
        raise SerialError(f"Failed to reset device: {e}", exit_code=2) from e


def resolve_port_and_baud(
    cli_port: str | None,
    cli_baud: int | None,
    project_dir: Path | str,
) -> tuple[str, int]:
    """Resolve port and baud rate from CLI flags or config.

    Resolution order: CLI flag > meshflash.toml > error.
    """
    port = cli_port
    baud = cli_baud

    if port is None or baud is None:
        try:
            config = load_project_config(project_dir)
            if port is None:
                port = config.serial.port
            if baud is None:
                baud = config.serial.baud_rate
        except FileNotFoundError:
            pass

    if port is None:
        raise click.UsageError(
            "No serial port specified. Use --port or set serial.port in meshflash.toml"
        )

    if baud is None:
        baud = 115200

    return port, baud
