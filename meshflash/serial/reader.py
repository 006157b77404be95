"""Serial monitor loop for meshflash."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from pathlib import Path


def serial_monitor(
    ser,
    *,
    duration: float | None = None,
    log_path: Path | str | None = None,
    output_callback=None,
    timestamps: bool = False,
) -> int:
    """Continuous read loop until KeyboardInterrupt or duration expires.

    Returns the number of lines received.
    """
    if log_path is not None:
        log_path = Path(log_path)
    if output_callback is None:
        output_callback = print

    count = 0
    start = time.monotonic()
    log_file = open(log_path, "a", encoding="utf-8") if log_path else None
    try:
        while True:
            if duration and (time.monotonic() - start) >= duration:
                break

            raw = ser.readline()
            if not raw:
                continue
            line = raw.decode("utf-8", errors="ignore").rstrip("\r\n")
            count += 1
            ts = datetime.now(timezone.utc).isoformat()
            output_callback(f"[{ts}] {line}" if timestamps else line)

            if log_file:
                log_file.write(f"{ts} {line}\n")
    except KeyboardInterrupt:
        pass
    finally:
        if log_file:
            log_file.close()
    return count
