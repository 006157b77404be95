"""Tests for the serial monitor loop."""

import time

from meshflash.serial.reader import serial_monitor


class FakeSerial:
    """Fake serial port for testing."""

    def __init__(self, responses=None, interrupt_after=False):
        self._responses = list(responses or [])
        self._index = 0
        self._interrupt_after = interrupt_after
        self.is_open = True

    def readline(self):
        if self._index >= len(self._responses):
            if self._interrupt_after:
                raise KeyboardInterrupt
            # Simulate no more data (timeout)
            time.sleep(0.05)
            return b""
        resp = self._responses[self._index]
        self._index += 1
        if isinstance(resp, str):
            return resp.encode()
        return resp

    def close(self):
        self.is_open = False


class TestSerialMonitor:
    def test_monitor_duration(self):
        ser = FakeSerial(responses=["line1\n", "line2\r\n"])
        lines = []
        count = serial_monitor(ser, duration=0.2, output_callback=lines.append)
        assert lines == ["line1", "line2"]
        assert count == 2

    def test_stops_on_interrupt(self):
        ser = FakeSerial(responses=["boot\n"], interrupt_after=True)
        lines = []
        count = serial_monitor(ser, output_callback=lines.append)
        assert lines == ["boot"]
        assert count == 1

    def test_invalid_utf8_is_dropped(self):
        ser = FakeSerial(responses=[b"ok\xff\n"], interrupt_after=True)
        lines = []
        serial_monitor(ser, output_callback=lines.append)
        assert lines == ["ok"]

    def test_timestamps(self):
        ser = FakeSerial(responses=["hello\n"], interrupt_after=True)
        lines = []
        serial_monitor(ser, output_callback=lines.append, timestamps=True)
        assert lines[0].startswith("[")
        assert lines[0].endswith("] hello")

    def test_monitor_log_path(self, tmp_path):
        ser = FakeSerial(responses=["monitor line\n"], interrupt_after=True)
        log_path = tmp_path / "monitor.log"
        serial_monitor(ser, log_path=log_path, output_callback=lambda line: None)
        content = log_path.read_text()
        assert content.endswith(" monitor line\n")
