from typing import List

import pytest

from printpos.escpos.printer import PrinterConfig, ThermalPrinter
from printpos.escpos.timing import PacingClock
from printpos.escpos.transport import BufferTransport


class FakeClock:
    """Monotonic clock whose sleep() only advances time and records the request."""

    def __init__(self, start: float = 1000.0) -> None:
        self.t = start
        self.sleeps: List[float] = []

    def now(self) -> float:
        return self.t

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.t += seconds

    def advance(self, seconds: float) -> None:
        self.t += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def pacing(clock: FakeClock) -> PacingClock:
    return PacingClock(clock=clock.now, sleeper=clock.sleep)


@pytest.fixture
def sink() -> BufferTransport:
    return BufferTransport()


@pytest.fixture
def printer(sink: BufferTransport, pacing: PacingClock) -> ThermalPrinter:
    """Printer before begin()."""
    return ThermalPrinter(sink, PrinterConfig(), pacing)


@pytest.fixture
def started(printer: ThermalPrinter, sink: BufferTransport) -> ThermalPrinter:
    """Printer after begin(), with the boot bytes cleared from the sink."""
    printer.begin()
    sink.clear()
    return printer


@pytest.fixture
def legacy(sink: BufferTransport, pacing: PacingClock) -> ThermalPrinter:
    """Started printer with pre-2.64 firmware."""
    p = ThermalPrinter(sink, PrinterConfig(firmware=260), pacing)
    p.begin()
    sink.clear()
    return p
