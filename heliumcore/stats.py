"""A plugin that keeps running statistics of packet sizes in each direction."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field

from .plugin import Plugin, PluginResult

PACKET_SAMPLE_N = 100000


def _divide(numerator: float, denominator: float) -> float:
    """Floating-point division that yields nan or infinity instead of raising."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


@dataclass
class RunningStats:
    """Sum, sum of squares, count, minimum and maximum of a series of samples."""

    sum: float = 0.0
    sumsq: float = 0.0
    n: int = 0
    min: float = 0.0
    max: float = 0.0

    def sample(self, value) -> None:
        """Add one sample."""
        value = float(value)
        self.sum += value
        self.sumsq += value * value
        if self.n == 0:
            self.min = value
            self.max = value
        else:
            self.min = min(self.min, value)
            self.max = max(self.max, value)
        self.n += 1

    def mean(self) -> float:
        """Arithmetic mean; nan when there are no samples."""
        return _divide(self.sum, self.n)

    def stddev(self) -> float:
        """Sample standard deviation; nan when it is undefined."""
        variance = _divide(self.sumsq - _divide(self.sum * self.sum, self.n), self.n - 1)
        if math.isnan(variance) or variance < 0:
            return math.nan
        return math.sqrt(variance)

    def summary(self) -> str:
        """One line describing every figure."""
        return (
            f"sum: {self.sum:f}, sumsq: {self.sumsq:f}, n: {self.n}, "
            f"min: {self.min:f}, max: {self.max:f}, "
            f"mean: {self.mean():f}, stddev: {self.stddev():f}"
        )


@dataclass
class PacketStats:
    """Statistics for incoming and outgoing packets."""

    incoming: RunningStats = field(default_factory=RunningStats)
    outgoing: RunningStats = field(default_factory=RunningStats)


class StatsPlugin(Plugin):
    """Records packet lengths and reports every PACKET_SAMPLE_N packets.

    Reports go to ``stream``, standard error by default. If ``stats`` is
    cleared to None the plugin reports failure for every packet.
    """

    def __init__(self, stats=None, stream=None):
        self.stats = stats if stats is not None else PacketStats()
        self.stream = stream

    def _record(self, series: RunningStats, label: str, length: int) -> None:
        series.sample(length)
        if series.n % PACKET_SAMPLE_N == 0:
            out = self.stream if self.stream is not None else sys.stderr
            out.write(f"{label}: {series.summary()}\n")

    def do_ingress(self, packet, capacity) -> PluginResult:
        if self.stats is None:
            return PluginResult.FAIL
        self._record(self.stats.incoming, "Ingress", len(packet))
        return PluginResult.SUCCESS

    def do_egress(self, packet, capacity) -> PluginResult:
        if self.stats is None:
            return PluginResult.FAIL
        self._record(self.stats.outgoing, "Egress", len(packet))
        return PluginResult.SUCCESS