"""Sampling strategies.

The set of strategies is closed: ``AlwaysSample``, ``BoundarySampler`` and
``CountingSampler``. Each decides per trace id whether a trace is recorded.
"""

from __future__ import annotations

import random
import threading

from ziptrace.errors import ConfigurationError
from ziptrace.utils.helpers import lower_64_bits


def validate_rate(rate: float, kind: str, precision: int) -> None:
    """
    Check that ``rate`` is usable by a sampler with the given precision.

    Raises:
        ConfigurationError: If the rate is outside [0.0, 1.0], or non-zero but
            smaller than the smallest representable fraction ``1 / precision``
    """
    if not 0.0 <= rate <= 1.0:
        raise ConfigurationError(
            f"{kind} sampling rate must be between 0.0 and 1.0", details={"rate": rate}
        )
    if 0.0 < rate < 1.0 / precision:
        raise ConfigurationError(
            f"{kind} sampling rate must be 0.0 or at least {1.0 / precision}",
            details={"rate": rate},
        )


class Sampler:
    """Decides whether the trace with a given id is recorded."""

    rate: float = 1.0

    def decide(self, trace_id: int) -> bool:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rate={self.rate})"


class AlwaysSample(Sampler):
    """Records every trace."""

    def decide(self, trace_id: int) -> bool:
        return True

    def __repr__(self) -> str:
        return "AlwaysSample()"


ALWAYS_SAMPLE = AlwaysSample()


class BoundarySampler(Sampler):
    """
    Samples a fixed fraction of trace ids.

    The decision is a pure function of the trace id, so every span of a trace
    and every process sharing the salt reach the same decision. Precision is
    1/10000.
    """

    PRECISION = 10_000
    # Mixed into the id so sequential ids do not map to sequential buckets.
    SALT = 0x9E3779B97F4A7C15

    def __init__(self, rate: float) -> None:
        validate_rate(rate, "Boundary", self.PRECISION)
        self.rate = rate
        self._boundary = round(rate * self.PRECISION)

    def decide(self, trace_id: int) -> bool:
        mixed = lower_64_bits(trace_id) ^ self.SALT
        return mixed % self.PRECISION < self._boundary


class CountingSampler(Sampler):
    """
    Samples a fraction of traces with a rotating counter.

    A table of 100 decisions with ``round(rate * 100)`` positive slots, shuffled
    once at construction, is walked in order; every 100 calls sample exactly
    the configured fraction. The trace id is ignored.
    """

    PRECISION = 100

    def __init__(self, rate: float) -> None:
        validate_rate(rate, "Counting", self.PRECISION)
        self.rate = rate
        sampled_slots = random.sample(range(self.PRECISION), round(rate * self.PRECISION))
        self._decisions = [False] * self.PRECISION
        for slot in sampled_slots:
            self._decisions[slot] = True
        self._counter = 0
        self._lock = threading.Lock()

    def decide(self, trace_id: int) -> bool:
        with self._lock:
            index = self._counter
            self._counter = (index + 1) % self.PRECISION
        return self._decisions[index]
