import math
import time

from typing import Callable, Tuple

MIB = 1024 * 1024


def band(start: float, width: float, percent: float) -> float:
    """Map a sub-step's 0-100 progress into [start, start + width]."""
    return start + percent * width / 100


class TransferRateEstimator:
    """Advisory speed/ETA telemetry from acknowledged-byte percentages.

    Speed is in MB/s rounded to two decimals, ETA in whole seconds rounded up.
    The clock is injectable so timings can be synthesised in tests.
    """

    def __init__(self, total_bytes: int, clock: Callable[[], float] = time.monotonic):
        self.total_bytes = total_bytes
        self.clock = clock
        self.started_at = clock()

    def sample(self, percent: float) -> Tuple[float, int]:
        elapsed = self.clock() - self.started_at
        sent = self.total_bytes * (percent / 100)
        if elapsed <= 0 or sent <= 0:
            return 0.0, 0
        speed = (sent / MIB) / elapsed
        remaining = self.total_bytes - sent
        eta = math.ceil(remaining / (speed * MIB)) if speed > 0 else 0
        return round(speed, 2), max(eta, 0)
