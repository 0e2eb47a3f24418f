"""Push-style record ids.

Ids are 20 characters: 8 encode the millisecond timestamp, 12 are random.
They sort lexicographically in creation order, including ids generated
within the same millisecond.
"""

import random
import time
from typing import Callable, Optional

PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"


class PushIdGenerator:
    """Generates chronologically ordered unique ids."""

    def __init__(
        self,
        clock: Optional[Callable[[], float]] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the generator.

        Args:
            clock: Returns the current time in seconds. Defaults to time.time.
            rng: Random source for the suffix.
        """
        self._clock = clock or time.time
        self._rng = rng or random.SystemRandom()
        self._last_ms = -1
        self._last_random: list[int] = [0] * 12

    def __call__(self) -> str:
        now_ms = int(self._clock() * 1000)

        if now_ms == self._last_ms:
            # Same millisecond: bump the previous suffix by one
            i = 11
            while i >= 0 and self._last_random[i] == 63:
                self._last_random[i] = 0
                i -= 1
            if i >= 0:
                self._last_random[i] += 1
        else:
            self._last_random = [self._rng.randrange(64) for _ in range(12)]
        self._last_ms = now_ms

        stamp = []
        for _ in range(8):
            stamp.append(PUSH_CHARS[now_ms % 64])
            now_ms //= 64

        return "".join(reversed(stamp)) + "".join(PUSH_CHARS[n] for n in self._last_random)


generate_push_id = PushIdGenerator()
