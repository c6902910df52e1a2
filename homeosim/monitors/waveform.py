from collections import deque
from typing import List

from homeosim.core.constants import WAVEFORM_CAPACITY


class WaveformBuffer:
    """
    Fixed-capacity trace, newest sample first.

    Pushing into a full buffer evicts the oldest sample.
    """
    def __init__(self, capacity: int = WAVEFORM_CAPACITY):
        if capacity <= 0:
            raise ValueError(f"Waveform capacity must be positive, got {capacity}")
        self._samples = deque(maxlen=int(capacity))

    @property
    def capacity(self) -> int:
        return self._samples.maxlen

    def push(self, value: float):
        self._samples.appendleft(float(value))

    @property
    def latest(self) -> float:
        return self._samples[0] if self._samples else 0.0

    def to_list(self) -> List[float]:
        return list(self._samples)

    def __len__(self):
        return len(self._samples)

    def __iter__(self):
        return iter(self._samples)

    def __getitem__(self, index):
        return self._samples[index]
