import numpy as np
from typing import List

from homeosim.core.constants import EKG_LEAD_NAMES, MAX_EKG_LEADS


# Wave parameters: (center, amplitude, width), center and width in cycle fractions
EKG_WAVES = (
    (0.10, 0.15, 0.04),   # P wave
    (0.20, -0.10, 0.02),  # Q wave
    (0.22, 1.00, 0.02),   # R wave: main spike, aligned with R-peak detection
    (0.24, -0.25, 0.02),  # S wave
    (0.40, 0.30, 0.06),   # T wave
)


class EKGSynthesizer:
    """
    Multi-lead EKG built from a Gaussian-sum PQRST template.

    Each lead reuses the same template attenuated by ``1 - 0.1 * lead_index``.
    The template is pre-computed once and sampled by cycle fraction.
    """
    def __init__(self, lead_count: int = MAX_EKG_LEADS, resolution: int = 1000):
        if not 1 <= int(lead_count) <= MAX_EKG_LEADS:
            raise ValueError(f"Lead count must be between 1 and {MAX_EKG_LEADS}, got {lead_count}")
        self.lead_count = int(lead_count)
        self.lead_names = list(EKG_LEAD_NAMES[:self.lead_count])
        self.lead_gains = np.array([1.0 - 0.1 * i for i in range(self.lead_count)])
        self._template = self._generate_template(resolution)

    @staticmethod
    def _generate_template(resolution: int) -> np.ndarray:
        phase_arr = np.linspace(0.0, 1.0, resolution)
        template = np.zeros(resolution)
        for center, amplitude, width in EKG_WAVES:
            template += amplitude * np.exp(-0.5 * ((phase_arr - center) / width) ** 2)
        return template

    def base_voltage(self, fraction: float) -> float:
        """Unattenuated template voltage (mV) at a cycle fraction in [0, 1)."""
        fraction = fraction % 1.0
        idx = int(round(fraction * (len(self._template) - 1)))
        return float(self._template[idx])

    def sample(self, fraction: float) -> List[float]:
        """Voltage for every lead at the given cycle fraction."""
        return (self.lead_gains * self.base_voltage(fraction)).tolist()
