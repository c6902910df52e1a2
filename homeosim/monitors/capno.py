from dataclasses import dataclass

from homeosim.core.enums import CapnoPhase


@dataclass
class CapnoState:
    co2: float = 0.0  # Instantaneous CO2 (mmHg)
    phase: CapnoPhase = CapnoPhase.INSPIRATORY_BASELINE


class Capnograph:
    """
    Closed-form capnogram by position in the breath.

    Inspiration reads zero, expiration rises linearly to the end-tidal value,
    holds a noisy alveolar plateau, then falls back to zero before the next
    breath.
    """
    def __init__(self, inspiratory_fraction: float = 0.4, upstroke_end: float = 0.5,
                 plateau_end: float = 0.8, plateau_noise: float = 0.1):
        if not 0.0 < inspiratory_fraction < upstroke_end < plateau_end < 1.0:
            raise ValueError("Capnogram phase boundaries must be increasing within (0, 1)")
        self.inspiratory_fraction = inspiratory_fraction
        self.upstroke_end = upstroke_end
        self.plateau_end = plateau_end
        self.plateau_noise = plateau_noise
        self.state = CapnoState()

    def phase_at(self, fraction: float) -> CapnoPhase:
        if fraction < self.inspiratory_fraction:
            return CapnoPhase.INSPIRATORY_BASELINE
        if fraction < self.upstroke_end:
            return CapnoPhase.EXPIRATORY_UPSTROKE
        if fraction < self.plateau_end:
            return CapnoPhase.ALVEOLAR_PLATEAU
        return CapnoPhase.DOWNSTROKE

    def step(self, fraction: float, etco2: float, rng) -> float:
        """Return the CO2 sample (mmHg) for a cycle fraction in [0, 1)."""
        fraction = fraction % 1.0
        phase = self.phase_at(fraction)
        if phase is CapnoPhase.INSPIRATORY_BASELINE:
            co2 = 0.0
        elif phase is CapnoPhase.EXPIRATORY_UPSTROKE:
            span = self.upstroke_end - self.inspiratory_fraction
            co2 = etco2 * (fraction - self.inspiratory_fraction) / span
        elif phase is CapnoPhase.ALVEOLAR_PLATEAU:
            co2 = etco2 + rng.normal(0.0, self.plateau_noise)
        else:
            span = 1.0 - self.plateau_end
            co2 = etco2 * (1.0 - (fraction - self.plateau_end) / span)

        self.state.co2 = max(0.0, co2)
        self.state.phase = phase
        return self.state.co2
