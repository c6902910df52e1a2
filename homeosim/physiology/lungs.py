import logging
import math
from dataclasses import dataclass
from typing import List

from homeosim.core.constants import WAVEFORM_CAPACITY
from homeosim.core.enums import BreathPhase, OrganType, VentilationMode
from homeosim.core.utils import approach, clamp, mean_revert, require_finite
from homeosim.monitors.capno import Capnograph
from homeosim.monitors.waveform import WaveformBuffer
from homeosim.physiology.organ import Organ
from homeosim.physiology.organ_config import LungsConfig

logger = logging.getLogger(__name__)


@dataclass
class Lobe:
    name: str
    compliance: float  # L/cmH2O


class Lungs(Organ):
    """
    Five-lobe lung with a half-sine inspiratory drive and passive recoil.

    Tidal volume is the peak volume of the most recent inspiration. SpO2 and
    end-tidal CO2 relax toward targets set by the ventilation factor
    (TV/500)*(RR/16), and arterial gases relax toward the lung side.
    """
    organ_type = OrganType.LUNGS

    def __init__(self, organ_id: int, config: LungsConfig = None,
                 waveform_capacity: int = WAVEFORM_CAPACITY):
        super().__init__(organ_id)
        self.config = config if config is not None else LungsConfig()
        cfg = self.config
        if len(cfg.lobe_names) != len(cfg.lobe_compliances):
            raise ValueError("Each lobe needs exactly one compliance")

        self.lobes: List[Lobe] = [
            Lobe(name, compliance) for name, compliance in zip(cfg.lobe_names, cfg.lobe_compliances)
        ]
        self.bronchus_resistance = cfg.bronchus_resistance
        self.respiration_rate = cfg.baseline_rr
        self.ventilation_mode = VentilationMode.SPONTANEOUS

        self.position = 0.0  # seconds into current breath
        self.cycle_fraction = 0.0
        self.phase = BreathPhase.INSPIRATION
        self.lung_volume = 0.0  # mL above FRC
        self.tidal_volume = cfg.reference_tidal_volume
        self._breath_peak = 0.0
        self._breath_peak_pressure = 0.0
        self.driving_pressure = 0.0  # cmH2O, muscle or ventilator
        self.airway_pressure = 0.0  # cmH2O measured at the airway
        self.peak_inspiratory_pressure = 0.0  # of the last breath

        self.spo2 = cfg.spo2_baseline
        self.etco2 = cfg.etco2_baseline

        self.capnograph = Capnograph(
            inspiratory_fraction=cfg.inspiratory_fraction,
            plateau_noise=cfg.capno_plateau_noise,
        )
        self.capnogram = WaveformBuffer(waveform_capacity)

    @property
    def total_capacity(self) -> float:
        return self.config.total_capacity

    @property
    def total_compliance(self) -> float:
        return sum(lobe.compliance for lobe in self.lobes)

    @property
    def ventilation_factor(self) -> float:
        cfg = self.config
        return (self.tidal_volume / cfg.reference_tidal_volume) * (self.respiration_rate / cfg.baseline_rr)

    @property
    def period(self) -> float:
        return 60.0 / self.respiration_rate

    def set_rate(self, rate: float):
        """Set breaths per minute, clamped to the supported range."""
        rate = require_finite("respiration rate", rate)
        if rate <= 0:
            raise ValueError(f"Respiration rate must be positive, got {rate}")
        clamped = clamp(rate, self.config.rr_min, self.config.rr_max)
        if clamped != rate:
            logger.warning("Respiration rate %.1f clamped to %.1f /min", rate, clamped)
        self.respiration_rate = clamped

    def set_mechanical_ventilation(self, enabled: bool):
        self.ventilation_mode = VentilationMode.MECHANICAL if enabled else VentilationMode.SPONTANEOUS
        self.peak_inspiratory_pressure = self.config.peak_driving_pressure if enabled else 0.0
        if not enabled:
            self.airway_pressure = 0.0
        logger.info("Lungs %d switched to %s ventilation", self.organ_id, self.ventilation_mode.value)

    def inflict_damage(self, fraction: float):
        """
        Permanently scale every lobe's compliance by (1 - fraction).

        Raises:
            ValueError: if fraction is outside [0, 1].
        """
        fraction = require_finite("damage fraction", fraction)
        if not 0.0 <= fraction <= 1.0:
            raise ValueError(f"Damage fraction must be within [0, 1], got {fraction}")
        for lobe in self.lobes:
            lobe.compliance *= (1.0 - fraction)
        logger.info("Lung damage %.0f%%, total compliance now %.3f", fraction * 100, self.total_compliance)

    def update(self, patient, dt: float, rng) -> None:
        cfg = self.config
        if dt > 0:
            steps = max(1, int(math.ceil(dt / cfg.max_substep)))
            h = dt / steps
            for _ in range(steps):
                self._advance(h)

        vf = self.ventilation_factor
        self.spo2 = mean_revert(
            self.spo2, cfg.spo2_baseline * clamp(vf, 0.5, 1.0), cfg.spo2_theta,
            cfg.spo2_noise, dt, cfg.spo2_min, cfg.spo2_max, rng,
        )
        self.etco2 = mean_revert(
            self.etco2, cfg.etco2_baseline / clamp(vf, 0.5, 1.2), cfg.etco2_theta,
            cfg.etco2_noise, dt, cfg.etco2_min, cfg.etco2_max, rng,
        )

        blood = patient.blood
        exchange = clamp(vf, 0.5, 1.5)
        blood.oxygen_saturation = approach(blood.oxygen_saturation, self.spo2, cfg.blood_o2_rate * exchange, dt)
        blood.co2_partial_pressure = approach(
            blood.co2_partial_pressure, cfg.etco2_baseline / exchange, cfg.blood_co2_rate, dt,
        )
        blood.clamp()

        self.capnogram.push(self.capnograph.step(self.cycle_fraction, self.etco2, rng))

    def _advance(self, h: float):
        cfg = self.config
        period = self.period
        prev_phase = self.phase
        self.position = (self.position + h) % period
        fraction = self.position / period
        phase = BreathPhase.INSPIRATION if fraction < cfg.inspiratory_fraction else BreathPhase.EXPIRATION

        if phase is BreathPhase.EXPIRATION and prev_phase is BreathPhase.INSPIRATION:
            self.tidal_volume = clamp(self._breath_peak, 0.0, self.total_capacity / 2.0)
            if self.ventilation_mode is VentilationMode.MECHANICAL:
                self.peak_inspiratory_pressure = self._breath_peak_pressure
        elif phase is BreathPhase.INSPIRATION and prev_phase is BreathPhase.EXPIRATION:
            self._breath_peak = self.lung_volume
            self._breath_peak_pressure = 0.0

        if phase is BreathPhase.INSPIRATION:
            t_insp = cfg.inspiratory_fraction * period
            pressure = cfg.peak_driving_pressure * math.sin(math.pi * self.position / t_insp)
            flow = pressure / self.bronchus_resistance * cfg.inspiratory_gain * self.total_compliance
        else:
            pressure = 0.0
            recoil = self.lung_volume / cfg.reference_tidal_volume * cfg.recoil_pressure_per_500ml
            flow = -(recoil / self.bronchus_resistance) * cfg.expiratory_gain

        self.lung_volume = clamp(self.lung_volume + flow * h, 0.0, self.total_capacity / 2.0)
        self._breath_peak = max(self._breath_peak, self.lung_volume)
        self.driving_pressure = pressure
        self.airway_pressure = pressure if self.ventilation_mode is VentilationMode.MECHANICAL else 0.0
        self._breath_peak_pressure = max(self._breath_peak_pressure, self.airway_pressure)
        self.cycle_fraction = fraction
        self.phase = phase

    def get_summary(self) -> str:
        lobes = ", ".join(f"{lobe.name} {lobe.compliance:.3f}" for lobe in self.lobes)
        return "\n".join([
            f"Lungs (ID {self.organ_id})",
            f"  Respiration rate: {self.respiration_rate:.1f} /min ({self.ventilation_mode.value})",
            f"  Tidal volume: {self.tidal_volume:.0f} mL, phase {self.phase.value}",
            f"  SpO2: {self.spo2:.1f}%, etCO2: {self.etco2:.1f} mmHg",
            f"  Peak inspiratory pressure: {self.peak_inspiratory_pressure:.1f} cmH2O",
            f"  Lobe compliance: {lobes}",
        ])
