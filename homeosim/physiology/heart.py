import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional

from homeosim.core.constants import MAX_EKG_LEADS, WAVEFORM_CAPACITY
from homeosim.core.enums import CardiacPhase, OrganType
from homeosim.core.utils import clamp, clamp01, mean_revert, require_finite
from homeosim.monitors.ecg import EKGSynthesizer
from homeosim.monitors.waveform import WaveformBuffer
from homeosim.physiology.organ import Organ
from homeosim.physiology.organ_config import HeartConfig

logger = logging.getLogger(__name__)


@dataclass
class ChamberPressures:
    left_atrium: float = 5.0  # mmHg
    right_atrium: float = 2.0
    left_ventricle: float = 3.0
    right_ventricle: float = 1.0


@dataclass
class ValveStates:
    """True means open. Each is recomputed from the pressure gradient every step."""
    tricuspid: bool = True
    mitral: bool = True
    pulmonary: bool = False
    aortic: bool = False


class Heart(Organ):
    """
    Four-chamber pump driven by position in the cardiac cycle.

    The cycle (period 60/HR) is split into atrial systole [0, 0.15),
    ventricular systole [0.20, 0.50) and diastole. Valves open on pressure
    gradients, ventricular volumes integrate valve-gated flow, and the aortic
    pressure either tracks the left ventricle (valve open) or decays toward
    the diastolic floor. Mechanics are sub-stepped so long ticks keep the
    same cycle shape.
    """
    organ_type = OrganType.HEART

    def __init__(self, organ_id: int, lead_count: int = MAX_EKG_LEADS,
                 config: HeartConfig = None, waveform_capacity: int = WAVEFORM_CAPACITY):
        super().__init__(organ_id)
        self.config = config if config is not None else HeartConfig()
        cfg = self.config

        self.heart_rate = cfg.baseline_hr  # target/intrinsic bpm
        self.measured_heart_rate = cfg.baseline_hr  # from R-R interval
        self.position = 0.0  # seconds into current cycle
        self.cycle_fraction = 0.0
        self.phase = CardiacPhase.ATRIAL_SYSTOLE
        self.time = 0.0
        self._last_r_peak: Optional[float] = None

        self.pressures = ChamberPressures(
            left_atrium=cfg.la_systolic,
            right_atrium=cfg.ra_systolic,
            left_ventricle=cfg.lv_diastolic,
            right_ventricle=cfg.rv_diastolic,
        )
        self.valves = ValveStates()
        self.lv_volume = cfg.initial_edv  # mL
        self.rv_volume = cfg.initial_edv
        self.end_diastolic_volume = cfg.initial_edv
        self.end_systolic_volume = cfg.initial_edv * (1.0 - cfg.initial_ef)
        self.ejection_fraction = cfg.initial_ef
        self.aortic_pressure = cfg.dbp_base  # mmHg

        self.ekg = EKGSynthesizer(lead_count)
        self.ekg_leads: Dict[str, WaveformBuffer] = {
            name: WaveformBuffer(waveform_capacity) for name in self.ekg.lead_names
        }

    @property
    def lead_count(self) -> int:
        return self.ekg.lead_count

    @property
    def period(self) -> float:
        return 60.0 / self.heart_rate

    def get_aortic_pressure(self) -> float:
        return self.aortic_pressure

    def set_rate(self, rate: float):
        """Command a new intrinsic rate (bpm), clamped to the physiological range."""
        rate = require_finite("heart rate", rate)
        if rate <= 0:
            raise ValueError(f"Heart rate must be positive, got {rate}")
        clamped = clamp(rate, self.config.hr_min, self.config.hr_max)
        if clamped != rate:
            logger.warning("Heart rate %.1f clamped to %.1f bpm", rate, clamped)
        self.heart_rate = clamped

    def phase_for(self, fraction: float) -> CardiacPhase:
        cfg = self.config
        if fraction < cfg.atrial_systole_end:
            return CardiacPhase.ATRIAL_SYSTOLE
        if cfg.ventricular_systole_start <= fraction < cfg.ventricular_systole_end:
            return CardiacPhase.VENTRICULAR_SYSTOLE
        return CardiacPhase.DIASTOLE

    def ekg_sample(self) -> List[float]:
        return self.ekg.sample(self.cycle_fraction)

    def update(self, patient, dt: float, rng) -> None:
        cfg = self.config
        self.heart_rate = mean_revert(
            self.heart_rate, self.heart_rate, 0.0, cfg.hr_noise, dt,
            cfg.hr_min, cfg.hr_max, rng,
        )

        # Arterial pressure baseline from rate and angiotensin tone
        blood = patient.blood
        vasoconstriction = clamp(
            1.0 + cfg.vasoconstriction_gain * (blood.angiotensin - 1.0),
            cfg.vasoconstriction_min, cfg.vasoconstriction_max,
        )
        hr_delta = self.heart_rate - cfg.baseline_hr
        blood.blood_pressure.systolic = clamp(
            (cfg.sbp_base + cfg.sbp_hr_slope * hr_delta) * vasoconstriction,
            cfg.sbp_min, cfg.sbp_max,
        )
        blood.blood_pressure.diastolic = clamp(
            (cfg.dbp_base + cfg.dbp_hr_slope * hr_delta) * vasoconstriction,
            cfg.dbp_min, cfg.dbp_max,
        )
        blood.clamp()
        floor = blood.blood_pressure.diastolic

        if dt > 0:
            steps = max(1, int(math.ceil(dt / cfg.max_substep)))
            h = dt / steps
            for _ in range(steps):
                self._advance(h, floor)

        for name, voltage in zip(self.ekg.lead_names, self.ekg_sample()):
            self.ekg_leads[name].push(voltage)

    def _advance(self, h: float, floor: float):
        cfg = self.config
        period = self.period
        prev_fraction = self.cycle_fraction
        prev_phase = self.phase

        self.time += h
        self.position = (self.position + h) % period
        fraction = self.position / period

        if self._crossed(prev_fraction, fraction, cfg.r_peak_fraction, h >= period):
            if self._last_r_peak is not None:
                interval = self.time - self._last_r_peak
                if interval > 0:
                    self.measured_heart_rate = 60.0 / interval
            self._last_r_peak = self.time

        phase = self.phase_for(fraction)
        if phase is CardiacPhase.VENTRICULAR_SYSTOLE and prev_phase is not CardiacPhase.VENTRICULAR_SYSTOLE:
            self.end_diastolic_volume = self.lv_volume
        elif prev_phase is CardiacPhase.VENTRICULAR_SYSTOLE and phase is not CardiacPhase.VENTRICULAR_SYSTOLE:
            self.end_systolic_volume = self.lv_volume
            if self.end_diastolic_volume > 0:
                self.ejection_fraction = clamp01(
                    (self.end_diastolic_volume - self.end_systolic_volume) / self.end_diastolic_volume
                )

        p = self.pressures
        atrial = phase is CardiacPhase.ATRIAL_SYSTOLE
        p.left_atrium = cfg.la_systolic if atrial else cfg.la_diastolic
        p.right_atrium = cfg.ra_systolic if atrial else cfg.ra_diastolic
        if phase is CardiacPhase.VENTRICULAR_SYSTOLE:
            span = cfg.ventricular_systole_end - cfg.ventricular_systole_start
            wave = math.sin(math.pi * (fraction - cfg.ventricular_systole_start) / span)
            p.left_ventricle = max(cfg.lv_diastolic, cfg.lv_peak * wave)
            p.right_ventricle = max(cfg.rv_diastolic, cfg.rv_peak * wave)
        else:
            p.left_ventricle = cfg.lv_diastolic
            p.right_ventricle = cfg.rv_diastolic

        v = self.valves
        v.tricuspid = p.right_atrium > p.right_ventricle
        v.mitral = p.left_atrium > p.left_ventricle
        v.pulmonary = p.right_ventricle > cfg.pulmonary_artery_pressure
        v.aortic = p.left_ventricle > self.aortic_pressure

        flow = cfg.valve_flow * h
        if v.mitral:
            self.lv_volume += flow
        if v.aortic:
            self.lv_volume -= flow * cfg.ejection_factor
        if v.tricuspid:
            self.rv_volume += flow
        if v.pulmonary:
            self.rv_volume -= flow * cfg.ejection_factor
        self.lv_volume = clamp(self.lv_volume, cfg.volume_min, cfg.volume_max)
        self.rv_volume = clamp(self.rv_volume, cfg.volume_min, cfg.volume_max)

        if v.aortic:
            self.aortic_pressure = p.left_ventricle
        else:
            decay = math.exp(-h / cfg.aortic_decay_tau)
            self.aortic_pressure = floor + (self.aortic_pressure - floor) * decay

        self.cycle_fraction = fraction
        self.phase = phase

    @staticmethod
    def _crossed(prev: float, current: float, mark: float, full_cycle: bool) -> bool:
        """Whether the cycle fraction passed ``mark`` moving from prev to current."""
        if full_cycle:
            return True
        if current >= prev:
            return prev < mark <= current
        return mark > prev or mark <= current

    def get_summary(self) -> str:
        v = self.valves
        open_valves = [name for name in ("tricuspid", "mitral", "pulmonary", "aortic") if getattr(v, name)]
        return "\n".join([
            f"Heart (ID {self.organ_id})",
            f"  Heart rate: {self.heart_rate:.1f} bpm (measured {self.measured_heart_rate:.1f})",
            f"  Phase: {self.phase.value} ({self.cycle_fraction:.2f} of cycle)",
            f"  Aortic pressure: {self.aortic_pressure:.1f} mmHg",
            f"  LV volume: {self.lv_volume:.1f} mL, EF {self.ejection_fraction * 100:.0f}%",
            f"  Open valves: {', '.join(open_valves) or 'none'}",
            f"  EKG leads: {self.lead_count}",
        ])
