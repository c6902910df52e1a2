import logging
from dataclasses import dataclass
from typing import Dict

from homeosim.core.constants import TOXIN_MODERATE, TOXIN_SEVERE, WAVEFORM_CAPACITY
from homeosim.core.enums import OrganType, TractStatus
from homeosim.core.utils import approach, clamp, clamp01, mean_revert
from homeosim.monitors.eeg import EEGGenerator
from homeosim.monitors.waveform import WaveformBuffer
from homeosim.physiology.organ import Organ
from homeosim.physiology.organ_config import BrainConfig

logger = logging.getLogger(__name__)


@dataclass
class GCSScore:
    eye: int = 4
    verbal: int = 5
    motor: int = 6

    @property
    def total(self) -> int:
        return self.eye + self.verbal + self.motor


def gcs_category(total: int) -> str:
    if total <= 8:
        return "Severe"
    if total <= 12:
        return "Moderate"
    return "Minor"


def eye_response(spo2: float, cpp: float) -> int:
    if spo2 > 94 and cpp > 60:
        return 4
    if spo2 > 90 and cpp > 55:
        return 3
    if spo2 > 80 or cpp > 50:
        return 2
    return 1


def verbal_response(co2: float, spo2: float) -> int:
    if co2 < 45 and spo2 > 94:
        return 5
    if co2 < 55 and spo2 > 90:
        return 4
    if co2 < 65 or spo2 > 85:
        return 3
    if co2 < 75 or spo2 > 75:
        return 2
    return 1


def motor_response(cpp: float, spo2: float) -> int:
    if cpp > 60 and spo2 > 92:
        return 6
    if cpp > 55 and spo2 > 88:
        return 5
    if cpp > 50 or spo2 > 80:
        return 4
    if cpp > 45 or spo2 > 70:
        return 3
    if cpp > 40 or spo2 > 60:
        return 2
    return 1


def score_gcs(spo2: float, co2: float, cpp: float, toxins: float,
              motor_tract_normal: bool = True, ventilated: bool = False) -> GCSScore:
    """
    Glasgow Coma Scale from gases, perfusion and modifiers.

    Toxin load caps each component; a damaged motor pathway abolishes the
    motor response and an intubated patient cannot speak.
    """
    score = GCSScore(
        eye=eye_response(spo2, cpp),
        verbal=verbal_response(co2, spo2),
        motor=motor_response(cpp, spo2),
    )
    if toxins > TOXIN_SEVERE:
        score.eye = 1
        score.verbal = min(score.verbal, 2)
        score.motor = min(score.motor, 3)
    elif toxins > TOXIN_MODERATE:
        score.eye = min(score.eye, 2)
        score.verbal = min(score.verbal, 3)
        score.motor = min(score.motor, 4)
    if not motor_tract_normal:
        score.motor = 1
    if ventilated:
        score.verbal = 1
    return score


class Brain(Organ):
    """
    Neurological controller.

    Derives cerebral perfusion from the heart's aortic pressure, scores
    consciousness, and closes the autonomic loops that set respiration and
    heart rate from blood gases and arterial pressure.
    """
    organ_type = OrganType.BRAIN

    def __init__(self, organ_id: int, config: BrainConfig = None,
                 waveform_capacity: int = WAVEFORM_CAPACITY):
        super().__init__(organ_id)
        self.config = config if config is not None else BrainConfig()
        cfg = self.config
        self.region_baselines: Dict[str, float] = dict(cfg.region_baselines)
        self.region_activity: Dict[str, float] = dict(cfg.region_baselines)
        self.intracranial_pressure = cfg.icp_baseline  # mmHg
        self.mean_arterial_pressure = cfg.fallback_map  # mmHg
        self.cerebral_perfusion_pressure = cfg.fallback_map - cfg.icp_baseline
        self.gcs = GCSScore()
        self.time = 0.0
        self.eeg = EEGGenerator(
            alpha_hz=cfg.alpha_hz, alpha_amplitude=cfg.alpha_amplitude,
            beta_hz=cfg.beta_hz, beta_amplitude=cfg.beta_amplitude,
            noise=cfg.eeg_noise, scale=cfg.eeg_scale,
        )
        self.eeg_trace = WaveformBuffer(waveform_capacity)

    @property
    def gcs_total(self) -> int:
        return self.gcs.total

    @property
    def average_activity(self) -> float:
        return sum(self.region_activity.values()) / len(self.region_activity)

    def update(self, patient, dt: float, rng) -> None:
        cfg = self.config
        blood = patient.blood
        self.time += dt

        heart = patient.get_organ(OrganType.HEART)
        if heart is not None:
            self.mean_arterial_pressure = heart.get_aortic_pressure()
        else:
            self.mean_arterial_pressure = mean_revert(
                self.mean_arterial_pressure, cfg.fallback_map, cfg.fallback_map_theta,
                cfg.fallback_map_noise, dt, cfg.fallback_map_min, cfg.fallback_map_max, rng,
            )
        self.intracranial_pressure = mean_revert(
            self.intracranial_pressure, cfg.icp_baseline, cfg.icp_theta, cfg.icp_noise,
            dt, cfg.icp_min, cfg.icp_max, rng,
        )
        self.cerebral_perfusion_pressure = max(0.0, self.mean_arterial_pressure - self.intracranial_pressure)

        # Regional activity follows perfusion and oxygenation
        perfusion = clamp01(self.cerebral_perfusion_pressure / cfg.perfusion_reference_cpp)
        oxygenation = clamp01(blood.oxygen_saturation / cfg.oxygen_reference_spo2)
        for region, baseline in self.region_baselines.items():
            self.region_activity[region] = mean_revert(
                self.region_activity[region], baseline * perfusion * oxygenation,
                cfg.region_theta, cfg.region_noise, dt, 0.0, 1.0, rng,
            )

        activity = self.average_activity
        blood.oxygen_saturation -= cfg.o2_consumption * activity * dt
        blood.co2_partial_pressure += cfg.co2_production * activity * dt
        blood.clamp()

        spinal_cord = patient.get_organ(OrganType.SPINAL_CORD)
        lungs = patient.get_organ(OrganType.LUNGS)
        motor_normal = spinal_cord is None or spinal_cord.motor_status is TractStatus.NORMAL
        ventilated = lungs is not None and lungs.peak_inspiratory_pressure > cfg.ventilator_pip_threshold
        previous = self.gcs.total
        self.gcs = score_gcs(
            blood.oxygen_saturation, blood.co2_partial_pressure, self.cerebral_perfusion_pressure,
            blood.toxins, motor_tract_normal=motor_normal, ventilated=ventilated,
        )
        if self.gcs.total != previous:
            logger.debug("GCS %d -> %d", previous, self.gcs.total)

        self._autonomic_control(patient, dt)
        self.eeg_trace.push(self.eeg.step(self.time, rng))

    def _autonomic_control(self, patient, dt: float):
        cfg = self.config
        blood = patient.blood

        lungs = patient.get_organ(OrganType.LUNGS)
        if lungs is not None:
            rr_target = (
                cfg.rr_setpoint
                + cfg.rr_co2_gain * max(0.0, blood.co2_partial_pressure - 40.0)
                + cfg.rr_hypoxia_gain * max(0.0, 98.0 - blood.oxygen_saturation)
            )
            rr = approach(lungs.respiration_rate, rr_target, cfg.rr_speed, dt)
            lungs.set_rate(clamp(rr, cfg.rr_min, cfg.rr_max))

        heart = patient.get_organ(OrganType.HEART)
        if heart is not None:
            hr_target = cfg.hr_setpoint + cfg.hr_map_gain * (cfg.hr_map_reference - blood.mean_arterial_pressure)
            hr = approach(heart.heart_rate, hr_target, cfg.hr_speed, dt)
            heart.set_rate(clamp(hr, cfg.hr_min, cfg.hr_max))

    def get_summary(self) -> str:
        regions = ", ".join(f"{name} {level:.2f}" for name, level in self.region_activity.items())
        g = self.gcs
        return "\n".join([
            f"Brain (ID {self.organ_id})",
            f"  GCS: {g.total} (E{g.eye} V{g.verbal} M{g.motor}, {gcs_category(g.total)})",
            f"  ICP: {self.intracranial_pressure:.1f} mmHg, CPP: {self.cerebral_perfusion_pressure:.1f} mmHg",
            f"  MAP: {self.mean_arterial_pressure:.1f} mmHg",
            f"  Region activity: {regions}",
        ])
