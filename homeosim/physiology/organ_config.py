from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class HeartConfig:
    """Centralized parameters for Heart."""
    # Rate
    baseline_hr: float = 75.0  # bpm
    hr_min: float = 20.0
    hr_max: float = 250.0
    hr_noise: float = 0.01  # bpm per second of noise

    # Cycle fractions
    atrial_systole_end: float = 0.15
    ventricular_systole_start: float = 0.20
    ventricular_systole_end: float = 0.50
    r_peak_fraction: float = 0.22

    # Chamber pressures (mmHg), systole / rest
    la_systolic: float = 10.0
    la_diastolic: float = 5.0
    ra_systolic: float = 7.0
    ra_diastolic: float = 2.0
    lv_peak: float = 125.0
    lv_diastolic: float = 3.0
    rv_peak: float = 25.0
    rv_diastolic: float = 1.0
    pulmonary_artery_pressure: float = 20.0

    # Valve-gated volumes (mL)
    valve_flow: float = 500.0  # mL/s while open
    ejection_factor: float = 1.5
    volume_min: float = 40.0
    volume_max: float = 130.0
    initial_edv: float = 120.0
    initial_ef: float = 0.55

    # Arterial pressure
    aortic_decay_tau: float = 1.0  # s
    sbp_base: float = 120.0
    sbp_hr_slope: float = 0.5
    sbp_min: float = 80.0
    sbp_max: float = 180.0
    dbp_base: float = 80.0
    dbp_hr_slope: float = 0.25
    dbp_min: float = 50.0
    dbp_max: float = 110.0
    vasoconstriction_gain: float = 0.05  # per AU angiotensin above 1
    vasoconstriction_min: float = 0.8
    vasoconstriction_max: float = 1.5

    # Integration
    max_substep: float = 0.01  # s


@dataclass(frozen=True)
class LungsConfig:
    """Centralized parameters for Lungs."""
    baseline_rr: float = 16.0  # breaths/min
    rr_min: float = 4.0
    rr_max: float = 60.0
    total_capacity: float = 6000.0  # mL
    lobe_names: Tuple[str, ...] = (
        "right upper", "right middle", "right lower", "left upper", "left lower",
    )
    lobe_compliances: Tuple[float, ...] = (0.10, 0.07, 0.13, 0.10, 0.10)
    bronchus_resistance: float = 0.8

    # Breath mechanics
    inspiratory_fraction: float = 0.4  # I:E 1:1.5
    peak_driving_pressure: float = 15.0  # cmH2O
    inspiratory_gain: float = 52.5
    recoil_pressure_per_500ml: float = 5.0  # cmH2O
    expiratory_gain: float = 100.0
    reference_tidal_volume: float = 500.0

    # Gas exchange
    spo2_baseline: float = 98.0
    spo2_theta: float = 0.1
    spo2_noise: float = 0.02
    spo2_min: float = 50.0
    spo2_max: float = 100.0
    etco2_baseline: float = 40.0
    etco2_theta: float = 0.2
    etco2_noise: float = 0.05
    etco2_min: float = 20.0
    etco2_max: float = 100.0
    blood_o2_rate: float = 0.8  # 1/s at ventilation factor 1
    blood_co2_rate: float = 0.5  # 1/s

    capno_plateau_noise: float = 0.1  # mmHg
    max_substep: float = 0.01  # s


@dataclass(frozen=True)
class BrainConfig:
    """Centralized parameters for Brain."""
    region_baselines: Tuple[Tuple[str, float], ...] = (
        ("frontal", 0.8),
        ("temporal", 0.7),
        ("parietal", 0.7),
        ("occipital", 0.8),
        ("cerebellum", 0.6),
    )
    region_theta: float = 0.2
    region_noise: float = 0.01
    perfusion_reference_cpp: float = 60.0  # mmHg below which activity falls
    oxygen_reference_spo2: float = 90.0  # % below which activity falls

    icp_baseline: float = 10.0
    icp_noise: float = 0.01
    icp_theta: float = 0.05
    icp_min: float = 8.0
    icp_max: float = 12.0

    fallback_map: float = 90.0
    fallback_map_noise: float = 0.1
    fallback_map_theta: float = 0.1
    fallback_map_min: float = 85.0
    fallback_map_max: float = 95.0

    o2_consumption: float = 0.1  # % SpO2 per s per unit activity
    co2_production: float = 0.08  # mmHg per s per unit activity

    # Autonomic control
    rr_setpoint: float = 16.0
    rr_co2_gain: float = 0.5
    rr_hypoxia_gain: float = 0.8
    rr_speed: float = 0.5
    rr_min: float = 8.0
    rr_max: float = 35.0
    hr_setpoint: float = 75.0
    hr_map_gain: float = 0.4
    hr_map_reference: float = 90.0
    hr_speed: float = 0.4
    hr_min: float = 50.0
    hr_max: float = 160.0

    # EEG
    alpha_hz: float = 10.0
    alpha_amplitude: float = 0.5
    beta_hz: float = 20.0
    beta_amplitude: float = 0.3
    eeg_noise: float = 0.1
    eeg_scale: float = 20.0  # uV

    ventilator_pip_threshold: float = 5.0  # cmH2O


@dataclass(frozen=True)
class SpinalCordConfig:
    motor_velocity: float = 75.0  # m/s
    motor_band: Tuple[float, float] = (70.0, 80.0)
    sensory_velocity: float = 65.0
    sensory_band: Tuple[float, float] = (60.0, 70.0)
    velocity_theta: float = 0.1
    velocity_noise: float = 0.1


@dataclass(frozen=True)
class SpleenConfig:
    filtration_rate: float = 1.0
    filtration_band: Tuple[float, float] = (0.9, 1.1)
    filtration_noise: float = 0.01
    rbc_breakdown_rate: float = 0.5
    rbc_breakdown_band: Tuple[float, float] = (0.45, 0.55)
    rbc_breakdown_noise: float = 0.005
    lymphocytes: float = 1500.0  # cells/uL
    lymphocyte_band: Tuple[float, float] = (1400.0, 1600.0)
    lymphocyte_noise: float = 1.0
    macrophages: float = 500.0
    macrophage_band: Tuple[float, float] = (450.0, 550.0)
    macrophage_noise: float = 0.5
    theta: float = 0.1


@dataclass(frozen=True)
class LiverConfig:
    """Centralized parameters for Liver."""
    lobule_count: int = 100
    bile_rate: float = 0.0069  # mL/s
    bile_max: float = 0.009
    bile_theta: float = 0.02
    bile_noise: float = 0.0001
    glucose_production: float = 0.001  # g/s
    glucose_production_max: float = 0.0012
    glucose_production_noise: float = 0.00005
    production_theta: float = 0.02

    alt: float = 25.0  # U/L
    ast: float = 25.0  # U/L
    enzyme_damage_gain: float = 400.0  # U/L at total damage
    enzyme_band: Tuple[float, float] = (10.0, 1000.0)
    enzyme_noise: float = 0.1
    bilirubin: float = 0.8  # mg/dL
    bilirubin_damage_gain: float = 10.0
    bilirubin_band: Tuple[float, float] = (0.3, 25.0)
    bilirubin_noise: float = 0.01
    lab_theta: float = 0.05

    toxin_clearance: float = 0.1  # fraction per s at full capacity
    glucose_regulation: float = 0.1  # 1/s at full capacity
    angiotensinogen_rate: float = 10.0  # AU at full capacity


@dataclass(frozen=True)
class KidneysConfig:
    """Centralized parameters for Kidneys."""
    nephron_count: int = 100
    gfr_baseline: float = 125.0  # mL/min
    gfr_theta: float = 0.1
    gfr_noise: float = 0.5
    gfr_min: float = 0.0
    gfr_max: float = 180.0
    reference_map: float = 90.0
    pressure_modifier_band: Tuple[float, float] = (0.5, 1.2)
    urine_per_gfr: float = 0.01 / 60.0  # (mL/s) per (mL/min)
    urine_theta: float = 1.0
    urine_noise: float = 0.001
    urine_band: Tuple[float, float] = (0.0, 0.05)

    sodium: float = 140.0  # mmol/L
    sodium_band: Tuple[float, float] = (135.0, 145.0)
    sodium_noise: float = 0.05
    potassium: float = 4.0
    potassium_band: Tuple[float, float] = (3.5, 5.0)
    potassium_noise: float = 0.01
    electrolyte_theta: float = 0.1

    renin_map_threshold: float = 85.0
    renin_gain: float = 0.1
    renin_decay: float = 0.05
    renin_baseline: float = 1.0
    renin_band: Tuple[float, float] = (0.5, 50.0)
    angiotensin_rate: float = 0.05  # 1/s
    reference_angiotensinogen: float = 10.0

    creatinine_baseline: float = 0.9  # mg/dL
    creatinine_gain: float = 3.0
    bun_baseline: float = 12.0  # mg/dL
    bun_gain: float = 40.0
    reference_gfr: float = 120.0


@dataclass(frozen=True)
class BladderConfig:
    capacity: float = 500.0  # mL
    initial_volume: float = 50.0
    max_pressure: float = 60.0  # cmH2O at capacity
    full_fraction: float = 0.8
    pressure_threshold: float = 40.0  # cmH2O
    full_dwell: float = 10.0  # s
    void_rate: float = 15.0  # mL/s


@dataclass(frozen=True)
class StomachConfig:
    capacity: float = 1500.0  # mL
    resting_ph: float = 4.5
    buffer_ceiling_ph: float = 4.0
    buffer_step_ph: float = 0.5
    min_ph: float = 1.5
    acid_rate: float = 0.5  # pH units per s while digesting
    fill_dwell: float = 2.0  # s
    digest_duration: float = 30.0  # s
    emptying_rate: float = 0.5  # mL/s
    basal_secretion: float = 0.1  # mL/s
    digestive_secretion: float = 2.0  # mL/s


@dataclass(frozen=True)
class EsophagusConfig:
    length: float = 25.0  # cm
    peristaltic_speed: float = 3.0  # cm/s
    motility: float = 1.0
    motility_band: Tuple[float, float] = (0.95, 1.05)
    motility_theta: float = 0.1
    motility_noise: float = 0.01


@dataclass(frozen=True)
class GallbladderConfig:
    capacity: float = 50.0  # mL
    initial_volume: float = 30.0
    initial_concentration: float = 5.0
    max_concentration: float = 10.0
    concentration_rate: float = 0.05  # x per s
    release_rate: float = 2.0  # mL/s
    contraction_interval: float = 40.0  # s between spontaneous contractions
    spontaneous_floor: float = 5.0  # mL left after a spontaneous contraction
    max_contraction: float = 60.0  # s


@dataclass(frozen=True)
class PancreasConfig:
    insulin: float = 1.0  # U/h
    insulin_band: Tuple[float, float] = (0.5, 10.0)
    insulin_gain: float = 0.1
    insulin_decay: float = 0.5
    glucagon: float = 50.0  # ng/h
    glucagon_band: Tuple[float, float] = (20.0, 100.0)
    glucagon_gain: float = 0.2
    glucagon_decay: float = 1.0
    amylase: float = 80.0  # U/L
    amylase_band: Tuple[float, float] = (60.0, 100.0)
    lipase: float = 40.0  # U/L
    lipase_band: Tuple[float, float] = (20.0, 60.0)
    enzyme_theta: float = 0.1
    enzyme_noise: float = 0.2
    secretion_rate: float = 0.05  # mL/s of exocrine juice


@dataclass(frozen=True)
class IntestinesConfig:
    """Segment table: (name, length m, motility, nutrient absorption, water absorption)."""
    segments: Tuple[Tuple[str, float, float, float, float], ...] = (
        ("duodenum", 0.25, 1.0, 0.5, 0.1),
        ("jejunum", 2.5, 1.0, 1.0, 0.3),
        ("ileum", 3.0, 1.0, 0.8, 0.5),
        ("colon", 1.5, 0.5, 0.1, 1.0),
    )
    small_intestine: Tuple[str, ...] = ("duodenum", "jejunum", "ileum")
    motility_band: Tuple[float, float] = (0.9, 1.1)
    motility_theta: float = 0.1
    motility_noise: float = 0.01
    digestion_boost: float = 5.0
    glucose_absorption: float = 0.001  # mg/dL per mL chyme per s
    nutrient_clearance: float = 0.01
    water_clearance: float = 0.1
    secretion_decay: float = 0.1  # bile/enzyme use per s
    residual_chyme: float = 0.01  # mL treated as empty
