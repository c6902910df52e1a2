"""
Physiological and Numerical Constants for HomeoSim.

This module centralizes the magic numbers shared across organ models.
Organ-specific tuning lives in physiology/organ_config.py.
"""

# Blood bounds. Every organ that writes Blood restores these afterwards.

# Oxygen saturation (%)
SPO2_MIN = 0.0
SPO2_MAX = 100.0
SPO2_BASELINE = 98.0

# Arterial CO2 partial pressure (mmHg)
CO2_MIN = 10.0
CO2_MAX = 150.0
CO2_BASELINE = 40.0

# Glucose (mg/dL)
GLUCOSE_MIN = 20.0
GLUCOSE_MAX = 600.0
GLUCOSE_BASELINE = 90.0

# Angiotensin (arbitrary units, 1.0 = resting RAAS tone)
ANGIOTENSIN_MIN = 0.0
ANGIOTENSIN_MAX = 50.0
ANGIOTENSIN_BASELINE = 1.0

# Circulating toxins (arbitrary units)
TOXINS_MIN = 0.0
TOXINS_MAX = 1000.0

# Blood Pressure Bounds (mmHg)
SBP_MIN = 40.0
SBP_MAX = 250.0
SBP_BASELINE = 120.0
DBP_MIN = 20.0
DBP_MAX = 150.0
DBP_BASELINE = 80.0

# Fallback mean arterial pressure when no heart is present (mmHg)
DEFAULT_MAP = 90.0

# Glycemic band held by liver and pancreas (mg/dL)
GLUCOSE_LOW_THRESHOLD = 80.0
GLUCOSE_HIGH_THRESHOLD = 120.0

# Waveform buffers (samples, newest first)
WAVEFORM_CAPACITY = 200

# EKG
MAX_EKG_LEADS = 12
EKG_LEAD_NAMES = (
    "I", "II", "III", "aVR", "aVL", "aVF",
    "V1", "V2", "V3", "V4", "V5", "V6",
)

# Toxin levels that depress consciousness (AU)
TOXIN_MODERATE = 50.0
TOXIN_SEVERE = 80.0
