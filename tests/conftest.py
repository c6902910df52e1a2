from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from homeosim.core.engine import initialize_patient, update_patient
from homeosim.core.state import SimulationConfig
from homeosim.patient.patient import Patient


class ZeroNoise:
    """Stand-in generator whose normal draws are always the mean."""
    def normal(self, loc=0.0, scale=1.0, size=None):
        return float(loc)


@pytest.fixture
def zero_rng():
    return ZeroNoise()


@pytest.fixture
def patient():
    """Fully-equipped patient with a fixed seed."""
    return initialize_patient(1, config=SimulationConfig(rng_seed=1234))


@pytest.fixture
def quiet_patient():
    """Fully-equipped patient whose stochastic terms are all zero."""
    return initialize_patient(1, rng=ZeroNoise())


@pytest.fixture
def patient_with():
    """Build a noise-free patient carrying only the given organs."""
    def _build(*organs):
        p = Patient(1, rng=ZeroNoise())
        for organ in organs:
            p.add_organ(organ)
        return p

    return _build


@pytest.fixture
def advance():
    """Helper to advance a patient using consistent step handling."""
    def _advance(patient, seconds, dt=1.0):
        if seconds <= 0:
            return
        steps = int(seconds / dt)
        for _ in range(steps):
            update_patient(patient, dt)
        remainder = seconds - steps * dt
        if remainder > 1e-9:
            update_patient(patient, remainder)

    return _advance
