import numpy as np


class EEGGenerator:
    """Alpha (10 Hz) plus beta (20 Hz) rhythm with white noise, in microvolts."""
    def __init__(self, alpha_hz: float = 10.0, alpha_amplitude: float = 0.5,
                 beta_hz: float = 20.0, beta_amplitude: float = 0.3,
                 noise: float = 0.1, scale: float = 20.0):
        self.alpha_hz = alpha_hz
        self.alpha_amplitude = alpha_amplitude
        self.beta_hz = beta_hz
        self.beta_amplitude = beta_amplitude
        self.noise = noise
        self.scale = scale

    def step(self, t: float, rng) -> float:
        alpha = self.alpha_amplitude * np.sin(2.0 * np.pi * self.alpha_hz * t)
        beta = self.beta_amplitude * np.sin(2.0 * np.pi * self.beta_hz * t)
        return float((alpha + beta + rng.normal(0.0, self.noise)) * self.scale)
