from homeosim.core.enums import OrganType
from homeosim.core.utils import mean_revert
from homeosim.physiology.organ import Organ
from homeosim.physiology.organ_config import SpleenConfig


class Spleen(Organ):
    """Red pulp (filtration, RBC breakdown) and white pulp (immune cells), all mean-reverting."""
    organ_type = OrganType.SPLEEN

    def __init__(self, organ_id: int, config: SpleenConfig = None):
        super().__init__(organ_id)
        self.config = config if config is not None else SpleenConfig()
        cfg = self.config
        self.filtration_rate = cfg.filtration_rate
        self.rbc_breakdown_rate = cfg.rbc_breakdown_rate
        self.lymphocytes = cfg.lymphocytes
        self.macrophages = cfg.macrophages

    def update(self, patient, dt: float, rng) -> None:
        cfg = self.config
        self.filtration_rate = mean_revert(
            self.filtration_rate, cfg.filtration_rate, cfg.theta, cfg.filtration_noise,
            dt, *cfg.filtration_band, rng,
        )
        self.rbc_breakdown_rate = mean_revert(
            self.rbc_breakdown_rate, cfg.rbc_breakdown_rate, cfg.theta, cfg.rbc_breakdown_noise,
            dt, *cfg.rbc_breakdown_band, rng,
        )
        self.lymphocytes = mean_revert(
            self.lymphocytes, cfg.lymphocytes, cfg.theta, cfg.lymphocyte_noise,
            dt, *cfg.lymphocyte_band, rng,
        )
        self.macrophages = mean_revert(
            self.macrophages, cfg.macrophages, cfg.theta, cfg.macrophage_noise,
            dt, *cfg.macrophage_band, rng,
        )

    def get_summary(self) -> str:
        return "\n".join([
            f"Spleen (ID {self.organ_id})",
            f"  Red pulp: filtration {self.filtration_rate:.3f}, RBC breakdown {self.rbc_breakdown_rate:.3f}",
            f"  White pulp: lymphocytes {self.lymphocytes:.0f}/uL, macrophages {self.macrophages:.0f}/uL",
        ])
