from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from homeosim.core.enums import OrganType

if TYPE_CHECKING:
    from homeosim.patient.patient import Patient


class Organ(ABC):
    """
    Base class for every organ model.

    Subclasses set ``organ_type`` and implement update() and get_summary().
    Organs hold no reference to their patient; the patient, the step size and
    the random generator are passed in on every update.
    """
    organ_type: OrganType = None

    def __init__(self, organ_id: int):
        self.organ_id = int(organ_id)

    @property
    def name(self) -> str:
        return self.organ_type.value

    @abstractmethod
    def update(self, patient: "Patient", dt: float, rng) -> None:
        ...

    @abstractmethod
    def get_summary(self) -> str:
        ...

    def __repr__(self):
        return f"<{type(self).__name__} id={self.organ_id}>"
