from enum import Enum


class OrganType(Enum):
    """Closed set of organ kinds a patient can carry."""
    HEART = "Heart"
    LUNGS = "Lungs"
    BRAIN = "Brain"
    LIVER = "Liver"
    KIDNEYS = "Kidneys"
    BLADDER = "Bladder"
    STOMACH = "Stomach"
    INTESTINES = "Intestines"
    GALLBLADDER = "Gallbladder"
    PANCREAS = "Pancreas"
    ESOPHAGUS = "Esophagus"
    SPLEEN = "Spleen"
    SPINAL_CORD = "SpinalCord"

    @classmethod
    def from_name(cls, name: str) -> "OrganType":
        """Resolve 'Heart', 'heart', 'SPINAL_CORD' or 'SpinalCord' to a member."""
        key = str(name).strip()
        for member in cls:
            if key == member.value or key.upper() == member.name:
                return member
            if key.lower() == member.value.lower():
                return member
        raise ValueError(f"Unknown organ type: {name!r}")


class CardiacPhase(Enum):
    ATRIAL_SYSTOLE = "Atrial systole"
    VENTRICULAR_SYSTOLE = "Ventricular systole"
    DIASTOLE = "Diastole"


class BreathPhase(Enum):
    INSPIRATION = "Inspiration"
    EXPIRATION = "Expiration"


class CapnoPhase(Enum):
    """Capnogram segments within one breath."""
    INSPIRATORY_BASELINE = "Inspiratory baseline"
    EXPIRATORY_UPSTROKE = "Expiratory upstroke"
    ALVEOLAR_PLATEAU = "Alveolar plateau"
    DOWNSTROKE = "Downstroke"


class VentilationMode(Enum):
    SPONTANEOUS = "Spontaneous"
    MECHANICAL = "Mechanical"


class TractStatus(Enum):
    NORMAL = "Normal"
    IMPAIRED = "Impaired"
    SEVERED = "Severed"


class BladderState(Enum):
    FILLING = "Filling"
    FULL = "Full"
    VOIDING = "Voiding"


class StomachState(Enum):
    EMPTY = "Empty"
    FILLING = "Filling"
    DIGESTING = "Digesting"
    EMPTYING = "Emptying"


class GallbladderState(Enum):
    STORING = "Storing"
    CONTRACTING = "Contracting"


class EsophagusState(Enum):
    IDLE = "Idle"
    CONTRACTING = "Contracting"
