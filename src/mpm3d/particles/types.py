from enum import IntEnum


class ParticlePhase(IntEnum):
    """Phase a material binding or state variable set belongs to."""
    SOLID = 0
    LIQUID = 1

    @property
    def label(self) -> str:
        return self.name.lower()
