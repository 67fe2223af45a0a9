"""
Error taxonomy for particle records, descriptors and reconstruction.
"""


class MPMError(Exception):
    """Base class for errors raised by mpm3d."""


class DescriptorBuildError(MPMError):
    """The transport cannot represent an element kind required by a record."""


class CapacityExceededError(MPMError, ValueError):
    """More active state variables than the record array can hold."""

    def __init__(self, count: int, capacity: int, phase: str = "solid"):
        self.count = count
        self.capacity = capacity
        self.phase = phase
        super().__init__(
            f"{phase} state variables ({count}) exceed record capacity ({capacity})")


class MaterialNotFoundError(MPMError, LookupError):
    """A material id could not be resolved against the supplied materials."""

    def __init__(self, material_id: int, phase: str = "solid"):
        self.material_id = material_id
        self.phase = phase
        super().__init__(f"{phase} material id {material_id} not found")


class TransportError(MPMError):
    """A transfer could not be carried out by the transport."""


class StateVariableMismatchError(MPMError, ValueError):
    """A record's state variable count differs from what its material defines."""

    def __init__(self, count: int, expected: int, phase: str = "solid"):
        self.count = count
        self.expected = expected
        self.phase = phase
        super().__init__(
            f"record carries {count} {phase} state variables, material defines {expected}")


class InvalidRecordError(MPMError, ValueError):
    """A record holds a value no particle may have, e.g. a non-positive volume."""

    def __init__(self, particle_id: int, field: str, value: float):
        self.particle_id = particle_id
        self.field = field
        self.value = value
        super().__init__(f"particle {particle_id}: invalid {field} {value}")
