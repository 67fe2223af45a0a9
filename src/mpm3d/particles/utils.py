import numpy as np

from ..errors import CapacityExceededError, StateVariableMismatchError


def padded(vector: np.ndarray, size: int = 3) -> np.ndarray:
    """Copy of ``vector`` extended with zeros to ``size`` components."""
    out = np.zeros(size)
    out[:vector.shape[0]] = vector
    return out


def pack_state_variables(target: np.ndarray, names, values: dict, phase: str = "solid") -> int:
    """Write ``values[name]`` for each name, in order, into ``target``; returns the count."""
    count = len(names)
    if count > target.shape[0]:
        raise CapacityExceededError(count, target.shape[0], phase)
    for i, name in enumerate(names):
        target[i] = values[name]
    return count


def unpack_state_variables(source: np.ndarray, count: int, names, phase: str = "solid") -> dict:
    """Map the first ``count`` entries of ``source`` onto the material's state variable names."""
    if count > source.shape[0]:
        raise CapacityExceededError(count, source.shape[0], phase)
    if count != len(names):
        raise StateVariableMismatchError(count, len(names), phase)
    return {name: float(source[i]) for i, name in enumerate(names)}
