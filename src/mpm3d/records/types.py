"""
Layout constants and the record base class shared by every particle record kind.

A record kind is described once, as an ordered list of (name, format) pairs,
and turned into a C-aligned numpy structured dtype. Any process that imports
this module derives the same offsets, so both ends of a transfer and every
file written by storage agree on the layout without exchanging it.
"""

from typing import ClassVar, Sequence, Tuple

import numpy as np

#=====================================
# Layout Constants
#=====================================
NSTATE_VARS_CAPACITY = 20          # Solid state variable slots per record
NLIQUID_STATE_VARS_CAPACITY = 5    # Liquid state variable slots per record
UNASSIGNED_CELL = int(np.iinfo(np.uint64).max)   # Cell id of a particle not yet located in the mesh

#=====================================
# Field Formats
#=====================================
INDEX = np.uint64       # Particle and cell ids
UNSIGNED = np.uint32    # Material ids and state variable counts
REAL = np.float64


def vector_fields(prefix: str, suffixes: Sequence[str] = ("x", "y", "z")) -> list:
    """Scalar float fields ``prefix_x``, ``prefix_y``, ``prefix_z``."""
    return [(f"{prefix}_{s}", REAL) for s in suffixes]


def make_record_dtype(fields: Sequence[tuple]) -> np.dtype:
    """Structured dtype with C struct alignment and padding."""
    return np.dtype(list(fields), align=True)


class Record:
    """
    One particle's exchangeable state, backed by a single-element structured array.

    Scalar fields read back as Python scalars, array fields (state variables)
    as writable views into the record. Only the fields of ``dtype`` can be set.
    """

    dtype: ClassVar[np.dtype]
    __slots__ = ("_array",)

    def __init__(self, array=None):
        if array is None:
            array = np.zeros(1, dtype=self.dtype)
        elif not isinstance(array, np.ndarray) or array.shape != (1,) or array.dtype != self.dtype:
            raise ValueError(
                f"{type(self).__name__} needs a (1,) array of its own dtype, got "
                f"{getattr(array, 'shape', None)} {getattr(array, 'dtype', type(array))}")
        object.__setattr__(self, "_array", array)

    @classmethod
    def from_array(cls, row) -> "Record":
        """Copy one row of a structured array (or any matching element) into a new record."""
        row = np.asarray(row).reshape(())
        if row.dtype.names != cls.dtype.names:
            raise ValueError(f"fields {row.dtype.names} do not match {cls.__name__}")
        record = cls()
        for name in cls.dtype.names:
            record._array[name][0] = row[name]
        return record

    @classmethod
    def fields(cls) -> Tuple[str, ...]:
        return cls.dtype.names

    @property
    def buffer(self) -> np.ndarray:
        """The underlying (1,) array; this is what transport and storage read and write."""
        return self._array

    @property
    def nbytes(self) -> int:
        return self.dtype.itemsize

    def copy(self) -> "Record":
        return type(self)(self._array.copy())

    def __getattr__(self, name):
        if name.startswith("_") or name not in self.dtype.fields:
            raise AttributeError(f"{type(self).__name__} has no field '{name}'")
        value = self._array[name][0]
        return value.item() if np.ndim(value) == 0 else value

    def __setattr__(self, name, value):
        if name not in self.dtype.fields:
            raise AttributeError(f"{type(self).__name__} has no field '{name}'")
        self._array[name][0] = value

    def __repr__(self):
        return (f"{type(self).__name__}(id={self.id}, material_id={self.material_id}, "
                f"cell_id={self.cell_id}, status={self.status})")

    def state_variables(self) -> np.ndarray:
        """The active solid state variables, ``svars[:nstate_vars]``."""
        return self.svars[:self.nstate_vars].copy()


def stack_records(records: Sequence[Record]) -> np.ndarray:
    """Concatenate records of one kind into a structured array of shape (n,)."""
    records = list(records)
    if not records:
        raise ValueError("No records to stack")
    dtype = records[0].dtype
    for record in records:
        if record.dtype != dtype:
            raise ValueError(f"Cannot stack {type(record).__name__} with {type(records[0]).__name__}")
    return np.concatenate([record.buffer for record in records])


def unstack_records(array: np.ndarray, record_type: type) -> list:
    """Split a structured array into independent records of ``record_type``."""
    return [record_type.from_array(row) for row in array]
