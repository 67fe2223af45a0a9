"""
Device-side batches of particle records.

A ParticleCloud is a taichi struct field whose members mirror the fields of a
record kind, so a batch of records (for example particles about to migrate,
or rows just read from HDF5) can be moved onto the device and back in bulk.

    import taichi as ti
    ti.init(arch=ti.cpu, default_fp=ti.f64)
    cloud = ParticleCloud(TwoPhaseParticleRecord, n)
    cloud.from_records(array)
"""

import numpy as np
import taichi as ti

from .errors import DescriptorBuildError
from .records import Record

#=====================================
# Type Definitions
#=====================================
_TI_TYPES = {
    np.dtype(np.float64): ti.f64,
    np.dtype(np.uint32): ti.u32,
    np.dtype(np.uint64): ti.u64,
    np.dtype(np.bool_): ti.u8,      # taichi fields have no boolean type
}


def struct_type(record_type: type):
    """taichi struct type with one member per record field."""
    members = {}
    for name in record_type.dtype.names:
        field_dtype = record_type.dtype.fields[name][0]
        shape = ()
        if field_dtype.subdtype is not None:
            field_dtype, shape = field_dtype.subdtype
        ti_type = _TI_TYPES.get(field_dtype)
        if ti_type is None:
            raise DescriptorBuildError(f"field '{name}': no taichi type for {field_dtype}")
        if len(shape) > 1:
            raise DescriptorBuildError(f"field '{name}': only one-dimensional arrays are supported")
        members[name] = ti.types.vector(shape[0], ti_type) if shape else ti_type
    return ti.types.struct(**members)


@ti.data_oriented
class ParticleCloud:
    """Fixed-size taichi field of ``n`` records of one kind."""

    def __init__(self, record_type: type, n: int):
        if n <= 0:
            raise ValueError(f"Particle count must be positive, got {n}")
        self.record_type = record_type
        self.n = n
        self.field = struct_type(record_type).field(shape=n)

    def from_records(self, array: np.ndarray):
        """Load a structured array (or a list of records) into the field."""
        if not isinstance(array, np.ndarray):
            array = np.concatenate([record.buffer for record in array])
        if array.shape != (self.n,):
            raise ValueError(f"Expected {self.n} records, got shape {array.shape}")
        for name in self.record_type.dtype.names:
            values = array[name]
            if values.dtype == np.bool_:
                values = values.astype(np.uint8)
            getattr(self.field, name).from_numpy(np.ascontiguousarray(values))

    def to_records(self) -> np.ndarray:
        """Copy the field back into a new structured array of the record dtype."""
        array = np.zeros(self.n, dtype=self.record_type.dtype)
        for name in self.record_type.dtype.names:
            array[name] = getattr(self.field, name).to_numpy()
        return array

    def record(self, i: int) -> Record:
        return self.record_type.from_array(self.to_records()[i])

    @ti.kernel
    def count_active(self) -> ti.i32:
        """Number of particles whose status flag is set."""
        total = 0
        for i in self.field:
            if self.field[i].status != 0:
                total += 1
        return total
