"""
Transport descriptors derived from a record's memory layout.

A descriptor is the ordered list of (byte offset, element count, element kind)
blocks that together cover every field of a record exactly once. Fields that
sit back to back in memory and share a kind are merged into one block, so the
single-phase record collapses to a handful of blocks (id, the float run from
mass to epsilon_v, status, cell id, material id + count, state variables).
Padding bytes are never part of a block.

Descriptors are computed from the dtype alone, so two processes that import
the same record definitions build equal descriptors without talking to each
other.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple, Union

import numpy as np

from ..errors import DescriptorBuildError, TransportError
from ..records import Record


class ElementKind(Enum):
    """Element kinds a descriptor block can carry."""
    FLOAT64 = "float64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    BOOL = "bool"

    @property
    def itemsize(self) -> int:
        return np.dtype(self.value).itemsize


_KINDS = {np.dtype(kind.value): kind for kind in ElementKind}


@dataclass(frozen=True)
class Block:
    """A contiguous run of ``count`` elements of one kind starting at ``offset``."""
    offset: int
    count: int
    kind: ElementKind

    @property
    def nbytes(self) -> int:
        return self.count * self.kind.itemsize

    @property
    def end(self) -> int:
        return self.offset + self.nbytes


@dataclass(frozen=True)
class Descriptor:
    """Ordered blocks plus the extent (itemsize) of one record."""
    blocks: Tuple[Block, ...]
    extent: int

    def __len__(self):
        return len(self.blocks)

    @property
    def size(self) -> int:
        """Bytes of meaningful data per record, padding excluded."""
        return sum(block.nbytes for block in self.blocks)

    def _raw(self, buffer: np.ndarray) -> np.ndarray:
        if buffer.nbytes % self.extent != 0:
            raise TransportError(
                f"buffer of {buffer.nbytes} bytes is not a whole number of {self.extent}-byte records")
        return np.ascontiguousarray(buffer).view(np.uint8).reshape(-1, self.extent)

    def pack(self, buffer: np.ndarray) -> bytes:
        """Gather the described bytes of every record in ``buffer``."""
        raw = self._raw(buffer)
        return b"".join(raw[:, block.offset:block.end].tobytes() for block in self.blocks)

    def unpack(self, payload: bytes, buffer: np.ndarray) -> None:
        """Scatter a ``pack`` payload into ``buffer`` in place."""
        if not buffer.flags.c_contiguous:
            raise TransportError("receive buffer must be C contiguous")
        raw = buffer.view(np.uint8).reshape(-1, self.extent)
        n = raw.shape[0]
        if len(payload) != n * self.size:
            raise TransportError(
                f"payload of {len(payload)} bytes does not match {n} record(s) of {self.size} bytes")
        data = np.frombuffer(payload, dtype=np.uint8)
        start = 0
        for block in self.blocks:
            stop = start + n * block.nbytes
            raw[:, block.offset:block.end] = data[start:stop].reshape(n, block.nbytes)
            start = stop

    def __str__(self):
        parts = ", ".join(f"({b.offset}, {b.count}, {b.kind.value})" for b in self.blocks)
        return f"Descriptor[extent={self.extent}: {parts}]"


def element_blocks(dtype: np.dtype, base_offset: int = 0) -> Iterator[Block]:
    """One unmerged block per field of ``dtype``, nested structs flattened."""
    for name in dtype.names:
        field_dtype, offset = dtype.fields[name][:2]
        count = 1
        if field_dtype.subdtype is not None:
            field_dtype, shape = field_dtype.subdtype
            count = int(np.prod(shape))
        if field_dtype.names is not None:
            if count != 1:
                raise DescriptorBuildError(f"field '{name}': arrays of structs are not supported")
            yield from element_blocks(field_dtype, base_offset + offset)
            continue
        if not field_dtype.isnative:
            raise DescriptorBuildError(f"field '{name}': non-native byte order {field_dtype.str}")
        kind = _KINDS.get(field_dtype)
        if kind is None:
            raise DescriptorBuildError(f"field '{name}': element type {field_dtype} has no transport kind")
        yield Block(base_offset + offset, count, kind)


def build_descriptor(record: Union[Record, np.dtype, type]) -> Descriptor:
    """
    Derive the transport descriptor of a record.

    Args:
        record: A record instance, a record class or a structured dtype

    Returns:
        Descriptor with contiguous same-kind fields merged
    """
    if isinstance(record, np.dtype):
        dtype = record
    else:
        dtype = np.dtype(getattr(record, "dtype", record))
    if dtype.names is None:
        raise DescriptorBuildError(f"{dtype} is not a structured record type")

    blocks: list = []
    for block in sorted(element_blocks(dtype), key=lambda b: b.offset):
        if blocks and blocks[-1].kind == block.kind and blocks[-1].end == block.offset:
            last = blocks.pop()
            block = Block(last.offset, last.count + block.count, last.kind)
        blocks.append(block)
    return Descriptor(tuple(blocks), dtype.itemsize)
