"""
HDF5 storage of particle records.

A dataset is a one-dimensional compound array whose element type is the
record dtype itself, so rows written here are the same bytes the transport
sends.
"""

import os
from typing import Sequence, Type, TypeVar

import h5py
import numpy as np

from ..logging_config import get_logger
from ..records import Record, stack_records, unstack_records

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=Record)


def write_particles(path: str, records: Sequence[Record], dataset: str = "particles") -> None:
    """
    Write records of one kind to ``dataset`` in ``path``, replacing an existing dataset.

    Args:
        path: HDF5 file, created if missing
        records: Non-empty sequence of records of one kind
        dataset: Dataset name inside the file
    """
    array = stack_records(records)
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with h5py.File(path, "a") as h5:
        if dataset in h5:
            del h5[dataset]
        dset = h5.create_dataset(dataset, data=array)
        dset.attrs["record_type"] = type(records[0]).__name__
    logger.info("Wrote %d %s to %s:%s", len(array), type(records[0]).__name__, path, dataset)


def read_particles(path: str, record_type: Type[RecordT], dataset: str = "particles") -> list:
    """
    Read every row of ``dataset`` as an independent record of ``record_type``.

    Raises:
        ValueError: The stored fields are not those of ``record_type``
    """
    with h5py.File(path, "r") as h5:
        dset = h5[dataset]
        if dset.dtype.names != record_type.dtype.names:
            raise ValueError(
                f"{path}:{dataset} holds fields {dset.dtype.names}, not {record_type.__name__}")
        stored = dset[...]

    array = np.zeros(stored.shape[0], dtype=record_type.dtype)
    for name in record_type.dtype.names:
        array[name] = stored[name]
    logger.info("Read %d %s from %s:%s", array.shape[0], record_type.__name__, path, dataset)
    return unstack_records(array, record_type)
