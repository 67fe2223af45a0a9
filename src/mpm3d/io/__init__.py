"""
Persistent storage of particle record sequences.
"""

from .hdf5 import read_particles, write_particles

__all__ = [
    "read_particles",
    "write_particles",
]
