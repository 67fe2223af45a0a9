"""
Live material points and their conversion to and from particle records.
"""

from .particle import Particle
from .twophase import TwoPhaseParticle
from .types import ParticlePhase

__all__ = [
    "Particle",
    "ParticlePhase",
    "TwoPhaseParticle",
]
