'''
Sender / receiver settings for a particle exchange
'''
from dataclasses import dataclass
from typing import Optional


@dataclass
class ExchangeConfig:
    """Ranks and tag of a single particle transfer."""
    sender: int = 0
    receiver: int = 0
    tag: int = 0

    @classmethod
    def for_world(cls, size: int, tag: int = 0) -> "ExchangeConfig":
        """Rank 0 sends; rank 1 receives when there are two ranks, otherwise rank 0 sends to itself."""
        config = cls(sender=0, receiver=1 if size == 2 else 0, tag=tag)
        config.validate(size)
        return config

    def validate(self, size: Optional[int] = None):
        if self.sender < 0 or self.receiver < 0:
            raise ValueError("Ranks must be non-negative")
        if self.tag < 0:
            raise ValueError(f"Tag must be non-negative, got {self.tag}")
        if size is not None and (self.sender >= size or self.receiver >= size):
            raise ValueError(
                f"Ranks ({self.sender}, {self.receiver}) outside process group of size {size}")

    def is_sender(self, rank: int) -> bool:
        return rank == self.sender

    def is_receiver(self, rank: int) -> bool:
        return rank == self.receiver
