"""
Reveal engine state models
"""

from enum import Enum
from dataclasses import dataclass


class RevealState(Enum):
    """
    States of the reveal engine

    IDLE --start()--> STREAMING --pause()--> PAUSED --resume()--> STREAMING
    STREAMING --(end of source reached)--> COMPLETE
    any --reset()--> IDLE, any --complete()--> COMPLETE
    """
    IDLE = "idle"
    STREAMING = "streaming"
    PAUSED = "paused"
    COMPLETE = "complete"


@dataclass(frozen=True)
class RevealSnapshot:
    """
    Point-in-time view of the engine, handy for hosts and reports

    Attributes:
        state: Current RevealState
        revealed_length: Number of source characters revealed
        total_length: Length of the source document
        progress: revealed_length as a percentage of total_length
    """
    state: RevealState
    revealed_length: int
    total_length: int
    progress: float
