"""Session state resource describing where the round is in its lifecycle."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class SessionMode(Enum):
    """Lifecycle of a single round."""
    IDLE = auto()
    ACTIVE = auto()
    ENDED = auto()


class EndCause(Enum):
    """Why an active round became terminal."""
    TIMEOUT = auto()
    NO_MOVES_LEFT = auto()


@dataclass
class SessionState:
    """Singleton component storing the current session mode."""
    mode: SessionMode = SessionMode.IDLE
    end_cause: Optional[EndCause] = None
    settle_pending: bool = False
