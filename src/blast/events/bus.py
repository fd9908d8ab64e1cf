from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float
EVENT_TIMER_CHANGED = "timer_changed"              # payload: seconds_remaining=float, display_seconds=int, delta=float, running=bool


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_CELL_CLICK = "cell_click"                            # payload: row, col
EVENT_INTERACTION_REJECTED = "interaction_rejected"        # payload: row, col, reason=str
EVENT_NO_MATCH = "no_match"                                # payload: row, col, size=int


# ============================================================================
# BOARD MECHANICS
# ============================================================================
EVENT_BOARD_GENERATED = "board_generated"          # payload: rows, cols, attempts=int, snapshot
EVENT_REGION_RESOLVED = "region_resolved"          # payload: positions=[(r,c),...], origin=(r,c), kind=BlockKind, snapshot, score_delta, time_delta
EVENT_BOARD_REFILLED = "board_refilled"            # payload: positions=[(r,c),...]
EVENT_BOARD_SETTLED = "board_settled"              # payload: None


# ============================================================================
# SCORE
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int
EVENT_HIGH_SCORE_CHANGED = "high_score_changed"    # payload: previous=int, high_score=int


# ============================================================================
# SESSION FLOW & STATE
# ============================================================================
EVENT_SESSION_MODE_CHANGED = "session_mode_changed"    # payload: previous_mode=SessionMode|None, new_mode=SessionMode
EVENT_SESSION_STARTED = "session_started"              # payload: rows, cols, seconds_remaining=float
EVENT_SESSION_ENDED = "session_ended"                  # payload: cause=EndCause, score=int
