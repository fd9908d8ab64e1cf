from __future__ import annotations

from esper import World

from blast.components.session_state import EndCause, SessionMode
from blast.events.bus import EVENT_SESSION_MODE_CHANGED, EventBus
from blast.world import get_session_state


def set_session_mode(
    world: World,
    event_bus: EventBus,
    mode: SessionMode,
    *,
    end_cause: EndCause | None = None,
) -> bool:
    """Update the session mode and emit a change event when it differs.

    Returns True when the mode actually changed.
    """

    state = get_session_state(world)
    previous_mode = state.mode
    if previous_mode == mode:
        return False
    state.mode = mode
    state.end_cause = end_cause if mode == SessionMode.ENDED else None
    event_bus.emit(
        EVENT_SESSION_MODE_CHANGED,
        previous_mode=previous_mode,
        new_mode=mode,
        end_cause=state.end_cause,
    )
    return True
