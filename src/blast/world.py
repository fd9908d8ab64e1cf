import random

from esper import World

from blast.components.round_state import RoundState
from blast.components.session_state import SessionMode, SessionState


def create_world(
    *,
    initial_mode: SessionMode = SessionMode.IDLE,
    rng: random.Random | None = None,
) -> World:
    world = World()
    setattr(world, "random", rng or random.Random())

    # Register the global session resources on a single entity.
    state_entity = world.create_entity()
    world.add_component(state_entity, SessionState(mode=initial_mode))
    # The round clock only runs once a session starts.
    world.add_component(state_entity, RoundState(timer_running=False))
    return world


def get_session_state(world: World) -> SessionState:
    for _, state in world.get_component(SessionState):
        return state
    state = SessionState()
    world.create_entity(state)
    return state


def get_round_state(world: World) -> RoundState:
    """Return the shared RoundState component, creating it if absent."""
    for _, state in world.get_component(RoundState):
        return state
    state = RoundState()
    world.create_entity(state)
    return state
