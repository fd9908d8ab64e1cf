"""Round orchestration: validates clicks, resolves regions and ends the round.

The session never blocks on presentation. Each call computes its result
synchronously and publishes it on the event bus; a presentation layer that
animates removals can enable ``await_settle`` and report back with
``settle()`` (or EVENT_BOARD_SETTLED) before the next click is accepted.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import FrozenSet, Optional

from esper import World

from blast.components.block import BlockKind
from blast.components.round_state import RoundState
from blast.components.session_state import EndCause, SessionMode, SessionState
from blast.config import GameConfig
from blast.events.bus import (
    EventBus,
    EVENT_BOARD_SETTLED,
    EVENT_CELL_CLICK,
    EVENT_INTERACTION_REJECTED,
    EVENT_NO_MATCH,
    EVENT_REGION_RESOLVED,
    EVENT_SCORE_CHANGED,
    EVENT_SESSION_ENDED,
    EVENT_SESSION_STARTED,
    EVENT_TICK,
    EVENT_TIMER_CHANGED,
)
from blast.factories.blocks import BlockFactory
from blast.persistence.score_store import ScoreStore
from blast.systems.board import BoardSystem
from blast.systems.board_ops import (
    Position,
    Snapshot,
    block_at,
    board_snapshot,
    find_possible_moves,
    has_possible_move,
    in_bounds,
    is_resolvable,
    resolve_region,
)
from blast.systems.score_record_system import ScoreRecordSystem
from blast.utils.session_state import set_session_mode
from blast.world import create_world, get_round_state, get_session_state

logger = logging.getLogger(__name__)


class InteractionOutcome(Enum):
    RESOLVED = auto()
    NO_MATCH = auto()
    INVALID_COORDINATE = auto()
    REJECTED = auto()


@dataclass(frozen=True)
class InteractionResult:
    outcome: InteractionOutcome
    origin: Position
    positions: FrozenSet[Position] = frozenset()
    kind: Optional[BlockKind] = None
    score_delta: int = 0
    time_delta: int = 0

    @property
    def resolved(self) -> bool:
        return self.outcome is InteractionOutcome.RESOLVED


class GameSession:
    """Owns one world (board + round state) and drives it through a round."""

    def __init__(
        self,
        world: Optional[World] = None,
        event_bus: Optional[EventBus] = None,
        *,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        factory: Optional[BlockFactory] = None,
        score_store: Optional[ScoreStore] = None,
    ):
        self.event_bus = event_bus or EventBus()
        self.world = world or create_world(rng=rng)
        self.config = config or GameConfig()
        self.factory = factory or BlockFactory(rng or getattr(self.world, "random", None))
        self.board_system: Optional[BoardSystem] = None
        self.score_record_system: Optional[ScoreRecordSystem] = None
        if score_store is not None:
            self.score_record_system = ScoreRecordSystem(self.event_bus, score_store)
        self.event_bus.subscribe(EVENT_CELL_CLICK, self.on_cell_click)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_BOARD_SETTLED, self.on_board_settled)

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        return get_session_state(self.world)

    @property
    def round_state(self) -> RoundState:
        return get_round_state(self.world)

    @property
    def mode(self) -> SessionMode:
        return self.state.mode

    @property
    def end_cause(self) -> Optional[EndCause]:
        return self.state.end_cause

    @property
    def is_active(self) -> bool:
        return self.state.mode == SessionMode.ACTIVE

    def snapshot(self) -> Snapshot:
        return board_snapshot(self.world)

    def possible_moves(self) -> list[Position]:
        return find_possible_moves(self.world)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, config: Optional[GameConfig] = None) -> None:
        """Begin a fresh round, replacing any previous board and score.

        A board that cannot be generated raises before anything changes, so a
        running round carries on with its board, score and clock.
        """
        config = (config or self.config).validate()
        if self.board_system is None:
            self.board_system = BoardSystem(
                self.world,
                self.event_bus,
                config.rows,
                config.cols,
                factory=self.factory,
                basic_probability=config.basic_block_spawn_probability,
                max_attempts=config.max_generation_attempts,
            )
        else:
            self.board_system.rebuild(
                config.rows,
                config.cols,
                basic_probability=config.basic_block_spawn_probability,
                max_attempts=config.max_generation_attempts,
            )
        self.config = config
        round_state = self.round_state
        round_state.reset(config.initial_seconds)
        state = self.state
        state.settle_pending = False
        state.end_cause = None
        set_session_mode(self.world, self.event_bus, SessionMode.ACTIVE)
        logger.info(
            "Session started on a %dx%d board with %.1fs on the clock",
            config.rows,
            config.cols,
            round_state.seconds_remaining,
        )
        self.event_bus.emit(
            EVENT_SESSION_STARTED,
            rows=config.rows,
            cols=config.cols,
            seconds_remaining=round_state.seconds_remaining,
        )

    def interact(self, coord: Position) -> InteractionResult:
        row, col = coord
        origin = (row, col)
        state = self.state
        round_state = self.round_state
        if state.mode != SessionMode.ACTIVE or round_state.interaction_in_progress:
            reason = "busy" if state.mode == SessionMode.ACTIVE else "inactive"
            logger.debug("Ignoring interaction at %s (%s)", origin, reason)
            self.event_bus.emit(EVENT_INTERACTION_REJECTED, row=row, col=col, reason=reason)
            return InteractionResult(InteractionOutcome.REJECTED, origin)
        if not in_bounds(self.world, origin):
            logger.warning("Invalid cell coordinate %s", origin)
            self.event_bus.emit(EVENT_INTERACTION_REJECTED, row=row, col=col, reason="out_of_bounds")
            return InteractionResult(InteractionOutcome.INVALID_COORDINATE, origin)

        round_state.interaction_in_progress = True
        try:
            return self._resolve(origin, state, round_state)
        finally:
            if not state.settle_pending:
                round_state.interaction_in_progress = False

    def _resolve(self, origin: Position, state: SessionState, round_state: RoundState) -> InteractionResult:
        block = block_at(self.world, *origin)
        region = resolve_region(self.world, origin, bomb_radius=self.config.bomb_radius)
        if block is None or not is_resolvable(region, block.kind):
            self.event_bus.emit(EVENT_NO_MATCH, row=origin[0], col=origin[1], size=len(region))
            kind = block.kind if block is not None else None
            return InteractionResult(InteractionOutcome.NO_MATCH, origin, frozenset(region), kind)

        score_delta, time_delta = round_state.apply_interaction(len(region))
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=round_state.score, delta=score_delta)
        self.event_bus.emit(
            EVENT_TIMER_CHANGED,
            seconds_remaining=round_state.seconds_remaining,
            display_seconds=round_state.display_seconds,
            delta=float(time_delta),
            running=round_state.timer_running,
        )

        positions = sorted(region)
        self.board_system.refill(positions)
        if self.config.await_settle:
            state.settle_pending = True
        self.event_bus.emit(
            EVENT_REGION_RESOLVED,
            positions=positions,
            origin=origin,
            kind=block.kind,
            snapshot=board_snapshot(self.world),
            score_delta=score_delta,
            time_delta=time_delta,
        )

        # A tick delivered while the region resolved may already have ended the round.
        if state.mode == SessionMode.ACTIVE and not has_possible_move(self.world):
            self._end(EndCause.NO_MOVES_LEFT)
        return InteractionResult(
            InteractionOutcome.RESOLVED,
            origin,
            frozenset(region),
            block.kind,
            score_delta,
            time_delta,
        )

    def tick(self, delta_seconds: float) -> None:
        round_state = self.round_state
        if not round_state.timer_running:
            return
        expired = round_state.tick(delta_seconds)
        self.event_bus.emit(
            EVENT_TIMER_CHANGED,
            seconds_remaining=round_state.seconds_remaining,
            display_seconds=round_state.display_seconds,
            delta=-float(delta_seconds),
            running=round_state.timer_running,
        )
        if expired and self.state.mode == SessionMode.ACTIVE:
            self._end(EndCause.TIMEOUT)

    def settle(self) -> bool:
        """Release the interaction lock held for the presentation layer."""
        state = self.state
        if not state.settle_pending:
            return False
        state.settle_pending = False
        self.round_state.interaction_in_progress = False
        return True

    def close(self) -> None:
        """Detach this session (and its score recording) from the event bus."""
        self.event_bus.unsubscribe(EVENT_CELL_CLICK, self.on_cell_click)
        self.event_bus.unsubscribe(EVENT_TICK, self.on_tick)
        self.event_bus.unsubscribe(EVENT_BOARD_SETTLED, self.on_board_settled)
        if self.score_record_system is not None:
            self.score_record_system.close()

    def _end(self, cause: EndCause) -> None:
        if not set_session_mode(self.world, self.event_bus, SessionMode.ENDED, end_cause=cause):
            return
        round_state = self.round_state
        round_state.stop()
        self.state.settle_pending = False
        round_state.interaction_in_progress = False
        logger.info("Session ended (%s) with score %d", cause.name, round_state.score)
        self.event_bus.emit(EVENT_SESSION_ENDED, cause=cause, score=round_state.score)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def on_cell_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        self.interact((row, col))

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt')
        if dt is None:
            return
        self.tick(dt)

    def on_board_settled(self, sender, **kwargs):
        self.settle()
