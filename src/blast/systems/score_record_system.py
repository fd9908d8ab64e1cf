import logging

from blast.constants import HIGH_SCORE_KEY, LAST_SCORE_KEY
from blast.events.bus import EVENT_HIGH_SCORE_CHANGED, EVENT_SESSION_ENDED, EventBus
from blast.persistence.score_store import ScoreStore

logger = logging.getLogger(__name__)


class ScoreRecordSystem:
    """Writes the final score of each round to the score store.

    Subscribes to EVENT_SESSION_ENDED, always records the last score and
    bumps the high score when it is beaten.
    """

    def __init__(self, event_bus: EventBus, store: ScoreStore):
        self.event_bus = event_bus
        self.store = store
        self.event_bus.subscribe(EVENT_SESSION_ENDED, self.on_session_ended)

    def on_session_ended(self, sender, **kwargs):
        score = kwargs.get('score')
        if score is None:
            return
        score = int(score)
        self.store.set_int(LAST_SCORE_KEY, score)
        previous = self.high_score()
        if score > previous:
            self.store.set_int(HIGH_SCORE_KEY, score)
            logger.info("New high score %d (was %d)", score, previous)
            self.event_bus.emit(EVENT_HIGH_SCORE_CHANGED, previous=previous, high_score=score)

    def close(self) -> None:
        self.event_bus.unsubscribe(EVENT_SESSION_ENDED, self.on_session_ended)

    def high_score(self) -> int:
        return self.store.get_int(HIGH_SCORE_KEY, 0)

    def last_score(self) -> int:
        return self.store.get_int(LAST_SCORE_KEY, 0)
