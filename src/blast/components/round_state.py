from dataclasses import dataclass

from blast.utils.scoring import interaction_rewards


@dataclass(slots=True)
class RoundState:
    """Score and countdown for the running session.

    ``timer_running`` flips to False once, either when the countdown runs out
    or when the board has no moves left, and never flips back for this round.
    ``interaction_in_progress`` guards against a second click while one is
    still resolving.
    """

    score: int = 0
    seconds_remaining: float = 0.0
    timer_running: bool = True
    interaction_in_progress: bool = False

    def reset(self, initial_seconds: float) -> None:
        self.score = 0
        self.seconds_remaining = float(initial_seconds)
        self.timer_running = True
        self.interaction_in_progress = False

    def apply_interaction(self, affected_count: int) -> tuple[int, int]:
        """Credit a resolved region of ``affected_count`` cells.

        Returns the ``(score_delta, time_delta)`` that was applied.
        """
        score_delta, time_delta = interaction_rewards(affected_count)
        self.score += score_delta
        self.seconds_remaining += time_delta
        if self.seconds_remaining <= 0:
            self.timer_running = False
        return score_delta, time_delta

    def tick(self, delta_seconds: float) -> bool:
        """Advance the countdown. Returns True only on the tick that expires it."""
        if not self.timer_running:
            return False
        self.seconds_remaining -= delta_seconds
        if self.seconds_remaining <= 0:
            self.timer_running = False
            return True
        return False

    def stop(self) -> None:
        self.timer_running = False

    @property
    def display_seconds(self) -> int:
        return max(0, int(self.seconds_remaining))
