from dataclasses import dataclass


@dataclass(frozen=True)
class MatchSettings:
    """Timing and round-structure knobs, read once from the Flask config."""

    default_policy: str = 'reactive'
    reactive_total_rounds: int = 4
    guessing_total_rounds: int = 3
    combination_length: int = 4
    countdown_seconds: int = 3
    reactive_round_duration: int = 30
    guessing_round_duration: int = 8
    next_round_delay: float = 3.0
    match_end_delay: float = 2.0
    rematch_delay: float = 1.0
    reaction_window_ms: int = 2000

    @classmethod
    def from_config(cls, config) -> 'MatchSettings':
        defaults = cls()
        return cls(
            default_policy=config.get('DEFAULT_ROUND_POLICY', defaults.default_policy),
            reactive_total_rounds=int(config.get('REACTIVE_TOTAL_ROUNDS', defaults.reactive_total_rounds)),
            guessing_total_rounds=int(config.get('GUESSING_TOTAL_ROUNDS', defaults.guessing_total_rounds)),
            combination_length=int(config.get('COMBINATION_LENGTH', defaults.combination_length)),
            countdown_seconds=int(config.get('COUNTDOWN_SECONDS', defaults.countdown_seconds)),
            reactive_round_duration=int(config.get('REACTIVE_ROUND_DURATION_SEC', defaults.reactive_round_duration)),
            guessing_round_duration=int(config.get('GUESSING_ROUND_DURATION_SEC', defaults.guessing_round_duration)),
            next_round_delay=float(config.get('NEXT_ROUND_DELAY_SEC', defaults.next_round_delay)),
            match_end_delay=float(config.get('MATCH_END_DELAY_SEC', defaults.match_end_delay)),
            rematch_delay=float(config.get('REMATCH_DELAY_SEC', defaults.rematch_delay)),
            reaction_window_ms=int(config.get('REACTION_WINDOW_MS', defaults.reaction_window_ms)),
        )

    @property
    def reaction_window(self) -> float:
        return self.reaction_window_ms / 1000.0
