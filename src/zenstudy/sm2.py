"""SM-2 spaced repetition scheduling for flashcards."""
from dataclasses import dataclass
from datetime import date, timedelta

MIN_EASE = 1.3
MASTERED_INTERVAL = 21


@dataclass(frozen=True)
class Schedule:
    interval: int
    repetitions: int
    ease_factor: float

    def next_review(self, today: date) -> str:
        return (today + timedelta(days=self.interval)).isoformat()


def sm2_update(quality: int, repetitions: int, ease_factor: float, interval: int) -> Schedule:
    """Next review parameters for a 0-5 recall rating.

    Ratings below 3 reset the card; the ease factor never drops below 1.3.
    """
    if not 0 <= quality <= 5:
        raise ValueError(f"quality must be between 0 and 5, got {quality}")
    penalty = 5 - quality
    ease = max(MIN_EASE, ease_factor + 0.1 - penalty * (0.08 + penalty * 0.02))

    if quality < 3:
        return Schedule(interval=1, repetitions=0, ease_factor=round(ease, 2))
    if repetitions == 0:
        next_interval = 1
    elif repetitions == 1:
        next_interval = 6
    else:
        next_interval = round(interval * ease_factor)
    return Schedule(interval=next_interval, repetitions=repetitions + 1, ease_factor=round(ease, 2))


def mastery_for(schedule: Schedule) -> str:
    if schedule.interval >= MASTERED_INTERVAL:
        return "mastered"
    return "learning"
