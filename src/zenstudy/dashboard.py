"""Study stats tracking: daily goals, progress, streaks."""
from datetime import date, datetime, timedelta
from typing import Optional

from zenstudy.review import average_accuracy, best_accuracy, record_session


def get_accuracy_label(score: float) -> str:
    if score >= 80:
        return "STRONG"
    elif score >= 65:
        return "GOOD"
    elif score >= 50:
        return "NEEDS WORK"
    return "WEAK"


def get_accuracy_color(score: float) -> str:
    if score >= 80:
        return "green"
    elif score >= 65:
        return "yellow"
    elif score >= 50:
        return "dark_orange"
    return "red"


def daily_card_target(stats) -> int:
    """Sum of per-subject goals when any is set, else the global daily goal."""
    specific = sum(goal or 0 for goal in stats.goals_by_subject.values())
    if specific > 0:
        return specific
    return stats.daily_card_goal or 1


def progress_percent(done: int, target: int) -> float:
    return min(100.0, 100.0 * done / max(target, 1))


def card_progress(stats) -> float:
    return progress_percent(stats.cards_reviewed_today, daily_card_target(stats))


def question_progress(stats) -> float:
    return progress_percent(stats.questions_answered_today, stats.daily_question_goal)


def _day_of(timestamp: float) -> date:
    return datetime.fromtimestamp(timestamp).date()


def reset_if_new_day(stats, now: float) -> bool:
    """Zero the daily counters when `now` falls on a later day than the last activity."""
    if _day_of(now) == _day_of(stats.last_study_timestamp):
        return False
    stats.cards_reviewed_today = 0
    stats.questions_answered_today = 0
    return True


def touch_study_day(stats, now: float) -> None:
    """Register study activity at `now`: roll daily counters and update the streak."""
    today = _day_of(now)
    last = _day_of(stats.last_study_timestamp)
    reset_if_new_day(stats, now)
    if today == last:
        stats.streak = max(stats.streak, 1)
    elif today - last == timedelta(days=1):
        stats.streak += 1
    else:
        stats.streak = 1
    stats.last_study_timestamp = now


def current_streak(stats, today: Optional[date] = None) -> int:
    """Streak as displayed: 0 once a whole day has passed without study."""
    today = today or date.today()
    if today - _day_of(stats.last_study_timestamp) > timedelta(days=1):
        return 0
    return stats.streak


def record_card_review(stats, subject_id: str, now: float) -> None:
    touch_study_day(stats, now)
    stats.cards_reviewed_today += 1
    stats.total_reviews += 1
    stats.reviews_by_subject[subject_id] = stats.reviews_by_subject.get(subject_id, 0) + 1


def record_quiz_result(stats, result, now: float) -> None:
    touch_study_day(stats, now)
    stats.quiz_history = record_session(stats.quiz_history, result)
    stats.questions_answered_today += result.total_questions


def set_subject_goal(stats, subject_id: str, goal: int) -> None:
    if goal < 0:
        raise ValueError("Goal cannot be negative")
    if goal == 0:
        stats.goals_by_subject.pop(subject_id, None)
    else:
        stats.goals_by_subject[subject_id] = goal


def get_study_stats(stats, today: Optional[date] = None) -> dict:
    history = stats.quiz_history
    return {
        "streak": current_streak(stats, today),
        "total_reviews": stats.total_reviews,
        "quizzes_taken": len(history),
        "avg_quiz_score": average_accuracy(history),
        "best_quiz_score": best_accuracy(history),
        "card_target": daily_card_target(stats),
        "card_progress": round(card_progress(stats), 1),
        "question_progress": round(question_progress(stats), 1),
    }
