"""Quiz history and weak-topic analytics."""
from zenstudy.models import GENERAL_TOPIC

HOT_TOPIC_LIMIT = 5


def record_session(history: list, result) -> list:
    """Return a new history with `result` in front (most recent first)."""
    return [result] + list(history or [])


def hot_topics(history: list, limit: int = HOT_TOPIC_LIMIT) -> list[dict]:
    """Topics sorted by accuracy, worst first.

    Every answered question across all sessions counts once. Ties keep the
    order in which topics were first seen.
    """
    totals = {}
    for session in history or []:
        for item in session.questions:
            topic = (item.question.topic or "").strip() or GENERAL_TOPIC
            bucket = totals.setdefault(topic, {"total": 0, "correct": 0})
            bucket["total"] += 1
            if item.is_correct:
                bucket["correct"] += 1
    ranked = sorted(
        totals.items(), key=lambda kv: kv[1]["correct"] / kv[1]["total"]
    )
    return [
        {
            "topic": topic,
            "total": data["total"],
            "correct": data["correct"],
            "accuracy": round(data["correct"] / data["total"] * 100, 1),
        }
        for topic, data in ranked[:limit]
    ]


def subject_summary(history: list, subjects) -> list[dict]:
    """Mean per-session accuracy for each subject (notebook).

    Sessions are weighted equally regardless of length. A subject with no
    sessions reports 0.
    """
    summary = []
    for subject in subjects:
        sessions = [s for s in history or [] if s.subject_id == subject.id]
        accuracy = (
            sum(s.accuracy for s in sessions) / len(sessions) if sessions else 0.0
        )
        summary.append({
            "subject_id": subject.id,
            "name": subject.name,
            "sessions": len(sessions),
            "accuracy": round(accuracy * 100, 1),
        })
    return summary


def best_accuracy(history: list) -> float:
    if not history:
        return 0.0
    return round(max(s.accuracy for s in history) * 100, 1)


def average_accuracy(history: list) -> float:
    if not history:
        return 0.0
    return round(sum(s.accuracy for s in history) / len(history) * 100, 1)


def sessions_for_subject(history: list, subject_id: str) -> list:
    return [s for s in history or [] if s.subject_id == subject_id]
