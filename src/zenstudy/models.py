"""Data classes for the study domain model."""
import time
import uuid
from dataclasses import dataclass, field, asdict
from typing import Optional

GLOBAL_SUBJECT = "global"
GENERAL_TOPIC = "General"


def generate_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass
class Annotation:
    id: str
    kind: str  # "draw" | "highlight"
    points: list
    color: str
    width: float
    opacity: float = 1.0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["points"] = [[p.x, p.y] for p in self.points]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Annotation":
        return cls(
            id=data["id"],
            kind=data.get("kind", "draw"),
            points=[Point(float(x), float(y)) for x, y in data.get("points", [])],
            color=data.get("color", "#4f46e5"),
            width=float(data.get("width", 3)),
            opacity=float(data.get("opacity", 1.0)),
        )


@dataclass
class Document:
    id: str
    name: str
    kind: str  # "pdf" | "image"
    url: str
    annotations: list = field(default_factory=list)
    width: Optional[float] = None
    height: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind,
            "url": self.url,
            "annotations": [a.to_dict() for a in self.annotations],
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Document":
        return cls(
            id=data["id"],
            name=data["name"],
            kind=data.get("kind", "image"),
            url=data.get("url", ""),
            annotations=[Annotation.from_dict(a) for a in data.get("annotations", [])],
            width=data.get("width"),
            height=data.get("height"),
        )


@dataclass
class Flashcard:
    id: str
    notebook_id: str
    question: str
    answer: str
    created_at: float = field(default_factory=time.time)
    mastery_level: str = "new"
    ease_factor: float = 2.5
    interval: int = 0
    repetitions: int = 0
    next_review: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Flashcard":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class Notebook:
    id: str
    name: str
    documents: list = field(default_factory=list)
    flashcards: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "documents": [d.to_dict() for d in self.documents],
            "flashcards": [f.to_dict() for f in self.flashcards],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Notebook":
        return cls(
            id=data["id"],
            name=data["name"],
            documents=[Document.from_dict(d) for d in data.get("documents", [])],
            flashcards=[Flashcard.from_dict(f) for f in data.get("flashcards", [])],
        )


@dataclass(frozen=True)
class QuizQuestion:
    topic: str
    prompt: str
    options: dict  # choice key -> option text, "a".."e"
    correct_key: str
    explanation: str = ""
    source: str = ""

    def to_dict(self) -> dict:
        return {
            "topic": self.topic,
            "prompt": self.prompt,
            "options": dict(self.options),
            "correct_key": self.correct_key,
            "explanation": self.explanation,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuizQuestion":
        return cls(
            topic=data.get("topic", ""),
            prompt=data["prompt"],
            options=dict(data["options"]),
            correct_key=data["correct_key"],
            explanation=data.get("explanation", ""),
            source=data.get("source", ""),
        )


@dataclass(frozen=True)
class QuestionResult:
    question: QuizQuestion
    user_answer: Optional[str]
    is_correct: bool


@dataclass(frozen=True)
class QuizSessionResult:
    id: str
    subject_id: str
    timestamp: float
    total_questions: int
    correct_answers: int
    questions: tuple = ()

    @property
    def accuracy(self) -> float:
        """Fraction of questions answered correctly, 0.0 for an empty session."""
        if not self.total_questions:
            return 0.0
        return self.correct_answers / self.total_questions

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "subject_id": self.subject_id,
            "timestamp": self.timestamp,
            "total_questions": self.total_questions,
            "correct_answers": self.correct_answers,
            "questions": [
                {
                    "question": r.question.to_dict(),
                    "user_answer": r.user_answer,
                    "is_correct": r.is_correct,
                }
                for r in self.questions
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuizSessionResult":
        return cls(
            id=data["id"],
            subject_id=data.get("subject_id", GLOBAL_SUBJECT),
            timestamp=data["timestamp"],
            total_questions=data["total_questions"],
            correct_answers=data["correct_answers"],
            questions=tuple(
                QuestionResult(
                    question=QuizQuestion.from_dict(r["question"]),
                    user_answer=r.get("user_answer"),
                    is_correct=bool(r["is_correct"]),
                )
                for r in data.get("questions", [])
            ),
        )


@dataclass
class UserStats:
    daily_card_goal: int = 20
    daily_question_goal: int = 10
    goals_by_subject: dict = field(default_factory=dict)
    cards_reviewed_today: int = 0
    questions_answered_today: int = 0
    reviews_by_subject: dict = field(default_factory=dict)
    streak: int = 0
    last_study_timestamp: float = field(default_factory=time.time)
    total_reviews: int = 0
    quiz_history: list = field(default_factory=list)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["quiz_history"] = [r.to_dict() for r in self.quiz_history]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "UserStats":
        """Build stats from a stored payload, filling missing fields with defaults."""
        stats = cls()
        for key, value in data.items():
            if key == "quiz_history":
                stats.quiz_history = [QuizSessionResult.from_dict(r) for r in value]
            elif key in cls.__dataclass_fields__:
                setattr(stats, key, value)
        return stats
