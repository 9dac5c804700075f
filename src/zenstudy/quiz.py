"""Quiz session state machine: navigation, answers, scoring."""
import time
from enum import Enum
from typing import Optional

from zenstudy.errors import InsufficientContentError, QuizStateError
from zenstudy.models import (
    GLOBAL_SUBJECT, QuestionResult, QuizSessionResult, generate_id,
)


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


def is_correct(question, answer: Optional[str]) -> bool:
    """Exact, case-sensitive comparison of choice keys."""
    return answer is not None and answer == question.correct_key


def score_answers(questions, answers: dict) -> int:
    return sum(1 for i, q in enumerate(questions) if is_correct(q, answers.get(i)))


class QuizSession:
    def __init__(self, subject_id: str = GLOBAL_SUBJECT, session_id: Optional[str] = None):
        self.id = session_id or generate_id()
        self.subject_id = subject_id
        self.state = SessionState.NOT_STARTED
        self.questions = ()
        self.current_index = 0
        self.answers = {}
        self.result: Optional[QuizSessionResult] = None

    def start(self, questions) -> None:
        if self.state is not SessionState.NOT_STARTED:
            raise QuizStateError("Quiz session already started.")
        questions = tuple(questions or ())
        if not questions:
            raise InsufficientContentError("A quiz needs at least one question.")
        self.questions = questions
        self.current_index = 0
        self.answers = {}
        self.state = SessionState.IN_PROGRESS

    @property
    def current_question(self):
        self._require_in_progress()
        return self.questions[self.current_index]

    @property
    def is_last(self) -> bool:
        return self.current_index == len(self.questions) - 1

    @property
    def can_go_next(self) -> bool:
        return (
            self.state is SessionState.IN_PROGRESS
            and not self.is_last
            and self.current_index in self.answers
        )

    @property
    def can_finish(self) -> bool:
        return (
            self.state is SessionState.IN_PROGRESS
            and (len(self.questions) - 1) in self.answers
        )

    def select_answer(self, index: int, choice_key: str) -> None:
        """Record or overwrite the answer for question `index`.

        Keys outside the question's options are kept and score as wrong.
        """
        self._require_in_progress()
        if not 0 <= index < len(self.questions):
            raise IndexError(f"No question at index {index}")
        self.answers[index] = choice_key

    def answer_current(self, choice_key: str) -> None:
        self.select_answer(self.current_index, choice_key)

    def go_next(self) -> bool:
        if not self.can_go_next:
            return False
        self.current_index += 1
        return True

    def go_previous(self) -> bool:
        if self.state is not SessionState.IN_PROGRESS or self.current_index == 0:
            return False
        self.current_index -= 1
        return True

    def finish(self, now: Optional[float] = None) -> QuizSessionResult:
        """Score the session and freeze it into an immutable result."""
        if self.state is SessionState.COMPLETED:
            raise QuizStateError("Quiz session already finished.")
        if not self.can_finish:
            raise QuizStateError("Answer the final question before finishing.")
        results = tuple(
            QuestionResult(
                question=q,
                user_answer=self.answers.get(i),
                is_correct=is_correct(q, self.answers.get(i)),
            )
            for i, q in enumerate(self.questions)
        )
        self.result = QuizSessionResult(
            id=generate_id(),
            subject_id=self.subject_id,
            timestamp=time.time() if now is None else now,
            total_questions=len(self.questions),
            correct_answers=score_answers(self.questions, self.answers),
            questions=results,
        )
        self.state = SessionState.COMPLETED
        return self.result

    def _require_in_progress(self) -> None:
        if self.state is not SessionState.IN_PROGRESS:
            raise QuizStateError(f"Quiz session is {self.state.value}.")
