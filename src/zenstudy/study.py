"""Application state: notebooks, stats, the active quiz, and when to persist them."""
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

from zenstudy import ai
from zenstudy.annotations import AnnotationEngine
from zenstudy.canvas import AnnotationCanvas
from zenstudy.dashboard import record_card_review, record_quiz_result, reset_if_new_day
from zenstudy.db import save_notebooks, save_stats
from zenstudy.errors import (
    AnalysisFailure, GenerationFailure, InsufficientContentError, PersistenceFailure,
    QuizStateError,
)
from zenstudy.flashcards import create_flashcard, delete_flashcard, find_flashcard, quiz_corpus, review_flashcard
from zenstudy.importer import delete_document, import_document
from zenstudy.models import GLOBAL_SUBJECT, Notebook, generate_id
from zenstudy.quiz import QuizSession
from zenstudy.seed import load_or_seed
from zenstudy.viewport import ViewportController

logger = logging.getLogger(__name__)


@dataclass
class QuizRequest:
    """A pending quiz generation, identified so late results can be discarded."""
    id: str
    subject_id: str
    cards: list = field(default_factory=list)


class StudyApp:
    def __init__(self, db_path: str, notebooks: list, stats):
        self.db_path = db_path
        self.notebooks = notebooks
        self.stats = stats
        self.quiz: Optional[QuizSession] = None
        self._pending: Optional[QuizRequest] = None

    @classmethod
    def load(cls, db_path: str, now: Optional[float] = None) -> "StudyApp":
        notebooks, stats = load_or_seed(db_path)
        reset_if_new_day(stats, time.time() if now is None else now)
        return cls(db_path, notebooks, stats)

    # --- persistence ---

    def persist(self) -> bool:
        """Save everything, retrying once. Returns False if both attempts fail."""
        for attempt in (1, 2):
            try:
                save_notebooks(self.db_path, self.notebooks)
                save_stats(self.db_path, self.stats)
                return True
            except PersistenceFailure as e:
                if attempt == 1:
                    logger.warning("Save failed, retrying: %s", e)
                else:
                    logger.error("Save failed twice, keeping changes in memory: %s", e)
        return False

    # --- notebooks, cards, documents ---

    def notebook(self, notebook_id: str) -> Notebook:
        for nb in self.notebooks:
            if nb.id == notebook_id:
                return nb
        raise KeyError(f"No notebook {notebook_id}")

    def create_notebook(self, name: str) -> Notebook:
        if not name or not name.strip():
            raise ValueError("Notebook name cannot be empty.")
        nb = Notebook(id=generate_id(), name=name.strip())
        self.notebooks.append(nb)
        self.persist()
        return nb

    def add_flashcard(self, notebook_id: str, question: str, answer: str):
        card = create_flashcard(self.notebook(notebook_id), question, answer)
        self.persist()
        return card

    def remove_flashcard(self, notebook_id: str, card_id: str) -> bool:
        removed = delete_flashcard(self.notebook(notebook_id), card_id)
        if removed:
            self.persist()
        return removed

    def review_card(self, card_id: str, rating: int, now: Optional[float] = None):
        card = find_flashcard(self.notebooks, card_id)
        if card is None:
            raise KeyError(f"No flashcard {card_id}")
        review_flashcard(card, rating)
        record_card_review(self.stats, card.notebook_id, time.time() if now is None else now)
        self.persist()
        return card

    def explain_card(self, card_id: str, client=None) -> str:
        card = find_flashcard(self.notebooks, card_id)
        if card is None:
            raise KeyError(f"No flashcard {card_id}")
        return ai.deepen_knowledge(card.question, card.answer, client=client)

    def add_document(self, notebook_id: str, file_path: str):
        doc = import_document(self.notebook(notebook_id), file_path)
        self.persist()
        return doc

    def remove_document(self, notebook_id: str, document_id: str) -> bool:
        removed = delete_document(self.notebook(notebook_id), document_id)
        if removed:
            self.persist()
        return removed

    def find_document(self, document_id: str):
        for nb in self.notebooks:
            for doc in nb.documents:
                if doc.id == document_id:
                    return doc
        raise KeyError(f"No document {document_id}")

    def summarize_document(self, document_id: str, client=None) -> str:
        """AI summary of an image document."""
        doc = self.find_document(document_id)
        if doc.kind != "image":
            raise ValueError(f"{doc.name} is not an image; only image pages can be summarized.")
        return ai.summarize_document(url2pathname(urlparse(doc.url).path), client=client)

    def save_annotations(self, document_id: str, annotations: list) -> None:
        self.find_document(document_id).annotations = list(annotations)
        self.persist()

    def open_canvas(self, document_id: str, viewport_width: float, **engine_options) -> AnnotationCanvas:
        """Annotation canvas for a document, persisting every stroke change."""
        doc = self.find_document(document_id)
        engine = AnnotationEngine(
            doc.annotations,
            on_change=lambda anns: self.save_annotations(document_id, anns),
            **engine_options,
        )
        viewport = ViewportController.for_document(viewport_width, doc.width or viewport_width)
        return AnnotationCanvas(engine, viewport)

    # --- quiz lifecycle ---

    def request_quiz(self, notebook_id: Optional[str] = None) -> QuizRequest:
        """Reserve a generation slot. Fails before any AI call if there are no cards."""
        cards = quiz_corpus(self.notebooks, notebook_id)
        if not cards:
            raise InsufficientContentError("Create at least one flashcard before taking a quiz.")
        self._pending = QuizRequest(
            id=generate_id(), subject_id=notebook_id or GLOBAL_SUBJECT, cards=cards,
        )
        return self._pending

    def apply_quiz(self, request: QuizRequest, questions) -> Optional[QuizSession]:
        """Start the session for `request`, unless it has been superseded or abandoned."""
        if self._pending is None or self._pending.id != request.id:
            logger.warning("Discarding stale quiz result for request %s", request.id)
            return None
        session = QuizSession(subject_id=request.subject_id, session_id=request.id)
        session.start(questions)
        self.quiz = session
        self._pending = None
        return session

    def abandon_quiz(self) -> None:
        self._pending = None
        self.quiz = None

    def start_quiz(self, notebook_id: Optional[str] = None,
                   generator: Optional[Callable] = None) -> Optional[QuizSession]:
        generator = generator or ai.generate_quiz_questions
        request = self.request_quiz(notebook_id)
        try:
            questions = generator(request.cards)
            if not questions:
                raise GenerationFailure("The AI returned no questions.")
            return self.apply_quiz(request, questions)
        except Exception:
            if self._pending is request:
                self._pending = None
            raise

    def finish_quiz(self, analyzer: Optional[Callable] = None,
                    now: Optional[float] = None) -> tuple:
        """Score, record and persist the active quiz, then ask for feedback.

        Returns (result, feedback). Feedback falls back to a fixed notice when
        the analysis fails; the result is saved either way.
        """
        if self.quiz is None:
            raise QuizStateError("No quiz in progress.")
        analyzer = analyzer or ai.analyze_quiz_performance
        now = time.time() if now is None else now
        result = self.quiz.finish(now)
        record_quiz_result(self.stats, result, now)
        self.persist()
        logger.info("Saved quiz %s: %d/%d", result.id, result.correct_answers, result.total_questions)
        try:
            feedback = analyzer(result.questions)
        except AnalysisFailure as e:
            logger.warning("%s", e)
            feedback = ai.ANALYSIS_FALLBACK
        return result, feedback
