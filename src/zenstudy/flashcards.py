"""Flashcard management, plain-text extraction and SM-2 review."""
import time
from datetime import date
from typing import Optional

from bs4 import BeautifulSoup

from zenstudy.models import Flashcard, generate_id
from zenstudy.sm2 import mastery_for, sm2_update


def plain_text(markup: str) -> str:
    """Strip rich-text markup down to the visible text."""
    if not markup:
        return ""
    return BeautifulSoup(markup, "html.parser").get_text(" ", strip=True)


def is_blank(markup: str) -> bool:
    return not plain_text(markup)


def create_flashcard(notebook, question: str, answer: str, now: Optional[float] = None) -> Flashcard:
    """Add a card to the front of the notebook's list."""
    if is_blank(question) or is_blank(answer):
        raise ValueError("Flashcards need both a question and an answer.")
    card = Flashcard(
        id=generate_id(),
        notebook_id=notebook.id,
        question=question,
        answer=answer,
        created_at=time.time() if now is None else now,
    )
    notebook.flashcards.insert(0, card)
    return card


def delete_flashcard(notebook, card_id: str) -> bool:
    before = len(notebook.flashcards)
    notebook.flashcards = [c for c in notebook.flashcards if c.id != card_id]
    return len(notebook.flashcards) != before


def find_flashcard(notebooks, card_id: str) -> Optional[Flashcard]:
    for nb in notebooks:
        for card in nb.flashcards:
            if card.id == card_id:
                return card
    return None


def quiz_corpus(notebooks, notebook_id: Optional[str] = None) -> list:
    """Cards a quiz is generated from: one notebook's, or every card."""
    if notebook_id is not None:
        return [c for nb in notebooks if nb.id == notebook_id for c in nb.flashcards]
    return [c for nb in notebooks for c in nb.flashcards]


def get_due_cards(cards, today: Optional[date] = None, limit: int = 15) -> list:
    """Cards never reviewed come first, then the most overdue."""
    today_iso = (today or date.today()).isoformat()
    due = [c for c in cards if c.next_review is None or c.next_review <= today_iso]
    due.sort(key=lambda c: (c.next_review is not None, c.next_review or ""))
    return due[:limit]


def review_flashcard(card: Flashcard, rating: int, today: Optional[date] = None) -> Flashcard:
    schedule = sm2_update(
        quality=rating,
        repetitions=card.repetitions,
        ease_factor=card.ease_factor,
        interval=card.interval,
    )
    card.ease_factor = schedule.ease_factor
    card.interval = schedule.interval
    card.repetitions = schedule.repetitions
    card.next_review = schedule.next_review(today or date.today())
    card.mastery_level = mastery_for(schedule)
    return card
