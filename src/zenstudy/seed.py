"""Default data for a first run or an unreadable store."""
import logging

from zenstudy.db import init_db, load_notebooks, load_stats, save_notebooks, save_stats
from zenstudy.errors import PersistenceFailure
from zenstudy.models import Flashcard, Notebook, UserStats

logger = logging.getLogger(__name__)

SEED_NOTEBOOK_ID = "seed-nb-1"

SEED_CARD_GOAL = 10


def default_notebooks() -> list:
    """One example notebook holding one example flashcard."""
    card = Flashcard(
        id="seed-1",
        notebook_id=SEED_NOTEBOOK_ID,
        question="<b>What are the founding principles of a federal republic's constitution?</b>",
        answer=(
            "Sovereignty, citizenship, human dignity, the social value of work "
            "and free enterprise, and political pluralism."
        ),
    )
    return [Notebook(id=SEED_NOTEBOOK_ID, name="Constitutional Law", flashcards=[card])]


def default_stats() -> UserStats:
    return UserStats(goals_by_subject={SEED_NOTEBOOK_ID: SEED_CARD_GOAL})


def load_or_seed(db_path: str) -> tuple:
    """Load notebooks and stats, seeding whatever is missing or unreadable.

    Seed data is written back only to an empty store; an unreadable one is
    left alone until the next successful save.
    """
    readable = True
    try:
        init_db(db_path)
        notebooks = load_notebooks(db_path)
    except PersistenceFailure as e:
        logger.warning("Falling back to seed notebooks: %s", e)
        notebooks, readable = None, False
    try:
        stats = load_stats(db_path)
    except PersistenceFailure as e:
        logger.warning("Falling back to default stats: %s", e)
        stats, readable = None, False
    if notebooks is None and stats is None and readable:
        logger.info("Seeding default notebook")
        notebooks, stats = default_notebooks(), default_stats()
        try:
            save_notebooks(db_path, notebooks)
            save_stats(db_path, stats)
        except PersistenceFailure as e:
            logger.warning("Could not store seed data: %s", e)
    if not notebooks:
        notebooks = default_notebooks()
    if stats is None:
        stats = default_stats()
    return notebooks, stats
