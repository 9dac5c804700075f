# tests/test_seed.py
from unittest.mock import patch

from zenstudy.dashboard import daily_card_target
from zenstudy.db import init_db, load_notebooks, load_stats, save_notebooks, save_stats
from zenstudy.errors import PersistenceFailure
from zenstudy.models import Notebook, UserStats
from zenstudy.seed import SEED_NOTEBOOK_ID, default_notebooks, load_or_seed


def test_default_notebook_has_one_flashcard():
    [nb] = default_notebooks()
    assert nb.id == SEED_NOTEBOOK_ID
    assert len(nb.flashcards) == 1
    assert nb.flashcards[0].notebook_id == nb.id


def test_load_or_seed_on_fresh_database(tmp_db):
    notebooks, stats = load_or_seed(tmp_db)
    assert [nb.id for nb in notebooks] == [SEED_NOTEBOOK_ID]
    assert stats.goals_by_subject == {SEED_NOTEBOOK_ID: 10}
    assert daily_card_target(stats) == 10


def test_seed_is_written_to_empty_store(tmp_db):
    notebooks, stats = load_or_seed(tmp_db)
    assert load_notebooks(tmp_db) == notebooks
    assert load_stats(tmp_db) == stats


def test_load_or_seed_prefers_stored_data(tmp_db):
    init_db(tmp_db)
    save_notebooks(tmp_db, [Notebook(id="mine", name="Mine")])
    save_stats(tmp_db, UserStats(streak=7))
    notebooks, stats = load_or_seed(tmp_db)
    assert [nb.id for nb in notebooks] == ["mine"]
    assert stats.streak == 7


def test_load_or_seed_recovers_from_load_failure(tmp_db):
    with patch("zenstudy.seed.load_notebooks", side_effect=PersistenceFailure("boom")), \
            patch("zenstudy.seed.load_stats", side_effect=PersistenceFailure("boom")):
        notebooks, stats = load_or_seed(tmp_db)
    assert notebooks[0].id == SEED_NOTEBOOK_ID
    assert stats.streak == 0
    assert load_notebooks(tmp_db) is None
