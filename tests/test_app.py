import pytest
from unittest.mock import patch
from zenstudy.app import SessionExitRequested, session_prompt, session_int_prompt


def test_session_prompt_raises_on_q():
    with patch("zenstudy.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_raises_on_menu():
    with patch("zenstudy.app.Prompt.ask", return_value=" MENU "):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_returns_normal_input():
    with patch("zenstudy.app.Prompt.ask", return_value="hello"):
        assert session_prompt("test prompt") == "hello"


def test_session_int_prompt_raises_on_q():
    with patch("zenstudy.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_int_prompt("rate", choices=["0", "1", "2", "3", "4", "5"])


def test_session_int_prompt_returns_normal_input():
    with patch("zenstudy.app.Prompt.ask", return_value="3"):
        assert session_int_prompt("rate", choices=["0", "1", "2", "3", "4", "5"]) == 3


from PIL import Image

from zenstudy.app import (
    cmd_dashboard, cmd_history, cmd_quiz, cmd_summary, run_flashcard_session, run_quiz_session,
)
from zenstudy.db import load_stats
from zenstudy.seed import SEED_NOTEBOOK_ID
from zenstudy.study import StudyApp


def test_run_flashcard_session_reviews_cards(tmp_db):
    app = StudyApp.load(tmp_db)
    cards = app.notebook(SEED_NOTEBOOK_ID).flashcards
    with patch("zenstudy.app.Prompt.ask", side_effect=["", "4"]):
        assert run_flashcard_session(app, cards) == 1
    assert load_stats(tmp_db).total_reviews == 1


def test_run_flashcard_session_exits_on_q(tmp_db):
    """User types 'q' on the second card's reveal prompt; the first review is kept."""
    app = StudyApp.load(tmp_db)
    app.add_flashcard(SEED_NOTEBOOK_ID, "Second?", "Yes")
    cards = app.notebook(SEED_NOTEBOOK_ID).flashcards
    with patch("zenstudy.app.Prompt.ask", side_effect=["", "5", "q"]):
        with pytest.raises(SessionExitRequested):
            run_flashcard_session(app, cards)
    assert load_stats(tmp_db).total_reviews == 1


def test_run_flashcard_session_empty(tmp_db):
    app = StudyApp.load(tmp_db)
    assert run_flashcard_session(app, []) == 0


def test_run_quiz_session_all_correct(tmp_db, five_questions):
    app = StudyApp.load(tmp_db)
    app.start_quiz(generator=lambda cards: five_questions)
    with patch("zenstudy.app.Prompt.ask", side_effect=["a", "b", "c", "d", "e", "y"]), \
            patch("zenstudy.ai.analyze_quiz_performance", return_value="Nice work"):
        result = run_quiz_session(app)
    assert result.correct_answers == 5
    assert load_stats(tmp_db).quiz_history[0].id == result.id


def test_run_quiz_session_goes_back_and_changes_answer(tmp_db, five_questions):
    app = StudyApp.load(tmp_db)
    app.start_quiz(generator=lambda cards: five_questions)
    answers = ["a", "p", "b", "b", "c", "d", "e", "y"]
    with patch("zenstudy.app.Prompt.ask", side_effect=answers), \
            patch("zenstudy.ai.analyze_quiz_performance", return_value="ok"):
        result = run_quiz_session(app)
    assert result.correct_answers == 4
    assert result.questions[0].user_answer == "b"


def test_run_quiz_session_declining_finish_stays_on_last(tmp_db, five_questions):
    app = StudyApp.load(tmp_db)
    app.start_quiz(generator=lambda cards: five_questions)
    answers = ["a", "b", "c", "d", "a", "n", "e", "y"]
    with patch("zenstudy.app.Prompt.ask", side_effect=answers), \
            patch("zenstudy.ai.analyze_quiz_performance", return_value="ok"):
        result = run_quiz_session(app)
    assert result.correct_answers == 5


def test_cmd_quiz_exit_abandons_session(tmp_db, five_questions):
    app = StudyApp.load(tmp_db)
    with patch("zenstudy.app.IntPrompt.ask", return_value=1), \
            patch("zenstudy.ai.generate_quiz_questions", return_value=five_questions), \
            patch("zenstudy.app.Prompt.ask", return_value="q"):
        cmd_quiz(app)
    assert app.quiz is None
    assert load_stats(tmp_db).quiz_history == []


def test_cmd_history_and_dashboard_render(tmp_db, five_questions):
    app = StudyApp.load(tmp_db)
    app.start_quiz(generator=lambda cards: five_questions)
    for key in ["a", "a", "a", "a", "a"]:
        app.quiz.answer_current(key)
        app.quiz.go_next()
    app.finish_quiz(analyzer=lambda results: "ok")
    cmd_history(app)
    cmd_dashboard(app)


def test_cmd_summary_uses_picked_image(tmp_db, tmp_path):
    app = StudyApp.load(tmp_db)
    path = tmp_path / "page.png"
    Image.new("RGB", (10, 10)).save(path)
    app.add_document(SEED_NOTEBOOK_ID, str(path))
    with patch("zenstudy.app.IntPrompt.ask", return_value=1), \
            patch("zenstudy.ai.summarize_document", return_value="Summary") as summarize:
        cmd_summary(app)
    assert summarize.call_args.args[0] == str(path.resolve())
