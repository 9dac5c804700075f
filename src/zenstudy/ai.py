"""Gemini collaborators: quiz generation, card explanations, quiz feedback."""
import json
import logging
import os
import time
from pathlib import Path

from google import genai
from google.genai import types

from zenstudy.errors import AnalysisFailure, GenerationFailure, InsufficientContentError
from zenstudy.flashcards import plain_text
from zenstudy.models import QuizQuestion

logger = logging.getLogger(__name__)

MODEL = os.getenv("ZENSTUDY_MODEL", "gemini-2.5-flash")
QUIZ_LENGTH = 5
MAX_QUIZ_CARDS = 20
CHOICE_KEYS = ("a", "b", "c", "d", "e")

EXPLAIN_FALLBACK = "Could not reach the tutor right now. Try again later."
SUMMARY_FALLBACK = "Could not summarize this document right now."
ANALYSIS_FALLBACK = "Quiz finished and saved to your history."

QUIZ_SCHEMA = {
    "type": "object",
    "properties": {
        "questions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "source": {"type": "string"},
                    "topic": {"type": "string"},
                    "prompt": {"type": "string"},
                    "options": {
                        "type": "object",
                        "properties": {key: {"type": "string"} for key in CHOICE_KEYS},
                        "required": list(CHOICE_KEYS),
                    },
                    "correct": {"type": "string"},
                    "explanation": {"type": "string"},
                },
                "required": ["source", "topic", "prompt", "options", "correct", "explanation"],
            },
        }
    },
    "required": ["questions"],
}

_client = None


def get_client():
    """Shared Gemini client, created on first use."""
    global _client
    if _client is None:
        _client = genai.Client(api_key=os.getenv("GOOGLE_API_KEY"))
    return _client


def _generate(client, contents, config=None) -> str:
    client = client or get_client()
    start = time.time()
    resp = client.models.generate_content(model=MODEL, contents=contents, config=config)
    text = (getattr(resp, "text", None) or "").strip()
    logger.info("Gemini call finished in %.2fs (%d chars)", time.time() - start, len(text))
    return text


def clean_json(text: str) -> str:
    if not text:
        return '{"questions": []}'
    return text.replace("```json", "").replace("```", "").strip()


def build_quiz_prompt(cards) -> str:
    lines = [
        f"FC{i}: Q: {plain_text(card.question)} | A: {plain_text(card.answer)}"
        for i, card in enumerate(cards[:MAX_QUIZ_CARDS], 1)
    ]
    return (
        "You are an expert exam writer. Build a multiple-choice practice exam "
        "(options a to e) based ONLY on these flashcards:\n"
        + "\n".join(lines)
        + f"\n\nWrite {QUIZ_LENGTH} questions. For each give the exam board or source "
        "style, a short topic label, the prompt, five options, the correct option key "
        "and an explanation. Reply with JSON only, following the schema."
    )


def parse_quiz_payload(text: str) -> list:
    """Validate the model's JSON into exactly QUIZ_LENGTH questions, or fail."""
    try:
        data = json.loads(clean_json(text))
    except ValueError as e:
        raise GenerationFailure(f"Quiz response was not valid JSON: {e}") from e
    items = data.get("questions") if isinstance(data, dict) else data
    if not isinstance(items, list) or len(items) != QUIZ_LENGTH:
        count = len(items) if isinstance(items, list) else 0
        raise GenerationFailure(f"Expected {QUIZ_LENGTH} questions, got {count}")
    questions = []
    for item in items:
        try:
            options = {key: str(item["options"][key]).strip() for key in CHOICE_KEYS}
            if set(item["options"]) != set(CHOICE_KEYS):
                raise KeyError("options")
            correct = str(item["correct"]).strip().lower()
            if correct not in CHOICE_KEYS:
                raise ValueError(f"correct key {correct!r}")
            questions.append(QuizQuestion(
                topic=str(item.get("topic") or "").strip(),
                prompt=str(item["prompt"]).strip(),
                options=options,
                correct_key=correct,
                explanation=str(item.get("explanation") or "").strip(),
                source=str(item.get("source") or "").strip(),
            ))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise GenerationFailure(f"Malformed quiz question: {e}") from e
    return questions


def generate_quiz_questions(cards, client=None) -> list:
    """Ask the model for a quiz built from up to MAX_QUIZ_CARDS flashcards."""
    if not cards:
        raise InsufficientContentError("Create at least one flashcard before taking a quiz.")
    prompt = build_quiz_prompt(list(cards))
    try:
        text = _generate(client, prompt, config={
            "temperature": 0.7,
            "response_mime_type": "application/json",
            "response_schema": QUIZ_SCHEMA,
        })
    except Exception as e:
        logger.warning("Quiz generation failed: %s", e)
        raise GenerationFailure("The AI could not generate a quiz.") from e
    return parse_quiz_payload(text)


def deepen_knowledge(question: str, answer: str, client=None) -> str:
    """Tutor-style explanation of one card. Falls back to a notice on failure."""
    prompt = (
        "You are a private tutor. Explain why this answer is right:\n"
        f"Q: {plain_text(question)}\n"
        f"A: {plain_text(answer)}\n"
        "Use an analogy and a practical example. Markdown."
    )
    try:
        return _generate(client, prompt) or EXPLAIN_FALLBACK
    except Exception as e:
        logger.warning("Explanation failed: %s", e)
        return EXPLAIN_FALLBACK


def summarize_result(results) -> str:
    lines = []
    for i, r in enumerate(results, 1):
        outcome = "correct" if r.is_correct else "wrong"
        if r.is_correct:
            detail = "none"
        else:
            detail = f"chose {r.user_answer} but the answer was {r.question.correct_key}"
        lines.append(f"Q{i}: {outcome} - TOPIC: {r.question.topic or 'General'} | ERROR: {detail}")
    return "\n".join(lines)


def analyze_quiz_performance(results, client=None) -> str:
    prompt = (
        "You are a student performance analyst. Review this practice exam and write "
        "technical, motivating feedback.\nRESULTS:\n"
        + summarize_result(results)
        + "\n\nWrite a Markdown report covering:\n"
        "1. **Diagnosis by topic**: which topics need immediate re-study.\n"
        "2. **Error pattern**: confused concepts or lack of attention?\n"
        "3. **Next steps**: three concrete actions for the next session."
    )
    try:
        text = _generate(client, prompt)
    except Exception as e:
        raise AnalysisFailure(f"Quiz analysis failed: {e}") from e
    if not text:
        raise AnalysisFailure("Quiz analysis came back empty.")
    return text


def summarize_document(image_path: str, client=None) -> str:
    """Executive summary of a page image. Falls back to a notice on failure."""
    path = Path(image_path)
    mime = "image/png" if path.suffix.lower() == ".png" else "image/jpeg"
    try:
        image = types.Part.from_bytes(data=path.read_bytes(), mime_type=mime)
        return _generate(client, [
            image,
            "You are an academic tutor. Summarize this material with its essence, "
            "critical points, and common mistakes to watch for.",
        ], config={"temperature": 0.15}) or SUMMARY_FALLBACK
    except Exception as e:
        logger.warning("Document summary failed: %s", e)
        return SUMMARY_FALLBACK
