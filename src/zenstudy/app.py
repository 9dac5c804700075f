"""Interactive CLI application."""
import logging
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt, IntPrompt
from rich.table import Table

from zenstudy.dashboard import get_accuracy_color, get_accuracy_label, get_study_stats
from zenstudy.db import DEFAULT_DB_PATH
from zenstudy.errors import StudyError
from zenstudy.flashcards import get_due_cards, plain_text
from zenstudy.review import hot_topics, subject_summary
from zenstudy.study import StudyApp

console = Console()

EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the user leaves a flashcard or quiz session early."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list) -> int:
    answer = session_prompt(prompt, choices=choices + list(EXIT_WORDS), show_choices=False)
    return int(answer)


def show_welcome():
    console.print(Panel(
        "[bold]ZenStudy[/bold]\n[dim]Notebooks, flashcards and AI practice exams[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("notebooks", "List notebooks"),
        ("new", "Create a notebook"),
        ("card", "Add a flashcard"),
        ("review", "Flashcard drill"),
        ("quiz", "AI practice exam"),
        ("explain", "Deepen a flashcard with the AI tutor"),
        ("import", "Add a PDF or image to a notebook"),
        ("documents", "Documents and annotations"),
        ("summary", "AI summary of an image page"),
        ("history", "Past quizzes"),
        ("dashboard", "Goals, streak and weak topics"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def choose_notebook(app: StudyApp, allow_all: bool = False):
    """Prompt for a notebook; returns its id, or None for 'all' when allowed."""
    for i, nb in enumerate(app.notebooks, 1):
        console.print(f"  [cyan]{i}[/cyan]) {nb.name} [dim]({len(nb.flashcards)} cards)[/dim]")
    choices = [str(i) for i in range(1, len(app.notebooks) + 1)]
    if allow_all:
        console.print("  [cyan]0[/cyan]) All notebooks")
        choices.insert(0, "0")
    picked = IntPrompt.ask("Select notebook", choices=choices)
    if picked == 0:
        return None
    return app.notebooks[picked - 1].id


def run_flashcard_session(app: StudyApp, cards: list) -> int:
    if not cards:
        console.print("[yellow]No flashcards due right now![/yellow]")
        return 0
    console.print(f"\n[bold]Flashcard Session[/bold] — {len(cards)} cards\n")
    reviewed = 0
    for i, card in enumerate(cards, 1):
        console.print(Panel(plain_text(card.question), title=f"Card {i}/{len(cards)}", border_style="cyan"))
        session_prompt("[dim]Press Enter to reveal answer[/dim]", default="", show_default=False)
        console.print(Panel(plain_text(card.answer), border_style="green"))
        rating = session_int_prompt(
            "Rate yourself (0=forgot, 3=hard, 4=good, 5=easy)", choices=["0", "1", "2", "3", "4", "5"],
        )
        app.review_card(card.id, rating)
        reviewed += 1
        console.print()
    return reviewed


def show_question(session) -> None:
    q = session.current_question
    console.print(
        f"\n[bold]Q{session.current_index + 1}/{len(session.questions)}.[/bold] "
        f"[dim]{q.source} · {q.topic}[/dim]\n{q.prompt}\n"
    )
    chosen = session.answers.get(session.current_index)
    for key, text in q.options.items():
        marker = "[green]>[/green]" if key == chosen else " "
        console.print(f" {marker}[cyan]{key})[/cyan] {text}")


def run_quiz_session(app: StudyApp):
    """Walk the active quiz. 'p' goes back; answering moves forward."""
    session = app.quiz
    while True:
        show_question(session)
        keys = list(session.current_question.options)
        nav = ["p"] if session.current_index > 0 else []
        answer = session_prompt("\nYour answer", choices=keys + nav + list(EXIT_WORDS), show_choices=False)
        if answer == "p":
            session.go_previous()
            continue
        session.answer_current(answer)
        if session.is_last:
            if Prompt.ask("Finish the quiz?", choices=["y", "n"], default="y") == "y":
                break
            continue
        session.go_next()

    with console.status("Saving and analysing your quiz..."):
        result, feedback = app.finish_quiz()
    pct = result.accuracy * 100
    console.print(f"\n[bold]Score: {result.correct_answers}/{result.total_questions} ({pct:.0f}%)[/bold]\n")
    for i, r in enumerate(result.questions, 1):
        if r.is_correct:
            console.print(f"  Q{i} [green]Correct[/green]")
        else:
            console.print(f"  Q{i} [red]Incorrect[/red] — you chose {r.user_answer}, answer: [green]{r.question.correct_key}[/green]")
        if r.question.explanation:
            console.print(f"     [dim]{r.question.explanation}[/dim]")
    console.print(Panel(Markdown(feedback), title="Feedback", border_style="magenta"))
    return result


def cmd_notebooks(app: StudyApp):
    table = Table(title="Notebooks")
    table.add_column("Name", style="cyan")
    table.add_column("Cards", justify="right")
    table.add_column("Documents", justify="right")
    for nb in app.notebooks:
        table.add_row(nb.name, str(len(nb.flashcards)), str(len(nb.documents)))
    console.print(table)


def cmd_new(app: StudyApp):
    name = Prompt.ask("Notebook name")
    nb = app.create_notebook(name)
    console.print(f"[green]Created {nb.name}[/green]")


def cmd_card(app: StudyApp):
    notebook_id = choose_notebook(app)
    question = Prompt.ask("Question")
    answer = Prompt.ask("Answer")
    app.add_flashcard(notebook_id, question, answer)
    console.print("[green]Flashcard saved.[/green]")


def cmd_review(app: StudyApp):
    console.print("\n[bold]Flashcard Drill[/bold]")
    notebook_id = choose_notebook(app, allow_all=True)
    cards = [c for nb in app.notebooks if notebook_id in (None, nb.id) for c in nb.flashcards]
    run_flashcard_session(app, get_due_cards(cards))


def cmd_quiz(app: StudyApp):
    console.print("\n[bold]Practice Quiz[/bold]")
    notebook_id = choose_notebook(app, allow_all=True)
    with console.status("Generating your quiz..."):
        session = app.start_quiz(notebook_id)
    if session is None:
        return
    try:
        run_quiz_session(app)
    except SessionExitRequested:
        app.abandon_quiz()
        console.print("[dim]Quiz abandoned.[/dim]")


def cmd_explain(app: StudyApp):
    notebook_id = choose_notebook(app)
    cards = app.notebook(notebook_id).flashcards
    if not cards:
        console.print("[yellow]This notebook has no flashcards.[/yellow]")
        return
    for i, card in enumerate(cards, 1):
        console.print(f"  [cyan]{i}[/cyan]) {plain_text(card.question)}")
    picked = IntPrompt.ask("Select card", choices=[str(i) for i in range(1, len(cards) + 1)])
    with console.status("Asking the tutor..."):
        text = app.explain_card(cards[picked - 1].id)
    console.print(Panel(Markdown(text), title="Tutor", border_style="green"))


def cmd_import(app: StudyApp):
    notebook_id = choose_notebook(app)
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    doc = app.add_document(notebook_id, file_path)
    console.print(f"[green]Imported {doc.name} ({doc.kind}, {doc.width:.0f}x{doc.height:.0f})[/green]")


def cmd_documents(app: StudyApp):
    table = Table(title="Documents")
    table.add_column("Notebook", style="cyan")
    table.add_column("Document")
    table.add_column("Type")
    table.add_column("Strokes", justify="right")
    table.add_column("Highlights", justify="right")
    for nb in app.notebooks:
        for doc in nb.documents:
            highlights = sum(1 for a in doc.annotations if a.kind == "highlight")
            table.add_row(nb.name, doc.name, doc.kind,
                          str(len(doc.annotations) - highlights), str(highlights))
    console.print(table)


def cmd_summary(app: StudyApp):
    docs = [doc for nb in app.notebooks for doc in nb.documents if doc.kind == "image"]
    if not docs:
        console.print("[yellow]Import an image page first.[/yellow]")
        return
    for i, doc in enumerate(docs, 1):
        console.print(f"  [cyan]{i}[/cyan]) {doc.name}")
    picked = IntPrompt.ask("Select document", choices=[str(i) for i in range(1, len(docs) + 1)])
    with console.status("Summarizing..."):
        text = app.summarize_document(docs[picked - 1].id)
    console.print(Panel(Markdown(text), title=docs[picked - 1].name, border_style="green"))


def cmd_history(app: StudyApp):
    history = app.stats.quiz_history
    if not history:
        console.print("[yellow]No quizzes taken yet.[/yellow]")
        return
    names = {nb.id: nb.name for nb in app.notebooks}
    table = Table(title="Quiz History")
    table.add_column("#", justify="right")
    table.add_column("Subject", style="cyan")
    table.add_column("Score", justify="right")
    for i, result in enumerate(history, 1):
        pct = result.accuracy * 100
        color = get_accuracy_color(pct)
        table.add_row(
            str(i),
            names.get(result.subject_id, "All notebooks"),
            f"[{color}]{result.correct_answers}/{result.total_questions}[/{color}]",
        )
    console.print(table)


def cmd_dashboard(app: StudyApp):
    stats = get_study_stats(app.stats)
    console.print(Panel(
        f"[bold]{stats['streak']}[/bold] day streak  |  "
        f"Reviews: [bold]{stats['total_reviews']}[/bold]  |  "
        f"Quizzes: [bold]{stats['quizzes_taken']}[/bold]  |  "
        f"Best: [bold]{stats['best_quiz_score']}%[/bold]",
        title="Study Dashboard", border_style="blue",
    ))

    for label, done, target, pct in (
        ("Review", app.stats.cards_reviewed_today, stats["card_target"], stats["card_progress"]),
        ("Questions", app.stats.questions_answered_today, app.stats.daily_question_goal,
         stats["question_progress"]),
    ):
        bar_filled = int(pct / 5)
        bar = f"[cyan]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/cyan]"
        console.print(f"  {label:<10} {done} / {target} {bar} {pct:.0f}%")

    topics = hot_topics(app.stats.quiz_history)
    if topics:
        table = Table(title="Hot Topics")
        table.add_column("Topic", style="cyan")
        table.add_column("Accuracy", justify="right")
        table.add_column("Status")
        for t in topics:
            color = get_accuracy_color(t["accuracy"])
            table.add_row(t["topic"], f"{t['accuracy']}%", f"[{color}]{get_accuracy_label(t['accuracy'])}[/{color}]")
        console.print(table)

    table = Table(title="Subjects")
    table.add_column("Notebook", style="cyan")
    table.add_column("Quizzes", justify="right")
    table.add_column("Accuracy", justify="right")
    for s in subject_summary(app.stats.quiz_history, app.notebooks):
        table.add_row(s["name"], str(s["sessions"]), f"{s['accuracy']}%")
    console.print(table)


COMMANDS = {
    "notebooks": cmd_notebooks,
    "new": cmd_new,
    "card": cmd_card,
    "review": cmd_review,
    "quiz": cmd_quiz,
    "explain": cmd_explain,
    "import": cmd_import,
    "documents": cmd_documents,
    "summary": cmd_summary,
    "history": cmd_history,
    "dashboard": cmd_dashboard,
}


def main():
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO, format="%(message)s", handlers=[RichHandler(console=console)],
    )
    app = StudyApp.load(DEFAULT_DB_PATH)
    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="dashboard").strip().lower()
        if choice in ("quit", "exit", "q"):
            console.print("[dim]Happy studying![/dim]")
            break
        command = COMMANDS.get(choice)
        if command is None:
            console.print("[red]Unknown command. Try again.[/red]")
            continue
        try:
            command(app)
        except SessionExitRequested:
            console.print("\n[dim]Back to the menu.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except (StudyError, ValueError, KeyError) as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
