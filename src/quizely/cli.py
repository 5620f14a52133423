# src/quizely/cli.py
"""
Quizely Command Line Interface (CLI).

This module implements the user-facing terminal interface using `typer` and `rich`.

Features
--------
- **Studio**: An interactive editor with a Create view (type a term and a
  definition, generate the definition, add the card) and a View view
  (browse and delete cards).
- **Status Spinners**: Visual feedback while a definition is being generated.
- **Define**: One-shot lookup that prints a generated definition.

Usage
-----
    # Open the interactive editor
    $ quizely studio

    # Print a definition without opening the editor
    $ quizely define "photosynthesis" --model lite
"""

from __future__ import annotations

from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from quizely.core.contracts.session_state import ActiveView
from quizely.core.session import DefinitionGenerator, FlashcardSession
from quizely.core.settings import get_logger, load_settings
from quizely.llm.client import GenerationClient

# Ensure env vars (like GEMINI_API_KEY) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="Quizely: build flashcards, with definitions generated on demand.",
    rich_markup_mode="markdown",
)
console = Console()
logger = get_logger(__name__)

EMPTY_DECK_MESSAGE = 'No flashcards yet. Go to "Create Flashcard" to add some!'

CREATE_ACTIONS = {
    "t": "edit term",
    "d": "edit definition",
    "g": "generate definition",
    "a": "add flashcard",
    "v": "view flashcards",
    "q": "quit",
}
VIEW_ACTIONS = {
    "x": "delete a flashcard",
    "c": "create flashcard",
    "q": "quit",
}


def _get_generator(model: str | None = None) -> DefinitionGenerator:
    """Return the generation client used by the commands.

    Split into a helper so tests can monkeypatch it and inject a fake.
    """
    client = GenerationClient.from_settings()
    if model:
        client.model_alias = model
    return client


# --------------------------------------------------------------------------- #
# Helpers: Rendering
# --------------------------------------------------------------------------- #


def _render_header(session: FlashcardSession) -> None:
    create_style = "bold white on blue" if session.active_view is ActiveView.CREATE else "blue"
    view_style = "bold white on blue" if session.active_view is ActiveView.VIEW else "blue"
    console.rule("[bold blue]Quizely[/bold blue]")
    console.print(
        f"[{create_style}] Create Flashcard [/{create_style}]  "
        f"[{view_style}] View Flashcards ({len(session.flashcards)}) [/{view_style}]"
    )


def _render_error(session: FlashcardSession) -> None:
    if session.error_message:
        console.print(Panel(escape(session.error_message), border_style="red", style="red"))


def _render_create(session: FlashcardSession) -> None:
    console.print("[bold]Create New Flashcard[/bold]")
    _render_error(session)
    term = escape(session.draft_term) or "[dim]Enter Term[/dim]"
    definition = escape(session.draft_definition) or "[dim]Enter Definition[/dim]"
    console.print(f"[cyan]Term:[/cyan] {term}")
    console.print(f"[cyan]Definition:[/cyan] {definition}")


def _render_view(session: FlashcardSession) -> None:
    console.print("[bold]Your Flashcards[/bold]")
    _render_error(session)
    cards = session.flashcards
    if not cards:
        console.print(f"[dim]{EMPTY_DECK_MESSAGE}[/dim]")
        return

    table = Table(show_lines=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Term", style="bold blue")
    table.add_column("Definition")
    for number, card in enumerate(cards, start=1):
        table.add_row(str(number), escape(card.term), escape(card.definition))
    console.print(table)


def _action_prompt(actions: dict[str, str]) -> str:
    legend = "  ".join(f"[bold]{key}[/bold]={label}" for key, label in actions.items())
    console.print(f"[dim]{legend}[/dim]")
    return Prompt.ask("Action", choices=list(actions), show_choices=False, console=console)


def _generate_with_spinner(session: FlashcardSession) -> None:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("[magenta]Generating...", total=None)
        session.generate_definition()


# --------------------------------------------------------------------------- #
# Studio loop
# --------------------------------------------------------------------------- #


def _create_step(session: FlashcardSession) -> bool:
    """Handle one action in the Create view. Returns False to quit."""
    action = _action_prompt(CREATE_ACTIONS)
    if action == "t":
        session.edit_draft_term(Prompt.ask("Term", console=console))
    elif action == "d":
        session.edit_draft_definition(Prompt.ask("Definition", console=console))
    elif action == "g":
        _generate_with_spinner(session)
    elif action == "a":
        card = session.add_flashcard()
        if card is not None:
            console.print(f"[green]Added[/green] [bold]{escape(card.term)}[/bold]")
    elif action == "v":
        session.switch_view(ActiveView.VIEW)
    return action != "q"


def _view_step(session: FlashcardSession) -> bool:
    """Handle one action in the View view. Returns False to quit."""
    action = _action_prompt(VIEW_ACTIONS)
    if action == "x":
        number = IntPrompt.ask("Card number", console=console)
        if not session.delete_flashcard(number - 1):
            console.print(f"[yellow]No flashcard #{number}[/yellow]")
    elif action == "c":
        session.switch_view(ActiveView.CREATE)
    return action != "q"


def run_studio(session: FlashcardSession) -> None:
    """Drive ``session`` interactively until the user quits."""
    while True:
        _render_header(session)
        if session.active_view is ActiveView.CREATE:
            _render_create(session)
            keep_going = _create_step(session)
        else:
            _render_view(session)
            keep_going = _view_step(session)
        if not keep_going:
            break

    logger.debug("Studio closed with %d flashcard(s)", len(session.flashcards))
    console.print(f"[dim]Session closed with {len(session.flashcards)} flashcard(s).[/dim]")


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def studio(
    model: Annotated[
        str | None,
        typer.Option(
            "--model",
            "-m",
            help="Override the model alias used for definitions (e.g. 'lite').",
        ),
    ] = None,
) -> None:
    """
    Open the interactive flashcard editor.

    Cards live in memory only and are discarded when the studio closes.
    """
    console.print(
        Panel.fit(
            "[bold cyan]Quizely Studio[/bold cyan]\n"
            f"Model: [u]{model or load_settings().model_alias}[/u]",
            border_style="cyan",
        )
    )
    run_studio(FlashcardSession(_get_generator(model)))


@app.command()  # type: ignore[misc]
def define(
    term: Annotated[str, typer.Argument(help="Term to define.")],
    model: Annotated[
        str | None,
        typer.Option(
            "--model",
            "-m",
            help="Override the model alias used for definitions (e.g. 'lite').",
        ),
    ] = None,
) -> None:
    """
    Generate and print a concise definition for TERM.
    """
    session = FlashcardSession(_get_generator(model))
    session.edit_draft_term(term)
    _generate_with_spinner(session)

    if session.error_message:
        console.print(f"[bold red]❌ {escape(session.error_message)}[/bold red]")
        raise typer.Exit(code=1)

    console.print(
        Panel(
            escape(session.draft_definition),
            title=f"[bold]{escape(term)}[/bold]",
            border_style="green",
        )
    )


if __name__ == "__main__":
    app()
