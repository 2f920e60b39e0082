"""
Typer CLI for langki.

Commands:
    langki words WORD...      - Build cards for a word list
    langki topic TOPIC        - Suggest new words for a topic and build cards
    langki review             - Ask the model to check one card
    langki edit               - Change one card with a free-form instruction

Usage:
    langki --help
    langki words ไป มา --language Thai
    langki topic "food" --count 10 --known-from-deck --push
    langki review --word ไป --meaning "gehen" --ipa "pai"
    langki edit --word ไป --meaning "gehen" --ipa "pai" --instruction "add an example"
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import NoReturn, TypeVar

import requests
import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from langki import __version__
from langki.anki.anki_client import AnkiClient
from langki.anki.approve import approve_cards
from langki.config import Settings, get_settings
from langki.errors import CardValidationError
from langki.generation.lint import LintCycle
from langki.generation.models import CardRecord, LintOutcome, PipelineResult
from langki.generation.pipeline import CardPipeline
from langki.llm.client import ModelClient, OpenAIResponsesClient
from langki.log_setup import configure_logging
from langki.result import Result

T = TypeVar("T")

app = typer.Typer(
    help="langki CLI: LLM-generated vocabulary cards for Anki",
    no_args_is_help=True,
)

console = Console()


# ========================================
# Helpers
# ========================================


def build_model_client(settings: Settings) -> OpenAIResponsesClient:
    """Model client for one command run."""
    return OpenAIResponsesClient.from_settings(settings)


def _with_client(settings: Settings, work: Callable[[ModelClient], Awaitable[T]]) -> T:
    """Run ``work`` with a fresh model client, closing it afterwards."""

    async def runner() -> T:
        client = build_model_client(settings)
        try:
            return await work(client)
        finally:
            await client.close()

    return asyncio.run(runner())


def _fail(message: str) -> NoReturn:
    rprint(f"[red]✗[/red] {message}")
    raise typer.Exit(code=1)


def _print_cards(cards: list[CardRecord], title: str) -> None:
    table = Table(title=title, show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Word", style="cyan")
    table.add_column("IPA", style="magenta")
    table.add_column("Meaning", style="green")
    table.add_column("Usage")

    for index, card in enumerate(cards, start=1):
        table.add_row(str(index), card.term, card.pronunciation, card.meaning, card.note or "-")

    console.print(table)


def _card_from_options(word: str, meaning: str, ipa: str, usage: str) -> CardRecord:
    return CardRecord(term=word, meaning=meaning, pronunciation=ipa, note=usage)


def _push_cards(cards: list[CardRecord], settings: Settings) -> None:
    """Add cards to the configured deck via AnkiConnect."""
    anki = AnkiClient()
    try:
        anki.require_connection()
        summary = approve_cards(
            cards,
            anki,
            deck=settings.anki_deck_name,
            note_type=settings.anki_note_type,
            reversed_note_type=settings.anki_reversed_note_type,
        )
    except (RuntimeError, CardValidationError) as exc:
        _fail(str(exc))

    rprint(f"[green]✓[/green] Added {summary.added} card(s) to {settings.anki_deck_name}")
    if summary.failed:
        rprint(f"[yellow]⚠[/yellow] {summary.failed} card(s) could not be added")


def _report(result: PipelineResult, settings: Settings, push: bool) -> None:
    """Print the cards, push them if asked, then fail if the run had an error."""
    if result.cards:
        _print_cards(result.cards, f"Generated Cards ({len(result.cards)})")
        if push:
            _push_cards(result.cards, settings)
    elif result.ok:
        rprint("[yellow]⚠[/yellow] No cards generated")

    if result.error is not None:
        _fail(f"Error generating cards: {result.error}")


# ========================================
# Commands
# ========================================


@app.command("words")
def words_command(
    words: list[str] = typer.Argument(..., help="Words to build cards for"),
    language: str = typer.Option(None, "--language", "-l", help="Language of the words"),
    native: str = typer.Option(None, "--native", "-n", help="Language for meanings"),
    push: bool = typer.Option(False, "--push", help="Add the cards to Anki"),
) -> None:
    """
    Build cards for a word list.

    Words found complete in the frequency list skip the model call.

    Examples:
        langki words ไป มา
        langki words hola adiós --language Spanish --push
    """
    settings = get_settings()
    language = language or settings.anki_deck_name
    native = native or settings.native_language

    async def work(client: ModelClient) -> PipelineResult:
        pipeline = CardPipeline.from_settings(settings, client)
        return await pipeline.generate_for_word_list(words, language, native)

    _report(_with_client(settings, work), settings, push)


@app.command("topic")
def topic_command(
    topic: str = typer.Argument(..., help="Topic to suggest words for"),
    count: int = typer.Option(10, "--count", "-c", help="Number of words to suggest"),
    language: str = typer.Option(None, "--language", "-l", help="Target language"),
    native: str = typer.Option(None, "--native", "-n", help="Language for meanings"),
    known_from_deck: bool = typer.Option(
        False, "--known-from-deck", help="Skip words already in the Anki deck"
    ),
    push: bool = typer.Option(False, "--push", help="Add the cards to Anki"),
) -> None:
    """
    Suggest new words for a topic and build their cards.

    Examples:
        langki topic "food" --count 5
        langki topic "travel" --known-from-deck --push
    """
    settings = get_settings()
    language = language or settings.anki_deck_name
    native = native or settings.native_language

    known: list[str] = []
    if known_from_deck:
        anki = AnkiClient()
        try:
            anki.require_connection()
            known = anki.known_terms(settings.anki_deck_name, settings.anki_word_field)
        except (RuntimeError, requests.RequestException) as exc:
            _fail(f"Could not read known words: {exc}")
        logger.info("Excluding {} known word(s)", len(known))

    async def work(client: ModelClient) -> PipelineResult:
        pipeline = CardPipeline.from_settings(settings, client)
        return await pipeline.generate_for_topic(topic, count, known, language, native)

    _report(_with_client(settings, work), settings, push)


@app.command("review")
def review_command(
    word: str = typer.Option(..., "--word", help="Card term"),
    meaning: str = typer.Option(..., "--meaning", help="Card meaning"),
    ipa: str = typer.Option(..., "--ipa", help="Card pronunciation"),
    usage: str = typer.Option("", "--usage", help="Card usage note"),
    language: str = typer.Option(None, "--language", "-l", help="Language of the card"),
) -> None:
    """Ask the model to check one card for errors."""
    settings = get_settings()
    language = language or settings.anki_deck_name
    card = _card_from_options(word, meaning, ipa, usage)

    async def work(client: ModelClient) -> LintOutcome:
        cycle = LintCycle(client, settings.model_config_value(), settings.native_language)
        return await cycle.review(card, language)

    outcome = _with_client(settings, work)

    if not outcome.completed:
        _fail(f"Review failed: {outcome.error}")
    if not outcome.errors_found:
        rprint("[green]✓[/green] No errors found")
        return

    rprint("[yellow]⚠[/yellow] Corrections suggested")
    _print_cards([outcome.corrected_fields], "Corrected Card")


@app.command("edit")
def edit_command(
    word: str = typer.Option(..., "--word", help="Card term"),
    meaning: str = typer.Option(..., "--meaning", help="Card meaning"),
    ipa: str = typer.Option(..., "--ipa", help="Card pronunciation"),
    instruction: str = typer.Option(..., "--instruction", "-i", help="What to change"),
    usage: str = typer.Option("", "--usage", help="Card usage note"),
    language: str = typer.Option(None, "--language", "-l", help="Language of the card"),
) -> None:
    """Change one card as described by a free-form instruction."""
    settings = get_settings()
    language = language or settings.anki_deck_name
    card = _card_from_options(word, meaning, ipa, usage)

    async def work(client: ModelClient) -> Result[CardRecord]:
        pipeline = CardPipeline.from_settings(settings, client)
        return await pipeline.edit_card(card, instruction, language, settings.native_language)

    result = _with_client(settings, work)
    if not result.ok:
        _fail(f"Edit failed: {result.error}")

    _print_cards([result.value], "Edited Card")


@app.command("version")
def show_version() -> None:
    """Show version information."""
    rprint(f"[bold]langki[/bold] v{__version__}")


def main() -> None:
    """Entry point for the CLI."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)
    app()


if __name__ == "__main__":
    main()
