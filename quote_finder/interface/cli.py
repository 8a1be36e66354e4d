# quote_finder/interface/cli.py

from typing import List

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.text import Text

from quote_finder.domain.models import Quote


console = Console()


def display_welcome_banner() -> None:
    console.print(Panel.fit(
        "[bold cyan]❝ Quote Finder[/bold cyan]\n"
        "[dim]Keyword + fuzzy relevance ranking, refined by a language model[/dim]",
        box=box.DOUBLE,
        border_style="cyan",
    ))


def display_document_status(source: str, total_length: int, segment_count: int, is_ocr: bool) -> None:
    layout = f"{segment_count} segments" if segment_count > 1 else "single pass"
    ocr_note = " [yellow](OCR text)[/yellow]" if is_ocr else ""
    console.print(
        f"\n[green]✓[/green] Loaded [bold]{source}[/bold] — "
        f"{total_length} characters, {layout}{ocr_note}.\n"
    )


def prompt_for_topic() -> str:
    return Prompt.ask("\n[bold yellow]🔎 Topic[/bold yellow]")


def display_quotes(topic: str, quotes: List[Quote], segment_label: str = "") -> None:
    heading = f"\n[bold]Quotes for:[/bold] [italic]\"{topic}\"[/italic]"
    if segment_label:
        heading += f" [dim]({segment_label})[/dim]"
    console.print(heading + "\n")

    for rank, quote in enumerate(quotes, start=1):
        panel_content = Text()
        panel_content.append(f"“{quote.quote}”", style="bold white")
        panel_content.append("\n\n🎯 ", style="dim")
        panel_content.append(quote.relevance, style="italic")

        console.print(Panel(
            panel_content,
            title=f"[bold]#{rank}[/bold]",
            border_style=_rank_to_color(rank),
            box=box.ROUNDED,
            padding=(1, 2),
        ))


def display_no_quotes(topic: str, message: str) -> None:
    console.print(f"\n[yellow]∅[/yellow] {message} for [italic]\"{topic}\"[/italic].\n")


def display_error(message: str) -> None:
    console.print(f"\n[bold red]✗ Error:[/bold red] {message}\n")


def ask_continue() -> bool:
    answer = Prompt.ask(
        "\n[dim]Search another topic?[/dim]",
        choices=["y", "n"],
        default="y",
    )
    return answer.lower() == "y"


def _rank_to_color(rank: int) -> str:
    if rank <= 3:
        return "green"
    elif rank <= 6:
        return "yellow"
    else:
        return "blue"
