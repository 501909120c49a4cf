"""Interactive answers needed before a traversal can start.

Output methods and the MongoDB URI are asked up front; campus and year are
asked by the navigator through :class:`PromptChooser` once their option
lists are on screen.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, TextIO, Tuple

from rich import box
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from . import config


class PromptChooser:
    """Single-select prompt over a select element's options."""

    def __init__(self, console: Optional[Console] = None, stream: Optional[TextIO] = None) -> None:
        self.console = console or Console()
        self.stream = stream

    def __call__(self, question: str, options: Sequence[Tuple[str, str]]) -> str:
        table = Table(box=box.SIMPLE, show_header=True)
        table.add_column("Code")
        table.add_column("Name")
        for value, text in options:
            table.add_row(value, text)
        self.console.print(table)
        return Prompt.ask(
            question,
            choices=[value for value, _ in options],
            console=self.console,
            stream=self.stream,
        )


def parse_output_methods(raw: str) -> List[str]:
    """``"mongo, local"`` -> ``["mongo", "local"]``; unknown names raise."""

    methods: List[str] = []
    for part in raw.replace(" ", ",").split(","):
        name = part.strip().lower()
        if not name:
            continue
        if name not in config.OUTPUT_METHODS:
            raise ValueError(f"Unknown output method {name!r}")
        if name not in methods:
            methods.append(name)
    if not methods:
        raise ValueError("Pick at least one output method")
    return methods


def select_output_methods(console: Optional[Console] = None, stream: Optional[TextIO] = None) -> List[str]:
    console = console or Console()
    while True:
        raw = Prompt.ask(
            f"Pick output methods ({', '.join(config.OUTPUT_METHODS)}; comma separated)",
            console=console,
            stream=stream,
        )
        try:
            return parse_output_methods(raw)
        except ValueError as exc:
            console.print(f"[red]{exc}[/red]")


def prompt_mongo_uri(console: Optional[Console] = None, stream: Optional[TextIO] = None) -> str:
    console = console or Console()
    while True:
        uri = Prompt.ask("Input your mongoDB URI", console=console, stream=stream).strip()
        if uri:
            return uri


__all__ = [
    "PromptChooser",
    "parse_output_methods",
    "select_output_methods",
    "prompt_mongo_uri",
]
