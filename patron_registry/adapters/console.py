from typing import Iterable, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from patron_registry.domain.patron import Patron
from patron_registry.storage.line_file import LoadReport

MENU = [
    ("1", "Load patrons from a file"),
    ("2", "Add a patron"),
    ("3", "Remove a patron by ID"),
    ("4", "Edit a patron by ID"),
    ("5", "Display all patrons"),
    ("6", "Save patrons to a file"),
    ("7", "Quit"),
]

EDIT_CHOICES = [
    ("1", "Name"),
    ("2", "Address"),
    ("3", "Fine amount"),
    ("4", "ID"),
]


class PatronConsole:
    """All terminal output and prompting for the patron registry."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def print_info(self, message: str) -> None:
        self.console.print(message)

    def print_error(self, message: str) -> None:
        self.console.print(f"[bold red]ERROR:[/bold red] {escape(message)}", highlight=False)

    def print_patrons(self, patrons: Iterable[Patron], title: str = "Patrons") -> None:
        table = Table(title=title)
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Name")
        table.add_column("Address")
        table.add_column("Fine", justify="right")

        count = 0
        for p in patrons:
            table.add_row(p.id, escape(p.name), escape(p.address), f"${p.fine:,.2f}")
            count += 1

        if count == 0:
            self.console.print("[dim]No patrons loaded.[/dim]")
            return
        self.console.print(table)

    def print_patron(self, patron: Patron, heading: str = "Patron") -> None:
        self.console.print(
            f"{heading}: [cyan]{patron.id}[/cyan] - {escape(patron.name)} - {escape(patron.address)} - ${patron.fine:,.2f}",
            highlight=False,
        )

    def print_load_report(self, report: LoadReport, show_skipped: bool = True) -> None:
        self.console.print(
            f"Loaded [green]{report.loaded}[/green] patrons; "
            f"skipped [yellow]{report.skipped_malformed}[/yellow] malformed and "
            f"[yellow]{report.skipped_duplicate}[/yellow] duplicate lines.",
            highlight=False,
        )
        if not show_skipped or not report.skipped:
            return

        table = Table(title="Skipped lines")
        table.add_column("Line", justify="right")
        table.add_column("Content")
        table.add_column("Reason", style="yellow")
        for s in report.skipped:
            table.add_row(str(s.line_number), escape(s.raw), escape(s.reason))
        self.console.print(table)

    def menu_choice(self) -> str:
        lines = "\n".join(f"[bold]{key}[/bold]) {label}" for key, label in MENU)
        self.console.print(Panel.fit(lines, title="Library Patrons", border_style="cyan"))
        return Prompt.ask("Choose an option", choices=[k for k, _ in MENU], console=self.console)

    def edit_choice(self) -> str:
        for key, label in EDIT_CHOICES:
            self.console.print(f"{key}) {label}")
        return Prompt.ask("Field to edit", choices=[k for k, _ in EDIT_CHOICES], console=self.console)

    def ask(self, message: str, default: Optional[str] = None) -> str:
        if default is None:
            return Prompt.ask(message, console=self.console)
        return Prompt.ask(message, default=default, console=self.console)

    def confirm(self, message: str) -> bool:
        return Confirm.ask(message, console=self.console)
