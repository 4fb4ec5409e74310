from pathlib import Path
from typing import Any, Optional

import orjson
import typer
from rich.console import Console
from rich.table import Table

from life_parser.command.normalizer import Command
from life_parser.entities.types import Context
from life_parser.session import ParserSession

app = typer.Typer(help="Free-text command interpreter for a turn-based simulation.")
console = Console()

_content_option = typer.Option(
    None,
    "--content",
    help="JSON file with {'locations': {id: {name}}, 'characters': {id: {name}}}.",
)
_export_option = typer.Option(
    None, "--export", help="Write the unknown-input log to this JSONL file."
)


def load_content(path: Optional[Path]) -> Context:
    if path is None:
        return Context()
    try:
        data = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as e:
        console.print(f"[bold red]Could not read content file {path}: {e}[/bold red]")
        raise typer.Exit(1) from e
    return Context.coerce(data)


class EchoSimulation:
    """Stand-in simulation: prints commands and asks for what is missing."""

    def __init__(self, session: ParserSession) -> None:
        self.session = session

    def __call__(self, command: Command) -> None:
        dialogue = self.session.dialogue
        if command.action == "unknown":
            console.print(
                f"[red]I don't understand \"{command.input}\". "
                "Try 'help' for available commands.[/red]"
            )
            return
        if command.action == "move" and not command.target and not command.direction:
            dialogue.open(
                "incomplete_command",
                {"action": "move", "missing_slot": "target"},
                "Where do you want to go?",
            )
            return
        if command.action == "talk" and not command.target:
            dialogue.open(
                "incomplete_command",
                {
                    "action": "talk",
                    "missing_slot": "target",
                    "partial_command_data": command.fields(),
                },
                "Who do you want to talk to?",
            )
            return
        if command.action == "loan" and command.amount is None:
            dialogue.open(
                "incomplete_command",
                {"action": "loan", "missing_slot": "amount"},
                "How much do you want to borrow?",
            )
            return
        if command.action == "buy" and command.target and not command.confirmed:
            dialogue.open(
                "confirmation",
                {"action": "buy", "details": {"target": command.target}},
                f"Buy {command.target}? (yes/no)",
            )
            return
        _print_command(command)


def _print_command(command: Command) -> None:
    fields = ", ".join(f"{k}={v!r}" for k, v in command.fields().items())
    flag = " [green](confirmed)[/green]" if command.confirmed else ""
    console.print(f"[cyan]{command.action}[/cyan]({fields}){flag}")


def _result_table(text: str, session: ParserSession) -> Table:
    result = session.recognize(text)
    command = session.normalize(result)
    table = Table(title=f"Recognition: {text!r}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("intent", result.intent)
    table.add_row("confidence", f"{result.confidence:.3f}")
    for kind, entity in result.entities.items():
        table.add_row(f"entity.{kind}", repr(entity.value))
    payload: dict[str, Any] = command.to_dict()
    table.add_row("command", orjson.dumps(payload).decode())
    return table


@app.command()
def recognize(
    text: str = typer.Argument(..., help="Sentence to interpret."),
    content: Optional[Path] = _content_option,
) -> None:
    """Show how a single sentence is classified and normalized."""
    session = ParserSession(context=load_content(content))
    console.print(_result_table(text, session))


@app.command()
def play(content: Optional[Path] = _content_option) -> None:
    """Interactive loop routing every line through the dialogue controller."""
    session = ParserSession(
        context=load_content(content),
        notify=lambda message: console.print(f"[yellow]{message}[/yellow]"),
    )
    session.dialogue.executor = EchoSimulation(session)
    console.print("Type a command ('quit' with nothing pending to leave).")
    while True:
        try:
            line = console.input("[bold]> [/bold]")
        except (EOFError, KeyboardInterrupt):
            break
        if not session.dialogue.is_active and line.strip().lower() in {"quit", "q"}:
            break
        session.handle(line)

    rejected = session.get_unknown_inputs()
    if rejected:
        console.print(f"{len(rejected)} unrecognized input(s) this session.")


@app.command()
def unknown(
    inputs: Optional[list[str]] = typer.Argument(
        None, help="Sentences to feed the classifier."
    ),
    export: Optional[Path] = _export_option,
    content: Optional[Path] = _content_option,
) -> None:
    """Feed sentences through the classifier and report the ones it rejects."""
    session = ParserSession(context=load_content(content))
    for text in inputs or []:
        session.recognize(text)

    table = Table(title="Unknown inputs")
    table.add_column("#", justify="right")
    table.add_column("Input")
    for idx, text in enumerate(session.get_unknown_inputs(), start=1):
        table.add_row(str(idx), text)
    console.print(table)

    if export is not None:
        count = session.unknown_log.export(export)
        console.print(f"Exported {count} record(s) to [cyan]{export}[/cyan]")


if __name__ == "__main__":
    app()
