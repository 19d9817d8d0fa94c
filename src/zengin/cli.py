import logging
from pathlib import Path

import orjson
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from zengin.data.generator import SynthConfig, generate_synthetic_file
from zengin.encoding import EncodingVerdict, classify, describe_line_endings, describe_verdict
from zengin.export import records_to_arrow, records_to_jsonl, session_payload
from zengin.layout.registry import all_schemas, label_for_kind, validate_schema_integrity
from zengin.manifest import load_manifest, validate_manifest
from zengin.reconstruct import encode_lines, render_lines
from zengin.report import append_csv, append_jsonl, session_to_row
from zengin.session import ParseSession, parse_text

app = typer.Typer(help="Inspect, validate, and rewrite Zengin fixed-width transfer files.")
dataset_app = typer.Typer(help="Dataset helpers (synthetic fixtures).")
manifest_app = typer.Typer(help="File manifests with expected hashes and checks.")
schema_app = typer.Typer(help="Record layout helpers.")
console = Console()
EXPORT_FORMATS = {"jsonl", "arrow"}

app.add_typer(dataset_app, name="dataset")
app.add_typer(manifest_app, name="manifest")
app.add_typer(schema_app, name="schema")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show parser logging."),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _read_bytes(path: Path) -> bytes:
    if not path.is_file():
        raise typer.BadParameter(f"Input file not found: {path}")
    return path.read_bytes()


def _load_session(path: Path) -> tuple[EncodingVerdict, ParseSession]:
    data = _read_bytes(path)
    verdict = classify(data)
    console.print(f"[bold green]Read[/] {len(data)} bytes from {path}")
    if not verdict.is_target:
        console.print(f"[bold red]Rejected:[/] {escape(verdict.rejection_reason or '')}")
        raise typer.Exit(code=1)
    console.print(describe_verdict(verdict))
    if verdict.line_endings is not None:
        console.print(f"line endings: {describe_line_endings(verdict.line_endings)}")
    return verdict, parse_text(verdict.decoded_text)


def _records_table(session: ParseSession, errors_only: bool) -> Table:
    table = Table(title="Records")
    table.add_column("line", justify="right")
    table.add_column("kind")
    table.add_column("status")
    table.add_column("first error", overflow="fold")
    for record in session.records:
        if errors_only and record.validation.is_valid:
            continue
        status = "[green]ok[/]" if record.validation.is_valid else "[red]error[/]"
        first_error = record.validation.errors[0] if record.validation.errors else ""
        table.add_row(
            str(record.line_number), label_for_kind(record.kind), status, escape(first_error)
        )
    return table


def _print_summary(session: ParseSession) -> None:
    console.print(
        f"records: {session.total_records} | data: {len(session.data)} | "
        f"invalid: {session.error_count}"
    )
    for error in session.structural_errors:
        console.print(f"[bold red]structure:[/] {escape(error)}")
    for warning in session.warnings:
        console.print(f"[yellow]warning:[/] {warning}")


@app.command()
def inspect(
    input: Path = typer.Argument(..., help="Zengin file to inspect."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write the full JSON report."
    ),
    errors_only: bool = typer.Option(False, "--errors-only", help="Only list invalid records."),
) -> None:
    """Classify the encoding, parse every line, and show per-record status."""
    verdict, session = _load_session(input)
    console.print(_records_table(session, errors_only))
    _print_summary(session)

    if output:
        payload = session_payload(str(input), verdict, session)
        output.write_bytes(orjson.dumps(payload, option=orjson.OPT_INDENT_2))
        console.print(f"[bold green]Wrote report[/] to {output}")


@app.command()
def validate(
    input: Path = typer.Argument(..., help="Zengin file to validate."),
    log_csv: Path | None = typer.Option(
        None, "--log-csv", help="Append summary as a CSV row for trend tracking."
    ),
    log_jsonl: Path | None = typer.Option(
        None, "--log-jsonl", help="Append the summary row as JSONL for trend tracking."
    ),
    tag: str | None = typer.Option(None, "--tag", help="Optional tag to mark this run."),
) -> None:
    """Exit non-zero when any record or structural check fails."""
    _verdict, session = _load_session(input)
    for error in session.all_errors:
        console.print(f"[red]-[/] {escape(error)}")
    _print_summary(session)

    row = session_to_row(session, source=str(input), tag=tag)
    if log_csv:
        append_csv(log_csv, row)
        console.print(f"[bold green]Appended CSV log[/] to {log_csv}")
    if log_jsonl:
        append_jsonl(log_jsonl, row)
        console.print(f"[bold green]Appended JSONL log[/] to {log_jsonl}")

    if not session.is_valid:
        raise typer.Exit(code=1)
    console.print("[bold green]Valid[/]")


@app.command()
def rewrite(
    input: Path = typer.Argument(..., help="Zengin file to re-render."),
    output: Path = typer.Argument(..., help="Where to write the reconstructed file."),
    line_ending: str = typer.Option("crlf", "--line-ending", help="crlf | lf"),
    encoding: str = typer.Option("shift_jis", "--encoding", help="shift_jis | utf-8"),
) -> None:
    """Reconstruct every record at its fixed offsets and write the file back."""
    le = line_ending.lower()
    if le not in {"crlf", "lf"}:
        raise typer.BadParameter(f"Unsupported line ending '{line_ending}'.")
    _verdict, session = _load_session(input)
    try:
        data = encode_lines(render_lines(session.records, le), encoding.lower())
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    output.write_bytes(data)
    console.print(
        f"[bold green]Wrote[/] {len(data)} bytes to {output} ({session.total_records} records)."
    )


@app.command()
def export(
    input: Path = typer.Argument(..., help="Zengin file to export."),
    output: Path = typer.Argument(..., help="Destination path."),
    format: str = typer.Option("jsonl", "--format", "-f", help="Output format: jsonl | arrow."),
) -> None:
    """Write parsed records as JSONL or Arrow IPC."""
    fmt = format.lower()
    if fmt not in EXPORT_FORMATS:
        raise typer.BadParameter(f"Unsupported format '{format}'. Choose from {EXPORT_FORMATS}.")
    _verdict, session = _load_session(input)
    if fmt == "arrow":
        records_to_arrow(session.records, output)
    else:
        records_to_jsonl(session.records, output, gzip_output=output.suffix == ".gz")
    console.print(f"[bold green]Wrote {fmt}[/] to {output}")


@dataset_app.command("synthetic")
def dataset_synthetic(
    output: Path = typer.Argument(..., help="Path to write the synthetic file."),
    metadata: Path | None = typer.Option(
        None, "--metadata", "-m", help="Optional path to write JSON metadata about records."
    ),
    count: int = typer.Option(3, "--count", "-c", help="Number of data records to emit."),
    seed: int = typer.Option(1234, "--seed", help="Seed for reproducible generation."),
    no_end: bool = typer.Option(False, "--no-end", help="Omit the end record."),
    line_ending: str = typer.Option("crlf", "--line-ending", help="crlf | lf"),
) -> None:
    """Generate a valid cp932 Zengin file with header, data, trailer, and end records."""
    cfg = SynthConfig(
        count=count,
        seed=seed,
        include_end=not no_end,
        line_ending="lf" if line_ending.lower() == "lf" else "crlf",
    )
    data, meta = generate_synthetic_file(cfg)
    output.write_bytes(data)
    console.print(f"[bold green]Wrote[/] {len(data)} bytes to {output} ({count} data records).")

    if metadata:
        metadata.write_bytes(orjson.dumps(meta, option=orjson.OPT_INDENT_2))
        console.print(f"[bold green]Wrote metadata[/] to {metadata}")


@manifest_app.command("validate")
def manifest_validate(
    manifest: Path = typer.Argument(..., help="Manifest file (json/yaml)."),
) -> None:
    """Check a file against its manifest (hash, encoding, structure, totals)."""
    if not manifest.is_file():
        raise typer.BadParameter(f"Manifest not found: {manifest}")
    result = validate_manifest(load_manifest(manifest))
    console.print(orjson.dumps(result, option=orjson.OPT_INDENT_2).decode())
    if result["warnings"]:
        raise typer.Exit(code=1)


@schema_app.command("check")
def schema_check() -> None:
    """Verify the built-in layouts are gapless and of the right length."""
    errors = validate_schema_integrity()
    for error in errors:
        console.print(f"[bold red]-[/] {error}")
    if errors:
        raise typer.Exit(code=1)
    console.print(f"[bold green]OK[/] {len(all_schemas())} layouts")


@schema_app.command("show")
def schema_show() -> None:
    """Print the built-in layouts as JSON."""
    payload = [schema.to_dict() for schema in all_schemas()]
    console.print(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())


if __name__ == "__main__":
    app()
