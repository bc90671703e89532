"""Command line entry point: serve the API or check an article."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from .client import DEFAULT_STATE_PATH, FactCheckClient
from .domain.errors import AdmissionRejected, FactCheckError

app = typer.Typer(add_completion=False, help="Article fact checker: serve the API or check an article.")
console = Console()

_LABEL_STYLES = {
    "SUPPORTED": "green",
    "CONTRADICTED": "red",
    "INSUFFICIENT_EVIDENCE": "yellow",
}

_VERDICT_STYLES = {
    "TRUE": "bold green",
    "MIXED": "bold yellow",
    "MISLEADING": "bold magenta",
    "FALSE": "bold red",
    "UNVERIFIABLE": "bold white",
}


def print_report(result: Dict[str, Any]) -> None:
    """Render an ``/api/analyze`` response."""
    report = result["response"]
    article = report["article"]
    verdict = article["verdict"]

    console.print(
        f"\n[{_VERDICT_STYLES.get(verdict, 'bold')}]Verdict: {verdict}[/] "
        f"(confidence {article['confidence']:.0%})"
    )
    for factor in article["key_factors"]:
        console.print(f"  • {factor}")

    table = Table(title="Claim assessments", show_lines=True)
    table.add_column("Claim")
    table.add_column("Label")
    table.add_column("Confidence", justify="right")
    table.add_column("Evidence")
    table.add_column("Rationale")
    for assessment in report["assessments"]:
        label = assessment["label"]
        table.add_row(
            assessment["claim_id"],
            f"[{_LABEL_STYLES.get(label, 'white')}]{label}[/]",
            f"{assessment['confidence']:.0%}",
            ", ".join(assessment["cited_evidence_ids"]) or "-",
            assessment["rationale"],
        )
    console.print(table)
    console.print(f"Remaining checks this hour: {result['remainingRequests']}")


async def check_article(source: str, base_url: str, state_path: Path) -> int:
    """Extract (for URLs) and analyze one article, printing the report."""
    async with FactCheckClient(base_url=base_url, state_path=state_path) as client:
        try:
            if source.startswith(("http://", "https://")):
                with console.status("Extracting article..."):
                    article = await client.extract_article(source)
                console.print(f"[bold]{article['title'] or source}[/] ({article['length']} chars)")
                text = article["content"]
            else:
                text = Path(source).read_text(encoding="utf-8")

            with console.status("Analyzing claims..."):
                result = await client.analyze(text)
        except AdmissionRejected as e:
            console.print(f"[red]{e.public_message}[/] Retry in {e.retry_after:.0f}s.")
            return 2
        except FactCheckError as e:
            console.print(f"[red]Error ({e.status_code}):[/] {e.public_message}")
            return 1

    print_report(result)
    return 0


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind"),
    port: int = typer.Option(8000, help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """
    Run the HTTP API.
    """
    uvicorn.run("fact_checker.api.app:app", host=host, port=port, reload=reload)


@app.command()
def check(
    source: str = typer.Argument(..., help="Article URL or path to a text file"),
    server: str = typer.Option("http://localhost:8000", "--server", help="API base URL"),
    state_file: Path = typer.Option(
        DEFAULT_STATE_PATH, "--state-file", help="Where the local request quota is kept"
    ),
) -> None:
    """
    Fact-check an article URL or a text file against a running server.
    """
    logging.basicConfig(level=logging.WARNING)
    code = asyncio.run(check_article(source, server, state_file))
    if code:
        raise typer.Exit(code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
