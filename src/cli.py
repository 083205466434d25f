"""
Interface de linha de comando (CLI) do extrator de bebidas.
Usa Typer para comandos e Rich para a saída formatada.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from src.collector import BeverageCollector
from src.core.exceptions import ExtractorError
from src.core.models import ExtractionResult
from src.storage import StorageType, create_sink

# Códigos de saída
EXIT_PARTIAL = 1
EXIT_FAILURE = 2

app = typer.Typer(
    name="bebidas-extractor",
    help="Extração paginada de nomes de bebidas do Carrefour Mercado.",
    add_completion=False,
)

console = Console()


def run_async(coro):
    """Helper para executar corrotinas."""
    return asyncio.run(coro)


@app.command("extract")
def extract(
    source: str = typer.Option("carrefour_bebidas", "--source", "-s", help="Fonte de produtos"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Arquivo de saída"),
    format: Optional[StorageType] = typer.Option(None, "--format", "-f", help="Formato (json ou csv)"),
    page_size: Optional[int] = typer.Option(None, "--page-size", "-p", min=1, help="Itens por requisição"),
    delay: Optional[float] = typer.Option(None, "--delay", "-d", min=0, help="Espera entre requisições (s)"),
    max_failures: Optional[int] = typer.Option(None, "--max-failures", min=1, help="Falhas consecutivas toleradas"),
    checkpoint_every: Optional[int] = typer.Option(None, "--checkpoint-every", min=1, help="Salvar a cada N itens"),
    expected_total: Optional[int] = typer.Option(None, "--expected-total", min=0, help="Total esperado (pula a sondagem)"),
):
    """
    Extrai todos os nomes de produtos da fonte.

    Exemplos:
        bebidas-extractor extract
        bebidas-extractor extract --output bebidas.csv --format csv
        bebidas-extractor extract --page-size 50 --delay 2
    """
    try:
        collector = BeverageCollector(
            source_id=source,
            output_path=output,
            storage_type=format,
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Extraindo produtos...", total=None)

            result = run_async(
                collector.collect(
                    page_size=page_size,
                    inter_request_delay=delay,
                    max_consecutive_failures=max_failures,
                    checkpoint_every=checkpoint_every,
                    expected_total=expected_total,
                )
            )
    except (ExtractorError, ValueError) as e:
        console.print(f"[red]✗ Falha na extração: {e}[/red]")
        raise typer.Exit(code=EXIT_FAILURE)

    _display_summary(result, collector.output_path)

    if not result.ok:
        raise typer.Exit(code=EXIT_PARTIAL)


@app.command("show")
def show(
    path: Path = typer.Argument(..., help="Arquivo de checkpoint"),
    limit: int = typer.Option(20, "--limit", "-n", help="Quantidade de itens exibidos"),
):
    """
    Exibe o conteúdo de um checkpoint gravado.
    """
    storage_type = StorageType.CSV if path.suffix == ".csv" else StorageType.JSON

    if not path.exists():
        console.print(f"[yellow]Arquivo não encontrado: {path}[/yellow]")
        raise typer.Exit(code=EXIT_FAILURE)

    try:
        records = run_async(create_sink(path, storage_type).load())
    except ExtractorError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=EXIT_FAILURE)

    table = Table(title=f"{len(records)} produtos em {path.name}")
    table.add_column("#", style="dim", width=6)
    table.add_column("Produto", style="white", overflow="fold")

    for i, name in enumerate(records[:limit], 1):
        table.add_row(str(i), name)

    console.print(table)

    if len(records) > limit:
        console.print(f"[dim]... e mais {len(records) - limit} produtos[/dim]")


@app.command("sources")
def list_sources():
    """
    Lista fontes disponíveis.
    """
    table = Table(title="Fontes Disponíveis")
    table.add_column("ID", style="cyan")
    table.add_column("Nome", style="green")
    table.add_column("Status", style="yellow")
    table.add_column("Paginação", style="blue")

    for source in BeverageCollector.get_available_sources():
        table.add_row(
            source["id"],
            source["name"],
            source["status"],
            source["pagination"],
        )

    console.print(table)


@app.command("version")
def version():
    """
    Exibe a versão do sistema.
    """
    from src import __version__

    console.print(f"[bold blue]Bebidas Extractor[/bold blue] v{__version__}")
    console.print("Extração paginada de produtos do Carrefour Mercado")


# FUNÇÕES DE DISPLAY

def _display_summary(result: ExtractionResult, output_path: Path):
    """Exibe a verificação final (esperado, coletado, diferença)."""
    expected = result.expected_total if result.expected_total is not None else "desconhecido"
    difference = result.difference if result.difference is not None else "N/A"
    color = "green" if result.ok else "yellow"

    console.print()
    console.print(Panel(
        f"[bold]Itens esperados:[/bold] {expected}\n"
        f"[bold]Itens coletados:[/bold] [cyan]{result.collected}[/cyan]\n"
        f"[bold]Diferença:[/bold] {difference}\n"
        f"[bold]Páginas:[/bold] {result.pages_fetched}\n"
        f"[bold]Tentativas com erro:[/bold] {result.failed_attempts}\n"
        f"[bold]Encerramento:[/bold] {result.termination.value}",
        title="Verificação final",
        border_style=color,
    ))

    if result.ok:
        console.print(f"[green]✓ Dados salvos em {output_path}[/green]")
    else:
        console.print(
            f"[yellow]⚠ Extração parcial: {result.error}[/yellow]\n"
            f"[yellow]Registros parciais salvos em {output_path}[/yellow]"
        )


# ENTRY POINT

def main():
    """Entry point principal."""
    app()


if __name__ == "__main__":
    main()
