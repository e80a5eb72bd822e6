import argparse
import logging
import sys
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from TermSearch.build_inverted_index import InvertedIndexBuilder
from TermSearch.config import load_config
from TermSearch.index.inverted_index import InvertedIndex

logger = logging.getLogger(__name__)

console = Console()


class TermSearch:
    """
    Command line front end: loads a corpus into an InvertedIndex and runs queries.
    """
    def __init__(self, config=None):
        self.config = config or load_config()
        self.index = InvertedIndex.from_config(self.config)
        self.builder = InvertedIndexBuilder(self.index, config=self.config)

    def load_documents(self, documents_path: str) -> bool:
        try:
            count = self.builder.build_from_json(documents_path)
        except (OSError, ValueError) as e:
            console.print(f"[bold red]Error loading documents:[/bold red] {escape(str(e))}")
            return False

        console.print(f"[green]Indexed [bold]{count}[/bold] documents from [cyan]{escape(str(documents_path))}[/cyan][/green]")
        return True

    def load_directory(self, docs_path: str) -> bool:
        try:
            count = self.builder.build_from_directory(docs_path)
        except OSError as e:
            console.print(f"[bold red]Error loading directory:[/bold red] {escape(str(e))}")
            return False

        console.print(f"[green]Indexed [bold]{count}[/bold] files from [cyan]{escape(str(docs_path))}[/cyan][/green]")
        return True

    def search(self, query: str, top_k: int = None) -> List[str]:
        results = self.index.search(query)
        if top_k is not None:
            results = results[:top_k]
        return results

    def display_results(self, query: str, results: List[str]):
        if not results:
            console.print(f"[yellow]No results found for '{escape(query)}'.[/yellow]")
            return

        table = Table(
            box=box.HEAVY_EDGE,
            show_header=True,
            header_style="bold magenta",
            title=f"[bold]Found {len(results)} document(s) for '{escape(query)}'[/bold]",
            title_style="yellow"
        )
        table.add_column("#", style="dim", width=4)
        table.add_column("Document", style="cyan bold")
        table.add_column("Match", style="green", justify="right")
        table.add_column("Score", style="yellow", justify="right")

        # The ranker still holds the configuration of the last search
        score = self.index.rank.scorer()
        for i, line in enumerate(results):
            source, _, percentage = line.rpartition(": ")
            table.add_row(str(i + 1), escape(source), percentage, f"{score(source):.4f}")

        console.print(table)

    def interactive(self, top_k: int):
        console.print(Panel(
            "[bold blue]TermSearch[/bold blue] [yellow]interactive mode[/yellow]",
            border_style="blue",
            subtitle="type 'quit' to exit",
            width=80
        ))
        while True:
            try:
                query = console.input("\n[bold]Enter query:[/bold] ")
            except (EOFError, KeyboardInterrupt):
                break
            if query.strip().lower() in ("quit", "exit"):
                break
            self.display_results(query, self.search(query, top_k))


def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)]
    )


def main(argv=None):
    parser = argparse.ArgumentParser(description='TermSearch - in-memory full-text search')
    parser.add_argument('--documents', help='Path to documents JSON file')
    parser.add_argument('--docs-dir', help='Directory of .txt/.md files to index')
    parser.add_argument('--query', help='Query string to search for')
    parser.add_argument('--top', type=int, help='Number of top results to display')
    parser.add_argument('--interactive', action='store_true', help='Run in interactive mode')
    parser.add_argument('--config', help='Path to a config.json file')
    parser.add_argument('--verbose', action='store_true', help='Show debug logging')
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    config = load_config(args.config)
    top_k = args.top if args.top is not None else config.get("cli", {}).get("top", 10)

    if not args.documents and not args.docs_dir:
        console.print("[bold red]Provide --documents or --docs-dir.[/bold red]")
        return 1

    app = TermSearch(config)

    loaded = False
    if args.documents:
        loaded = app.load_documents(args.documents) or loaded
    if args.docs_dir:
        loaded = app.load_directory(args.docs_dir) or loaded

    if not loaded:
        console.print("[bold red]No corpus loaded.[/bold red]")
        return 1

    if args.interactive:
        app.interactive(top_k)
    elif args.query:
        app.display_results(args.query, app.search(args.query, top_k))
    else:
        for line in app.builder.sample():
            console.print(line, markup=False)

    return 0


if __name__ == "__main__":
    sys.exit(main())
