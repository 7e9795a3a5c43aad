import asyncio
import html
import json
import logging
import re
from typing import List, Optional

import typer
from rich import print
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from booksearch.config import get_settings
from booksearch.core.formatting import format_search_metric, result_href
from booksearch.core.index import query
from booksearch.core.loader import IndexLoader, IndexLoadResult
from booksearch.core.page import MemoryHighlighter, MemoryHistory, MemoryPage
from booksearch.core.session import NavigationAction, SearchSession
from booksearch.core.teaser import make_teaser

logger = logging.getLogger(__name__)

APP_HELP = """
booksearch: search a built book from the terminal.

Loads the book's searchindex.json (from a URL or a local build directory),
runs queries against it and shows each hit with a teaser, the same excerpt
the book's own search panel would show.

CONFIGURATION (environment or .env):
- BOOKSEARCH_SITE_ROOT:  where the book lives (URL or directory)
- BOOKSEARCH_INDEX_PATH: index document path relative to the root
- BOOKSEARCH_LOG_LEVEL:  DEBUG, INFO, WARNING (default)
"""

app = typer.Typer(name="booksearch", help=APP_HELP, no_args_is_help=True)

EMPHASIS_SPLIT = re.compile(r"(</?em>)")


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Override BOOKSEARCH_LOG_LEVEL."),
):
    """
    Book search: index loading, teasers and URL state.
    """
    level = (log_level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load(index: Optional[str]) -> IndexLoadResult:
    settings = get_settings()
    if index:
        loader = IndexLoader(site_root="")
        result = asyncio.run(loader.load(index))
    else:
        result = asyncio.run(IndexLoader.from_settings(settings).load(settings.index_path))

    if not result.loaded:
        print(f"[red]Search unavailable ({result.status.value}): {escape(result.error or '')}[/red]")
        raise typer.Exit(code=1)
    return result


def _teaser_markup(teaser: str) -> str:
    """Turn teaser HTML into rich markup."""
    parts = []
    for piece in EMPHASIS_SPLIT.split(teaser):
        if piece == "<em>":
            parts.append("[bold yellow]")
        elif piece == "</em>":
            parts.append("[/bold yellow]")
        else:
            parts.append(escape(html.unescape(piece)))
    return "".join(parts)


@app.command("search")
def search(
    term: str = typer.Argument(..., help="Search terms"),
    index: str = typer.Option(None, "--index", "-i", help="Index document URL or path. Defaults to the configured site root."),
    limit: int = typer.Option(None, "--limit", "-n", help="Maximum results (defaults to the index's limit_results)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Search the book.

    Examples:
        booksearch search "hello world"
        booksearch search borrow --index ./book/searchindex.json --limit 5
    """
    settings = get_settings()
    loaded = _load(index)
    options = loaded.options
    if limit:
        options = options.model_copy(update={"limit_results": limit})

    terms = term.split()
    results = query(loaded.index, options, term)
    hits = []
    for result in results:
        hits.append({
            "ref": result.ref,
            "breadcrumbs": result.breadcrumbs,
            "href": result_href(result, terms, settings.site_root, settings.highlight_param),
            "score": result.score,
            "teaser": make_teaser(result.body, terms, options.teaser_word_count),
        })

    if json_output:
        typer.echo(json.dumps(hits, indent=2))
        return

    console = Console()
    console.print(f"[bold blue]{escape(format_search_metric(len(hits), term))}[/bold blue]")
    console.print()
    for i, hit in enumerate(hits, 1):
        console.print(f"[bold]{i}. {escape(hit['breadcrumbs'])}[/bold]")
        console.print(f"   [dim]{escape(hit['href'])}[/dim]")
        console.print(f"   {_teaser_markup(hit['teaser'])}")
        console.print()


@app.command("teaser")
def teaser(
    body: str = typer.Argument(..., help="Section text"),
    terms: List[str] = typer.Option([], "--term", "-t", help="Search term (repeatable)"),
    words: int = typer.Option(30, "--words", "-w", min=1, help="Teaser length in words"),
):
    """
    Print the teaser (HTML) search would show for a piece of text.
    """
    typer.echo(make_teaser(body, terms, words))


@app.command("url")
def url(
    page_url: str = typer.Argument(..., help="Current page URL"),
    term: str = typer.Argument("", help="Search term; empty clears the search"),
    action: NavigationAction = typer.Option(
        NavigationAction.PUSH_IF_NEW_SEARCH_ELSE_REPLACE, "--action", "-a", help="History commit mode"
    ),
):
    """
    Show how a search term would be written into a page URL.

    Examples:
        booksearch url "https://book.example/ch1.html#intro" "borrow checker"
        booksearch url "https://book.example/ch1.html?search=x" "" --action replace
    """
    history = MemoryHistory(page_url)
    session = SearchSession(history, MemoryPage(), MemoryHighlighter(), get_settings())
    session.set_url_parameters(term, action)
    commit, target = history.commits[-1]
    print(f"[bold]{commit}[/bold] {escape(target)}")


@app.command("options")
def options(
    index: str = typer.Option(None, "--index", "-i", help="Index document URL or path"),
):
    """
    Show the search options shipped with the index.
    """
    loaded = _load(index)
    opts = loaded.options

    table = Table(title="Search options")
    table.add_column("Option", style="cyan")
    table.add_column("Value")
    table.add_row("Match mode", opts.match_mode.value)
    table.add_row("Expand (prefix)", str(opts.expand))
    table.add_row("Teaser words", str(opts.teaser_word_count))
    table.add_row("Result limit", str(opts.limit_results))
    for name, field_boost in opts.field_boosts.items():
        table.add_row(f"Boost: {name}", str(field_boost.boost))
    table.add_row("Documents", str(loaded.index.document_count))
    Console().print(table)


if __name__ == "__main__":
    app()
