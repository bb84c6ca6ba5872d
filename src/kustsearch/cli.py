"""Command line interface for kustsearch."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from kustsearch.config import AppConfig
from kustsearch.crawl.crawler import Crawler
from kustsearch.crawl.loader import LocalFileLoader
from kustsearch.errors import KustSearchError
from kustsearch.index.parser import ManifestParser
from kustsearch.index.references import ReferenceExtractor
from kustsearch.models import IndexedDocument
from kustsearch.parsing.decoder import YamlDecoder
from kustsearch.utils.files import iter_manifest_paths, iter_yaml_paths
from kustsearch.web.app import app as web_app


console = Console()
app = typer.Typer(help="kustsearch - flatten kustomizations for full-text search")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _print_json(record: IndexedDocument) -> None:
    console.print_json(json.dumps(record.to_dict()))


@app.command()
def parse(
    inputs: List[Path] = typer.Argument(
        ..., help="YAML files or directories to parse.", resolve_path=True
    ),
    as_json: bool = typer.Option(False, "--json", help="Print each record as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Parse YAML files into kinds, identifiers and values."""
    _setup_logging(verbose)
    config = AppConfig()
    paths = list(iter_yaml_paths(inputs, config.manifest_names))
    if not paths:
        console.print("[yellow]No YAML files found.[/yellow]")
        return

    parser = ManifestParser(YamlDecoder(), config)
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("File")
    table.add_column("Kinds")
    table.add_column("Identifiers")
    table.add_column("Values")

    failed = 0
    for path in paths:
        loader = LocalFileLoader(path.parent, manifest_names=config.manifest_names)
        try:
            record = parser.parse(loader.load(loader.document_for(path)))
        except (KustSearchError, OSError) as exc:
            console.print(f"[red]{escape(str(path))}: {escape(str(exc))}[/red]")
            failed += 1
            continue
        if as_json:
            _print_json(record)
        else:
            table.add_row(
                str(path), ", ".join(record.kinds), str(len(record.identifiers)), str(len(record.values))
            )

    if not as_json:
        console.print(table)
    if failed:
        raise typer.Exit(code=1)


@app.command()
def refs(
    manifest: Path = typer.Argument(..., help="Kustomization file", resolve_path=True),
    root: Optional[Path] = typer.Option(
        None, "--root", help="Repository checkout holding the file (default: its directory)", resolve_path=True
    ),
    resources: bool = typer.Option(True, "--resources/--no-resources", help="Include resources"),
    generators: bool = typer.Option(True, "--generators/--no-generators", help="Include generators"),
    transformers: bool = typer.Option(
        True, "--transformers/--no-transformers", help="Include transformers"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """List the files a kustomization refers to."""
    _setup_logging(verbose)
    if not manifest.is_file():
        raise typer.BadParameter(f"File not found: {manifest}")

    checkout = root or manifest.parent
    if checkout not in manifest.parents:
        raise typer.BadParameter(f"{manifest} is not inside {checkout}")

    loader = LocalFileLoader(checkout)
    extractor = ReferenceExtractor(YamlDecoder())
    try:
        children = extractor.get_resources(
            loader.load(loader.document_for(manifest)),
            include_resources=resources,
            include_generators=generators,
            include_transformers=transformers,
        )
    except KustSearchError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if not children:
        console.print("[yellow]No references found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Type")
    table.add_column("Path")
    table.add_column("Repository")
    for child in children:
        table.add_row(child.file_type, child.file_path, child.repository_url)
    console.print(table)


@app.command()
def crawl(
    root: Path = typer.Argument(..., help="Repository checkout to crawl", resolve_path=True),
    seeds: Optional[List[Path]] = typer.Argument(
        None, help="Start paths inside the checkout (default: every kustomization)"
    ),
    repository_url: str = typer.Option("", "--repo-url", help="URL recorded for the checkout"),
    branch: str = typer.Option("", "--branch", help="Default branch recorded for the checkout"),
    max_documents: int = typer.Option(AppConfig().max_documents, help="Maximum documents to visit"),
    as_json: bool = typer.Option(False, "--json", help="Print each record as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Crawl kustomizations in a local checkout and everything they reference."""
    _setup_logging(verbose)
    if not root.is_dir():
        raise typer.BadParameter(f"Directory not found: {root}")

    config = AppConfig(max_documents=max_documents)
    decoder = YamlDecoder()
    loader = LocalFileLoader(
        root,
        repository_url=repository_url,
        default_branch=branch,
        manifest_names=config.manifest_names,
    )
    crawler = Crawler(
        loader,
        ManifestParser(decoder, config),
        ReferenceExtractor(decoder, config),
        max_documents=config.max_documents,
    )

    start = [root / seed for seed in seeds] if seeds else [root]
    manifests = list(iter_manifest_paths(start, config.manifest_names))
    if not manifests:
        console.print("[yellow]No kustomization files found.[/yellow]")
        return

    console.print(f"Crawling [bold]{loader.repository_url}[/bold]...")
    stats = crawler.crawl(
        [loader.document_for(path) for path in manifests],
        sink=_print_json if as_json else None,
    )
    console.print(
        f"Parsed: {stats.parsed}, failed: {stats.failed}, "
        f"missing: {stats.missing}, remote: {stats.remote}"
    )


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
) -> None:
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    console.print(f"Starting web interface on http://{host}:{port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
