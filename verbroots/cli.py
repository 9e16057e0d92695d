"""verbroots CLI - Main entry point."""

import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

import click
import yaml  # type: ignore[import-untyped]

from verbroots.lexicon.index import VerbRootIndex
from verbroots.models import DictionaryRow, MorphologicalEntry
from verbroots.pipeline import build_source_specs, fetch_settings, load_index
from verbroots.utils.log import setup_logging


# Root directory
ROOT_DIR = Path(__file__).parent.parent


def load_settings(settings_path: Path) -> dict[str, Any]:
    """Load settings.yaml."""
    if not settings_path.exists():
        click.echo(f"Error: settings.yaml not found at {settings_path}", err=True)
        sys.exit(1)

    with settings_path.open(encoding="utf-8") as f:
        result: dict[str, Any] = yaml.safe_load(f) or {}
        return result


def load_sources(sources_path: Path) -> dict[str, Any]:
    """Load sources.yaml."""
    if not sources_path.exists():
        click.echo("Warning: sources.yaml not found, using default file names", err=True)
        return {"sources": {}}

    with sources_path.open(encoding="utf-8") as f:
        result: dict[str, Any] = yaml.safe_load(f) or {"sources": {}}
        return result


def get_index(ctx: click.Context) -> VerbRootIndex:
    """Load the index once per invocation; exit 1 if any source fails."""
    if ctx.obj.get("index") is not None:
        return ctx.obj["index"]

    settings = ctx.obj["settings"]
    logger = ctx.obj["logger"]
    config_dir = ctx.obj["config_dir"]

    data_dir = ctx.obj.get("data_dir")
    if data_dir is not None:
        data_dir = Path.cwd() / data_dir
    else:
        # paths.data is relative to the project root holding etc/
        data_dir = Path(settings.get("paths", {}).get("data", "data"))
        if not data_dir.is_absolute():
            data_dir = config_dir.parent / data_dir

    specs = build_source_specs(load_sources(config_dir / "sources.yaml"), data_dir)
    result = load_index(
        specs,
        fetch_settings(settings),
        search_limit=int(settings.get("search", {}).get("limit", 50)),
        logger=logger,
    )
    if not result.ok:
        click.echo(f"Error: could not load data ({result.error})", err=True)
        sys.exit(1)

    ctx.obj["index"] = result.index
    return result.index


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, ensure_ascii=False, indent=2))


def echo_row(row: DictionaryRow) -> None:
    click.echo(f"{row.syllabary or '---'}  {row.headword}  [{row.h_root.label}]")
    click.echo(f"    {row.definition}")
    if row.other_forms:
        forms = ", ".join(f"{f.label}: {f.syllabary} {f.transliteration}" for f in row.other_forms)
        click.echo(f"    Forms: {forms}")


def echo_entry(index: VerbRootIndex, entry: MorphologicalEntry) -> None:
    row = index.find_row_by_entry_no(entry.entry_no)
    syllabary = row.syllabary if row else "---"
    headword = f" ({row.headword})" if row else ""
    click.echo(f"{syllabary}{headword}  {entry.definition}")

    details = [f"cl. [{entry.class_key}]"]
    if entry.pronoun_set_type:
        details.append(f"Set {entry.pronoun_set_type.upper()}")
    if entry.is_distributive:
        details.append("dist. di")
    click.echo("    " + "  ".join(details))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(path_type=Path),
    default=ROOT_DIR / "etc" / "settings.yaml",
    show_default=True,
    help="Path to settings.yaml (sources.yaml is read from the same directory)",
)
@click.option("--data-dir", type=click.Path(path_type=Path), help="Override paths.data")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, settings_path: Path, data_dir: Path | None) -> None:
    """Browse reconstructed Cherokee verb roots."""
    settings = load_settings(settings_path)

    log_settings = settings.get("logging", {})
    log_level = "DEBUG" if verbose else log_settings.get("level", "INFO")
    log_file = log_settings.get("file")

    logger = setup_logging(
        level=log_level,
        format_type=log_settings.get("format", "pretty"),
        log_file=settings_path.parent.parent / log_file if log_file else None,
    )

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["logger"] = logger
    ctx.obj["config_dir"] = settings_path.parent
    ctx.obj["data_dir"] = data_dir


@cli.command()
@click.argument("query")
@click.option("--limit", type=int, help="Maximum results (default: search.limit)")
@click.option("--include-unlinked", is_flag=True, help="Show rows without a linked root")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def search(ctx: click.Context, query: str, limit: int | None, include_unlinked: bool, as_json: bool) -> None:
    """Search headwords, syllabary, definitions, forms and roots."""
    min_length = int(ctx.obj["settings"].get("search", {}).get("min_query_length", 2))
    if len(query.strip()) < min_length:
        click.echo(f"Query must be at least {min_length} characters", err=True)
        return

    index = get_index(ctx)
    results = index.search(query, limit=limit, linked_only=not include_unlinked)

    if as_json:
        echo_json([row.to_dict() for row in results])
        return

    if not results:
        click.echo("No matches found")
        return
    for row in results:
        echo_row(row)


@cli.command()
@click.argument("root_label")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def root(ctx: click.Context, root_label: str, as_json: bool) -> None:
    """Show every formation sharing an h-grade root ("null" and "unknown" included)."""
    index = get_index(ctx)
    entries = index.get_by_root(root_label)

    if as_json:
        echo_json([item.to_dict() for item in entries])
        return

    click.echo(f"H-grade root: {root_label}")
    click.echo(f"Showing {len(entries)} related formations\n")
    for item in entries:
        echo_entry(index, item)


@cli.command(name="class")
@click.argument("class_name")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def verb_class(ctx: click.Context, class_name: str, as_json: bool) -> None:
    """Show every formation in a verb class, with its endings."""
    index = get_index(ctx)
    entries = index.get_by_class(class_name)
    info = index.get_class_info(class_name)

    if as_json:
        echo_json({
            "class": info.to_dict() if info else {"class_name": class_name},
            "entries": [item.to_dict() for item in entries],
        })
        return

    click.echo(f"Class: {class_name} ({len(entries)} formations)")
    if info:
        for tense, ending in info.endings().items():
            click.echo(f"    {tense}: {ending or '-'}")
    click.echo()
    for item in entries:
        echo_entry(index, item)


@cli.command()
@click.argument("entry_no")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def entry(ctx: click.Context, entry_no: str, as_json: bool) -> None:
    """Show a morphological entry with its dictionary row and example sentences."""
    index = get_index(ctx)
    found = index.get_by_entry_no(entry_no)
    if found is None:
        click.echo(f"No morphological entry {entry_no}", err=True)
        sys.exit(1)

    row = index.find_row_by_entry_no(entry_no)
    sentences = index.get_sentences(row.entry_index) if row else []
    info = index.get_class_info(found.class_name)

    if as_json:
        echo_json({
            "entry": found.to_dict(),
            "row": row.to_dict() if row else None,
            "class": info.to_dict() if info else None,
            "sentences": [s.to_dict() for s in sentences],
        })
        return

    echo_entry(index, found)
    click.echo(f"    h-grade root: {found.h_grade_root.label}")
    click.echo(f"    glottal-grade root: {found.glottal_grade_root.label}")
    for tense, stem in found.original_stems.items():
        click.echo(f"    {tense}: {stem}")
    if info:
        endings = ", ".join(f"{k} -{v}" for k, v in info.endings().items() if v)
        click.echo(f"    endings: {endings}")

    if sentences:
        click.echo(f"\n{len(sentences)} example sentences:")
    for sentence in sentences:
        click.echo(f"  [{sentence.id}] {sentence.syllabary_text}")
        click.echo(f"      {sentence.transliteration}")
        click.echo(f"      {sentence.english_gloss}")


@cli.command()
@click.pass_context
def roots(ctx: click.Context) -> None:
    """List root labels with their formation counts."""
    index = get_index(ctx)
    for label in index.roots():
        click.echo(f"{label}\t{len(index.get_by_root(label))}")


@cli.command()
@click.pass_context
def classes(ctx: click.Context) -> None:
    """List verb classes with their formation counts."""
    index = get_index(ctx)
    for name in index.class_names():
        click.echo(f"{name}\t{len(index.get_by_class(name))}")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def stats(ctx: click.Context, as_json: bool) -> None:
    """Show index statistics and source provenance."""
    index = get_index(ctx)
    counts = index.stats()

    if as_json:
        echo_json({
            "stats": asdict(counts),
            "sources": [artifact.to_dict() for artifact in index.provenance],
        })
        return

    for key, value in vars(counts).items():
        click.echo(f"{key}: {value}")
    click.echo()
    for artifact in index.provenance:
        click.echo(f"{artifact.source}: {artifact.size_bytes:,} bytes {artifact.hash}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
