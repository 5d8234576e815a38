"""
ldquery CLI - explore and query JSON-LD entity graphs

Every command takes one or more JSON-LD files; several files are
normalized separately and merged by entity id.
"""
import json

import click
from rich.console import Console
from rich.table import Table

from ldquery.discovery import (
    discover_entity_types,
    discover_fields,
    discover_relationships,
)
from ldquery.graph import EntityCollection, merge_collections, normalize
from ldquery.query import (
    QueryResult,
    get_template,
    import_query,
    list_templates,
    run_query,
    validate_query,
)
from ldquery.settings import reload_settings
from ldquery.utils import DataLoadError, LDQueryError, get_logger, read_json, setup_logging

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


def _load_collection(paths, settings) -> EntityCollection:
    try:
        collections = [normalize(read_json(path), settings) for path in paths]
    except DataLoadError as e:
        err_console.print(f"\n[red]✗ Error: {e}[/red]")
        raise SystemExit(1)
    return merge_collections(collections, settings)


def _print_json(payload):
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _run_and_print(spec, paths, settings, as_json):
    try:
        collection = _load_collection(paths, settings)
        for issue in validate_query(collection, spec):
            err_console.print(f"[yellow]⚠ {issue}[/yellow]")
        result = run_query(collection, spec, settings)
    except LDQueryError as e:
        err_console.print(f"\n[red]✗ Error: {e}[/red]")
        raise SystemExit(1)

    _print_result(result, as_json)


def _print_result(result: QueryResult, as_json: bool):
    if as_json:
        _print_json(result.model_dump(mode="json"))
        return

    table = Table(title=result.title)
    table.add_column(result.dimension_label, style="cyan")
    table.add_column(result.measure_label, style="magenta", justify="right")
    table.add_column("Entities", justify="right")
    for group in result.groups:
        value = f"{group.value:g}"
        table.add_row(group.label, value, str(group.support_count))
    console.print(table)
    console.print(
        f"[dim]{result.total_entities} entities in {result.unique_groups} groups"
        f" (showing {len(result.groups)})[/dim]"
    )


# ═══════════════════════════════════════════════════════════════════
# MAIN CLI GROUP
# ═══════════════════════════════════════════════════════════════════

@click.group()
@click.version_option(version='0.1.0')
@click.option('--config', '-c', 'config_path', type=click.Path(), help='YAML settings file')
@click.pass_context
def main(ctx, config_path):
    """
    ldquery - schema-less analytics over JSON-LD entity graphs
    """
    settings = reload_settings(config_path)
    setup_logging(settings.log_level, settings.log_file)
    ctx.obj = settings


# ═══════════════════════════════════════════════════════════════════
# DISCOVERY COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True))
@click.option('--json', 'as_json', is_flag=True, help='Emit JSON')
@click.pass_obj
def types(settings, paths, as_json):
    """List entity types with counts"""
    collection = _load_collection(paths, settings)
    infos = discover_entity_types(collection)

    if as_json:
        _print_json([info.to_dict() for info in infos])
        return

    table = Table(title="Entity Types")
    table.add_column("Type", style="cyan")
    table.add_column("Label")
    table.add_column("Count", style="magenta", justify="right")
    for info in infos:
        table.add_row(info.type, info.label, str(info.count))
    console.print(table)


@main.command()
@click.argument('entity_type')
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True))
@click.option('--json', 'as_json', is_flag=True, help='Emit JSON')
@click.pass_obj
def fields(settings, entity_type, paths, as_json):
    """Show the fields observed on ENTITY_TYPE"""
    collection = _load_collection(paths, settings)
    infos = discover_fields(collection, entity_type, settings)

    if as_json:
        _print_json([info.to_dict() for info in infos])
        return
    if not infos:
        console.print(f"[yellow]No entities of type {entity_type}[/yellow]")
        return

    table = Table(title=f"Fields of {entity_type}")
    table.add_column("Field", style="cyan")
    table.add_column("Type")
    table.add_column("Frequency", style="magenta", justify="right")
    table.add_column("Samples")
    for info in infos:
        samples = ", ".join(str(v) for v in info.sample_values[:3])
        table.add_row(info.name, info.type, f"{info.frequency:.0%}", samples)
    console.print(table)


@main.command()
@click.argument('entity_type')
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True))
@click.option('--json', 'as_json', is_flag=True, help='Emit JSON')
@click.pass_obj
def relationships(settings, entity_type, paths, as_json):
    """Show the relationships observed on ENTITY_TYPE"""
    collection = _load_collection(paths, settings)
    infos = discover_relationships(collection, entity_type)

    if as_json:
        _print_json([info.to_dict() for info in infos])
        return
    if not infos:
        console.print(f"[yellow]No relationships for {entity_type}[/yellow]")
        return

    table = Table(title=f"Relationships of {entity_type}")
    table.add_column("Relation", style="cyan")
    table.add_column("Targets")
    table.add_column("Frequency", style="magenta", justify="right")
    table.add_column("Edges", justify="right")
    for info in infos:
        table.add_row(info.name, ", ".join(info.target_types), f"{info.frequency:.0%}", str(info.edge_count))
    console.print(table)


# ═══════════════════════════════════════════════════════════════════
# QUERY COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.argument('measure_type')
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True))
@click.option('--aggregation', '-a', default='count', help='count, sum, average, min, max, cumulative')
@click.option('--field', 'measure_field', help='Numeric field for non-count aggregations')
@click.option('--by', 'dimension_field', help='Field that labels each group')
@click.option('--dimension-type', help='Entity type providing the group label')
@click.option('--via', 'dimension_via', help='Relation from the measure type to the dimension type')
@click.option('--sort', default=None, help='value-desc, label-asc, chrono-asc, ...')
@click.option('--limit', type=int, default=None, help='Keep only the first N groups')
@click.option('--json', 'as_json', is_flag=True, help='Emit JSON')
@click.pass_obj
def query(settings, measure_type, paths, aggregation, measure_field, dimension_field,
          dimension_type, dimension_via, sort, limit, as_json):
    """Group MEASURE_TYPE entities and aggregate each group"""
    spec = {
        "measure_type": measure_type,
        "measure_aggregation": aggregation,
        "measure_field": measure_field,
        "dimension_type": dimension_type,
        "dimension_field": dimension_field,
        "dimension_via": dimension_via,
        "sort": sort or settings.default_sort,
        "limit": limit,
    }
    _run_and_print(spec, paths, settings, as_json)


@main.command(name='run-export')
@click.argument('query_file', type=click.Path(exists=True))
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True))
@click.option('--json', 'as_json', is_flag=True, help='Emit JSON')
@click.pass_obj
def run_export(settings, query_file, paths, as_json):
    """Run a query previously exported to QUERY_FILE"""
    with open(query_file, encoding="utf-8") as f:
        text = f.read()
    try:
        exported = import_query(text)
    except LDQueryError as e:
        err_console.print(f"\n[red]✗ Error: {e}[/red]")
        raise SystemExit(1)

    if not as_json:
        console.print(f"\n[bold blue]{exported.title}[/bold blue]")
    _run_and_print(exported.spec, paths, settings, as_json)


@main.command()
@click.option('--json', 'as_json', is_flag=True, help='Emit JSON')
def templates(as_json):
    """List preset queries"""
    presets = list_templates()
    if as_json:
        _print_json([t.model_dump(mode="json") for t in presets])
        return

    table = Table(title="Query Templates")
    table.add_column("ID", style="cyan")
    table.add_column("Category")
    table.add_column("Description")
    for template in presets:
        table.add_row(template.id, template.category, template.description)
    console.print(table)


@main.command(name='run-template')
@click.argument('template_id')
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True))
@click.option('--json', 'as_json', is_flag=True, help='Emit JSON')
@click.pass_obj
def run_template(settings, template_id, paths, as_json):
    """Run the preset query TEMPLATE_ID"""
    template = get_template(template_id)
    if template is None:
        err_console.print(f"\n[red]✗ Unknown template: {template_id}[/red]")
        raise SystemExit(1)

    try:
        collection = _load_collection(paths, settings)
        result = run_query(collection, template.spec, settings)
    except LDQueryError as e:
        err_console.print(f"\n[red]✗ Error: {e}[/red]")
        raise SystemExit(1)

    if not as_json:
        console.print(f"\n[bold blue]{template.title}[/bold blue]")
    _print_result(result, as_json)


if __name__ == '__main__':
    main()
