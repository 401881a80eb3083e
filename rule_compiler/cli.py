#!/usr/bin/env python3
"""
CLI for the rule compiler.

Usage:
    rule-compiler check schema.json document.json
    rule-compiler describe schema.json
    rule-compiler config
"""
import json
import sys
from pathlib import Path
from typing import Any

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from rule_compiler import __version__, compile_schema
from rule_compiler.errors import RuleCompilerError
from rule_compiler.rules.algebra import ValidationRule

console = Console()

EXIT_VIOLATIONS = 1
EXIT_NOTHING_TO_COMPILE = 2


@click.group()
@click.version_option(version=__version__, prog_name="rule-compiler")
def cli():
    """
    Compile JSON Schema documents into validation rules and check documents against them.
    """


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{path} is not valid JSON: {exc.msg} (line {exc.lineno})") from exc


def _compile_or_exit(schema_path: Path) -> ValidationRule:
    try:
        rule = compile_schema(_load_json(schema_path))
    except RuleCompilerError as exc:
        raise click.ClickException(f"Cannot compile {schema_path}: {exc}") from exc
    if rule is None:
        console.print(f"[yellow]{schema_path} has no top-level 'properties'; nothing to compile.[/yellow]")
        sys.exit(EXIT_NOTHING_TO_COMPILE)
    return rule


@cli.command()
@click.argument('schema_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('document_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--format', '-f', 'fmt', type=click.Choice(['json', 'table']), default='table', help='Output format')
def check(schema_path: Path, document_path: Path, fmt: str):
    """
    Validate a JSON document against a JSON Schema.

    \b
    Exit codes:
      0 - document conforms
      1 - document has violations
      2 - schema has no top-level properties
    """
    rule = _compile_or_exit(schema_path)
    violations = list(rule.iter_errors(_load_json(document_path)))

    if fmt == 'json':
        click.echo(json.dumps(
            {
                "valid": not violations,
                "violations": [
                    {"path": v.path, "message": v.message, "validator": v.validator}
                    for v in violations
                ],
            },
            indent=2,
        ))
    elif not violations:
        console.print(f"[green]●[/green] {document_path} conforms to {schema_path}")
    else:
        table = Table(title=f"{len(violations)} violation(s) in {document_path}", box=box.ROUNDED)
        table.add_column("Path", style="cyan")
        table.add_column("Validator", style="dim")
        table.add_column("Message")
        for violation in violations:
            table.add_row(escape(violation.path), violation.validator, escape(violation.message))
        console.print(table)

    if violations:
        sys.exit(EXIT_VIOLATIONS)


@cli.command()
@click.argument('schema_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def describe(schema_path: Path):
    """
    Print the compiled rule tree of a JSON Schema.
    """
    rule = _compile_or_exit(schema_path)
    tree = Tree(f"[bold cyan]{schema_path.name}[/bold cyan] {escape(rule.describe())}")
    _add_children(tree, rule)
    console.print(tree)


def _add_children(tree: Tree, rule: ValidationRule) -> None:
    for label, child in rule.children():
        branch = tree.add(f"[cyan]{label}[/cyan] {escape(child.describe())}")
        _add_children(branch, child)


@cli.command()
def config():
    """
    Show current configuration (RULE_COMPILER_* environment variables and .env).
    """
    from rule_compiler.config import config as compiler_config

    table = Table(title="Rule compiler settings", box=box.ROUNDED)
    table.add_column("Setting", style="cyan")
    table.add_column("Env Variable", style="dim")
    table.add_column("Value")
    for name in type(compiler_config).model_fields:
        table.add_row(name, f"RULE_COMPILER_{name.upper()}", str(getattr(compiler_config, name)))
    console.print(table)


def main():
    cli()


if __name__ == "__main__":
    main()
