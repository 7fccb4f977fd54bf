"""
main.py – CLI entry point for the PEAR carbon calculator.

Usage
-----
Calculate a whole production (all modules + GHG scope split):
    pear-calc calculate --input "workbook.json"

Calculate one module only:
    pear-calc calculate --input "workbook.json" --module fuel

Write the results JSON:
    pear-calc calculate --input "workbook.json" --out "out/results.json"
    pear-calc calculate --input "workbook.json" --save     # → $PEAR_OUTPUT_DIR/results.json

Show or export the active emission factor table:
    pear-calc factors
    pear-calc factors --dump "out/emission_factors.json"

Common options:
    --verbose   DEBUG logging (per-entry formulas)

Exit status is 1 when the input is invalid or any entry had to be skipped.
"""
from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from pear_calc import __version__
from pear_calc.calculators import ModuleResults, calculate_module
from pear_calc.calculators.base import EntryError
from pear_calc.config import Config, configure_logging, get_config
from pear_calc.constants import ALL_MODULES, MODULE_DISPLAY_NAMES
from pear_calc.emission_factors import EmissionFactorTable, get_factor_table
from pear_calc.io_utils import load_workbook, write_factor_table, write_results
from pear_calc.summary import ProductionSummary, calculate_production

console = Console()


# ─────────────────────────────────────────────────────────────
# Rendering helpers
# ─────────────────────────────────────────────────────────────

def _kg(value: float | None) -> str:
    return "" if value is None else f"{value:,.2f}"


def _result_detail(result: Any) -> str:
    for name in ("calculation_method", "transport_type", "region"):
        value = getattr(result, name, None)
        if value:
            return str(value)
    return ""


def _print_module_results(results: ModuleResults) -> None:
    """Render per-entry results and totals for one module."""
    title = MODULE_DISPLAY_NAMES.get(results.module, results.module)

    table = Table(title=f"{title} – entries", show_lines=False)
    table.add_column("Entry", style="bold")
    table.add_column("kg CO₂e", justify="right", style="green")
    table.add_column("Detail")
    for result in results.results:
        table.add_row(result.entry_id, _kg(result.co2e), _result_detail(result))
    console.print(table)

    if results.totals is None:
        console.print(f"[yellow]{title}:[/] no data")
        return

    totals = Table(title=f"{title} – totals")
    totals.add_column("Metric", style="cyan")
    totals.add_column("Value", justify="right")
    for f in dataclasses.fields(results.totals):
        value = getattr(results.totals, f.name)
        if isinstance(value, dict):
            for key, amount in value.items():
                totals.add_row(f"{f.name}: {key}", _kg(amount))
        elif value is not None:
            totals.add_row(f.name, _kg(value))
    console.print(totals)


def _print_errors(errors: list[tuple[str, EntryError]]) -> None:
    if not errors:
        return
    table = Table(title="Skipped entries", show_lines=True)
    table.add_column("Module", style="bold")
    table.add_column("Entry")
    table.add_column("Error", style="red")
    table.add_column("Message")
    for module, err in errors:
        table.add_row(
            MODULE_DISPLAY_NAMES.get(module, module), err.entry_id, err.error_type, err.message
        )
    console.print(table)


def _print_summary(summary: ProductionSummary) -> None:
    """Render the scope split and per-module rows of a production summary."""
    name = summary.production_name or "Production"
    console.print(
        Panel(
            f"[bold]{name}[/]: {summary.total_co2e:,.2f} kg CO₂e "
            f"({summary.total_metric_tons:,.3f} t)",
            style="blue",
        )
    )

    table = Table(title="Emissions by module and scope", show_lines=False)
    table.add_column("Module", style="bold")
    table.add_column("Scope 1", justify="right")
    table.add_column("Scope 2", justify="right")
    table.add_column("Scope 3", justify="right")
    table.add_column("Total", justify="right", style="green")
    for row in summary.module_scopes:
        table.add_row(row.module_name, _kg(row.scope1), _kg(row.scope2), _kg(row.scope3), _kg(row.total))
    scopes = summary.scopes
    table.add_row(
        "[bold]Total[/]", _kg(scopes.scope1), _kg(scopes.scope2), _kg(scopes.scope3),
        _kg(scopes.total_co2e),
    )
    console.print(table)

    if summary.waste is not None:
        console.print(
            f"Waste diversion: [bold]{summary.waste.diversion_rate:.1f}%[/] "
            f"of {summary.waste.total_pounds:,.0f} lb"
        )
    if summary.drinking_water is not None:
        console.print(
            f"Drinking water: {summary.drinking_water.total_bottles:,.0f} bottles, "
            f"${summary.drinking_water.total_cost:,.2f}"
        )


def _print_factor_table(table: EmissionFactorTable) -> None:
    console.print(
        Panel(
            f"[bold]Emission factors[/] v{table.version}\n"
            f"{table.source}\n{table.electricity_source}",
            style="blue",
        )
    )
    factors = Table(title="Fuel factors (kg CO₂e per unit)")
    factors.add_column("Fuel", style="cyan")
    factors.add_column("Value", justify="right")
    factors.add_column("Unit")
    for name, factor in table.fuel.items():
        factors.add_row(name, f"{factor.value:g}", factor.unit)
    console.print(factors)

    grid = Table(title="Grid electricity (kg CO₂e/kWh)")
    grid.add_column("Country", style="cyan")
    grid.add_column("Value", justify="right")
    for country, factor in table.electricity.items():
        grid.add_row(country, f"{factor.value:g}")
    console.print(grid)

    aircraft = Table(title="Charter aircraft")
    aircraft.add_column("Aircraft", style="cyan")
    aircraft.add_column("gal/h", justify="right")
    aircraft.add_column("mpg", justify="right")
    aircraft.add_column("kg CO₂e/gal", justify="right")
    for name, data in table.aircraft.items():
        aircraft.add_row(
            name, f"{data.gallons_per_hour:g}", f"{data.miles_per_gallon:g}",
            f"{data.emission_factor_per_gallon:g}",
        )
    console.print(aircraft)


def _load_config(args: argparse.Namespace) -> Config | None:
    try:
        cfg = get_config()
    except EnvironmentError as exc:
        console.print(f"[red]Config error:[/] {escape(str(exc))}")
        return None
    configure_logging(logging.DEBUG if getattr(args, "verbose", False) else cfg.log_level)
    return cfg


# ─────────────────────────────────────────────────────────────
# CLI commands
# ─────────────────────────────────────────────────────────────

def cmd_calculate(args: argparse.Namespace) -> int:
    """Handle: pear-calc calculate --input ..."""
    input_path = Path(args.input)
    if not input_path.exists():
        console.print(f"[red]Error:[/] File not found: {input_path}")
        return 1

    cfg = _load_config(args)
    if cfg is None:
        return 1

    try:
        workbook = load_workbook(input_path)
    except (OSError, json.JSONDecodeError) as exc:
        console.print(f"[red]Error:[/] Could not read {input_path}: {escape(str(exc))}")
        return 1
    except ValidationError as exc:
        console.print(f"[red]Invalid workbook:[/] {escape(str(exc))}")
        return 1

    try:
        factors = get_factor_table()
    except EnvironmentError as exc:
        console.print(f"[red]Config error:[/] {escape(str(exc))}")
        return 1

    if args.module:
        results = calculate_module(args.module, getattr(workbook, args.module), factors)
        _print_module_results(results)
        errors = [(args.module, e) for e in results.errors]
        payload = results.to_dict()
    else:
        summary = calculate_production(workbook, factors)
        _print_summary(summary)
        if args.verbose:
            for results in summary.modules.values():
                if results.entries:
                    _print_module_results(results)
        errors = [(m, e) for m, errs in summary.errors.items() for e in errs]
        payload = summary.to_dict()

    _print_errors(errors)

    if args.out or args.save:
        dest = write_results(
            payload,
            path=Path(args.out) if args.out else None,
            outdir=Path(cfg.output_dir),
        )
        console.print(f"[green]✓[/] Results written to [bold]{dest}[/]")

    return 0 if not errors else 1


def cmd_factors(args: argparse.Namespace) -> int:
    """Handle: pear-calc factors [--dump FILE]"""
    cfg = _load_config(args)
    if cfg is None:
        return 1
    try:
        table = get_factor_table()
    except EnvironmentError as exc:
        console.print(f"[red]Config error:[/] {escape(str(exc))}")
        return 1

    _print_factor_table(table)
    if args.dump:
        dest = write_factor_table(table, path=Path(args.dump))
        console.print(f"[green]✓[/] Factor table written to [bold]{dest}[/]")
    return 0


# ─────────────────────────────────────────────────────────────
# Argument parsing
# ─────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    """Construct and return the top-level argument parser."""
    root = argparse.ArgumentParser(
        prog="pear-calc",
        description="PEAR production carbon calculator – local CLI tool.",
    )
    root.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = root.add_subparsers(dest="command", required=True)

    # ── calculate ───────────────────────────────────────────────
    p_calc = sub.add_parser("calculate", help="Calculate emissions for a workbook JSON file.")
    p_calc.add_argument(
        "--input",
        required=True,
        help='Path to the workbook JSON, e.g. "workbook.json"',
    )
    p_calc.add_argument(
        "--module",
        choices=ALL_MODULES,
        default=None,
        help="Calculate a single module instead of the whole production",
    )
    p_calc.add_argument(
        "--out",
        default=None,
        help="Write results JSON to this path",
    )
    p_calc.add_argument(
        "--save",
        action="store_true",
        default=False,
        help="Write results JSON to PEAR_OUTPUT_DIR/results.json",
    )
    p_calc.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="DEBUG logging and per-module tables",
    )

    # ── factors ─────────────────────────────────────────────────
    p_factors = sub.add_parser("factors", help="Show the active emission factor table.")
    p_factors.add_argument(
        "--dump",
        default=None,
        help="Write the factor table JSON to this path",
    )
    p_factors.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="DEBUG logging",
    )

    return root


_COMMANDS = {
    "calculate": cmd_calculate,
    "factors": cmd_factors,
}


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = _COMMANDS[args.command]
    sys.exit(handler(args))


if __name__ == "__main__":
    main()
