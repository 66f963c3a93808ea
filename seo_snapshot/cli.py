"""CLI entry point: score a business from a JSON file."""

import argparse
import json
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import Settings, configure_logging
from .models import BusinessProfile, ScoreResult, SignalBundle
from .scoring import compute_score


def _score_style(score: int) -> str:
    if score >= 80:
        return "bold green"
    if score >= 60:
        return "bold yellow"
    return "bold red"


def render_result(console: Console, business_name: str, result: ScoreResult) -> None:
    table = Table(title=f"SEO Snapshot: {escape(business_name)}", show_lines=True)
    table.add_column("Area", style="bold", no_wrap=True)
    table.add_column("Score", justify="right", no_wrap=True)
    table.add_column("Insights")

    for label, part in (("Local SEO", result.local), ("On-Site SEO", result.onsite)):
        insights = "\n".join(f"• {escape(text)}" for text in part.insights) or "[green]No issues found[/]"
        table.add_row(label, f"[{_score_style(part.score)}]{part.score}/100[/]", insights)

    table.add_row("Combined", f"[{_score_style(result.combined)}]{result.combined}/100[/]", "")
    console.print(table)


def main(argv: list[str] | None = None):
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(
        prog="seo-snapshot",
        description="Score a local business from a JSON file of profile and signals.",
    )
    parser.add_argument(
        "input",
        type=Path,
        help='JSON file shaped like {"profile": {...}, "signals": {...}}',
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the raw score JSON instead of a table",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else settings.log_level)
    console = Console()

    try:
        body = json.loads(args.input.read_text(encoding="utf-8"))
        if not isinstance(body, dict):
            raise ValueError("Input must be a JSON object")
        profile = BusinessProfile.from_dict(body.get("profile"))
        bundle = SignalBundle.from_dict(body.get("signals"))
    except (OSError, ValueError) as e:
        console.print(f"\n[bold red]Error:[/] {e}\n")
        sys.exit(1)

    result = compute_score(profile, bundle)

    if args.json:
        console.print_json(json.dumps(result.to_dict()))
    else:
        render_result(console, profile.business_name, result)


if __name__ == "__main__":
    main()
