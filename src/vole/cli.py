"""CLI interface for Vole."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from vole import distro
from vole.config import Config, ConfigError
from vole.core.engine import apply, scan_rules
from vole.core.privileges import PrivilegeError, find_vole_command, is_root, reexec_with_sudo, resolve_home
from vole.core.report import dry_run_output, remove_dry_run_report, write_dry_run_report
from vole.models.options import DownloadsChoice, ScanOptions
from vole.models.rule import Rule, RuleKind
from vole.models.rule_scan import RuleScan
from vole.utils import bytes_to_human

log = logging.getLogger(__name__)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


def _resolve_home(override: Path | None = None) -> Path:
    home = resolve_home(is_root(), override)
    if home is None:
        raise click.ClickException("Failed to resolve home directory")
    return home


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to a JSON config file.",
)
@click.pass_context
def main(ctx: click.Context, verbose: int, config_path: Path | None) -> None:
    """Vole — safe rule-based cleanup for Linux."""
    _setup_logging(verbose)
    ctx.obj = {"config_path": config_path, "verbose": verbose}


# ── clean ────────────────────────────────────────────────────────────────

@main.command()
@click.option("--dry-run", is_flag=True, help="Preview cleanup without deleting anything")
@click.option("--sudo", is_flag=True, help="Include system rules that require root")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt")
@click.option("--rule", "rule_ids", multiple=True, help="Limit to specific rule IDs (repeatable)")
@click.option("--list-rules", is_flag=True, help="List available rules and exit")
@click.option(
    "--downloads-remove",
    type=click.Choice([c.value for c in DownloadsChoice]),
    default=None,
    help="Side of archive/folder pairs to remove in Downloads",
)
@click.option("--json", "as_json", is_flag=True, help="Print the plan and result as JSON")
@click.option("--user-home", type=click.Path(path_type=Path, file_okay=False), default=None, hidden=True)
@click.pass_context
def clean(
    ctx: click.Context,
    dry_run: bool,
    sudo: bool,
    yes: bool,
    rule_ids: tuple[str, ...],
    list_rules: bool,
    downloads_remove: str | None,
    as_json: bool,
    user_home: Path | None,
) -> None:
    """Scan the selected rules, then preview or delete what they match."""
    if sudo and as_json and not dry_run and not yes:
        raise click.UsageError("--sudo --json deletes without a prompt; pass --yes as well")

    root = is_root()
    home = _resolve_home(user_home)
    config = _load_config(ctx.obj["config_path"])
    available = config.available_rules(distro.detect())

    if sudo and not root:
        args = _sudo_args(ctx, home, dry_run, yes, rule_ids, list_rules, downloads_remove, as_json)
        try:
            ctx.exit(reexec_with_sudo(args))
        except PrivilegeError as exc:
            raise click.ClickException(str(exc)) from exc

    if list_rules:
        _print_rules(available)
        return

    rules = _select_rules(available, rule_ids)
    if not sudo:
        rules = [r for r in rules if not r.requires_sudo]

    if not rules:
        click.echo("No rules selected.")
        return

    choice = _resolve_downloads_choice(rules, downloads_remove, yes or as_json)
    scans = scan_rules(rules, ScanOptions(downloads_choice=choice, home=home))

    if as_json:
        _emit_json(scans, home, dry_run)
        return

    _print_plan(scans)

    if dry_run:
        _emit_dry_run(scans, home)
        return

    if not yes and not _confirm(sudo):
        click.echo("Canceled.")
        return

    outcome = apply(scans)
    _forget_dry_run(home)

    click.echo(f"Removed {outcome.files_removed} files and {outcome.dirs_removed} directories")
    click.echo(f"Freed {click.style(bytes_to_human(outcome.bytes_freed), fg='green', bold=True)}")
    if outcome.errors:
        click.echo(click.style(f"Errors encountered: {outcome.errors}", fg="yellow"))
        for message in outcome.error_messages:
            log.info("%s", message)


def _select_rules(available: list[Rule], rule_ids: tuple[str, ...]) -> list[Rule]:
    """Explicit ``--rule`` ids, or every rule enabled by default."""
    if not rule_ids:
        return [r for r in available if r.enabled_by_default]

    wanted = [rid.lower() for rid in rule_ids]
    known = {r.id.lower() for r in available}
    unknown = [rid for rid in wanted if rid not in known]
    if unknown:
        click.echo(f"Unknown rule ids: {', '.join(unknown)}", err=True)
    return [r for r in available if r.id.lower() in wanted]


def _resolve_downloads_choice(
    rules: list[Rule],
    downloads_remove: str | None,
    non_interactive: bool,
) -> DownloadsChoice | None:
    if not any(r.kind is RuleKind.DOWNLOADS for r in rules):
        return None
    if downloads_remove is not None:
        return DownloadsChoice(downloads_remove)
    if non_interactive:
        raise click.UsageError("Downloads cleanup requires --downloads-remove when using --yes or --json")

    while True:
        raw = click.prompt("Downloads cleanup: remove archives or folders? [a/f]", default="", show_default=False)
        if not raw.strip():
            continue
        choice = DownloadsChoice.parse(raw)
        if choice is not None:
            return choice
        click.echo("Please enter 'a' for archives or 'f' for folders.")


def _confirm(sudo: bool) -> bool:
    if sudo:
        answer = click.prompt("Sudo mode: type DELETE to confirm", default="", show_default=False)
        return answer.strip().lower() == "delete"
    answer = click.prompt("Proceed with deletion? [y/N]", default="n", show_default=False)
    return answer.strip().lower() in ("y", "yes")


def _sudo_args(
    ctx: click.Context,
    home: Path,
    dry_run: bool,
    yes: bool,
    rule_ids: tuple[str, ...],
    list_rules: bool,
    downloads_remove: str | None,
    as_json: bool,
) -> list[str]:
    """Rebuild the current invocation for a run under sudo."""
    args = find_vole_command()
    if ctx.obj["verbose"]:
        args.append("-" + "v" * ctx.obj["verbose"])
    if ctx.obj["config_path"] is not None:
        args += ["--config", str(ctx.obj["config_path"])]
    args += ["clean", "--sudo", "--user-home", str(home)]
    if dry_run:
        args.append("--dry-run")
    if downloads_remove is not None:
        args += ["--downloads-remove", downloads_remove]
    if yes:
        args.append("--yes")
    if as_json:
        args.append("--json")
    for rule_id in rule_ids:
        args += ["--rule", rule_id]
    if list_rules:
        args.append("--list-rules")
    return args


def _print_rules(rules: list[Rule]) -> None:
    click.echo("Available rules:")
    for rule in rules:
        sudo_tag = click.style(" (sudo)", fg="yellow") if rule.requires_sudo else ""
        default_tag = click.style(" [default]", fg="green") if rule.enabled_by_default else ""
        click.echo(f"- {click.style(rule.id, fg='cyan', bold=True)}{sudo_tag}{default_tag}")
        if rule.description:
            click.echo(f"  {rule.description}")


def _print_plan(scans: list[RuleScan]) -> None:
    click.echo("Cleanup plan:")
    total_bytes = 0
    total_entries = 0
    for scan in scans:
        total_bytes += scan.bytes
        total_entries += scan.entries
        click.echo(f"- {scan.rule.label}: {bytes_to_human(scan.bytes)} ({scan.entries:,} items)")
    click.echo(f"Total: {click.style(bytes_to_human(total_bytes), fg='green', bold=True)} across {total_entries:,} items")


def _emit_dry_run(scans: list[RuleScan], home: Path) -> None:
    output = dry_run_output(scans)
    click.echo(output.details, nl=False)

    try:
        path = write_dry_run_report(home, output.details)
        click.echo(f"Dry-run report saved to {path}")
    except OSError as exc:
        click.echo(f"Failed to write dry-run report: {exc}", err=True)

    totals = output.report
    click.echo(f"Dry-run listed {totals.files_listed} files and {totals.dirs_listed} directories")
    click.echo(f"Would free {click.style(bytes_to_human(totals.bytes_listed), fg='green', bold=True)}")
    if totals.errors:
        click.echo(click.style(f"Errors encountered: {totals.errors}", fg="yellow"))


def _emit_json(scans: list[RuleScan], home: Path, dry_run: bool) -> None:
    data: dict = {
        "status": "dry_run" if dry_run else "cleaned",
        "scans": [
            {
                "rule_id": s.rule.id,
                "label": s.rule.label,
                "bytes": s.bytes,
                "entries": s.entries,
                "files": [str(p) for p in s.files],
                "dirs": [str(p) for p in s.dirs],
                "errors": s.error_messages,
            }
            for s in scans
        ],
    }
    if not dry_run:
        outcome = apply(scans)
        _forget_dry_run(home)
        data["report"] = {
            "files_removed": outcome.files_removed,
            "dirs_removed": outcome.dirs_removed,
            "bytes_freed": outcome.bytes_freed,
            "errors": outcome.error_messages,
        }
    click.echo(json.dumps(data, indent=2))


def _forget_dry_run(home: Path) -> None:
    try:
        remove_dry_run_report(home)
    except OSError as exc:
        log.warning("Could not remove stale dry-run report: %s", exc)


# ── report ───────────────────────────────────────────────────────────────

@main.group()
def report() -> None:
    """Saved dry-run report commands."""


@report.command("clear")
@click.option("--user-home", type=click.Path(path_type=Path, file_okay=False), default=None, hidden=True)
def report_clear(user_home: Path | None) -> None:
    """Delete the saved dry-run report."""
    home = _resolve_home(user_home)
    try:
        removed = remove_dry_run_report(home)
    except OSError as exc:
        raise click.ClickException(f"Could not remove dry-run report: {exc}") from exc
    click.echo("Dry-run report removed." if removed else "No dry-run report to remove.")
