# cli.py
import argparse
import sys
from typing import List
from typing import Optional

import urllib3
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from cluster_profile_cleaner.api import analyze_profiles
from cluster_profile_cleaner.api import cleanup_profiles
from cluster_profile_cleaner.cleaner_service import CONFIRM_ANSWER
from cluster_profile_cleaner.cleaner_service import InspectedProfile
from cluster_profile_cleaner.config.settings import DEFAULT_OUTPUT_DIR
from cluster_profile_cleaner.config.settings import DEFAULT_TIMEOUT
from cluster_profile_cleaner.config.settings import default_api_url
from cluster_profile_cleaner.config.settings import load_api_key
from cluster_profile_cleaner.config.settings import RunConfig
from cluster_profile_cleaner.exceptions import CleanerError
from cluster_profile_cleaner.exceptions import MissingCredentialError
from cluster_profile_cleaner.exceptions import ProjectNotFoundError
from cluster_profile_cleaner.models.outcome import CleanupResults
from cluster_profile_cleaner.models.outcome import ProfileStatus
from cluster_profile_cleaner.models.outcome import RunMode
from cluster_profile_cleaner.utils.logging import audit_log_path
from cluster_profile_cleaner.utils.logging import finish_audit_log
from cluster_profile_cleaner.utils.logging import setup_logging

console = Console()

STATUS_STYLES = {
    ProfileStatus.UNUSED: "yellow",
    ProfileStatus.IN_USE: "green",
    ProfileStatus.DELETED: "red",
    ProfileStatus.FAILED: "bold red",
}

# Display order of the results table per mode
STATUS_ORDER = {
    RunMode.ANALYZE: [ProfileStatus.UNUSED, ProfileStatus.IN_USE],
    RunMode.CLEANUP: [
        ProfileStatus.DELETED,
        ProfileStatus.IN_USE,
        ProfileStatus.FAILED,
    ],
}

WARNING_BANNER = """\
██     ██  █████  ██████  ███    ██ ██ ███    ██  ██████
██     ██ ██   ██ ██   ██ ████   ██ ██ ████   ██ ██
██  █  ██ ███████ ██████  ██ ██  ██ ██ ██ ██  ██ ██   ███
██ ███ ██ ██   ██ ██   ██ ██  ██ ██ ██ ██  ██ ██ ██    ██
 ███ ███  ██   ██ ██   ██ ██   ████ ██ ██   ████  ██████"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cluster-profile-cleaner",
        description="Find and clean up unused Palette cluster profile versions",
        epilog=(
            "Cluster profiles can be tenant-scoped (shared) or project-scoped. "
            "When --project is given, only that project's profiles are processed "
            "and tenant-scoped profiles are ignored. The Palette API key is read "
            "from the SPECTROCLOUD_APIKEY environment variable."
        ),
    )
    parser.add_argument(
        "mode",
        choices=[m.value for m in RunMode],
        help="analyze: report unused profile versions; cleanup: delete them",
    )
    parser.add_argument(
        "--api-url",
        type=str,
        default=default_api_url(),
        help="Palette API URL (default: %(default)s)",
    )
    parser.add_argument(
        "--project", type=str, help="Project name to filter project-scoped profiles"
    )
    parser.add_argument(
        "--profile", type=str, help="Target a specific cluster profile by name"
    )
    parser.add_argument(
        "--export-csv",
        action="store_true",
        help="Export results to a CSV file in the output directory",
    )
    parser.add_argument(
        "--backup",
        dest="backup",
        action="store_true",
        default=None,
        help="Back up profile versions before deletion (cleanup default)",
    )
    parser.add_argument(
        "--no-backup",
        dest="backup",
        action="store_false",
        help="Disable backups in cleanup mode",
    )
    parser.add_argument(
        "--confirm-all",
        action="store_true",
        help="Skip all confirmation prompts (for automation, cleanup mode only)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=DEFAULT_OUTPUT_DIR,
        help="Directory for backups, reports and audit logs (default: %(default)s)",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=DEFAULT_TIMEOUT,
        help="Timeout in seconds for each API request (default: %(default)s)",
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Don't verify the TLS certificate of the Palette API",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output of API requests"
    )
    return parser


def config_from_args(args: argparse.Namespace) -> RunConfig:
    mode = RunMode(args.mode)
    backup = args.backup
    if backup is None:
        backup = mode == RunMode.CLEANUP
    return RunConfig(
        api_url=args.api_url,
        project_name=args.project,
        profile_name=args.profile,
        backup_enabled=bool(backup) and mode == RunMode.CLEANUP,
        confirm_all=args.confirm_all,
        export_csv=args.export_csv,
        output_dir=args.output_dir,
        timeout=args.timeout,
        verify_ssl=not args.insecure,
    )


def _print_configuration(config: RunConfig, mode: RunMode) -> None:
    if mode == RunMode.CLEANUP:
        console.print(
            Panel(
                f"[bold red]{WARNING_BANNER}\n\n"
                "     CLEANUP MODE - PROFILES WILL BE DELETED![/]",
                expand=False,
                border_style="red",
            )
        )

    grid = Table(show_header=False, box=None)
    grid.add_column("Setting", style="cyan bold")
    grid.add_column("Value")
    grid.add_row("API URL", escape(config.api_url))
    if config.project_name:
        grid.add_row("Project", escape(config.project_name))
    else:
        grid.add_row("Project", "All projects (tenant and project-scoped profiles)")
    if config.profile_name:
        grid.add_row("Target Profile", escape(config.profile_name))
    if mode == RunMode.CLEANUP:
        grid.add_row("Backup enabled", str(config.backup_enabled).lower())
        grid.add_row(
            "Confirmation mode",
            "Automatic (--confirm-all)" if config.confirm_all else "Interactive",
        )
    grid.add_row("Output directory", escape(config.output_dir))

    console.print(
        Panel(
            grid,
            title=f"Palette Cluster Profile Cleanup - {mode.value} mode",
            expand=False,
            border_style="blue",
        )
    )


def _ask(prompt: str) -> str:
    try:
        return console.input(prompt)
    except EOFError:
        return ""


def _confirm_cleanup(config: RunConfig) -> bool:
    """The global proceed/abort gate shown before any cleanup work starts."""
    console.print("\n[bold red]YOU ARE ABOUT TO DELETE UNUSED CLUSTER PROFILES![/]\n")
    console.print("This operation will:")
    console.print("  - Analyze cluster profiles to find unused ones")
    console.print("  - Prompt for confirmation before deleting EACH profile")
    if config.backup_enabled:
        console.print("  - Export and backup each profile before deletion")
    answer = _ask("\nDo you want to proceed with cleanup mode? (yes/no): ")
    return answer.strip() == CONFIRM_ANSWER


def _confirm_deletion(inspected: InspectedProfile) -> str:
    details = Table(show_header=False, box=None, padding=(0, 1))
    details.add_column("Field", style="cyan")
    details.add_column("Value")
    details.add_row("Name", escape(inspected.name))
    details.add_row("Version", escape(inspected.version))
    details.add_row("Scope", escape(inspected.scope))
    details.add_row("Project", escape(inspected.project_display))
    details.add_row("UID", escape(inspected.uid))

    console.print()
    console.print(Panel(details, title="[bold yellow]DELETE THIS PROFILE?[/]", expand=False))
    return _ask("  Confirm deletion (yes/no): ")


def _print_results(results: CleanupResults) -> None:
    title = "Cleanup Results" if results.mode == RunMode.CLEANUP else "Analysis Results"
    console.rule(f"[bold magenta]{title}[/]")

    if results.records:
        last_column = "ACTION" if results.mode == RunMode.CLEANUP else "UID"
        table = Table(show_header=True, header_style="bold magenta")
        for column in ["PROFILE NAME", "VERSION", "SCOPE", "PROJECT", "STATUS", last_column]:
            table.add_column(column, style="cyan" if column == "PROFILE NAME" else None)

        for status in STATUS_ORDER[results.mode]:
            for record in results.records_with_status(status):
                table.add_row(
                    escape(record.name),
                    escape(record.version),
                    escape(record.scope),
                    escape(record.project),
                    f"[{STATUS_STYLES[status]}]{status.value}[/]",
                    escape(record.uid_or_action),
                )
        console.print(table)

    summary = Table(show_header=False, box=None)
    summary.add_column("Metric", style="cyan bold")
    summary.add_column("Value", justify="right")
    summary.add_row("Total profiles checked", str(results.total_checked))
    if results.mode == RunMode.CLEANUP:
        summary.add_row("Profiles deleted", str(results.deleted_count))
    else:
        summary.add_row("Unused profiles found", str(results.unused_count))
    if results.skipped_out_of_scope:
        summary.add_row(
            "Profiles skipped (out of scope)", str(results.skipped_out_of_scope)
        )
    if results.errors:
        summary.add_row("Errors (see log)", f"[red]{results.errors}[/]")
    console.print(Panel(summary, title="Summary", expand=False, border_style="green"))


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    mode = RunMode(args.mode)
    config = config_from_args(args)

    try:
        config.api_key = load_api_key()
    except MissingCredentialError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    if args.insecure:
        urllib3.disable_warnings()

    audit_file = audit_log_path(config.output_dir, config.timestamp)
    setup_logging(
        debug=args.debug,
        console=console,
        audit_file=audit_file,
        mode=mode.value,
        api_url=config.api_url,
    )

    _print_configuration(config, mode)

    if mode == RunMode.CLEANUP and not config.confirm_all:
        if not _confirm_cleanup(config):
            console.print("[blue]Cleanup cancelled by user[/]")
            finish_audit_log(audit_file)
            return

    try:
        if mode == RunMode.CLEANUP:
            results = cleanup_profiles(config, confirm=_confirm_deletion)
        else:
            results = analyze_profiles(config)
    except ProjectNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        console.print("[red]Failed to resolve project name to UID[/]")
        finish_audit_log(audit_file)
        sys.exit(1)
    except CleanerError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        console.print("[red]Cannot proceed without cluster profiles data[/]")
        finish_audit_log(audit_file)
        sys.exit(1)

    _print_results(results)
    console.print("[bold green]Operation completed successfully![/]")
    if config.backup_enabled and results.deleted_count:
        console.print(f"[blue]Backups saved to: {escape(config.output_dir)}/backups/[/]")
    finish_audit_log(audit_file)
    console.print(f"[blue]Full audit log saved to: {escape(audit_file)}[/]")


if __name__ == "__main__":
    main()
