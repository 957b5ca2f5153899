"""Logging configuration and setup utilities.

This module provides logging setup for the CLI:
- Console logging through rich
- Log level configuration (--debug)
- A plain-text audit log file per run, with header and completion footer
"""
import getpass
import logging
import os
import socket
from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

AUDIT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
RULE = "=" * 72


def _whoami() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


def audit_log_path(output_dir: str, timestamp: str) -> str:
    return os.path.join(output_dir, f"audit_{timestamp}.log")


def setup_logging(
    debug: bool = False,
    console: Optional[Console] = None,
    audit_file: Optional[str] = None,
    mode: str = "",
    api_url: str = "",
) -> None:
    """Configure the root logger for a CLI run.

    Console output goes through rich. When audit_file is given, a header is
    written to it and every record is appended to it as plain text.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console_handler = RichHandler(
        console=console,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    root.addHandler(console_handler)

    # urllib3 connection chatter is noise even with --debug
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    if not audit_file:
        return

    os.makedirs(os.path.dirname(audit_file) or ".", exist_ok=True)
    with open(audit_file, "a", encoding="utf-8") as f:
        f.write(
            "\n".join(
                [
                    RULE,
                    "Palette Cluster Profile Cleanup - Audit Log",
                    RULE,
                    f"Execution Started: {datetime.now().isoformat(timespec='seconds')}",
                    f"Mode: {mode}",
                    f"User: {_whoami()}",
                    f"Host: {socket.gethostname()}",
                    f"API URL: {api_url}",
                    RULE,
                    "",
                ]
            )
            + "\n"
        )

    file_handler = logging.FileHandler(audit_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(AUDIT_FORMAT))
    root.addHandler(file_handler)
    logging.getLogger(__name__).info("Audit logging enabled: %s", audit_file)


def finish_audit_log(audit_file: Optional[str]) -> None:
    """Close the audit file handler and append the completion footer."""
    if not audit_file:
        return

    root = logging.getLogger()
    target = os.path.abspath(audit_file)
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            root.removeHandler(handler)
            handler.close()

    with open(audit_file, "a", encoding="utf-8") as f:
        f.write(
            "\n".join(
                [
                    "",
                    RULE,
                    f"Execution Completed: {datetime.now().isoformat(timespec='seconds')}",
                    RULE,
                ]
            )
            + "\n"
        )
