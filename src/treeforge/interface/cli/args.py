from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Declares the command-line schema and translates a parsed namespace into
configuration overrides understood by validate_config.
"""

import argparse
from typing import Any, Dict

from treeforge.domain import constants as const
from treeforge.utils.i18n import i18n

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the treeforge CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="treeforge",
        description=i18n.t("app.description"),
    )

    # --- Input and target ---
    p.add_argument(
        "-i", "--input",
        dest="input_path",
        default=None,
        help=i18n.t("cli.args.input"),
    )
    p.add_argument(
        "-t", "--target",
        dest="target_path",
        default=None,
        help=i18n.t("cli.args.target"),
    )

    # --- Inspection ---
    p.add_argument("--print-tree", action="store_true", help=i18n.t("cli.args.print_tree"))
    p.add_argument(
        "--serialize",
        choices=list(const.SERIALIZE_STYLES),
        default=None,
        help=i18n.t("cli.args.serialize"),
    )
    p.add_argument("--stats", action="store_true", help=i18n.t("cli.args.stats"))

    # --- Execution ---
    p.add_argument("--dry-run", action="store_true", help=i18n.t("cli.args.dry_run"))
    p.add_argument(
        "--workers",
        dest="max_workers",
        type=int,
        default=None,
        help=i18n.t("cli.args.workers"),
    )
    p.add_argument(
        "--timeout",
        dest="timeout_seconds",
        type=float,
        default=None,
        help=i18n.t("cli.args.timeout"),
    )

    # --- Directory helpers ---
    p.add_argument(
        "--list",
        dest="list_path",
        metavar="DIR",
        default=None,
        help=i18n.t("cli.args.list"),
    )
    p.add_argument("--save-path", action="store_true", help=i18n.t("cli.args.save_path"))
    p.add_argument("--saved-paths", action="store_true", help=i18n.t("cli.args.saved_paths"))

    # --- Configuration and diagnostics ---
    p.add_argument("--use-defaults", action="store_true", help=i18n.t("cli.args.defaults"))
    p.add_argument("--dump-config", action="store_true", help=i18n.t("cli.args.dump"))
    p.add_argument("--debug", action="store_true", help=i18n.t("cli.args.debug"))
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help=i18n.t("cli.args.json"),
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Only values the user actually supplied are returned, so persisted
    settings survive for everything else.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    if args.target_path is not None:
        overrides["target_path"] = args.target_path
    if args.max_workers is not None:
        overrides["max_workers"] = args.max_workers
    if args.timeout_seconds is not None:
        overrides["timeout_seconds"] = args.timeout_seconds
    if args.serialize:
        overrides["serialize_style"] = args.serialize
    if args.dry_run:
        overrides["dry_run"] = True

    return overrides


def wants_inspection(args: argparse.Namespace) -> bool:
    """True when the user asked to look at the structure rather than apply it."""
    return bool(args.print_tree or args.serialize or args.stats)
