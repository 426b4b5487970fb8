from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Runs the headless workflow: logging bootstrap, configuration merge
(defaults, persisted state, command-line overrides), structure parsing,
optional inspection output and materialization under the target directory.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple

from treeforge.core.execution.planner import is_preflight_failure
from treeforge.core.execution.service import TARGET_REQUIRED_MSG, apply_forest
from treeforge.core.execution.validator import validate_config
from treeforge.core.parsing.structure_parser import parse_structure
from treeforge.core.tree.mutations import tree_stats
from treeforge.core.tree.paths import render_tree_lines, serialize_to_text
from treeforge.domain import config as cfg
from treeforge.domain.execution_models import ApplyResult
from treeforge.domain.node_models import Forest
from treeforge.infra.fs import DirectoryListingError, list_directory, normalize_path
from treeforge.infra.logging import LoggingConfig, configure_logging, get_logger
from treeforge.interface.cli import args as cli_args
from treeforge.utils.i18n import i18n

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, 1 on item failures or unexpected errors,
             2 on invalid input or target, 130 when interrupted.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    configure_logging(LoggingConfig.for_cli(debug=args.debug))
    logger.debug("CLI execution initiated. Resolving configuration...")

    base_conf = cfg.get_default_config() if args.use_defaults else cfg.load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    # Standalone commands
    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK
    if args.saved_paths:
        return _print_saved_paths(args.json_output)
    if args.list_path:
        return _print_listing(args.list_path, args.json_output)

    if not args.input_path:
        if args.save_path and clean_conf["target_path"]:
            _bookmark(clean_conf["target_path"])
            return EXIT_OK
        _error(i18n.t("cli.errors.nothing_to_do"))
        return EXIT_INVALID

    text, read_error = _read_input(args.input_path)
    if text is None:
        _error(read_error or "")
        return EXIT_INVALID

    forest = parse_structure(text)
    if not forest:
        _error(i18n.t("cli.errors.empty_structure"))
        return EXIT_INVALID

    payload: Dict[str, Any] = _inspect(forest, args, clean_conf["serialize_style"])

    # Inspection alone does not create anything unless a target was given explicitly
    if cli_args.wants_inspection(args) and args.target_path is None:
        _emit_inspection(payload, args.json_output)
        return EXIT_OK

    target = clean_conf["target_path"]
    if not target:
        _emit_inspection(payload, args.json_output)
        _error(i18n.t("cli.errors.target_required"))
        return EXIT_INVALID

    if args.save_path:
        _bookmark(target)

    logger.info(f"Applying structure to: {target}")
    try:
        result = apply_forest(
            forest,
            target,
            max_workers=clean_conf["max_workers"],
            timeout=clean_conf["timeout_seconds"],
            dry_run=clean_conf["dry_run"],
        )
    except KeyboardInterrupt:
        msg = i18n.t("cli.status.interrupted")
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return EXIT_INTERRUPTED

    if args.json_output:
        payload["apply"] = result.to_dict()
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        _emit_inspection(payload, False)
        _print_human_summary(result)

    return _exit_code(result)

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge known override keys into the base configuration.

    Args:
        base: Defaults or persisted session.
        overrides: Values supplied on the command line.

    Returns:
        Dict[str, Any]: The merged configuration.
    """
    out = dict(base)
    for k in ("target_path", "max_workers", "timeout_seconds", "serialize_style", "dry_run"):
        if overrides.get(k) is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# INPUT & STANDALONE COMMANDS
# -----------------------------------------------------------------------------

def _read_input(path: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Read structure text from a file or from stdin ('-').

    Returns:
        Tuple[Optional[str], Optional[str]]: (Text, Error message if unreadable).
    """
    if path == "-":
        return sys.stdin.read(), None
    if not os.path.isfile(path):
        return None, i18n.t("cli.errors.input_missing", path=path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read(), None
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Input read failed for '{path}': {e}")
        return None, i18n.t("cli.errors.input_read", error=str(e))


def _print_saved_paths(as_json: bool) -> int:
    paths = cfg.get_saved_paths()
    if as_json:
        print(json.dumps(paths, ensure_ascii=False, indent=2))
    elif not paths:
        print(i18n.t("cli.status.no_saved_paths"))
    else:
        for p in paths:
            print(p)
    return EXIT_OK


def _print_listing(path: str, as_json: bool) -> int:
    try:
        listing = list_directory(path)
    except DirectoryListingError as e:
        _error(i18n.t("cli.errors.listing", error=str(e)))
        return EXIT_INVALID

    if as_json:
        print(json.dumps(asdict(listing), ensure_ascii=False, indent=2))
        return EXIT_OK

    print(listing.path)
    for d in listing.directories:
        print(f"  {d.name}/")
    for f in listing.files:
        print(f"  {f.name}")
    return EXIT_OK


def _bookmark(target: str) -> None:
    path = normalize_path(target, target)
    cfg.add_saved_path(path)
    print(i18n.t("cli.status.saved_path", path=path))

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _inspect(forest: Forest, args: Any, style: str) -> Dict[str, Any]:
    """Collect the inspection outputs requested on the command line."""
    payload: Dict[str, Any] = {}
    if args.print_tree:
        payload["tree"] = render_tree_lines(forest)
    if args.serialize:
        payload["text"] = serialize_to_text(forest, style=style)
    if args.stats:
        payload["stats"] = asdict(tree_stats(forest))
    return payload


def _emit_inspection(payload: Dict[str, Any], as_json: bool) -> None:
    if not payload:
        return
    if as_json:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return
    if "tree" in payload:
        print("\n".join(payload["tree"]))
    if "text" in payload:
        print(payload["text"], end="")
    if "stats" in payload:
        print(i18n.t("cli.status.stats", **payload["stats"]))


def _print_human_summary(result: ApplyResult) -> None:
    """
    Print an apply result as a terminal report.

    Args:
        result: The apply result to render.
    """
    if not result.ok:
        _error(i18n.t("cli.errors.apply_fail", error=result.error))
        return

    for res in result.results:
        if res.success:
            print(f"  [OK]   {res.path}")
        else:
            print(f"  [FAIL] {res.path}: {res.message}")

    if result.dry_run:
        print(i18n.t("cli.status.dry_run"))
    elif result.all_succeeded:
        print(i18n.t("cli.status.success", path=result.target_path))
    print(i18n.t("cli.status.summary", succeeded=result.succeeded, failed=result.failed))


def _exit_code(result: ApplyResult) -> int:
    if not result.ok:
        if result.error == TARGET_REQUIRED_MSG or is_preflight_failure(result.results, result.target_path):
            return EXIT_INVALID
        return EXIT_FAILURE
    return EXIT_OK if result.failed == 0 else EXIT_FAILURE


def _error(msg: str) -> None:
    logger.error(msg)
    print(f"ERROR: {msg}", file=sys.stderr)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
