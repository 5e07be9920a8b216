#!/usr/bin/env python3
"""CLI interface for the patch decision engine."""

import argparse
import json
import sys
from pathlib import Path

from api.schema import PatchResponse
from common.env import env
from common.logger import console, error, setup_logging, success, warning

from .applier import apply_patch
from .engine import PatchDecisionEngine, read_text
from .errors import PatchEngineError
from .hasher import fingerprint
from .models import Accepted, EngineConfig, Failed, Rejected
from .storage import list_patches_chronological, parse_patch_filename

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_REJECTED = 2


def output_target(value):
    """Path to persist to, or None when the option is unset or blank."""
    if value is None or not str(value).strip():
        return None
    return Path(value)


def cmd_generate(args):
    """Evaluate two files and report the patch decision.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 accepted, 2 rejected, 1 for errors)
    """
    for label, path in (("Old", args.old), ("New", args.new)):
        if not path.is_file():
            error(f"{label} file does not exist: {path}")
            return EXIT_ERROR

    try:
        config = EngineConfig.from_env(size_threshold=args.threshold, context_lines=args.context)
        engine = PatchDecisionEngine(config)
        outcome = engine.evaluate_files(
            args.old,
            args.new,
            persist_to=output_target(args.output_dir),
            include_content=not args.no_content,
        )
    except ValueError as e:
        error(str(e))
        return EXIT_ERROR

    if args.format == "json":
        print(json.dumps(PatchResponse.from_outcome(outcome).to_wire(), indent=2, ensure_ascii=False))
    else:
        print_outcome(outcome)

    if isinstance(outcome, Accepted):
        return EXIT_OK
    if isinstance(outcome, Rejected):
        return EXIT_REJECTED
    return EXIT_ERROR


def print_outcome(outcome):
    """Console rendering of an outcome."""
    if isinstance(outcome, Failed):
        error(f"{outcome.error_kind.value}: {outcome.message}")
        return

    stats = outcome.stats
    ratio = "n/a" if stats.size_ratio is None else f"{stats.size_ratio * 100:.1f}%"

    if isinstance(outcome, Rejected):
        warning(
            f"Patch rejected ({outcome.reason.value}), "
            f"recommendation: {outcome.recommendation.value}"
        )
    else:
        success("Patch accepted")
        console.print(f"  Source: {outcome.source_fingerprint}", highlight=False)
        console.print(f"  Target: {outcome.target_fingerprint}", highlight=False)
        if outcome.persisted_path:
            console.print(f"  Saved to: {outcome.persisted_path}", highlight=False)

    console.print(
        f"  Sizes: old {stats.old_size} B, new {stats.new_size} B, patch {stats.patch_size} B",
        highlight=False,
    )
    console.print(f"  Ratio: {ratio}, operations: {stats.operation_count}", highlight=False)

    if isinstance(outcome, Accepted) and outcome.patch_document is not None:
        console.print()
        print(outcome.patch_document)


def cmd_apply(args):
    """Apply a patch file to the old file."""
    try:
        old_text = read_text(args.old, "old")
        patch_text = read_text(args.patch, "patch")
        new_text = apply_patch(old_text, patch_text, expected_source_hash=args.expected_hash)
    except (PatchEngineError, ValueError) as e:
        error(str(e))
        return EXIT_ERROR

    if args.output:
        try:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_bytes(new_text.encode("utf-8"))
        except OSError as e:
            error(f"Could not write {args.output}: {e}")
            return EXIT_ERROR
        success(f"Patched text written to {args.output} ({fingerprint(new_text)})")
    else:
        sys.stdout.write(new_text)

    return EXIT_OK


def cmd_hash(args):
    """Print the fingerprint of each file's decoded text."""
    status = EXIT_OK
    for path in args.files:
        try:
            text = read_text(path, "input")
        except PatchEngineError as e:
            error(str(e))
            status = EXIT_ERROR
            continue
        print(f"{fingerprint(text)}  {path}")
    return status


def cmd_list(args):
    """List persisted patches, oldest first."""
    patches = list_patches_chronological(args.patch_dir)
    if not patches:
        print(f"No patches found in {args.patch_dir}")
        return EXIT_OK

    for path in patches:
        timestamp, source_short, target_short = parse_patch_filename(path.name)
        print(f"{timestamp:%Y-%m-%d %H:%M:%S}  {source_short} -> {target_short}  {path}")
    return EXIT_OK


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Decide between shipping a patch and a full download"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING, overridden by LOG_LEVEL)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser("generate", help="Generate and evaluate a patch")
    generate_parser.add_argument("--old", type=Path, required=True, help="Old version of the file")
    generate_parser.add_argument("--new", type=Path, required=True, help="New version of the file")
    generate_parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory (or .diff path) to save an accepted patch to",
    )
    generate_parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Largest accepted patch/source size ratio (default: PATCH_SIZE_THRESHOLD or 5.0)",
    )
    generate_parser.add_argument(
        "--context",
        type=int,
        default=None,
        help="Context lines around each hunk (default: PATCH_CONTEXT_LINES or 3)",
    )
    generate_parser.add_argument(
        "--no-content",
        action="store_true",
        help="Leave the patch text out of the result",
    )
    generate_parser.add_argument(
        "--format",
        choices=["console", "json"],
        default="console",
        help="Output format (default: console)",
    )
    generate_parser.set_defaults(func=cmd_generate)

    apply_parser = subparsers.add_parser("apply", help="Apply a patch to the old file")
    apply_parser.add_argument("--old", type=Path, required=True, help="Old version of the file")
    apply_parser.add_argument("--patch", type=Path, required=True, help="Unified patch file")
    apply_parser.add_argument(
        "--expected-hash",
        default=None,
        help="Fingerprint the old file must match (sha256:...)",
    )
    apply_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the patched text (default: stdout)",
    )
    apply_parser.set_defaults(func=cmd_apply)

    hash_parser = subparsers.add_parser("hash", help="Print content fingerprints")
    hash_parser.add_argument("files", type=Path, nargs="+", help="Files to fingerprint")
    hash_parser.set_defaults(func=cmd_hash)

    list_parser = subparsers.add_parser("list", help="List persisted patches")
    list_parser.add_argument(
        "--patch-dir",
        type=Path,
        default=env.patch_output_dir(),
        help="Directory containing patch files (default: PATCH_OUTPUT_DIR or ./data/patches)",
    )
    list_parser.set_defaults(func=cmd_list)

    args = parser.parse_args(argv)
    setup_logging(level=args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
