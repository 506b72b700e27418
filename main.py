"""CLI entry point for the form automation engine."""

import argparse
import asyncio
import logging
import sys

from formpilot.core.config import Settings, TargetConfig
from formpilot.core.errors import ProfileValidationError
from formpilot.core.perf import PerformanceLog
from formpilot.pipeline.orchestrator import ApplicationRun, export_results_json, run_applications
from formpilot.platforms.registry import default_registry
from formpilot.profile.schema import CandidateProfile
from formpilot.profile.validation import validate_profile

SUBCOMMANDS = frozenset({"apply", "validate-profile"})


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fill multi-step job application forms for one candidate profile",
    )
    _add_verbose_arg(parser, default=False)
    subparsers = parser.add_subparsers(dest="command")

    # --- apply subcommand (default) ---
    apply_parser = subparsers.add_parser("apply", help="Fill and submit application forms")
    _add_apply_args(apply_parser)

    # --- validate-profile subcommand ---
    validate_parser = subparsers.add_parser(
        "validate-profile",
        help="Check a profile for missing or blank required fields",
    )
    validate_parser.add_argument(
        "--profile",
        default="config/profile.yaml",
        help="Path to profile YAML (default: config/profile.yaml)",
    )
    _add_verbose_arg(validate_parser)

    # Default to apply when no subcommand appears anywhere (e.g. "-v apply")
    argv = list(sys.argv[1:] if argv is None else argv)
    if not SUBCOMMANDS.intersection(argv) and (not argv or argv[0] not in {"-h", "--help"}):
        argv.insert(0, "apply")

    return parser.parse_args(argv)


def _add_apply_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default="config/settings.yaml",
        help="Path to settings YAML file (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--profile",
        help="Path to profile YAML (default: profile_path from settings)",
    )
    parser.add_argument(
        "--url",
        action="append",
        default=[],
        help="Target form URL; repeatable. Overrides targets from settings.",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run the browser headless",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the profile and detect platforms without launching a browser",
    )
    parser.add_argument(
        "--export",
        choices=["json"],
        help="Export results to format (json)",
    )
    _add_verbose_arg(parser)


def _add_verbose_arg(parser: argparse.ArgumentParser, default: object = argparse.SUPPRESS) -> None:
    # Subcommands default to SUPPRESS so they never reset a top-level -v.
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=default,
        help="Enable verbose (DEBUG) logging",
    )


def setup_logging(level: str | int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def resolve_targets(settings: Settings, urls: list[str]) -> list[TargetConfig]:
    if urls:
        return [TargetConfig(url=url) for url in urls]
    return list(settings.targets)


def dry_run(settings: Settings, profile: CandidateProfile, targets: list[TargetConfig]) -> None:
    """Print what would happen without launching a browser."""
    validate_profile(profile)
    registry = default_registry(settings.platforms)

    print(f"[DRY RUN] Profile OK for {profile.full_name}")
    print(f"[DRY RUN] {len(targets)} targets configured")
    for target in targets:
        descriptor = registry.detect(target.url)
        platform = descriptor.name if descriptor else "NO PLATFORM"
        print(f"[DRY RUN] {target.url} -> {platform}")


def print_results(runs: list[ApplicationRun]) -> None:
    for run in runs:
        label = run.target.name or run.target.url
        result = run.result
        if result.success:
            print(f"  {label}: submitted, confirmation {result.confirmation_id} "
                  f"({result.duration_ms}ms)")
        else:
            print(f"  {label}: FAILED after {result.duration_ms}ms: {result.error}")


def cmd_validate_profile(args: argparse.Namespace) -> None:
    profile = CandidateProfile.from_yaml(args.profile)
    validate_profile(profile)
    print(f"Profile OK: {profile.full_name}")


def cmd_apply(args: argparse.Namespace) -> int:
    settings = Settings.from_yaml(args.config)
    if args.headless:
        settings = settings.model_copy(
            update={"browser": settings.browser.model_copy(update={"headless": True})},
        )
    if not args.verbose:
        logging.getLogger().setLevel(settings.log_level)

    profile = CandidateProfile.from_yaml(args.profile or settings.profile_path)
    targets = resolve_targets(settings, args.url)
    if not targets:
        msg = "no targets: pass --url or configure targets in settings"
        raise ValueError(msg)

    if args.dry_run:
        dry_run(settings, profile, targets)
        return 0

    perf = PerformanceLog()
    runs = asyncio.run(run_applications(settings, profile, targets, perf=perf))

    succeeded = sum(1 for r in runs if r.result.success)
    print(f"\nApplications complete: {succeeded}/{len(runs)} submitted.")
    print_results(runs)

    if args.export == "json" and runs:
        print(f"\n{export_results_json(runs)}")

    for line in perf.summary():
        print(line)

    return 0 if succeeded == len(runs) else 1


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "validate-profile":
        try:
            cmd_validate_profile(args)
        except (FileNotFoundError, ValueError, ProfileValidationError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        try:
            code = cmd_apply(args)
        except (FileNotFoundError, ValueError, ProfileValidationError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        sys.exit(code)


if __name__ == "__main__":
    main()
