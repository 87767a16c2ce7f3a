"""
Main CLI entry point for passive-scanner.

Replays captured traffic through the passive checks and manages
configuration. Live scanning runs inside mitmproxy via passive_scanner/addon.py.
"""

import argparse
import logging
import sys

from colorama import Fore, Style, init

from ..__version__ import __version__
from ..dispatcher import ScanDispatcher
from ..exceptions import PassiveScannerError
from ..findings import FindingsStore, Severity
from ..reporting import console_listener, format_stats, write_report
from ..replay import replay_traffic
from ..scanners.signatures import LIBRARY_SIGNATURES
from .config import create_default_config, load_config

init()


def print_ok(msg):
    """Print success message in green."""
    print(f"{Fore.GREEN}[OK] {msg}{Style.RESET_ALL}")


def print_error(msg):
    """Print error message in red."""
    print(f"{Fore.RED}[ERROR] {msg}{Style.RESET_ALL}", file=sys.stderr)


def print_warn(msg):
    """Print warning message in yellow."""
    print(f"{Fore.YELLOW}[WARN] {msg}{Style.RESET_ALL}")


def print_info(msg):
    """Print info message in cyan."""
    print(f"{Fore.CYAN}[INFO] {msg}{Style.RESET_ALL}")


def setup_logging(level_name: str, verbose: bool = False):
    level = logging.DEBUG if verbose else getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(level=level, format="[%(asctime)s] %(message)s")


def cmd_replay(args):
    """Replay a traffic log through the passive checks."""
    try:
        config = load_config(args.config)
        setup_logging(config["logging"]["level"], args.verbose)

        min_severity = Severity.from_label(args.min_severity or config["console"]["min_severity"])
        store = FindingsStore()
        store.add_listener(console_listener(min_severity))

        dispatcher = ScanDispatcher(store, max_workers=config["scanner"]["max_workers"])
        try:
            print_info(f"Replaying traffic from {args.traffic_file}")
            summary = replay_traffic(args.traffic_file, dispatcher)
        finally:
            dispatcher.shutdown()

        print_info(
            f"Responses: {summary['responses']}, scanned: {summary['scanned']}, "
            f"skipped records: {summary['skipped']}"
        )
        if summary["responses"] == 0:
            print_warn("No response records found in traffic file")

        print(f"{Fore.GREEN}{format_stats(store)}{Style.RESET_ALL}")

        output = args.output or config["report"]["path"]
        if output:
            path = write_report(store, output)
            print_ok(f"Report saved to: {path}")
        return 0
    except PassiveScannerError as e:
        print_error(str(e))
        return 1


def cmd_signatures(args):
    """List the built-in library signature table."""
    for key, signature in sorted(LIBRARY_SIGNATURES.items()):
        print(
            f"  {Fore.CYAN}{signature.name:<15}{Style.RESET_ALL} "
            f"latest {Fore.GREEN}{signature.latest_version:<9}{Style.RESET_ALL} "
            f"{signature.advisory_url}"
        )
    return 0


def cmd_init_config(args):
    """Create default configuration file."""
    output = args.output or "passive-scanner.yaml"
    try:
        path = create_default_config(output)
        print_ok(f"Created configuration file: {path}")
        print_info(f"Edit this file and use: passive-scanner replay TRAFFIC --config {path}")
        return 0
    except OSError as e:
        print_error(f"Failed to create config: {e}")
        return 1


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="passive-scanner",
        description="Passive security scanner for captured HTTP responses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    replay_parser = subparsers.add_parser("replay", help="Scan a captured NDJSON traffic log")
    replay_parser.add_argument("traffic_file", help="Path to traffic .ndjson file")
    replay_parser.add_argument("--config", "-c", help="YAML configuration file")
    replay_parser.add_argument("--output", "-o", help="Output file for findings report")
    replay_parser.add_argument(
        "--min-severity",
        choices=[s.name.lower() for s in Severity],
        help="Only print findings at or above this severity",
    )
    replay_parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    replay_parser.set_defaults(func=cmd_replay)

    sig_parser = subparsers.add_parser("signatures", help="List known library signatures")
    sig_parser.set_defaults(func=cmd_signatures)

    config_parser = subparsers.add_parser("init-config", help="Create default configuration file")
    config_parser.add_argument("--output", "-o", help="Output config file path")
    config_parser.set_defaults(func=cmd_init_config)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
