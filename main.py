"""runner-telemetry: build a dashboard snapshot from CI-runner worker logs."""

import logging
import sys
from argparse import ArgumentParser

from runner_telemetry.config import load_config
from runner_telemetry.engine import build_dashboard
from runner_telemetry.formatter import format_snapshot_json, format_snapshot_text
from runner_telemetry.session import TelemetrySession


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="runner-telemetry",
        description="Summarize CI-runner worker logs into a dashboard snapshot.",
    )
    parser.add_argument(
        "--log-dir",
        help="Runner _diag directory (default: auto-detect)",
    )
    parser.add_argument(
        "--days",
        type=int,
        help="Trailing window of log files to read, in days (default: 7)",
    )
    parser.add_argument(
        "--config",
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--output",
        choices=["text", "json"],
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Serve /api/dashboard-data over HTTP instead of printing once",
    )
    parser.add_argument(
        "--host",
        help="Bind address for --serve (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port for --serve (default: 8080)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-pass diagnostics to stderr",
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [TELEMETRY] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(
            args.config,
            log_dir=args.log_dir,
            window_days=args.days,
            dashboard_host=args.host,
            dashboard_port=args.port,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.serve:
        from runner_telemetry.api import create_app, run_dashboard
        logging.getLogger().setLevel(logging.DEBUG if args.verbose else logging.INFO)
        run_dashboard(create_app(config), config.dashboard_host, config.dashboard_port)
        return 0

    snapshot = build_dashboard(config, session=TelemetrySession())
    if args.output == "text":
        print(format_snapshot_text(snapshot))
    else:
        print(format_snapshot_json(snapshot))
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)
