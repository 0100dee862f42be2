"""SSH monitor — tails auth events, alerts per line, blocks noisy subnets.

Reads raw sshd lines from the journal (default), a file, or a Kafka
topic, runs each one through the EventPipeline, and sends alerts to a
webhook.  A /24 that produces more than --threshold failed attempts
inside one --window is blocked for the lifetime of the process.

Usage:
    python -m sshwatch.main --webhook https://discord.com/api/webhooks/...
    python -m sshwatch.main --source file --file /var/log/auth.log --follow
    python -m sshwatch.main --source kafka --bootstrap-servers kafka-1:29092
"""

import argparse
import os
import signal
import sys

from prometheus_client import start_http_server

from sshwatch import sources
from sshwatch.extractors.loader import load_extractors
from sshwatch.geoip import DEFAULT_URL, IpApiResolver
from sshwatch.logsink import LogSink
from sshwatch.notify import WebhookNotifier
from sshwatch.pipeline import DEFAULT_MARKER, EventPipeline, Decision
from sshwatch.tracker import DEFAULT_THRESHOLD, DEFAULT_WINDOW_SECONDS, SubnetTracker

_SECRETS_PATH = "/run/secrets/sshwatch_webhook_url"
_ENV_VAR = "SSHWATCH_WEBHOOK_URL"


def _shutdown(sig, frame):
    print("\nShutting down monitor...")
    sources.stop()


def _read_webhook_url(flag_value: str | None) -> str | None:
    """Webhook URL from the flag, then the Docker secret, then the environment."""
    if flag_value:
        return flag_value
    try:
        with open(_SECRETS_PATH) as f:
            url = f.read().strip()
            if url:
                return url
    except FileNotFoundError:
        pass
    return os.environ.get(_ENV_VAR) or None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SSH brute-force monitor")
    parser.add_argument(
        "--webhook", default=None,
        help=f"Alert webhook URL (or {_SECRETS_PATH}, or ${_ENV_VAR})",
    )
    parser.add_argument("--log", default="ssh_monitor.log", help="Path to log file")
    parser.add_argument(
        "--source", choices=["journalctl", "file", "kafka"], default="journalctl",
    )
    parser.add_argument("--unit", default="ssh.service", help="systemd unit to follow")
    parser.add_argument("--file", default="-", help="Log file for --source file ('-' = stdin)")
    parser.add_argument("--follow", action="store_true", default=False,
                        help="Keep reading as the file grows")
    parser.add_argument("--bootstrap-servers", default="localhost:9092")
    parser.add_argument("--topic", default="auth-log-lines")
    parser.add_argument("--group-id", default="sshwatch")
    parser.add_argument("--marker", default=DEFAULT_MARKER,
                        help="Case-insensitive subsystem marker a line must contain")
    parser.add_argument("--threshold", type=int, default=DEFAULT_THRESHOLD,
                        help="Failed attempts per subnet tolerated per window")
    parser.add_argument("--window", type=float, default=DEFAULT_WINDOW_SECONDS,
                        help="Counting window in seconds")
    parser.add_argument("--patterns", default=None,
                        help="YAML file of address/principal extraction patterns")
    parser.add_argument("--geoip-url", default=DEFAULT_URL)
    parser.add_argument("--timeout", type=float, default=10.0,
                        help="Webhook and geolocation request timeout (seconds)")
    parser.add_argument("--metrics-port", type=int, default=0,
                        help="Prometheus metrics HTTP port (0 = disabled)")
    return parser


def open_source(args):
    if args.source == "journalctl":
        return sources.journalctl_lines(args.unit)
    if args.source == "file":
        return sources.file_lines(args.file, follow=args.follow)
    return sources.kafka_lines(args.bootstrap_servers, args.topic, args.group_id)


def _report(decision: Decision) -> None:
    if decision.status == Decision.SUPPRESSED:
        print(f"SUPPRESSED  ip={decision.event.address}  subnet={decision.group}")
        return
    for message in decision.alerts:
        print(f"ALERT  {message}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    webhook_url = _read_webhook_url(args.webhook)
    if not webhook_url:
        print("Please provide a webhook URL using --webhook "
              f"(or {_SECRETS_PATH}, or ${_ENV_VAR})", file=sys.stderr)
        return 1

    extractors = {}
    if args.patterns:
        try:
            extractors = load_extractors(args.patterns)
        except (OSError, ValueError) as e:
            print(f"Error loading patterns: {e}", file=sys.stderr)
            return 1

    try:
        sink = LogSink(args.log)
    except OSError as e:
        print(f"Error setting up logging: {e}", file=sys.stderr)
        return 1

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    with sink:
        try:
            lines = open_source(args)
        except sources.SourceError as e:
            print(f"Error attaching event source: {e}", file=sys.stderr)
            return 1

        if args.metrics_port:
            start_http_server(args.metrics_port)
            print(f"Prometheus metrics server started on :{args.metrics_port}")

        notifier = WebhookNotifier(webhook_url, timeout=args.timeout)
        pipeline = EventPipeline(
            SubnetTracker(threshold=args.threshold, window_seconds=args.window),
            notifier,
            sink,
            IpApiResolver(args.geoip_url, timeout=args.timeout),
            marker=args.marker,
            address_extractors=extractors.get("address"),
            principal_extractors=extractors.get("principal"),
        )

        print(f"SSH monitor started  source={args.source}  log={args.log}  "
              f"threshold={args.threshold}  window={args.window:g}s")
        pipeline.start()

        processed = 0
        try:
            for line in lines:
                _report(pipeline.process(line))
                processed += 1
                if processed % 500 == 0:
                    print(f"  ... {processed} lines processed, "
                          f"{len(pipeline.tracker.blocked_groups())} subnets blocked")
        finally:
            notifier.close()
            print(f"Done. {processed} lines processed, "
                  f"{len(pipeline.tracker.blocked_groups())} subnets blocked.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
