"""Event pipeline — one log line in, one Decision out.

Pure orchestration, no I/O of its own: the tracker, notifier, log sink
and geolocation resolver are handed in at construction, so tests drive
it with fakes and main.py wires the real ones.

Per line:
  1. Record — every line goes to the log sink as "Raw: ..."
  2. Filter — drop lines without the subsystem marker (case-insensitive)
  3. Classify — no address means nothing to act on
  4. Group — blocked subnets are logged as suppressed and stop here
  5. Alert — log the event, then dispatch it; failed attempts are
     counted and the call that crosses the threshold sends the block alert
  6. Reset check — runs after every line, relevant or not, so the window
     clock does not depend on how often sshd says something
"""

from dataclasses import dataclass, field

from sshwatch import metrics
from sshwatch.classifier import Event, classify
from sshwatch.grouping import group_key
from sshwatch.tracker import SubnetTracker

DEFAULT_MARKER = "ssh"

START_MESSAGE = "🔒 SSH Monitor Started - Watching for suspicious activity..."


@dataclass
class Decision:
    IGNORED = "ignored"
    NO_ADDRESS = "no_address"
    SUPPRESSED = "suppressed"
    ALERTED = "alerted"

    status: str
    event: Event | None = None
    group: str | None = None
    alerts: list[str] = field(default_factory=list)
    blocked_now: bool = False
    count: int = 0


def activity_message(event: Event, group: str, location: str) -> str:
    if event.accepted:
        return (f"✅ Successful login from {event.address} ({location}) "
                f"as '{event.principal}'")
    return f"🔍 SSH activity from {event.address} ({location}) Subnet: {group}"


def block_message(group: str, count: int, window_seconds: float) -> str:
    if window_seconds == 60:
        span = "the last minute"
    else:
        span = f"the last {window_seconds:g} seconds"
    return f"🚫 Subnet `{group}` blocked > {count} attempts in {span}"


class EventPipeline:

    def __init__(self, tracker: SubnetTracker, notifier, sink, geo,
                 marker: str = DEFAULT_MARKER,
                 address_extractors=None, principal_extractors=None):
        self.tracker = tracker
        self.notifier = notifier
        self.sink = sink
        self.geo = geo
        self.marker = marker.lower()
        self.address_extractors = address_extractors
        self.principal_extractors = principal_extractors

    def start(self) -> None:
        """Announce the monitor on the sink and the webhook."""
        self.sink.write(START_MESSAGE)
        self.notifier.send(START_MESSAGE)

    def run(self, lines) -> int:
        """Drain *lines* in order.  Returns how many were processed."""
        n = 0
        for line in lines:
            self.process(line)
            n += 1
        return n

    def process(self, line: str) -> Decision:
        try:
            return self._handle(line.rstrip("\r\n"))
        finally:
            if self.tracker.maybe_reset_window():
                metrics.window_resets_total.inc()

    def _handle(self, line: str) -> Decision:
        metrics.lines_total.inc()
        self.sink.write(f"Raw: {line}")

        if self.marker not in line.lower():
            return Decision(Decision.IGNORED)

        event = classify(line, self.address_extractors, self.principal_extractors)
        if event.address is None:
            return Decision(Decision.NO_ADDRESS, event=event)
        metrics.events_total.labels(outcome=event.outcome).inc()

        group = group_key(event.address)
        if self.tracker.is_blocked(group):
            metrics.suppressed_total.inc()
            self.sink.write(f"Blocked attempt from {event.address} (subnet {group})")
            return Decision(Decision.SUPPRESSED, event=event, group=group,
                            count=self.tracker.attempts(group))

        decision = Decision(Decision.ALERTED, event=event, group=group)

        location = self.geo.lookup(event.address)
        message = activity_message(event, group, location)
        self.sink.write(f"Event: {message}")
        self._dispatch(decision, message, kind=event.outcome)

        if event.accepted:
            decision.count = self.tracker.attempts(group)
            return decision

        blocked_now, count = self.tracker.record_attempt(group)
        decision.blocked_now = blocked_now
        decision.count = count
        if blocked_now:
            metrics.blocks_total.inc()
            metrics.blocked_subnets.set(len(self.tracker.blocked_groups()))
            message = block_message(group, count, self.tracker.window_seconds)
            self.sink.write(f"Block: {message}")
            self._dispatch(decision, message, kind="block")
        return decision

    def _dispatch(self, decision: Decision, message: str, kind: str) -> None:
        metrics.alerts_total.labels(kind=kind).inc()
        decision.alerts.append(message)
        self.notifier.send(message)
