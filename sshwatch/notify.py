"""Webhook alert dispatcher.

Posts ``{"content": message}``, the Discord webhook body, which Slack-
and Mattermost-compatible endpoints also accept.  Fire-and-forget: one
attempt, failures go to stderr and the caller carries on.
"""

import sys

import requests

from sshwatch import metrics


class WebhookNotifier:

    def __init__(self, url: str, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout
        self._session = requests.Session()

    def send(self, message: str) -> bool:
        """Deliver *message*.  Returns False if the endpoint did not take it."""
        try:
            resp = self._session.post(
                self.url, json={"content": message}, timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            metrics.alert_failures_total.inc()
            print(f"Webhook delivery failed ({e})", file=sys.stderr)
            return False
        return True

    def close(self) -> None:
        self._session.close()
