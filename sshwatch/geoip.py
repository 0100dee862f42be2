"""Best-effort geolocation via ip-api.com.

Any failure (transport, status, bad JSON, missing fields) is "Unknown";
nothing here is allowed to raise into the pipeline.
"""

import requests

UNKNOWN = "Unknown"
DEFAULT_URL = "http://ip-api.com/json/"


class IpApiResolver:

    def __init__(self, base_url: str = DEFAULT_URL, timeout: float = 5.0):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout

    def lookup(self, ip: str) -> str:
        """Return "City, Country" for *ip*, or "Unknown"."""
        if not ip:
            return UNKNOWN

        try:
            resp = requests.get(self.base_url + ip, timeout=self.timeout)
            if resp.status_code != 200:
                return UNKNOWN
            result = resp.json()
        except (requests.RequestException, ValueError):
            return UNKNOWN

        if not isinstance(result, dict) or result.get("status") != "success":
            return UNKNOWN

        city = result.get("city")
        country = result.get("country")
        if city and country:
            return f"{city}, {country}"
        return UNKNOWN
