"""
WordPress.org profile lookup: maps GitHub logins to WordPress.org usernames.
"""
import logging
from typing import List, Dict, Any, Optional
import requests

from ingest.errors import TransportError, MalformedResponseError

logger = logging.getLogger(__name__)

LOOKUP_URL = "https://profiles.wordpress.org/wp-json/wporg-github/v1/lookup/"


class DirectoryClient:
    """Client for the wporg-github lookup endpoint."""

    def __init__(self, base_url: str = None, session: Optional[requests.Session] = None, timeout: float = 30):
        self.base_url = base_url or LOOKUP_URL
        self.session = session or requests.Session()
        self.timeout = timeout

    def lookup(self, logins: List[str]) -> Dict[str, Any]:
        """
        Look up GitHub logins in one request.

        Returns a mapping of login to either a record with a `slug` field or False when the
        GitHub account is not linked to a WordPress.org profile.
        """
        try:
            resp = self.session.post(self.base_url, json={"github_user": list(logins)}, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(f"directory lookup failed: {exc}", url=self.base_url) from exc
        if not 200 <= resp.status_code < 300:
            raise TransportError(f"directory lookup returned HTTP {resp.status_code}", url=self.base_url, status=resp.status_code)
        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedResponseError("directory lookup did not return JSON") from exc
        # the endpoint answers [] rather than {} when nothing matched
        if data == []:
            return {}
        if not isinstance(data, dict):
            raise MalformedResponseError("directory lookup did not return an object")
        return data
