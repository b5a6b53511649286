"""
GitHub client used by the props pipeline: the pull request contribution query,
the batched profile query and comment posting.
Requests are made once; failures raise instead of being retried.
"""
import logging
from typing import List, Dict, Any, Optional
import requests

from ingest.errors import TransportError, MalformedResponseError
from normalize.util import escape_for_gql

logger = logging.getLogger(__name__)

# Commits, reviews, comments and linked issues (with their comments) of a pull request.
CONTRIBUTOR_QUERY = """
query($owner: String!, $name: String!, $prNumber: Int!) {
  repository(owner: $owner, name: $name) {
    pullRequest(number: $prNumber) {
      commits(first: 100) {
        nodes {
          commit {
            author {
              user {
                databaseId
                login
                name
                email
              }
              name
              email
            }
          }
        }
      }
      reviews(first: 100) {
        nodes {
          author {
            login
          }
        }
      }
      comments(first: 100) {
        nodes {
          author {
            login
          }
        }
      }
      closingIssuesReferences(first: 100) {
        nodes {
          author {
            login
          }
          comments(first: 100) {
            nodes {
              author {
                login
              }
            }
          }
        }
      }
    }
  }
}
"""


def build_users_query(logins: List[str]) -> str:
    """Build one query aliasing each login to a `user` lookup."""
    fields = [
        f'{escape_for_gql(login)}: user(login: "{login}") {{databaseId, login, name, email}}'
        for login in logins
    ]
    return '{' + ' '.join(fields) + '}'


class GitHubClient:
    """Minimal GitHub GraphQL/REST client."""

    def __init__(self, token: str, base_url: str = None, session: Optional[requests.Session] = None, timeout: float = 30):
        self.token = token
        self.base_url = (base_url or "https://api.github.com").rstrip('/')
        self.headers = {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
        }
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            resp = self.session.request(method, url, headers=self.headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}", url=url) from exc
        if not 200 <= resp.status_code < 300:
            raise TransportError(f"{method} {url} returned HTTP {resp.status_code}: {resp.text[:200]}", url=url, status=resp.status_code)
        try:
            return resp.json()
        except ValueError as exc:
            raise MalformedResponseError(f"{method} {url} did not return JSON") from exc

    def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Execute a GraphQL query and return its `data` object."""
        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables
        body = self._request("POST", f"{self.base_url}/graphql", json=payload)
        if not isinstance(body, dict):
            raise MalformedResponseError("GraphQL response is not an object")
        if body.get("errors"):
            messages = "; ".join(str(err.get("message", err)) if isinstance(err, dict) else str(err) for err in body["errors"])
            raise MalformedResponseError(f"GraphQL query returned errors: {messages}")
        data = body.get("data")
        if not isinstance(data, dict):
            raise MalformedResponseError("GraphQL response has no data")
        return data

    def get_contributor_data(self, owner: str, repo: str, pr_number: int) -> Dict[str, Any]:
        """Return the `pullRequest` node with commits, reviews, comments and closing issues."""
        data = self.graphql(CONTRIBUTOR_QUERY, {"owner": owner, "name": repo, "prNumber": int(pr_number)})
        pull_request = (data.get("repository") or {}).get("pullRequest")
        if not isinstance(pull_request, dict):
            raise MalformedResponseError(f"pull request {owner}/{repo}#{pr_number} not found")
        return pull_request

    def get_users_data(self, logins: List[str]) -> Dict[str, Any]:
        """Fetch id, login, name and email for each login in a single aliased query."""
        logger.debug("Fetching profiles for %s", logins)
        return self.graphql(build_users_query(logins))

    def upsert_comment(self, owner: str, repo: str, number: int, body: str, marker: str) -> Dict[str, Any]:
        """Update the pull request comment carrying `marker`, or create it when absent."""
        comments_url = f"{self.base_url}/repos/{owner}/{repo}/issues/{number}/comments"
        existing = self._request("GET", comments_url, params={"per_page": 100})
        for comment in existing if isinstance(existing, list) else []:
            if marker in (comment.get("body") or ""):
                logger.info("Updating props comment %s", comment.get("id"))
                return self._request("PATCH", f"{self.base_url}/repos/{owner}/{repo}/issues/comments/{comment['id']}", json={"body": body})
        logger.info("Creating props comment on %s/%s#%s", owner, repo, number)
        return self._request("POST", comments_url, json={"body": body})
