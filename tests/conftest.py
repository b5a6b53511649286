import sys
import os

import pytest

# Add project root to sys.path so tests can import top-level modules like 'correlate', 'normalize', 'report', etc.
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


def _author(login):
    return {'author': {'login': login}}


def build_pull_request(commits=(), reviews=(), comments=(), issues=()):
    """Build a `pullRequest` node shaped like the contribution query response.

    commits: logins (str) for linked authors or (name, email) tuples for unlinked ones.
    issues: (reporter, [commenter, ...]) tuples.
    """
    commit_nodes = []
    for c in commits:
        if isinstance(c, tuple):
            author = {'user': None, 'name': c[0], 'email': c[1]}
        else:
            author = {
                'user': {'databaseId': len(c), 'login': c, 'name': c.title(), 'email': f'{c}@example.com'},
                'name': c.title(),
                'email': f'{c}@example.com',
            }
        commit_nodes.append({'commit': {'author': author}})
    return {
        'commits': {'nodes': commit_nodes},
        'reviews': {'nodes': [_author(r) for r in reviews]},
        'comments': {'nodes': [_author(c) for c in comments]},
        'closingIssuesReferences': {
            'nodes': [
                {'author': {'login': reporter}, 'comments': {'nodes': [_author(c) for c in commenters]}}
                for reporter, commenters in issues
            ]
        },
    }


@pytest.fixture
def make_pull_request():
    return build_pull_request


class FakeGitHub:
    """Stand-in for GitHubClient that records calls."""

    def __init__(self, pull_request=None, users=None):
        self.pull_request = pull_request
        self.users = users
        self.users_calls = []
        self.comments = []

    def get_contributor_data(self, owner, repo, pr_number):
        return self.pull_request

    def get_users_data(self, logins):
        self.users_calls.append(list(logins))
        if self.users is not None:
            return self.users
        return {
            '_' + login: {'databaseId': i + 1, 'login': login, 'name': login.title(), 'email': ''}
            for i, login in enumerate(logins)
        }

    def upsert_comment(self, owner, repo, number, body, marker):
        self.comments.append((owner, repo, number, body, marker))
        return {'id': 1, 'body': body}


class FakeDirectory:
    """Stand-in for DirectoryClient returning a fixed mapping."""

    def __init__(self, mapping=None, error=None):
        self.mapping = mapping or {}
        self.error = error
        self.calls = []

    def lookup(self, logins):
        self.calls.append(list(logins))
        if self.error:
            raise self.error
        return self.mapping


@pytest.fixture
def fake_github():
    return FakeGitHub


@pytest.fixture
def fake_directory():
    return FakeDirectory
