"""
Normalization helpers: turn raw GraphQL author payloads into identities and
build safe query aliases from logins.
"""
import re
from typing import Dict, Any, Optional

from ingest.errors import MalformedResponseError
from normalize.models import LinkedAccount, UnlinkedAuthor

_NON_ALNUM = re.compile(r'[^A-Za-z0-9]')


def escape_for_gql(login: str) -> str:
    """Return a GraphQL field alias for a login.

    Every character outside ASCII letters/digits becomes '_' and the result is prefixed with '_'
    because alias names may not start with a digit.
    """
    return '_' + _NON_ALNUM.sub('_', login)


def identity_from_commit_author(author: Optional[Dict[str, Any]]):
    """Create a LinkedAccount or UnlinkedAuthor from a `commit.author` payload."""
    if not isinstance(author, dict):
        raise MalformedResponseError('commit is missing its author record')
    user = author.get('user')
    if user is None:
        email = author.get('email')
        if not email:
            raise MalformedResponseError('unlinked commit author has no email')
        return UnlinkedAuthor(name=author.get('name'), email=email)
    login = user.get('login')
    if not login:
        raise MalformedResponseError('commit author user has no login')
    return LinkedAccount(login=login, database_id=user.get('databaseId'), name=user.get('name'), email=user.get('email') or None)


def login_from_author(node: Dict[str, Any], what: str) -> str:
    """Extract `author.login` from a review/comment/issue node."""
    author = node.get('author') if isinstance(node, dict) else None
    login = author.get('login') if isinstance(author, dict) else None
    if not login:
        raise MalformedResponseError(f'{what} has no author login')
    return login


def nodes(container: Optional[Dict[str, Any]], field: str):
    """Return `container[field]['nodes']`, raising when the connection is missing."""
    connection = container.get(field) if isinstance(container, dict) else None
    items = connection.get('nodes') if isinstance(connection, dict) else None
    if not isinstance(items, list):
        raise MalformedResponseError(f'response is missing the {field} node list')
    return items
