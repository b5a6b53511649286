"""
Data models for contributor identities and the per-run aggregation state.
"""

from typing import Dict, List, Optional, Any, Iterable

# Categories in priority order. A contributor is credited under the first one they qualify for.
CATEGORIES = ('committers', 'reviewers', 'commenters', 'reporters')


class LinkedAccount:
    """
    Commit author backed by a GitHub account.
    """
    kind = 'linked'

    def __init__(self, login: str, database_id: Optional[int] = None, name: Optional[str] = None, email: Optional[str] = None):
        self.login = login
        self.database_id = database_id
        self.name = name
        self.email = email

    @property
    def key(self) -> str:
        return self.login


class UnlinkedAuthor:
    """
    Commit author known only by the name/email recorded in the commit.
    The email is used as a surrogate key.
    """
    kind = 'unlinked'

    def __init__(self, name: Optional[str], email: str):
        self.name = name
        self.email = email

    @property
    def key(self) -> str:
        return self.email


class Profile:
    """
    Profile data for one contributor, enriched with a WordPress.org handle once reconciled.
    """
    def __init__(self, key: str, login: Optional[str] = None, name: Optional[str] = None, email: Optional[str] = None, database_id: Optional[int] = None, directory_handle: Optional[str] = None):
        self.key = key
        self.login = login
        self.name = name
        self.email = email
        self.database_id = database_id
        self.directory_handle = directory_handle

    @classmethod
    def from_identity(cls, identity) -> 'Profile':
        if identity.kind == 'unlinked':
            return cls(key=identity.email, name=identity.name, email=identity.email)
        return cls(key=identity.login, login=identity.login, name=identity.name, email=identity.email, database_id=identity.database_id)

    @classmethod
    def from_user(cls, user: Dict[str, Any]) -> 'Profile':
        """Build a profile from a GitHub GraphQL `User` node."""
        return cls(key=user['login'], login=user['login'], name=user.get('name'), email=user.get('email') or None, database_id=user.get('databaseId'))

    @property
    def has_directory_handle(self) -> bool:
        return self.directory_handle is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'key': self.key,
            'login': self.login,
            'name': self.name,
            'email': self.email,
            'database_id': self.database_id,
            'directory_handle': self.directory_handle,
        }


class AggregationContext:
    """
    State owned by a single pipeline run: the category lists, the profile table and
    the unresolved list produced by the renderer.

    Category members are kept in plain lists so that rendering follows first-seen order.
    """
    def __init__(self, skipped_users: Optional[Iterable[str]] = None):
        self.categories: Dict[str, List[str]] = {category: [] for category in CATEGORIES}
        self.profiles: Dict[str, Profile] = {}
        self.unresolved: List[str] = []
        self.skipped_users = frozenset(skipped_users or ())

    def is_present(self, key: str) -> bool:
        """True if the key already belongs to any category."""
        return any(key in members for members in self.categories.values())

    def add(self, category: str, key: str):
        self.categories[category].append(key)

    def all_keys(self) -> List[str]:
        """Flattened list of every credited key in category order."""
        return [key for category in CATEGORIES for key in self.categories[category]]

    def enrichment_keys(self) -> List[str]:
        """Logins that still need profile data (everyone except committers)."""
        keys: List[str] = []
        for category in CATEGORIES[1:]:
            for key in self.categories[category]:
                if key not in keys:
                    keys.append(key)
        return keys

    def is_empty(self) -> bool:
        return not any(self.categories.values())
