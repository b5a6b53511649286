"""
Identity reconciler: backfills GitHub profile data for non-committers and attaches
WordPress.org handles from the directory lookup.
"""
import logging
from typing import Dict, Any

from ingest.errors import MalformedResponseError
from normalize.models import AggregationContext, Profile

logger = logging.getLogger(__name__)


def merge_users(context: AggregationContext, users: Dict[str, Any]):
    """Merge a batch of GitHub `User` nodes (alias -> user) into the profile table, keyed by login."""
    for alias, user in users.items():
        if not isinstance(user, dict) or not user.get('login'):
            raise MalformedResponseError(f'profile request returned no user for alias {alias}')
        context.profiles[user['login']] = Profile.from_user(user)


def apply_directory_mapping(context: AggregationContext, mapping: Dict[str, Any]) -> int:
    """Attach directory handles from a lookup response. Returns the number of profiles resolved.

    A login mapped to False is not linked to a WordPress.org account and is left without a handle.
    """
    resolved = 0
    for key, profile in context.profiles.items():
        entry = mapping.get(key, False)
        if entry is False or entry is None:
            continue
        if not isinstance(entry, dict) or 'slug' not in entry:
            raise MalformedResponseError(f'directory entry for {key} has no slug')
        profile.directory_handle = entry['slug']
        resolved += 1
    return resolved


def reconcile(context: AggregationContext, github, directory) -> AggregationContext:
    """
    Enrich the aggregated contributors.

    Step 1 requests profiles for reviewers, commenters and reporters in one batch (committers
    already have theirs); nothing is requested when there is nobody to enrich.
    Step 2 looks up every credited key in the WordPress.org directory in one call and merges
    the handles. Transport errors propagate; there is no partial result.

    Parameters:
        context: the AggregationContext produced by aggregate().
        github: object exposing get_users_data(logins) -> {alias: user}.
        directory: object exposing lookup(logins) -> {login: {'slug': ...} | False}.
    """
    logins = context.enrichment_keys()
    if logins:
        logger.info('Requesting profile data for %d contributor(s)', len(logins))
        merge_users(context, github.get_users_data(logins))

    keys = context.all_keys()
    if not keys:
        return context

    logger.info('Looking up %d contributor(s) on WordPress.org', len(keys))
    mapping = directory.lookup(keys)
    logger.debug('Directory mapping: %s', mapping)
    resolved = apply_directory_mapping(context, mapping)
    logger.info('Resolved %d of %d WordPress.org account(s)', resolved, len(keys))
    return context
