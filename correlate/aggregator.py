"""
Contribution aggregator: walks the pull request's contribution channels in priority
order and files every contributor under exactly one category.
"""
import logging
from typing import Dict, Any, Optional

from correlate.policy import should_skip
from ingest.errors import MalformedResponseError
from normalize.models import AggregationContext, Profile
from normalize.util import identity_from_commit_author, login_from_author, nodes

logger = logging.getLogger(__name__)


def _credit(context: AggregationContext, category: str, login: str) -> bool:
    if should_skip(login, context):
        return False
    context.add(category, login)
    return True


def _process_commits(pull_request: Dict[str, Any], context: AggregationContext):
    for node in nodes(pull_request, 'commits'):
        commit = node.get('commit') if isinstance(node, dict) else None
        identity = identity_from_commit_author((commit or {}).get('author'))
        if identity.kind == 'unlinked':
            # No account to check against the policy; only a repeat of the same email is dropped.
            if identity.key in context.categories['committers']:
                continue
            logger.info('Commit author %s is not linked to a GitHub account', identity.email)
            context.add('committers', identity.key)
            context.profiles[identity.key] = Profile.from_identity(identity)
            continue
        if _credit(context, 'committers', identity.login):
            context.profiles[identity.login] = Profile.from_identity(identity)


def _process_authors(pull_request: Dict[str, Any], field: str, category: str, context: AggregationContext):
    for node in nodes(pull_request, field):
        _credit(context, category, login_from_author(node, field[:-1]))


def _process_linked_issues(pull_request: Dict[str, Any], context: AggregationContext):
    for issue in nodes(pull_request, 'closingIssuesReferences'):
        _credit(context, 'reporters', login_from_author(issue, 'linked issue'))
        for comment in nodes(issue, 'comments'):
            _credit(context, 'commenters', login_from_author(comment, 'linked issue comment'))


def aggregate(pull_request: Dict[str, Any], context: Optional[AggregationContext] = None) -> AggregationContext:
    """
    Populate an AggregationContext from the `pullRequest` node of the contribution query.

    Processing order is fixed: commits, reviews, PR comments, then linked issues (reporter
    followed by that issue's commenters). A login is credited under the first category it
    reaches; excluded accounts are never credited.

    Parameters:
        pull_request: the `repository.pullRequest` object returned by GitHubClient.get_contributor_data.
        context: optional context to fill (e.g. one created with extra skipped users).

    Returns:
        The populated AggregationContext.
    """
    if not isinstance(pull_request, dict):
        raise MalformedResponseError('pull request data is missing')
    context = context if context is not None else AggregationContext()

    _process_commits(pull_request, context)
    logger.debug('Committers: %s', context.categories['committers'])

    _process_authors(pull_request, 'reviews', 'reviewers', context)
    logger.debug('Reviewers: %s', context.categories['reviewers'])

    _process_authors(pull_request, 'comments', 'commenters', context)
    _process_linked_issues(pull_request, context)
    logger.debug('Commenters: %s', context.categories['commenters'])
    logger.debug('Reporters: %s', context.categories['reporters'])

    return context
