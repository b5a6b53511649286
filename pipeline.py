"""
Props pipeline: fetch -> aggregate -> reconcile -> render.
"""
import logging
from typing import List, Optional, Iterable

from correlate import aggregate, reconcile
from normalize.models import AggregationContext
from report.renderer import render_props, DIRECTORY_DOMAIN

logger = logging.getLogger(__name__)


class PropsResult:
    """
    Output of one pipeline run.
    """
    def __init__(self, text: str, unresolved: List[str], context: AggregationContext):
        self.text = text
        self.unresolved = unresolved
        self.context = context

    def __str__(self):
        return self.text


def collect_props(github, directory, owner: str, repo: str, pr_number: int, skipped_users: Optional[Iterable[str]] = None, domain: str = DIRECTORY_DOMAIN) -> Optional[PropsResult]:
    """
    Prepare the props list for a pull request.

    Parameters:
        github: GitHubClient (or compatible) used for the contribution and profile queries.
        directory: DirectoryClient (or compatible) used for the WordPress.org lookup.
        owner (str): repository owner.
        repo (str): repository name.
        pr_number (int): pull request number.
        skipped_users: extra logins to exclude in addition to the default automation accounts.

    Returns:
        PropsResult, or None when no contributors were gathered.
    """
    pull_request = github.get_contributor_data(owner, repo, pr_number)
    context = aggregate(pull_request, AggregationContext(skipped_users))

    if context.is_empty():
        logger.info('No contributors found for %s/%s#%s', owner, repo, pr_number)
        return None

    reconcile(context, github, directory)
    text, unresolved = render_props(context, domain)
    logger.debug('Props:\n%s', text)
    return PropsResult(text, unresolved, context)
