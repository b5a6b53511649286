"""
Skip/dedup policy: decides whether a login may be credited.
"""
from normalize.models import AggregationContext

# Automation accounts that never receive props.
DEFAULT_SKIPPED_USERS = ('github-actions',)


def should_skip(login: str, context: AggregationContext) -> bool:
    """
    Return True if the login is an excluded account or is already credited.

    Contributors should only appear in the props list once, even when contributing in multiple ways,
    so this must be checked before every insertion into a category.
    """
    if login in DEFAULT_SKIPPED_USERS or login in context.skipped_users:
        return True
    return context.is_present(login)
