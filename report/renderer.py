"""
Report renderer: turn a reconciled AggregationContext into the props block
(`Co-authored-by:` trailers grouped by category), a JSON export or the PR comment body.
The comment body is rendered with Jinja2 from report/templates/comment.md.j2.
"""

import json
import logging
import os
from typing import List, Tuple, Dict, Any

from jinja2 import Environment, FileSystemLoader

from normalize.models import AggregationContext, CATEGORIES

logger = logging.getLogger(__name__)

DIRECTORY_DOMAIN = 'git.wordpress.org'

# Hidden marker used to find the bot's own comment when updating it.
COMMENT_MARKER = '<!-- props-bot -->'

HANDBOOK_URL = 'https://make.wordpress.org/core/handbook/best-practices/contributor-attribution-props/'


def format_trailer(login: str, handle: str, domain: str = DIRECTORY_DOMAIN) -> str:
    return f'Co-authored-by: {login} <{handle}@{domain}>'


def _render_section(context: AggregationContext, category: str, unresolved: List[str], domain: str) -> str:
    """Render one category: header followed by a trailer per resolved member."""
    lines = ['# ' + category[:1].upper() + category[1:]]
    for key in context.categories[category]:
        profile = context.profiles.get(key)
        if profile is None or not profile.has_directory_handle:
            unresolved.append(key)
            continue
        lines.append(format_trailer(key, profile.directory_handle, domain))
    return '\n'.join(lines)


def render_props(context: AggregationContext, domain: str = DIRECTORY_DOMAIN) -> Tuple[str, List[str]]:
    """Render the props block and return it together with the keys that have no WordPress.org handle.

    Categories are emitted in priority order; empty categories are omitted entirely and
    sections are separated by a blank line.
    """
    unresolved: List[str] = []
    sections = [
        _render_section(context, category, unresolved, domain)
        for category in CATEGORIES
        if context.categories[category]
    ]
    context.unresolved = unresolved
    if unresolved:
        logger.info('%d contributor(s) have no linked WordPress.org account', len(unresolved))
    return '\n\n'.join(sections), unresolved


def render_json(context: AggregationContext, domain: str = DIRECTORY_DOMAIN) -> str:
    """Export the props block, unresolved keys and per-category profiles as JSON."""
    text, unresolved = render_props(context, domain)
    contributors: Dict[str, List[Dict[str, Any]]] = {}
    for category in CATEGORIES:
        contributors[category] = [
            context.profiles[key].to_dict() if key in context.profiles else {'key': key}
            for key in context.categories[category]
        ]
    return json.dumps({'props': text, 'unresolved': unresolved, 'contributors': contributors}, indent=2)


def _environment() -> Environment:
    tmpl_dir = os.path.join(os.path.dirname(__file__), 'templates')
    return Environment(loader=FileSystemLoader(tmpl_dir), keep_trailing_newline=True)


def render_comment(context: AggregationContext, domain: str = DIRECTORY_DOMAIN) -> str:
    """Render the pull request comment body that carries the props block."""
    text, _ = render_props(context, domain)
    tmpl = _environment().get_template('comment.md.j2')
    return tmpl.render(marker=COMMENT_MARKER, props=text, handbook_url=HANDBOOK_URL)


def render(context: AggregationContext, fmt: str = 'text', domain: str = DIRECTORY_DOMAIN) -> str:
    """Main render function. Supported formats: text, json, comment."""
    fmt_l = (fmt or 'text').lower()
    if fmt_l == 'json':
        return render_json(context, domain)
    if fmt_l == 'comment':
        return render_comment(context, domain)
    return render_props(context, domain)[0]
