import json
import unittest

from correlate import aggregate, reconcile
from normalize.models import AggregationContext, Profile
from report.renderer import render, render_props, render_comment, render_json, format_trailer, COMMENT_MARKER
from conftest import build_pull_request, FakeGitHub, FakeDirectory


def _context(mapping, **channels):
    context = aggregate(build_pull_request(**channels))
    reconcile(context, FakeGitHub(), FakeDirectory(mapping))
    return context


class TestRenderProps(unittest.TestCase):
    def test_format_trailer(self):
        self.assertEqual(format_trailer('alice', 'alice-wp'), 'Co-authored-by: alice <alice-wp@git.wordpress.org>')

    def test_sections_in_priority_order(self):
        context = _context(
            {'alice': {'slug': 'alice-wp'}, 'bob': {'slug': 'bobby'}, 'dave': {'slug': 'dave'}},
            commits=['alice'], reviews=['bob'], issues=[('dave', [])],
        )
        text, unresolved = render_props(context)
        self.assertEqual(
            text,
            '# Committers\n'
            'Co-authored-by: alice <alice-wp@git.wordpress.org>\n'
            '\n'
            '# Reviewers\n'
            'Co-authored-by: bob <bobby@git.wordpress.org>\n'
            '\n'
            '# Reporters\n'
            'Co-authored-by: dave <dave@git.wordpress.org>',
        )
        self.assertEqual(unresolved, [])

    def test_empty_category_has_no_header(self):
        context = _context({'alice': {'slug': 'alice-wp'}}, commits=['alice'])
        text, _ = render_props(context)
        self.assertNotIn('# Reviewers', text)
        self.assertNotIn('# Commenters', text)
        self.assertNotIn('# Reporters', text)

    def test_zero_contributors_renders_empty(self):
        text, unresolved = render_props(AggregationContext())
        self.assertEqual(text, '')
        self.assertEqual(unresolved, [])

    def test_unlinked_directory_account_goes_to_unresolved(self):
        context = _context({'alice': {'slug': 'alice-wp'}, 'bob': False}, commits=['alice'], reviews=['bob'])
        text, unresolved = render_props(context)
        self.assertIn('Co-authored-by: alice <alice-wp@git.wordpress.org>', text)
        self.assertNotIn('Co-authored-by: bob', text)
        self.assertEqual(unresolved, ['bob'])
        self.assertEqual(context.unresolved, ['bob'])

    def test_email_committer_is_unresolved(self):
        context = _context({}, commits=[('Carol', 'carol@example.com')])
        text, unresolved = render_props(context)
        self.assertEqual(text, '# Committers')
        self.assertEqual(unresolved, ['carol@example.com'])

    def test_repeated_email_committer_listed_once(self):
        directory = FakeDirectory({})
        context = aggregate(build_pull_request(commits=[('Carol', 'carol@example.com'), ('Carol', 'carol@example.com')]))
        reconcile(context, FakeGitHub(), directory)
        text, unresolved = render_props(context)
        self.assertEqual(directory.calls, [['carol@example.com']])
        self.assertEqual(unresolved, ['carol@example.com'])
        self.assertEqual(text, '# Committers')

    def test_members_render_in_first_seen_order(self):
        context = AggregationContext()
        for login in ('zed', 'amy', 'kim'):
            context.add('commenters', login)
            context.profiles[login] = Profile(key=login, login=login, directory_handle=login + '-wp')
        text, _ = render_props(context)
        self.assertEqual(text.splitlines()[1:], [
            'Co-authored-by: zed <zed-wp@git.wordpress.org>',
            'Co-authored-by: amy <amy-wp@git.wordpress.org>',
            'Co-authored-by: kim <kim-wp@git.wordpress.org>',
        ])


def test_render_json_export():
    context = _context({'alice': {'slug': 'alice-wp'}, 'bob': False}, commits=['alice'], reviews=['bob'])
    parsed = json.loads(render_json(context))
    assert parsed['unresolved'] == ['bob']
    assert parsed['props'].startswith('# Committers')
    assert parsed['contributors']['committers'][0]['directory_handle'] == 'alice-wp'
    assert parsed['contributors']['reviewers'][0]['login'] == 'bob'
    assert parsed['contributors']['reporters'] == []


def test_render_comment_wraps_props():
    context = _context({'alice': {'slug': 'alice-wp'}}, commits=['alice'])
    body = render_comment(context)
    assert body.startswith(COMMENT_MARKER)
    assert '```\n# Committers\nCo-authored-by: alice <alice-wp@git.wordpress.org>\n```' in body
    assert 'contributor-attribution' in body


def test_render_dispatch():
    context = _context({'alice': {'slug': 'alice-wp'}}, commits=['alice'])
    assert render(context, fmt='text') == render_props(context)[0]
    assert render(context, fmt='comment') == render_comment(context)
    assert json.loads(render(context, fmt='json'))['props'] == render_props(context)[0]
    # unknown formats fall back to the props block
    assert render(context, fmt='markdown') == render_props(context)[0]


if __name__ == '__main__':
    unittest.main()
