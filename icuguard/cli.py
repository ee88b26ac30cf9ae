"""
Flask CLI commands for checking input against the sanitizer offline

    flask --app run check-url "javascript:alert(1)"
    flask --app run check-input "' OR '1'='1"
    flask --app run check-query '{"age": {"$where": "sleep(100)"}}'
"""
import json

import click
from flask import current_app

from icuguard.sanitize import filter_query, sanitize_string, sanitize_url
from icuguard.utils.validators import has_sql_injection, is_valid_email, is_valid_phone


def _policy():
    return current_app.extensions['request_sanitizer']


def register_commands(app):
    """Attach the sanitizer commands to the app's CLI group"""

    @app.cli.command('check-url')
    @click.argument('url')
    def check_url(url):
        """Show what the URL gatekeeper does with URL."""
        cleaned = sanitize_url(url, _policy())
        if cleaned:
            click.echo('allowed: {}'.format(cleaned))
        else:
            click.echo('rejected: {}'.format(url))

    @app.cli.command('check-input')
    @click.argument('value')
    def check_input(value):
        """Run the format validators and escaper over VALUE."""
        policy = _policy()
        click.echo('escaped: {}'.format(sanitize_string(value)))
        click.echo('email: {}'.format('valid' if is_valid_email(value) else 'invalid'))
        click.echo('phone: {}'.format('valid' if is_valid_phone(value) else 'invalid'))
        click.echo('sql injection: {}'.format(
            'suspicious' if has_sql_injection(value, policy) else 'clean'
        ))

    @app.cli.command('check-query')
    @click.argument('query')
    def check_query(query):
        """Filter the JSON query QUERY through the operator allow-list."""
        try:
            parsed = json.loads(query)
        except ValueError as e:
            raise click.BadParameter('not valid JSON: {}'.format(e), param_hint='QUERY')

        result = filter_query(parsed, _policy())
        click.echo('sanitized: {}'.format(json.dumps(result.sanitized, sort_keys=True)))
        if result.dropped_keys:
            click.echo('dropped: {}'.format(', '.join(result.dropped_keys)))
        else:
            click.echo('dropped: none')
