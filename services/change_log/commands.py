# services/change_log/commands.py
import json

import click
from flask import current_app
from flask.cli import with_appcontext

from services.exceptions import UpstreamError
from .runner import build_change_report


@click.command('change-log')
@click.option('--indent', default=2, show_default=True, help='JSON indent for the printed report.')
@with_appcontext
def change_log_command(indent):
    """
    Print the current change board as JSON.
    """
    settings = current_app.extensions['change_log_settings']
    http_client = current_app.extensions.get('report_http_client')
    try:
        report = build_change_report(settings, http_client=http_client)
    except UpstreamError as e:
        raise click.ClickException(e.message)
    click.echo(json.dumps(report.to_dict(), indent=indent))
