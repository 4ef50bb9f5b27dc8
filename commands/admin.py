#!/usr/bin/env python3
"""
QuoteDesk Admin Commands

CLI commands for database setup, the default business identity and
operator status changes on quotations.
"""

import logging

import click

from core.db import configure_engine, init_db
from services.application import BusinessIdentityService, QuotationWriter
from shared.exceptions import QuoteDeskError


_LOG = logging.getLogger(__name__)


def _fail(exc: QuoteDeskError) -> None:
    click.echo(f"❌ {exc.message}", err=True)
    raise SystemExit(1)


@click.group()
@click.option('--database-url', envvar='DATABASE_URL', help='Override the configured database URL')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def quotedesk(database_url, verbose):
    """QuoteDesk Admin Commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if database_url:
        configure_engine(database_url)


@quotedesk.command('init-db')
def init_db_command():
    """Create all missing tables."""
    init_db()
    click.echo("✅ Database tables are in place")


@quotedesk.command('set-default-identity')
@click.argument('identity_id')
def set_default_identity(identity_id):
    """Make IDENTITY_ID the default business identity."""
    try:
        identity = BusinessIdentityService().set_default(identity_id)
    except QuoteDeskError as exc:
        _fail(exc)
        return
    click.echo(f"✅ Default business identity: {identity['name']} ({identity['id']})")


@quotedesk.command('show-default-identity')
def show_default_identity():
    """Print the current default business identity."""
    identity = BusinessIdentityService().get_default()
    if identity is None:
        click.echo("No default business identity")
        return
    click.echo(f"{identity['name']} ({identity['id']})")


@quotedesk.command('set-status')
@click.argument('quotation_id')
@click.argument('status')
def set_status(quotation_id, status):
    """Set STATUS (DRAFT, SENT, ACCEPTED, REJECTED, EXPIRED) on a quotation."""
    try:
        quotation = QuotationWriter().change_status(quotation_id, status)
    except QuoteDeskError as exc:
        _fail(exc)
        return
    click.echo(f"✅ {quotation['quotationNumber']} is now {quotation['status']}")


if __name__ == '__main__':
    quotedesk()
