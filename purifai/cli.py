"""Flask CLI commands for database, nisab and household management."""
import click
from flask.cli import with_appcontext

from purifai.db import get_db, init_db, get_db_path
from purifai.services.family import FamilyError
from purifai.services.nisab import update_nisab
from purifai.services.portfolio import total_zakat, get_payable_breakdown
from purifai.services.repository import (
    load_household,
    save_household,
    load_nisab,
    save_nisab,
    load_records_or_empty,
)


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Initialize the SQLite database with schema."""
    init_db()
    click.echo(f'Initialized database at {get_db_path()}')


@click.command('update-nisab')
@click.option('--monetary', type=float, required=True, help='Monetary threshold')
@click.option('--gold-weight', type=float, required=True, help='Gold threshold in grams')
@click.option('--gold-price', type=float, required=True, help='Gold price per gram')
@click.option('--currency', default=None, help='Currency label (default: configured)')
@with_appcontext
def update_nisab_command(monetary, gold_weight, gold_price, currency):
    """Overwrite the stored nisab reference.

    Example: flask update-nisab --monetary 17230.10 --gold-weight 86 --gold-price 200.35
    """
    try:
        nisab = update_nisab(monetary, gold_weight, gold_price, currency=currency)
    except ValueError as e:
        raise click.BadParameter(str(e))

    save_nisab(get_db(), nisab)
    click.echo(
        f'Nisab updated: {nisab.currency} {nisab.monetary_threshold:.2f}, '
        f'{nisab.gold_weight_threshold:g}g gold at {nisab.gold_price_per_gram:.2f}/g '
        f'({nisab.updated_date})'
    )


@click.command('show-nisab')
@with_appcontext
def show_nisab_command():
    """Print the stored nisab reference."""
    nisab = load_nisab(get_db())
    click.echo(f'Currency:        {nisab.currency}')
    click.echo(f'Monetary:        {nisab.monetary_threshold:.2f}')
    click.echo(f'Gold weight:     {nisab.gold_weight_threshold:g}g')
    click.echo(f'Gold price/gram: {nisab.gold_price_per_gram:.2f}')
    click.echo(f'Updated:         {nisab.updated_date or "-"}')


@click.command('add-member')
@click.argument('name')
@click.option('--relationship', default='other', help='Relationship to the household head')
@with_appcontext
def add_member_command(name, relationship):
    """Add a household member."""
    db = get_db()
    household = load_household(db)
    try:
        member = household.add_member(name, relationship)
    except FamilyError as e:
        raise click.ClickException(str(e))

    save_household(db, household)
    click.echo(f'Added {member.name} ({member.relationship}) as {member.id}')


@click.command('list-members')
@with_appcontext
def list_members_command():
    """List household members with their total zakat due."""
    db = get_db()
    household = load_household(db)
    current = household.get_current_member()
    for member in household.members:
        marker = '*' if member is current else ' '
        total = total_zakat(load_records_or_empty(db, member.id))
        click.echo(f'{marker} {member.id}  {member.name} ({member.relationship})  zakat {total:.2f}')


@click.command('member-summary')
@click.argument('member_id')
@with_appcontext
def member_summary_command(member_id):
    """Print a member's payable zakat per asset class."""
    db = get_db()
    household = load_household(db)
    try:
        member = household.get_member(member_id)
    except FamilyError as e:
        raise click.ClickException(str(e))

    breakdown = get_payable_breakdown(load_records_or_empty(db, member_id))
    click.echo(f'{member.name} ({member.relationship})')
    for item in breakdown['items']:
        click.echo(f"  {item['name']:<32} {item['zakat_amount']:>12.2f}")
    click.echo(f"  {'Total zakat due':<32} {breakdown['total_zakat_due']:>12.2f}")


def register_cli(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(init_db_command)
    app.cli.add_command(update_nisab_command)
    app.cli.add_command(show_nisab_command)
    app.cli.add_command(add_member_command)
    app.cli.add_command(list_members_command)
    app.cli.add_command(member_summary_command)
