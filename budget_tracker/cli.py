# budget_tracker/cli.py
import json
from datetime import datetime

import click
from dotenv import load_dotenv

from budget_tracker.config import configure_logging, load_config, save_config, DEFAULT_CONFIG
from budget_tracker.core.errors import BudgetTrackerError
from budget_tracker.dashboard import build_cash_flow, build_dashboard, build_report
from budget_tracker.payloads import (
    budget_payload,
    cash_flow_payload,
    dashboard_payload,
    report_payload,
    transaction_payload,
)
from budget_tracker.seed import seed_demo_data
from budget_tracker.stores import get_store
from budget_tracker.windows import WindowKind

WINDOW_CHOICES = [w.value for w in WindowKind]


def _echo_json(payload):
    click.echo(json.dumps(payload, indent=2))


def _parse_now(value):
    if not value:
        return None
    try:
        now = datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Invalid ISO date/time: {value}", param_hint="--now")
    if now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)
    return now


class AppContext:
    def __init__(self, config):
        self.config = config
        self._store = None

    @property
    def store(self):
        if self._store is None:
            self._store = get_store(self.config)
            if self.config.get('seed_demo_data'):
                seed_demo_data(self._store)
        return self._store

    @property
    def owner_id(self):
        return int(self.config.get('default_owner_id', 1))


@click.group()
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='Path to config.yaml (default: $BUDGET_TRACKER_CONFIG or ./config.yaml)'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file with BUDGET_TRACKER_* settings'
)
@click.option(
    '--db', 'db_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='SQLite database file (overrides the configured store)'
)
@click.option('--owner', 'owner_id', default=None, type=int, help='Owner (user) id')
@click.option('--log-level', default=None, help='Logging level, e.g. DEBUG')
@click.pass_context
def main(ctx, config_path, env_file, db_path, owner_id, log_level):
    """
    Track income, expenses and per-category budgets, and print dashboard
    and report summaries as JSON.
    """
    if env_file:
        load_dotenv(env_file)
    configure_logging(log_level)

    cfg = load_config(config_path)
    if db_path:
        cfg['store'] = {'backend': 'sqlite', 'db_path': db_path}
    if owner_id is not None:
        cfg['default_owner_id'] = owner_id
    ctx.obj = AppContext(cfg)


@main.command('init-config')
@click.argument('path', default='config.yaml', type=click.Path(dir_okay=False))
def init_config(path):
    """Write the default configuration to PATH."""
    save_config(DEFAULT_CONFIG, path)
    click.echo(f"Wrote default configuration to {path}.")


@main.command()
@click.pass_obj
def seed(app):
    """Create the demo user with sample transactions and budgets."""
    user = seed_demo_data(app.store)
    click.echo(f"Demo data ready for user {user.username} (id {user.id}).")


@main.command()
@click.option('--now', default=None, help='Reference time (ISO 8601); defaults to now')
@click.pass_obj
def dashboard(app, now):
    """Print the dashboard summary."""
    summary = build_dashboard(
        app.store,
        app.owner_id,
        _parse_now(now),
        recent_limit=int(app.config.get('recent_limit', 5)),
    )
    _echo_json(dashboard_payload(summary))


@main.command()
@click.option(
    '--window',
    default=WindowKind.CURRENT_MONTH.value,
    type=click.Choice(WINDOW_CHOICES),
    help='Time window to report on'
)
@click.option('--now', default=None, help='Reference time (ISO 8601); defaults to now')
@click.pass_obj
def report(app, window, now):
    """Print income, spend and budget progress for a time window."""
    _echo_json(report_payload(build_report(app.store, app.owner_id, window, _parse_now(now))))


@main.command('cash-flow')
@click.option(
    '--window',
    default=WindowKind.LAST_30_DAYS.value,
    type=click.Choice(WINDOW_CHOICES),
    help='Time window for the daily series'
)
@click.option('--now', default=None, help='Reference time (ISO 8601); defaults to now')
@click.pass_obj
def cash_flow(app, window, now):
    """Print daily income and expense totals."""
    series = build_cash_flow(app.store, app.owner_id, window, _parse_now(now))
    _echo_json(cash_flow_payload(series))


@main.command('add-transaction')
@click.option('--amount', required=True, help='Positive amount, e.g. 84.20')
@click.option('--description', required=True)
@click.option('--category', required=True)
@click.option('--date', 'when', default=None, help='ISO date/time; defaults to now')
@click.option('--expense/--income', 'is_expense', default=True, help='Record an expense (default) or income')
@click.pass_obj
def add_transaction(app, amount, description, category, when, is_expense):
    """Record an expense or income transaction."""
    try:
        tx = app.store.create_transaction(
            app.owner_id,
            amount=amount,
            description=description,
            category=category,
            date=when or datetime.now(),
            is_expense=is_expense,
        )
    except BudgetTrackerError as exc:
        raise click.ClickException(str(exc))
    _echo_json(transaction_payload(tx))


@main.command('list-transactions')
@click.pass_obj
def list_transactions(app):
    _echo_json([transaction_payload(tx) for tx in app.store.list_transactions(app.owner_id)])


@main.command('delete-transaction')
@click.argument('transaction_id', type=int)
@click.pass_obj
def delete_transaction(app, transaction_id):
    try:
        app.store.delete_transaction(transaction_id)
    except BudgetTrackerError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Deleted transaction {transaction_id}.")


@main.command('add-budget')
@click.option('--category', required=True)
@click.option('--amount', required=True, help='Positive spending limit')
@click.option(
    '--period',
    default='monthly',
    type=click.Choice(['monthly', 'quarterly', 'yearly']),
)
@click.pass_obj
def add_budget(app, category, amount, period):
    """Define a spending limit for a category."""
    try:
        budget = app.store.create_budget(
            app.owner_id, category=category, amount=amount, period=period
        )
    except BudgetTrackerError as exc:
        raise click.ClickException(str(exc))
    _echo_json(budget_payload(budget))


@main.command('list-budgets')
@click.pass_obj
def list_budgets(app):
    _echo_json([budget_payload(b) for b in app.store.list_budgets(app.owner_id)])


@main.command('delete-budget')
@click.argument('budget_id', type=int)
@click.pass_obj
def delete_budget(app, budget_id):
    try:
        app.store.delete_budget(budget_id)
    except BudgetTrackerError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Deleted budget {budget_id}.")


@main.command()
@click.option('--host', default=None, help='Host to bind (default from config)')
@click.option('--port', default=None, type=int, help='Port to bind (default from config)')
@click.pass_obj
def serve(app, host, port):
    """Run the JSON API with uvicorn."""
    import uvicorn

    from webapp.main import create_app

    server_cfg = app.config.get('server', {})
    host = host or server_cfg.get('host', '127.0.0.1')
    port = port or int(server_cfg.get('port', 8000))
    click.echo(f"SmartBudget API running at http://{host}:{port}")
    uvicorn.run(create_app(config=app.config, store=app.store), host=host, port=port)
