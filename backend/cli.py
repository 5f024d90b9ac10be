#!/usr/bin/env python3
"""
CLI for the Sales Dashboard API

Commands:
    seed    - Replace all transactions from the seed source
    stats   - Print statistics and chart data for one month as JSON

Usage:
    python cli.py seed
    python cli.py seed --source https://example.com/product_transaction.json
    python cli.py stats --month 3
    python cli.py stats --month 11 --year 2021
"""

import click
import sys
import json


def get_app_context():
    """Get Flask app context for database access."""
    from app import create_app
    app = create_app()
    return app.app_context()


@click.group()
@click.version_option(version="1.0.0", prog_name="sales-dashboard-cli")
def cli():
    """Sales Dashboard CLI - Seed and inspect transaction data."""
    pass


@cli.command("seed")
@click.option("--source", "source_url", default=None, help="Override SEED_SOURCE_URL")
def seed(source_url):
    """
    Fetch the seed payload and atomically replace all transactions.

    The previous contents are kept if the fetch, validation or insert fails.
    """
    with get_app_context():
        from services.seed_loader import SeedFetchError, SeedPayloadError, seed_transactions
        from services.transaction_source_client import TransactionSourceClient
        from sqlalchemy.exc import SQLAlchemyError

        client = TransactionSourceClient(url=source_url) if source_url else None
        click.echo(f"Seeding from {source_url or 'SEED_SOURCE_URL'}...")

        try:
            result = seed_transactions(client=client)
        except SeedFetchError as e:
            click.secho(f"Error fetching seed data: {e}", fg="red")
            sys.exit(1)
        except SeedPayloadError as e:
            click.secho(f"Invalid seed payload: {e}", fg="red")
            for err in e.errors:
                click.echo(f"  - {err['field']}: {err['message']}")
            sys.exit(1)
        except SQLAlchemyError as e:
            click.secho(f"Error seeding database (previous data kept): {e}", fg="red")
            sys.exit(1)

        click.echo("=" * 60)
        click.secho("SEED SUMMARY", fg="cyan", bold=True)
        click.echo("=" * 60)
        click.echo(f"  Source:   {result.source_url}")
        click.echo(f"  Deleted:  {result.deleted}")
        click.echo(f"  Inserted: {result.inserted}")
        click.echo(f"  Elapsed:  {result.elapsed_ms}ms")


@cli.command("stats")
@click.option("--month", required=True, help="Month number (1-12)")
@click.option("--year", default=None, help="Year (defaults to SALES_YEAR)")
def stats(month, year):
    """Print statistics, bar chart and pie chart for one month as JSON."""
    with get_app_context():
        from services.dashboard_service import get_bar_chart, get_pie_chart, get_statistics
        from utils.normalize import ValidationError
        from utils.period import resolve_month_period

        try:
            period = resolve_month_period(month, year)
        except ValidationError as e:
            raise click.BadParameter(str(e), param_hint=f"--{e.field or 'month'}")

        output = {
            "period": period.to_dict(),
            "statistics": get_statistics(period),
            "barChart": get_bar_chart(period),
            "pieChart": get_pie_chart(period),
        }
        click.echo(json.dumps(output, indent=2, default=str))


if __name__ == "__main__":
    cli()
