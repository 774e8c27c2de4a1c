"""Farm engine command line interface.

Provides operational tools for:
- Serving the API
- Creating the database schema
- Running monthly payroll
- Pricing a day's eggs
- Counting working days in a month

Usage:
    farm-engine serve --port 8000
    farm-engine init-db
    farm-engine generate-payroll 2025-08
    farm-engine egg-cost 2025-08-14 --json
    farm-engine working-days 2025-08
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from datetime import date
from decimal import Decimal
from typing import Any, Callable

import uvicorn

from farm_engine.calculators.periods import parse_month_year, working_days_in_month
from farm_engine.config import Settings, get_settings
from farm_engine.database import create_schema, get_engine, get_session_factory, session_scope
from farm_engine.errors import FarmEngineError
from farm_engine.services.cost_service import CostService
from farm_engine.services.payroll_service import PayrollService


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Cannot serialize {type(value).__name__}")


class FarmCli:
    """Farm engine command line interface."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="farm-engine",
            description="Farm payroll and cost operations",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # serve command
        serve = subparsers.add_parser("serve", help="Run the HTTP API")
        serve.add_argument("--host", default=self.settings.host, help="Bind address")
        serve.add_argument("--port", type=int, default=self.settings.port, help="Bind port")
        serve.add_argument("--reload", action="store_true", help="Reload on code changes")

        # init-db command
        subparsers.add_parser("init-db", help="Create missing database tables")

        # generate-payroll command
        payroll = subparsers.add_parser(
            "generate-payroll",
            help="Generate payroll for all active laborers",
        )
        payroll.add_argument("month", help="Month as YYYY-MM")

        # egg-cost command
        egg_cost = subparsers.add_parser(
            "egg-cost",
            help="Compute cost per egg and suggested price for a day",
        )
        egg_cost.add_argument("date", type=date.fromisoformat, help="Day as YYYY-MM-DD")
        egg_cost.add_argument("--json", action="store_true", help="Output as JSON")

        # working-days command
        working = subparsers.add_parser(
            "working-days",
            help="Count non-Sunday days in a month",
        )
        working.add_argument("month", help="Month as YYYY-MM")

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        handlers: dict[str, Callable[..., int]] = {
            "serve": self._cmd_serve,
            "init-db": self._cmd_init_db,
            "generate-payroll": self._cmd_generate_payroll,
            "egg-cost": self._cmd_egg_cost,
            "working-days": self._cmd_working_days,
        }

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return 1

        try:
            return handler(parsed)
        except FarmEngineError as e:
            print(f"ERROR: {e.message}", file=sys.stderr)
            return 2

    def _cmd_serve(self, args: argparse.Namespace) -> int:
        """Run the API under uvicorn."""
        uvicorn.run(
            "farm_engine.api.app:app",
            host=args.host,
            port=args.port,
            reload=args.reload or self.settings.debug,
            log_level=self.settings.log_level.lower(),
        )
        return 0

    def _cmd_init_db(self, args: argparse.Namespace) -> int:
        """Create the schema."""

        async def _run() -> None:
            engine = get_engine(self.settings.database_url)
            try:
                await create_schema(engine)
            finally:
                await engine.dispose()

        asyncio.run(_run())
        print("Database schema is up to date")
        return 0

    def _cmd_generate_payroll(self, args: argparse.Namespace) -> int:
        """Generate and commit a month's payroll."""
        month = parse_month_year(args.month)

        async def _run() -> list[tuple[int, Decimal]]:
            engine = get_engine(self.settings.database_url)
            try:
                async with session_scope(get_session_factory(engine)) as session:
                    rows = await PayrollService(session).generate_payroll(month)
                    return [(row.laborer_id, row.final_salary) for row in rows]
            finally:
                await engine.dispose()

        rows = asyncio.run(_run())
        print(f"Payroll for {month}: {len(rows)} laborers")
        for laborer_id, final_salary in rows:
            print(f"  laborer {laborer_id:>5}  {final_salary:>12,.2f}")
        total = sum((salary for _, salary in rows), Decimal("0"))
        print(f"  {'total':>13}  {total:>12,.2f}")
        return 0

    def _cmd_egg_cost(self, args: argparse.Namespace) -> int:
        """Price a day's eggs."""

        async def _run():
            engine = get_engine(self.settings.database_url)
            try:
                async with session_scope(get_session_factory(engine)) as session:
                    service = CostService(session, markup=self.settings.egg_price_markup)
                    return await service.compute_daily_egg_cost(args.date)
            finally:
                await engine.dispose()

        breakdown = asyncio.run(_run())
        if args.json:
            print(json.dumps(asdict(breakdown), default=_json_default, indent=2))
            return 0

        print(f"Egg cost for {breakdown.cost_date}")
        print("=" * 40)
        print(f"  Eggs collected:     {breakdown.total_eggs:>12,}")
        print(f"  Feed used (kg):     {breakdown.total_feed_kg:>12,.2f}")
        print(f"  Feed cost:          {breakdown.feed_cost:>12,.2f}")
        print(f"  Feed per egg:       {breakdown.feed_cost_per_egg:>12.4f}")
        print(f"  Labor per egg:      {breakdown.labor_cost_per_egg:>12.4f}")
        print(f"  Fixed per egg:      {breakdown.fixed_cost_per_egg:>12.4f}")
        print(f"  Health per egg:     {breakdown.health_cost_per_egg:>12.4f}")
        print(f"  Total per egg:      {breakdown.total_cost_per_egg:>12.4f}")
        print(f"  Suggested price:    {breakdown.suggested_price:>12.4f}")
        return 0

    def _cmd_working_days(self, args: argparse.Namespace) -> int:
        """Print the working days of a month."""
        month = parse_month_year(args.month)
        print(f"{month}: {working_days_in_month(month)} working days")
        return 0


def main() -> int:
    """CLI entry point."""
    settings = get_settings()
    configure_logging(settings.log_level)
    cli = FarmCli(settings)
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
