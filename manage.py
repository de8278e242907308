#!/usr/bin/env python3
"""
Stock ledger management CLI.

Usage:
    python manage.py migrate       Apply pending schema migrations
    python manage.py status        Show migration status
    python manage.py verify        Audit schema and ledger balances
    python manage.py scan-alerts   Raise/resolve stock level and expiry alerts
"""

import argparse
import asyncio
import sys
from datetime import date

from stockledger.config import configure_logging, get_settings


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply all pending migrations."""
    from stockledger.infrastructure.storage.sqlite.migrations import run_migrations

    results = asyncio.run(run_migrations())
    if not results:
        print("Database is up to date.")
        return

    for result in results:
        state = "OK" if result.success else "FAILED"
        print(f"  v{result.version} {result.name}: {state} ({result.execution_time_ms} ms)")
        if result.error:
            print(f"    {result.error}")

    if not all(r.success for r in results):
        sys.exit(1)


def cmd_status(args: argparse.Namespace) -> None:
    """Print migration status."""
    from stockledger.infrastructure.storage.sqlite.migrations import get_migration_status

    status = asyncio.run(get_migration_status())
    print(f"Database: {get_settings().storage.db_path}")
    if not status["exists"]:
        print("  Not created yet. Run 'migrate' first.")
        return

    print(f"  Current version: {status['current_version'] or 'none'}")
    print(f"  Applied:         {', '.join(status['applied_migrations']) or 'none'}")
    print(f"  Pending:         {', '.join(status['pending_migrations']) or 'none'}")


def cmd_verify(args: argparse.Namespace) -> None:
    """Run integrity checks; exit non-zero if any fails."""
    from stockledger.infrastructure.storage.sqlite.migrations import verify_schema_integrity

    db_path = get_settings().storage.db_path
    if not db_path.exists():
        print(f"Error: database {db_path} does not exist.")
        sys.exit(1)

    checks = asyncio.run(verify_schema_integrity())
    failed = False
    for check in checks:
        extra = {k: v for k, v in check.items() if k not in ("check", "status")}
        print(f"  [{check['status']}] {check['check']} {extra or ''}".rstrip())
        failed = failed or check["status"] != "PASS"

    if failed:
        sys.exit(1)


async def _scan_alerts(today: date | None, expiry_days: int | None):
    from stockledger.application.use_cases import ScanStockAlertsUseCase
    from stockledger.infrastructure.storage.sqlite import close_pool

    try:
        return await ScanStockAlertsUseCase().execute(
            today=today, expiry_warning_days=expiry_days
        )
    finally:
        await close_pool()


def cmd_scan_alerts(args: argparse.Namespace) -> None:
    """Run one alert scan over all inventory records."""
    today = date.fromisoformat(args.today) if args.today else None
    result = asyncio.run(_scan_alerts(today, args.expiry_days))

    print(f"Records scanned: {result.records_scanned}")
    print(f"Records updated: {result.records_updated}")
    print(f"Alerts raised:   {result.alerts_raised}")
    print(f"Alerts resolved: {result.alerts_resolved}")
    if result.skipped_record_ids:
        skipped = ", ".join(str(i) for i in result.skipped_record_ids)
        print(f"Skipped (retry on next scan): {skipped}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Stock ledger management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override LOG_LEVEL for this run",
    )
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit JSON log lines regardless of environment"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply pending schema migrations")
    p_migrate.set_defaults(func=cmd_migrate)

    # status
    p_status = sub.add_parser("status", help="Show migration status")
    p_status.set_defaults(func=cmd_status)

    # verify
    p_verify = sub.add_parser("verify", help="Audit schema and ledger balances")
    p_verify.set_defaults(func=cmd_verify)

    # scan-alerts
    p_scan = sub.add_parser("scan-alerts", help="Raise/resolve stock and expiry alerts")
    p_scan.add_argument("--today", help="Reference date YYYY-MM-DD (default: today)")
    p_scan.add_argument(
        "--expiry-days",
        type=int,
        default=None,
        help="Expiry warning window in days (default: LEDGER_EXPIRY_WARNING_DAYS)",
    )
    p_scan.set_defaults(func=cmd_scan_alerts)

    args = parser.parse_args()
    configure_logging(log_level=args.log_level, json_logs=args.json_logs or None)
    args.func(args)


if __name__ == "__main__":
    main()
