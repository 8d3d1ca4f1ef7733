from __future__ import annotations

import argparse
import asyncio
import os
from pathlib import Path

from pos_core.logging import get_logger, setup_logging
from pos_core.settings import get_settings

from pos_client.calculations import calculate_inventory_stats, filter_products
from pos_client.calculations.sales import sales_report_csv
from pos_client.factory import build_services

log = get_logger(__name__, event="pos_smoke")


async def _run(args: argparse.Namespace) -> None:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    email = args.email or os.getenv("POS_EMAIL", "")
    password = os.getenv("POS_PASSWORD", "")
    if not (email and password):
        raise SystemExit("Set --email (or POS_EMAIL) and POS_PASSWORD for the smoke run.")

    def _expired() -> None:
        log.warning("session expired during smoke run; login required")

    services = build_services(settings, on_session_expired=_expired)
    try:
        result = await services.auth.login(email, password)
        log.info("logged in as user %s", result.user.user_id)

        products = await services.products.list_products()
        threshold = settings.POS_LOW_STOCK_DEFAULT
        stats = calculate_inventory_stats(products, threshold)
        low = filter_products(products, stock="low_stock", default_threshold=threshold)
        print(stats.model_dump_json(indent=2))
        print(f"low stock: {', '.join(p.sku for p in low) or '-'}")

        if args.report:
            bills = await services.bills.list_bills(start_date=args.start, end_date=args.end)
            out = Path(args.report)
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(sales_report_csv(bills), encoding="utf-8")
            print(f"wrote {len(bills)} bills to {out}")
    finally:
        await services.auth.logout()
        await services.aclose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Log in to the POS backend and print inventory figures")
    parser.add_argument("--email", default="")
    parser.add_argument("--report", default="", help="write a sales report CSV to this path")
    parser.add_argument("--start", default=None, help="report start date (YYYY-MM-DD)")
    parser.add_argument("--end", default=None, help="report end date (YYYY-MM-DD)")
    asyncio.run(_run(parser.parse_args()))


if __name__ == "__main__":
    main()
