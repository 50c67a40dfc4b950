#!/usr/bin/env python3
"""
Local Report Script
Builds the management report PDF straight from Supabase and writes it to disk.
"""

import asyncio
import logging
import os
import sys
from datetime import datetime
from dotenv import load_dotenv

# Load .env file
load_dotenv()
logging.basicConfig(level=logging.INFO)

from autofix.services.pdf_reports import (
    format_brl,
    management_report_filename,
    render_management_report,
)
from autofix.services.shop_data import get_shop_data


async def build_report(output_dir: str) -> str:
    shop = get_shop_data()
    summary = await shop.get_report_summary()
    settings = await shop.get_company_settings()

    generated_at = datetime.now()
    path = os.path.join(output_dir, management_report_filename(generated_at))
    with open(path, "wb") as f:
        f.write(render_management_report(summary, settings, generated_at))

    print(f"\nCompany: {settings.name}")
    print(f"Budgets: {summary.budget_count}")
    print(f"Revenue (approved/completed): {format_brl(summary.financial.total_revenue)}")
    print(f"Pending revenue: {format_brl(summary.financial.potential_revenue)}")
    print(f"Conversion rate: {summary.financial.conversion_rate:.1f}%")
    print(f"Low-stock parts: {summary.inventory.low_stock_count}")
    for part in summary.inventory.low_stock_items:
        print(f"  - {part.name} ({part.stock} in stock)")
    return path


def main():
    print("=" * 60)
    print("LOCAL REPORT SCRIPT")
    print("=" * 60)

    output_dir = sys.argv[1] if len(sys.argv) > 1 else "."
    path = asyncio.run(build_report(output_dir))

    print("\n" + "=" * 60)
    print(f"REPORT WRITTEN: {path}")
    print("=" * 60)


if __name__ == "__main__":
    main()
