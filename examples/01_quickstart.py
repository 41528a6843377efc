#!/usr/bin/env python3
"""
StormSpine Quickstart Example

Fetches active warnings, watches and the day 1 outlook once.

Usage:
    python examples/01_quickstart.py
"""

import asyncio

from stormspine import StormSpine


async def main() -> None:
    """One-shot fetches from the NWS and SPC."""

    async with StormSpine() as spine:
        warnings = await spine.warnings.fetch_convective_warnings()
        print(f"Active convective warnings: {len(warnings)}")
        for warning in warnings[:5]:
            print(f"  {warning.name} - {warning.area_description}")

        watches = await spine.watches.fetch_active_tornado_watches()
        print(f"\nActive tornado watches: {len(watches)}")
        for watch in watches:
            print(f"  {watch}")

        areas = await spine.outlooks.fetch_categorical_outlook(day=1)
        print("\nDay 1 outlook:")
        for area in areas:
            print(f"  {area.label2 or area.label}")


if __name__ == "__main__":
    asyncio.run(main())
