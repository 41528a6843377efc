#!/usr/bin/env python3
"""
StormSpine Events Example

Polls every 30 seconds and prints newly issued watches, mesoscale
discussions and warnings. Records already active at startup are
not announced.

Usage:
    STORMSPINE_POLL_INTERVAL=30 python examples/02_listen_for_events.py
"""

import asyncio

from stormspine import StormSpine
from stormspine.core.config import get_settings
from stormspine.core.logging import configure_logging


async def main() -> None:
    settings = get_settings(include_custom_warnings=True)
    configure_logging(settings)

    async with StormSpine(settings) as spine:
        events = spine.events

        @events.on_watch_issued
        def on_watches(watches, boxes) -> None:
            for watch in watches:
                print(f"NEW {watch.name} ({len(watch.counties)} zones)")

        @events.on_mesoscale_discussion_issued
        def on_discussions(discussions) -> None:
            for md in discussions:
                print(f"NEW {md}")

        @events.on_warning_issued
        async def on_warning(warning, transition) -> None:
            print(f"NEW {warning.name} [{transition.value}] {warning.area_description}")

        spine.enable_events()
        await asyncio.sleep(15 * 60)


if __name__ == "__main__":
    asyncio.run(main())
