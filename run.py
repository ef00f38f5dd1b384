# run.py

import argparse
import asyncio
import logging

from rich import print, print_json

from core import config
from ai.gemini import GeminiClient
from services.itinerary import ItineraryPlanner


def main():
    p = argparse.ArgumentParser(description="Suggest seasonal activities for a trip.")
    p.add_argument("--location", "--city", required=True)
    p.add_argument("--start", required=True)   # YYYY-MM-DD
    p.add_argument("--end", required=True)     # YYYY-MM-DD
    p.add_argument("--json", action="store_true", help="print the raw JSON response")
    args = p.parse_args()

    logging.basicConfig(level=logging.WARNING)

    planner = ItineraryPlanner(GeminiClient(api_key=config.GEMINI_API_KEY))
    result = asyncio.run(planner.plan(args.location, args.start, args.end))

    if args.json:
        print_json(data=result)
        return

    print(
        f"[bold cyan]{result['location']}[/] · {result['tripDays']} day(s) · "
        f"[yellow]{result['season']}[/]"
    )
    for i, a in enumerate(result["activities"], start=1):
        print(f"\n[bold]{i}. {a['activity']}[/]  [dim]({a['category']})[/]")
        print(f"   {a['description']}")
        print(f"   [green]{a['seasonalNote']}[/]")


if __name__ == "__main__":
    main()
