import sys
import asyncio

# --- Settings/Logging ---
from goalwatch.logging.setup import setup_logging
from goalwatch.config.settings import settings

setup_logging()

from loguru import logger

from goalwatch.presentation.filters import format_kickoff_date, format_kickoff_time
from goalwatch.services.match_service import MatchService
from goalwatch.sources.factory import build_logo_resolver, build_match_source

from rich import print
from rich.panel import Panel
from rich.table import Table


async def main() -> None:
    """Runs the pipeline once for the configured scope and prints the result."""
    scope = settings.default_scope()
    logger.info(f"Starting GoalWatch one-shot run for {scope}")

    source = build_match_source(settings)
    resolver = build_logo_resolver(settings, source)
    service = MatchService(source, resolver, ttl_seconds=0)

    try:
        matches = await service.build_matches(scope)
        if not matches:
            print(
                Panel(
                    f"No matches found for {scope} or data is currently unavailable.",
                    title="GoalWatch",
                    border_style="yellow",
                )
            )
            return

        table = Table(title=f"GoalWatch - {scope}", show_lines=False)
        table.add_column("Date")
        table.add_column("Time")
        table.add_column("Home", justify="right")
        table.add_column("Score", justify="center")
        table.add_column("Away")
        table.add_column("Round")
        table.add_column("Logos", justify="center")

        for match in matches:
            logger.debug(match.description)
            logos = "".join(
                "✓" if team.logo_url else "·" for team in (match.team1, match.team2)
            )
            table.add_row(
                format_kickoff_date(match.kickoff_utc, settings.display_timezone),
                format_kickoff_time(match.kickoff_utc, settings.display_timezone),
                match.team1.name,
                match.score_label,
                match.team2.name,
                match.group_name or "",
                logos,
            )
        print(table)
        logger.success(f"Printed {len(matches)} matches.")
    except Exception:
        logger.exception("An error occurred during the one-shot run.")
        print(
            Panel(
                "There was a problem loading the match schedule. Please try again later.",
                title="Error Fetching Data",
                border_style="red",
            )
        )
    finally:
        await service.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
