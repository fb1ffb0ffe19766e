"""
Terminal dashboard: KPI cards, daily revenue chart, and top event types.

  python -m insightboard.dashboard --base-url http://localhost:8080 EMAIL PASSWORD
"""

import argparse
import getpass
import logging
import sys

import httpx

from insightboard.client import (
    ApiError,
    DashboardData,
    InsightBoardClient,
    SessionExpiredError,
)
from insightboard.core.logs import configure_cli_logging
from insightboard.schemas.kpis import AdminKpiSummary, DailyRevenuePoint, TopEventType

logger = logging.getLogger(__name__)

CHART_WIDTH = 40


def format_cents(cents: int) -> str:
    """Integer cents as a dollar string, e.g. -1234 -> '-$12.34'. No float math."""
    sign = "-" if cents < 0 else ""
    dollars, rest = divmod(abs(cents), 100)
    return f"{sign}${dollars:,}.{rest:02d}"


def render_cards(data: DashboardData) -> list[str]:
    s = data.summary
    cards = [
        ("Events", f"{s.event_count:,}"),
        ("Revenue", format_cents(s.revenue_cents)),
    ]
    if isinstance(s, AdminKpiSummary):
        cards.append(("Active users", f"{s.active_users:,}"))
    else:
        cards.append(("Active days", f"{s.active_days:,}"))
    return [f"  {label:<14}{value:>16}" for label, value in cards]


def render_chart(points: list[DailyRevenuePoint], width: int = CHART_WIDTH) -> list[str]:
    """Horizontal bars scaled to the largest absolute daily revenue."""
    if not points:
        return ["  (no events in the last 14 days)"]
    peak = max(abs(p.revenue_cents) for p in points) or 1
    lines = []
    for p in points:
        length = abs(p.revenue_cents) * width // peak
        bar = ("-" if p.revenue_cents < 0 else "#") * length
        lines.append(f"  {p.date.isoformat()} {bar:<{width}} {format_cents(p.revenue_cents):>14}")
    return lines


def render_top(rows: list[TopEventType]) -> list[str]:
    if not rows:
        return ["  (no events)"]
    return [f"  {rank}. {row.type:<20}{row.count:>8,}" for rank, row in enumerate(rows, start=1)]


def render_dashboard(data: DashboardData) -> str:
    lines = [f"InsightBoard - {data.user.email} ({data.user.role})", ""]
    lines += ["KPIs", *render_cards(data), ""]
    lines += ["Daily revenue (last 14 days)", *render_chart(data.daily), ""]
    lines += ["Top event types", *render_top(data.top)]
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show the InsightBoard dashboard in the terminal.")
    parser.add_argument("email")
    parser.add_argument("password", nargs="?", help="Prompted for when omitted")
    parser.add_argument("--base-url", default="http://localhost:8080")
    args = parser.parse_args(argv)

    configure_cli_logging()
    password = args.password or getpass.getpass("Password: ")

    with InsightBoardClient(args.base_url) as client:
        try:
            client.login(args.email, password)
            data = client.load_dashboard()
        except SessionExpiredError as e:
            logger.error("Session rejected, please log in again: %s", e.message)
            return 1
        except ApiError as e:
            logger.error("API error (%s): %s", e.status_code, e.message)
            return 1
        except httpx.HTTPError as e:
            logger.error("Could not reach %s: %s", args.base_url, e)
            return 1
    print(render_dashboard(data))
    return 0


if __name__ == "__main__":
    sys.exit(main())
