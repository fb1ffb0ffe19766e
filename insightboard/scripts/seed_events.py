"""
Append demo events for one user so the dashboard has something to show:
  python -m insightboard.scripts.seed_events user@example.com --count 200 --days 30
"""

import argparse
import logging
import random
import sys
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from insightboard.core.config import get_settings
from insightboard.core.database import create_db_engine, create_session_factory
from insightboard.core.logs import configure_logging
from insightboard.models import Event
from insightboard.services.users import find_by_email

logger = logging.getLogger(__name__)

# (type, weight, min_cents, max_cents); amount 0 for non-monetary events
EVENT_MIX = (
    ("sale", 50, 500, 25_000),
    ("refund", 8, 500, 10_000),
    ("signup", 20, 0, 0),
    ("login", 15, 0, 0),
    ("chargeback", 2, 1_000, 15_000),
)


def build_events(
    user_id: int,
    count: int,
    days: int,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[Event]:
    """Random events for user_id spread uniformly over the last `days` days."""
    rng = rng or random.Random()
    end = now or datetime.now(UTC)
    weights = [w for _, w, _, _ in EVENT_MIX]
    events: list[Event] = []
    for _ in range(count):
        event_type, _, low, high = rng.choices(EVENT_MIX, weights=weights)[0]
        offset = timedelta(seconds=rng.randint(0, days * 24 * 3600))
        events.append(
            Event(
                user_id=user_id,
                type=event_type,
                amount_cents=rng.randint(low, high) if high else 0,
                created_at=end - offset,
            )
        )
    return events


def seed(db: Session, email: str, count: int, days: int, seed_value: int | None = None) -> int:
    """Insert `count` events for the user with `email`. Returns the number inserted."""
    user = find_by_email(db, email)
    if user is None:
        raise LookupError(f"No user with email {email!r}")
    events = build_events(user.id, count, days, rng=random.Random(seed_value))
    db.add_all(events)
    db.commit()
    return len(events)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed demo events for an InsightBoard user.")
    parser.add_argument("email", help="Owner of the generated events")
    parser.add_argument("--count", type=int, default=100)
    parser.add_argument("--days", type=int, default=21)
    parser.add_argument("--seed", type=int, default=None, help="Random seed for repeatable data")
    args = parser.parse_args(argv)
    if args.count < 1 or args.days < 1:
        print("--count and --days must be positive.", file=sys.stderr)
        return 1

    settings = get_settings()
    configure_logging(settings)
    engine = create_db_engine(settings)
    db = create_session_factory(engine)()
    try:
        inserted = seed(db, args.email, args.count, args.days, args.seed)
        logger.info("Seed completed: events_inserted=%s", inserted)
        return 0
    except LookupError as e:
        logger.error("%s", e)
        return 1
    except Exception as e:
        logger.exception("Seed failed: %s", e)
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
