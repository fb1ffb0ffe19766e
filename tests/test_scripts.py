"""Tests for the operational scripts: demo event seeding and user creation."""

import random
import tempfile
import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from sqlalchemy import func, select
from sqlalchemy.engine import Engine

from insightboard.core.database import create_db_engine, create_session_factory
from insightboard.models import Base, Event, User
from insightboard.scripts import create_user, seed_events
from tests.support import add_user, make_settings

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


class TestBuildEvents(unittest.TestCase):
    def test_events_stay_in_range(self) -> None:
        events = seed_events.build_events(5, 200, 7, now=NOW, rng=random.Random(1))
        self.assertEqual(len(events), 200)
        known = {t for t, _, _, _ in seed_events.EVENT_MIX}
        for e in events:
            self.assertEqual(e.user_id, 5)
            self.assertIn(e.type, known)
            self.assertIsInstance(e.amount_cents, int)
            self.assertGreaterEqual(e.amount_cents, 0)
            self.assertTrue(NOW - timedelta(days=7) <= e.created_at <= NOW)

    def test_seeded_rng_is_repeatable(self) -> None:
        a = seed_events.build_events(1, 20, 3, now=NOW, rng=random.Random(42))
        b = seed_events.build_events(1, 20, 3, now=NOW, rng=random.Random(42))
        self.assertEqual(
            [(e.type, e.amount_cents, e.created_at) for e in a],
            [(e.type, e.amount_cents, e.created_at) for e in b],
        )


class ScriptDbTestCase(unittest.TestCase):
    """File-backed SQLite so the scripts can open and dispose their own engine."""

    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.settings = make_settings(DATABASE_URL=f"sqlite:///{tmp.name}/scripts.db")
        self.engine = create_db_engine(self.settings)
        Base.metadata.create_all(bind=self.engine)
        self.db = create_session_factory(self.engine)()
        self.addCleanup(self.engine.dispose)
        self.addCleanup(self.db.close)


class TestSeed(ScriptDbTestCase):
    def test_seed_inserts_for_existing_user(self) -> None:
        user = add_user(self.db, "owner@example.com")
        inserted = seed_events.seed(self.db, "Owner@Example.com", 15, 5, seed_value=3)
        self.assertEqual(inserted, 15)
        count = self.db.execute(
            select(func.count(Event.id)).where(Event.user_id == user.id)
        ).scalar_one()
        self.assertEqual(count, 15)

    def test_seed_unknown_user(self) -> None:
        with self.assertRaises(LookupError):
            seed_events.seed(self.db, "ghost@example.com", 5, 5)


class TestCreateUserScript(ScriptDbTestCase):
    def setUp(self) -> None:
        super().setUp()
        for target, value in (
            ("insightboard.scripts.create_user.get_settings", lambda: self.settings),
            ("insightboard.core.security.BCRYPT_ROUNDS", 4),
        ):
            patcher = patch(target, value)
            patcher.start()
            self.addCleanup(patcher.stop)

    def test_creates_admin_then_refuses_duplicate(self) -> None:
        self.assertEqual(create_user.main(["Root@Example.com", "secretpass", "admin"]), 0)
        user = self.db.execute(select(User).where(User.email == "root@example.com")).scalar_one()
        self.assertEqual(user.role, "admin")
        self.assertEqual(create_user.main(["root@example.com", "otherpass"]), 1)

    def test_rejects_overlong_password(self) -> None:
        self.assertEqual(create_user.main(["a@example.com", "x" * 129]), 1)

    def test_engine_disposed_on_success_and_failure(self) -> None:
        original_dispose = Engine.dispose
        with patch.object(Engine, "dispose", autospec=True, side_effect=original_dispose) as dispose:
            self.assertEqual(create_user.main(["pool@example.com", "secretpass"]), 0)
            self.assertEqual(create_user.main(["pool@example.com", "secretpass"]), 1)
        self.assertEqual(dispose.call_count, 2)


class TestSeedEventsScript(ScriptDbTestCase):
    def setUp(self) -> None:
        super().setUp()
        patcher = patch("insightboard.scripts.seed_events.get_settings", lambda: self.settings)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_main_inserts_and_disposes_engine(self) -> None:
        user = add_user(self.db, "owner@example.com")
        original_dispose = Engine.dispose
        with patch.object(Engine, "dispose", autospec=True, side_effect=original_dispose) as dispose:
            code = seed_events.main(["owner@example.com", "--count", "12", "--days", "3", "--seed", "7"])
        self.assertEqual(code, 0)
        dispose.assert_called_once()
        count = self.db.execute(
            select(func.count(Event.id)).where(Event.user_id == user.id)
        ).scalar_one()
        self.assertEqual(count, 12)

    def test_unknown_user_exits_nonzero(self) -> None:
        self.assertEqual(seed_events.main(["ghost@example.com"]), 1)


if __name__ == "__main__":
    unittest.main()
