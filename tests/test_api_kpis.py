"""API tests for /kpis/*: auth gate, role scoping, response shapes, failure mapping."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from insightboard.core.security import create_access_token
from insightboard.services.kpis import KpiQueryError
from tests.support import OTHER_SECRET, add_event, add_user, bearer, make_app, make_settings

PROTECTED_PATHS = ("/me", "/kpis/summary", "/kpis/daily", "/kpis/top")


class KpiApiTestCase(unittest.TestCase):
    """Two users and one admin with a small event log."""

    def setUp(self) -> None:
        self.app = make_app()
        self.settings = self.app.state.settings
        self.client = TestClient(self.app)
        self.addCleanup(self.app.state.engine.dispose)

        now = datetime.now(UTC)
        db = self.app.state.session_factory()
        try:
            self.u1 = add_user(db, "one@example.com")
            self.u2 = add_user(db, "two@example.com")
            self.admin = add_user(db, "admin@example.com", role="admin")
            add_event(db, self.u1.id, "sale", 500, now - timedelta(hours=1))
            add_event(db, self.u1.id, "refund", 100, now - timedelta(hours=1))
            add_event(db, self.u2.id, "sale", 300, now - timedelta(days=2))
            add_event(db, self.u2.id, "sale", 9000, now - timedelta(days=30))
            self.tokens = {
                u.email: create_access_token(u.id, u.email, u.role, self.settings)
                for u in (self.u1, self.u2, self.admin)
            }
            self.u1_id, self.admin_id = self.u1.id, self.admin.id
        finally:
            db.close()

    def get(self, path: str, email: str):
        return self.client.get(path, headers=bearer(self.tokens[email]))


class TestAuthGate(KpiApiTestCase):
    """Every protected endpoint rejects missing, foreign, tampered and expired tokens."""

    def test_missing_token(self) -> None:
        for path in PROTECTED_PATHS:
            with self.subTest(path=path):
                self.assertEqual(self.client.get(path).status_code, 401)

    def test_token_from_other_secret(self) -> None:
        other = make_settings(JWT_SECRET=SecretStr(OTHER_SECRET))
        token = create_access_token(self.admin_id, "admin@example.com", "admin", other)
        for path in PROTECTED_PATHS:
            with self.subTest(path=path):
                r = self.client.get(path, headers=bearer(token))
                self.assertEqual(r.status_code, 401)
                self.assertEqual(r.json()["detail"], "Invalid or expired token")

    def test_expired_token(self) -> None:
        issued = datetime.now(UTC) - timedelta(hours=3)
        token = create_access_token(
            self.u1_id, "one@example.com", "user", self.settings, now=issued
        )
        for path in PROTECTED_PATHS:
            with self.subTest(path=path):
                r = self.client.get(path, headers=bearer(token))
                self.assertEqual(r.status_code, 401)
                self.assertEqual(r.json()["detail"], "Invalid or expired token")

    def test_garbage_token(self) -> None:
        for path in PROTECTED_PATHS:
            with self.subTest(path=path):
                r = self.client.get(path, headers=bearer("not.a.jwt"))
                self.assertEqual(r.status_code, 401)


class TestSummaryEndpoint(KpiApiTestCase):
    def test_user_sees_only_own_rows(self) -> None:
        r = self.get("/kpis/summary", "one@example.com")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"event_count": 2, "revenue_cents": 400, "active_days": 1})

    def test_admin_sees_everything(self) -> None:
        r = self.get("/kpis/summary", "admin@example.com")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(
            r.json(), {"event_count": 4, "revenue_cents": 9700, "active_users": 2}
        )

    def test_query_failure_is_500_without_data(self) -> None:
        with patch(
            "insightboard.services.kpis.summary",
            side_effect=KpiQueryError("Failed to compute KPIs"),
        ):
            r = self.get("/kpis/summary", "one@example.com")
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"detail": "Failed to compute KPIs"})

    def test_session_released_when_store_fails(self) -> None:
        closed: list[bool] = []
        factory = self.app.state.session_factory

        def tracking_factory() -> Session:
            session = factory()
            real_close = session.close

            def close() -> None:
                closed.append(True)
                real_close()

            session.close = close
            return session

        self.app.state.session_factory = tracking_factory
        with patch.object(
            Session, "execute", side_effect=OperationalError("SELECT", {}, Exception("db down"))
        ):
            r = self.get("/kpis/summary", "one@example.com")
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"detail": "Failed to compute KPIs"})
        self.assertEqual(closed, [True])


class TestDailyEndpoint(KpiApiTestCase):
    def test_user_series(self) -> None:
        r = self.get("/kpis/daily", "one@example.com")
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(len(body), 1)
        self.assertEqual(body[0]["revenue_cents"], 400)
        self.assertIsInstance(body[0]["revenue_cents"], int)

    def test_admin_series_excludes_old_events_and_is_sorted(self) -> None:
        r = self.get("/kpis/daily", "admin@example.com")
        self.assertEqual(r.status_code, 200)
        body = r.json()
        dates = [p["date"] for p in body]
        self.assertEqual(dates, sorted(set(dates)))
        self.assertEqual(sum(p["revenue_cents"] for p in body), 700)

    def test_query_failure_is_500(self) -> None:
        with patch(
            "insightboard.services.kpis.daily",
            side_effect=KpiQueryError("Failed to compute daily KPIs"),
        ):
            r = self.get("/kpis/daily", "admin@example.com")
        self.assertEqual(r.status_code, 500)


class TestTopEndpoint(KpiApiTestCase):
    def test_user_top(self) -> None:
        r = self.get("/kpis/top", "one@example.com")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), [{"type": "refund", "count": 1}, {"type": "sale", "count": 1}])

    def test_admin_top(self) -> None:
        r = self.get("/kpis/top", "admin@example.com")
        self.assertEqual(r.json(), [{"type": "sale", "count": 3}, {"type": "refund", "count": 1}])

    def test_query_failure_is_500(self) -> None:
        with patch(
            "insightboard.services.kpis.top",
            side_effect=KpiQueryError("Failed to compute top KPIs"),
        ):
            r = self.get("/kpis/top", "two@example.com")
        self.assertEqual(r.status_code, 500)


if __name__ == "__main__":
    unittest.main()
