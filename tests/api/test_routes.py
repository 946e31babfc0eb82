import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi import Header, HTTPException
from fastapi.testclient import TestClient

from grantgate.api import dependencies
from grantgate.domain.monetization.schemas import Role, UserEntitlement
from grantgate.main import app
from grantgate.persistence.db import get_db_session
from grantgate.services.config_service import ConfigService
from grantgate.services.purchase_service import PurchaseService
from grantgate.services.subscription_service import SubscriptionService
from grantgate.services.usage_service import UsageLedger
from grantgate.storage.memory import InMemoryStore
from tests.helpers import BrokenStore, FakeClock, utc

FEATURE = "AI Grant Writing Studio"

USERS = {
    1: UserEntitlement(id=1, role=Role.ADMIN),
    2: UserEntitlement(id=2, role=Role.USER),
}


async def fake_current_user(x_user_id: int | None = Header(None, alias="X-User-Id")):
    if x_user_id not in USERS:
        raise HTTPException(status_code=401, detail="Authentication required")
    return USERS[x_user_id]


class TestRoutes(unittest.TestCase):
    def setUp(self):
        clock = FakeClock(utc(2026, 10, 18, 12))
        self.ledger = UsageLedger(InMemoryStore("featureUsage"), limit=5, clock=clock)
        self.config_service = ConfigService(InMemoryStore("appConfig"), default_model="Free")
        self.purchases = PurchaseService(InMemoryStore("featurePurchases"), clock=clock)
        self.subscriptions = SubscriptionService(InMemoryStore("subscriptions"), clock=clock)

        self.session = MagicMock()
        self.session.commit = AsyncMock()

        async def fake_session():
            yield self.session

        app.dependency_overrides = {
            dependencies.get_current_user: fake_current_user,
            dependencies.get_usage_ledger: lambda: self.ledger,
            dependencies.get_config_service: lambda: self.config_service,
            dependencies.get_purchase_service: lambda: self.purchases,
            dependencies.get_subscription_service: lambda: self.subscriptions,
            get_db_session: fake_session,
        }
        self.client = TestClient(app)
        self.user_headers = {"X-User-Id": "2"}
        self.admin_headers = {"X-User-Id": "1"}

    def tearDown(self):
        app.dependency_overrides = {}

    def set_model(self, model: str):
        response = self.client.put(
            "/api/v1/admin/config",
            json={"monetizationModel": model},
            headers=self.admin_headers,
        )
        self.assertEqual(response.status_code, 200, response.text)

    # ─────────────────────────────────────────────
    # Usage
    # ─────────────────────────────────────────────

    def test_health(self):
        response = self.client.get("/api/v1/health")
        self.assertEqual(response.json()["status"], "ok")

    def test_usage_requires_user(self):
        response = self.client.get(f"/api/v1/usage/{FEATURE}")
        self.assertEqual(response.status_code, 401)

    def test_record_and_read_usage(self):
        for _ in range(3):
            self.client.post(f"/api/v1/usage/{FEATURE}/record", headers=self.user_headers)

        response = self.client.get(f"/api/v1/usage/{FEATURE}", headers=self.user_headers)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"count": 3, "limit": 5, "remaining": 2})

    def test_storage_outage_is_503(self):
        app.dependency_overrides[dependencies.get_usage_ledger] = lambda: UsageLedger(
            BrokenStore(), limit=5
        )

        response = self.client.get(f"/api/v1/usage/{FEATURE}", headers=self.user_headers)

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"], "Temporarily unavailable, please retry")

    # ─────────────────────────────────────────────
    # Access
    # ─────────────────────────────────────────────

    def test_access_under_free_model(self):
        response = self.client.get(f"/api/v1/access/{FEATURE}", headers=self.user_headers)

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["allowed"])

    def test_consume_until_quota_exhausted(self):
        self.set_model("UsageBased")

        for expected in range(1, 6):
            response = self.client.post(
                f"/api/v1/features/{FEATURE}/consume", headers=self.user_headers
            )
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json()["usage"]["count"], expected)

        response = self.client.post(
            f"/api/v1/features/{FEATURE}/consume", headers=self.user_headers
        )
        self.assertEqual(response.status_code, 402)
        body = response.json()
        self.assertEqual(body["decision"]["reason"], "QuotaExhausted")
        self.assertEqual(body["decision"]["upsell_action"], "upgrade to Pro for unlimited access")

        access = self.client.get(f"/api/v1/access/{FEATURE}", headers=self.user_headers)
        self.assertFalse(access.json()["allowed"])

    def test_pay_per_feature_purchase_flow(self):
        self.set_model("PayPerFeature")

        before = self.client.get(f"/api/v1/access/{FEATURE}", headers=self.user_headers)
        bought = self.client.post(f"/api/v1/purchases/{FEATURE}", headers=self.user_headers)
        after = self.client.get(f"/api/v1/access/{FEATURE}", headers=self.user_headers)
        listed = self.client.get("/api/v1/purchases", headers=self.user_headers)

        self.assertEqual(before.json()["reason"], "PurchaseRequired")
        self.assertEqual(bought.status_code, 200)
        self.assertTrue(after.json()["allowed"])
        self.assertEqual([p["feature_name"] for p in listed.json()], [FEATURE])

    # ─────────────────────────────────────────────
    # Subscription
    # ─────────────────────────────────────────────

    def test_default_subscription_is_free(self):
        response = self.client.get("/api/v1/subscription", headers=self.user_headers)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["plan"], "Free")

    @patch("grantgate.services.subscription_service.UserRepository")
    def test_upgrade_and_cancel(self, mock_repo_cls):
        mock_repo_cls.return_value.set_subscription_status = AsyncMock()

        upgraded = self.client.post("/api/v1/subscription/pro", headers=self.user_headers)
        canceled = self.client.post("/api/v1/subscription/cancel", headers=self.user_headers)
        again = self.client.post("/api/v1/subscription/cancel", headers=self.user_headers)

        self.assertEqual(upgraded.json()["plan"], "Pro")
        self.assertEqual(canceled.json()["status"], "canceled")
        self.assertEqual(again.status_code, 409)

    # ─────────────────────────────────────────────
    # Admin
    # ─────────────────────────────────────────────

    def test_admin_routes_reject_regular_users(self):
        response = self.client.get("/api/v1/admin/config", headers=self.user_headers)
        self.assertEqual(response.status_code, 403)

    def test_admin_sets_and_reads_model(self):
        self.set_model("Subscription")

        response = self.client.get("/api/v1/admin/config", headers=self.admin_headers)

        self.assertEqual(response.json(), {"monetizationModel": "Subscription"})

        public = self.client.get("/api/v1/config", headers=self.user_headers)
        self.assertEqual(public.json(), {"monetizationModel": "Subscription"})

    def test_admin_rejects_unknown_model(self):
        response = self.client.put(
            "/api/v1/admin/config",
            json={"monetizationModel": "Enterprise"},
            headers=self.admin_headers,
        )
        self.assertEqual(response.status_code, 422)

    def test_admin_usage_summary(self):
        self.client.post(f"/api/v1/usage/{FEATURE}/record", headers=self.user_headers)
        self.client.post("/api/v1/usage/Intelligence Platform/record", headers=self.user_headers)
        self.client.post("/api/v1/usage/Intelligence Platform/record", headers=self.user_headers)

        response = self.client.get("/api/v1/admin/usage/user/2", headers=self.admin_headers)

        body = response.json()
        self.assertEqual(body["total_events"], 3)
        self.assertEqual(body["by_feature"]["Intelligence Platform"]["remaining"], 3)


if __name__ == "__main__":
    unittest.main()
