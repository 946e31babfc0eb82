import unittest
from unittest.mock import AsyncMock, MagicMock, call, patch

from grantgate.domain.monetization.errors import StorageUnavailableError
from grantgate.services.subscription_service import SubscriptionService
from grantgate.storage.memory import InMemoryStore
from tests.helpers import BrokenStore, FakeClock, utc


class TestSubscriptionService(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.clock = FakeClock(utc(2026, 1, 31, 10))
        self.store = InMemoryStore("subscriptions")
        self.service = SubscriptionService(self.store, clock=self.clock)
        self.session = MagicMock()
        self.session.commit = AsyncMock()
        self.session.rollback = AsyncMock()

    async def test_first_access_creates_free_plan(self):
        subscription = await self.service.get_subscription(3)

        self.assertEqual(subscription.plan, "Free")
        self.assertEqual(subscription.status, "active")
        self.assertEqual(subscription.current_period_end, utc(2026, 2, 28, 10))
        self.assertEqual(self.store.data["3"]["plan"], "Free")

    @patch("grantgate.services.subscription_service.UserRepository")
    async def test_upgrade_to_pro_flags_user(self, mock_repo_cls):
        repo = mock_repo_cls.return_value
        repo.set_subscription_status = AsyncMock()

        subscription = await self.service.create_pro_subscription(
            session=self.session, user_id=3
        )

        self.assertEqual(subscription.plan, "Pro")
        repo.set_subscription_status.assert_awaited_once_with(3, True)
        self.session.commit.assert_awaited_once()
        self.assertEqual((await self.service.get_subscription(3)).plan, "Pro")

    @patch("grantgate.services.subscription_service.UserRepository")
    async def test_cancel_pro(self, mock_repo_cls):
        repo = mock_repo_cls.return_value
        repo.set_subscription_status = AsyncMock()
        await self.service.create_pro_subscription(session=self.session, user_id=3)

        canceled = await self.service.cancel_subscription(session=self.session, user_id=3)

        self.assertEqual(canceled.status, "canceled")
        repo.set_subscription_status.assert_awaited_with(3, False)
        self.assertEqual(self.store.data["3"]["status"], "canceled")

    @patch("grantgate.services.subscription_service.UserRepository")
    async def test_cancel_free_is_a_no_op(self, mock_repo_cls):
        await self.service.get_subscription(3)

        result = await self.service.cancel_subscription(session=self.session, user_id=3)

        self.assertIsNone(result)
        mock_repo_cls.assert_not_called()
        self.session.commit.assert_not_called()

    # ─────────────────────────────────────────────
    # Failures
    # ─────────────────────────────────────────────

    @patch("grantgate.services.subscription_service.UserRepository")
    async def test_failed_commit_keeps_previous_plan(self, mock_repo_cls):
        mock_repo_cls.return_value.set_subscription_status = AsyncMock()
        self.session.commit.side_effect = ConnectionError("db down")

        with self.assertRaises(StorageUnavailableError):
            await self.service.create_pro_subscription(session=self.session, user_id=3)

        self.session.rollback.assert_awaited_once()
        self.assertEqual((await self.service.get_subscription(3)).plan, "Free")

    @patch("grantgate.services.subscription_service.UserRepository")
    async def test_failed_cancel_commit_keeps_pro_active(self, mock_repo_cls):
        mock_repo_cls.return_value.set_subscription_status = AsyncMock()
        await self.service.create_pro_subscription(session=self.session, user_id=3)
        self.session.commit.side_effect = ConnectionError("db down")

        with self.assertRaises(StorageUnavailableError):
            await self.service.cancel_subscription(session=self.session, user_id=3)

        self.assertEqual(self.store.data["3"]["status"], "active")

    @patch("grantgate.services.subscription_service.UserRepository")
    async def test_failed_record_write_reverts_flag(self, mock_repo_cls):
        repo = mock_repo_cls.return_value
        repo.set_subscription_status = AsyncMock()
        service = SubscriptionService(BrokenStore(), clock=self.clock)

        with self.assertRaises(StorageUnavailableError):
            await service.create_pro_subscription(session=self.session, user_id=3)

        self.assertEqual(
            repo.set_subscription_status.await_args_list,
            [call(3, True), call(3, False)],
        )


if __name__ == "__main__":
    unittest.main()
