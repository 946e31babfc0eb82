import unittest

from grantgate.domain.monetization.errors import (
    InvalidFeatureNameError,
    StorageUnavailableError,
)
from grantgate.services.purchase_service import PurchaseService
from grantgate.storage.memory import InMemoryStore
from tests.helpers import FakeClock, utc


class TestPurchaseService(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.clock = FakeClock(utc(2026, 10, 18, 12))
        self.store = InMemoryStore("featurePurchases")
        self.service = PurchaseService(self.store, clock=self.clock)

    async def test_purchase_is_idempotent(self):
        first = await self.service.purchase_feature(4, "Intelligence Platform")
        self.clock.advance(days=3)
        again = await self.service.purchase_feature(4, "Intelligence Platform")

        self.assertEqual(first.purchased_at, utc(2026, 10, 18, 12))
        self.assertEqual(again.purchased_at, first.purchased_at)
        self.assertEqual(len(self.store.data["4"]), 1)

    async def test_has_purchased(self):
        await self.service.purchase_feature(4, "Intelligence Platform")

        self.assertTrue(await self.service.has_purchased(4, "Intelligence Platform"))
        self.assertFalse(await self.service.has_purchased(4, "AI Eligibility Analysis"))
        self.assertFalse(await self.service.has_purchased(5, "Intelligence Platform"))

    async def test_list_purchases(self):
        await self.service.purchase_feature(4, "b feature")
        await self.service.purchase_feature(4, "a feature")

        names = [p.feature_name for p in await self.service.list_purchases(4)]

        self.assertEqual(names, ["a feature", "b feature"])

    async def test_rejects_blank_feature(self):
        with self.assertRaises(InvalidFeatureNameError):
            await self.service.purchase_feature(4, "")

    async def test_unreadable_purchase_date_is_a_storage_failure(self):
        self.store.data["4"] = {"Intelligence Platform": 1e300}

        with self.assertRaises(StorageUnavailableError):
            await self.service.list_purchases(4)


if __name__ == "__main__":
    unittest.main()
