import base64
import json
import unittest

from edition_drop import (
    EditionMetadataRenderer,
    InMemoryPaymentRail,
    InMemoryTokenRegistry,
    InvalidQuantityError,
    NotInitializedError,
    TokenNotFoundError,
    Transfer,
    TransferFailedError,
)

from tests.helpers import ALICE, BOB, CAROL


def decode_uri(uri):
    prefix = "data:application/json;base64,"
    assert uri.startswith(prefix)
    return json.loads(base64.b64decode(uri[len(prefix):]))


class InMemoryTokenRegistryTests(unittest.TestCase):
    def test_mint_assigns_sequential_ids(self):
        registry = InMemoryTokenRegistry()
        self.assertEqual(registry.mint(ALICE, 2), 1)
        self.assertEqual(registry.mint(BOB, 1), 3)
        self.assertEqual(registry.owner_of(2), ALICE)
        self.assertEqual(registry.owner_of(3), BOB)
        self.assertEqual(registry.total_minted(), 3)
        self.assertEqual(registry.minted_by(ALICE), 2)

    def test_zero_quantity_rejected(self):
        with self.assertRaises(InvalidQuantityError):
            InMemoryTokenRegistry().mint(ALICE, 0)

    def test_burn_keeps_minted_counts(self):
        registry = InMemoryTokenRegistry()
        registry.mint(ALICE, 2)
        registry.burn(1)
        self.assertFalse(registry.exists(1))
        self.assertEqual(registry.balance_of(ALICE), 1)
        self.assertEqual(registry.minted_by(ALICE), 2)
        self.assertEqual(registry.total_minted(), 2)
        with self.assertRaises(TokenNotFoundError):
            registry.owner_of(1)

    def test_on_mint_hook_sees_mint(self):
        seen = []
        registry = InMemoryTokenRegistry(on_mint=lambda to, first, qty: seen.append((to, first, qty)))
        registry.mint(ALICE, 3)
        self.assertEqual(seen, [(ALICE, 1, 3)])

    def test_snapshot_restore(self):
        registry = InMemoryTokenRegistry()
        registry.mint(ALICE, 1)
        saved = registry.snapshot()
        registry.mint(BOB, 2)
        registry.restore(saved)
        self.assertEqual(registry.total_minted(), 1)
        self.assertFalse(registry.exists(2))
        self.assertEqual(registry.mint(CAROL, 1), 2)


class InMemoryPaymentRailTests(unittest.TestCase):
    def test_deliver_credits_every_leg(self):
        rail = InMemoryPaymentRail()
        rail.deliver([Transfer(ALICE, 5), Transfer(BOB, 95)])
        self.assertEqual(rail.balance_of(ALICE), 5)
        self.assertEqual(rail.balance_of(BOB), 95)

    def test_unreachable_recipient_fails_whole_batch(self):
        rail = InMemoryPaymentRail()
        rail.mark_unreachable(BOB)
        with self.assertRaises(TransferFailedError):
            rail.deliver([Transfer(ALICE, 5), Transfer(BOB, 95)])
        self.assertEqual(rail.balance_of(ALICE), 0)
        rail.mark_reachable(BOB)
        rail.deliver([Transfer(ALICE, 5), Transfer(BOB, 95)])
        self.assertEqual(rail.balance_of(BOB), 95)

    def test_hook_failure_fails_whole_batch(self):
        rail = InMemoryPaymentRail()

        def reject(transfer):
            raise RuntimeError("rejected")

        rail.on_receive(BOB, reject)
        with self.assertRaises(RuntimeError):
            rail.deliver([Transfer(ALICE, 5), Transfer(BOB, 95)])
        self.assertEqual(rail.balance_of(ALICE), 0)


class EditionMetadataRendererTests(unittest.TestCase):
    def setUp(self):
        self.info = ["Drop", 100]
        self.renderer = EditionMetadataRenderer(lambda: tuple(self.info))

    def test_requires_initialize(self):
        with self.assertRaises(NotInitializedError):
            self.renderer.contract_uri()

    def test_token_uri(self):
        self.renderer.initialize(json.dumps({"description": "desc", "image_uri": "ipfs://img"}).encode())
        data = decode_uri(self.renderer.token_uri(7))
        self.assertEqual(data["name"], "Drop 7/100")
        self.assertEqual(data["description"], "desc")
        self.assertEqual(data["image"], "ipfs://img")
        self.assertEqual(data["properties"], {"number": 7})
        self.assertNotIn("animation_url", data)

    def test_open_edition_name_has_no_size(self):
        self.info[1] = 0
        self.renderer.initialize(b"")
        self.assertEqual(decode_uri(self.renderer.token_uri(3))["name"], "Drop 3")

    def test_contract_uri(self):
        self.renderer.initialize(json.dumps({"description": "desc"}).encode())
        self.assertEqual(decode_uri(self.renderer.contract_uri()), {"name": "Drop", "description": "desc"})


if __name__ == "__main__":
    unittest.main()
