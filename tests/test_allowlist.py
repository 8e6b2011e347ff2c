import unittest

from edition_drop import AllowlistEntry, AllowlistTree, allowlist_leaf, verify
from edition_drop.allowlist import hash_pair

from tests.helpers import ALICE, BOB, CAROL, addr


class AllowlistTests(unittest.TestCase):
    def setUp(self):
        self.entries = [
            AllowlistEntry(ALICE, 5, 100),
            AllowlistEntry(BOB, 2, 50),
            AllowlistEntry(CAROL, 1, 0),
            AllowlistEntry(addr(13), 10, 75),
            AllowlistEntry(addr(14), 3, 100),
        ]
        self.tree = AllowlistTree(self.entries)

    def test_every_entry_verifies(self):
        for entry in self.entries:
            proof = self.tree.proof_for(entry.address)
            self.assertTrue(verify(self.tree.root, proof, entry.address, entry.max_quantity, entry.price_per_token))
            self.assertEqual(self.tree.entry_for(entry.address), entry)

    def test_altered_fields_rejected(self):
        proof = self.tree.proof_for(ALICE)
        root = self.tree.root
        self.assertTrue(verify(root, proof, ALICE, 5, 100))
        self.assertFalse(verify(root, proof, BOB, 5, 100))
        self.assertFalse(verify(root, proof, ALICE, 6, 100))
        self.assertFalse(verify(root, proof, ALICE, 5, 99))

    def test_address_case_does_not_matter(self):
        upper = "0x" + ALICE[2:].upper()
        self.assertEqual(allowlist_leaf(upper, 5, 100), allowlist_leaf(ALICE, 5, 100))

    def test_malformed_input_returns_false(self):
        proof = self.tree.proof_for(ALICE)
        self.assertFalse(verify(b"short", proof, ALICE, 5, 100))
        self.assertFalse(verify(self.tree.root, [b"x" * 31], ALICE, 5, 100))
        self.assertFalse(verify(self.tree.root, proof + ["nope"], ALICE, 5, 100))
        self.assertFalse(verify(self.tree.root, None, ALICE, 5, 100))
        self.assertFalse(verify(self.tree.root, proof, "not-an-address", 5, 100))
        self.assertFalse(verify(self.tree.root, proof, ALICE, -5, 100))
        self.assertFalse(verify(self.tree.root, proof, ALICE, 5, 2 ** 256))

    def test_wrong_root_rejected(self):
        proof = self.tree.proof_for(ALICE)
        self.assertFalse(verify(bytes(32), proof, ALICE, 5, 100))

    def test_single_entry_tree_root_is_leaf(self):
        tree = AllowlistTree([AllowlistEntry(ALICE, 1, 1)])
        self.assertEqual(tree.root, allowlist_leaf(ALICE, 1, 1))
        self.assertEqual(tree.proof_for(ALICE), [])
        self.assertTrue(verify(tree.root, [], ALICE, 1, 1))

    def test_two_entry_root_is_sorted_pair(self):
        tree = AllowlistTree([AllowlistEntry(ALICE, 1, 1), AllowlistEntry(BOB, 2, 2)])
        a = allowlist_leaf(ALICE, 1, 1)
        b = allowlist_leaf(BOB, 2, 2)
        self.assertEqual(tree.root, hash_pair(a, b))
        self.assertEqual(hash_pair(a, b), hash_pair(b, a))

    def test_empty_allowlist_rejected(self):
        with self.assertRaises(ValueError):
            AllowlistTree([])


if __name__ == "__main__":
    unittest.main()
