import unittest

from edition_drop import FeeSplitter, InvalidFeeError, StaticFeePolicy, Transfer

from tests.helpers import DROP, FEE_RECIPIENT, FUNDS


class RecordingPolicy:
    def __init__(self, recipient, bps):
        self.recipient = recipient
        self.bps = bps
        self.asked = []

    def withdraw_fee_bps(self, system_identity):
        self.asked.append(system_identity)
        return self.recipient, self.bps


class FeeSplitterTests(unittest.TestCase):
    def test_fee_truncates(self):
        split = FeeSplitter(StaticFeePolicy(FEE_RECIPIENT, 500), DROP).split(999)
        self.assertEqual(split.fee_amount, 49)
        self.assertEqual(split.remainder, 950)
        self.assertEqual(split.fee_recipient, FEE_RECIPIENT)

    def test_legs_sum_to_balance(self):
        for balance in (0, 1, 7, 9999, 10000, 123456789, 2 ** 64 + 3):
            for bps in (0, 1, 333, 500, 9999, 10000):
                split = FeeSplitter(StaticFeePolicy(FEE_RECIPIENT, bps), DROP).split(balance)
                self.assertEqual(split.fee_amount, balance * bps // 10000)
                self.assertEqual(split.fee_amount + split.remainder, balance)
                self.assertEqual(split.total, balance)

    def test_legs_are_fee_first(self):
        split = FeeSplitter(StaticFeePolicy(FEE_RECIPIENT, 1000), DROP).split(1000)
        self.assertEqual(split.legs(FUNDS), [Transfer(FEE_RECIPIENT, 100), Transfer(FUNDS, 900)])

    def test_policy_is_asked_with_drop_identity(self):
        policy = RecordingPolicy(FEE_RECIPIENT, 250)
        FeeSplitter(policy, DROP).split(100)
        self.assertEqual(policy.asked, [DROP])

    def test_out_of_range_bps_rejected(self):
        for bps in (-1, 10001, "500", None):
            with self.assertRaises(InvalidFeeError):
                FeeSplitter(RecordingPolicy(FEE_RECIPIENT, bps), DROP).split(100)


if __name__ == "__main__":
    unittest.main()
