import unittest

from txviz.core.capacity import (
    SHANNONS_PER_CKB,
    format_capacity,
    parse_capacity,
    parse_capacity_label,
    total_capacity,
)
from txviz.core.errors import CapacityParseError


class ParseCapacityTests(unittest.TestCase):
    def test_decimal_and_hex_strings(self) -> None:
        self.assertEqual(parse_capacity("100000000"), SHANNONS_PER_CKB)
        self.assertEqual(parse_capacity("0x5f5e100"), SHANNONS_PER_CKB)
        self.assertEqual(parse_capacity(" 42 "), 42)
        self.assertEqual(parse_capacity(7), 7)

    def test_values_beyond_float_precision_stay_exact(self) -> None:
        big = 2 ** 64 - 1
        self.assertEqual(parse_capacity(str(big)), big)
        self.assertEqual(parse_capacity(hex(big)), big)
        self.assertEqual(total_capacity([str(big), "1"]), 2 ** 64)

    def test_malformed_capacity_is_an_error_not_zero(self) -> None:
        for bad in ["", "abc", "1.5", "-1", "0x", "0xzz", "1e8"]:
            with self.subTest(bad=bad):
                with self.assertRaises(CapacityParseError):
                    parse_capacity(bad)
        with self.assertRaises(CapacityParseError):
            parse_capacity(-5)

    def test_parse_error_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            parse_capacity("nope")


class FormatCapacityTests(unittest.TestCase):
    def test_whole_ckb_omits_fraction(self) -> None:
        self.assertEqual(format_capacity(100000000), "1 CKB")
        self.assertEqual(format_capacity(0), "0 CKB")

    def test_fraction_is_zero_padded(self) -> None:
        self.assertEqual(format_capacity(250000000), "2.50000000 CKB")
        self.assertEqual(format_capacity(100000001), "1.00000001 CKB")
        self.assertEqual(format_capacity(1), "0.00000001 CKB")

    def test_label_round_trip(self) -> None:
        for c in [0, 1, 99999999, 100000000, 250000000, 6100000000, 2 ** 64 - 1, 10 ** 30 + 7]:
            with self.subTest(c=c):
                self.assertEqual(parse_capacity_label(format_capacity(c)), c)

    def test_bad_label(self) -> None:
        with self.assertRaises(CapacityParseError):
            parse_capacity_label("2.5 CKB")


if __name__ == "__main__":
    unittest.main()
