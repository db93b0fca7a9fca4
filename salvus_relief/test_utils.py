import unittest

from salvus_relief.utils import format_currency_short, get_payload, parse_json_arg, slugify


class TestUtils(unittest.TestCase):

    def test_slugify(self):
        self.assertEqual(slugify("Flood Relief 2024!"), "flood-relief-2024")
        self.assertEqual(slugify("  --Cyclone  Amphan-- "), "cyclone-amphan")
        self.assertEqual(slugify(None), "")

    def test_format_currency_short(self):
        self.assertEqual(format_currency_short(None), "$0")
        self.assertEqual(format_currency_short(950), "$950")
        self.assertEqual(format_currency_short(45_200), "$45.2K")
        self.assertEqual(format_currency_short(1_250_000), "$1.2M")

    def test_get_payload_prefers_first_present_name(self):
        payload = {"beneficiaryCap": 50, "beneficiary_cap": 70}
        self.assertEqual(get_payload(payload, "beneficiary_cap", "beneficiaryCap"), 70)
        self.assertEqual(get_payload({"beneficiaryCap": 50}, "beneficiary_cap", "beneficiaryCap"), 50)
        self.assertIsNone(get_payload({}, "beneficiary_cap", "beneficiaryCap"))

    def test_parse_json_arg(self):
        self.assertEqual(parse_json_arg('{"Food": 10}'), {"Food": 10})
        self.assertEqual(parse_json_arg({"Food": 10}), {"Food": 10})
        self.assertEqual(parse_json_arg("not json"), "not json")
