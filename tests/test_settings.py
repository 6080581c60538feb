import unittest

from helmetwatch.settings import validate_timezone


class ValidateTimezoneTest(unittest.TestCase):
    def test_known_zones_pass_through(self):
        self.assertEqual(validate_timezone("UTC"), "UTC")
        self.assertEqual(validate_timezone("America/New_York"), "America/New_York")

    def test_unknown_zone_fails_fast(self):
        for name in ("Mars/Olympus_Mons", "", "/etc/localtime"):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    validate_timezone(name)


if __name__ == "__main__":
    unittest.main()
