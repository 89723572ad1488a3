import unittest

from aether.units import TemperatureUnit, display_temperature, round_half_up, to_fahrenheit


class TestUnits(unittest.TestCase):
    def test_to_fahrenheit(self):
        self.assertEqual(to_fahrenheit(0), 32)
        self.assertEqual(to_fahrenheit(100), 212)
        self.assertEqual(to_fahrenheit(-40), -40)
        self.assertEqual(to_fahrenheit(24), 75)  # 75.2

    def test_rounds_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(-2.5), -2)
        self.assertEqual(to_fahrenheit(-17.5), 1)  # 0.5

    def test_celsius_display_is_stored_value(self):
        self.assertEqual(display_temperature(21.4, TemperatureUnit.CELSIUS), 21.4)
        self.assertEqual(display_temperature(21.4, "C"), 21.4)
        self.assertIsNone(display_temperature(None, "F"))

    def test_toggle_round_trip_reproduces_displayed_value(self):
        for celsius in (-12, -0.5, 0, 13, 24, 37.5):
            shown_c = display_temperature(celsius, "C")
            display_temperature(celsius, "F")
            self.assertEqual(display_temperature(celsius, "C"), shown_c)

    def test_conversions_are_independent_per_site(self):
        temperature, feels_like = 24, 26
        self.assertEqual(display_temperature(temperature, "F"), 75)
        self.assertEqual(display_temperature(feels_like, "F"), 79)  # 78.8, not 75 + 2 * 1.8

    def test_rejects_unknown_unit(self):
        with self.assertRaises(ValueError):
            display_temperature(10, "K")


if __name__ == "__main__":
    unittest.main()
