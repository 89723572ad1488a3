import os
import unittest

from aether.config import Settings


class TestConfig(unittest.TestCase):
    def _with_env(self, name, value, fn):
        previous = os.environ.get(name)
        try:
            if value is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = value
            return fn()
        finally:
            if previous is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = previous

    def test_settings_defaults(self):
        s = self._with_env("AETHER_HISTORY_DAYS", None, Settings)
        self.assertEqual(s.history_days, 7)
        self.assertEqual(s.default_location, "London")
        self.assertEqual(s.request_timeout_seconds, 10.0)

    def test_env_override(self):
        s = self._with_env("AETHER_RELAY_BASE_URL", "https://relay.example/", Settings)
        self.assertEqual(s.relay_base_url, "https://relay.example")

    def test_history_days_override(self):
        s = self._with_env("AETHER_HISTORY_DAYS", "3", Settings)
        self.assertEqual(s.history_days, 3)

    def test_placeholder_key_counts_as_missing(self):
        self.assertFalse(Settings(weatherstack_api_key=None).has_weatherstack_key)
        self.assertFalse(Settings(weatherstack_api_key="YOUR_API_KEY").has_weatherstack_key)
        self.assertFalse(Settings(weatherstack_api_key="   ").has_weatherstack_key)
        self.assertTrue(Settings(weatherstack_api_key="real-key").has_weatherstack_key)


if __name__ == "__main__":
    unittest.main()
