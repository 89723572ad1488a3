import unittest

from aether.main import app


class TestMain(unittest.TestCase):
    def test_app_metadata(self):
        self.assertEqual(app.title, "Aether Weather")
        paths = {route.path for route in app.routes}
        self.assertIn("/v1/search", paths)
        self.assertIn("/v1/session", paths)


if __name__ == "__main__":
    unittest.main()
