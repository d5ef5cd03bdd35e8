import unittest

from fastapi.testclient import TestClient

from stylist.main import app


class TestMain(unittest.TestCase):
    def test_app_metadata(self):
        self.assertEqual(app.title, "Daily Weather Stylist")

    def test_routes_mounted_under_v1(self):
        client = TestClient(app)
        self.assertEqual(client.get("/health").status_code, 200)
        # the API lives under /v1 only
        self.assertEqual(client.get("/dispatch/daily").status_code, 404)
        self.assertEqual(client.get("/v1/no-such-route").status_code, 404)
        # POST-only route answers GET with 405, which proves it is mounted
        self.assertEqual(client.get("/v1/users").status_code, 405)


if __name__ == "__main__":
    unittest.main()
