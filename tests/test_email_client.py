import unittest

import requests

from stylist.email_client import ResendEmailClient
from stylist.errors import EmailDeliveryError


class DummyResp:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def _fake_session(resp, calls):
    def _post(url, json=None, headers=None, timeout=None):
        calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if isinstance(resp, Exception):
            raise resp
        return resp

    return type("S", (), {"post": staticmethod(_post)})()


class TestResendEmailClient(unittest.TestCase):
    def _client(self, resp, calls, api_key="re_test"):
        return ResendEmailClient(
            api_key,
            default_sender="Stylist <hello@example.com>",
            base_url="https://mail.example.test/",
            session=_fake_session(resp, calls),
            timeout=5,
        )

    def test_send_posts_expected_payload(self):
        calls = []
        client = self._client(DummyResp(200, {"id": "msg_123"}), calls)
        receipt = client.send("ana@example.com", "Hello", "<p>Hi</p>")

        self.assertEqual(receipt.id, "msg_123")
        call = calls[0]
        self.assertEqual(call["url"], "https://mail.example.test/emails")
        self.assertEqual(call["json"], {
            "from": "Stylist <hello@example.com>",
            "to": ["ana@example.com"],
            "subject": "Hello",
            "html": "<p>Hi</p>",
        })
        self.assertEqual(call["headers"]["Authorization"], "Bearer re_test")
        self.assertEqual(call["timeout"], 5)

    def test_sender_override(self):
        calls = []
        client = self._client(DummyResp(200, {"id": "x"}), calls)
        client.send("ana@example.com", "s", "h", sender="Other <o@example.com>")
        self.assertEqual(calls[0]["json"]["from"], "Other <o@example.com>")

    def test_non_2xx_raises_with_status(self):
        client = self._client(DummyResp(422, text="invalid from"), [])
        with self.assertRaises(EmailDeliveryError) as ctx:
            client.send("ana@example.com", "s", "h")
        self.assertEqual(ctx.exception.status_code, 422)
        self.assertIn("Email service error: 422 - invalid from", str(ctx.exception))

    def test_transport_error_raises(self):
        client = self._client(requests.exceptions.Timeout("slow"), [])
        with self.assertRaises(EmailDeliveryError):
            client.send("ana@example.com", "s", "h")

    def test_missing_id_raises(self):
        client = self._client(DummyResp(200, {}), [])
        with self.assertRaises(EmailDeliveryError):
            client.send("ana@example.com", "s", "h")

    def test_non_json_raises(self):
        client = self._client(DummyResp(200, None, text="<html>"), [])
        with self.assertRaises(EmailDeliveryError):
            client.send("ana@example.com", "s", "h")

    def test_missing_api_key_fails_without_request(self):
        calls = []
        client = self._client(DummyResp(200, {"id": "x"}), calls, api_key=None)
        with self.assertRaises(EmailDeliveryError):
            client.send("ana@example.com", "s", "h")
        self.assertEqual(calls, [])


if __name__ == "__main__":
    unittest.main()
