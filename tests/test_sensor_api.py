import unittest
from unittest import mock

import requests

from helmetwatch.sensor_api import build_ingest_payload, extract_batch, fetch_recent_data, save_data


def fake_response(status_code=200, body=None, json_error=False):
    resp = mock.Mock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    if json_error:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    return resp


class FetchRecentDataTest(unittest.TestCase):
    @mock.patch("helmetwatch.sensor_api.requests.get")
    def test_success_returns_payload(self, get):
        body = {"success": True, "count": 1, "data": [{"temperature": 22}]}
        get.return_value = fake_response(200, body)
        payload, error = fetch_recent_data("https://example.test/api/", timeout=3)
        self.assertEqual(payload, body)
        self.assertIsNone(error)
        args, kwargs = get.call_args
        self.assertEqual(args[0], "https://example.test/api/data")
        self.assertEqual(kwargs["timeout"], 3)

    @mock.patch("helmetwatch.sensor_api.requests.get")
    def test_non_2xx_is_an_error(self, get):
        get.return_value = fake_response(502, {"message": "bad gateway"})
        payload, error = fetch_recent_data("https://example.test/api")
        self.assertIsNone(payload)
        self.assertEqual(error, "API error: 502")

    @mock.patch("helmetwatch.sensor_api.requests.get")
    def test_transport_failure_is_an_error(self, get):
        get.side_effect = requests.ConnectionError("refused")
        payload, error = fetch_recent_data("https://example.test/api")
        self.assertIsNone(payload)
        self.assertEqual(error, "Request failed (ConnectionError)")

    @mock.patch("helmetwatch.sensor_api.requests.get")
    def test_invalid_json_is_an_error(self, get):
        get.return_value = fake_response(200, json_error=True)
        self.assertEqual(fetch_recent_data("https://example.test/api"), (None, "Invalid response from API"))


class ExtractBatchTest(unittest.TestCase):
    def test_liberal_parsing(self):
        self.assertEqual(extract_batch({"data": [{"a": 1}]}), [{"a": 1}])
        self.assertEqual(extract_batch({"data": None}), [])
        self.assertEqual(extract_batch({"rows": []}), [])
        self.assertEqual(extract_batch(["not", "a", "dict"]), [])
        self.assertEqual(extract_batch({"data": [{"a": 1}, None, 3]}), [{"a": 1}])


class SaveDataTest(unittest.TestCase):
    def test_ingest_payload_keeps_known_fields(self):
        body = build_ingest_payload({"temperature": 30, "timestamp": "x", "helmetId": "H1", "emergency": True})
        self.assertEqual(body, {"temperature": 30, "emergency": True})

    @mock.patch("helmetwatch.sensor_api.requests.post")
    def test_success(self, post):
        post.return_value = fake_response(201, {"success": True, "message": "Data saved"})
        ok, message = save_data({"temperature": 30, "reason": "gas leak"}, base_url="https://example.test/api")
        self.assertTrue(ok)
        self.assertEqual(message, "Data saved")
        self.assertEqual(post.call_args.kwargs["json"], {"temperature": 30, "reason": "gas leak"})

    @mock.patch("helmetwatch.sensor_api.requests.post")
    def test_error_message_is_used_verbatim(self, post):
        post.return_value = fake_response(400, {"success": False, "message": "temperature must be a number"})
        self.assertEqual(
            save_data({"temperature": "hot"}, base_url="https://example.test/api"),
            (False, "temperature must be a number"),
        )

    @mock.patch("helmetwatch.sensor_api.requests.post")
    def test_error_without_body_uses_status(self, post):
        post.return_value = fake_response(500, json_error=True)
        self.assertEqual(save_data({}, base_url="https://example.test/api"), (False, "API error: 500"))


if __name__ == "__main__":
    unittest.main()
