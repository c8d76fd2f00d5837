import asyncio
import threading
import unittest
from unittest import mock

import requests

from signal_grid.domain.models import InsightSnapshot, LocationConfig
from signal_grid.domain import config
from signal_grid.services.insights import InsightService, build_prompt, parse_response

def make_snapshot():
    return InsightSnapshot(
        activeVehicleCount=12,
        congestionLevel=0.25,
        throughput=40,
        intersections=[],
        location=LocationConfig(**config.LOCATIONS[1]),
    )

GEMINI_PAYLOAD = {
    "candidates": [{
        "content": {"parts": [{"text": "Flow is steady. "}, {"text": "Extend the vertical green."}]},
        "groundingMetadata": {"groundingChunks": [{"maps": {"title": "Gandhipuram Police Station"}}]},
    }]
}

class TestInsightService(unittest.TestCase):
    def test_prompt_carries_stats_and_location(self):
        prompt = build_prompt(make_snapshot())
        self.assertIn("Coimbatore (Gandhipuram)", prompt)
        self.assertIn("25.0%", prompt)
        self.assertIn('"activeVehicles": 12', prompt)

    def test_parse_response(self):
        result = parse_response(GEMINI_PAYLOAD)
        self.assertEqual(result.text, "Flow is steady. Extend the vertical green.")
        self.assertEqual(len(result.groundingChunks), 1)

    def test_missing_key_means_no_insight(self):
        service = InsightService(api_key="")
        with mock.patch("signal_grid.services.insights.requests.post") as post:
            self.assertIsNone(asyncio.run(service.request_insight(make_snapshot())))
        post.assert_not_called()
        self.assertIsNone(service.latest)

    def test_successful_request(self):
        service = InsightService(api_key="test-key")
        response = mock.Mock()
        response.json.return_value = GEMINI_PAYLOAD
        with mock.patch("signal_grid.services.insights.requests.post", return_value=response) as post:
            result = asyncio.run(service.request_insight(make_snapshot()))
        self.assertEqual(result.text, "Flow is steady. Extend the vertical green.")
        self.assertIs(service.latest, result)
        self.assertFalse(service.pending)
        _, kwargs = post.call_args
        self.assertEqual(kwargs["headers"]["x-goog-api-key"], "test-key")
        self.assertEqual(kwargs["json"]["toolConfig"]["retrievalConfig"]["latLng"]["latitude"], 11.0168)

    def test_pending_until_every_request_finishes(self):
        service = InsightService(api_key="test-key")
        response = mock.Mock()
        response.json.return_value = GEMINI_PAYLOAD
        release = threading.Event()
        lock = threading.Lock()
        calls = []

        def slow_second_call(url, **kwargs):
            with lock:
                calls.append(url)
                second = len(calls) == 2
            if second:
                release.wait(5)
            return response

        async def overlapping_requests():
            tasks = [asyncio.create_task(service.request_insight(make_snapshot())) for _ in range(2)]
            await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            during = service.pending
            release.set()
            await asyncio.gather(*tasks)
            return during

        with mock.patch("signal_grid.services.insights.requests.post", side_effect=slow_second_call):
            still_pending = asyncio.run(overlapping_requests())
        self.assertTrue(still_pending)
        self.assertFalse(service.pending)
        self.assertEqual(service.in_flight, 0)

    def test_network_failure_degrades(self):
        service = InsightService(api_key="test-key")
        with mock.patch("signal_grid.services.insights.requests.post",
                        side_effect=requests.ConnectionError("offline")):
            result = asyncio.run(service.request_insight(make_snapshot()))
        self.assertIsNone(result)
        self.assertIsNone(service.latest)
        self.assertFalse(service.pending)

    def test_malformed_payload_degrades(self):
        service = InsightService(api_key="test-key")
        response = mock.Mock()
        response.json.return_value = {"candidates": []}
        with mock.patch("signal_grid.services.insights.requests.post", return_value=response):
            self.assertIsNone(asyncio.run(service.request_insight(make_snapshot())))

if __name__ == '__main__':
    unittest.main()
