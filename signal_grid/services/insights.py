"""Advisory traffic analysis from an external text-generation service.

The call runs in a worker thread so the tick loop never waits on it. Any
failure is logged and reported as "no insight available".
"""
import asyncio
import json
import logging
from typing import Any, Dict, Optional

import requests

from signal_grid.domain.models import InsightSnapshot, InsightResult
from signal_grid.domain import config

logger = logging.getLogger(__name__)

NO_INSIGHT_TEXT = "No insight available"

def build_prompt(snapshot: InsightSnapshot) -> str:
    location = snapshot.location
    grid_stats = json.dumps({
        "activeVehicles": snapshot.activeVehicleCount,
        "congestion": f"{snapshot.congestionLevel * 100:.1f}%",
        "throughput": snapshot.throughput,
    })
    overrides = [i.id for i in snapshot.intersections if i.manualOverride]
    busiest = max(
        snapshot.intersections,
        key=lambda i: sum(i.queueLengths.values()),
        default=None,
    )
    lines = [
        f"Analyze this urban traffic simulation for {location.name}, Tamil Nadu, India.",
        f"Current Grid Stats: {grid_stats}",
        f"Context: {location.description}",
        f"Junctions under manual override: {', '.join(overrides) or 'none'}",
    ]
    if busiest is not None:
        lines.append(f"Longest queues at {busiest.id} ({busiest.roadNames.vertical} / {busiest.roadNames.horizontal})")
    lines += [
        "Tasks:",
        f"1. Identify nearby police stations and emergency units in {location.name}.",
        "2. Provide a brief analysis of the current traffic flow efficiency in this specific urban cluster.",
        f"3. Recommend localized timing adjustments for the {location.name} road network.",
        f"Mention specific local landmarks relevant to {location.name}.",
    ]
    return "\n".join(lines)

def parse_response(payload: Dict[str, Any]) -> InsightResult:
    candidate = payload["candidates"][0]
    parts = candidate.get("content", {}).get("parts", [])
    text = "".join(part.get("text", "") for part in parts)
    chunks = candidate.get("groundingMetadata", {}).get("groundingChunks", [])
    return InsightResult(text=text, groundingChunks=chunks)

class InsightService:
    def __init__(self, api_key: str = config.INSIGHT_API_KEY, model: str = config.INSIGHT_MODEL,
                 timeout: float = config.INSIGHT_TIMEOUT):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.latest: Optional[InsightResult] = None
        self.in_flight = 0

    @property
    def pending(self) -> bool:
        return self.in_flight > 0

    def _post(self, snapshot: InsightSnapshot) -> Dict[str, Any]:
        body = {
            "contents": [{"parts": [{"text": build_prompt(snapshot)}]}],
            "tools": [{"googleMaps": {}}],
            "toolConfig": {
                "retrievalConfig": {
                    "latLng": {
                        "latitude": snapshot.location.lat,
                        "longitude": snapshot.location.lng,
                    }
                }
            },
        }
        response = requests.post(
            config.INSIGHT_ENDPOINT.format(model=self.model),
            headers={"x-goog-api-key": self.api_key},
            json=body,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def request_insight(self, snapshot: InsightSnapshot) -> Optional[InsightResult]:
        if not self.api_key:
            logger.warning("No advisory API key configured; %s", NO_INSIGHT_TEXT.lower())
            self.latest = None
            return None

        self.in_flight += 1
        logger.info("Requesting traffic insight for %s", snapshot.location.name)
        try:
            payload = await asyncio.to_thread(self._post, snapshot)
            result = parse_response(payload)
        except (requests.RequestException, KeyError, IndexError, ValueError) as e:
            logger.warning("Insight request for %s failed: %s", snapshot.location.name, e)
            result = None
        finally:
            self.in_flight -= 1

        self.latest = result
        return result
