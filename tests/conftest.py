"""
Pytest fixtures for the Jolpica data-layer tests.
"""
import json
from typing import Any

import pytest
import requests

from src.ingest_jolpica.api_client import JolpicaClient
from src.ingest_jolpica.cache import ResponseCache
from src.ingest_jolpica.queries import F1Queries
from src.utils.logger import logger


BASE_URL = "https://api.test/ergast/f1"

CIRCUIT = {
    "circuitId": "bahrain",
    "url": "http://en.wikipedia.org/wiki/Bahrain_International_Circuit",
    "circuitName": "Bahrain International Circuit",
    "Location": {"lat": "26.0325", "long": "50.5106", "locality": "Sakhir", "country": "Bahrain"},
}

DRIVER = {
    "driverId": "max_verstappen",
    "permanentNumber": "33",
    "code": "VER",
    "url": "http://en.wikipedia.org/wiki/Max_Verstappen",
    "givenName": "Max",
    "familyName": "Verstappen",
    "dateOfBirth": "1997-09-30",
    "nationality": "Dutch",
}

CONSTRUCTOR = {
    "constructorId": "red_bull",
    "url": "http://en.wikipedia.org/wiki/Red_Bull_Racing",
    "name": "Red Bull",
    "nationality": "Austrian",
}


def envelope(**table: Any) -> dict:
    """Wrap one table in the MRData envelope."""
    mr_data = {
        "xmlns": "",
        "series": "f1",
        "url": "http://api.jolpi.ca/ergast/f1/test.json",
        "limit": "30",
        "offset": "0",
        "total": "1",
    }
    mr_data.update(table)
    return {"MRData": mr_data}


def race(**extra: Any) -> dict:
    record = {
        "season": "2024",
        "round": "1",
        "url": "http://en.wikipedia.org/wiki/2024_Bahrain_Grand_Prix",
        "raceName": "Bahrain Grand Prix",
        "Circuit": CIRCUIT,
        "date": "2024-03-02",
        "time": "15:00:00Z",
    }
    record.update(extra)
    return record


def driver_standing(position: str = "1") -> dict:
    return {
        "position": position,
        "positionText": position,
        "points": "575",
        "wins": "19",
        "Driver": DRIVER,
        "Constructors": [CONSTRUCTOR],
    }


def result(position: str = "1") -> dict:
    return {
        "number": "1",
        "position": position,
        "positionText": position,
        "points": "26",
        "Driver": DRIVER,
        "Constructor": CONSTRUCTOR,
        "grid": "1",
        "laps": "57",
        "status": "Finished",
        "Time": {"millis": "5504742", "time": "1:31:44.742"},
        "FastestLap": {
            "rank": "1",
            "lap": "39",
            "Time": {"time": "1:32.608"},
            "AverageSpeed": {"units": "kph", "speed": "210.383"},
        },
    }


def driver_standings_payload(season: str = "2023") -> dict:
    return envelope(StandingsTable={
        "season": season,
        "StandingsLists": [{
            "season": season,
            "round": "22",
            "DriverStandings": [driver_standing("1"), driver_standing("2")],
        }],
    })


def make_response(status: int = 200, body: Any = None, text: str | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.reason = "OK" if status < 400 else "Error"
    response.url = BASE_URL
    if text is None:
        text = json.dumps(body if body is not None else {})
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    return response


class FakeSession:
    """Stands in for requests.Session; replays queued responses or exceptions."""

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[tuple[str, float]] = []

    def queue(self, *outcomes: Any) -> None:
        self.outcomes.extend(outcomes)

    def get(self, url: str, timeout: float | None = None, **kwargs: Any) -> requests.Response:
        self.calls.append((url, timeout))
        if not self.outcomes:
            raise AssertionError(f"unexpected request to {url}")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def sleeps() -> list[float]:
    """Records backoff delays instead of sleeping."""
    return []


@pytest.fixture
def client(session: FakeSession, sleeps: list[float]) -> JolpicaClient:
    return JolpicaClient(
        base_url=BASE_URL,
        timeout=10.0,
        max_retries=2,
        base_retry_delay=1.0,
        session=session,
        sleep=sleeps.append,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ResponseCache:
    return ResponseCache(default_ttl=300.0, clock=clock)


@pytest.fixture
def queries(client: JolpicaClient, cache: ResponseCache) -> F1Queries:
    return F1Queries(client=client, cache=cache)


@pytest.fixture
def log_records() -> list[dict]:
    """WARNING-and-above loguru records emitted during the test."""
    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="WARNING")
    yield records
    logger.remove(handler_id)


def messages(records: list[dict], level: str) -> list[str]:
    return [r["message"] for r in records if r["level"].name == level]
