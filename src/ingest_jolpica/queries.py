"""
Domain-shaped accessors over the Jolpica API.

Each accessor returns a plain list (or a single record) projected out of a
validated response. Responses are served from the cache while fresh; when a
live fetch fails, the last good response for the same request is served
instead, if there is one.
"""
from typing import Any, Optional
from urllib.parse import urlencode

from src.ingest_jolpica.api_client import JolpicaClient
from src.ingest_jolpica.cache import ResponseCache
from src.ingest_jolpica.errors import JolpicaError
from src.utils.logger import logger


def build_request_key(path: str, params: Optional[dict[str, Any]] = None) -> str:
    """Deterministic key: path plus query params sorted by name."""
    if not params:
        return path
    return f"{path}?{urlencode(sorted(params.items()))}"


def _rows(payload: dict[str, Any], table: str, rows: str) -> list[dict]:
    """Extract one collection from a table; missing or empty gives []."""
    mr_data = payload.get("MRData") or {}
    return (mr_data.get(table) or {}).get(rows) or []


def _first(records: list[dict]) -> Optional[dict]:
    return records[0] if records else None


class F1Queries:
    """
    Query facade composing a JolpicaClient and a ResponseCache.

    Results are the cached payload objects themselves, not copies: treat them
    as read-only. Mutating a returned list or record changes what later calls
    for the same request receive.

    Args:
        client: Transport used on cache misses. Defaults to a configured client.
        cache: Response cache owned by this facade. Defaults to a fresh one.
    """

    def __init__(
        self,
        client: JolpicaClient | None = None,
        cache: ResponseCache | None = None,
    ) -> None:
        self.client = client or JolpicaClient()
        self.cache = cache if cache is not None else ResponseCache()

    def refresh(self) -> None:
        """Drop every cached response (manual refresh)."""
        self.cache.clear()

    def _query(self, path: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        key = build_request_key(path, params)

        cached = self.cache.read(key)
        if cached is not None:
            return cached

        try:
            payload = self.client.fetch(key)
        except JolpicaError as e:
            stale = self.cache.peek_stale(key)
            if stale is None:
                raise
            logger.warning(f"Serving stale data for {key} (degraded response): {e}")
            return stale

        self.cache.write(key, payload)
        return payload

    # ── Seasons & calendar ──────────────────────────────────────────────────

    def get_seasons(self) -> list[dict]:
        """All championship seasons."""
        payload = self._query("/seasons.json", {"limit": 100})
        return _rows(payload, "SeasonTable", "Seasons")

    def get_rounds(self, season: str) -> list[dict]:
        """
        Race calendar for a season.

        Args:
            season: 'current' or a year (e.g. '2024').

        Returns:
            List of race records, in round order.
        """
        payload = self._query(f"/{season}.json")
        return _rows(payload, "RaceTable", "Races")

    # ── Standings ───────────────────────────────────────────────────────────

    def get_driver_standings(self, season: str = "current") -> list[dict]:
        payload = self._query(f"/{season}/driverStandings.json")
        standings = _first(_rows(payload, "StandingsTable", "StandingsLists")) or {}
        return standings.get("DriverStandings") or []

    def get_constructor_standings(self, season: str = "current") -> list[dict]:
        payload = self._query(f"/{season}/constructorStandings.json")
        standings = _first(_rows(payload, "StandingsTable", "StandingsLists")) or {}
        return standings.get("ConstructorStandings") or []

    # ── Results ─────────────────────────────────────────────────────────────

    def get_race(self, season: str = "current", round: str = "last") -> Optional[dict]:
        """
        One race record including its Results.

        Args:
            season: 'current' or a year.
            round: 'last', 'current' or a round number.

        Returns:
            The race dict, or None if the season/round has no race.
        """
        payload = self._query(f"/{season}/{round}/results.json")
        return _first(_rows(payload, "RaceTable", "Races"))

    def get_race_results(self, season: str = "current", round: str = "last") -> list[dict]:
        """Classified results for one race; [] if the race has none yet."""
        race = self.get_race(season, round) or {}
        return race.get("Results") or []

    def get_season_results(self, season: str = "current") -> list[dict]:
        """Every race of a season with its results."""
        payload = self._query(f"/{season}/results.json", {"limit": 1000})
        return _rows(payload, "RaceTable", "Races")

    # ── Race detail ─────────────────────────────────────────────────────────

    def get_lap_times(self, season: str, round: str, driver_id: str) -> list[dict]:
        """
        Lap-by-lap timings for one driver in one race.

        Args:
            season: 'current' or a year.
            round: 'last', 'current' or a round number.
            driver_id: Ergast driver id (e.g. 'max_verstappen').

        Returns:
            List of lap dicts, each with 'number' and 'Timings'.
        """
        payload = self._query(
            f"/{season}/{round}/drivers/{driver_id}/laps.json", {"limit": 100}
        )
        race = _first(_rows(payload, "RaceTable", "Races")) or {}
        return race.get("Laps") or []

    def get_pit_stops(self, season: str = "current", round: str = "last") -> list[dict]:
        payload = self._query(f"/{season}/{round}/pitstops.json", {"limit": 100})
        race = _first(_rows(payload, "RaceTable", "Races")) or {}
        return race.get("PitStops") or []

    # ── Circuits ────────────────────────────────────────────────────────────

    def get_circuits(self, season: str = "current") -> list[dict]:
        payload = self._query(f"/{season}/circuits.json")
        return _rows(payload, "CircuitTable", "Circuits")

    def get_circuit_info(self, circuit_id: str) -> Optional[dict]:
        payload = self._query(f"/circuits/{circuit_id}.json")
        return _first(_rows(payload, "CircuitTable", "Circuits"))
