"""
Structural contracts for Jolpica/Ergast API payloads.

Every scalar is transmitted as text by the upstream API (positions, points,
dates, lap numbers...), so scalars are StrictStr and parsing to numbers or
dates is left to callers. Unknown fields are allowed so the payload passes
through losslessly.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from src.ingest_jolpica.errors import ValidationError


class _Shape(BaseModel):
    model_config = ConfigDict(extra="allow")

    @field_validator("*", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        # Optional fields may be absent, never null.
        if value is None:
            raise ValueError("null is not allowed; the field must be a value or absent")
        return value


class LocationSchema(_Shape):
    lat: StrictStr
    long: StrictStr
    locality: StrictStr
    country: StrictStr


class CircuitSchema(_Shape):
    circuitId: StrictStr
    url: StrictStr
    circuitName: StrictStr
    Location: LocationSchema


class DriverSchema(_Shape):
    driverId: StrictStr
    permanentNumber: Optional[StrictStr] = None
    code: Optional[StrictStr] = None
    url: StrictStr
    givenName: StrictStr
    familyName: StrictStr
    dateOfBirth: StrictStr
    nationality: StrictStr


class ConstructorSchema(_Shape):
    constructorId: StrictStr
    url: StrictStr
    name: StrictStr
    nationality: StrictStr


class SeasonSchema(_Shape):
    season: StrictStr
    url: StrictStr


class TimingSchema(_Shape):
    driverId: StrictStr
    position: StrictStr
    time: StrictStr


class LapSchema(_Shape):
    number: StrictStr
    Timings: list[TimingSchema]


class PitStopSchema(_Shape):
    driverId: StrictStr
    lap: StrictStr
    stop: StrictStr
    time: StrictStr
    duration: StrictStr


class ResultTimeSchema(_Shape):
    millis: Optional[StrictStr] = None
    time: Optional[StrictStr] = None


class LapTimeSchema(_Shape):
    time: StrictStr


class AverageSpeedSchema(_Shape):
    units: StrictStr
    speed: StrictStr


class FastestLapSchema(_Shape):
    rank: StrictStr
    lap: StrictStr
    Time: LapTimeSchema
    AverageSpeed: AverageSpeedSchema


class ResultSchema(_Shape):
    number: StrictStr
    position: Optional[StrictStr] = None
    positionText: StrictStr
    points: StrictStr
    Driver: DriverSchema
    Constructor: ConstructorSchema
    grid: StrictStr
    laps: StrictStr
    status: StrictStr
    Time: Optional[ResultTimeSchema] = None
    FastestLap: Optional[FastestLapSchema] = None


class RaceSchema(_Shape):
    season: StrictStr
    round: StrictStr
    url: StrictStr
    raceName: StrictStr
    Circuit: CircuitSchema
    date: StrictStr
    time: Optional[StrictStr] = None
    Results: Optional[list[ResultSchema]] = None
    Laps: Optional[list[LapSchema]] = None
    PitStops: Optional[list[PitStopSchema]] = None


class DriverStandingSchema(_Shape):
    position: StrictStr
    positionText: StrictStr
    points: StrictStr
    wins: StrictStr
    Driver: DriverSchema
    Constructors: list[ConstructorSchema]


class ConstructorStandingSchema(_Shape):
    position: StrictStr
    positionText: StrictStr
    points: StrictStr
    wins: StrictStr
    Constructor: ConstructorSchema


class StandingsListSchema(_Shape):
    season: StrictStr
    round: Optional[StrictStr] = None
    DriverStandings: Optional[list[DriverStandingSchema]] = None
    ConstructorStandings: Optional[list[ConstructorStandingSchema]] = None


class SeasonTableSchema(_Shape):
    Seasons: list[SeasonSchema]


class RaceTableSchema(_Shape):
    season: Optional[StrictStr] = None
    round: Optional[StrictStr] = None
    Races: list[RaceSchema]


class StandingsTableSchema(_Shape):
    season: Optional[StrictStr] = None
    StandingsLists: list[StandingsListSchema]


class CircuitTableSchema(_Shape):
    season: Optional[StrictStr] = None
    Circuits: list[CircuitSchema]


TABLE_KEYS = ("SeasonTable", "RaceTable", "StandingsTable", "CircuitTable")


class MRDataSchema(_Shape):
    xmlns: Optional[StrictStr] = None
    series: Optional[StrictStr] = None
    url: Optional[StrictStr] = None
    limit: Optional[StrictStr] = None
    offset: Optional[StrictStr] = None
    total: Optional[StrictStr] = None
    SeasonTable: Optional[SeasonTableSchema] = None
    RaceTable: Optional[RaceTableSchema] = None
    StandingsTable: Optional[StandingsTableSchema] = None
    CircuitTable: Optional[CircuitTableSchema] = None

    @model_validator(mode="after")
    def _exactly_one_table(self) -> "MRDataSchema":
        present = [key for key in TABLE_KEYS if getattr(self, key) is not None]
        if len(present) != 1:
            found = ", ".join(present) or "none"
            raise ValueError(f"expected exactly one of {', '.join(TABLE_KEYS)}; found {found}")
        return self


class ErgastResponseSchema(_Shape):
    MRData: MRDataSchema


def _describe(exc: PydanticValidationError) -> str:
    """Human-readable description of the first mismatch."""
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    return f"{location}: {first['msg']}"


def validate_response(data: Any, url: Optional[str] = None) -> dict[str, Any]:
    """
    Check a decoded JSON value against the root envelope shape.

    Args:
        data: Decoded JSON body.
        url: Originating URL, attached to the error on failure.

    Returns:
        The same object that was passed in, unmodified.

    Raises:
        ValidationError: on the first structural mismatch.
    """
    try:
        ErgastResponseSchema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(_describe(e), url=url) from e
    return data
