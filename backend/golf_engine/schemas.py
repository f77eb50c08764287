from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, model_validator, field_validator, ConfigDict

ScoreValue = Union[int, str, None]


class FormatOut(BaseModel):
    id: str
    name: str
    minPlayers: int
    maxPlayers: Optional[int] = None
    teams: bool


class PlayerIn(BaseModel):
    id: str = Field(..., min_length=1, max_length=100)
    name: Optional[str] = Field(default=None, max_length=100)
    handicap: Optional[Union[float, str]] = None
    tee: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("id", mode="before")
    @classmethod
    def _validate_id(cls, value: str) -> str:
        if not isinstance(value, str):
            raise TypeError("id must be a string")
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("id must not be empty")
        return trimmed


class HoleDefinitionIn(BaseModel):
    number: int = Field(..., ge=1, le=18)
    par: Optional[int] = Field(default=None, ge=3, le=6)
    strokeIndex: Optional[int] = Field(default=None, ge=1, le=18)

    model_config = ConfigDict(extra="forbid")


class RotationIn(BaseModel):
    segmentSize: int = Field(..., ge=1, le=18)
    segments: List[Dict[Literal["A", "B"], List[str]]] = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")


class PressIn(BaseModel):
    id: Optional[str] = None
    calledBy: Optional[str] = None
    startHole: Optional[int] = Field(default=None, ge=1, le=18)

    model_config = ConfigDict(extra="forbid")


class GameSettingsIn(BaseModel):
    useHandicaps: Optional[bool] = None
    handicapMode: Optional[Literal["full", "off_low"]] = None
    stakePerPoint: Optional[float] = Field(default=None, ge=0)
    doublesEnabled: Optional[bool] = None
    payoutMode: Optional[Literal["difference", "total"]] = None
    # wolf
    loneWolfWinPoints: Optional[int] = Field(default=None, ge=0)
    loneWolfLossPoints: Optional[int] = Field(default=None, ge=0)
    teamWinPoints: Optional[int] = Field(default=None, ge=0)
    wolfPosition: Optional[Literal["first", "last"]] = None
    # best ball
    variant: Optional[Literal["match", "stroke"]] = None
    # umbriago
    rollsPerTeam: Optional[int] = Field(default=None, ge=0)
    contestPoints: Optional[Dict[Literal["closest_to_pin", "team_low", "individual_low", "birdie"], int]] = None
    umbriagoBonus: Optional[bool] = None
    umbriagoBonusPerStroke: Optional[int] = Field(default=None, ge=0)
    rotation: Optional[RotationIn] = None
    # copenhagen
    presses: Optional[List[PressIn]] = None

    model_config = ConfigDict(extra="forbid")


class GameIn(BaseModel):
    format: str
    players: List[PlayerIn] = Field(..., min_length=1)
    teams: Optional[Dict[Literal["A", "B"], List[str]]] = None
    holes: List[HoleDefinitionIn] = Field(default_factory=list)
    holesPlayed: Literal[9, 18] = 18
    settings: GameSettingsIn = Field(default_factory=GameSettingsIn)

    model_config = ConfigDict(extra="forbid")

    @field_validator("format", mode="before")
    @classmethod
    def _normalize_format(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower().replace("-", "_")
        return value

    @model_validator(mode="after")
    def _check_holes(self) -> "GameIn":
        numbers = [h.number for h in self.holes]
        if len(set(numbers)) != len(numbers):
            raise ValueError("hole numbers must be unique")
        if any(n > self.holesPlayed for n in numbers):
            raise ValueError("hole numbers must not exceed holesPlayed")
        return self


class DoubleIn(BaseModel):
    side: Optional[str] = None
    clear: bool = False

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _side_or_clear(self) -> "DoubleIn":
        if self.clear == (self.side is not None):
            raise ValueError("a double names a side or clears, not both")
        return self


class WolfDeclarationIn(BaseModel):
    choice: Literal["lone", "partner"]
    partner: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class RollIn(BaseModel):
    team: Literal["A", "B"]
    before: Literal["closest_to_pin", "team_low", "individual_low", "birdie"]

    model_config = ConfigDict(extra="forbid")


class HoleInputIn(BaseModel):
    hole: int = Field(..., ge=1, le=18)
    scores: Dict[str, ScoreValue] = Field(default_factory=dict)
    par: Optional[int] = Field(default=None, ge=3, le=6)
    doubles: List[DoubleIn] = Field(default_factory=list)
    wolf: Optional[WolfDeclarationIn] = None
    closestToPin: Optional[str] = None
    rolls: List[RollIn] = Field(default_factory=list)
    presses: List[PressIn] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class HoleRequest(BaseModel):
    game: GameIn
    hole: HoleInputIn
    history: List[HoleInputIn] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ReplayRequest(BaseModel):
    game: GameIn
    holes: List[HoleInputIn] = Field(default_factory=list)
    fromHole: Optional[int] = Field(default=None, ge=1, le=18)
    previousResults: Optional[List[Dict[str, Any]]] = None

    model_config = ConfigDict(extra="forbid")


class PayoutSettingsIn(BaseModel):
    payoutMode: Literal["difference", "total"] = "difference"
    stakePerPoint: Optional[float] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")


class PayoutRequest(BaseModel):
    finalTotals: Optional[Dict[str, float]] = None
    settings: PayoutSettingsIn = Field(default_factory=PayoutSettingsIn)
    game: Optional[GameIn] = None
    holes: List[HoleInputIn] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _totals_or_game(self) -> "PayoutRequest":
        if (self.finalTotals is None) == (self.game is None):
            raise ValueError("provide either finalTotals or a game to settle")
        return self


class PayoutOut(BaseModel):
    winner: str
    amount: float
    balances: Dict[str, float]


class HoleResultOut(BaseModel):
    format: str
    hole: Dict[str, Any]
    summary: Dict[str, Any]
    idempotencyKey: str


class ReplayOut(BaseModel):
    format: str
    holes: List[Dict[str, Any]]
    summary: Dict[str, Any]
    recomputedFrom: Optional[int] = None
    payout: Optional[PayoutOut] = None


class HandicapAllocationRequest(BaseModel):
    handicap: Optional[Union[float, str]] = None
    strokeIndices: List[int] = Field(..., min_length=1, max_length=18)

    model_config = ConfigDict(extra="forbid")


class HandicapAllocationOut(BaseModel):
    handicap: Optional[float] = None
    display: str
    playingHandicap: int
    strokes: List[int]
    total: int


class ShotIn(BaseModel):
    hole: Optional[int] = Field(default=None, ge=1, le=18)
    startDistance: float
    startLie: str
    endDistance: Optional[float] = None
    endLie: Optional[str] = None
    holed: bool = False
    outOfBounds: bool = False

    model_config = ConfigDict(extra="forbid")

    @field_validator("startLie", "endLie", mode="before")
    @classmethod
    def _normalize_lie(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class StrokesGainedRequest(BaseModel):
    shots: List[ShotIn] = Field(..., min_length=1)
    interpolation: Optional[Literal["linear", "nearest"]] = None

    model_config = ConfigDict(extra="forbid")


class StrokesGainedOut(BaseModel):
    shots: List[Dict[str, Any]]
    byHole: Dict[str, float]
    byCategory: Dict[str, float]
    total: float
