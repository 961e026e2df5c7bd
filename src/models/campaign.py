from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Dict, Any

SOURCE_NAME = "NBTS"
NBTS_URL = "https://nbts.health.gov.lk/mobile/"
PARSE_FAILURE_MESSAGE = "Failed to parse NBTS campaigns"
DEFAULT_RADIUS_KM = 25.0


class Coordinates(BaseModel):
    latitude: float
    longitude: float


class CampaignRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    source: str = SOURCE_NAME
    date: str
    title: str
    venue: str
    blood_bank: str = Field(alias="bloodBank")
    city: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    source_url: str = Field(default=NBTS_URL, alias="sourceUrl")
    distance_km: Optional[float] = Field(default=None, alias="distanceKm")

    @property
    def coordinates(self) -> Optional[Coordinates]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(latitude=self.latitude, longitude=self.longitude)

    def to_response(self) -> Dict[str, Any]:
        """Serialize with API field names; distanceKm only appears once computed."""
        data = self.model_dump(by_alias=True)
        if self.distance_km is None:
            data.pop("distanceKm")
        return data


class CampaignListResponse(BaseModel):
    source: str = SOURCE_NAME
    total: int
    campaigns: List[Dict[str, Any]]

    @classmethod
    def from_records(cls, records: List[CampaignRecord]) -> "CampaignListResponse":
        return cls(total=len(records), campaigns=[r.to_response() for r in records])


class ErrorResponse(BaseModel):
    error: str = PARSE_FAILURE_MESSAGE
    details: str


class DistanceQuery(BaseModel):
    """Optional caller location and search radius; blank values count as absent."""
    model_config = ConfigDict(allow_inf_nan=False)

    lat: Optional[float] = Field(default=None, ge=-90, le=90)
    lng: Optional[float] = Field(default=None, ge=-180, le=180)
    radius: Optional[float] = Field(default=None, ge=0)

    @field_validator("lat", "lng", "radius", mode="before")
    @classmethod
    def blank_as_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def radius_km(self) -> float:
        return DEFAULT_RADIUS_KM if self.radius is None else self.radius
