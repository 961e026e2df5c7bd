from fastapi import FastAPI, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
import requests
import logging
import json
from typing import Optional, Any

from src.models.campaign import CampaignListResponse, DistanceQuery, ErrorResponse
from src.geocoding.nominatim import GeocodeCache, NominatimGeocoder
from src.scraper.campaigns import build_campaign_listing

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)


class PrettyJSONResponse(JSONResponse):
    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=2).encode("utf-8")


app = FastAPI(
    title="NBTS Campaign API",
    description="Blood donation campaigns from the NBTS mobile listing, with coordinates and distance filtering",
    version="1.0.0",
    default_response_class=PrettyJSONResponse
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Shared for the lifetime of the process
geocode_cache = GeocodeCache()
http_session = requests.Session()


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return PrettyJSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(exc.errors())}
    )


def get_http_session():
    return http_session


def get_geocoder(session=Depends(get_http_session)):
    return NominatimGeocoder(geocode_cache, session=session)


def get_distance_query(
    lat: Optional[str] = None,
    lng: Optional[str] = None,
    radius: Optional[str] = None
) -> DistanceQuery:
    try:
        return DistanceQuery(lat=lat, lng=lng, radius=radius)
    except ValidationError as e:
        raise RequestValidationError(
            [{**error, "loc": ("query",) + tuple(error["loc"])} for error in e.errors()]
        )


@app.get("/api/nbts-campaigns")
def get_nbts_campaigns(
    query: DistanceQuery = Depends(get_distance_query),
    session=Depends(get_http_session),
    geocoder: NominatimGeocoder = Depends(get_geocoder)
):
    """
    List NBTS blood donation campaigns.

    Query parameters:
        lat: Latitude of the caller, enables distance filtering together with lng
        lng: Longitude of the caller
        radius: Search radius in kilometers (default: 25)
    """
    try:
        campaigns = build_campaign_listing(session, geocoder, lat=query.lat, lng=query.lng, radius=query.radius_km)
    except Exception as e:
        logger.error(f"Error building campaign listing: {str(e)}")
        return PrettyJSONResponse(
            status_code=500,
            content=ErrorResponse(details=str(e)).model_dump()
        )

    return CampaignListResponse.from_records(campaigns).model_dump()
