import logging
from typing import List, Optional

from src.models.campaign import CampaignRecord, DEFAULT_RADIUS_KM
from src.geocoding.normalizer import normalize_location
from src.geocoding.distance import haversine_km
from src.scraper.nbts_scraper import fetch_campaign_page, parse_campaign_rows

logger = logging.getLogger(__name__)


def build_campaign(index, cells) -> CampaignRecord:
    date, title, venue, blood_bank = cells
    return CampaignRecord(
        id=f"nbts_{index}_{date.replace('-', '')}",
        date=date,
        title=title,
        venue=venue,
        blood_bank=blood_bank,
        city=normalize_location(blood_bank),
    )

def collect_campaigns(session, geocoder, max_workers=1) -> List[CampaignRecord]:
    """
    Scrape the listing and geocode every campaign, keeping page order.

    Raises:
        CampaignFetchError: If the page could not be fetched or parsed
    """
    html = fetch_campaign_page(session)
    campaigns = [build_campaign(index, cells) for index, cells in parse_campaign_rows(html)]

    coordinates = geocoder.batch_geocode([c.city for c in campaigns], max_workers=max_workers)

    for campaign in campaigns:
        coords = coordinates.get(campaign.city)
        if coords is not None:
            campaign.latitude = coords.latitude
            campaign.longitude = coords.longitude

    resolved = sum(1 for c in campaigns if c.coordinates is not None)
    logger.info(f"Collected {len(campaigns)} campaigns, {resolved} with coordinates")
    return campaigns

def filter_by_distance(campaigns, lat, lng, radius_km=DEFAULT_RADIUS_KM) -> List[CampaignRecord]:
    """
    Keep campaigns within radius_km of (lat, lng), nearest first.

    Campaigns without coordinates are dropped. Returned records are copies
    carrying distance_km rounded to two decimals.
    """
    nearby = []
    for campaign in campaigns:
        if campaign.coordinates is None:
            continue

        distance = round(haversine_km(lat, lng, campaign.latitude, campaign.longitude), 2)
        if distance <= radius_km:
            nearby.append(campaign.model_copy(update={"distance_km": distance}))

    nearby.sort(key=lambda c: c.distance_km)
    return nearby

def build_campaign_listing(session, geocoder, lat: Optional[float] = None, lng: Optional[float] = None,
                           radius: float = DEFAULT_RADIUS_KM) -> List[CampaignRecord]:
    campaigns = collect_campaigns(session, geocoder)

    if lat is not None and lng is not None:
        campaigns = filter_by_distance(campaigns, lat, lng, radius)
        logger.info(f"{len(campaigns)} campaigns within {radius} km of ({lat}, {lng})")

    return campaigns
