import requests
from bs4 import BeautifulSoup
import logging
from typing import List

from src.models.campaign import NBTS_URL

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
}

REQUEST_TIMEOUT = 10
MIN_COLUMNS = 4


class CampaignFetchError(Exception):
    """Raised when the campaign page cannot be retrieved or parsed."""


def fetch_campaign_page(session=None):
    http = session or requests
    logger.info(f"Fetching campaign page {NBTS_URL}")

    try:
        response = http.get(NBTS_URL, headers=DEFAULT_HEADERS, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        raise CampaignFetchError(str(e)) from e

    return response.text


def parse_campaign_rows(html) -> List[tuple]:
    """
    Extract (index, cells) pairs from the page's table body rows.

    The index is the row's position among all body rows, so rows dropped for
    having fewer than four cells still consume one.
    """
    try:
        soup = BeautifulSoup(html, "html.parser")
        rows = soup.select("table tbody tr")
    except Exception as e:
        raise CampaignFetchError(str(e)) from e

    parsed = []
    for index, row in enumerate(rows):
        cells = row.find_all("td")
        if len(cells) < MIN_COLUMNS:
            logger.debug(f"Skipping row {index}: {len(cells)} columns")
            continue
        parsed.append((index, [cell.get_text().strip() for cell in cells[:MIN_COLUMNS]]))

    logger.info(f"Parsed {len(parsed)} campaign rows out of {len(rows)} table rows")
    return parsed
