import requests
import logging
import concurrent.futures
from typing import Optional, Dict, List
from threading import Lock

from src.models.campaign import Coordinates

# Constants
NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"
USER_AGENT = "FYP-BloodDonation-App"
REQUEST_TIMEOUT = 10
DEFAULT_MAX_WORKERS = 1

# Get logger
logger = logging.getLogger(__name__)


class GeocodeCache:
    """
    Process-lifetime memo of normalized location -> coordinates.

    Keys are compared as exact strings and entries are never evicted. The lock
    only keeps reads and writes consistent; two threads missing on the same key
    will both query Nominatim and store the same value.
    """

    def __init__(self):
        self._entries: Dict[str, Coordinates] = {}
        self._lock = Lock()

    def get(self, location: str) -> Optional[Coordinates]:
        with self._lock:
            return self._entries.get(location)

    def set(self, location: str, coords: Coordinates) -> None:
        with self._lock:
            self._entries[location] = coords

    def __contains__(self, location):
        with self._lock:
            return location in self._entries

    def __len__(self):
        with self._lock:
            return len(self._entries)


class NominatimGeocoder:
    def __init__(self, cache: GeocodeCache, session=None):
        self.cache = cache
        self.session = session or requests.Session()

    def geocode(self, location: str) -> Optional[Coordinates]:
        """
        Resolve a normalized location string to coordinates.

        Returns None when Nominatim has no match or the lookup fails for any
        reason. Failures are logged here and never raised to the caller.
        """
        # Check cache first to avoid redundant API calls
        cached = self.cache.get(location)
        if cached is not None:
            return cached

        if not location:
            return None

        params = {
            "q": location,
            "format": "json",
            "limit": 1,
        }

        headers = {
            "User-Agent": USER_AGENT
        }

        try:
            response = self.session.get(
                NOMINATIM_SEARCH_URL,
                params=params,
                headers=headers,
                timeout=REQUEST_TIMEOUT
            )

            if response.status_code != 200:
                logger.warning(f"Geocoding HTTP error ({response.status_code}) for location '{location}'")
                return None

            data = response.json()
            if not data:
                logger.warning(f"No coordinates found for location '{location}'")
                return None

            candidate = data[0]
            coords = Coordinates(
                latitude=float(candidate["lat"]),
                longitude=float(candidate["lon"])
            )
        except requests.RequestException as e:
            logger.error(f"Geocoding failed for location '{location}': {e}")
            return None
        except Exception as e:
            logger.error(f"Unexpected error during geocoding of '{location}': {e}")
            return None

        self.cache.set(location, coords)
        logger.info(f"Successfully geocoded location '{location}'")
        return coords

    def batch_geocode(self, locations: List[str], max_workers=DEFAULT_MAX_WORKERS) -> Dict[str, Optional[Coordinates]]:
        """
        Geocode several locations through a thread pool.

        Each distinct location is looked up once per batch.

        Args:
            locations: Normalized location strings, duplicates allowed
            max_workers: Number of parallel lookups (default: 1, Nominatim allows one request per second)

        Returns:
            Dict mapping each location to its coordinates, or None when unresolved
        """
        unique_locations = list(dict.fromkeys(locations))
        results = {}
        success_count = 0

        if not unique_locations:
            return results

        logger.info(f"Geocoding {len(unique_locations)} distinct locations with {max_workers} workers")

        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_location = {
                executor.submit(self.geocode, location): location
                for location in unique_locations
            }

            for future in concurrent.futures.as_completed(future_to_location):
                location = future_to_location[future]
                coords = future.result()
                results[location] = coords
                if coords is not None:
                    success_count += 1

        logger.info(f"Batch geocoding resolved {success_count}/{len(unique_locations)} locations")
        return results
