"""
API Module
---------
Provides the read-only RESTful endpoint for NBTS blood donation campaigns using FastAPI.
Features include:
- Listing scraped campaigns with coordinates
- Filtering and sorting campaigns by distance from a given location
"""
