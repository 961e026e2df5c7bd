"""
Scraper Module
------------
Fetches the NBTS mobile campaign listing, extracts its table rows and turns
them into geocoded campaign records, optionally narrowed to a search radius.
"""
