"""
Geocoding Module
--------------
Handles forward geocoding of campaign locations to geographic coordinates.
Normalizes raw blood bank names into searchable place names, resolves them
through OpenStreetMap's Nominatim API with an in-process cache, and measures
great-circle distances between coordinates.
"""
