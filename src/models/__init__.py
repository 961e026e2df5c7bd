"""
Data Models Module
----------------
Contains Pydantic models for data validation and serialization.
Defines the structure of campaign records and API response bodies, using the
camelCase field names the API exposes.
"""
