"""
account_opening.services

Service layer (transaction owners).

Responsibilities:
- Role directory, request lifecycle, artifacts, and user administration.
- Own commit boundaries; repositories never commit.
"""

# Package marker.
