"""
account_opening.api

API package for the Account Opening service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring, error mapping, and response models.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request validation + auth + delegation to services.
