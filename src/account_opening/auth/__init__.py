"""
account_opening.auth

Authentication/authorization package.

Responsibilities:
- Role catalog and normalization.
- Credential issuing (login) and verification (request gate).
- FastAPI auth dependencies (Principal + role allow-lists).
"""

# Package marker.
