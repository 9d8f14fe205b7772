"""
account_opening.api.routers

HTTP routers grouped by audience (auth, advisor, director) plus health probes.
"""
