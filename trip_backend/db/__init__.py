"""
Data access for users and trips.

Responsibilities:
- Define the read interfaces the recommendation engine depends on.
- Serve user and trip documents from MongoDB.
- Provide in-memory stores for tests and local runs.
"""
