"""
Trip recommendation engine.

Responsibilities:
- Score every active trip for a user on a 0-100 scale from seven factors
  (altitude sickness, difficulty, interests, distance, rating, budget, duration).
- Attach the score and its per-factor breakdown to each trip.
- Return trips ranked best first, cached per user and query for five minutes.
"""
