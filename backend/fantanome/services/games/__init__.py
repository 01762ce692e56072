"""Game domain services: name scoring, leaderboard ranking, reveal gating
and invite codes.

The scoring and ranking modules are pure and take plain records; ``store``
is the only module here that talks to the database, keeping transport and
persistence concerns separated from the game rules.
"""
