"""Who may see a game's results, and when.

Nothing here is stored: a game is revealed purely because its reveal
timestamp is at or before ``now``, recomputed on every call.
"""
from datetime import datetime
from typing import Optional

from .errors import Unauthorized


def is_revealed(reveal_at: Optional[datetime], now: datetime) -> bool:
    return reveal_at is not None and reveal_at <= now


def is_owner(game, user_id) -> bool:
    return game.owner_id == user_id


def can_view_results(game, user_id) -> bool:
    return is_owner(game, user_id) or user_id in game.participant_ids


def check_results_access(game, user_id, now: datetime) -> bool:
    """Raise ``Unauthorized`` unless ``user_id`` may read results right now.

    Returns whether the game is revealed so callers need not re-read the clock.
    """
    if not can_view_results(game, user_id):
        raise Unauthorized('You do not have access to this game.')
    revealed = is_revealed(game.reveal_at, now)
    if not revealed and not is_owner(game, user_id):
        raise Unauthorized('Results are not available yet.')
    return revealed
