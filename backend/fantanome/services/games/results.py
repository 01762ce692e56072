from datetime import datetime

from . import store
from .leaderboard import build_leaderboard
from .reveal import check_results_access


def game_results(game_id, user_id, now: datetime) -> dict:
    """Results payload for ``GET /games/<id>/victory``.

    Access and reveal timing are checked before any submission is loaded;
    scoring and ranking run on the loaded snapshot.
    """
    game = store.find_game(game_id)
    revealed = check_results_access(game, user_id, now)
    return build_leaderboard(store.find_submissions(game.id), revealed, owner_id=game.owner_id)
