from typing import Iterable, List, Optional, Sequence

from .scoring import score_guess

PREFERENCES_UNSET_MESSAGE = 'The parent has not finished choosing their favourite names yet.'
NO_GUESSES_MESSAGE = 'No player has submitted names yet. Wait for the participants to send their guesses.'


def _submission_order(sub):
    return (sub.created_at is None, sub.created_at, sub.id)


def pick_parent_preference(submissions: Iterable, owner_id=None) -> Optional[object]:
    """The authoritative preference list: the oldest flagged submission.

    With ``owner_id`` only the game owner's flagged lists are considered.

    More than one flagged submission is a data anomaly; taking the oldest
    keeps the answer stable whatever order the store returns rows in.
    """
    flagged = [
        s for s in submissions
        if s.is_parent_preference and (owner_id is None or s.submitter_id == owner_id)
    ]
    if not flagged:
        return None
    return min(flagged, key=_submission_order)


def rank_participants(parent_preferences: Sequence[str], submissions: Iterable) -> List[dict]:
    """Score every ``participant`` submission and sort by score descending.

    Equal scores keep submission order, so the earliest submission wins ties.
    """
    guesses = sorted((s for s in submissions if s.role == 'participant'), key=_submission_order)
    entries = []
    for sub in guesses:
        breakdown = score_guess(parent_preferences, sub.names)
        entries.append({
            'userId': sub.submitter_id,
            'user': dict(sub.submitter),
            'score': breakdown.score,
            'guessedNames': list(sub.names),
            'exactMatches': breakdown.exact_matches,
            'orderMatches': [m.to_dict() for m in breakdown.order_matches],
        })
    # list.sort is stable
    entries.sort(key=lambda e: e['score'], reverse=True)
    return entries


def build_leaderboard(submissions: Sequence, revealed: bool, owner_id=None) -> dict:
    submissions = list(submissions)
    preference = pick_parent_preference(submissions, owner_id)
    if preference is None:
        return {
            'winners': [],
            'parentPreferences': [],
            'gameRevealed': revealed,
            'preferencesSet': False,
            'message': PREFERENCES_UNSET_MESSAGE,
        }

    parent_preferences = list(preference.names)
    payload = {
        'winners': rank_participants(parent_preferences, submissions),
        'parentPreferences': parent_preferences if revealed else [],
        'gameRevealed': revealed,
        'preferencesSet': True,
    }
    if not payload['winners']:
        payload['message'] = NO_GUESSES_MESSAGE
    return payload
