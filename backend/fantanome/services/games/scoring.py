from dataclasses import dataclass, field
from typing import List, Sequence

EXACT_MATCH_POINTS = 10
ORDER_MATCH_POINTS = 5


def normalize(name: str) -> str:
    """Canonical form used to compare names: trimmed and case-folded."""
    return name.strip().lower()


@dataclass(frozen=True)
class OrderMatch:
    name: str
    guessed_position: int
    actual_position: int

    def to_dict(self):
        return {
            'name': self.name,
            'guessedPosition': self.guessed_position,
            'actualPosition': self.actual_position,
        }


@dataclass(frozen=True)
class ScoreBreakdown:
    exact_matches: int = 0
    order_matches: List[OrderMatch] = field(default_factory=list)

    @property
    def score(self) -> int:
        return EXACT_MATCH_POINTS * self.exact_matches + ORDER_MATCH_POINTS * len(self.order_matches)


def score_guess(parent_preferences: Sequence[str], guess: Sequence[str]) -> ScoreBreakdown:
    """Score one guess list against the parent's ordered preferences.

    A guessed name scores an exact match when it sits at the same index as
    its first occurrence in the preferences, an order match when it sits
    elsewhere, and nothing when absent. Preference slots are not consumed,
    so a name repeated in the guess can be credited more than once.
    Positions in order matches are 1-based.
    """
    normalized_prefs = [normalize(p) for p in parent_preferences]
    exact = 0
    order_matches = []
    for guessed_idx, raw in enumerate(guess):
        target = normalize(raw)
        try:
            actual_idx = normalized_prefs.index(target)
        except ValueError:
            continue
        if actual_idx == guessed_idx:
            exact += 1
        else:
            order_matches.append(OrderMatch(
                name=raw,
                guessed_position=guessed_idx + 1,
                actual_position=actual_idx + 1,
            ))
    return ScoreBreakdown(exact_matches=exact, order_matches=order_matches)
