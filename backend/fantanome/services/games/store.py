from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from fantanome import db
from fantanome.models import Game, NameSubmission
from .errors import NotFound


@dataclass(frozen=True)
class GameRecord:
    id: int
    owner_id: int
    participant_ids: frozenset = field(default_factory=frozenset)
    reveal_at: Optional[datetime] = None


@dataclass(frozen=True)
class SubmissionRecord:
    id: int
    submitter_id: int
    role: str
    is_parent_preference: bool
    names: Tuple[str, ...]
    created_at: Optional[datetime] = None
    submitter: dict = field(default_factory=dict)


def load_game(game_id) -> Game:
    game = db.session.get(Game, game_id)
    if game is None:
        raise NotFound('Game not found.')
    return game


def find_game(game_id) -> GameRecord:
    game = load_game(game_id)
    return GameRecord(
        id=game.id,
        owner_id=game.owner_id,
        participant_ids=frozenset(p.id for p in game.participants),
        reveal_at=game.reveal_at,
    )


def find_submissions(game_id) -> List[SubmissionRecord]:
    """All submissions for a game, oldest first (ties broken by id)."""
    rows = (
        NameSubmission.query.filter_by(game_id=game_id)
        .order_by(NameSubmission.created_at.asc(), NameSubmission.id.asc())
        .all()
    )
    return [
        SubmissionRecord(
            id=row.id,
            submitter_id=row.submitter_id,
            role=row.submitter_type,
            is_parent_preference=bool(row.is_parent_preference),
            names=tuple(row.names),
            created_at=row.created_at,
            submitter=row.submitter.to_public_dict() if row.submitter else {},
        )
        for row in rows
    ]


def save_submission(game_id, submitter_id, names, role, is_parent_preference=False):
    """Create or wholesale-replace the (game, submitter) submission.

    Returns ``(submission, created)``.
    """
    submission = NameSubmission.query.filter_by(game_id=game_id, submitter_id=submitter_id).first()
    created = submission is None
    if created:
        submission = NameSubmission(game_id=game_id, submitter_id=submitter_id)
    _apply(submission, names, role, is_parent_preference)
    db.session.add(submission)
    try:
        db.session.commit()
    except IntegrityError:
        # A concurrent first save won the insert; overwrite that row instead
        db.session.rollback()
        if not created:
            raise
        submission = NameSubmission.query.filter_by(game_id=game_id, submitter_id=submitter_id).one()
        created = False
        _apply(submission, names, role, is_parent_preference)
        db.session.commit()
    return submission, created


def _apply(submission, names, role, is_parent_preference):
    submission.names = list(names)
    submission.submitter_type = role
    submission.is_parent_preference = bool(is_parent_preference)
