from datetime import datetime, timezone

from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError

from fantanome import db
from fantanome.models import Game, User, new_invite_code
from fantanome.services.games.errors import (
    Conflict, GameError, TransientGenerationFailure, Unauthorized, ValidationError,
)
from fantanome.services.games.invite import normalize_invite_code
from fantanome.services.games.results import game_results
from fantanome.services.games.store import load_game


games = Blueprint('games', __name__)


def _now():
    return current_app.config['CLOCK']()


def _member_game_or_403(game_id) -> Game:
    game = load_game(game_id)
    if not game.has_member(current_user.id):
        raise Unauthorized('You do not have access to this game.')
    return game


def _owned_game_or_403(game_id, action) -> Game:
    game = load_game(game_id)
    if game.owner_id != current_user.id:
        raise Unauthorized(f'Only the game owner can {action}.')
    return game


def _assign_invite_code(game: Game, reason: str) -> None:
    try:
        game.invite_code = new_invite_code()
    except TransientGenerationFailure:
        current_app.logger.error(f"[invite-code] exhausted retries while trying to {reason} owner={current_user.id}")
        raise


def _commit_with_unique_code(game: Game, reason: str) -> None:
    """Commit ``game``, drawing a new invite code if a concurrent request took it.

    A code that was free when generated can be claimed by another game
    before this commit; the unique index then rejects the flush.
    """
    attempts = int(current_app.config.get('INVITE_CODE_MAX_ATTEMPTS', 12))
    for attempt in range(1, attempts + 1):
        db.session.add(game)
        try:
            db.session.commit()
            return
        except IntegrityError:
            db.session.rollback()
            current_app.logger.warning(f"[invite-code] collision on commit attempt={attempt} while trying to {reason}")
            _assign_invite_code(game, reason)
    current_app.logger.error(f"[invite-code] exhausted commit retries while trying to {reason} owner={current_user.id}")
    raise TransientGenerationFailure()


def parse_reveal_at(value):
    """ISO-8601 string (or None) to naive UTC datetime."""
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise ValidationError('revealAt must be an ISO-8601 string or null.')
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError('revealAt must be an ISO-8601 string or null.')
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


@games.route('', methods=['POST'])
@login_required
def create_game():
    """Create a game owned by the current parent, who also joins it."""
    if not current_user.is_parent:
        raise Unauthorized('Only parents can create a new game.')
    data = request.get_json(silent=True) or {}
    name = (data.get('name') or '').strip()
    description = (data.get('description') or '').strip() or None
    if not name:
        return jsonify({'error': 'Game name is required'}), 400

    duplicate = Game.query.filter(
        Game.owner_id == current_user.id, func.lower(Game.name) == name.lower()
    ).first()
    if duplicate:
        raise Conflict('You already created a game with this name. Pick another one.')

    try:
        new_game = Game(name=name, description=description, owner_id=current_user.id)
    except TransientGenerationFailure:
        current_app.logger.error(f"[invite-code] exhausted retries while creating a game owner={current_user.id}")
        raise
    new_game.participants.append(current_user._get_current_object())
    _commit_with_unique_code(new_game, 'create a game')
    current_app.logger.info(f"[game-create] game={new_game.id} owner={current_user.id}")
    return jsonify(new_game.to_dict()), 201


@games.route('', methods=['GET'])
@login_required
def list_games():
    owned_or_joined = Game.query.filter(
        or_(
            Game.owner_id == current_user.id,
            Game.participants.any(User.id == current_user.id),
        )
    ).order_by(Game.created_at.desc(), Game.id.desc()).all()
    return jsonify([g.to_dict() for g in owned_or_joined])


@games.route('/<int:game_id>', methods=['GET'])
@login_required
def get_game(game_id):
    game = _member_game_or_403(game_id)
    return jsonify(game.to_dict())


@games.route('/validate', methods=['GET'])
def validate_invite_code():
    code = normalize_invite_code(request.args.get('code'))
    if not code:
        return jsonify({'error': 'Invite code is required'}), 400
    game = Game.query.filter_by(invite_code=code).first()
    if not game:
        return jsonify({'valid': False})
    return jsonify({'valid': True, 'name': game.name})


@games.route('/join', methods=['POST'])
@login_required
def join_game():
    """Join by invite code. Joining a game twice is a no-op."""
    data = request.get_json(silent=True) or {}
    code = normalize_invite_code(data.get('inviteCode'))
    if not code:
        return jsonify({'error': 'Invite code is required'}), 400

    game = Game.query.filter_by(invite_code=code).first()
    if not game:
        return jsonify({'error': 'Invalid invite code'}), 404

    if not game.has_member(current_user.id):
        game.participants.append(current_user._get_current_object())
        db.session.add(game)
        db.session.commit()
        current_app.logger.info(f"[game-join] game={game.id} user={current_user.id}")
    return jsonify(game.to_dict())


@games.route('/<int:game_id>/regenerate-invite', methods=['POST'])
@login_required
def regenerate_invite(game_id):
    game = _owned_game_or_403(game_id, 'regenerate the invite code')
    _assign_invite_code(game, 'regenerate an invite code')
    _commit_with_unique_code(game, 'regenerate an invite code')
    return jsonify(game.to_dict())


@games.route('/<int:game_id>/reveal', methods=['PUT'])
@login_required
def set_reveal_at(game_id):
    game = _owned_game_or_403(game_id, 'change the reveal date')
    data = request.get_json(silent=True) or {}
    if 'revealAt' not in data:
        return jsonify({'error': 'revealAt is required (use null to clear it)'}), 400
    game.reveal_at = parse_reveal_at(data.get('revealAt'))
    db.session.add(game)
    db.session.commit()
    current_app.logger.info(f"[game-reveal] game={game.id} reveal_at={game.reveal_at}")
    return jsonify(game.to_dict())


@games.route('/<int:game_id>', methods=['DELETE'])
@login_required
def delete_game(game_id):
    game = _owned_game_or_403(game_id, 'delete it')
    payload = game.to_dict()
    db.session.delete(game)
    db.session.commit()
    current_app.logger.info(f"[game-delete] game={payload['id']} owner={current_user.id}")
    return jsonify(payload)


@games.route('/<int:game_id>/victory', methods=['GET'])
@login_required
def victory(game_id):
    """Ranked guesses against the parent's preferences."""
    try:
        result = game_results(game_id, current_user.id, _now())
    except GameError:
        raise
    except Exception:
        current_app.logger.exception(f"[victory] failed to compute results game={game_id}")
        return jsonify({'error': 'Could not compute the results. Please try again later.'}), 500
    current_app.logger.info(
        f"[victory] game={game_id} user={current_user.id} revealed={result['gameRevealed']} winners={len(result['winners'])}"
    )
    return jsonify(result)
