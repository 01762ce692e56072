import random

from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user

from fantanome.models import NameSubmission, USER_TYPES
from fantanome.services.games import store
from fantanome.services.games.errors import Unauthorized, ValidationError
from fantanome.services.games.leaderboard import pick_parent_preference
from fantanome.services.games.reveal import is_revealed


submissions = Blueprint('submissions', __name__)


def _member_game_or_403(game_id):
    game = store.load_game(game_id)
    if not game.has_member(current_user.id):
        raise Unauthorized('You do not have access to this game.')
    return game


def clean_names(raw):
    """Trimmed, non-blank names in their submitted order."""
    if not isinstance(raw, list):
        raise ValidationError('names must be a list of strings.')
    cleaned = []
    for name in raw:
        if not isinstance(name, str):
            raise ValidationError('names must be a list of strings.')
        if name.strip():
            cleaned.append(name.strip())
    return cleaned


@submissions.route('/<int:game_id>/submissions', methods=['POST'])
@login_required
def save_submission(game_id):
    """Create or replace the caller's name list for this game."""
    game = _member_game_or_403(game_id)
    if is_revealed(game.reveal_at, current_app.config['CLOCK']()):
        raise Unauthorized('Names can no longer be changed after the reveal date.')

    data = request.get_json(silent=True) or {}
    names = clean_names(data.get('names'))
    min_names = int(current_app.config.get('MIN_PREFERENCE_NAMES', 1))
    if len(names) < min_names:
        return jsonify({'error': f'At least {min_names} name(s) required'}), 400

    submitter_type = data.get('submitterType')
    if submitter_type not in USER_TYPES:
        return jsonify({'error': 'submitterType must be "parent" or "participant"'}), 400
    # The answer key belongs to the game owner alone; other parent-role
    # members may only guess
    if submitter_type == 'parent' and game.owner_id != current_user.id:
        raise Unauthorized('Only the game owner can submit the parent list.')
    is_parent_preference = bool(data.get('isParentPreference', False))
    if is_parent_preference and submitter_type != 'parent':
        return jsonify({'error': 'Only a parent submission can be the preference list'}), 400

    submission, created = store.save_submission(
        game.id, current_user.id, names, submitter_type, is_parent_preference
    )
    current_app.logger.info(
        f"[submission] game={game.id} user={current_user.id} type={submitter_type} names={len(names)} created={created}"
    )
    return jsonify(submission.to_dict()), 201 if created else 200


@submissions.route('/<int:game_id>/submissions', methods=['GET'])
@login_required
def list_own_submissions(game_id):
    game = _member_game_or_403(game_id)
    own = (
        NameSubmission.query.filter_by(game_id=game.id, submitter_id=current_user.id)
        .order_by(NameSubmission.created_at.asc())
        .all()
    )
    return jsonify([s.to_dict() for s in own])


@submissions.route('/<int:game_id>/parent-names', methods=['GET'])
@login_required
def parent_names(game_id):
    """The parent's candidate names; shuffled unless the caller owns the game."""
    game = _member_game_or_403(game_id)
    preference = pick_parent_preference(store.find_submissions(game.id), owner_id=game.owner_id)
    if preference is None:
        return jsonify({'names': [], 'hasParentSubmission': False})
    names = list(preference.names)
    if game.owner_id != current_user.id:
        random.shuffle(names)
    return jsonify({'names': names, 'hasParentSubmission': True})
