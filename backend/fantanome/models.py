from fantanome import db, bcrypt
from flask import current_app
from flask_login import UserMixin
import json

from fantanome.services.games.invite import INVITE_LENGTH, generate_invite_code

USER_TYPES = ('parent', 'participant')


def clock_now():
    """Naive UTC now from the app's configured clock."""
    return current_app.config['CLOCK']()

game_participant = db.Table(
    'game_participant',
    db.Column('game_id', db.Integer, db.ForeignKey('game.id', ondelete='CASCADE'), primary_key=True),
    db.Column('user_id', db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), primary_key=True),
)


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    first_name = db.Column(db.String(64), nullable=True)
    last_name = db.Column(db.String(64), nullable=True)
    user_type = db.Column(db.String(16), nullable=False, default='participant')  # parent, participant

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    @property
    def is_parent(self):
        return self.user_type == 'parent'

    def to_public_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
        }

    def to_dict(self):
        data = self.to_public_dict()
        data['userType'] = self.user_type
        return data


def invite_code_taken(code):
    return Game.query.filter_by(invite_code=code).first() is not None


def new_invite_code():
    """Generate an invite code no other game currently holds."""
    return generate_invite_code(
        invite_code_taken,
        max_attempts=int(current_app.config.get('INVITE_CODE_MAX_ATTEMPTS', 12)),
    )


class Game(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    description = db.Column(db.Text, nullable=True)
    invite_code = db.Column(db.String(INVITE_LENGTH), unique=True, index=True, nullable=False)
    reveal_at = db.Column(db.DateTime, nullable=True)  # naive UTC
    created_at = db.Column(db.DateTime, nullable=False, default=clock_now)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    owner = db.relationship('User', foreign_keys=[owner_id])
    participants = db.relationship('User', secondary=game_participant, lazy='subquery')
    submissions = db.relationship(
        'NameSubmission', back_populates='game', cascade='all, delete-orphan'
    )

    def __init__(self, **kwargs):
        super(Game, self).__init__(**kwargs)
        if not self.invite_code:
            self.invite_code = new_invite_code()

    def has_member(self, user_id):
        return self.owner_id == user_id or any(p.id == user_id for p in self.participants)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'inviteCode': self.invite_code,
            'revealAt': self.reveal_at.isoformat() if self.reveal_at else None,
            'owner': self.owner.to_dict() if self.owner else None,
            'participants': [p.to_dict() for p in self.participants],
        }


class NameSubmission(db.Model):
    __tablename__ = 'name_submission'
    __table_args__ = (
        db.UniqueConstraint('game_id', 'submitter_id', name='uq_name_submission_game_submitter'),
    )
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id', ondelete='CASCADE'), nullable=False, index=True)
    submitter_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    names_json = db.Column(db.Text, nullable=False, default='[]')  # JSON-encoded list of names
    submitter_type = db.Column(db.String(16), nullable=False)  # parent, participant
    is_parent_preference = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=clock_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=clock_now, onupdate=clock_now)

    game = db.relationship('Game', back_populates='submissions')
    submitter = db.relationship('User')

    @property
    def names(self):
        try:
            loaded = json.loads(self.names_json) if self.names_json else []
        except ValueError:
            return []
        return [n for n in loaded if isinstance(n, str)]

    @names.setter
    def names(self, value):
        self.names_json = json.dumps(list(value))

    def to_dict(self):
        return {
            'id': self.id,
            'gameId': self.game_id,
            'submitterId': self.submitter_id,
            'names': self.names,
            'submitterType': self.submitter_type,
            'isParentPreference': self.is_parent_preference,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
