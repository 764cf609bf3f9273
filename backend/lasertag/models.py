from lasertag import db
from datetime import datetime, timezone
import random
import time
import uuid

STATUS_IN_PROGRESS = 'in_progress'
STATUS_FINISHED = 'finished'


def _utcnow():
    return datetime.now(timezone.utc)


def _isoformat(value):
    if value is None:
        return None
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat().replace('+00:00', 'Z')


def generate_game_id():
    """Generate a unique external game id of the form game_<epoch ms>_<random>."""
    while True:
        game_id = f"game_{int(time.time() * 1000)}_{random.randint(0, 999999)}"
        if not Match.query.filter_by(game_id=game_id).first():
            return game_id


class Match(db.Model):
    __tablename__ = 'match'
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    game_id = db.Column(db.String(64), unique=True, nullable=False, index=True)
    player1_name = db.Column(db.Text, nullable=False)
    player2_name = db.Column(db.Text, nullable=False)
    player1_score = db.Column(db.Integer, default=0, nullable=False)
    player2_score = db.Column(db.Integer, default=0, nullable=False)
    winner = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(32), default=STATUS_IN_PROGRESS, nullable=False, index=True)  # in_progress, finished
    started_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    ended_at = db.Column(db.DateTime(timezone=True), nullable=True)

    def __init__(self, **kwargs):
        super(Match, self).__init__(**kwargs)
        if not self.game_id:
            self.game_id = generate_game_id()
        if self.player1_score is None:
            self.player1_score = 0
        if self.player2_score is None:
            self.player2_score = 0
        if not self.status:
            self.status = STATUS_IN_PROGRESS
        if self.started_at is None:
            self.started_at = _utcnow()

    @property
    def is_finished(self):
        return self.status == STATUS_FINISHED

    def to_dict(self):
        return {
            'id': self.id,
            'gameId': self.game_id,
            'player1Name': self.player1_name,
            'player2Name': self.player2_name,
            'player1Score': self.player1_score,
            'player2Score': self.player2_score,
            'winner': self.winner,
            'status': self.status,
            'startedAt': _isoformat(self.started_at),
            'endedAt': _isoformat(self.ended_at),
        }
