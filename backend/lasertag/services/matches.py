from datetime import datetime, timezone
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from lasertag import db
from lasertag.errors import ConflictError, NotFoundError, StoreError, ValidationError
from lasertag.models import Match, STATUS_FINISHED

# Scores live in a 32-bit INTEGER column
MAX_SCORE = 2147483647


def _strict() -> bool:
    return bool(current_app.config.get('STRICT_MATCH_LIFECYCLE', False))


def _require_name(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{field} is required')
    return value.strip()


def _optional_score(value, field: str) -> Optional[int]:
    # None means "not supplied"; 0 is a real score
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f'{field} must be an integer')
    if value < 0:
        raise ValidationError(f'{field} must not be negative')
    if value > MAX_SCORE:
        raise ValidationError(f'{field} must not exceed {MAX_SCORE}')
    return value


def _commit(action: str, game_id: Optional[str] = None) -> None:
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception(f"[store-error] action={action} game={game_id}")
        raise StoreError() from exc


def _load(game_id: Optional[str]) -> Match:
    if not game_id:
        raise ValidationError('gameId is required')
    try:
        match = Match.query.filter_by(game_id=game_id).first()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception(f"[store-error] action=fetch game={game_id}")
        raise StoreError() from exc
    if match is None:
        raise NotFoundError()
    return match


def _apply_scores(match: Match, player1_score, player2_score) -> None:
    p1 = _optional_score(player1_score, 'player1Score')
    p2 = _optional_score(player2_score, 'player2Score')
    if p1 is not None:
        match.player1_score = p1
    if p2 is not None:
        match.player2_score = p2


def create_match(player1_name, player2_name) -> Match:
    """Insert a new in-progress match for two players."""
    if not (isinstance(player1_name, str) and player1_name.strip()) or \
            not (isinstance(player2_name, str) and player2_name.strip()):
        raise ValidationError('player1Name and player2Name are required')
    try:
        match = Match(player1_name=player1_name.strip(), player2_name=player2_name.strip())
        db.session.add(match)
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("[store-error] action=create")
        raise StoreError() from exc
    _commit('create', match.game_id)
    current_app.logger.info(
        f"[match-start] game={match.game_id} p1={match.player1_name!r} p2={match.player2_name!r}"
    )
    return match


def update_score(game_id, player1_score=None, player2_score=None) -> Match:
    """Apply whichever scores were supplied.

    A finished match still accepts writes unless STRICT_MATCH_LIFECYCLE is set.
    """
    match = _load(game_id)
    if _strict() and match.is_finished:
        raise ConflictError('Match is already finished')
    _apply_scores(match, player1_score, player2_score)
    _commit('score', game_id)
    current_app.logger.info(
        f"[match-score] game={game_id} score={match.player1_score}-{match.player2_score}"
    )
    return match


def end_match(game_id, winner, player1_score=None, player2_score=None) -> Match:
    """Finish a match with a winner and optional final scores.

    Without STRICT_MATCH_LIFECYCLE a second call simply overwrites the first.
    """
    winner = _require_name(winner, 'winner')
    match = _load(game_id)
    if _strict() and match.is_finished:
        raise ConflictError('Match is already finished')
    _apply_scores(match, player1_score, player2_score)
    match.winner = winner
    match.status = STATUS_FINISHED
    match.ended_at = datetime.now(timezone.utc)
    _commit('end', game_id)
    current_app.logger.info(
        f"[match-end] game={game_id} winner={winner!r} score={match.player1_score}-{match.player2_score}"
    )
    return match


def finish_match(game_id) -> Match:
    """Mark a match finished without naming a winner. Already finished matches are left alone."""
    match = _load(game_id)
    if match.is_finished:
        return match
    match.status = STATUS_FINISHED
    match.ended_at = datetime.now(timezone.utc)
    _commit('finish', game_id)
    current_app.logger.info(f"[match-finish] game={game_id}")
    return match


def list_finished() -> List[Match]:
    try:
        return (
            Match.query.filter_by(status=STATUS_FINISHED)
            .order_by(Match.started_at.desc())
            .all()
        )
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("[store-error] action=list")
        raise StoreError() from exc


def get_by_game_id(game_id) -> Match:
    return _load(game_id)
