import re
from datetime import datetime, timedelta, timezone

import pytest

from lasertag import db
from lasertag.errors import ConflictError, NotFoundError, ValidationError
from lasertag.models import Match
from lasertag.services import matches as match_store

GAME_ID_PATTERN = re.compile(r'^game_\d+_\d+$')


def test_create_match_defaults(flask_app):
    match = match_store.create_match('Alice', 'Bob')
    assert match.status == 'in_progress'
    assert match.player1_score == 0
    assert match.player2_score == 0
    assert match.winner is None
    assert match.ended_at is None
    assert GAME_ID_PATTERN.match(match.game_id)
    assert match.id and match.id != match.game_id


@pytest.mark.parametrize('p1,p2', [('', 'B'), ('A', ''), (None, 'B'), ('A', '  ')])
def test_create_match_requires_both_names(flask_app, p1, p2):
    with pytest.raises(ValidationError):
        match_store.create_match(p1, p2)
    assert Match.query.count() == 0


def test_update_score_applies_only_supplied_fields(flask_app):
    match = match_store.create_match('Alice', 'Bob')
    match_store.update_score(match.game_id, player1_score=3)
    updated = match_store.update_score(match.game_id, player2_score=5)
    assert (updated.player1_score, updated.player2_score) == (3, 5)
    # Zero is a real value, not "missing"
    updated = match_store.update_score(match.game_id, player1_score=0)
    assert (updated.player1_score, updated.player2_score) == (0, 5)


@pytest.mark.parametrize('bad', ['3', -1, 2.5, True, 2 ** 31, 2 ** 70])
def test_update_score_rejects_bad_values(flask_app, bad):
    match = match_store.create_match('Alice', 'Bob')
    with pytest.raises(ValidationError):
        match_store.update_score(match.game_id, player1_score=bad)


def test_update_score_unknown_game(flask_app):
    with pytest.raises(NotFoundError):
        match_store.update_score('game_0_0', player1_score=1)


def test_update_score_after_finish_is_allowed(flask_app):
    match = match_store.create_match('Alice', 'Bob')
    match_store.end_match(match.game_id, 'Alice', 2, 1)
    updated = match_store.update_score(match.game_id, player1_score=7, player2_score=8)
    assert updated.status == 'finished'
    assert (updated.player1_score, updated.player2_score) == (7, 8)


def test_update_score_after_finish_rejected_when_strict(strict_app):
    match = match_store.create_match('Alice', 'Bob')
    match_store.end_match(match.game_id, 'Alice', 2, 1)
    with pytest.raises(ConflictError):
        match_store.update_score(match.game_id, player1_score=7)
    assert match_store.get_by_game_id(match.game_id).player1_score == 2


def test_end_match_sets_outcome(flask_app):
    match = match_store.create_match('Alice', 'Bob')
    ended = match_store.end_match(match.game_id, 'Bob', player2_score=4)
    assert ended.status == 'finished'
    assert ended.winner == 'Bob'
    assert ended.player1_score == 0
    assert ended.player2_score == 4
    assert ended.ended_at is not None


def test_end_match_twice_last_write_wins(flask_app):
    match = match_store.create_match('Alice', 'Bob')
    match_store.end_match(match.game_id, 'Alice')
    ended = match_store.end_match(match.game_id, 'Bob')
    assert ended.winner == 'Bob'
    assert ended.status == 'finished'


def test_end_match_twice_rejected_when_strict(strict_app):
    match = match_store.create_match('Alice', 'Bob')
    match_store.end_match(match.game_id, 'Alice')
    with pytest.raises(ConflictError):
        match_store.end_match(match.game_id, 'Bob')
    assert match_store.get_by_game_id(match.game_id).winner == 'Alice'


def test_end_match_validation(flask_app):
    match = match_store.create_match('Alice', 'Bob')
    with pytest.raises(ValidationError):
        match_store.end_match(match.game_id, '')
    with pytest.raises(NotFoundError):
        match_store.end_match('game_0_0', 'Alice')


def test_finish_match_keeps_existing_outcome(flask_app):
    match = match_store.create_match('Alice', 'Bob')
    finished = match_store.finish_match(match.game_id)
    assert finished.status == 'finished'
    assert finished.winner is None

    other = match_store.create_match('Cara', 'Dan')
    ended = match_store.end_match(other.game_id, 'Dan')
    ended_at = ended.ended_at
    again = match_store.finish_match(other.game_id)
    assert again.winner == 'Dan'
    assert again.ended_at == ended_at


def test_list_finished_newest_first(flask_app):
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for i, names in enumerate([('A', 'B'), ('C', 'D'), ('E', 'F')]):
        m = match_store.create_match(*names)
        m.started_at = base + timedelta(minutes=i)
        db.session.commit()
        match_store.end_match(m.game_id, names[0])
    match_store.create_match('Still', 'Playing')

    finished = match_store.list_finished()
    assert [m.player1_name for m in finished] == ['E', 'C', 'A']
    assert all(m.status == 'finished' for m in finished)
    started = [m.started_at for m in finished]
    assert started == sorted(started, reverse=True)


def test_get_by_game_id(flask_app):
    match = match_store.create_match('Alice', 'Bob')
    assert match_store.get_by_game_id(match.game_id).id == match.id
    with pytest.raises(NotFoundError):
        match_store.get_by_game_id('game_0_0')


def test_score_upper_bound_is_inclusive(flask_app):
    match = match_store.create_match('Alice', 'Bob')
    updated = match_store.update_score(match.game_id, player2_score=match_store.MAX_SCORE)
    assert updated.player2_score == 2 ** 31 - 1
    with pytest.raises(ValidationError):
        match_store.end_match(match.game_id, 'Bob', player1_score=match_store.MAX_SCORE + 1)
    assert match_store.get_by_game_id(match.game_id).status == 'in_progress'


def test_names_have_no_length_limit(flask_app):
    long_name = 'x' * 500
    match = match_store.create_match(long_name, 'Bob')
    ended = match_store.end_match(match.game_id, long_name)
    assert ended.player1_name == long_name
    assert ended.winner == long_name
    for column in ('player1_name', 'player2_name', 'winner'):
        assert isinstance(Match.__table__.c[column].type, db.Text)
