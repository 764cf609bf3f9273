from flask import Blueprint, jsonify, request, current_app
from lasertag import game_status
from lasertag.errors import ValidationError
from lasertag.services import matches as match_store


game = Blueprint('game', __name__)

CONTROL_ACTIONS = ('start', 'stop')


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@game.route('/start', methods=['POST'])
def start_match():
    data = _json_body()
    match = match_store.create_match(data.get('player1Name'), data.get('player2Name'))
    return jsonify({
        'gameId': match.game_id,
        'matchId': match.id,
    }), 201


@game.route('/score', methods=['POST'])
def update_score():
    data = _json_body()
    if not data.get('gameId'):
        return jsonify({'error': 'gameId is required'}), 400
    match = match_store.update_score(
        data['gameId'],
        player1_score=data.get('player1Score'),
        player2_score=data.get('player2Score'),
    )
    return jsonify({'ok': True, 'match': match.to_dict()})


@game.route('/end', methods=['POST'])
def end_match():
    data = _json_body()
    game_id = data.get('gameId')
    winner = data.get('winner')
    if not game_id or not winner:
        return jsonify({'error': 'gameId and winner are required'}), 400
    match = match_store.end_match(
        game_id,
        winner,
        player1_score=data.get('player1Score'),
        player2_score=data.get('player2Score'),
    )
    # The rig stops polling RUNNING once the match it was playing is over
    controller = game_status.controller
    current = controller.get_status()
    if current.is_running and current.game_id == game_id:
        controller.stop()
    return jsonify({'ok': True, 'match': match.to_dict()})


# Must stay above /<game_id> so "status" is not read as a game id
@game.route('/status', methods=['GET'])
def get_status():
    return jsonify(game_status.controller.get_status().to_dict())


@game.route('/control', methods=['POST'])
def control():
    data = _json_body()
    action = data.get('action')
    game_id = data.get('gameId')
    if action not in CONTROL_ACTIONS:
        raise ValidationError("action must be 'start' or 'stop'")

    controller = game_status.controller
    if action == 'start':
        if not game_id:
            raise ValidationError('gameId is required to start')
        state = controller.start(game_id)
        message = f'Game {game_id} started'
    else:
        state = controller.stop(game_id)
        message = 'Game stopped'
    current_app.logger.debug(f"[control] action={action} state={state.status}")
    return jsonify({'ok': True, 'message': message, 'gameStatus': state.to_dict()})


@game.route('/<string:game_id>', methods=['GET'])
def get_match(game_id):
    return jsonify(match_store.get_by_game_id(game_id).to_dict())
