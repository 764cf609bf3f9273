from datetime import datetime, timezone

from flask import Blueprint, jsonify

from lasertag.services import matches as match_store

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the laser tag match server!'})


@main.route('/health')
def health():
    timestamp = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
    return jsonify({'status': 'ok', 'timestamp': timestamp})


@main.route('/matches')
def list_matches():
    """Finished matches for the history view, newest first."""
    return jsonify([m.to_dict() for m in match_store.list_finished()])
