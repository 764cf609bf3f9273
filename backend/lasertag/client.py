"""HTTP client for the match server.

Used by the operator console and by anything else that follows a match by
polling, the same way the wearable rig polls ``/game/status``.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'http://localhost:5000'


class ApiError(Exception):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f'{status_code}: {message}')


class LaserTagClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 10.0,
                 transport: Optional[httpx.BaseTransport] = None):
        self.client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={'Content-Type': 'application/json'},
        )

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self) -> None:
        self.client.close()

    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> Any:
        try:
            response = self.client.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            logger.error(f"Network error on {method} {path}: {exc}")
            raise
        if response.is_error:
            try:
                message = response.json().get('error') or response.reason_phrase
            except (ValueError, AttributeError):
                message = response.text or response.reason_phrase
            logger.error(f"API error on {method} {path}: {response.status_code} {message}")
            raise ApiError(response.status_code, message)
        return response.json()

    def start_game(self, player1_name: str, player2_name: str) -> Dict[str, str]:
        return self._request('POST', '/game/start', {
            'player1Name': player1_name,
            'player2Name': player2_name,
        })

    def get_game(self, game_id: str) -> Dict[str, Any]:
        return self._request('GET', f'/game/{game_id}')

    def get_matches(self) -> List[Dict[str, Any]]:
        return self._request('GET', '/matches')

    def update_score(self, game_id: str, player1_score: Optional[int] = None,
                     player2_score: Optional[int] = None) -> Dict[str, Any]:
        payload = {'gameId': game_id}
        if player1_score is not None:
            payload['player1Score'] = player1_score
        if player2_score is not None:
            payload['player2Score'] = player2_score
        return self._request('POST', '/game/score', payload)['match']

    def end_game(self, game_id: str, winner: str, player1_score: Optional[int] = None,
                 player2_score: Optional[int] = None) -> Dict[str, Any]:
        payload = {'gameId': game_id, 'winner': winner}
        if player1_score is not None:
            payload['player1Score'] = player1_score
        if player2_score is not None:
            payload['player2Score'] = player2_score
        return self._request('POST', '/game/end', payload)['match']

    def get_status(self) -> Dict[str, Optional[str]]:
        return self._request('GET', '/game/status')

    def control(self, action: str, game_id: Optional[str] = None) -> Dict[str, Any]:
        payload = {'action': action}
        if game_id is not None:
            payload['gameId'] = game_id
        return self._request('POST', '/game/control', payload)

    def health(self) -> Dict[str, str]:
        return self._request('GET', '/health')

    def watch_game(self, game_id: str, interval: float = 1.0,
                   on_update: Optional[Callable[[Dict[str, Any]], None]] = None,
                   max_polls: Optional[int] = None) -> Dict[str, Any]:
        """Poll a match until it is finished and return the last snapshot.

        ``on_update`` is called with every snapshot, including the final one.
        ``max_polls`` bounds the loop for callers that cannot wait forever.
        """
        polls = 0
        while True:
            match = self.get_game(game_id)
            polls += 1
            if on_update is not None:
                on_update(match)
            if match.get('status') == 'finished':
                return match
            if max_polls is not None and polls >= max_polls:
                return match
            time.sleep(interval)
