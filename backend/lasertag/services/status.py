"""Game status controller polled by the wearable rig.

The controller is a two-state machine (IDLE/RUNNING) that lives in memory
next to the Flask app and is never persisted, so a restart drops back to
IDLE. Each app created by the factory gets its own controller through the
``GameStatusManager`` extension; request handlers reach it via
``game_status.controller``.

The current state is an immutable ``GameStatus`` snapshot that is replaced
with a single assignment, so readers never observe a half-applied change and
no lock is taken. The state is per process: separate workers do not share it.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from flask import current_app

from lasertag.errors import ConflictError, LaserTagError, ValidationError

IDLE = 'IDLE'
RUNNING = 'RUNNING'

EXTENSION_KEY = 'game_status'


@dataclass(frozen=True)
class GameStatus:
    status: str = IDLE
    game_id: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self.status == RUNNING

    def to_dict(self):
        return {'status': self.status, 'gameId': self.game_id}


class GameStatusController:
    def __init__(self,
                 finish_match: Optional[Callable[[str], object]] = None,
                 strict: bool = False,
                 logger: Optional[logging.Logger] = None):
        self._state = GameStatus()
        self._finish_match = finish_match
        self.strict = strict
        self.logger = logger or logging.getLogger(__name__)

    def get_status(self) -> GameStatus:
        return self._state

    def start(self, game_id) -> GameStatus:
        """Mark ``game_id`` as the running game.

        A running game is overwritten by the new one, unless the controller is
        strict and the ids differ, in which case ConflictError is raised.
        """
        if not isinstance(game_id, str) or not game_id.strip():
            raise ValidationError('gameId is required to start')
        current = self._state
        if current.is_running and current.game_id != game_id:
            if self.strict:
                raise ConflictError(f'Game {current.game_id} is already running')
            self.logger.warning(f"[control-start] overwriting running game={current.game_id} with game={game_id}")
        self._state = GameStatus(status=RUNNING, game_id=game_id)
        self.logger.info(f"[control-start] game={game_id}")
        return self._state

    def stop(self, game_id=None) -> GameStatus:
        """Return to IDLE; with a game id, also try to mark that match finished.

        Marking the match is best effort: failures are logged and the status
        change stands.
        """
        previous = self._state
        self._state = GameStatus()
        self.logger.info(f"[control-stop] previous={previous.status} game={previous.game_id} requested={game_id}")
        if game_id and self._finish_match is not None:
            try:
                self._finish_match(game_id)
            except LaserTagError as exc:
                self.logger.warning(f"[control-stop] could not finish game={game_id}: {exc.message}")
            except Exception:
                self.logger.exception(f"[control-stop] could not finish game={game_id}")
        return self._state


class GameStatusManager:
    """Flask extension owning one GameStatusController per application."""

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        from lasertag.services.matches import finish_match

        app.extensions[EXTENSION_KEY] = GameStatusController(
            finish_match=finish_match,
            strict=bool(app.config.get('STRICT_GAME_CONTROL', False)),
            logger=app.logger,
        )

    @property
    def controller(self) -> GameStatusController:
        return current_app.extensions[EXTENSION_KEY]
