"""
Web server exposing the game controller to a browser on the shared device.
"""

import logging
from threading import RLock
from typing import Any, Callable, Dict, Tuple, Type

from flask import Flask, jsonify, request
from flask_socketio import SocketIO, emit

from ..catalog import SUGGESTED_EMOJIS
from ..config import GameMode
from ..exceptions import (
    AuthError, CatalogUnavailable, CustomCardsUnreadable, ImpostorGameError,
    InsufficientCards, InvalidCard, InvalidConfig, RateLimited, StorageFull,
)
from ..game import ImpostorGame

logger = logging.getLogger(__name__)

ERROR_STATUS: Tuple[Tuple[Type[ImpostorGameError], int], ...] = (
    (InvalidConfig, 400),
    (InvalidCard, 400),
    (InsufficientCards, 422),
    (AuthError, 403),
    (RateLimited, 429),
    (CatalogUnavailable, 502),
    (StorageFull, 507),
    (CustomCardsUnreadable, 500),
)

MODE_DESCRIPTIONS = {
    GameMode.CLASSIC: "The impostor sees no card and has to bluff",
    GameMode.SPY: "The impostor sees a different card and doesn't know it is the impostor",
    GameMode.DOUBLE_TROUBLE: "Two secret cards split between the crew, the impostor sees none",
    GameMode.RELAMPAGO: "Classic against the clock: quick reveals and a timed round",
}


def status_for(error: ImpostorGameError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 500


class GameServer:
    """
    HTTP + Socket.IO front for one ImpostorGame.

    All game access goes through one lock because the timer ticker runs in a
    background task while requests are served on other threads.
    """

    def __init__(self, game: ImpostorGame, port: int = 5000, host: str = '127.0.0.1',
                 tick_interval: float = 1.0):
        self.game = game
        self.port = port
        self.host = host
        self.tick_interval = tick_interval

        self.app = Flask(__name__)
        self.socketio = SocketIO(self.app, cors_allowed_origins="*", async_mode='threading')
        self.clients_connected = 0
        self._lock = RLock()
        self._ticking = False

        # Register event emitter listener
        self.game.event_emitter.register_listener(self._broadcast_event)

        self._setup_error_handlers()
        self._setup_routes()
        self._setup_socketio()

    # ------------------------------------------------------------------
    # Setup

    def _setup_error_handlers(self):
        @self.app.errorhandler(ImpostorGameError)
        def handle_game_error(error: ImpostorGameError):
            status = status_for(error)
            logger.info("Request failed with %d: %s", status, error.message)
            return jsonify({"error": error.message}), status

    def _setup_routes(self):
        """Setup Flask routes."""
        @self.app.route('/api/state')
        def get_state():
            with self._lock:
                return jsonify(self.game.snapshot())

        @self.app.route('/api/modes')
        def list_modes():
            return jsonify([
                {
                    "id": mode.value,
                    "description": MODE_DESCRIPTIONS[mode],
                    "minDistinctCards": mode.min_distinct_cards,
                    "timed": mode.is_timed,
                }
                for mode in GameMode
            ])

        @self.app.route('/api/cards')
        def list_cards():
            cards = self.game.fetch_catalog_cards()
            return jsonify([card.to_dict() for card in cards])

        @self.app.route('/api/game/mode', methods=['POST'])
        def select_mode():
            body = self._json_body()
            with self._lock:
                changed = self.game.select_mode(body.get("mode", ""))
                return jsonify({"changed": changed, "state": self.game.snapshot()})

        @self.app.route('/api/game/start', methods=['POST'])
        def start_game():
            body = self._json_body()
            if body.get("playersCount") is None or body.get("impostorsCount") is None:
                raise InvalidConfig("playersCount and impostorsCount are required")
            return jsonify(self._start_session(body)), 201

        @self.app.route('/api/game/<action>', methods=['POST'])
        def game_action(action: str):
            handler = self._action_handlers().get(action)
            if handler is None:
                return jsonify({"error": f"Unknown action: {action}"}), 404
            with self._lock:
                changed = handler()
                return jsonify({"changed": changed, "state": self.game.snapshot()})

        @self.app.route('/api/custom-cards', methods=['GET'])
        def list_custom_cards():
            cards = self.game.list_custom_cards()
            return jsonify({
                "cards": [card.to_dict() for card in cards],
                "suggestedEmojis": SUGGESTED_EMOJIS,
            })

        @self.app.route('/api/custom-cards', methods=['POST'])
        def create_custom_card():
            body = self._json_body()
            card = self.game.add_custom_card(body.get("name", ""), body.get("emoji"), body.get("imageUrl"))
            return jsonify(card.to_dict()), 201

        @self.app.route('/api/custom-cards/<int:card_id>', methods=['PUT'])
        def edit_custom_card(card_id: int):
            body = self._json_body()
            card = self.game.update_custom_card(card_id, body.get("name", ""), body.get("emoji"),
                                                body.get("imageUrl"))
            return jsonify(card.to_dict())

        @self.app.route('/api/custom-cards/<int:card_id>', methods=['DELETE'])
        def delete_custom_card(card_id: int):
            if not self.game.remove_custom_card(card_id):
                return jsonify({"error": f"No custom card with id {card_id}"}), 404
            return '', 204

    def _setup_socketio(self):
        """Setup SocketIO event handlers."""
        @self.socketio.on('connect')
        def handle_connect():
            self.clients_connected += 1
            logger.info("Client connected. Total clients: %d", self.clients_connected)
            with self._lock:
                emit('phase_update', self.game.snapshot())

        @self.socketio.on('disconnect')
        def handle_disconnect(*args):
            self.clients_connected -= 1
            logger.info("Client disconnected. Total clients: %d", self.clients_connected)

        @self.socketio.on('select_mode')
        def handle_select_mode(data):
            self._socket_call(self._locked(lambda: self.game.select_mode((data or {}).get("mode", ""))))

        @self.socketio.on('start_session')
        def handle_start_session(data):
            self._socket_call(lambda: self._start_session(data or {}))

        for event_name, handler in self._action_handlers().items():
            self.socketio.on_event(event_name.replace('-', '_'), self._socket_action(handler))

    def _action_handlers(self) -> Dict[str, Any]:
        return {
            "ready": self.game.ready,
            "seen": self.game.seen,
            "reveal": self.game.reveal_impostors,
            "reveal-impostors": self.game.reveal_impostors,
            "abort": self.game.abort,
            "play-again": self.game.play_again,
            "back": self.game.back_to_mode_select,
        }

    def _socket_action(self, handler):
        def on_action(*args):
            self._socket_call(self._locked(handler))
        return on_action

    def _start_session(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Start a round and return the new state.

        The card pool is resolved before taking the lock, so a slow catalog
        never holds up the ticker or the other clients.
        """
        session = self.game.prepare_session(
            data.get("playersCount"),
            data.get("impostorsCount"),
            mode=data.get("mode"),
            card_source=data.get("cardSource"),
        )
        with self._lock:
            self.game.begin_session(session)
            return self.game.snapshot()

    def _locked(self, call) -> Callable[[], Dict[str, Any]]:
        """Wrap a game call so it runs under the lock and returns the new state."""
        def run() -> Dict[str, Any]:
            with self._lock:
                call()
                return self.game.snapshot()
        return run

    def _socket_call(self, call) -> None:
        """Run a game call for a socket client, reporting failures back to it."""
        try:
            snapshot = call()
        except ImpostorGameError as e:
            emit('error', {"error": e.message, "status": status_for(e)})
            return
        emit('phase_update', snapshot)

    def _json_body(self) -> Dict[str, Any]:
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise InvalidConfig("Request body must be a JSON object")
        return body

    # ------------------------------------------------------------------
    # Events and timers

    def _broadcast_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """Broadcast an event to all connected clients."""
        if self.clients_connected > 0:
            self.socketio.emit(event_type, data)

    def tick(self) -> bool:
        """Advance the round timer by one tick."""
        with self._lock:
            return self.game.tick(1)

    def _tick_loop(self) -> None:
        while self._ticking:
            self.socketio.sleep(self.tick_interval)
            self.tick()

    def start(self, debug: bool = False) -> None:
        """Start the ticker and the web server."""
        self._ticking = True
        self.socketio.start_background_task(self._tick_loop)
        logger.info("Starting web server on http://%s:%d", self.host, self.port)
        try:
            self.socketio.run(self.app, host=self.host, port=self.port, debug=debug,
                              allow_unsafe_werkzeug=True)
        finally:
            self._ticking = False
