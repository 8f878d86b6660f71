from typing import Dict

from flask import request
from flask_socketio import emit, join_room, leave_room

from mokepon import socketio
from mokepon.services.party import get_registry

NAMESPACE = '/ws'

# socket sid -> player id bound through join_party
_sid_to_player: Dict[str, str] = {}


def player_room(player_id: str) -> str:
    return f"player:{player_id}"


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    emit('connected', {'message': f'Connected to {NAMESPACE}'})


def handle_disconnect(reason=None):
    # A dropped socket counts as a backgrounded client: arm eviction
    player_id = _sid_to_player.pop(_get_sid(), None)
    if player_id:
        get_registry().set_active(player_id, False)


def handle_join_party(data):
    player_id = (data or {}).get('player_id')
    if not player_id:
        emit('error', {'message': 'player_id is required'})
        return
    registry = get_registry()
    if not registry.exists(player_id):
        emit('error', {'message': 'Player is not in the party', 'player_id': player_id})
        return
    join_room(player_room(player_id))
    _sid_to_player[_get_sid()] = player_id
    registry.set_active(player_id, True)
    emit('joined', {'room': player_room(player_id)})


def handle_leave_party(data=None):
    player_id = _sid_to_player.pop(_get_sid(), None)
    if not player_id:
        emit('error', {'message': 'Not bound to a player'})
        return
    room = player_room(player_id)
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data=None):
    emit('pong', data or {})


def notify_pair(player, enemy) -> None:
    """Push a committed pairing to both players' rooms.

    Uses socketio.emit since this runs inside an HTTP request, not a socket event.
    """
    socketio.emit('battle_enemy', {'enemy': enemy.to_dict()}, to=player_room(player.id), namespace=NAMESPACE)
    socketio.emit('battle_enemy', {'enemy': player.to_dict()}, to=player_room(enemy.id), namespace=NAMESPACE)


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = [NAMESPACE, '/'] if testing else [NAMESPACE]
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        socketio.on_event('join_party', handle_join_party, namespace=namespace)
        socketio.on_event('leave_party', handle_leave_party, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
