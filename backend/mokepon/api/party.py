import math

from flask import Blueprint, Response, jsonify, request

from mokepon.errors import InvalidInput
from mokepon.models import Position, Size, battle_enemy_from_wire
from mokepon.pets import PETS
from mokepon.services.party import get_registry
from mokepon.services.party.battle import battle_status


party = Blueprint('party', __name__)


@party.errorhandler(InvalidInput)
def handle_invalid_input(exc):
    return jsonify({'error': str(exc)}), 400


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _number(data: dict, key: str) -> float:
    value = data.get(key, 0)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInput(f'{key} must be a number')
    try:
        number = float(value)
    except OverflowError:
        number = math.inf
    # NaN or Infinity would collide with everything and break strict JSON readers
    if not math.isfinite(number):
        raise InvalidInput(f'{key} must be a finite number')
    return number


def _parse_position(raw) -> Position:
    if raw is None:
        return Position()
    if not isinstance(raw, dict):
        raise InvalidInput('position must be an object')
    return Position(x=_number(raw, 'x'), y=_number(raw, 'y'))


def _parse_size(raw):
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise InvalidInput('size must be an object')
    return Size(width=_number(raw, 'width'), height=_number(raw, 'height'))


@party.route('/pets', methods=['GET'])
def list_pets():
    return jsonify({'pets': [pet.to_dict() for pet in PETS.values()]})


@party.route('/join', methods=['POST'])
def join():
    data = _payload()
    pet_name = data.get('mokepon') or ''
    if not isinstance(pet_name, str):
        raise InvalidInput('mokepon must be a pet name')
    position = _parse_position(data.get('position'))

    player_id = get_registry().join(pet_name.strip(), position)
    if player_id is None:
        raise InvalidInput('A pet name is required to join the party')
    # The browser client reads the id with res.text()
    return Response(player_id, status=200, mimetype='text/plain')


@party.route('/<string:player_id>/position', methods=['POST'])
def report_position(player_id):
    data = _payload()
    position = _parse_position(data.get('position'))
    size = _parse_size(data.get('size'))

    enemy = get_registry().update_position(player_id, position, size)
    return jsonify({'collidedEnemy': enemy.to_dict() if enemy else None})


@party.route('/<string:player_id>/enemiesData', methods=['GET'])
def enemies_data(player_id):
    enemies = get_registry().list_enemies(player_id)
    return jsonify({'enemiesData': [e.to_dict() for e in enemies]})


@party.route('/<string:player_id>/battleEnemy', methods=['POST'])
def set_battle_enemy(player_id):
    value = battle_enemy_from_wire(_payload().get('battleEnemy'))
    get_registry().set_battle_enemy(player_id, value)
    return jsonify({})


@party.route('/<string:player_id>/attackSequence', methods=['GET'])
def get_attack_sequence(player_id):
    return jsonify({'attackSequence': get_registry().get_attack_sequence(player_id)})


@party.route('/<string:player_id>/attackSequence', methods=['POST'])
def set_attack_sequence(player_id):
    sequence = _payload().get('attackSequence') or []
    if not isinstance(sequence, list) or not all(isinstance(a, dict) for a in sequence):
        raise InvalidInput('attackSequence must be a list of attacks')
    get_registry().set_attack_sequence(player_id, sequence)
    return jsonify({})


@party.route('/<string:player_id>/isActive', methods=['PUT'])
def set_active(player_id):
    is_active = _payload().get('isActive')
    if not isinstance(is_active, bool):
        raise InvalidInput('isActive must be a boolean')
    get_registry().set_active(player_id, is_active)
    return jsonify({})


@party.route('/<string:player_id>/addVictory', methods=['PUT'])
def add_victory(player_id):
    get_registry().add_victory(player_id)
    return jsonify({})


@party.route('/<string:player_id>', methods=['DELETE'])
def leave(player_id):
    get_registry().leave(player_id)
    return jsonify({})


@party.route('/<string:player_id>/exist', methods=['GET'])
def exist(player_id):
    return jsonify({'playerExist': get_registry().exists(player_id)})


@party.route('/<string:player_id>/battle', methods=['GET'])
def battle(player_id):
    return jsonify(battle_status(get_registry(), player_id))
