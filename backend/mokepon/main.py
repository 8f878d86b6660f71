from flask import Blueprint, jsonify

from mokepon.services.party import get_registry

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Mokepon party server!'})

@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'players': len(get_registry())})
