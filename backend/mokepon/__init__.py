import logging

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(config):
    raw = config.get('CORS_ORIGINS') or '*'
    if raw == '*':
        return '*'
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


def create_app(config_class=Config, scheduler=None):
    """Build the party server.

    ``scheduler`` replaces the Socket.IO backed eviction scheduler; tests pass
    one with a manually advanced clock.
    """
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    allowed_origins = _allowed_origins(flask_app.config)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from mokepon.services.party import REGISTRY_EXTENSION
    from mokepon.services.party.registry import Registry
    from mokepon.services.party.scheduler import EvictionScheduler
    from mokepon.socketio_events import notify_pair, register_socketio_handlers

    flask_app.extensions[REGISTRY_EXTENSION] = Registry(
        scheduler=scheduler or EvictionScheduler(socketio),
        eviction_timeout=float(flask_app.config.get('PLAYER_EVICTION_TIMEOUT_SEC', 15)),
        default_attack_set_size=int(flask_app.config.get('DEFAULT_ATTACK_SET_SIZE', 5)),
        logger=flask_app.logger,
        on_pair=notify_pair,
    )

    # Import and register blueprints here
    from mokepon.main import main
    flask_app.register_blueprint(main)

    from mokepon.api.party import party
    # Paths match the browser client's /mokepon/... calls
    flask_app.register_blueprint(party, url_prefix='/mokepon')

    # Register Socket.IO event handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('pets')
    def pets_command():
        """Prints the pet catalog with attack-set sizes."""
        from mokepon.pets import PETS
        for pet in PETS.values():
            attacks = ', '.join(f'{a.name} ({a.element.value})' for a in pet.attacks)
            click.echo(f'{pet.name} [{pet.element.value}] {len(pet.attacks)} attacks: {attacks}')

    flask_app.cli.add_command(pets_command)

    return flask_app
