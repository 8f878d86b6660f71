"""Party services: the player registry, collision pairing, eviction timers
and battle resolution.

Routes and socket handlers reach the registry through ``get_registry`` so
transport code never holds on to player records directly.
"""

from flask import current_app

REGISTRY_EXTENSION = 'mokepon.registry'


def get_registry():
    return current_app.extensions[REGISTRY_EXTENSION]
