import time

import pytest

from mokepon import socketio
from mokepon.services.party.registry import Registry
from mokepon.services.party.scheduler import EvictionScheduler

TIMEOUT = 0.3


@pytest.fixture()
def live_registry(flask_app):
    # flask_app initializes the shared Socket.IO server the scheduler runs on
    return Registry(scheduler=EvictionScheduler(socketio), eviction_timeout=TIMEOUT)


def test_inactive_player_is_evicted(live_registry):
    d = live_registry.join('Langostelvis')
    live_registry.set_active(d, False)
    assert live_registry.scheduler.is_armed(d)
    time.sleep(TIMEOUT / 2)
    assert live_registry.exists(d)
    time.sleep(TIMEOUT + 0.2)
    assert not live_registry.exists(d)
    assert not live_registry.scheduler.is_armed(d)


def test_rearming_leaves_previous_task_inert(live_registry):
    c = live_registry.join('Tucapalma')
    live_registry.set_active(c, False)
    time.sleep(0.2)
    live_registry.set_active(c, False)
    # First task wakes at 0.3s but the second one owns the eviction
    time.sleep(0.2)
    assert live_registry.exists(c)
    time.sleep(0.3)
    assert not live_registry.exists(c)


def test_reactivation_cancels_task(live_registry):
    c = live_registry.join('Tucapalma')
    live_registry.set_active(c, False)
    time.sleep(0.1)
    live_registry.set_active(c, True)
    assert not live_registry.scheduler.is_armed(c)
    time.sleep(TIMEOUT + 0.2)
    assert live_registry.exists(c)


def test_leave_cancels_task(live_registry):
    a = live_registry.join('Hipodoge')
    b = live_registry.join('Capipepo')
    live_registry.set_active(a, False)
    live_registry.leave(a)
    assert not live_registry.scheduler.is_armed(a)
    time.sleep(TIMEOUT + 0.2)
    assert not live_registry.exists(a)
    assert live_registry.exists(b)
    assert len(live_registry) == 1
