import logging
import secrets
import threading
from functools import partial
from typing import Callable, Dict, List, Optional

from mokepon.errors import InvalidInput
from mokepon.models import (
    NOT_ELIGIBLE,
    NotEligible,
    BattleEnemy,
    Paired,
    PlayerRecord,
    Position,
    Size,
)
from mokepon.pets import attack_set_size
from .collision import find_collision

PairListener = Callable[[PlayerRecord, PlayerRecord], None]


def generate_player_id(taken) -> str:
    """Generate an unguessable id not currently in use."""
    while True:
        player_id = secrets.token_hex(8)
        if player_id not in taken:
            return player_id


class Registry:
    """In-memory party of connected players.

    Every public method runs under one re-entrant lock, so collision checks
    and the two-sided pairing commit are atomic with respect to other
    requests and to eviction callbacks. Unknown player ids are silent no-ops.
    """

    def __init__(
        self,
        scheduler,
        eviction_timeout: float = 15.0,
        default_attack_set_size: int = 5,
        logger: Optional[logging.Logger] = None,
        on_pair: Optional[PairListener] = None,
    ):
        self.scheduler = scheduler
        self.eviction_timeout = eviction_timeout
        self.default_attack_set_size = default_attack_set_size
        self.logger = logger or logging.getLogger(__name__)
        self.on_pair = on_pair
        # dicts keep insertion order, which fixes the collision scan order
        self._players: Dict[str, PlayerRecord] = {}
        # player id -> token of the eviction currently allowed to fire
        self._eviction_tokens: Dict[str, object] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._players)

    # ---- lookups ----

    def exists(self, player_id: str) -> bool:
        with self._lock:
            return player_id in self._players

    def get(self, player_id: str) -> Optional[PlayerRecord]:
        with self._lock:
            record = self._players.get(player_id)
            return record.snapshot() if record else None

    def list_enemies(self, player_id: str) -> List[PlayerRecord]:
        with self._lock:
            if player_id not in self._players:
                return []
            return [p.snapshot() for p in self._enemies_of(player_id)]

    def get_attack_sequence(self, player_id: str) -> list:
        with self._lock:
            record = self._players.get(player_id)
            return list(record.attack_sequence) if record else []

    def attack_set_size(self, player_id: str) -> int:
        with self._lock:
            record = self._players.get(player_id)
            pet_name = record.pet_name if record else ''
        return attack_set_size(pet_name, self.default_attack_set_size)

    # ---- mutations ----

    def join(self, pet_name: str, position: Optional[Position] = None) -> Optional[str]:
        """Register a player; returns None without creating a record if pet_name is empty."""
        if not pet_name:
            self.logger.info("[join-rejected] empty pet name")
            return None
        with self._lock:
            player_id = generate_player_id(self._players)
            self._players[player_id] = PlayerRecord(
                id=player_id,
                pet_name=pet_name,
                position=position or Position(),
            )
            self.logger.info(f"[join] player={player_id} pet={pet_name} party_size={len(self._players)}")
            return player_id

    def update_position(self, player_id: str, position: Position, size: Optional[Size] = None) -> Optional[PlayerRecord]:
        """Store the new footprint and return the committed enemy, if any.

        An eligible player is checked for collisions first; the first
        overlapping eligible enemy is paired with it before returning.
        """
        paired = None
        with self._lock:
            record = self._lookup(player_id)
            if record is None:
                return None
            record.position = position
            if size is not None:
                record.size = size

            if not record.is_active or isinstance(record.battle_enemy, NotEligible):
                return None

            if isinstance(record.battle_enemy, Paired):
                enemy = self._players.get(record.battle_enemy.enemy_id)
                return enemy.snapshot() if enemy else None

            enemy = find_collision(record, self._enemies_of(player_id))
            if enemy is None:
                return None
            self._pair(record, enemy)
            paired = (record.snapshot(), enemy.snapshot())

        self._notify_pair(*paired)
        return paired[1]

    def set_battle_enemy(self, player_id: str, value: BattleEnemy) -> None:
        paired = None
        with self._lock:
            record = self._lookup(player_id)
            if record is None:
                return
            if isinstance(value, Paired):
                if value.enemy_id == record.id:
                    raise InvalidInput('A player cannot battle itself')
                # A target that already left is a late request, not an error
                enemy = self._lookup(value.enemy_id)
                if enemy is None:
                    return
                if record.battle_enemy == value:
                    return
                self._release(record)
                self._release(enemy)
                self._pair(record, enemy)
                paired = (record.snapshot(), enemy.snapshot())
            else:
                self._release(record)
                record.battle_enemy = value
                self.logger.debug(f"[battle-enemy] player={player_id} state={value.to_wire()!r}")

        if paired:
            self._notify_pair(*paired)

    def set_attack_sequence(self, player_id: str, sequence: list) -> None:
        limit = self.attack_set_size(player_id)
        with self._lock:
            record = self._lookup(player_id)
            if record is None:
                return
            if len(sequence) > limit:
                raise InvalidInput(f'Attack sequence longer than {limit} attacks')
            record.attack_sequence = list(sequence)

    def set_active(self, player_id: str, is_active: bool) -> None:
        with self._lock:
            record = self._lookup(player_id)
            if record is None:
                return
            record.is_active = is_active
            if is_active:
                self._eviction_tokens.pop(player_id, None)
                self.scheduler.cancel(player_id)
                self.logger.debug(f"[evict-cancel] player={player_id}")
            else:
                token = object()
                self._eviction_tokens[player_id] = token
                self.scheduler.arm(player_id, self.eviction_timeout, partial(self._expire, player_id, token))
                self.logger.info(f"[evict-armed] player={player_id} timeout={self.eviction_timeout}s")

    def add_victory(self, player_id: str) -> None:
        with self._lock:
            record = self._lookup(player_id)
            if record is not None:
                record.battle_victories += 1

    def leave(self, player_id: str) -> None:
        with self._lock:
            self.scheduler.cancel(player_id)
            record = self._players.get(player_id)
            if record is None:
                return
            self._remove(record)
            self.logger.info(f"[leave] player={player_id} party_size={len(self._players)}")

    # ---- internals (caller holds the lock) ----

    def _lookup(self, player_id: str) -> Optional[PlayerRecord]:
        record = self._players.get(player_id)
        if record is None:
            self.logger.debug(f"[unknown-player] player={player_id}")
        return record

    def _enemies_of(self, player_id: str) -> List[PlayerRecord]:
        return [p for p in self._players.values() if p.id != player_id and p.has_pet]

    def _pair(self, a: PlayerRecord, b: PlayerRecord) -> None:
        a.battle_enemy, a.last_enemy_id = Paired(b.id), b.id
        b.battle_enemy, b.last_enemy_id = Paired(a.id), a.id
        self.logger.info(f"[pair] player={a.id} enemy={b.id}")

    def _release(self, record: PlayerRecord) -> None:
        """Drop a pairing on both sides; the partner becomes not eligible."""
        if not isinstance(record.battle_enemy, Paired):
            return
        partner = self._players.get(record.battle_enemy.enemy_id)
        if partner is not None and partner.battle_enemy == Paired(record.id):
            partner.battle_enemy = NOT_ELIGIBLE
            self.logger.info(f"[unpair] player={partner.id} enemy={record.id}")
        record.battle_enemy = NOT_ELIGIBLE

    def _remove(self, record: PlayerRecord) -> None:
        self._eviction_tokens.pop(record.id, None)
        self._release(record)
        del self._players[record.id]

    def _expire(self, player_id: str, token: object) -> None:
        with self._lock:
            # A reactivation or re-arm after this task was scheduled supersedes it
            if self._eviction_tokens.get(player_id) is not token:
                return
            record = self._players.get(player_id)
            if record is None or record.is_active:
                return
            self._remove(record)
            self.logger.info(f"[evict] player={player_id} party_size={len(self._players)}")

    def _notify_pair(self, player: PlayerRecord, enemy: PlayerRecord) -> None:
        if self.on_pair is None:
            return
        try:
            self.on_pair(player, enemy)
        except Exception as exc:
            self.logger.warning(f"[pair-notify-failed] player={player.id} enemy={enemy.id} error={exc}")
