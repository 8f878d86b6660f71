from dataclasses import dataclass, field
from typing import List, Optional

from mokepon.models import Paired
from mokepon.pets import Element

WIN = 'win'
LOSE = 'lose'
TIE = 'tie'


def resolve_round(attack: dict, enemy_attack: dict) -> str:
    """Outcome of one exchange from the attacker's side of the element wheel."""
    mine = Element.parse((attack or {}).get('type'))
    theirs = Element.parse((enemy_attack or {}).get('type'))
    if mine is theirs:
        return TIE
    # An unreadable attack loses to a readable one
    if theirs is None or (mine is not None and mine.beats(theirs)):
        return WIN
    return LOSE


@dataclass
class BattleReport:
    rounds: List[str] = field(default_factory=list)
    wins: int = 0
    enemy_wins: int = 0

    @property
    def result(self) -> str:
        if self.wins > self.enemy_wins:
            return WIN
        if self.wins < self.enemy_wins:
            return LOSE
        return TIE

    def to_dict(self):
        return {
            'rounds': self.rounds,
            'wins': self.wins,
            'enemyWins': self.enemy_wins,
            'result': self.result,
        }


def resolve_battle(sequence: list, enemy_sequence: list) -> BattleReport:
    report = BattleReport()
    for attack, enemy_attack in zip(sequence, enemy_sequence):
        outcome = resolve_round(attack, enemy_attack)
        report.rounds.append(outcome)
        if outcome == WIN:
            report.wins += 1
        elif outcome == LOSE:
            report.enemy_wins += 1
    return report


def battle_status(registry, player_id: str) -> dict:
    """Summarize the caller's latest battle without mutating anything.

    The opponent is the current pairing or, once either side has reset,
    the most recent one, so the slower client can still read the result.

    - idle: unknown caller or never paired
    - enemy_disconnected: the opponent left or was evicted
    - pending: either side has not completed its attack sequence
    - resolved: both sequences complete; includes the report
    """
    player = registry.get(player_id)
    if player is None:
        return {'status': 'idle'}
    if isinstance(player.battle_enemy, Paired):
        enemy_id: Optional[str] = player.battle_enemy.enemy_id
    else:
        enemy_id = player.last_enemy_id
    if not enemy_id:
        return {'status': 'idle'}

    enemy = registry.get(enemy_id)
    if enemy is None:
        return {'status': 'enemy_disconnected', 'enemyId': enemy_id, 'result': WIN}

    complete = (
        len(player.attack_sequence) == registry.attack_set_size(player_id) and
        len(enemy.attack_sequence) == registry.attack_set_size(enemy_id)
    )
    if not complete:
        return {
            'status': 'pending',
            'enemyId': enemy_id,
            'attacks': len(player.attack_sequence),
            'enemyAttacks': len(enemy.attack_sequence),
        }

    payload = resolve_battle(player.attack_sequence, enemy.attack_sequence).to_dict()
    payload.update({'status': 'resolved', 'enemyId': enemy_id})
    return payload
