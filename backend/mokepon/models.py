from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Union

from mokepon.errors import InvalidInput

# Wire sentinels used by the browser client for the battle-enemy field
NOT_ELIGIBLE_WIRE = '-1'
OPEN_WIRE = ''


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0

    def to_dict(self):
        return {'x': self.x, 'y': self.y}


@dataclass(frozen=True)
class Size:
    width: float = 0.0
    height: float = 0.0

    def to_dict(self):
        return {'width': self.width, 'height': self.height}


@dataclass(frozen=True)
class Box:
    """Axis-aligned bounding box with a top-left origin."""
    up: float
    down: float
    left: float
    right: float

    @classmethod
    def from_footprint(cls, position: Position, size: Size) -> 'Box':
        return cls(
            up=position.y,
            down=position.y + size.height,
            left=position.x,
            right=position.x + size.width,
        )


@dataclass(frozen=True)
class NotEligible:
    def to_wire(self) -> str:
        return NOT_ELIGIBLE_WIRE


@dataclass(frozen=True)
class Open:
    def to_wire(self) -> str:
        return OPEN_WIRE


@dataclass(frozen=True)
class Paired:
    enemy_id: str

    def to_wire(self) -> str:
        return self.enemy_id


BattleEnemy = Union[NotEligible, Open, Paired]

NOT_ELIGIBLE = NotEligible()
OPEN = Open()


def battle_enemy_from_wire(value: Optional[str]) -> BattleEnemy:
    """Decode the client's battle-enemy string. Missing means open."""
    if value is None or value == OPEN_WIRE:
        return OPEN
    if not isinstance(value, str):
        raise InvalidInput('battleEnemy must be a string')
    if value == NOT_ELIGIBLE_WIRE:
        return NOT_ELIGIBLE
    return Paired(value)


@dataclass
class PlayerRecord:
    id: str
    pet_name: str
    position: Position = field(default_factory=Position)
    size: Size = field(default_factory=Size)
    is_active: bool = True
    battle_enemy: BattleEnemy = NOT_ELIGIBLE
    attack_sequence: List[Dict[str, Any]] = field(default_factory=list)
    battle_victories: int = 0
    # Most recent opponent; survives the pairing being released
    last_enemy_id: Optional[str] = None

    @property
    def has_pet(self) -> bool:
        return bool(self.pet_name)

    @property
    def can_battle(self) -> bool:
        return self.is_active and isinstance(self.battle_enemy, Open)

    @property
    def box(self) -> Box:
        return Box.from_footprint(self.position, self.size)

    def snapshot(self) -> 'PlayerRecord':
        return replace(self, attack_sequence=list(self.attack_sequence))

    def to_dict(self):
        return {
            'id': self.id,
            'mokepon': {'name': self.pet_name},
            'position': self.position.to_dict(),
            'size': self.size.to_dict(),
            'isActive': self.is_active,
            'battleEnemy': self.battle_enemy.to_wire(),
            'battleVictories': self.battle_victories,
        }
