"""Pet catalog and the element wheel used to resolve attacks."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class Element(Enum):
    FIRE = 'fire'
    WATER = 'water'
    PLANT = 'plant'

    @property
    def emoji(self) -> str:
        return _EMOJI[self]

    def beats(self, other: 'Element') -> bool:
        return _BEATS[self] is other

    @classmethod
    def parse(cls, value) -> Optional['Element']:
        """Accept either the element name or the emoji the browser client sends."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        for element, emoji in _EMOJI.items():
            if value == emoji:
                return element
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_EMOJI = {
    Element.FIRE: '\U0001F525',
    Element.WATER: '\U0001F4A7',
    Element.PLANT: '\U0001F331',
}

_BEATS = {
    Element.FIRE: Element.PLANT,
    Element.WATER: Element.FIRE,
    Element.PLANT: Element.WATER,
}


@dataclass(frozen=True)
class Attack:
    id: str
    name: str
    element: Element

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'type': self.element.emoji}


@dataclass(frozen=True)
class Pet:
    name: str
    element: Element
    attacks: Tuple[Attack, ...]

    def to_dict(self):
        return {
            'name': self.name,
            'element': self.element.value,
            'attacks': [a.to_dict() for a in self.attacks],
        }


def _attack(element: Element, n: int) -> Attack:
    return Attack(
        id=f'{element.value}-attack-{n}-button',
        name=f'{element.value.title()} attack {n}',
        element=element,
    )


def _attack_set(element: Element) -> Tuple[Attack, ...]:
    # Three signature attacks, then one of each other element
    own = tuple(_attack(element, n) for n in (1, 2, 3))
    others = tuple(_attack(e, 1) for e in Element if e is not element)
    return own + others


PETS: Dict[str, Pet] = {
    pet.name: pet for pet in (
        Pet('Hipodoge', Element.WATER, _attack_set(Element.WATER)),
        Pet('Capipepo', Element.PLANT, _attack_set(Element.PLANT)),
        Pet('Ratigueya', Element.FIRE, _attack_set(Element.FIRE)),
        Pet('Pydos', Element.WATER, _attack_set(Element.WATER)),
        Pet('Tucapalma', Element.PLANT, _attack_set(Element.PLANT)),
        Pet('Langostelvis', Element.FIRE, _attack_set(Element.FIRE)),
    )
}


def attack_set_size(pet_name: str, default: int) -> int:
    pet = PETS.get(pet_name)
    return len(pet.attacks) if pet else default
