from typing import Iterable, Optional

from mokepon.models import Box, PlayerRecord


def boxes_overlap(a: Box, b: Box) -> bool:
    """Touching edges count as overlap; only strict separation on an axis excludes."""
    return not (
        a.up > b.down or
        a.down < b.up or
        a.left > b.right or
        a.right < b.left
    )


def find_collision(player: PlayerRecord, candidates: Iterable[PlayerRecord]) -> Optional[PlayerRecord]:
    """Return the first eligible candidate whose box overlaps the player's.

    Candidates are scanned in the order given (registry insertion order), so
    a player overlapping several eligible enemies always picks the same one.
    """
    box = player.box
    for enemy in candidates:
        if enemy.id == player.id or not enemy.can_battle:
            continue
        if boxes_overlap(box, enemy.box):
            return enemy
    return None
