import logging
import uuid
from dataclasses import replace

from constants import POSITIONS_KEY
from services.models import Category, Position
from services.storage import load_list, save_value

logger = logging.getLogger(__name__)


# ── Sérialisation ─────────────────────────────────────────────────────────────

def position_to_dict(position: Position) -> dict:
    return {
        "id": position.id,
        "label": position.label,
        "categorie": Category(position.category).value,
        "active": position.active,
    }


def position_from_dict(data: dict) -> Position:
    """Lève KeyError / ValueError si l'entrée est incomplète ou la catégorie inconnue."""
    return Position(
        id=str(data["id"]),
        label=str(data["label"]),
        category=Category(data["categorie"]),
        active=bool(data.get("active", True)),
    )


def load_positions() -> tuple[Position, ...]:
    """Charge les positions ; une entrée illisible est ignorée (et journalisée)."""
    positions = []
    for item in load_list(POSITIONS_KEY):
        try:
            positions.append(position_from_dict(item))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Position ignorée (%s) : %r", e, item)
    return tuple(positions)


def save_positions(positions) -> None:
    save_value(POSITIONS_KEY, [position_to_dict(p) for p in positions])


# ── Opérations sur la liste ───────────────────────────────────────────────────
# Toutes pures : elles retournent un nouveau tuple sans modifier l'entrée.

def new_position_id() -> str:
    return str(uuid.uuid4())


def find_position(positions, position_id: str) -> Position:
    """
    Retourne la position correspondant à position_id.
    Lève une ValueError si la position n'est pas trouvée.
    """
    for position in positions:
        if position.id == position_id:
            return position
    raise ValueError(f"Position introuvable (id={position_id}). Elle a peut-être déjà été supprimée.")


def add_position(positions, label: str, category: Category) -> tuple[Position, ...]:
    position = Position(id=new_position_id(), label=label, category=Category(category), active=True)
    return tuple(positions) + (position,)


def update_position(positions, position_id: str, label: str, category: Category) -> tuple[Position, ...]:
    find_position(positions, position_id)
    return tuple(
        replace(p, label=label, category=Category(category)) if p.id == position_id else p
        for p in positions
    )


def toggle_position_active(positions, position_id: str) -> tuple[Position, ...]:
    find_position(positions, position_id)
    return tuple(
        replace(p, active=not p.active) if p.id == position_id else p
        for p in positions
    )


def remove_position(positions, position_id: str) -> tuple[Position, ...]:
    """Supprime la position. L'historique associé est à supprimer à part."""
    find_position(positions, position_id)
    return tuple(p for p in positions if p.id != position_id)


def active_positions(positions) -> list[Position]:
    """Positions proposées à la saisie d'un nouveau bilan."""
    return [p for p in positions if p.active]
