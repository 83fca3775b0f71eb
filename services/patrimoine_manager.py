"""
patrimoine_manager.py
─────────────────────
Séquences métier complètes sur les positions et les bilans.

L'état de l'application (positions + valeurs saisies) est un AppState immuable.
Chaque action est une fonction pure :
    action(state, ...) -> (nouvel_état, message, type_message)

En cas d'erreur, l'état retourné est l'état reçu, inchangé.
Seules load_state() et save_state() touchent au disque.

L'UI (app.py) ne fait qu'appeler ces fonctions, sauvegarder le nouvel état
et afficher le message ; elle ne contient aucune logique métier.

Types de message : "success" | "warning" | "error"
"""

import logging
from dataclasses import dataclass
from datetime import date

from services import historique, positions as positions_service
from services.models import Category, Position, ValueRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppState:
    positions: tuple[Position, ...] = ()
    records: tuple[ValueRecord, ...] = ()


# ── Persistance ───────────────────────────────────────────────────────────────

def load_state() -> AppState:
    return AppState(
        positions=positions_service.load_positions(),
        records=historique.load_records(),
    )


def save_state(state: AppState) -> None:
    positions_service.save_positions(state.positions)
    historique.save_records(state.records)


# ── Positions ─────────────────────────────────────────────────────────────────

def create_position(
    state: AppState,
    label: str,
    category: Category,
) -> tuple[AppState, str, str]:
    label = (label or "").strip()
    if not label:
        return state, "Le nom est obligatoire.", "error"

    positions = positions_service.add_position(state.positions, label, category)
    logger.info("Position créée : %s", positions[-1].id)
    return AppState(positions, state.records), "Position ajoutée", "success"


def edit_position(
    state: AppState,
    position_id: str,
    label: str,
    category: Category,
) -> tuple[AppState, str, str]:
    label = (label or "").strip()
    if not label:
        return state, "Le nom est obligatoire.", "error"

    try:
        positions = positions_service.update_position(state.positions, position_id, label, category)
    except ValueError as e:
        return state, str(e), "error"

    logger.info("Position modifiée : %s", position_id)
    return AppState(positions, state.records), "Position modifiée", "success"


def toggle_active(state: AppState, position_id: str) -> tuple[AppState, str, str]:
    try:
        positions = positions_service.toggle_position_active(state.positions, position_id)
    except ValueError as e:
        return state, str(e), "error"

    position = positions_service.find_position(positions, position_id)
    msg = "Position réactivée" if position.active else "Position désactivée"
    return AppState(positions, state.records), msg, "success"


def remove_position(state: AppState, position_id: str) -> tuple[AppState, str, str]:
    """
    Supprime une position et toutes ses données associées :
    1. Supprime l'historique de ses valeurs
    2. Supprime la position
    """
    try:
        positions = positions_service.remove_position(state.positions, position_id)
    except ValueError as e:
        return state, str(e), "error"

    records = historique.delete_position_history(state.records, position_id)
    logger.info("Position supprimée : %s (%d valeurs)", position_id,
                len(state.records) - len(records))
    return AppState(positions, records), "Position supprimée", "success"


# ── Bilans ────────────────────────────────────────────────────────────────────

def submit_bilan(
    state: AppState,
    day: date,
    montants_text: dict[str, str],
    date_iso: str | None = None,
) -> tuple[AppState, str, str]:
    """
    Enregistre le bilan du jour `day` :
    1. Convertit chaque montant saisi (euros) en centimes
    2. Remplace toutes les valeurs déjà saisies pour ce jour
    Un montant invalide annule toute la saisie.

    `date_iso` : date du bilan existant en cours de modification, conservée
    si `day` est toujours son jour (voir historique.bilan_target_date).
    """
    montants = {}
    for position_id, text in montants_text.items():
        try:
            montants[position_id] = historique.parse_montant(text)
        except ValueError as e:
            return state, str(e), "error"

    known_ids = {p.id for p in state.positions}
    montants = {pid: m for pid, m in montants.items() if pid in known_ids and m is not None}

    date_iso = historique.bilan_target_date(day, date_iso)
    existed = any(r.date == date_iso for r in state.records)
    records = historique.record_bilan(state.records, date_iso, montants)
    new_state = AppState(state.positions, records)

    if not montants:
        if existed:
            return new_state, "Bilan vidé : aucun montant saisi", "warning"
        return new_state, "Aucun montant saisi", "warning"

    logger.info("Bilan enregistré : %s (%d positions)", date_iso, len(montants))
    return new_state, "Bilan mis à jour" if existed else "Bilan enregistré", "success"


def remove_bilan(state: AppState, date_iso: str) -> tuple[AppState, str, str]:
    if not any(r.date == date_iso for r in state.records):
        return state, "Bilan introuvable. Il a peut-être déjà été supprimé.", "error"

    records = historique.delete_bilan(state.records, date_iso)
    logger.info("Bilan supprimé : %s", date_iso)
    return AppState(state.positions, records), "Bilan supprimé", "success"
