import logging
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN

import pandas as pd

from constants import CATEGORIES, VALEURS_KEY
from services.bilan import latest_records, parse_date
from services.models import Category, DatedSnapshot, ValueRecord
from services.storage import load_list, save_value

logger = logging.getLogger(__name__)

PATRIMOINE_COLUMNS = ["patrimoine_brut", "passif", "patrimoine_net", "pourcentage_dette"]


# ── Sérialisation ─────────────────────────────────────────────────────────────

def record_to_dict(record: ValueRecord) -> dict:
    return {"date": record.date, "positionId": record.position_id, "montant": record.montant}


def record_from_dict(data: dict) -> ValueRecord:
    """Lève KeyError / ValueError / TypeError si l'entrée est mal formée."""
    return ValueRecord(
        date=str(data["date"]),
        position_id=str(data["positionId"]),
        montant=int(data["montant"]),
    )


def load_records() -> tuple[ValueRecord, ...]:
    records = []
    for item in load_list(VALEURS_KEY):
        try:
            records.append(record_from_dict(item))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Valeur ignorée (%s) : %r", e, item)
    return tuple(records)


def save_records(records) -> None:
    save_value(VALEURS_KEY, [record_to_dict(r) for r in records])


# ── Saisie ────────────────────────────────────────────────────────────────────

def bilan_date_iso(day: date) -> str:
    """
    Date ISO d'un bilan saisi pour un jour donné (minuit UTC).
    Deux saisies pour le même jour visent donc le même bilan.
    """
    return f"{day.isoformat()}T00:00:00.000Z"


def bilan_target_date(day: date, date_iso: str | None = None) -> str:
    """
    Date ISO visée par une saisie pour le jour `day`.
    Si `date_iso` (bilan existant en cours de modification) tombe ce jour-là,
    elle est conservée telle quelle : un bilan importé à une autre heure que
    minuit UTC est modifié sur place plutôt que dédoublé.
    """
    if date_iso is not None and parse_date(date_iso).date() == day:
        return date_iso
    return bilan_date_iso(day)


def parse_montant(text: str) -> int | None:
    """
    Convertit un montant saisi en euros ("1 234,56", "-300000") en centimes.
    Retourne None si le champ est vide, lève ValueError s'il est invalide.
    """
    if text is None:
        return None
    # Espaces (dont insécables, format fr-FR) et symbole €
    cleaned = str(text).replace("\u20ac", "").replace(",", ".")
    for space in (" ", "\u00a0", "\u202f"):
        cleaned = cleaned.replace(space, "")
    cleaned = cleaned.strip()
    if not cleaned:
        return None
    try:
        euros = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Montant invalide : « {text} »")
    if not euros.is_finite():
        raise ValueError(f"Montant invalide : « {text} »")
    try:
        # quantize échoue au-delà de la précision du contexte (28 chiffres)
        return int((euros * 100).quantize(Decimal("1"), rounding=ROUND_HALF_EVEN))
    except InvalidOperation:
        raise ValueError(f"Montant invalide : « {text} »")


# ── Opérations sur les enregistrements ────────────────────────────────────────
# Toutes pures : elles retournent un nouveau tuple sans modifier l'entrée.

def record_bilan(records, date_iso: str, montants: dict) -> tuple[ValueRecord, ...]:
    """
    Remplace l'intégralité du bilan `date_iso` par `montants`
    ({ position_id: centimes }). Les montants None sont ignorés.
    """
    kept = tuple(r for r in records if r.date != date_iso)
    new = tuple(
        ValueRecord(date=date_iso, position_id=pid, montant=int(montant))
        for pid, montant in montants.items()
        if montant is not None
    )
    return kept + new


def delete_bilan(records, date_iso: str) -> tuple[ValueRecord, ...]:
    return tuple(r for r in records if r.date != date_iso)


def delete_position_history(records, position_id: str) -> tuple[ValueRecord, ...]:
    """Supprime tout l'historique d'une position (utile à la suppression d'une position)."""
    return tuple(r for r in records if r.position_id != position_id)


def montants_at(records, date_iso: str) -> dict[str, int]:
    """Montants déjà saisis pour ce bilan, pour pré-remplir le formulaire."""
    montants: dict[str, int] = {}
    for r in records:
        if r.date == date_iso:
            montants[r.position_id] = montants.get(r.position_id, 0) + r.montant
    return montants


def bilan_dates(records) -> list[str]:
    """Dates de bilan distinctes, de la plus récente à la plus ancienne."""
    dates = {r.date for r in records}
    return sorted(dates, key=lambda d: (parse_date(d), d), reverse=True)


def latest_record(records, position_id: str) -> ValueRecord | None:
    """Dernière valeur connue d'une position, ou None si elle n'en a aucune."""
    return latest_records(r for r in records if r.position_id == position_id).get(position_id)


# ── Vues pandas ───────────────────────────────────────────────────────────────

def snapshots_to_frame(snapshots: list[DatedSnapshot]) -> pd.DataFrame:
    """
    Retourne un DataFrame { date, <catégories>, patrimoine_brut, passif,
    patrimoine_net, pourcentage_dette } avec une ligne par bilan historique,
    triée chronologiquement. Montants en euros.

    Le premier bilan (aujourd'hui) n'est pas une date saisie : il est exclu.
    """
    columns = ["date"] + [c.value for c in CATEGORIES] + PATRIMOINE_COLUMNS
    rows = []
    for snapshot in snapshots[1:]:
        row = {"date": parse_date(snapshot.date)}
        for category, montant in snapshot.montant_par_categorie.items():
            row[category.value] = montant / 100
        patrimoine = snapshot.patrimoine
        row["patrimoine_brut"] = patrimoine.patrimoine_brut / 100
        row["passif"] = patrimoine.passif / 100
        row["patrimoine_net"] = patrimoine.patrimoine_net / 100
        row["pourcentage_dette"] = patrimoine.pourcentage_dette
        rows.append(row)

    if not rows:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame(rows, columns=columns)
    return df.sort_values("date", kind="stable").reset_index(drop=True)


def export_records_csv(positions, records) -> bytes:
    """
    Export CSV de tous les bilans : date | position | categorie | montant (€).
    Les valeurs sans position correspondante ne sont pas exportées.
    """
    by_id = {p.id: p for p in positions}
    rows = [
        {
            "date": r.date,
            "position": by_id[r.position_id].label,
            "categorie": Category(by_id[r.position_id].category).value,
            "montant": r.montant / 100,
        }
        for r in records
        if r.position_id in by_id
    ]
    df = pd.DataFrame(rows, columns=["date", "position", "categorie", "montant"])
    if not df.empty:
        df = df.sort_values(["date", "position"], ascending=[False, True])
    return df.to_csv(index=False).encode("utf-8")
