"""
bilan.py
────────
Calcul des bilans : transforme (positions, valeurs saisies) en une liste de
bilans datés, chacun avec les montants par catégorie, la répartition en
pourcentage et les indicateurs de patrimoine.

Fonction pure : aucune I/O, aucun état partagé. Seule la date du bilan
"aujourd'hui" dépend de l'horloge, et elle peut être injectée via `now`.
"""

from collections import defaultdict
from datetime import datetime, timezone
from typing import Iterable

import pandas as pd

from services.models import (
    Category, CategoryValues, DatedSnapshot, Patrimoine, Position, ValueRecord,
)

NON_DEBT = [c for c in Category if c is not Category.DEBT]


# ── Point d'entrée public ─────────────────────────────────────────────────────

def compute_snapshots(
    positions: Iterable[Position],
    records: Iterable[ValueRecord],
    now: datetime | None = None,
) -> list[DatedSnapshot]:
    """
    Retourne la liste des bilans, dans cet ordre :

    1. Le bilan "aujourd'hui", daté de `now` : chaque position y compte pour
       la valeur de son enregistrement le plus récent, quelle que soit sa date.
       À date égale, le dernier enregistrement de la liste l'emporte.
       Une position sans aucun enregistrement compte pour 0.
    2. Un bilan par date distincte présente dans `records`, de la plus récente
       à la plus ancienne. Seuls les enregistrements de cette date exacte sont
       pris en compte (pas de report d'une date à l'autre) ; les doublons
       (même position, même date) sont additionnés.

    Les enregistrements dont la position n'existe pas sont ignorés.
    Ne lève jamais d'exception pour des entrées bien formées, même vides.
    """
    positions = list(positions)
    records = list(records)
    if now is None:
        now = datetime.now(timezone.utc)

    parsed = {r.date: parse_date(r.date) for r in records}
    latest = {pid: r.montant for pid, r in latest_records(records).items()}

    snapshots = [_build_snapshot(now.isoformat(), _totals(positions, latest))]

    montants_by_date = defaultdict(lambda: defaultdict(int))
    for r in records:
        montants_by_date[r.date][r.position_id] += r.montant

    for d in sorted(montants_by_date, key=lambda d: (parsed[d], d), reverse=True):
        snapshots.append(_build_snapshot(d, _totals(positions, montants_by_date[d])))

    return snapshots


def parse_date(value: str) -> pd.Timestamp:
    """Parse une date ISO-8601 ; une date sans fuseau est lue en UTC."""
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts


def latest_records(records: Iterable[ValueRecord]) -> dict[str, ValueRecord]:
    """{ position_id: enregistrement le plus récent de la position }"""
    parsed = {}
    latest: dict[str, ValueRecord] = {}
    for r in records:
        if r.date not in parsed:
            parsed[r.date] = parse_date(r.date)
        current = latest.get(r.position_id)
        # >= : à date égale, le dernier inséré gagne
        if current is None or parsed[r.date] >= parsed[current.date]:
            latest[r.position_id] = r
    return latest


# ── Helpers privés ────────────────────────────────────────────────────────────


def _totals(positions: list[Position], montants: dict) -> dict[Category, int]:
    totals = {c: 0 for c in Category}
    for position in positions:
        totals[Category(position.category)] += montants.get(position.id, 0)
    return totals


def _build_snapshot(date: str, totals: dict[Category, int]) -> DatedSnapshot:
    patrimoine = _compute_patrimoine(totals)
    return DatedSnapshot(
        date=date,
        montant_par_categorie=CategoryValues.from_mapping(totals),
        pourcentage_par_categorie=_compute_pourcentages(totals, patrimoine.pourcentage_dette),
        patrimoine=patrimoine,
    )


def _compute_patrimoine(totals: dict[Category, int]) -> Patrimoine:
    # Une catégorie d'actif négative sort du brut et passe au passif
    brut = sum(max(totals[c], 0) for c in NON_DEBT)
    passif = abs(totals[Category.DEBT]) + sum(abs(totals[c]) for c in NON_DEBT if totals[c] < 0)
    pourcentage_dette = passif / brut * 100 if brut > 0 else 0.0
    return Patrimoine(
        patrimoine_brut=brut,
        passif=passif,
        patrimoine_net=brut - passif,
        pourcentage_dette=pourcentage_dette,
    )


def _compute_pourcentages(totals: dict[Category, int], pourcentage_dette: float) -> CategoryValues:
    """
    Répartition des catégories d'actif en valeur absolue.
    La case "dette" contient le taux d'endettement, pas une part du total.
    """
    total_abs = sum(abs(totals[c]) for c in NON_DEBT)
    pourcentages = {
        c: (abs(totals[c]) / total_abs * 100 if total_abs > 0 else 0.0)
        for c in NON_DEBT
    }
    pourcentages[Category.DEBT] = pourcentage_dette
    return CategoryValues.from_mapping(pourcentages)
