"""
tests/conftest.py
─────────────────
Fixtures pytest partagées entre tous les fichiers de test.
Un fixture = une fonction qui prépare des données réutilisables.
"""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from services.models import Category, Position, ValueRecord

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

JAN = "2024-01-01T00:00:00.000Z"
MAR = "2024-03-01T00:00:00.000Z"
JUN = "2024-06-01T00:00:00.000Z"


# ── Fixtures positions ────────────────────────────────────────────────────────

@pytest.fixture
def now():
    return NOW


@pytest.fixture
def positions_simple():
    """Une position par grande famille, dont une inactive."""
    return (
        Position(id="p-cash",   label="Compte courant",  category=Category.CASH),
        Position(id="p-action", label="PEA",             category=Category.EQUITY),
        Position(id="p-immo",   label="Appartement",     category=Category.REAL_ESTATE),
        Position(id="p-dette",  label="Prêt immobilier", category=Category.DEBT),
        Position(id="p-livret", label="Ancien livret",   category=Category.CASH, active=False),
    )


# ── Fixtures valeurs ──────────────────────────────────────────────────────────

@pytest.fixture
def records_simple():
    """Trois bilans ; toutes les positions ne sont pas renseignées à chaque date."""
    return (
        ValueRecord(date=JAN, position_id="p-cash",   montant=400000),
        ValueRecord(date=JAN, position_id="p-immo",   montant=20000000),
        ValueRecord(date=JAN, position_id="p-dette",  montant=-15000000),
        ValueRecord(date=JAN, position_id="p-livret", montant=100000),
        ValueRecord(date=MAR, position_id="p-cash",   montant=450000),
        ValueRecord(date=MAR, position_id="p-action", montant=1000000),
        ValueRecord(date=JUN, position_id="p-cash",   montant=500000),
        ValueRecord(date=JUN, position_id="p-dette",  montant=-14000000),
    )


# ── Stockage ──────────────────────────────────────────────────────────────────

@pytest.fixture
def data_dir(tmp_path):
    """Redirige tous les fichiers JSON vers un dossier temporaire."""
    with patch("services.storage.DATA_DIR", str(tmp_path)):
        yield tmp_path
