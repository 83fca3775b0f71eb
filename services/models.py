"""
models.py
─────────
Types du domaine : positions, valeurs saisies (bilans) et résultats agrégés.

Tous les types sont immuables (frozen) : une modification produit un nouvel
objet, jamais une mutation en place.
Les montants sont des entiers en centimes, les pourcentages des floats.
"""

from dataclasses import dataclass, fields
from enum import Enum


class Category(str, Enum):
    CASH = "cash"
    BOND = "bond"
    EQUITY = "equity"
    EXOTIC = "exotic"
    REAL_ESTATE = "real_estate"
    DEBT = "debt"


@dataclass(frozen=True)
class Position:
    id: str
    label: str
    category: Category
    # N'intervient pas dans le calcul du bilan, seulement dans la saisie
    active: bool = True


@dataclass(frozen=True)
class ValueRecord:
    date: str          # ISO-8601, identifie le bilan
    position_id: str
    montant: int       # centimes, négatif = passif


@dataclass(frozen=True)
class CategoryValues:
    """
    Une valeur par catégorie, ni plus ni moins.
    S'indexe par Category : values[Category.CASH].
    """
    cash: float = 0
    bond: float = 0
    equity: float = 0
    exotic: float = 0
    real_estate: float = 0
    debt: float = 0

    @classmethod
    def from_mapping(cls, values: dict) -> "CategoryValues":
        return cls(**{c.value: values.get(c, 0) for c in Category})

    def __getitem__(self, category: Category):
        return getattr(self, Category(category).value)

    def items(self):
        return [(Category(f.name), getattr(self, f.name)) for f in fields(self)]

    def as_dict(self) -> dict:
        return dict(self.items())


@dataclass(frozen=True)
class Patrimoine:
    patrimoine_brut: int
    passif: int
    patrimoine_net: int
    pourcentage_dette: float


@dataclass(frozen=True)
class DatedSnapshot:
    date: str
    montant_par_categorie: CategoryValues
    pourcentage_par_categorie: CategoryValues
    patrimoine: Patrimoine
