from constants import CATEGORY_ICONS, CATEGORY_LABELS
from services.bilan import parse_date
from services.models import Category


def format_euros(cents: int) -> str:
    """12345678 → '123 456,78 €' (format fr-FR, espace fine insécable)"""
    text = f"{cents / 100:,.2f}"
    return text.replace(",", "\u202f").replace(".", ",") + " €"


def format_pourcentage(value: float) -> str:
    # Seul endroit où les pourcentages sont arrondis
    return f"{value:.1f} %"


def format_date(date_iso: str) -> str:
    """'2024-01-15T00:00:00.000Z' → '15/01/2024'"""
    return parse_date(date_iso).strftime("%d/%m/%Y")


def montant_to_input(cents: int) -> str:
    """Valeur de pré-remplissage d'un champ montant (euros)."""
    return f"{cents / 100:.2f}"


def category_badge(category: Category) -> str:
    category = Category(category)
    return f"{CATEGORY_ICONS[category]} {CATEGORY_LABELS[category]}"
