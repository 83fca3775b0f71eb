from services.models import Category

# Ordre d'affichage des catégories (= ordre de l'énumération)
CATEGORIES = list(Category)

# Catégories comptées dans le patrimoine brut
CATEGORIES_ACTIF = [c for c in CATEGORIES if c is not Category.DEBT]

CATEGORY_LABELS = {
    Category.CASH:        "Cash",
    Category.BOND:        "Obligation",
    Category.EQUITY:      "Action",
    Category.EXOTIC:      "Exotique",
    Category.REAL_ESTATE: "Immobilier",
    Category.DEBT:        "Dette",
}

CATEGORY_ICONS = {
    Category.CASH:        "💵",
    Category.BOND:        "📊",
    Category.EQUITY:      "📈",
    Category.EXOTIC:      "✨",
    Category.REAL_ESTATE: "🏠",
    Category.DEBT:        "📉",
}

# Couleur fixe par catégorie (indépendant de l'ordre d'affichage)
CATEGORY_COLOR_MAP = {
    Category.CASH:        "#486df0",
    Category.BOND:        "#A78BFA",
    Category.EQUITY:      "#85357d",
    Category.EXOTIC:      "#6f50e5",
    Category.REAL_ESTATE: "#E8547A",
    Category.DEBT:        "#F2A541",
}

PLOTLY_LAYOUT = dict(
    paper_bgcolor="#1A1D27",
    plot_bgcolor="#1A1D27",
    font=dict(color="#E8EAF0", family="sans-serif"),
    xaxis=dict(gridcolor="#2A2D3A", linecolor="#2A2D3A"),
    yaxis=dict(gridcolor="#2A2D3A", linecolor="#2A2D3A"),
    margin=dict(l=0, r=0, t=0, b=0),
    hovermode=False,
)

# ── Stockage ──────────────────────────────────────────────────────────────────
# Chaque clé est un fichier JSON DATA_DIR/<clé>.json : {"version": .., "value": ..}

DATA_DIR       = "data"
POSITIONS_KEY  = "positions"
VALEURS_KEY    = "valeurs"
SCHEMA_VERSION = 1

LOCK_TIMEOUT_SECONDS = 5
