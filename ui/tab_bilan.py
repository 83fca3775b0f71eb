"""
ui/tab_bilan.py
───────────────
Contenu du tab "📊 Bilan" : montants ou pourcentages par catégorie,
résumé du patrimoine et camembert de répartition, d'après le bilan du jour.

Point d'entrée unique : render(snapshot)
"""

import plotly.graph_objects as go
import streamlit as st

from constants import CATEGORIES, CATEGORIES_ACTIF, CATEGORY_COLOR_MAP, CATEGORY_LABELS, PLOTLY_LAYOUT
from services.models import DatedSnapshot
from ui.formatting import category_badge, format_euros, format_pourcentage


def _render_categories(snapshot: DatedSnapshot, mode: str):
    cols = st.columns(3)
    for i, category in enumerate(CATEGORIES):
        col = cols[i % 3]
        if mode == "Montants":
            col.metric(category_badge(category),
                       format_euros(snapshot.montant_par_categorie[category]))
        else:
            col.metric(category_badge(category),
                       format_pourcentage(snapshot.pourcentage_par_categorie[category]))


def _render_patrimoine(snapshot: DatedSnapshot):
    patrimoine = snapshot.patrimoine
    st.subheader("Résumé du patrimoine")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Patrimoine brut", format_euros(patrimoine.patrimoine_brut))
    c2.metric("Patrimoine net", format_euros(patrimoine.patrimoine_net))
    c3.metric("Passif", format_euros(patrimoine.passif))
    c4.metric("% de dette", format_pourcentage(patrimoine.pourcentage_dette))


def _render_pie_chart(snapshot: DatedSnapshot):
    # Même base que les pourcentages : valeur absolue des catégories d'actif
    stats = [
        (category, abs(snapshot.montant_par_categorie[category]) / 100)
        for category in CATEGORIES_ACTIF
        if snapshot.montant_par_categorie[category] != 0
    ]
    if not stats:
        return

    st.subheader("Répartition par catégorie")
    fig = go.Figure(go.Pie(
        labels=[CATEGORY_LABELS[c] for c, _ in stats],
        values=[v for _, v in stats],
        marker=dict(colors=[CATEGORY_COLOR_MAP[c] for c, _ in stats]),
        textinfo="label+percent",
        textfont=dict(color="#E8EAF0", size=13),
        hole=0.35,
    ))
    fig.update_layout(
        **{**PLOTLY_LAYOUT, "margin": dict(l=10, r=10, t=10, b=10)},
        showlegend=False,
    )
    st.plotly_chart(fig, width="stretch", config={"staticPlot": True})


# ── Point d'entrée public ─────────────────────────────────────────────────────

def render(snapshot: DatedSnapshot):
    """Affiche le bilan du jour (premier élément de compute_snapshots)."""
    if all(montant == 0 for _, montant in snapshot.montant_par_categorie.items()):
        st.info("Aucun bilan effectué")
        return

    mode = st.segmented_control(
        "Affichage",
        options=["Montants", "Pourcentages"],
        default="Montants",
        key="bilan_mode",
        label_visibility="collapsed",
    ) or "Montants"

    _render_categories(snapshot, mode)
    st.divider()
    _render_patrimoine(snapshot)
    st.space(size="small")
    _render_pie_chart(snapshot)
