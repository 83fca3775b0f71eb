"""
ui/tab_historique.py
───────────────────────
Contenu du tab "📈 Historique" : courbes d'évolution du patrimoine net et
des catégories, liste des bilans saisis (édition, suppression), export CSV.

Point d'entrée unique : render(state, snapshots)
"""

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from constants import CATEGORIES, CATEGORY_COLOR_MAP, CATEGORY_LABELS, PLOTLY_LAYOUT
from services.historique import export_records_csv, snapshots_to_frame
from services.models import DatedSnapshot
from services.patrimoine_manager import AppState
from ui.bilan_form import bilan_day, set_dialog_bilan, set_dialog_delete_bilan
from ui.formatting import format_date, format_euros

SERIE_NET = "Patrimoine net"


def _render_chart(selected: list[str], evo: pd.DataFrame):
    """Construit et affiche le graphique Plotly des séries sélectionnées."""
    fig = go.Figure()
    labels = {CATEGORY_LABELS[c]: c for c in CATEGORIES}

    for serie in selected:
        if serie == SERIE_NET:
            # Couleur neutre fixe pour le total
            fig.add_trace(go.Scatter(
                x=evo["date"], y=evo["patrimoine_net"],
                mode="lines+markers", name=serie,
                line=dict(color="#E8EAF0", width=2),
                marker=dict(size=5),
            ))
        elif serie in labels:
            category = labels[serie]
            fig.add_trace(go.Scatter(
                x=evo["date"], y=evo[category.value],
                mode="lines+markers", name=serie,
                line=dict(color=CATEGORY_COLOR_MAP[category], width=2),
                marker=dict(size=5),
            ))

    fig.update_layout(
        **PLOTLY_LAYOUT,
        yaxis_title="Montant (€)", xaxis_title="Date",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0,
                    bgcolor="rgba(0,0,0,0)", font=dict(color="#E8EAF0")),
    )
    st.plotly_chart(fig, width="stretch", config={"staticPlot": True})


def _render_bilan_row(snapshot: DatedSnapshot):
    cols = st.columns([3, 3, 3, 1, 1], vertical_alignment="center")
    cols[0].write(f"**{format_date(snapshot.date)}**")
    cols[1].write(f"Net : {format_euros(snapshot.patrimoine.patrimoine_net)}")
    cols[2].caption(f"Brut {format_euros(snapshot.patrimoine.patrimoine_brut)} · "
                    f"Passif {format_euros(snapshot.patrimoine.passif)}")
    if cols[3].button("", key=f"edit_bilan_{snapshot.date}", icon=":material/edit_square:"):
        set_dialog_bilan(bilan_day(snapshot.date), snapshot.date)
        st.rerun()
    if cols[4].button("", key=f"del_bilan_{snapshot.date}", icon=":material/delete:"):
        set_dialog_delete_bilan(snapshot.date)
        st.rerun()


# ── Point d'entrée public ─────────────────────────────────────────────────────

def render(state: AppState, snapshots: list[DatedSnapshot]):
    """
    Affiche le contenu complet du tab Historique.

    Paramètres :
    - state     : positions et valeurs saisies
    - snapshots : résultat de compute_snapshots (le premier est le bilan du jour)
    """
    historiques = snapshots[1:]
    if not historiques:
        st.info("Aucun historique disponible. Faites un premier bilan pour construire un historique.")
        return

    evo = snapshots_to_frame(snapshots)

    # Sélecteur de séries : seulement les catégories non nulles sur la période
    options_cat = [CATEGORY_LABELS[c] for c in CATEGORIES if (evo[c.value] != 0).any()]
    all_options = [SERIE_NET] + options_cat

    selected = st.multiselect(
        "Séries à afficher",
        options=all_options,
        default=all_options,
        placeholder="Choisir au moins une série…",
    )
    if not selected:
        st.info("Sélectionne au moins une série à afficher.")
    else:
        _render_chart(selected, evo)

    st.subheader("Historique des bilans")
    for snapshot in historiques:
        with st.container(border=True):
            _render_bilan_row(snapshot)

    st.download_button(
        "Télécharger l'historique",
        data=export_records_csv(state.positions, state.records),
        file_name="bilans.csv",
        mime="text/csv",
        icon=":material/download:",
        use_container_width=True,
    )
