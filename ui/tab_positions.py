"""
ui/tab_positions.py
───────────────────
Contenu du tab "📋 Positions" : liste des positions avec leur dernière
valeur, activation/désactivation, édition et suppression.

Point d'entrée unique : render(state, commit_fn, flash_fn)
"""

import streamlit as st

from services.historique import latest_record
from services.positions import active_positions
from services.models import Position
from services.patrimoine_manager import AppState, toggle_active
from ui import position_form
from ui.bilan_form import set_dialog_bilan
from ui.formatting import category_badge, format_date, format_euros


def _render_position_row(state: AppState, position: Position, commit_fn, flash_fn):
    """Affiche une ligne de position avec ses boutons d'action."""
    cols = st.columns([2, 4, 3, 2, 1, 1])

    cols[0].write(category_badge(position.category))
    if position.active:
        cols[1].write(f"**{position.label}**")
    else:
        cols[1].markdown(f":gray[{position.label}] :red-badge[Inactive]")

    derniere = latest_record(state.records, position.id)
    if derniere is not None:
        cols[2].write(format_euros(derniere.montant))
        cols[2].caption(f"Dernière valeur · {format_date(derniere.date)}")
    else:
        cols[2].write("--")

    toggle_label = "Désactiver" if position.active else "Réactiver"
    if cols[3].button(toggle_label, key=f"toggle_{position.id}", width="stretch"):
        new_state, msg, msg_type = toggle_active(state, position.id)
        if msg_type != "error":
            commit_fn(new_state)
        flash_fn(msg, msg_type)
        st.rerun()

    # UUID stable, jamais l'index d'affichage
    if cols[4].button("", key=f"mod_{position.id}", icon=":material/edit_square:"):
        position_form.set_dialog_edit(position.id)
        st.rerun()
    if cols[5].button("", key=f"del_{position.id}", icon=":material/delete:"):
        position_form.set_dialog_delete(position.id)
        st.rerun()


# ── Point d'entrée public ─────────────────────────────────────────────────────

def render(state: AppState, commit_fn, flash_fn):
    c1, c2, c3 = st.columns([4, 2, 2], vertical_alignment="center")
    c1.subheader(f"Positions ({len(state.positions)})")
    if c2.button("Ajouter", icon=":material/add:", width="stretch"):
        position_form.set_dialog_create()
        st.rerun()
    if c3.button("Faire le bilan", type="primary", width="stretch",
                 disabled=not active_positions(state.positions)):
        set_dialog_bilan()
        st.rerun()

    if not state.positions:
        st.info("Aucune position ajoutée. Commencez par ajouter une position.")
        return

    for position in state.positions:
        with st.container(border=True, vertical_alignment="center"):
            _render_position_row(state, position, commit_fn, flash_fn)
