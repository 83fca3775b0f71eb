"""
ui/bilan_form.py
────────────────
Modales de saisie ("Faire le bilan") et de suppression d'un bilan.

Utilise la même clé `_dialog` que ui/position_form.py :
    {"type": "bilan_edit",   "date": "2024-01-15", "date_iso": None | "..."}
    {"type": "bilan_delete", "date_iso": "..."}

Points d'entrée publics :
    set_dialog_bilan(day=None, date_iso=None)
    set_dialog_delete_bilan(date_iso)
    render_active_dialog(state, commit_fn, flash_fn)
"""

from datetime import date

import streamlit as st

from services.bilan import parse_date
from services.historique import bilan_target_date, montants_at
from services.patrimoine_manager import AppState, remove_bilan, submit_bilan
from ui.formatting import category_badge, format_date, montant_to_input
from ui.position_form import apply_result, close_dialog


# ── Gestion de l'état des modales ─────────────────────────────────────────────

def set_dialog_bilan(day: date | None = None, date_iso: str | None = None):
    day = day or date.today()
    st.session_state["_dialog"] = {"type": "bilan_edit", "date": day.isoformat(), "date_iso": date_iso}

def set_dialog_delete_bilan(date_iso: str):
    st.session_state["_dialog"] = {"type": "bilan_delete", "date_iso": date_iso}


def bilan_day(date_iso: str) -> date:
    """Jour calendaire d'un bilan existant, pour rouvrir le formulaire."""
    return parse_date(date_iso).date()


# ── Modales Streamlit ─────────────────────────────────────────────────────────

@st.dialog("Bilan", width="large", dismissible=False)
def _dialog_bilan(state: AppState, initial_day: date, source_date_iso: str | None, commit_fn, flash_fn):
    day = st.date_input("Date du bilan", value=initial_day, format="DD/MM/YYYY", key="_form_bilan_date")
    date_iso = bilan_target_date(day, source_date_iso)
    existing = montants_at(state.records, date_iso)

    if existing:
        st.markdown("### Modifier le bilan")
        st.info("Un bilan existe déjà pour cette date. Vous pouvez modifier les montants ci-dessous.")
    else:
        st.markdown("### Faire le bilan")

    # Positions actives, plus les inactives déjà renseignées à cette date :
    # la saisie remplace tout le bilan, leurs montants doivent rester visibles.
    positions = [p for p in state.positions if p.active or p.id in existing]
    if not positions:
        st.info("Aucune position active. Ajoutez ou réactivez une position pour faire un bilan.")

    montants_text = {}
    for position in positions:
        c1, c2 = st.columns([1, 1], vertical_alignment="center")
        label = f"{category_badge(position.category)} · {position.label}"
        c1.write(label if position.active else f"{label} (inactive)")
        initial = montant_to_input(existing[position.id]) if position.id in existing else ""
        # La clé inclut la date : changer de date recharge les montants saisis
        montants_text[position.id] = c2.text_input(
            "Montant (€)", value=initial, placeholder="Montant (€)",
            label_visibility="collapsed",
            key=f"_form_montant_{date_iso}_{position.id}",
        )

    c1, c2 = st.columns(2)
    if c1.button("Annuler", use_container_width=True, key="_form_cancel"):
        close_dialog()
        st.rerun()
    save_label = "Mettre à jour le bilan" if existing else "Sauvegarder le bilan"
    if c2.button(save_label, type="primary", use_container_width=True, key="_form_save"):
        apply_result(submit_bilan(state, day, montants_text, source_date_iso), commit_fn, flash_fn)


@st.dialog("Supprimer un bilan", dismissible=False)
def _dialog_delete(state: AppState, date_iso: str, commit_fn, flash_fn):
    st.warning(f"Supprimer le bilan du **{format_date(date_iso)}** ? Cette action est irréversible.")
    c1, c2 = st.columns(2)
    if c1.button("Annuler", use_container_width=True, key="_delete_cancel"):
        close_dialog()
        st.rerun()
    if c2.button("Confirmer", type="primary", use_container_width=True, key="_delete_confirm"):
        apply_result(remove_bilan(state, date_iso), commit_fn, flash_fn)


# ── Point d'entrée public ─────────────────────────────────────────────────────

def render_active_dialog(state: AppState, commit_fn, flash_fn):
    dialog = st.session_state.get("_dialog")
    if not dialog:
        return

    if dialog["type"] == "bilan_edit":
        _dialog_bilan(state, date.fromisoformat(dialog["date"]), dialog.get("date_iso"), commit_fn, flash_fn)
    elif dialog["type"] == "bilan_delete":
        _dialog_delete(state, dialog["date_iso"], commit_fn, flash_fn)
