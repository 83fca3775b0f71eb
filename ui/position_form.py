"""
ui/position_form.py
───────────────────
Modales de création, d'édition et de suppression d'une position.

Gestion du session state :
- Une seule clé `_dialog` centralise ce qui doit être affiché (partagée avec
  ui/bilan_form.py) :
    {"type": "position_create"}
    {"type": "position_edit",   "position_id": "..."}
    {"type": "position_delete", "position_id": "..."}
- Toute ouverture écrase la précédente → impossible d'avoir deux modales.
- Toute fermeture (save/cancel) supprime `_dialog` avant st.rerun().

Points d'entrée publics :
    set_dialog_create()
    set_dialog_edit(position_id)
    set_dialog_delete(position_id)
    render_active_dialog(state, commit_fn, flash_fn)
"""

import streamlit as st

from constants import CATEGORIES
from services.patrimoine_manager import (
    AppState, create_position, edit_position, remove_position,
)
from services.positions import find_position
from ui.formatting import category_badge


# ── Gestion de l'état des modales ─────────────────────────────────────────────

def set_dialog_create():
    st.session_state["_dialog"] = {"type": "position_create"}

def set_dialog_edit(position_id: str):
    st.session_state["_dialog"] = {"type": "position_edit", "position_id": position_id}

def set_dialog_delete(position_id: str):
    st.session_state["_dialog"] = {"type": "position_delete", "position_id": position_id}

def close_dialog():
    """Ferme la modale et nettoie tout l'état du formulaire."""
    st.session_state.pop("_dialog", None)
    for key in list(st.session_state.keys()):
        if key.startswith("_form_"):
            st.session_state.pop(key, None)


def apply_result(result, commit_fn, flash_fn):
    """Applique le résultat d'une action (état, message, type) puis relance le script."""
    new_state, msg, msg_type = result
    if msg_type == "error":
        st.error(msg)
        return
    commit_fn(new_state)
    flash_fn(msg, msg_type)
    close_dialog()
    st.rerun()


def _missing_position(error: ValueError):
    st.error(str(error))
    if st.button("Fermer"):
        close_dialog()
        st.rerun()


# ── Formulaire ────────────────────────────────────────────────────────────────

def _form_position(state: AppState, position, commit_fn, flash_fn):
    initial_label    = position.label    if position else ""
    initial_category = position.category if position else CATEGORIES[0]

    label = st.text_input("Label *", value=initial_label,
                          placeholder="ex. Compte courant", key="_form_label")
    category = st.selectbox(
        "Catégorie", options=CATEGORIES,
        index=CATEGORIES.index(initial_category),
        format_func=category_badge,
        key="_form_categorie",
    )

    c1, c2 = st.columns(2)
    if c1.button("Annuler", use_container_width=True, key="_form_cancel"):
        close_dialog()
        st.rerun()

    if c2.button("Sauvegarder", type="primary", use_container_width=True, key="_form_save"):
        if position is None:
            result = create_position(state, label, category)
        else:
            result = edit_position(state, position.id, label, category)
        apply_result(result, commit_fn, flash_fn)


# ── Modales Streamlit ─────────────────────────────────────────────────────────

@st.dialog("Position", dismissible=False)
def _dialog_create(state, commit_fn, flash_fn):
    st.markdown("### Ajouter une position")
    _form_position(state, None, commit_fn, flash_fn)


@st.dialog("Position", dismissible=False)
def _dialog_edit(state, position_id, commit_fn, flash_fn):
    try:
        position = find_position(state.positions, position_id)
    except ValueError as e:
        _missing_position(e)
        return

    st.markdown(f"### Modifier : {position.label}")
    _form_position(state, position, commit_fn, flash_fn)


@st.dialog("Supprimer une position", dismissible=False)
def _dialog_delete(state, position_id, commit_fn, flash_fn):
    try:
        position = find_position(state.positions, position_id)
    except ValueError as e:
        _missing_position(e)
        return

    st.warning(
        f"Supprimer **{position.label}** ? Tout son historique sera aussi supprimé. "
        "Cette action est irréversible."
    )
    c1, c2 = st.columns(2)
    if c1.button("Annuler", use_container_width=True, key="_delete_cancel"):
        close_dialog()
        st.rerun()
    if c2.button("Confirmer", type="primary", use_container_width=True, key="_delete_confirm"):
        apply_result(remove_position(state, position.id), commit_fn, flash_fn)


# ── Point d'entrée public ─────────────────────────────────────────────────────

def render_active_dialog(state: AppState, commit_fn, flash_fn):
    """
    À appeler une seule fois par script run (dans app.py).
    Ouvre la modale correspondant à `_dialog` en session state, si c'est une
    modale de position.
    """
    dialog = st.session_state.get("_dialog")
    if not dialog:
        return

    dtype = dialog["type"]
    if dtype == "position_create":
        _dialog_create(state, commit_fn, flash_fn)
    elif dtype == "position_edit":
        _dialog_edit(state, dialog["position_id"], commit_fn, flash_fn)
    elif dtype == "position_delete":
        _dialog_delete(state, dialog["position_id"], commit_fn, flash_fn)
