import logging
import os

import streamlit as st

from services.bilan import compute_snapshots
from services.patrimoine_manager import AppState, load_state, save_state
from ui import bilan_form, position_form, tab_bilan, tab_historique, tab_positions

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(page_title="Suivi Patrimoine", layout="wide")


# ── Cache des lectures JSON ───────────────────────────────────────────────────
# Le disque n'est relu qu'une fois par session Streamlit.
# commit() sauvegarde le nouvel état puis vide le cache pour forcer un rechargement.

@st.cache_data(show_spinner=False)
def cached_load_state() -> AppState:
    return load_state()


def commit(state: AppState):
    save_state(state)
    cached_load_state.clear()


def flash(msg: str, type: str = "success"):
    """Stocke un message à afficher après le prochain rerun."""
    st.session_state["_flash"] = {"msg": msg, "type": type}


def show_flash():
    """Affiche et consomme le message flash s'il existe."""
    if "_flash" in st.session_state:
        f = st.session_state.pop("_flash")
        icons = {"success": "✅", "warning": "⚠️", "error": "❌", "info": "ℹ️"}
        st.toast(f["msg"], icon=icons.get(f["type"], "ℹ️"))


state = cached_load_state()
snapshots = compute_snapshots(state.positions, state.records)

show_flash()
position_form.render_active_dialog(state, commit, flash)
bilan_form.render_active_dialog(state, commit, flash)


# ── Page principale ───────────────────────────────────────────────────────────

st.title("Votre patrimoine")

tab_resume, tab_pos, tab_histo = st.tabs(["📊 Bilan", "📋 Positions", "📈 Historique"])

with tab_resume:
    tab_bilan.render(snapshots[0])

with tab_pos:
    tab_positions.render(state, commit, flash)

with tab_histo:
    tab_historique.render(state, snapshots)
