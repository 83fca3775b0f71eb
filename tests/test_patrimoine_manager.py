"""
tests/test_patrimoine_manager.py
────────────────────────────────
Tests des séquences métier dans services/patrimoine_manager.py.

Les actions sont pures : on vérifie l'état retourné et le message.
Seuls load_state / save_state écrivent sur le disque (fixture data_dir).
"""

from datetime import date

import pytest

from services.bilan import compute_snapshots
from services.historique import bilan_date_iso
from services.models import Category, ValueRecord
from services.patrimoine_manager import (
    AppState, create_position, edit_position, load_state, remove_bilan,
    remove_position, save_state, submit_bilan, toggle_active,
)
from services.positions import find_position


@pytest.fixture
def state(positions_simple, records_simple):
    return AppState(positions=positions_simple, records=records_simple)


# ── Persistance ───────────────────────────────────────────────────────────────

class TestPersistance:

    def test_etat_vide_par_defaut(self, data_dir):
        assert load_state() == AppState()

    def test_relit_l_etat_sauvegarde(self, data_dir, state):
        save_state(state)
        assert load_state() == state


# ── Positions ─────────────────────────────────────────────────────────────────

class TestCreatePosition:

    def test_ajoute_une_position(self):
        new_state, msg, msg_type = create_position(AppState(), "Livret A", Category.CASH)
        assert msg_type == "success"
        assert len(msg) > 0
        assert len(new_state.positions) == 1
        assert new_state.positions[0].label == "Livret A"

    def test_label_nettoye(self):
        new_state, _, _ = create_position(AppState(), "  Livret A  ", Category.CASH)
        assert new_state.positions[0].label == "Livret A"

    @pytest.mark.parametrize("label", ["", "   ", None])
    def test_label_obligatoire(self, state, label):
        new_state, _, msg_type = create_position(state, label, Category.CASH)
        assert msg_type == "error"
        assert new_state is state


class TestEditPosition:

    def test_modifie_label_et_categorie(self, state):
        new_state, _, msg_type = edit_position(state, "p-action", "Compte-titres", Category.BOND)
        assert msg_type == "success"
        position = find_position(new_state.positions, "p-action")
        assert position.label == "Compte-titres"
        assert position.category is Category.BOND

    def test_conserve_les_valeurs(self, state):
        new_state, _, _ = edit_position(state, "p-action", "Compte-titres", Category.BOND)
        assert new_state.records == state.records

    def test_position_inconnue(self, state):
        new_state, _, msg_type = edit_position(state, "inconnu", "X", Category.CASH)
        assert msg_type == "error"
        assert new_state is state

    def test_changer_de_categorie_deplace_tout_l_historique(self, state, now):
        new_state, _, _ = edit_position(state, "p-cash", "Compte courant", Category.BOND)
        bilan = compute_snapshots(new_state.positions, new_state.records, now=now)[0]
        assert bilan.montant_par_categorie.bond == 500000
        assert bilan.montant_par_categorie.cash == 100000


class TestToggleActive:

    def test_desactive(self, state):
        new_state, msg, msg_type = toggle_active(state, "p-cash")
        assert msg_type == "success"
        assert msg == "Position désactivée"
        assert find_position(new_state.positions, "p-cash").active is False

    def test_reactive(self, state):
        new_state, msg, _ = toggle_active(state, "p-livret")
        assert msg == "Position réactivée"
        assert find_position(new_state.positions, "p-livret").active is True

    def test_position_inconnue(self, state):
        new_state, _, msg_type = toggle_active(state, "inconnu")
        assert msg_type == "error"
        assert new_state is state


class TestRemovePosition:

    def test_supprime_la_position_et_son_historique(self, state):
        new_state, _, msg_type = remove_position(state, "p-cash")
        assert msg_type == "success"
        assert "p-cash" not in [p.id for p in new_state.positions]
        assert all(r.position_id != "p-cash" for r in new_state.records)

    def test_ne_supprime_pas_les_autres_positions(self, state):
        new_state, _, _ = remove_position(state, "p-cash")
        assert len(new_state.positions) == len(state.positions) - 1
        assert len(new_state.records) == len(state.records) - 3

    def test_position_inconnue(self, state):
        new_state, _, msg_type = remove_position(state, "inconnu")
        assert msg_type == "error"
        assert new_state is state


# ── Bilans ────────────────────────────────────────────────────────────────────

class TestSubmitBilan:

    def test_enregistre_un_nouveau_bilan(self, state):
        day = date(2024, 7, 1)
        new_state, msg, msg_type = submit_bilan(state, day, {"p-cash": "5 500,25", "p-action": ""})
        assert msg_type == "success"
        assert msg == "Bilan enregistré"
        nouveaux = [r for r in new_state.records if r.date == bilan_date_iso(day)]
        assert nouveaux == [ValueRecord(date="2024-07-01T00:00:00.000Z", position_id="p-cash", montant=550025)]

    def test_met_a_jour_un_bilan_existant(self, state):
        new_state, msg, msg_type = submit_bilan(state, date(2024, 3, 1), {"p-cash": "1000"})
        assert msg_type == "success"
        assert msg == "Bilan mis à jour"
        mars = [r for r in new_state.records if r.date == "2024-03-01T00:00:00.000Z"]
        # p-action n'a pas été ressaisi : sa valeur de mars disparaît
        assert mars == [ValueRecord(date="2024-03-01T00:00:00.000Z", position_id="p-cash", montant=100000)]

    def test_montant_invalide_annule_la_saisie(self, state):
        new_state, msg, msg_type = submit_bilan(state, date(2024, 7, 1), {"p-cash": "100", "p-action": "abc"})
        assert msg_type == "error"
        assert "abc" in msg
        assert new_state is state

    @pytest.mark.parametrize("texte", ["1e30", "1" * 29])
    def test_montant_hors_precision_annule_la_saisie(self, state, texte):
        new_state, _, msg_type = submit_bilan(state, date(2024, 7, 1), {"p-cash": texte})
        assert msg_type == "error"
        assert new_state is state

    def test_modifie_sur_place_un_bilan_importe(self):
        importe = "2024-01-15T09:30:00.000Z"
        state, _, _ = create_position(AppState(), "Compte courant", Category.CASH)
        pid = state.positions[0].id
        state = AppState(state.positions, (ValueRecord(date=importe, position_id=pid, montant=100),))

        new_state, msg, msg_type = submit_bilan(state, date(2024, 1, 15), {pid: "2"}, importe)
        assert msg_type == "success"
        assert msg == "Bilan mis à jour"
        assert new_state.records == (ValueRecord(date=importe, position_id=pid, montant=200),)

    def test_bilan_importe_deplace_a_un_autre_jour(self):
        importe = "2024-01-15T09:30:00.000Z"
        state, _, _ = create_position(AppState(), "Compte courant", Category.CASH)
        pid = state.positions[0].id
        state = AppState(state.positions, (ValueRecord(date=importe, position_id=pid, montant=100),))

        new_state, msg, _ = submit_bilan(state, date(2024, 1, 16), {pid: "2"}, importe)
        assert msg == "Bilan enregistré"
        assert {r.date for r in new_state.records} == {importe, "2024-01-16T00:00:00.000Z"}

    def test_ignore_les_positions_inconnues(self, state):
        new_state, _, _ = submit_bilan(state, date(2024, 7, 1), {"inconnu": "100", "p-cash": "1"})
        assert all(r.position_id != "inconnu" for r in new_state.records)

    def test_saisie_vide(self, state):
        new_state, _, msg_type = submit_bilan(state, date(2024, 7, 1), {"p-cash": ""})
        assert msg_type == "warning"
        assert new_state.records == state.records

    def test_saisie_vide_sur_un_bilan_existant_le_vide(self, state):
        new_state, _, msg_type = submit_bilan(state, date(2024, 3, 1), {})
        assert msg_type == "warning"
        assert all(r.date != "2024-03-01T00:00:00.000Z" for r in new_state.records)

    def test_bilan_visible_dans_le_calcul(self, now):
        state = AppState()
        state, _, _ = create_position(state, "Compte courant", Category.CASH)
        state, _, _ = create_position(state, "PEA", Category.EQUITY)
        state, _, _ = create_position(state, "Prêt", Category.DEBT)
        ids = [p.id for p in state.positions]

        state, _, _ = submit_bilan(state, date(2024, 6, 15), {
            ids[0]: "5000", ids[1]: "10000", ids[2]: "-300000",
        })

        bilans = compute_snapshots(state.positions, state.records, now=now)
        assert len(bilans) == 2
        patrimoine = bilans[0].patrimoine
        assert patrimoine.patrimoine_brut == 1500000
        assert patrimoine.passif == 30000000
        assert patrimoine.patrimoine_net == -28500000
        assert patrimoine.pourcentage_dette == pytest.approx(2000.0)


class TestRemoveBilan:

    def test_supprime_toutes_les_valeurs_de_la_date(self, state):
        new_state, _, msg_type = remove_bilan(state, "2024-01-01T00:00:00.000Z")
        assert msg_type == "success"
        assert all(r.date != "2024-01-01T00:00:00.000Z" for r in new_state.records)
        assert new_state.positions == state.positions

    def test_bilan_inconnu(self, state):
        new_state, _, msg_type = remove_bilan(state, "2020-01-01T00:00:00.000Z")
        assert msg_type == "error"
        assert new_state is state
