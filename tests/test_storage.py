"""
tests/test_storage.py
─────────────────────
Tests de la persistance JSON versionnée dans services/storage.py.

On utilise le fixture data_dir (conftest) : les fichiers sont écrits dans
tmp_path, jamais dans le vrai dossier data/.
"""

import json
import logging
from unittest.mock import patch

import pytest

from services.storage import load_list, load_value, save_value


class TestLoadValue:

    def test_retourne_defaut_si_fichier_absent(self, data_dir):
        assert load_value("positions", ["défaut"]) == ["défaut"]

    def test_ne_cree_pas_de_fichier_a_la_lecture(self, data_dir):
        load_value("positions", [])
        assert not (data_dir / "positions.json").exists()

    def test_relit_la_valeur_sauvegardee(self, data_dir):
        value = [{"id": "a", "label": "Compte courant", "categorie": "cash", "active": True}]
        save_value("positions", value)
        assert load_value("positions", []) == value

    def test_retourne_defaut_si_version_differente(self, data_dir):
        save_value("positions", [1, 2, 3], version=1)
        assert load_value("positions", [], version=2) == []

    def test_retourne_defaut_si_json_invalide(self, data_dir, caplog):
        (data_dir / "valeurs.json").write_text("{pas du json", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="services.storage"):
            assert load_value("valeurs", []) == []
        assert "valeurs" in caplog.text

    def test_retourne_defaut_si_enveloppe_mal_formee(self, data_dir):
        (data_dir / "valeurs.json").write_text("[1, 2, 3]", encoding="utf-8")
        assert load_value("valeurs", "défaut") == "défaut"

    def test_retourne_defaut_si_value_absente(self, data_dir):
        (data_dir / "valeurs.json").write_text('{"version": 1}', encoding="utf-8")
        assert load_value("valeurs", []) == []


class TestSaveValue:

    def test_ecrit_une_enveloppe_versionnee(self, data_dir):
        save_value("valeurs", [{"date": "2024-01-01", "positionId": "a", "montant": 100}], version=3)
        envelope = json.loads((data_dir / "valeurs.json").read_text(encoding="utf-8"))
        assert envelope == {
            "version": 3,
            "value": [{"date": "2024-01-01", "positionId": "a", "montant": 100}],
        }

    def test_cree_le_dossier_si_absent(self, tmp_path):
        with patch("services.storage.DATA_DIR", str(tmp_path / "nouveau")):
            save_value("positions", [])
        assert (tmp_path / "nouveau" / "positions.json").exists()

    def test_ecrase_la_valeur_precedente(self, data_dir):
        save_value("positions", [1])
        save_value("positions", [2])
        assert load_value("positions", []) == [2]

    def test_erreur_d_ecriture_journalisee_sans_exception(self, tmp_path, caplog):
        fichier = tmp_path / "pas_un_dossier"
        fichier.write_text("", encoding="utf-8")
        with patch("services.storage.DATA_DIR", str(fichier)), \
             caplog.at_level(logging.WARNING, logger="services.storage"):
            save_value("positions", [1])
        assert "positions" in caplog.text

    def test_valeur_non_serialisable_conserve_l_ancienne(self, data_dir):
        save_value("positions", [1])
        save_value("positions", [object()])
        assert load_value("positions", []) == [1]

    def test_valeur_non_serialisable_ne_laisse_pas_de_fichier_temporaire(self, data_dir):
        save_value("positions", [1, object()])
        assert not (data_dir / "positions.json.tmp").exists()


class TestLoadList:

    def test_relit_une_liste(self, data_dir):
        save_value("valeurs", [1, 2])
        assert load_list("valeurs") == [1, 2]

    def test_liste_vide_si_fichier_absent(self, data_dir):
        assert load_list("valeurs") == []

    @pytest.mark.parametrize("value", [None, 5, "texte", {"a": 1}])
    def test_liste_vide_si_la_valeur_n_est_pas_une_liste(self, data_dir, caplog, value):
        save_value("valeurs", value)
        with caplog.at_level(logging.WARNING, logger="services.storage"):
            assert load_list("valeurs") == []
        assert "valeurs" in caplog.text
