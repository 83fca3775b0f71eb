"""
tests/test_formatting.py
────────────────────────
Tests des fonctions d'affichage dans ui/formatting.py.
"""

from ui.formatting import format_date, format_euros, format_pourcentage, montant_to_input


class TestFormatEuros:

    def test_separateurs_francais(self):
        assert format_euros(123456) == "1\u202f234,56 €"

    def test_millions(self):
        assert format_euros(1234567890) == "12\u202f345\u202f678,90 €"

    def test_petit_montant(self):
        assert format_euros(5) == "0,05 €"

    def test_montant_negatif(self):
        assert format_euros(-30000000) == "-300\u202f000,00 €"


class TestAutresFormats:

    def test_pourcentage_arrondi(self):
        assert format_pourcentage(33.333) == "33.3 %"

    def test_date_jour_mois_annee(self):
        assert format_date("2024-01-15T00:00:00.000Z") == "15/01/2024"

    def test_pre_remplissage_en_euros(self):
        assert montant_to_input(150050) == "1500.50"
