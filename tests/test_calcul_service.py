from datetime import date
from decimal import Decimal

import pytest

from devis_artisans.models.prestation import LignePrestation
from devis_artisans.services.calcul_service import (
    calculer_montant_tva, calculer_total_ht, calculer_totaux, format_date_affichage,
    formater_montant, parse_date_affichage, parser_montant, to_decimal, total_ligne,
)

LIGNES = [LignePrestation('Carrelage', 2, 10.0), LignePrestation('Joints', 1, 5.0)]


def test_totaux_example():
    totaux = calculer_totaux(LIGNES, 20)
    assert totaux == {
        'total_ht': Decimal('25.00'),
        'montant_tva': Decimal('5.00'),
        'total_ttc': Decimal('30.00'),
    }


def test_total_ligne_and_ht():
    assert total_ligne(LignePrestation('x', 3, 0.1)) == Decimal('0.3')
    assert calculer_total_ht([]) == Decimal('0')
    assert calculer_montant_tva(Decimal('100'), 5.5) == Decimal('5.5')


def test_rounding_is_half_up():
    # 0.125 € TTC : arrondi commercial au centime supérieur
    totaux = calculer_totaux([LignePrestation('x', 1, 0.125)], 0)
    assert totaux['total_ttc'] == Decimal('0.13')


def test_float_noise_does_not_leak():
    totaux = calculer_totaux([LignePrestation('x', 3, 0.1)], 0)
    assert totaux['total_ht'] == Decimal('0.30')


@pytest.mark.parametrize('value, expected', [
    (30, "30,00\u00a0€"),
    (Decimal('1234.5'), "1\u202f234,50\u00a0€"),
    (1234567.891, "1\u202f234\u202f567,89\u00a0€"),
    (0, "0,00\u00a0€"),
])
def test_formater_montant(value, expected):
    assert formater_montant(value) == expected


def test_parser_montant():
    assert parser_montant("1\u202f234,50\u00a0€") == Decimal('1234.50')
    assert parser_montant("") == Decimal('0')
    assert parser_montant(formater_montant(30)) == Decimal('30')


def test_parser_montant_keeps_minus_sign():
    assert formater_montant(Decimal('-1234.5')) == "-1\u202f234,50\u00a0€"
    assert parser_montant("-1\u202f234,50\u00a0€") == Decimal('-1234.50')
    assert parser_montant("-50,00\u00a0€") == Decimal('-50.00')


def test_to_decimal_accepts_comma_and_garbage():
    assert to_decimal('12,5') == Decimal('12.5')
    assert to_decimal('abc') == Decimal('0')


@pytest.mark.parametrize('value', ['nan', 'inf', '-Infinity', float('nan'), Decimal('NaN'), Decimal('-Infinity')])
def test_to_decimal_rejects_non_finite(value):
    assert to_decimal(value) == Decimal('0')
    assert calculer_totaux([LignePrestation('x', value, 10)], 20)['total_ttc'] == Decimal('0.00')


def test_date_affichage():
    jour = date(2026, 2, 3)
    assert format_date_affichage(jour) == "3 févr. 2026"
    assert parse_date_affichage("3 févr. 2026") == jour
    assert parse_date_affichage("19 oct. 2026") == date(2026, 10, 19)
    assert parse_date_affichage("03/02/2026") is None
    assert parse_date_affichage("31 févr. 2026") is None
    assert parse_date_affichage("") is None
