"""
Calcul des totaux d'un devis (HT, TVA, TTC) et formatage des montants.

Les montants sont calculés en Decimal à partir de la représentation texte des
nombres saisis, puis arrondis au centime (arrondi commercial, ROUND_HALF_UP).
Le montant formaté est celui qui est enregistré dans le devis.
"""
import re
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Dict, Iterable, Optional, Union

from devis_artisans.config.settings import (
    DEVISE, ESPACE_DEVISE, MOIS_ABREGES, SEPARATEUR_DECIMAL, SEPARATEUR_MILLIERS,
)

CENTIME = Decimal('0.01')

Nombre = Union[int, float, str, Decimal]


def to_decimal(value: Nombre, default: str = '0') -> Decimal:
    """Convertit une valeur (nombre ou saisie texte) en Decimal exact ; défaut si non fini."""
    if isinstance(value, Decimal):
        nombre = value
    else:
        try:
            nombre = Decimal(str(value).replace(',', '.').strip())
        except (InvalidOperation, ValueError):
            return Decimal(default)
    return nombre if nombre.is_finite() else Decimal(default)


def arrondir(value: Decimal) -> Decimal:
    return value.quantize(CENTIME, rounding=ROUND_HALF_UP)


def total_ligne(ligne) -> Decimal:
    """Quantité × prix unitaire, non arrondi."""
    return to_decimal(ligne.quantite) * to_decimal(ligne.prix_unitaire)


def calculer_total_ht(lignes: Iterable) -> Decimal:
    return sum((total_ligne(ligne) for ligne in lignes), Decimal('0'))


def calculer_montant_tva(total_ht: Decimal, taux_tva: Nombre) -> Decimal:
    return total_ht * to_decimal(taux_tva) / Decimal('100')


def calculer_totaux(lignes: Iterable, taux_tva: Nombre) -> Dict[str, Decimal]:
    """
    Calcule les totaux d'un devis.

    Args:
        lignes: lignes de prestation (quantite, prix_unitaire)
        taux_tva: taux de TVA en pourcentage

    Returns:
        Dict total_ht, montant_tva, total_ttc arrondis au centime
    """
    total_ht = calculer_total_ht(lignes)
    montant_tva = calculer_montant_tva(total_ht, taux_tva)
    return {
        'total_ht': arrondir(total_ht),
        'montant_tva': arrondir(montant_tva),
        'total_ttc': arrondir(total_ht + montant_tva),
    }


def formater_nombre(value: Nombre) -> str:
    """1234.5 → '1 234,50' (espace fine insécable comme séparateur de milliers)."""
    texte = f"{arrondir(to_decimal(value)):,.2f}"
    return texte.replace(',', SEPARATEUR_MILLIERS).replace('.', SEPARATEUR_DECIMAL)


def formater_montant(value: Nombre) -> str:
    """1234.5 → '1 234,50 €'."""
    return f"{formater_nombre(value)}{ESPACE_DEVISE}{DEVISE}"


def parser_montant(texte: str) -> Decimal:
    """
    Relit un montant affiché : seuls les chiffres comptent, les deux derniers
    sont les centimes. '1 234,50 €' → Decimal('1234.50').
    Un signe moins en tête (remise) est conservé.
    """
    texte = (texte or '').strip()
    chiffres = re.sub(r'[^0-9]', '', texte)
    if not chiffres:
        return Decimal('0.00')
    montant = Decimal(int(chiffres)).scaleb(-2)
    return -montant if texte.startswith('-') else montant


def format_date_affichage(jour: Optional[Union[date, datetime]] = None) -> str:
    """Date lisible du devis : '19 oct. 2026'."""
    jour = jour or date.today()
    return f"{jour.day} {MOIS_ABREGES[jour.month - 1]} {jour.year}"


def parse_date_affichage(texte: str) -> Optional[date]:
    """Inverse de format_date_affichage ; None si la date n'est pas reconnue."""
    morceaux = (texte or '').split()
    if len(morceaux) != 3:
        return None
    jour, mois, annee = morceaux
    if mois not in MOIS_ABREGES:
        return None
    try:
        return date(int(annee), MOIS_ABREGES.index(mois) + 1, int(jour))
    except ValueError:
        return None
