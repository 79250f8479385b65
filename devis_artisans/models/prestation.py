"""
Modèles Prestation : ligne de devis et entrée du catalogue.
"""
import math
from decimal import Decimal


class LignePrestation:
    """Ligne d'un devis : libellé, quantité, prix unitaire HT."""

    def __init__(self, libelle='', quantite=0, prix_unitaire=0):
        self.libelle = libelle
        self.quantite = quantite
        self.prix_unitaire = prix_unitaire

    @property
    def is_valide(self):
        """Une ligne est retenue si elle a un libellé, une quantité et un prix."""
        return bool((self.libelle or '').strip()) and bool(self.quantite) \
            and bool(self.prix_unitaire)

    def to_dict(self):
        return {
            'libelle': self.libelle,
            'quantite': self.quantite,
            'prix_unitaire': self.prix_unitaire,
        }

    @classmethod
    def from_dict(cls, data):
        """Accepte aussi l'ancienne clé prixUnitaire."""
        prix = data.get('prix_unitaire', data.get('prixUnitaire', 0))
        return cls(
            libelle=data.get('libelle', ''),
            quantite=_to_number(data.get('quantite', 0)),
            prix_unitaire=_to_number(prix),
        )

    @classmethod
    def from_saisie(cls, libelle, quantite, prix_unitaire):
        """Crée une ligne depuis les champs texte d'un formulaire (virgule acceptée)."""
        return cls(
            libelle=(libelle or '').strip(),
            quantite=_to_number(quantite),
            prix_unitaire=_to_number(prix_unitaire),
        )

    def __eq__(self, other):
        return isinstance(other, LignePrestation) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"LignePrestation(libelle={self.libelle!r}, quantite={self.quantite!r}, "
                f"prix_unitaire={self.prix_unitaire!r})")


class PrestationItem:
    """Prestation réutilisable du catalogue."""

    def __init__(self, id=None, libelle='', prix_unitaire=0.0, date_creation=None):
        self.id = id
        self.libelle = libelle
        self.prix_unitaire = prix_unitaire
        self.date_creation = date_creation

    def matches(self, libelle, prix_unitaire):
        """Libellé identique à la casse et aux espaces près, prix strictement égal."""
        return (self.libelle or '').strip().lower() == (libelle or '').strip().lower() \
            and self.prix_unitaire == prix_unitaire

    def to_dict(self):
        return {
            'id': self.id,
            'libelle': self.libelle,
            'prix_unitaire': self.prix_unitaire,
            'date_creation': self.date_creation,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get('id'),
            libelle=data.get('libelle', ''),
            prix_unitaire=_to_number(data.get('prix_unitaire', 0)),
            date_creation=data.get('date_creation'),
        )

    def __repr__(self):
        return f"PrestationItem(id={self.id!r}, libelle={self.libelle!r})"

    def __str__(self):
        return self.libelle


def _to_number(value):
    """Convertit une saisie en nombre ; 0 si vide, invalide ou non fini (nan, inf)."""
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        nombre = float(value)
    else:
        try:
            nombre = float(str(value).replace(',', '.').strip())
        except (TypeError, ValueError):
            return 0
    return nombre if math.isfinite(nombre) else 0
