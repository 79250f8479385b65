"""
Modèle Devis.

Un devis est un document historique : les coordonnées du client et de
l'entreprise y sont recopiées (« instantanés ») au moment de la création ou de
la modification, et ne suivent pas les fiches vivantes ensuite.
"""
from enum import Enum

from devis_artisans.config.settings import TVA_DEFAUT
from devis_artisans.models.prestation import LignePrestation


class StatutDevis(Enum):
    """Statuts d'un devis, dans l'ordre du cycle."""
    EN_ATTENTE = "En attente"
    ACCEPTE = "Accepté"
    REFUSE = "Refusé"

    def suivant(self):
        """En attente → Accepté → Refusé → En attente."""
        ordre = list(StatutDevis)
        return ordre[(ordre.index(self) + 1) % len(ordre)]

    @classmethod
    def coerce(cls, value):
        """Ramène une valeur stockée dans l'énumération (défaut : En attente)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.EN_ATTENTE


# Champs saisis (brouillon) ; id, date, montant et statut sont calculés
DRAFT_FIELDS = (
    'numero',
    'client',
    'client_email',
    'client_telephone',
    'client_adresse',
    'entreprise_nom',
    'entreprise_email',
    'entreprise_telephone',
    'entreprise_adresse',
    'entreprise_siret',
    'adresse_chantier',
    'description',
    'notes',
)


class Devis:
    """Modèle représentant un devis."""

    def __init__(self, id=None, numero='', client='', client_email='',
                 client_telephone='', client_adresse='', entreprise_nom='',
                 entreprise_email='', entreprise_telephone='',
                 entreprise_adresse='', entreprise_siret='',
                 adresse_chantier='', date='', montant='',
                 statut=StatutDevis.EN_ATTENTE, description='',
                 prestations=None, tva=TVA_DEFAUT, notes=''):
        self.id = id
        self.numero = numero
        self.client = client
        self.client_email = client_email
        self.client_telephone = client_telephone
        self.client_adresse = client_adresse
        self.entreprise_nom = entreprise_nom
        self.entreprise_email = entreprise_email
        self.entreprise_telephone = entreprise_telephone
        self.entreprise_adresse = entreprise_adresse
        self.entreprise_siret = entreprise_siret
        self.adresse_chantier = adresse_chantier
        self.date = date
        self.montant = montant
        self.statut = StatutDevis.coerce(statut)
        self.description = description
        self.prestations = list(prestations or [])
        self.tva = tva
        self.notes = notes

    def validate(self):
        """Contrôles du formulaire de saisie."""
        if not (self.client or '').strip():
            raise ValueError("Veuillez saisir le nom du client")
        if not (self.description or '').strip():
            raise ValueError("Veuillez saisir une description")
        if not any(ligne.is_valide for ligne in self.prestations):
            raise ValueError("Veuillez ajouter au moins une prestation")

    def to_dict(self):
        data = {field: getattr(self, field) for field in DRAFT_FIELDS}
        data.update({
            'id': self.id,
            'date': self.date,
            'montant': self.montant,
            'statut': self.statut.value,
            'prestations': [ligne.to_dict() for ligne in self.prestations],
            'tva': self.tva,
        })
        return data

    @classmethod
    def from_dict(cls, data):
        """Crée un Devis depuis un dictionnaire ; les colonnes nulles deviennent ''."""
        kwargs = {field: data.get(field) or '' for field in DRAFT_FIELDS}
        prestations = [
            ligne if isinstance(ligne, LignePrestation) else LignePrestation.from_dict(ligne)
            for ligne in (data.get('prestations') or [])
        ]
        tva = data.get('tva')
        return cls(
            id=data.get('id'),
            date=data.get('date') or '',
            montant=data.get('montant') or '',
            statut=data.get('statut'),
            prestations=prestations,
            tva=float(str(tva).replace(',', '.')) if tva not in (None, '') else TVA_DEFAUT,
            **kwargs,
        )

    @property
    def adresse_intervention(self):
        """Adresse du chantier, à défaut celle du client."""
        return self.adresse_chantier or self.client_adresse

    def __eq__(self, other):
        return isinstance(other, Devis) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Devis(id={self.id!r}, client={self.client!r}, montant={self.montant!r})"

    def __str__(self):
        return f"{self.numero} - {self.client}" if self.numero else self.client


def snapshot_client(client):
    """Copie les coordonnées d'un client dans les champs d'un devis."""
    return {
        'client': client.nom_complet,
        'client_email': client.email,
        'client_telephone': client.telephone,
        'client_adresse': client.adresse,
    }


def snapshot_entreprise(profile):
    """Copie le profil entreprise dans les champs d'un devis."""
    return {
        'entreprise_nom': profile.nom,
        'entreprise_email': profile.email,
        'entreprise_telephone': profile.telephone,
        'entreprise_adresse': profile.adresse,
        'entreprise_siret': profile.siret,
    }
