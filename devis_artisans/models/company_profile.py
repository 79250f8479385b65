"""
Modèle Profil entreprise (émetteur des devis).
"""

FIELDS = ('nom', 'email', 'telephone', 'adresse', 'siret')


class CompanyProfile:
    """Profil unique de l'entreprise de l'artisan."""

    def __init__(self, nom='', email='', telephone='', adresse='', siret=''):
        self.nom = nom
        self.email = email
        self.telephone = telephone
        self.adresse = adresse
        self.siret = siret

    def to_dict(self):
        return {field: getattr(self, field) for field in FIELDS}

    @classmethod
    def from_dict(cls, data):
        """Les champs absents ou nuls deviennent des chaînes vides."""
        return cls(**{field: data.get(field) or '' for field in FIELDS})

    @property
    def is_empty(self):
        return not any(getattr(self, field) for field in FIELDS)

    def __eq__(self, other):
        return isinstance(other, CompanyProfile) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"CompanyProfile(nom={self.nom!r})"

    def __str__(self):
        return self.nom
