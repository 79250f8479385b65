"""
Modèle Client.
"""


class Client:
    """Modèle représentant un client de l'artisan."""

    def __init__(self, id=None, nom='', prenom='', email='', siret='',
                 telephone='', adresse=''):
        self.id = id
        self.nom = nom
        self.prenom = prenom
        self.email = email
        self.siret = siret
        self.telephone = telephone
        self.adresse = adresse

    def validate(self):
        """Valide les champs obligatoires saisis par l'utilisateur."""
        if not (self.nom or '').strip() or not (self.prenom or '').strip() \
                or not (self.email or '').strip():
            raise ValueError("Veuillez renseigner le nom, le prénom et le mail")

    def to_dict(self):
        """Convertit le client en dictionnaire."""
        return {
            'id': self.id,
            'nom': self.nom,
            'prenom': self.prenom,
            'email': self.email,
            'siret': self.siret,
            'telephone': self.telephone,
            'adresse': self.adresse,
        }

    @classmethod
    def from_dict(cls, data):
        """Crée un Client depuis un dictionnaire (valeurs nulles → chaîne vide)."""
        return cls(
            id=data.get('id'),
            nom=data.get('nom') or '',
            prenom=data.get('prenom') or '',
            email=data.get('email') or '',
            siret=data.get('siret') or '',
            telephone=data.get('telephone') or '',
            adresse=data.get('adresse') or '',
        )

    @property
    def nom_complet(self):
        """Retourne le nom complet."""
        return f"{self.prenom} {self.nom}".strip()

    def __eq__(self, other):
        return isinstance(other, Client) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Client(id={self.id!r}, nom={self.nom!r}, prenom={self.prenom!r})"

    def __str__(self):
        return self.nom_complet
