"""
Service de gestion des clients.
"""
import logging
import uuid

from devis_artisans.models.client import Client
from devis_artisans.services.base_service import CachedService
from devis_artisans.services.database_service import row_to_dict

logger = logging.getLogger(__name__)


class ClientService(CachedService):
    """Service pour gérer les clients (pas de suppression)."""

    def __init__(self, db):
        super().__init__(db)
        self.load()

    def load(self):
        """
        Recharge les clients depuis la base, du plus récent au plus ancien.

        Returns:
            Liste de Client
        """
        try:
            rows = self.db.fetch_all("SELECT * FROM clients ORDER BY rowid DESC")
            self._set_items(Client.from_dict(row_to_dict(row)) for row in rows)
            return self.get_all()
        except Exception as e:
            logger.error(f"Erreur chargement clients: {e}")
            raise

    def create(self, data):
        """
        Crée un nouveau client.

        Args:
            data: Dict nom, prenom, email, siret, telephone, adresse

        Returns:
            Le Client créé
        """
        try:
            client = Client.from_dict({**data, 'id': uuid.uuid4().hex})
            self.db.insert('clients', client.to_dict())
            logger.info(f"Client créé: {client.id} - {client.nom_complet}")
            self._prepend(client)
            return client
        except Exception as e:
            logger.error(f"Erreur création client: {e}")
            raise

    def update(self, client_id, data):
        """
        Remplace entièrement la fiche d'un client.

        Args:
            client_id: ID du client
            data: Dict avec la fiche complète (champs absents → vides)

        Returns:
            Le Client mis à jour
        """
        if self.get_by_id(client_id) is None:
            raise ValueError(f"Client introuvable: {client_id}")
        try:
            client = Client.from_dict({**data, 'id': client_id})
            fields = client.to_dict()
            del fields['id']
            self.db.update('clients', fields, "id = ?", (client_id,))
            logger.info(f"Client mis à jour: {client_id}")
            self._replace(client)
            return client
        except Exception as e:
            logger.error(f"Erreur mise à jour client {client_id}: {e}")
            raise
