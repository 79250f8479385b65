"""
Service du catalogue de prestations réutilisables.
"""
import logging
import uuid
from datetime import datetime

from devis_artisans.models.prestation import PrestationItem
from devis_artisans.services.base_service import CachedService
from devis_artisans.services.database_service import row_to_dict

logger = logging.getLogger(__name__)


class PrestationService(CachedService):
    """Service pour gérer le catalogue de prestations."""

    def __init__(self, db):
        super().__init__(db)
        self.load()

    def load(self):
        """Recharge le catalogue, du plus récent au plus ancien."""
        try:
            rows = self.db.fetch_all("SELECT * FROM prestations ORDER BY date_creation DESC")
            self._set_items(PrestationItem.from_dict(row_to_dict(row)) for row in rows)
            return self.get_all()
        except Exception as e:
            logger.error(f"Erreur chargement prestations: {e}")
            raise

    def create(self, data):
        """
        Ajoute une prestation au catalogue.

        Args:
            data: Dict libelle, prix_unitaire

        Returns:
            La PrestationItem créée
        """
        try:
            prestation = PrestationItem.from_dict({
                'libelle': data.get('libelle', ''),
                'prix_unitaire': data.get('prix_unitaire', 0),
                'id': uuid.uuid4().hex,
                'date_creation': datetime.now().isoformat(timespec='microseconds'),
            })
            self.db.insert('prestations', prestation.to_dict())
            logger.info(f"Prestation créée: {prestation.id} - {prestation.libelle}")
            self._prepend(prestation)
            return prestation
        except Exception as e:
            logger.error(f"Erreur ajout prestation: {e}")
            raise

    def delete(self, prestation_id):
        """Supprime définitivement une prestation du catalogue."""
        try:
            self.db.delete('prestations', "id = ?", (prestation_id,))
            logger.info(f"Prestation supprimée: {prestation_id}")
            self._remove(prestation_id)
        except Exception as e:
            logger.error(f"Erreur suppression prestation {prestation_id}: {e}")
            raise

    def find_matching(self, libelle, prix_unitaire):
        """Première prestation du catalogue de même libellé et même prix, ou None."""
        return next(
            (item for item in self._items if item.matches(libelle, prix_unitaire)),
            None,
        )
