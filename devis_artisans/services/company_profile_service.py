"""
Service du profil entreprise (ligne unique, id fixe).
"""
import logging

from devis_artisans.config.settings import COMPANY_PROFILE_ID
from devis_artisans.models.company_profile import FIELDS, CompanyProfile
from devis_artisans.services.base_service import Observable
from devis_artisans.services.database_service import row_to_dict

logger = logging.getLogger(__name__)


class CompanyProfileService(Observable):
    """Service pour lire et enregistrer le profil de l'entreprise."""

    def __init__(self, db):
        super().__init__()
        self.db = db
        self._profile = CompanyProfile()
        self.load()

    def load(self):
        """Charge le profil ; profil vide si rien n'a encore été enregistré."""
        try:
            row = self.db.fetch_one(
                f"SELECT {', '.join(FIELDS)} FROM company_profile WHERE id = ?",
                (COMPANY_PROFILE_ID,),
            )
            self._profile = CompanyProfile.from_dict(row_to_dict(row) or {})
            return self.get()
        except Exception as e:
            logger.error(f"Erreur lors du chargement du profil entreprise: {e}")
            raise

    def get(self):
        """Retourne une copie du profil en mémoire."""
        return CompanyProfile.from_dict(self._profile.to_dict())

    def save(self, data):
        """
        Enregistre le profil complet (remplacement intégral).

        Args:
            data: Dict ou CompanyProfile

        Returns:
            Le CompanyProfile enregistré
        """
        profile = data if isinstance(data, CompanyProfile) else CompanyProfile.from_dict(data)
        try:
            self.db.upsert('company_profile', {'id': COMPANY_PROFILE_ID, **profile.to_dict()})
            self._profile = CompanyProfile.from_dict(profile.to_dict())
            logger.info(f"Profil entreprise enregistré: {profile.nom}")
            self.notify_observers(self.get())
            return self.get()
        except Exception as e:
            logger.error(f"Erreur lors de la sauvegarde du profil entreprise: {e}")
            raise
