"""
Contexte applicatif : possède la connexion à la base et les services.

Construit une fois au lancement, fermé à l'arrêt de l'application.
"""
import logging

from devis_artisans.config import settings
from devis_artisans.database.schema import reset_on_first_load
from devis_artisans.services.client_service import ClientService
from devis_artisans.services.company_profile_service import CompanyProfileService
from devis_artisans.services.database_service import DatabaseService
from devis_artisans.services.devis_service import DevisService
from devis_artisans.services.prestation_service import PrestationService
from devis_artisans.services.webhook_service import WebhookService

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level=settings.LOG_LEVEL, log_file=None):
    """Configure le logging de l'application (console, et fichier si demandé)."""
    handlers = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)


class AppContext:
    """Connexion partagée et services de l'application."""

    def __init__(self, db_path=settings.DATABASE_PATH, backup_dir=None,
                 reset_first_load=settings.RESET_ON_FIRST_LOAD,
                 webhook_url=settings.WEBHOOK_URL):
        self.db = DatabaseService(db_path, backup_dir=backup_dir)
        try:
            if reset_on_first_load(self.db.get_connection(), enabled=reset_first_load):
                logger.warning("Données réinitialisées au premier chargement")
            self.clients = ClientService(self.db)
            self.devis = DevisService(self.db)
            self.prestations = PrestationService(self.db)
            self.company_profile = CompanyProfileService(self.db)
        except Exception as e:
            logger.error(f"Erreur initialisation de l'application: {e}")
            self.db.close()
            raise
        self.webhook = WebhookService(url=webhook_url)
        logger.info(
            f"{settings.APP_TITLE} prêt : {len(self.clients.get_all())} client(s), "
            f"{len(self.devis.get_all())} devis, {len(self.prestations.get_all())} prestation(s)"
        )

    @classmethod
    def open_default(cls):
        """Ouvre la base de l'application avec sauvegarde automatique et logging."""
        configure_logging(log_file=settings.LOG_FILE)
        return cls(settings.DATABASE_PATH, backup_dir=settings.BACKUP_DIR)

    def create_devis(self, data, client=None):
        """Crée un devis en y recopiant le profil entreprise courant."""
        return self.devis.create(data, client=client, entreprise=self.company_profile.get())

    def close(self):
        self.webhook.close()
        self.db.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
