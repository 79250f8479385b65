"""Services package for Devis Artisans."""
from devis_artisans.services.client_service import ClientService
from devis_artisans.services.company_profile_service import CompanyProfileService
from devis_artisans.services.database_service import DatabaseService
from devis_artisans.services.devis_service import DevisService
from devis_artisans.services.prestation_service import PrestationService
from devis_artisans.services.webhook_service import WebhookService

__all__ = [
    'DatabaseService',
    'ClientService',
    'DevisService',
    'PrestationService',
    'CompanyProfileService',
    'WebhookService',
]
