"""Modèles de données de Devis Artisans."""
from devis_artisans.models.client import Client
from devis_artisans.models.company_profile import CompanyProfile
from devis_artisans.models.devis import Devis, StatutDevis
from devis_artisans.models.prestation import LignePrestation, PrestationItem

__all__ = [
    'Client',
    'CompanyProfile',
    'Devis',
    'StatutDevis',
    'LignePrestation',
    'PrestationItem',
]
