"""
Fixtures partagées : base SQLite temporaire et services branchés dessus.
"""
import pytest

from devis_artisans.services.client_service import ClientService
from devis_artisans.services.company_profile_service import CompanyProfileService
from devis_artisans.services.database_service import DatabaseService
from devis_artisans.services.devis_service import DevisService
from devis_artisans.services.prestation_service import PrestationService


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "devis_artisans.db"


@pytest.fixture
def db(db_path):
    service = DatabaseService(db_path)
    yield service
    service.close()


@pytest.fixture
def client_service(db):
    return ClientService(db)


@pytest.fixture
def devis_service(db):
    return DevisService(db)


@pytest.fixture
def prestation_service(db):
    return PrestationService(db)


@pytest.fixture
def profile_service(db):
    return CompanyProfileService(db)


@pytest.fixture
def draft():
    return {
        'client': 'Jean Dupont',
        'description': 'Rénovation salle de bain',
        'prestations': [
            {'libelle': 'Pose carrelage', 'quantite': 2, 'prix_unitaire': 10.0},
            {'libelle': 'Joints', 'quantite': 1, 'prix_unitaire': 5.0},
        ],
        'tva': 20,
    }
