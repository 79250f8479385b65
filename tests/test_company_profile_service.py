from devis_artisans.models.company_profile import CompanyProfile
from devis_artisans.services.company_profile_service import CompanyProfileService
from devis_artisans.services.database_service import DatabaseService

PROFIL = {
    'nom': 'Plomberie Martin',
    'email': 'contact@martin.fr',
    'telephone': '05 00 00 00 00',
    'adresse': '2 rue du Port, 17000 La Rochelle',
    'siret': '12345678900011',
}


def test_empty_profile_by_default(profile_service):
    profile = profile_service.get()
    assert profile == CompanyProfile()
    assert profile.is_empty


def test_saved_profile_survives_new_session(db_path):
    db = DatabaseService(db_path)
    CompanyProfileService(db).save(PROFIL)
    db.close()

    db = DatabaseService(db_path)
    try:
        assert CompanyProfileService(db).get().to_dict() == PROFIL
    finally:
        db.close()


def test_save_replaces_wholesale(profile_service, db):
    profile_service.save(PROFIL)
    profile_service.save({'nom': 'Martin & Fils'})

    assert profile_service.get() == CompanyProfile(nom='Martin & Fils')
    assert db.fetch_one("SELECT COUNT(*) AS n FROM company_profile")['n'] == 1


def test_save_notifies_observers(profile_service):
    received = []
    profile_service.add_observer(received.append)

    profile_service.save(CompanyProfile(**PROFIL))

    assert received[0].nom == 'Plomberie Martin'


def test_get_returns_a_copy(profile_service):
    profile_service.save(PROFIL)
    profile_service.get().nom = 'modifié'
    assert profile_service.get().nom == 'Plomberie Martin'
