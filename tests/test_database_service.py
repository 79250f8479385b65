import sqlite3

import pytest

from devis_artisans.database.schema import SCHEMA_VERSION
from devis_artisans.services.database_service import DatabaseService, auto_backup, row_to_dict


def test_connect_creates_file_and_schema(tmp_path):
    path = tmp_path / "sub" / "app.db"
    db = DatabaseService(path)
    try:
        assert path.exists()
        assert db.schema_version == SCHEMA_VERSION
    finally:
        db.close()


def test_memory_database():
    db = DatabaseService(":memory:")
    assert db.is_memory
    assert db.fetch_all("SELECT * FROM clients") == []
    db.close()


def test_insert_update_delete(db):
    db.insert('prestations', {
        'id': 'p1', 'libelle': 'Peinture', 'prix_unitaire': 12.5, 'date_creation': '2026-01-01',
    })
    assert db.update('prestations', {'libelle': 'Peinture murale'}, "id = ?", ('p1',)) == 1
    row = row_to_dict(db.fetch_one("SELECT * FROM prestations WHERE id = ?", ('p1',)))
    assert row['libelle'] == 'Peinture murale'
    assert row['prix_unitaire'] == 12.5

    assert db.delete('prestations', "id = ?", ('p1',)) == 1
    assert db.fetch_one("SELECT * FROM prestations WHERE id = ?", ('p1',)) is None


def test_upsert_replaces_row(db):
    db.upsert('company_profile', {'id': 1, 'nom': 'A'})
    db.upsert('company_profile', {'id': 1, 'nom': 'B'})
    rows = db.fetch_all("SELECT nom FROM company_profile")
    assert [row['nom'] for row in rows] == ['B']


def test_sql_errors_are_logged_and_reraised(db, caplog):
    with pytest.raises(sqlite3.OperationalError):
        db.fetch_all("SELECT * FROM table_inconnue")
    assert "ERREUR fetch_all" in caplog.text

    with pytest.raises(sqlite3.IntegrityError):
        db.insert('clients', {'id': 'c1', 'nom': None, 'prenom': 'x', 'email': 'y'})


def test_row_to_dict_none():
    assert row_to_dict(None) is None


def test_auto_backup_rotation(tmp_path):
    db_file = tmp_path / "app.db"
    db_file.write_bytes(b"contenu")
    backups = tmp_path / "backups"

    for _ in range(4):
        assert auto_backup(db_file, backups, max_backups=2) is not None

    copies = sorted(backups.iterdir())
    assert len(copies) == 2
    assert copies[-1].read_bytes() == b"contenu"


def test_auto_backup_without_database(tmp_path):
    assert auto_backup(tmp_path / "absent.db", tmp_path / "backups") is None


def test_backup_taken_before_reopening(tmp_path):
    path = tmp_path / "app.db"
    backups = tmp_path / "backups"
    DatabaseService(path, backup_dir=backups).close()
    assert not backups.exists()

    DatabaseService(path, backup_dir=backups).close()
    assert len(list(backups.iterdir())) == 1
