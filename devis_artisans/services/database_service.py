"""
Service de gestion de la base de données SQLite.
"""
import os
import shutil
import sqlite3
import logging
import traceback
from datetime import datetime
from pathlib import Path

from devis_artisans.config.settings import DATABASE_PATH, BACKUP_DIR, MAX_BACKUPS
from devis_artisans.database.schema import ensure_schema

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


def row_to_dict(row):
    '''Convertit sqlite3.Row en dict.'''
    if row is None:
        return None
    if hasattr(row, 'keys'):
        return {key: row[key] for key in row.keys()}
    return row


def auto_backup(db_path, backup_dir=BACKUP_DIR, max_backups=MAX_BACKUPS):
    """
    Sauvegarde la base avant ouverture et ne conserve que les max_backups
    dernières copies.

    Returns:
        Chemin de la sauvegarde créée, ou None
    """
    db_path = Path(db_path)
    if not db_path.exists():
        return None
    backup_dir = Path(backup_dir)
    backup_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime('%Y%m%d_%H%M%S_%f')
    dest = backup_dir / f"auto_backup_{stamp}.db"
    try:
        shutil.copy2(db_path, dest)
        logger.info(f"Sauvegarde auto : {dest.name}")
    except OSError as e:
        logger.warning(f"Sauvegarde auto échouée : {e}")
        return None

    # Rotation : supprimer les plus anciennes
    backups = sorted(
        f for f in os.listdir(backup_dir)
        if f.startswith('auto_backup_') and f.endswith('.db')
    )
    while len(backups) > max_backups:
        old = backup_dir / backups.pop(0)
        try:
            old.unlink()
            logger.info(f"Ancienne sauvegarde supprimée : {old.name}")
        except OSError as e:
            logger.warning(f"Suppression sauvegarde {old.name} : {e}")
    return dest


class DatabaseService:
    """
    Connexion à la base de données locale.

    Construite explicitement une fois par application (voir AppContext) et
    passée à chaque service.
    """

    def __init__(self, db_path=DATABASE_PATH, backup_dir=None, max_backups=MAX_BACKUPS):
        self.db_path = db_path
        self.backup_dir = backup_dir
        self.max_backups = max_backups
        self._connection = None
        self.schema_version = None
        self._connect()

    @property
    def is_memory(self):
        return str(self.db_path) == MEMORY

    def _connect(self):
        """Établit la connexion à la base de données."""
        try:
            if not self.is_memory:
                # Créer le dossier data s'il n'existe pas
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                if self.backup_dir is not None:
                    auto_backup(self.db_path, self.backup_dir, self.max_backups)

            self._connection = sqlite3.connect(str(self.db_path))
            self._connection.row_factory = sqlite3.Row

            # Initialiser le schéma
            self.schema_version = ensure_schema(self._connection)

            logger.info(f"Base de données initialisée: {self.db_path} (schéma v{self.schema_version})")
        except Exception as e:
            logger.error(f"Erreur connexion base de données: {e}")
            if self._connection is not None:
                self._connection.close()
                self._connection = None
            raise

    def get_connection(self):
        """Retourne la connexion à la base de données."""
        if self._connection is None:
            self._connect()
        return self._connection

    def _log_sql_error(self, method, e, query, params):
        logger.error(
            "ERREUR {}: {}\nQUERY: {}\nPARAMS: {}\n{}".format(
                method, e, query[:500], params, traceback.format_exc()
            )
        )

    def execute(self, query, params=None):
        """Exécute une requête SQL et valide la transaction."""
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            if params:
                cursor.execute(query, params)
            else:
                cursor.execute(query)
            conn.commit()
            return cursor
        except sqlite3.Error as e:
            conn.rollback()
            self._log_sql_error("execute", e, query, params)
            raise

    def fetch_one(self, query, params=None):
        """Exécute une requête et retourne un résultat."""
        try:
            cursor = self.get_connection().cursor()
            cursor.execute(query, params) if params else cursor.execute(query)
            return cursor.fetchone()
        except sqlite3.Error as e:
            self._log_sql_error("fetch_one", e, query, params)
            raise

    def fetch_all(self, query, params=None):
        """Exécute une requête et retourne tous les résultats."""
        try:
            cursor = self.get_connection().cursor()
            cursor.execute(query, params) if params else cursor.execute(query)
            return cursor.fetchall()
        except sqlite3.Error as e:
            self._log_sql_error("fetch_all", e, query, params)
            raise

    def insert(self, table, data):
        """Insert data into a table."""
        columns = ', '.join(data.keys())
        placeholders = ', '.join(['?' for _ in data])
        query = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"
        cursor = self.execute(query, tuple(data.values()))
        return cursor.lastrowid

    def upsert(self, table, data):
        """Insert or replace a row (by primary key)."""
        columns = ', '.join(data.keys())
        placeholders = ', '.join(['?' for _ in data])
        query = f"INSERT OR REPLACE INTO {table} ({columns}) VALUES ({placeholders})"
        self.execute(query, tuple(data.values()))

    def update(self, table, data, where_clause, where_params):
        """
        Update data in a table.

        Returns:
            Nombre de lignes modifiées
        """
        set_clause = ', '.join([f"{k} = ?" for k in data.keys()])
        query = f"UPDATE {table} SET {set_clause} WHERE {where_clause}"
        params = tuple(data.values()) + tuple(where_params)
        return self.execute(query, params).rowcount

    def delete(self, table, where_clause, where_params):
        """Delete data from a table. Returns the number of deleted rows."""
        query = f"DELETE FROM {table} WHERE {where_clause}"
        return self.execute(query, where_params).rowcount

    def close(self):
        """Ferme la connexion à la base de données."""
        if self._connection:
            self._connection.close()
            self._connection = None
            logger.info("Connexion base de données fermée")
