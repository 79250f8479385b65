"""
Schéma de base de données SQLite pour Devis Artisans.

Le schéma évolue par migrations ordonnées et versionnées. La version appliquée
est conservée dans ``PRAGMA user_version`` : chaque étape n'est jouée qu'une
seule fois, et reste idempotente si on la rejoue à la main.
"""
import logging

logger = logging.getLogger(__name__)

DATA_TABLES = ('clients', 'devis', 'company_profile', 'prestations')

RESET_MARKER = 'reset_premier_chargement'


# ============================================================================
# OUTILS
# ============================================================================

def get_columns(conn, table):
    """Retourne la liste des colonnes d'une table (vide si la table n'existe pas)."""
    return [row[1] for row in conn.execute(f"PRAGMA table_info({table})").fetchall()]


def add_column_if_missing(conn, table, column, column_type):
    """
    Ajoute une colonne nullable si elle est absente.

    Returns:
        True si la colonne a été ajoutée
    """
    if column in get_columns(conn, table):
        return False
    conn.execute(f"ALTER TABLE {table} ADD COLUMN {column} {column_type}")
    logger.info(f"{table} : colonne '{column}' ajoutée")
    return True


def get_schema_version(conn):
    return conn.execute("PRAGMA user_version").fetchone()[0]


def _set_schema_version(conn, version):
    # PRAGMA n'accepte pas de paramètre lié
    conn.execute(f"PRAGMA user_version = {int(version)}")


# ============================================================================
# MIGRATIONS
# ============================================================================

def _v1_tables_de_base(conn):
    conn.execute("""
        CREATE TABLE IF NOT EXISTS clients (
            id TEXT PRIMARY KEY,
            nom TEXT NOT NULL,
            prenom TEXT NOT NULL,
            email TEXT NOT NULL,
            siret TEXT
        )
    """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS devis (
            id TEXT PRIMARY KEY,
            client TEXT NOT NULL,
            date TEXT NOT NULL,
            montant TEXT NOT NULL,
            statut TEXT NOT NULL,
            description TEXT NOT NULL,
            prestations TEXT NOT NULL,
            tva REAL NOT NULL
        )
    """)


def _v2_profil_et_catalogue(conn):
    conn.execute("""
        CREATE TABLE IF NOT EXISTS company_profile (
            id INTEGER PRIMARY KEY,
            nom TEXT,
            email TEXT,
            telephone TEXT,
            adresse TEXT,
            siret TEXT
        )
    """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS prestations (
            id TEXT PRIMARY KEY,
            libelle TEXT NOT NULL,
            prix_unitaire REAL NOT NULL,
            date_creation TEXT NOT NULL
        )
    """)


def _v3_coordonnees_clients(conn):
    add_column_if_missing(conn, 'clients', 'telephone', 'TEXT')
    add_column_if_missing(conn, 'clients', 'adresse', 'TEXT')


# Colonnes « instantané » copiées dans chaque devis
DEVIS_SNAPSHOT_COLUMNS = (
    'numero',
    'client_email',
    'client_telephone',
    'client_adresse',
    'entreprise_nom',
    'entreprise_email',
    'entreprise_telephone',
    'entreprise_adresse',
    'entreprise_siret',
    'adresse_chantier',
    'notes',
)


def _v4_instantanes_devis(conn):
    for column in DEVIS_SNAPSHOT_COLUMNS:
        add_column_if_missing(conn, 'devis', column, 'TEXT')


def _v5_meta(conn):
    conn.execute("""
        CREATE TABLE IF NOT EXISTS app_meta (
            cle TEXT PRIMARY KEY,
            valeur TEXT
        )
    """)


MIGRATIONS = [
    (1, "Tables clients et devis", _v1_tables_de_base),
    (2, "Profil entreprise et catalogue de prestations", _v2_profil_et_catalogue),
    (3, "Téléphone et adresse des clients", _v3_coordonnees_clients),
    (4, "Instantanés client/entreprise dans les devis", _v4_instantanes_devis),
    (5, "Table app_meta", _v5_meta),
]

SCHEMA_VERSION = MIGRATIONS[-1][0]


def ensure_schema(conn):
    """
    Applique les migrations manquantes, dans l'ordre.

    Sans effet si la base est déjà à jour. Chaque étape s'exécute dans sa
    propre transaction (DDL compris) : une erreur l'annule entièrement,
    interrompt l'initialisation, et la version reste celle de la dernière
    étape réussie.

    Returns:
        La version du schéma après migration
    """
    version = get_schema_version(conn)
    for numero, description, step in MIGRATIONS:
        if numero <= version:
            continue
        try:
            if not conn.in_transaction:
                conn.execute("BEGIN")
            step(conn)
            _set_schema_version(conn, numero)
            conn.commit()
            logger.info(f"Migration {numero} appliquée : {description}")
        except Exception as e:
            conn.rollback()
            logger.error(f"Erreur migration {numero} ({description}): {e}")
            raise
        version = numero
    return version


# ============================================================================
# RÉINITIALISATION
# ============================================================================

def reset_all_data(conn):
    """Supprime toutes les lignes de toutes les tables de données."""
    for table in DATA_TABLES:
        conn.execute(f"DELETE FROM {table}")
    conn.commit()
    logger.warning("Toutes les données ont été supprimées")


def reset_on_first_load(conn, enabled=False):
    """
    Réinitialise les données une seule fois, si l'option est activée.

    Le marqueur est enregistré dans app_meta : la réinitialisation ne se
    reproduit pas aux lancements suivants.

    Returns:
        True si les données ont été effacées
    """
    if not enabled:
        return False
    row = conn.execute(
        "SELECT valeur FROM app_meta WHERE cle = ?", (RESET_MARKER,)
    ).fetchone()
    if row is not None:
        return False
    reset_all_data(conn)
    conn.execute(
        "INSERT INTO app_meta (cle, valeur) VALUES (?, datetime('now'))",
        (RESET_MARKER,),
    )
    conn.commit()
    return True
