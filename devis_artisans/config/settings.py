"""
Configuration globale de l'application Devis Artisans.
"""
import os
from pathlib import Path

# Chemins
BASE_DIR = Path(__file__).resolve().parent.parent.parent
DATA_DIR = Path(os.environ.get('DEVIS_DATA_DIR', BASE_DIR / "data"))

# Base de données
DATABASE_PATH = Path(os.environ.get('DEVIS_DB_PATH', DATA_DIR / "devis_artisans.db"))

# Sauvegardes automatiques au lancement
BACKUP_DIR = DATA_DIR / "backups"
MAX_BACKUPS = 7

# Réinitialisation des données au premier chargement (désactivée par défaut)
RESET_ON_FIRST_LOAD = os.environ.get('DEVIS_RESET_ON_FIRST_LOAD', '0') in ('1', 'true', 'True')

# Application
APP_NAME = "Devis Artisans"
APP_VERSION = "1.0"
APP_TITLE = f"{APP_NAME} V{APP_VERSION}"

# Webhook n8n « version pro »
# Remplacer 'webhook-test' par 'webhook' pour l'URL de production
WEBHOOK_URL = os.environ.get(
    'DEVIS_WEBHOOK_URL',
    'https://n8n.srv1266367.hstgr.cloud/webhook-test/devis/create',
)
WEBHOOK_TIMEOUT = 15  # secondes

# Devis
TVA_DEFAUT = 20.0
COMPANY_PROFILE_ID = 1

# Formats
DEVISE = "€"
SEPARATEUR_MILLIERS = "\u202f"   # espace fine insécable
SEPARATEUR_DECIMAL = ","
ESPACE_DEVISE = "\u00a0"         # espace insécable avant le symbole
MOIS_ABREGES = [
    "janv.", "févr.", "mars", "avr.", "mai", "juin",
    "juil.", "août", "sept.", "oct.", "nov.", "déc.",
]

# Logging
LOG_LEVEL = "INFO"
LOG_FILE = DATA_DIR / "app.log"
