"""Base de données locale : schéma et migrations."""
