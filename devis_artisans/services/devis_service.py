"""
Service de gestion des devis.

Le montant affiché (TTC formaté) est recalculé à chaque création et
modification à partir des lignes et du taux de TVA ; il n'est jamais repris
tel quel de la saisie.
"""
import json
import logging
import uuid
from decimal import Decimal

from devis_artisans.models.devis import (
    DRAFT_FIELDS, Devis, StatutDevis, snapshot_client, snapshot_entreprise,
)
from devis_artisans.models.prestation import LignePrestation
from devis_artisans.services.base_service import CachedService
from devis_artisans.services.calcul_service import (
    calculer_totaux, format_date_affichage, formater_montant, parser_montant,
)
from devis_artisans.services.database_service import row_to_dict

logger = logging.getLogger(__name__)


def serialize_prestations(lignes):
    """Lignes → texte JSON stocké dans la colonne prestations."""
    return json.dumps([ligne.to_dict() for ligne in lignes], ensure_ascii=False)


def deserialize_prestations(texte, devis_id=None):
    """Texte JSON → liste de LignePrestation (liste vide si illisible)."""
    if not texte:
        return []
    try:
        return [LignePrestation.from_dict(item) for item in json.loads(texte)]
    except (TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Prestations illisibles pour le devis {devis_id}: {e}")
        return []


def _lignes(prestations):
    # Les lignes déjà construites repassent par from_dict : nombres finis, sérialisables en JSON
    return [
        LignePrestation.from_dict(ligne.to_dict() if isinstance(ligne, LignePrestation) else ligne)
        for ligne in (prestations or [])
    ]


class DevisService(CachedService):
    """Service pour gérer les devis."""

    def __init__(self, db):
        super().__init__(db)
        self.load()

    # =========================================================================
    # LECTURE
    # =========================================================================

    def _row_to_devis(self, row):
        data = row_to_dict(row)
        data['prestations'] = deserialize_prestations(data.get('prestations'), data.get('id'))
        return Devis.from_dict(data)

    def load(self):
        """
        Recharge tous les devis depuis la base (plus récents d'abord).

        Les statuts inconnus sont ramenés à « En attente » et les colonnes
        ajoutées par migration (éventuellement nulles) valent ''.

        Returns:
            Liste de Devis
        """
        try:
            rows = self.db.fetch_all("SELECT * FROM devis ORDER BY rowid DESC")
            self._set_items(self._row_to_devis(row) for row in rows)
            return self.get_all()
        except Exception as e:
            logger.error(f"Erreur chargement devis: {e}")
            raise

    # =========================================================================
    # ÉCRITURE
    # =========================================================================

    def _to_row(self, devis):
        row = devis.to_dict()
        row['prestations'] = serialize_prestations(devis.prestations)
        return row

    @staticmethod
    def _apply_snapshots(data, client=None, entreprise=None):
        if client is not None:
            data.update(snapshot_client(client))
        if entreprise is not None:
            data.update(snapshot_entreprise(entreprise))
        return data

    @staticmethod
    def _recompute_montant(devis):
        totaux = calculer_totaux(devis.prestations, devis.tva)
        devis.montant = formater_montant(totaux['total_ttc'])
        return devis

    def create(self, data, client=None, entreprise=None):
        """
        Crée un devis à partir d'un brouillon.

        Args:
            data: Dict client, description, prestations, tva (+ champs optionnels
                  numero, adresse_chantier, notes, instantanés)
            client: Client dont les coordonnées sont recopiées dans le devis
            entreprise: CompanyProfile recopié dans le devis

        Returns:
            Le Devis créé (statut « En attente »)
        """
        try:
            draft = {field: data.get(field) for field in DRAFT_FIELDS}
            draft['prestations'] = _lignes(data.get('prestations'))
            draft['tva'] = data.get('tva')
            self._apply_snapshots(draft, client, entreprise)

            devis = Devis.from_dict(draft)
            devis.id = uuid.uuid4().hex
            devis.date = format_date_affichage()
            devis.statut = StatutDevis.EN_ATTENTE
            self._recompute_montant(devis)

            self.db.insert('devis', self._to_row(devis))
            logger.info(f"Devis créé: {devis.id} - {devis.client} ({devis.montant})")
            self._prepend(devis)
            return devis
        except Exception as e:
            logger.error(f"Erreur création devis: {e}")
            raise

    def update(self, devis_id, data, client=None, entreprise=None):
        """
        Modifie un devis existant : les champs fournis remplacent les anciens,
        le montant est recalculé. L'id, la date et le statut sont conservés.

        Returns:
            Le Devis mis à jour
        """
        existing = self.get_by_id(devis_id)
        if existing is None:
            raise ValueError(f"Devis introuvable: {devis_id}")
        try:
            merged = existing.to_dict()
            for field in DRAFT_FIELDS + ('tva',):
                if field in data:
                    merged[field] = data[field]
            if 'prestations' in data:
                merged['prestations'] = _lignes(data['prestations'])
            self._apply_snapshots(merged, client, entreprise)

            devis = Devis.from_dict(merged)
            self._recompute_montant(devis)

            fields = self._to_row(devis)
            del fields['id']
            self.db.update('devis', fields, "id = ?", (devis_id,))
            logger.info(f"Devis mis à jour: {devis_id} ({devis.montant})")
            self._replace(devis)
            return devis
        except Exception as e:
            logger.error(f"Erreur mise à jour devis {devis_id}: {e}")
            raise

    def delete(self, devis_id):
        """Supprime définitivement un devis."""
        try:
            self.db.delete('devis', "id = ?", (devis_id,))
            logger.info(f"Devis supprimé: {devis_id}")
            self._remove(devis_id)
        except Exception as e:
            logger.error(f"Erreur suppression devis {devis_id}: {e}")
            raise

    def update_statut(self, devis_id, statut):
        """
        Enregistre uniquement le nouveau statut d'un devis.

        Args:
            devis_id: ID du devis
            statut: StatutDevis ou sa valeur texte

        Returns:
            Le Devis mis à jour
        """
        existing = self.get_by_id(devis_id)
        if existing is None:
            raise ValueError(f"Devis introuvable: {devis_id}")
        try:
            statut = StatutDevis(statut)
        except ValueError:
            raise ValueError(f"Statut de devis invalide: {statut}")
        try:
            self.db.update('devis', {'statut': statut.value}, "id = ?", (devis_id,))
            devis = Devis.from_dict({**existing.to_dict(), 'statut': statut})
            logger.info(f"Statut devis {devis_id}: {existing.statut.value} → {statut.value}")
            self._replace(devis)
            return devis
        except Exception as e:
            logger.error(f"Erreur mise à jour statut devis {devis_id}: {e}")
            raise

    def avancer_statut(self, devis_id):
        """Passe au statut suivant du cycle (En attente → Accepté → Refusé → …)."""
        existing = self.get_by_id(devis_id)
        if existing is None:
            raise ValueError(f"Devis introuvable: {devis_id}")
        return self.update_statut(devis_id, existing.statut.suivant())

    # =========================================================================
    # STATISTIQUES
    # =========================================================================

    def get_stats(self):
        """Nombre de devis par statut et somme des montants affichés."""
        stats = {
            'total': len(self._items),
            'en_attente': 0,
            'acceptes': 0,
            'refuses': 0,
            'montant_total': sum((parser_montant(d.montant) for d in self._items), Decimal('0.00')),
        }
        cles = {
            StatutDevis.EN_ATTENTE: 'en_attente',
            StatutDevis.ACCEPTE: 'acceptes',
            StatutDevis.REFUSE: 'refuses',
        }
        for devis in self._items:
            stats[cles[devis.statut]] += 1
        return stats
