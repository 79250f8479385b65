"""
Envoi de la « version pro » d'un devis au workflow n8n.

Un seul POST JSON, sans nouvelle tentative. Les erreurs sont remontées sous
forme de message lisible pour l'utilisateur.
"""
import logging
from datetime import date

import requests

from devis_artisans.config.settings import WEBHOOK_TIMEOUT, WEBHOOK_URL
from devis_artisans.services.calcul_service import calculer_totaux, parse_date_affichage

logger = logging.getLogger(__name__)

MESSAGE_SUCCES = "Version pro envoyée."


class WebhookError(Exception):
    """Échec de l'envoi au webhook (HTTP ou réseau)."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


def build_payload(devis, today=None):
    """
    Construit le corps JSON envoyé au webhook.

    La date d'affichage du devis est convertie en ISO ; à défaut, on prend la
    date du jour. L'adresse du chantier retombe sur celle du client.
    """
    jour = parse_date_affichage(devis.date) or today or date.today()
    totaux = calculer_totaux(devis.prestations, devis.tva)
    return {
        'quoteNumber': devis.numero,
        'date': jour.isoformat(),
        'company': {
            'name': devis.entreprise_nom,
            'email': devis.entreprise_email,
            'phone': devis.entreprise_telephone,
            'address': devis.entreprise_adresse,
            'siret': devis.entreprise_siret,
        },
        'client': {
            'name': devis.client,
            'email': devis.client_email,
            'phone': devis.client_telephone,
            'address': devis.client_adresse,
        },
        'siteAddress': devis.adresse_intervention,
        'vatRate': devis.tva,
        'lines': [
            {
                'title': ligne.libelle,
                'qty': ligne.quantite,
                'unitPriceHT': ligne.prix_unitaire,
            }
            for ligne in devis.prestations
        ],
        'totals': {
            'totalHT': float(totaux['total_ht']),
            'totalTVA': float(totaux['montant_tva']),
            'totalTTC': float(totaux['total_ttc']),
        },
        'notes': devis.notes,
    }


def extract_error_message(response):
    """Message d'erreur d'une réponse non 2xx (JSON message/hint, sinon texte brut)."""
    text = response.text
    try:
        body = response.json()
    except ValueError:
        return f"Erreur {response.status_code}: {text}"
    if isinstance(body, dict) and body.get('message'):
        message = body['message']
        if body.get('hint'):
            message += f"\n\n{body['hint']}"
        return message
    return f"Erreur {response.status_code}"


def message_utilisateur(error):
    """Texte de l'alerte affichée quand l'envoi échoue."""
    details = str(error)
    if getattr(error, 'status_code', None) == 404 or '404' in details \
            or 'not registered' in details:
        return (
            "Le webhook n8n n'est pas actif.\n\n"
            "Solutions possibles :\n"
            "1. Activez le workflow dans n8n (bouton \"Execute workflow\")\n"
            "2. Ou utilisez l'URL de production si disponible\n\n"
            f"Détails : {details}"
        )
    return f"Impossible d'envoyer la version pro.\n\n{details}"


class WebhookService:
    """Client du webhook « version pro »."""

    def __init__(self, url=WEBHOOK_URL, timeout=WEBHOOK_TIMEOUT, session=None):
        self.url = url
        self.timeout = timeout
        self._session = session

    def _get_session(self):
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({
                'Accept': 'application/json',
                'Content-Type': 'application/json',
            })
        return self._session

    def close(self):
        """Ferme la session HTTP si elle a été ouverte."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def send(self, devis):
        """
        Envoie le devis.

        Returns:
            Corps JSON de la réponse, ou None s'il n'est pas décodable

        Raises:
            WebhookError: réponse non 2xx ou erreur réseau
        """
        payload = build_payload(devis)
        logger.info(f"Envoi du devis {devis.id} vers n8n")
        try:
            response = self._get_session().post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise WebhookError(f"Connexion impossible : {e}") from e

        if not response.ok:
            logger.error(f"Erreur HTTP: {response.status_code} {response.text[:200]}")
            raise WebhookError(extract_error_message(response), response.status_code)

        try:
            data = response.json()
        except ValueError:
            data = None
        logger.info(f"Réponse du webhook: {data}")
        return data

    def envoyer_version_pro(self, devis):
        """
        Envoie le devis et retourne (ok, message) pour l'alerte de l'interface.
        """
        try:
            self.send(devis)
            return True, MESSAGE_SUCCES
        except WebhookError as e:
            logger.error(f"Erreur lors de l'envoi: {e}")
            return False, message_utilisateur(e)
