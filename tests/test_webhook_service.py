from datetime import date
from unittest.mock import MagicMock

import pytest
import requests

from devis_artisans.models.devis import Devis
from devis_artisans.models.prestation import LignePrestation
from devis_artisans.services.webhook_service import (
    MESSAGE_SUCCES, WebhookError, WebhookService, build_payload, message_utilisateur,
)


@pytest.fixture
def devis():
    return Devis(
        id='d1',
        numero='DEV-2026-001',
        client='Jean Dupont',
        client_email='jean@x.fr',
        client_telephone='0600000000',
        client_adresse='1 rue de Paris',
        entreprise_nom='Plomberie Martin',
        entreprise_email='contact@martin.fr',
        entreprise_telephone='0500000000',
        entreprise_adresse='2 rue du Port',
        entreprise_siret='12345678900011',
        date='19 oct. 2026',
        montant='30,00 €',
        description='Salle de bain',
        prestations=[LignePrestation('Carrelage', 2, 10.0), LignePrestation('Joints', 1, 5.0)],
        tva=20.0,
        notes='Paiement à 30 jours',
    )


def _response(status, json_body=None, text=''):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.text = text
    if json_body is None:
        response.json.side_effect = ValueError("pas de JSON")
    else:
        response.json.return_value = json_body
    return response


def _service(response=None, error=None):
    session = MagicMock()
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = response
    return WebhookService(url='https://n8n.test/webhook/devis/create', timeout=5, session=session), session


def test_build_payload(devis):
    payload = build_payload(devis)

    assert payload['quoteNumber'] == 'DEV-2026-001'
    assert payload['date'] == '2026-10-19'
    assert payload['company'] == {
        'name': 'Plomberie Martin',
        'email': 'contact@martin.fr',
        'phone': '0500000000',
        'address': '2 rue du Port',
        'siret': '12345678900011',
    }
    assert payload['client']['name'] == 'Jean Dupont'
    assert payload['siteAddress'] == '1 rue de Paris'
    assert payload['vatRate'] == 20.0
    assert payload['lines'][0] == {'title': 'Carrelage', 'qty': 2, 'unitPriceHT': 10.0}
    assert payload['totals'] == {'totalHT': 25.0, 'totalTVA': 5.0, 'totalTTC': 30.0}
    assert payload['notes'] == 'Paiement à 30 jours'


def test_build_payload_site_address_and_date_fallbacks(devis):
    devis.adresse_chantier = 'Chantier, 3 impasse des Lilas'
    devis.date = 'date illisible'

    payload = build_payload(devis, today=date(2026, 1, 2))

    assert payload['siteAddress'] == 'Chantier, 3 impasse des Lilas'
    assert payload['date'] == '2026-01-02'


def test_send_success(devis):
    service, session = _service(_response(200, {'status': 'ok'}))

    assert service.send(devis) == {'status': 'ok'}
    url = session.post.call_args.args[0]
    assert url == 'https://n8n.test/webhook/devis/create'
    assert session.post.call_args.kwargs['timeout'] == 5
    assert session.post.call_args.kwargs['json']['quoteNumber'] == 'DEV-2026-001'


def test_send_success_without_json_body(devis):
    service, _ = _service(_response(200, text='OK'))
    assert service.send(devis) is None
    assert service.envoyer_version_pro(devis) == (True, MESSAGE_SUCCES)


def test_error_message_from_json_body(devis):
    service, _ = _service(_response(500, {'message': 'Workflow en erreur', 'hint': 'Vérifiez le noeud 3'}))

    with pytest.raises(WebhookError) as excinfo:
        service.send(devis)

    assert str(excinfo.value) == 'Workflow en erreur\n\nVérifiez le noeud 3'
    assert excinfo.value.status_code == 500


def test_error_message_falls_back_to_text(devis):
    service, _ = _service(_response(502, text='Bad Gateway'))

    ok, message = service.envoyer_version_pro(devis)

    assert ok is False
    assert 'Erreur 502: Bad Gateway' in message
    assert message.startswith("Impossible d'envoyer la version pro.")


def test_inactive_webhook_gives_hints(devis):
    body = {'code': 404, 'message': 'The requested webhook "devis/create" is not registered.'}
    service, session = _service(_response(404, body))

    ok, message = service.envoyer_version_pro(devis)

    assert ok is False
    assert message.startswith("Le webhook n8n n'est pas actif.")
    assert 'not registered' in message
    # Pas de nouvelle tentative
    assert session.post.call_count == 1


def test_network_error(devis):
    service, _ = _service(error=requests.ConnectionError("DNS"))

    with pytest.raises(WebhookError):
        service.send(devis)
    ok, message = service.envoyer_version_pro(devis)
    assert ok is False
    assert 'Connexion impossible' in message


def test_message_utilisateur_for_404_status():
    assert message_utilisateur(WebhookError('Erreur 404', 404)).startswith("Le webhook n8n")


def test_close_releases_session(devis):
    service, session = _service(_response(200, {'status': 'ok'}))
    service.send(devis)

    service.close()
    service.close()

    session.close.assert_called_once_with()
