"""
Service: mailer.py
- Envoi des e-mails transactionnels (code de vérification, lien de réinitialisation)
  via l'API HTTP de Resend (`POST /emails`).

Client:
- Session `requests` avec retries + backoff exponentiel sur 429/5xx.
- Chaque envoi porte un `Idempotency-Key` : un retry réseau ne duplique pas l'e-mail.
- Toute erreur réseau/HTTP est encapsulée dans `MailerError`; l'appelant décide
  (inscription → 500, mot de passe oublié → log seulement).
"""
import html
import logging
from typing import Any, Dict, Optional, Tuple
from uuid import uuid4

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: Tuple[float, float] = (5.0, 20.0)  # connect, read


class MailerError(RuntimeError):
    """Échec d'envoi d'un e-mail (réseau, clé API, refus du fournisseur)."""


class ResendMailer:
    def __init__(
        self,
        api_key: str,
        sender: str,
        *,
        endpoint: str = "https://api.resend.com/emails",
        session: Optional[requests.Session] = None,
        timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
    ) -> None:
        self.api_key = api_key
        self.sender = sender
        self.endpoint = endpoint
        self.session = session or self._build_session()
        self.timeout = timeout

    @staticmethod
    def _build_session() -> requests.Session:
        session = requests.Session()
        retry = Retry(
            total=3,
            backoff_factor=0.5,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset({"POST"}),
            respect_retry_after_header=True,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session

    def send(self, to: str, subject: str, html_body: str) -> str:
        """Envoie un e-mail et renvoie l'identifiant attribué par Resend."""
        if not self.api_key:
            raise MailerError("Resend API key is not configured")
        request_id = uuid4().hex
        payload: Dict[str, Any] = {
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "html": html_body,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Idempotency-Key": request_id,
        }
        try:
            response = self.session.post(self.endpoint, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.Timeout as exc:
            logger.warning("Mail request timeout", extra={"mail_request_id": request_id})
            raise MailerError("Mail request timed out") from exc
        except (requests.RequestException, ValueError) as exc:
            logger.error("Mail request failed", exc_info=True, extra={"mail_request_id": request_id})
            raise MailerError("Mail request failed") from exc

        logger.info("Mail sent", extra={"mail_request_id": request_id, "mail_subject": subject})
        return str(data.get("id", ""))

    def send_verification_code(self, to: str, player_name: str, code: str) -> str:
        return self.send(to, "Votre code de vérification Eulark", render_verification_email(player_name, code))

    def send_password_reset(self, to: str, link: str) -> str:
        return self.send(to, "Réinitialisation de votre mot de passe Eulark", render_reset_email(link))


def render_verification_email(player_name: str, code: str) -> str:
    name = html.escape(player_name)
    return (
        f"<p>Bonjour {name},</p>"
        f"<p>Votre code de vérification est : <strong>{code}</strong></p>"
        "<p>Il expire dans quelques minutes. Si vous n'êtes pas à l'origine de cette inscription, "
        "ignorez simplement cet e-mail.</p>"
    )


def render_reset_email(link: str) -> str:
    href = html.escape(link, quote=True)
    return (
        "<p>Une réinitialisation de mot de passe a été demandée pour votre compte.</p>"
        f'<p><a href="{href}">Choisir un nouveau mot de passe</a></p>'
        "<p>Ce lien n'est utilisable qu'une seule fois.</p>"
    )
