"""
Messaging shortcuts.

Builds the deep links the client opens: WhatsApp chat, phone dialer,
pre-filled email. No message is sent from here; the agent's own apps
do that.
"""

import re
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from realty_crm.core.config import settings
from realty_crm.core.errors import ValidationFailure
from realty_crm.schemas.contact import Contact
import logging

logger = logging.getLogger(__name__)


_NON_DIGITS = re.compile(r"[^0-9]")

# Same characters encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def whatsapp_link(
    number: str,
    message: str = "",
    country_code: Optional[str] = None,
    min_digits: Optional[int] = None,
) -> str:
    """
    wa.me link for `number` with `message` pre-filled.

    Raises:
        ValidationFailure: If the number has fewer than min_digits digits
    """
    country_code = settings.whatsapp_country_code if country_code is None else country_code
    min_digits = settings.min_phone_digits if min_digits is None else min_digits

    digits = _NON_DIGITS.sub("", number or "")
    if len(digits) < min_digits:
        logger.info(f"Rejected WhatsApp number with {len(digits)} digits")
        raise ValidationFailure("Por favor, digite um número de telefone válido (com DDD).")

    return f"https://wa.me/{country_code}{digits}?text={encode_component(message or '')}"


def dial_link(phone: str) -> str:
    return f"tel:{phone}"


def email_link(contact: Contact, agent_name: Optional[str] = None) -> str:
    """
    mailto link with the standard proposal subject and greeting.

    Raises:
        ValidationFailure: If the contact has no email
    """
    if not contact.email:
        raise ValidationFailure(f"Atenção: O cliente {contact.name} não tem um email cadastrado.")

    agent_name = settings.agent_name if agent_name is None else agent_name
    subject = f"Proposta Imóvel CRM {agent_name}"
    body = (
        f"Prezado(a) {contact.name},\n\n"
        f"Meu nome é {agent_name}, e sou seu corretor de imóveis. "
        "Gostaria de dar seguimento ao seu interesse no mercado imobiliário.\n\n"
        "Aguardamos seu contato."
    )
    return f"mailto:{contact.email}?subject={encode_component(subject)}&body={encode_component(body)}"


def clipboard_email(contact: Contact) -> str:
    """
    The address to put on the clipboard.

    Raises:
        ValidationFailure: If the contact has no email
    """
    if not contact.email:
        raise ValidationFailure(f"O cliente {contact.name} não tem um email cadastrado.")
    return contact.email


def export_filename(now: Optional[datetime] = None) -> str:
    """clientes_crm_<epoch millis>.csv"""
    now = now or datetime.now()
    return f"clientes_crm_{int(now.timestamp() * 1000)}.csv"
