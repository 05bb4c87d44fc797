"""
Local preference storage.

A small JSON-file key-value store for UI preferences that must survive
restarts: the quick-send message templates and the dark-mode flag.
Nothing here is ever sent to the backend.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import ValidationError

from realty_crm.core.errors import RecordNotFound, ValidationFailure
from realty_crm.schemas.template import MessageTemplate
import logging

logger = logging.getLogger(__name__)


TEMPLATES_KEY = "crm-templates-whatsapp"
DARK_MODE_KEY = "crm-dark-mode"

SEED_TEMPLATES = [
    {
        "id": 1,
        "title": "Primeira Abordagem",
        "text": "Olá! Sou corretor de imóveis e gostaria de saber se você tem interesse em comprar, vender ou alugar um imóvel. Posso te ajudar?",
    },
    {
        "id": 2,
        "title": "Follow-up Lead",
        "text": "Oi! Como vai? Gostaria de saber se ainda tem interesse no imóvel que conversamos. Tenho algumas opções similares que podem...",
    },
    {
        "id": 3,
        "title": "Agendamento Visita",
        "text": "Olá! Gostaria de agendar uma visita ao imóvel? Tenho disponibilidade hoje e amanhã. Qual horário é melhor para você?",
    },
    {
        "id": 4,
        "title": "Proposta Aceita",
        "text": "Parabéns! Sua proposta foi aceita! Por favor, me confirme seu melhor horário para enviarmos o contrato digital.",
    },
]


class PreferenceStore:
    """
    Synchronous key-value store backed by one JSON file.

    An unreadable or corrupt file behaves like an empty one: get()
    returns the default and the problem is logged.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Could not read preferences from {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Ignoring preferences file {self.path}: not a JSON object")
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # The target file is only ever replaced whole
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug(f"Preference {key} saved")


class TemplateService:
    """
    Quick-send message templates.

    The seed set is written on first use; after that templates are
    edited in place.
    """

    def __init__(self, store: PreferenceStore):
        self.store = store

    def list_templates(self) -> List[MessageTemplate]:
        raw = self.store.get(TEMPLATES_KEY)
        if raw is None:
            self.store.set(TEMPLATES_KEY, SEED_TEMPLATES)
            raw = SEED_TEMPLATES
            logger.info("Seeded default message templates")
        try:
            return [MessageTemplate.model_validate(t) for t in raw]
        except (ValidationError, TypeError) as e:
            logger.error(f"Stored templates are malformed, using defaults: {e}")
            return [MessageTemplate.model_validate(t) for t in SEED_TEMPLATES]

    def get_template(self, template_id: int) -> MessageTemplate:
        for template in self.list_templates():
            if template.id == template_id:
                return template
        raise RecordNotFound("templates", template_id)

    def update_template(self, template_id: int, text: str) -> MessageTemplate:
        """
        Replace a template's text.

        Raises:
            ValidationFailure: If the text is blank
            RecordNotFound: If no template has that id
        """
        if not text or not text.strip():
            raise ValidationFailure("O texto do template não pode ser vazio.")

        templates = self.list_templates()
        updated = None
        for i, template in enumerate(templates):
            if template.id == template_id:
                updated = template.model_copy(update={"text": text})
                templates[i] = updated
        if updated is None:
            raise RecordNotFound("templates", template_id)

        self.store.set(TEMPLATES_KEY, [t.model_dump() for t in templates])
        logger.info(f"Template {template_id} updated")
        return updated


class ThemePreference:
    """The dark-mode flag."""

    def __init__(self, store: PreferenceStore):
        self.store = store

    def is_dark_mode(self) -> bool:
        # Only a real JSON true counts; "false" and other junk read as light mode
        return self.store.get(DARK_MODE_KEY, False) is True

    def set_dark_mode(self, enabled: bool) -> bool:
        self.store.set(DARK_MODE_KEY, bool(enabled))
        return bool(enabled)

    def toggle(self) -> bool:
        return self.set_dark_mode(not self.is_dark_mode())
