"""Logging filter that keeps credentials out of every handler."""

import logging
from typing import Any, Iterable, List

from .structured_formatter import STANDARD_FIELDS

MASK = "******"


class SecretMaskingFilter(logging.Filter):
    """Replaces registered secret values in log records.

    The message is rendered once and the args dropped, so handlers never see
    the raw value. String fields passed through ``extra`` are masked too.
    """

    def __init__(self, secrets: Iterable[str] = ()):
        super().__init__()
        self.secrets: List[str] = []
        for secret in secrets:
            self.add_secret(secret)

    def add_secret(self, secret: str) -> None:
        if secret and secret not in self.secrets:
            self.secrets.append(secret)
            # Longest first, so a secret containing another is masked whole
            self.secrets.sort(key=len, reverse=True)

    def mask(self, text: str) -> str:
        for secret in self.secrets:
            text = text.replace(secret, MASK)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.secrets:
            return True

        message = record.getMessage()
        masked = self.mask(message)
        if masked != message or record.args:
            record.msg = masked
            record.args = None

        for key, value in list(record.__dict__.items()):
            if key in STANDARD_FIELDS or key.startswith('_'):
                continue
            record.__dict__[key] = self._mask_value(value)

        return True

    def _mask_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self.mask(value)
        if isinstance(value, dict):
            return {k: self._mask_value(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return type(value)(self._mask_value(v) for v in value)
        return value
