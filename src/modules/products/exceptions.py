"""Product domain exceptions.

Raised by the Store and Service layers.  The API layer translates
them into envelopes in one place (``EnvelopeExceptionMixin``).
"""

from __future__ import annotations

from modules.core.exceptions import DomainError, NotFoundError


class ProductNotFound(NotFoundError):
    """The requested product id does not resolve to a stored record."""


class ProductCodeGenerationError(DomainError):
    """No unused product code could be produced within the retry budget."""
