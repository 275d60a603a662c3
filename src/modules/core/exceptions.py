"""Shared domain error taxonomy.

Repositories and services raise these; the API boundary
(``modules.core.envelope.EnvelopeExceptionMixin``) is the only place
where they are translated into HTTP responses.
"""

from __future__ import annotations

import functools
from typing import Callable, ParamSpec, TypeVar

from django.db import InterfaceError, OperationalError

P = ParamSpec("P")
R = TypeVar("R")


class DomainError(Exception):
    """Base class for errors raised below the API layer."""


class NotFoundError(DomainError):
    """An identifier did not resolve to a stored record."""


class StorageUnavailable(DomainError):
    """The relational store could not be reached."""


def translate_storage_errors(func: Callable[P, R]) -> Callable[P, R]:
    """Re-raise connectivity failures of the wrapped call as ``StorageUnavailable``.

    Other database faults propagate unchanged.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as exc:
            raise StorageUnavailable(str(exc)) from exc

    return wrapper
