# ==============================================================================
# VALIDACIÓN - Conversión de datos de formularios y errores de negocio
# ==============================================================================
# Los formularios HTML envían todo como texto. Los servicios reciben el
# diccionario tal cual (request.form) y convierten aquí.
# ==============================================================================

import math
from typing import Any, List, Mapping, Optional


class ValidationError(Exception):
    """Excepción lanzada cuando una regla de negocio rechaza la operación."""
    pass


class PartialUpdateError(Exception):
    """
    Un flujo de varios pasos falló a mitad de camino.

    Los pasos ya ejecutados NO se revierten: el backend queda como quedó.

    Attributes:
        completed: Pasos que sí se ejecutaron (texto legible)
        cause: Excepción original
    """

    def __init__(self, message: str, completed: Optional[List[str]] = None, cause: Exception = None):
        super().__init__(message)
        self.completed = list(completed or [])
        self.cause = cause


def to_int(v, default=None):
    try:
        return int(v)
    except (TypeError, ValueError):
        try:
            return int(float(v))
        except (TypeError, ValueError, OverflowError):
            return default


def to_float(v, default=None):
    try:
        value = float(v)
    except (TypeError, ValueError):
        return default
    # nan e inf no son montos válidos
    if not math.isfinite(value):
        return default
    return value


def form_text(form: Mapping[str, Any], key: str, default: str = '') -> str:
    """Texto del formulario sin espacios extremos."""
    value = form.get(key)
    if value is None:
        return default
    return str(value).strip()


def require_text(form: Mapping[str, Any], key: str, label: str) -> str:
    value = form_text(form, key)
    if not value:
        raise ValidationError(f"{label} is required")
    return value


def require_int(form: Mapping[str, Any], key: str, label: str, minimum: Optional[int] = 0) -> int:
    """
    Entero obligatorio del formulario.

    Raises:
        ValidationError: Vacío, no numérico o menor que `minimum`
    """
    value = to_int(form_text(form, key))
    if value is None:
        raise ValidationError(f"{label} must be a whole number")
    if minimum is not None and value < minimum:
        raise ValidationError(f"{label} must be at least {minimum}")
    return value


def require_float(form: Mapping[str, Any], key: str, label: str, minimum: Optional[float] = 0) -> float:
    value = to_float(form_text(form, key))
    if value is None:
        raise ValidationError(f"{label} must be a number")
    if minimum is not None and value < minimum:
        raise ValidationError(f"{label} must be at least {minimum:g}")
    return value


def optional_int(form: Mapping[str, Any], key: str, default: int = 0) -> int:
    """Entero opcional: vacío o inválido → default."""
    return to_int(form_text(form, key), default)


def optional_float(form: Mapping[str, Any], key: str, default: float = 0.0) -> float:
    return to_float(form_text(form, key), default)
