# ==============================================================================
# SERVICIO DE MODO MANTENIMIENTO
# ==============================================================================
# Interruptor global de mantenimiento del sistema. El backend envía los
# correos de aviso (inicio, recordatorio, fin); aquí solo se informa el
# resultado.
# ==============================================================================

import logging
from typing import Any, Dict, List, Mapping, Optional

from factory_dashboard.models.entities import MaintenanceModeRecord
from factory_dashboard.repositories.api_client import ApiError, UnauthorizedError
from factory_dashboard.repositories.maintenance_mode_repository import MaintenanceModeRepository
from factory_dashboard.services.validation import ValidationError, form_text

logger = logging.getLogger(__name__)


DEFAULT_CREATED_BY = 'System Administrator'


class MaintenanceModeService:

    def __init__(self, mode_repo: MaintenanceModeRepository):
        self.mode_repo = mode_repo

    def status(self) -> Dict[str, Any]:
        """
        Returns:
            {"isActive": bool, "data": MaintenanceModeRecord | None}
        """
        raw = self.mode_repo.status()
        data = raw.get('data')
        return {
            'isActive': bool(raw.get('isActive')),
            'data': MaintenanceModeRecord.from_dict(data) if isinstance(data, dict) else None,
        }

    def history(self) -> List[MaintenanceModeRecord]:
        return self.mode_repo.history()

    def activate(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Activa el modo mantenimiento.

        Returns:
            Respuesta del backend (emailNotification, reminderScheduled, data)

        Raises:
            ValidationError: Falta el motivo
        """
        reason = form_text(form, 'reason')
        if not reason:
            raise ValidationError("A reason is required to activate maintenance mode")
        payload = {
            'reason': reason,
            'estimatedDuration': form_text(form, 'estimatedDuration'),
            'endTime': form_text(form, 'endTime'),
            'createdBy': form_text(form, 'createdBy') or DEFAULT_CREATED_BY,
        }
        response = self.mode_repo.activate(payload)
        logger.warning("Modo mantenimiento ACTIVADO: %s", reason)
        return response

    def deactivate(self) -> Dict[str, Any]:
        response = self.mode_repo.deactivate()
        logger.warning("Modo mantenimiento desactivado")
        return response

    def test_email(self) -> Dict[str, Optional[Any]]:
        """
        Prueba la configuración de correo del backend.
        Un error de la API se devuelve como resultado fallido, no se propaga.
        """
        try:
            result = self.mode_repo.test_email()
        except UnauthorizedError:
            raise
        except ApiError as e:
            logger.error("Prueba de correo fallida: %s", e)
            return {'success': False, 'error': e.message}
        return {
            'success': bool(result.get('success')),
            'error': result.get('error') or result.get('message'),
        }
