# ==============================================================================
# REPOSITORIOS DE RECURSOS HUMANOS
# ==============================================================================
# Encapsula el acceso a /hr/employees y /hr/attendance.
# ==============================================================================

from factory_dashboard.models.entities import AttendanceRecord, Employee
from factory_dashboard.repositories.base import RestRepository


class EmployeeRepository(RestRepository):
    resource = '/hr/employees'
    entity = Employee


class AttendanceRepository(RestRepository):
    """Asistencia: el backend solo admite listar y registrar."""

    resource = '/hr/attendance'
    entity = AttendanceRecord
