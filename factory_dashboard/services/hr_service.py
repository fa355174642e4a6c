# ==============================================================================
# SERVICIO DE RECURSOS HUMANOS
# ==============================================================================
# Empleados y asistencia diaria.
# ==============================================================================

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from factory_dashboard.models.entities import AttendanceRecord, AttendanceStatus, Employee, parse_date
from factory_dashboard.repositories.hr_repository import AttendanceRepository, EmployeeRepository
from factory_dashboard.services.validation import (
    ValidationError,
    form_text,
    optional_float,
    require_float,
    require_text,
)

logger = logging.getLogger(__name__)


DEFAULT_HOURS_WORKED = 8


class HRService:
    """
    Servicio de recursos humanos.

    Responsabilidades:
    - CRUD de empleados
    - Marcar asistencia
    - Indicadores del día (asistencia, presentes) y planilla mensual
    """

    def __init__(self, employee_repo: EmployeeRepository, attendance_repo: AttendanceRepository):
        self.employee_repo = employee_repo
        self.attendance_repo = attendance_repo

    # =========================================================================
    # EMPLEADOS
    # =========================================================================

    def list_employees(self) -> List[Employee]:
        return self.employee_repo.list()

    def _employee_payload(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            'name': require_text(form, 'name', 'Name'),
            'email': require_text(form, 'email', 'Email'),
            'position': require_text(form, 'position', 'Position'),
            'department': require_text(form, 'department', 'Department'),
            'salary': require_float(form, 'salary', 'Salary'),
            'hireDate': form_text(form, 'hireDate') or date.today().isoformat(),
            'phone': form_text(form, 'phone'),
        }

    def save_employee(self, form: Mapping[str, Any], existing: Optional[Employee] = None) -> Dict[str, Any]:
        """Crea o edita un empleado (fecha de ingreso por defecto: hoy)."""
        payload = self._employee_payload(form)
        if existing is not None:
            data = existing.to_dict()
            data.update(payload)
            self.employee_repo.update(existing.id, data)
            return data
        self.employee_repo.create(payload)
        logger.info("Empleado registrado: %s", payload['name'])
        return payload

    def delete_employee(self, record_id: str) -> None:
        self.employee_repo.delete(record_id)

    # =========================================================================
    # ASISTENCIA
    # =========================================================================

    def list_attendance(self) -> List[AttendanceRecord]:
        return self.attendance_repo.list()

    def mark_attendance(self, form: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Registra una marca de asistencia.
        Por defecto: hoy, presente, 8 horas.
        """
        status = form_text(form, 'status', AttendanceStatus.PRESENT.value)
        if status not in {s.value for s in AttendanceStatus}:
            raise ValidationError("Status must be present, absent or late")
        payload = {
            'employeeId': require_text(form, 'employeeId', 'Employee'),
            'date': form_text(form, 'date') or date.today().isoformat(),
            'status': status,
            'hoursWorked': optional_float(form, 'hoursWorked', DEFAULT_HOURS_WORKED),
        }
        self.attendance_repo.create(payload)
        return payload

    @staticmethod
    def today_attendance(records: List[AttendanceRecord], today: Optional[date] = None) -> List[AttendanceRecord]:
        today = today or date.today()
        result = []
        for record in records:
            when = parse_date(record.date)
            if when and when.date() == today:
                result.append(record)
        return result

    @staticmethod
    def present_count(records: List[AttendanceRecord]) -> int:
        return sum(1 for r in records if r.status == AttendanceStatus.PRESENT.value)

    @staticmethod
    def total_salary(employees: List[Employee]) -> float:
        return sum(float(e.salary or 0) for e in employees)

    @staticmethod
    def employee_names(employees: List[Employee]) -> Dict[str, str]:
        """{_id: nombre} para mostrar asistencias con employeeId sin poblar."""
        return {e.id: e.name for e in employees if e.id}
