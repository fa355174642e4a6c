# ==============================================================================
# REPOSITORIO BASE - Funcionalidad común para recursos REST
# ==============================================================================

from typing import Any, Dict, List, Optional, Type

from factory_dashboard.models.entities import Record
from factory_dashboard.repositories.api_client import ApiClient


class RestRepository:
    """
    Clase base para todos los repositorios.
    Cada subclase apunta a un recurso del backend (ej: "/inventory") y
    a la entidad que lo representa.

    Operaciones estándar del backend:
        GET    /recurso        → lista
        POST   /recurso        → crear
        PUT    /recurso/<id>   → actualizar (registro completo)
        DELETE /recurso/<id>   → eliminar

    El repositorio NO guarda caché: cada lectura vuelve al backend.
    """

    resource: str = ''
    entity: Type[Record] = Record

    def __init__(self, client: ApiClient):
        """
        Args:
            client: Cliente HTTP compartido
        """
        self.client = client

    def _item_path(self, record_id: Any) -> str:
        return f"{self.resource}/{record_id}"

    def _wrap(self, data: Any) -> Optional[Record]:
        if isinstance(data, dict):
            return self.entity.from_dict(data)
        return None

    def list(self) -> List[Record]:
        """
        Obtiene todos los registros del recurso.

        Returns:
            Lista de entidades (vacía si el backend no devuelve una lista)
        """
        data = self.client.get(self.resource)
        if not isinstance(data, list):
            return []
        return [self.entity.from_dict(item) for item in data if isinstance(item, dict)]

    def get(self, record_id: Any) -> Optional[Record]:
        """Obtiene un registro por su _id (None si el backend no devuelve objeto)."""
        return self._wrap(self.client.get(self._item_path(record_id)))

    def create(self, data: Dict[str, Any]) -> Optional[Record]:
        """
        Crea un registro.

        Returns:
            Entidad creada si el backend la devuelve
        """
        return self._wrap(self.client.post(self.resource, json=data))

    def update(self, record_id: Any, data: Dict[str, Any]) -> Optional[Record]:
        """Reemplaza un registro existente."""
        return self._wrap(self.client.put(self._item_path(record_id), json=data))

    def delete(self, record_id: Any) -> None:
        """Elimina un registro."""
        self.client.delete(self._item_path(record_id))
