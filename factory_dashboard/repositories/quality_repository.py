# ==============================================================================
# REPOSITORIO DE CALIDAD
# ==============================================================================
# Encapsula el acceso a /quality (inspecciones por lote).
# ==============================================================================

from factory_dashboard.models.entities import QualityRecord
from factory_dashboard.repositories.base import RestRepository


class QualityRepository(RestRepository):
    resource = '/quality'
    entity = QualityRecord
