# ==============================================================================
# REPOSITORIO DE AUDITORÍA
# ==============================================================================
# Encapsula todo el acceso a audit.json
# La auditoría se almacena como lista, más reciente primero.
# Es independiente del backend elegido para tacos y pedidos.
# ==============================================================================

import os
from datetime import datetime
from typing import Any, Dict, List

from .base import ListRepository


class AuditRepository(ListRepository):
    """
    Repositorio del registro de actividad.

    Formato de datos en audit.json:
    [
        {
            "type": "PEDIDO",
            "user": "jdoe",
            "message": "Pedido 12 colocado por jdoe (2 tacos)",
            "timestamp": "2024-01-01 10:00:00",
            "related_id": "12",
            "details": {...}
        }
    ]
    """

    # Límite de registros para evitar archivos muy grandes
    MAX_LOGS = 10000

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Carpeta de datos
        """
        super().__init__(os.path.join(base_path, 'audit.json'))

    def load(self) -> List[Dict[str, Any]]:
        """Todos los registros, más recientes primero."""
        return self.get_all()

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Dict[str, Any] = None
    ) -> None:
        """
        Registra un nuevo evento de auditoría.

        Args:
            log_type: Tipo de evento (LOGIN, REGISTRO, TACO, PEDIDO)
            user: Usuario que realizó la acción
            message: Mensaje descriptivo
            related_id: ID relacionado (taco, pedido)
            details: Detalles adicionales
        """
        entry = {
            'type': log_type,
            'user': user or 'sistema',
            'message': message,
            'timestamp': datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            'related_id': str(related_id) if related_id is not None else '',
            'details': details or {}
        }
        with self._file_lock:
            logs = self.get_all()
            logs.insert(0, entry)
            self.save_all(logs[:self.MAX_LOGS])
