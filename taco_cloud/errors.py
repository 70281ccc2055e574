# ==============================================================================
# EXCEPCIONES DEL DOMINIO
# ==============================================================================
# Las rutas capturan estas excepciones y deciden la respuesta:
#   - ValidationError  → se re-renderiza el formulario con los errores (400)
#   - OrderStateError  → intento de modificar un pedido ya colocado
#   - StorageError     → fallo del backend de persistencia (no se reintenta)
# ==============================================================================

from typing import Dict, Optional


class ValidationError(Exception):
    """
    Error de validación con mensajes por campo.

    Attributes:
        errors: Diccionario {campo: mensaje}
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__('; '.join(f'{k}: {v}' for k, v in self.errors.items()))


class OrderStateError(Exception):
    """Se intentó modificar un pedido que ya no está abierto."""
    pass


class StorageError(Exception):
    """
    Fallo del almacenamiento subyacente (archivo, base de datos).

    Attributes:
        backend: Nombre del backend que falló
    """

    def __init__(self, message: str, backend: Optional[str] = None):
        self.backend = backend
        super().__init__(message)
