# ==============================================================================
# SERVICIO DE DISEÑO DE TACOS
# ==============================================================================
# Valida y persiste cada envío del formulario de diseño.
# No detecta diseños repetidos: cada envío válido crea un taco nuevo.
# ==============================================================================

from typing import Iterable, Optional

from taco_cloud.errors import ValidationError
from taco_cloud.models import Taco, is_blank, next_timestamp
from taco_cloud.performance_logger import profile_function
from taco_cloud.repositories.interfaces import ITacoRepository
from taco_cloud.services.audit_service import AuditService
from taco_cloud.services.catalog_service import CatalogService


class DesignService:
    """Creación de tacos a partir de nombre + ingredientes."""

    def __init__(
        self,
        taco_repo: ITacoRepository,
        catalog_service: CatalogService,
        audit_service: AuditService = None
    ):
        self.taco_repo = taco_repo
        self.catalog_service = catalog_service
        self.audit_service = audit_service

    def validate(self, name: str, ingredient_ids: Iterable[str]) -> dict:
        """
        Valida un diseño sin persistir nada.

        Returns:
            Errores por campo ('name', 'ingredients'); vacío si es válido
        """
        errors = {}
        ids = list(ingredient_ids or [])

        if is_blank(name):
            errors['name'] = 'Name is required'

        if not ids:
            errors['ingredients'] = 'You must choose at least 1 ingredient'
        else:
            seen = set()
            duplicate = None
            for ingredient_id in ids:
                if ingredient_id in seen:
                    duplicate = ingredient_id
                    break
                seen.add(ingredient_id)
            if duplicate:
                errors['ingredients'] = f'Duplicate ingredient: {duplicate}'
            else:
                _, missing = self.catalog_service.resolve(ids)
                if missing:
                    errors['ingredients'] = f'Unknown ingredient: {", ".join(missing)}'
        return errors

    @profile_function(name='Crear taco')
    def create(self, name: str, ingredient_ids: Iterable[str], username: Optional[str] = None) -> Taco:
        """
        Crea y persiste un taco.

        Args:
            name: Nombre del diseño
            ingredient_ids: Códigos de ingredientes, en el orden elegido
            username: Usuario que lo diseña (solo para auditoría)

        Returns:
            El taco guardado, con ID y fecha de creación

        Raises:
            ValidationError: Nombre vacío, sin ingredientes, repetidos o desconocidos
        """
        ids = list(ingredient_ids or [])
        errors = self.validate(name, ids)
        if errors:
            raise ValidationError(errors)

        taco = Taco(name=name.strip(), ingredients=ids, created_at=next_timestamp())
        saved = self.taco_repo.save(taco)

        if self.audit_service:
            self.audit_service.log_taco_designed(username, saved)
        return saved
