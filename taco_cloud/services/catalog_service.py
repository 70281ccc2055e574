# ==============================================================================
# SERVICIO DE CATÁLOGO
# ==============================================================================
# Acceso de solo lectura a los ingredientes y carga inicial del catálogo.
# ==============================================================================

from typing import Dict, Iterable, List, Optional, Tuple

from taco_cloud.models import Ingredient, IngredientType
from taco_cloud.repositories.interfaces import IIngredientRepository

# Catálogo por defecto (se carga si el repositorio está vacío)
DEFAULT_INGREDIENTS = (
    Ingredient('FLTO', 'Flour Tortilla', IngredientType.WRAP),
    Ingredient('COTO', 'Corn Tortilla', IngredientType.WRAP),
    Ingredient('GRBF', 'Ground Beef', IngredientType.PROTEIN),
    Ingredient('CARN', 'Carnitas', IngredientType.PROTEIN),
    Ingredient('TMTO', 'Diced Tomatoes', IngredientType.VEGGIES),
    Ingredient('LETC', 'Lettuce', IngredientType.VEGGIES),
    Ingredient('CHED', 'Cheddar', IngredientType.CHEESE),
    Ingredient('JACK', 'Monterrey Jack', IngredientType.CHEESE),
    Ingredient('SLSA', 'Salsa', IngredientType.SAUCE),
    Ingredient('SRCR', 'Sour Cream', IngredientType.SAUCE),
)


class CatalogService:
    """
    Servicio del catálogo de ingredientes.

    Responsabilidades:
    - Listar y buscar ingredientes
    - Agrupar por tipo para el formulario de diseño
    - Sembrar el catálogo por defecto
    """

    def __init__(self, ingredient_repo: IIngredientRepository):
        self.ingredient_repo = ingredient_repo

    def list_all(self) -> List[Ingredient]:
        return self.ingredient_repo.find_all()

    def find_by_id(self, ingredient_id: str) -> Optional[Ingredient]:
        """
        Busca un ingrediente por código.

        Returns:
            El ingrediente o None si no existe
        """
        return self.ingredient_repo.find_by_id(ingredient_id)

    @staticmethod
    def group_by_type(ingredients: Iterable[Ingredient]) -> Dict[IngredientType, List[Ingredient]]:
        """
        Agrupa ingredientes por tipo. Todos los tipos aparecen como clave,
        aunque no tengan ingredientes.
        """
        groups: Dict[IngredientType, List[Ingredient]] = {t: [] for t in IngredientType}
        for ingredient in ingredients:
            groups[ingredient.type].append(ingredient)
        return groups

    def resolve(self, ingredient_ids: Iterable[str]) -> Tuple[Dict[str, Ingredient], List[str]]:
        """
        Resuelve códigos contra el catálogo.

        Returns:
            ({código: ingrediente} encontrados, códigos desconocidos)
        """
        catalog = {i.id: i for i in self.list_all()}
        found = {}
        missing = []
        for ingredient_id in ingredient_ids:
            if ingredient_id in catalog:
                found[ingredient_id] = catalog[ingredient_id]
            else:
                missing.append(ingredient_id)
        return found, missing

    def seed_defaults(self, ingredients: Iterable[Ingredient] = DEFAULT_INGREDIENTS) -> int:
        """
        Carga el catálogo inicial si el repositorio está vacío.

        Returns:
            Cantidad de ingredientes insertados (0 si ya había datos)
        """
        if self.ingredient_repo.count() > 0:
            return 0
        inserted = 0
        for ingredient in ingredients:
            self.ingredient_repo.save(ingredient)
            inserted += 1
        return inserted
