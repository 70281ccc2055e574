# ==============================================================================
# SERVICIO DE TACOS RECIENTES (API de solo lectura)
# ==============================================================================
# Los resúmenes son datos planos; los enlaces se calculan aparte con
# funciones que reciben el constructor de URLs de la capa web.
# ==============================================================================

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from taco_cloud.models import Ingredient, Taco, format_timestamp
from taco_cloud.repositories.interfaces import ITacoRepository
from taco_cloud.services.catalog_service import CatalogService


@dataclass
class IngredientSummary:
    name: str
    type: str


@dataclass
class TacoSummary:
    """Taco con los nombres de sus ingredientes ya resueltos."""
    id: Any
    name: str
    created_at: Optional[datetime]
    ingredients: List[IngredientSummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'createdAt': format_timestamp(self.created_at),
            'ingredients': [{'name': i.name, 'type': i.type} for i in self.ingredients],
        }


class RecentTacosService:
    """Resúmenes de los tacos diseñados más recientemente."""

    DEFAULT_LIMIT = 12

    def __init__(
        self,
        taco_repo: ITacoRepository,
        catalog_service: CatalogService,
        limit: int = DEFAULT_LIMIT
    ):
        self.taco_repo = taco_repo
        self.catalog_service = catalog_service
        self.limit = limit

    def _catalog(self) -> Dict[str, Ingredient]:
        return {i.id: i for i in self.catalog_service.list_all()}

    @staticmethod
    def summarize(taco: Taco, catalog: Dict[str, Ingredient]) -> TacoSummary:
        """
        Convierte un taco en resumen. Los códigos que ya no existen en el
        catálogo se omiten.
        """
        ingredients = [
            IngredientSummary(name=catalog[i].name, type=catalog[i].type.value)
            for i in taco.ingredients
            if i in catalog
        ]
        return TacoSummary(
            id=taco.id,
            name=taco.name,
            created_at=taco.created_at,
            ingredients=ingredients
        )

    def recent_tacos(self, limit: Optional[int] = None) -> List[TacoSummary]:
        """
        Tacos más recientes primero.

        Args:
            limit: Máximo a devolver (por defecto el configurado, 12)

        Returns:
            Lista de resúmenes; vacía si no hay tacos
        """
        tacos = self.taco_repo.find_recent(self.limit if limit is None else limit)
        if not tacos:
            return []
        catalog = self._catalog()
        return [self.summarize(t, catalog) for t in tacos]

    def find_summary(self, taco_id: Any) -> Optional[TacoSummary]:
        taco = self.taco_repo.find_by_id(taco_id)
        if taco is None:
            return None
        return self.summarize(taco, self._catalog())


# ==============================================================================
# ENLACES
# ==============================================================================

def links_for(summary: TacoSummary, taco_href: Callable[[Any], str]) -> Dict[str, Dict[str, str]]:
    return {'self': {'href': taco_href(summary.id)}}


def taco_resource(summary: TacoSummary, taco_href: Callable[[Any], str]) -> Dict[str, Any]:
    """Resumen + sus enlaces, listo para serializar a JSON."""
    data = summary.to_dict()
    data['_links'] = links_for(summary, taco_href)
    return data


def recent_tacos_resource(
    summaries: List[TacoSummary],
    taco_href: Callable[[Any], str],
    recents_href: str
) -> Dict[str, Any]:
    """
    Colección de tacos recientes con enlace "recents".

        {"_embedded": {"tacos": [...]}, "_links": {"recents": {"href": ...}}}
    """
    return {
        '_embedded': {'tacos': [taco_resource(s, taco_href) for s in summaries]},
        '_links': {'recents': {'href': recents_href}},
    }
