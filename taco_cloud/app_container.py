# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Este módulo proporciona una forma centralizada de obtener instancias
# de repositorios y servicios. Facilita:
#   - Inyección de dependencias
#   - Testing (cada test crea su contenedor sobre una carpeta temporal)
#   - Cambio de backend sin tocar servicios
#
# ═══════════════════════════════════════════════════════════════════════════════
# SELECCIÓN DE BACKEND
# ═══════════════════════════════════════════════════════════════════════════════
#
#   TACO_BACKEND=relational   → SQLAlchemy (TACO_DATABASE_URL, SQLite por defecto)
#   TACO_BACKEND=document     → colecciones JSON en <data>/document/
#   TACO_BACKEND=wide_column  → tablas particionadas JSON en <data>/wide_column/
#
# Los servicios NO cambian con el backend porque dependen de los
# protocolos de repositories/interfaces.py, no de las implementaciones.
# El registro de actividad (audit.json) y los pedidos abiertos
# (open_orders.json) siempre viven en <data>/.
# ==============================================================================

import os
from typing import Optional

from taco_cloud.repositories import AuditRepository, OpenOrderRepository
from taco_cloud.repositories.interfaces import (
    IIngredientRepository,
    IOrderRepository,
    ITacoRepository,
    IUserRepository,
)
from taco_cloud.services import (
    AuditService,
    CatalogService,
    DesignService,
    OrderService,
    RecentTacosService,
    UserService,
)

BACKENDS = ('relational', 'document', 'wide_column')
DEFAULT_BACKEND = 'document'
DEFAULT_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data')


def _int_env(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return int(value)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Implementa el patrón Singleton para asegurar una única instancia
    de cada repositorio y servicio.

    Uso:
        container = AppContainer(data_dir='/tmp/tacos', backend='wide_column')
        design_service = container.design_service
        order_service = container.order_service
    """

    _instance: Optional['AppContainer'] = None

    def __new__(cls, *args, **kwargs):
        """Singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(
        self,
        data_dir: str = None,
        backend: str = None,
        database_url: str = None,
        orders_page_size: int = None,
        recent_limit: int = None
    ):
        """
        Inicializa el contenedor. Cada parámetro omitido se toma de su
        variable de entorno (TACO_*) o de su valor por defecto.

        Raises:
            ValueError: Si el backend no es uno de BACKENDS
        """
        if self._initialized:
            return

        backend = backend or os.environ.get('TACO_BACKEND', DEFAULT_BACKEND)
        if backend not in BACKENDS:
            raise ValueError(
                f"Backend desconocido: {backend!r} (opciones: {', '.join(BACKENDS)})"
            )

        self.backend = backend
        self.data_dir = data_dir or os.environ.get('TACO_DATA_DIR') or DEFAULT_DATA_DIR
        self.database_url = (
            database_url
            or os.environ.get('TACO_DATABASE_URL')
            or 'sqlite:///' + os.path.join(self.data_dir, 'taco_cloud.db')
        )
        self.orders_page_size = orders_page_size or _int_env(
            'TACO_ORDERS_PAGE_SIZE', OrderService.DEFAULT_PAGE_SIZE
        )
        self.recent_limit = recent_limit or _int_env(
            'TACO_RECENT_LIMIT', RecentTacosService.DEFAULT_LIMIT
        )

        # Motor SQLAlchemy (solo backend relacional, lazy)
        self._engine = None
        self._session_factory = None

        # Repositorios (lazy loading)
        self._ingredient_repo: Optional[IIngredientRepository] = None
        self._taco_repo: Optional[ITacoRepository] = None
        self._order_repo: Optional[IOrderRepository] = None
        self._user_repo: Optional[IUserRepository] = None
        self._audit_repo: Optional[AuditRepository] = None
        self._open_order_repo: Optional[OpenOrderRepository] = None

        # Servicios (lazy loading)
        self._audit_service: Optional[AuditService] = None
        self._catalog_service: Optional[CatalogService] = None
        self._design_service: Optional[DesignService] = None
        self._order_service: Optional[OrderService] = None
        self._user_service: Optional[UserService] = None
        self._recent_tacos_service: Optional[RecentTacosService] = None

        self._initialized = True

    # =========================================================================
    # BACKEND
    # =========================================================================

    @property
    def backend_path(self) -> str:
        """Carpeta de los backends JSON (<data>/<backend>)."""
        return os.path.join(self.data_dir, self.backend)

    @property
    def session_factory(self):
        """Fábrica de sesiones SQLAlchemy (crea el esquema la primera vez)."""
        if self._session_factory is None:
            from taco_cloud.repositories.relational import make_engine, make_session_factory

            if self.database_url.startswith('sqlite:///'):
                os.makedirs(self.data_dir, exist_ok=True)
            self._engine = make_engine(self.database_url)
            self._session_factory = make_session_factory(self._engine)
        return self._session_factory

    def _build_repositories(self) -> None:
        """Crea los cuatro repositorios del backend elegido."""
        if self.backend == 'relational':
            from taco_cloud.repositories.relational import (
                RelationalIngredientRepository,
                RelationalOrderRepository,
                RelationalTacoRepository,
                RelationalUserRepository,
            )
            factory = self.session_factory
            self._ingredient_repo = RelationalIngredientRepository(factory)
            self._taco_repo = RelationalTacoRepository(factory)
            self._order_repo = RelationalOrderRepository(factory)
            self._user_repo = RelationalUserRepository(factory)

        elif self.backend == 'document':
            from taco_cloud.repositories.document import (
                DocumentIngredientRepository,
                DocumentOrderRepository,
                DocumentTacoRepository,
                DocumentUserRepository,
            )
            path = self.backend_path
            self._ingredient_repo = DocumentIngredientRepository(path)
            self._taco_repo = DocumentTacoRepository(path)
            self._order_repo = DocumentOrderRepository(path, self._taco_repo)
            self._user_repo = DocumentUserRepository(path)

        else:
            from taco_cloud.repositories.wide_column import (
                WideColumnIngredientRepository,
                WideColumnOrderRepository,
                WideColumnTacoRepository,
                WideColumnUserRepository,
            )
            path = self.backend_path
            self._ingredient_repo = WideColumnIngredientRepository(path)
            self._taco_repo = WideColumnTacoRepository(path)
            self._order_repo = WideColumnOrderRepository(path)
            self._user_repo = WideColumnUserRepository(path)

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def ingredient_repo(self) -> IIngredientRepository:
        """Repositorio de ingredientes (singleton)."""
        if self._ingredient_repo is None:
            self._build_repositories()
        return self._ingredient_repo

    @property
    def taco_repo(self) -> ITacoRepository:
        """Repositorio de tacos (singleton)."""
        if self._taco_repo is None:
            self._build_repositories()
        return self._taco_repo

    @property
    def order_repo(self) -> IOrderRepository:
        """Repositorio de pedidos (singleton)."""
        if self._order_repo is None:
            self._build_repositories()
        return self._order_repo

    @property
    def user_repo(self) -> IUserRepository:
        """Repositorio de usuarios (singleton)."""
        if self._user_repo is None:
            self._build_repositories()
        return self._user_repo

    @property
    def audit_repo(self) -> AuditRepository:
        """Repositorio de auditoría (singleton)."""
        if self._audit_repo is None:
            self._audit_repo = AuditRepository(self.data_dir)
        return self._audit_repo

    @property
    def open_order_repo(self) -> OpenOrderRepository:
        """Pedidos abiertos por clave de sesión (singleton)."""
        if self._open_order_repo is None:
            self._open_order_repo = OpenOrderRepository(self.data_dir)
        return self._open_order_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def audit_service(self) -> AuditService:
        """Servicio de auditoría (singleton)."""
        if self._audit_service is None:
            self._audit_service = AuditService(self.audit_repo)
        return self._audit_service

    @property
    def catalog_service(self) -> CatalogService:
        """Servicio de catálogo (singleton). Carga el catálogo inicial si está vacío."""
        if self._catalog_service is None:
            service = CatalogService(self.ingredient_repo)
            service.seed_defaults()
            self._catalog_service = service
        return self._catalog_service

    @property
    def design_service(self) -> DesignService:
        """Servicio de diseño de tacos (singleton)."""
        if self._design_service is None:
            self._design_service = DesignService(
                self.taco_repo,
                self.catalog_service,
                self.audit_service
            )
        return self._design_service

    @property
    def order_service(self) -> OrderService:
        """Servicio de pedidos (singleton)."""
        if self._order_service is None:
            self._order_service = OrderService(
                self.order_repo,
                self.audit_service,
                page_size=self.orders_page_size
            )
        return self._order_service

    @property
    def user_service(self) -> UserService:
        """Servicio de usuarios (singleton)."""
        if self._user_service is None:
            self._user_service = UserService(self.user_repo, self.audit_service)
        return self._user_service

    @property
    def recent_tacos_service(self) -> RecentTacosService:
        """Servicio de la API de tacos recientes (singleton)."""
        if self._recent_tacos_service is None:
            self._recent_tacos_service = RecentTacosService(
                self.taco_repo,
                self.catalog_service,
                limit=self.recent_limit
            )
        return self._recent_tacos_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def reset(self) -> None:
        """
        Reinicia todas las instancias.
        Útil para testing o para recargar datos.
        """
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None

        self._ingredient_repo = None
        self._taco_repo = None
        self._order_repo = None
        self._user_repo = None
        self._audit_repo = None
        self._open_order_repo = None

        self._audit_service = None
        self._catalog_service = None
        self._design_service = None
        self._order_service = None
        self._user_service = None
        self._recent_tacos_service = None

    @classmethod
    def get_instance(cls, **kwargs) -> 'AppContainer':
        """
        Obtiene la instancia singleton del contenedor.

        Args:
            kwargs: Parámetros de __init__ (solo se usan en la primera llamada)
        """
        if cls._instance is None:
            return cls(**kwargs)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Elimina la instancia singleton (útil para tests)."""
        if cls._instance is not None:
            if getattr(cls._instance, '_initialized', False):
                cls._instance.reset()
            cls._instance = None


# Función helper para obtener el contenedor global
def get_container(**kwargs) -> AppContainer:
    """
    Obtiene el contenedor de dependencias global.

    Returns:
        Instancia del contenedor
    """
    return AppContainer.get_instance(**kwargs)
