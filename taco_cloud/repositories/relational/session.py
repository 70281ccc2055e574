# ==============================================================================
# CONEXIÓN RELACIONAL - Engine y fábrica de sesiones (SQLAlchemy)
# ==============================================================================

from contextlib import contextmanager
from typing import Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from taco_cloud.errors import StorageError
from taco_cloud.repositories.relational.models import Base


def make_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Crea el engine y asegura que existan las tablas.

    Args:
        database_url: URL de SQLAlchemy (ej: sqlite:///taco_cloud.db)
        echo: Mostrar SQL en consola
    """
    # SQLite necesita este flag cuando se usa desde varios hilos de Flask.
    connect_args: Dict[str, object] = {}
    if database_url.startswith('sqlite'):
        connect_args = {'check_same_thread': False}

    engine = create_engine(database_url, echo=echo, future=True, connect_args=connect_args)
    try:
        Base.metadata.create_all(engine)
    except SQLAlchemyError as exc:
        raise StorageError(f'No se pudo inicializar el esquema: {exc}', 'relational') from exc
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        class_=Session,
    )


@contextmanager
def db_session(factory: sessionmaker) -> Generator[Session, None, None]:
    """
    Sesión transaccional: commit al salir, rollback ante cualquier error.

    Los errores de SQLAlchemy se convierten en StorageError.

        with db_session(factory) as db:
            ...
    """
    db = factory()
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError(str(exc), 'relational') from exc
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
