#  Copyright (c) 2026 Fleer
#  Permission is hereby granted, free of charge, to any person obtaining a copy
#  of this software and associated documentation files (the "Software"), to deal
#  in the Software without restriction, including without limitation the rights
#  to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
#  copies of the Software, and to permit persons to whom the Software is
#  furnished to do so, subject to the following conditions:
#
#  The above copyright notice and this permission notice shall be included in all
#  copies or substantial portions of the Software.
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


# Escuchamos el evento en TODOS los motores, pero validamos dentro
# si la conexión específica es SQLite antes de ejecutar el comando.
@event.listens_for(Engine, "connect")
def activar_foreign_keys_sqlite(dbapi_connection, connection_record):
    """Activa el soporte de claves foráneas (Foreign Keys) para conexiones SQLite.

    SQLAlchemy no habilita esto por defecto en SQLite. Se ejecuta automáticamente
    al conectar si el driver es 'sqlite3'.

    Args:
        dbapi_connection: La conexión cruda de la DBAPI.
        connection_record: El registro de contexto de la conexión.
    """
    if "sqlite3" in str(dbapi_connection.__class__.__module__):
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()


class ConexionBD:
    """Ciclo de vida explícito del motor y la fábrica de sesiones.

    Sustituye al cliente global: cada carga, modelo o servicio recibe la
    conexión como dependencia. Puede usarse como gestor de contexto.

    Example:
        with ConexionBD("sqlite:///itv.db") as conexion:
            sesion = conexion.sesion()
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine = None
        self._fabrica = None

    @property
    def abierta(self) -> bool:
        return self._engine is not None

    @property
    def engine(self):
        if self._engine is None:
            raise RuntimeError("La conexión no está abierta")
        return self._engine

    def abrir(self) -> "ConexionBD":
        """Crea el motor y la fábrica de sesiones (idempotente)."""
        if self._engine is None:
            self._engine = create_engine(self.url, echo=self.echo)
            self._fabrica = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)
            logger.debug("Conexión abierta (%s)", self._engine.dialect.name)
        return self

    def cerrar(self) -> None:
        """Libera el pool de conexiones del motor."""
        if self._engine is not None:
            self._engine.dispose()
            logger.debug("Conexión cerrada")
        self._engine = None
        self._fabrica = None

    def sesion(self):
        """Devuelve una nueva sesión de base de datos.

        Returns:
            Session: Una instancia de sqlalchemy.orm.Session.

        Raises:
            RuntimeError: Si la conexión no se ha abierto.
        """
        if self._fabrica is None:
            raise RuntimeError("La conexión no está abierta")
        return self._fabrica()

    def __enter__(self):
        return self.abrir()

    def __exit__(self, exc_type, exc, tb):
        self.cerrar()
        return False
