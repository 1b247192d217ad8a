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

from sqlalchemy.exc import SQLAlchemyError

from database.conexion import Base, ConexionBD
from database.models import Estacion, Localidad, Provincia

logger = logging.getLogger(__name__)


def inicializar_base_de_datos(conexion: ConexionBD) -> None:
    """
    Crea la estructura de la base de datos si no existe.

    Args:
        conexion (ConexionBD): Conexión abierta.

    Raises:
        SQLAlchemyError: Si no se pueden crear las tablas.
    """
    logger.info("Inicializando base de datos (%s)...", conexion.engine.dialect.name)
    try:
        Base.metadata.create_all(bind=conexion.engine)
    except SQLAlchemyError as e:
        logger.error("Error crítico creando tablas: %s", e)
        raise
    logger.info("Estructura de tablas verificada/creada.")


def limpiar_base_de_datos(conexion: ConexionBD) -> dict:
    """
    Borra todos los datos: estaciones, luego localidades y por último provincias.

    Returns:
        dict: Filas eliminadas por tabla.

    Raises:
        SQLAlchemyError: Si falla el borrado; no se elimina nada.
    """
    session = conexion.sesion()
    try:
        borradas = {
            "estaciones": session.query(Estacion).delete(synchronize_session=False),
            "localidades": session.query(Localidad).delete(synchronize_session=False),
            "provincias": session.query(Provincia).delete(synchronize_session=False),
        }
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Error limpiando la base de datos: %s", e)
        raise
    finally:
        session.close()

    logger.info(
        "Base de datos limpiada: %(estaciones)d estaciones, %(localidades)d localidades, "
        "%(provincias)d provincias", borradas
    )
    return borradas
