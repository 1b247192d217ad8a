import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from services.persistence import PersistenceService

logger = logging.getLogger(__name__)


class ResolutorIdentidad:
    """
    Obtiene (o crea) los identificadores de provincia y localidad.

    Los nombres llegan ya canonizados por el corrector de campos, así que aquí
    solo se recortan espacios. Cualquier error de almacenamiento se traduce en
    `None`; quien llama debe rechazar el registro y seguir con el siguiente.

    Las tablas tienen restricción única sobre el nombre (y sobre el par
    nombre/provincia), de modo que si otra carga inserta la misma fila entre la
    búsqueda y la inserción, el `IntegrityError` provoca una segunda búsqueda.
    """

    def __init__(self, almacen: PersistenceService):
        self.almacen = almacen

    def obtener_o_crear_provincia(self, nombre: str) -> Optional[int]:
        """
        Args:
            nombre (str): Nombre canónico de la provincia.

        Returns:
            Optional[int]: ID de la provincia, o None si hubo un error.
        """
        nombre = (nombre or "").strip()
        if not nombre:
            logger.error("No se puede resolver una provincia sin nombre")
            return None

        try:
            existente = self.almacen.buscar_provincia_por_nombre(nombre)
            if existente:
                return existente.id
            return self.almacen.insertar_provincia(nombre).id
        except IntegrityError:
            return self._releer(lambda: self.almacen.buscar_provincia_por_nombre(nombre), f"provincia '{nombre}'")
        except SQLAlchemyError as e:
            logger.error("Error resolviendo la provincia '%s': %s", nombre, e)
            return None

    def obtener_o_crear_localidad(self, nombre: str, provincia_id: int) -> Optional[int]:
        """
        Args:
            nombre (str): Nombre de la localidad.
            provincia_id (int): Provincia a la que pertenece.

        Returns:
            Optional[int]: ID de la localidad, o None si hubo un error.
        """
        nombre = (nombre or "").strip()
        if not nombre or provincia_id is None:
            logger.error("Localidad sin nombre o sin provincia (%r, %r)", nombre, provincia_id)
            return None

        try:
            existente = self.almacen.buscar_localidad(nombre, provincia_id)
            if existente:
                return existente.id
            return self.almacen.insertar_localidad(nombre, provincia_id).id
        except IntegrityError:
            return self._releer(
                lambda: self.almacen.buscar_localidad(nombre, provincia_id),
                f"localidad '{nombre}' (provincia {provincia_id})"
            )
        except SQLAlchemyError as e:
            logger.error("Error resolviendo la localidad '%s': %s", nombre, e)
            return None

    @staticmethod
    def _releer(buscar, descripcion: str) -> Optional[int]:
        try:
            fila = buscar()
        except SQLAlchemyError as e:
            logger.error("Error releyendo %s: %s", descripcion, e)
            return None
        if fila is None:
            logger.error("Conflicto de unicidad en %s sin fila existente", descripcion)
            return None
        logger.info("%s creada por otra carga; se reutiliza", descripcion.capitalize())
        return fila.id
