import logging

import pandas as pd
from sqlalchemy.exc import SQLAlchemyError

from services.persistence import PersistenceService

logger = logging.getLogger(__name__)

CAMPOS = ["id", "nombre", "localidad_id", "direccion", "creado_en"]
CLAVE = ["nombre", "localidad_id"]


class DetectorDuplicados:
    """
    Purga a posteriori las estaciones repetidas por (nombre, localidad).

    De cada grupo se conserva la estación más antigua según `creado_en`,
    sin importar el orden en que la base de datos las devuelva.
    """

    def __init__(self, almacen: PersistenceService):
        self.almacen = almacen

    def ids_duplicados(self) -> list:
        """
        Calcula los IDs que sobran, sin borrar nada.

        Returns:
            list: IDs de las estaciones a eliminar.
        """
        filas = self.almacen.listar_estaciones(CAMPOS)
        if not filas:
            return []

        df = pd.DataFrame(filas, columns=CAMPOS)
        # Orden estable: ante la misma fecha se respeta el orden del listado
        df = df.sort_values("creado_en", kind="mergesort")
        sobrantes = df[df.duplicated(subset=CLAVE, keep="first")]
        return sobrantes["id"].tolist()

    def eliminar_duplicados(self) -> int:
        """
        Elimina en un único borrado todas las estaciones duplicadas.

        Es idempotente: una segunda ejecución sin inserciones intermedias
        devuelve 0.

        Returns:
            int: Número de estaciones eliminadas.

        Raises:
            SQLAlchemyError: Si falla la lectura o el borrado.
        """
        ids = self.ids_duplicados()
        if not ids:
            logger.info("No se encontraron estaciones duplicadas")
            return 0

        try:
            eliminadas = self.almacen.eliminar_estaciones(ids)
        except SQLAlchemyError as e:
            logger.error("Error eliminando %d duplicados: %s", len(ids), e)
            raise

        logger.info("Eliminadas %d estaciones duplicadas", eliminadas)
        return eliminadas
