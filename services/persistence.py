from typing import Dict, Iterable, List, Optional, Sequence

from database.conexion import ConexionBD
from database.models import Estacion, Localidad, Provincia, TipoEstacion
from models.estacion_model import EstacionModel
from models.localidad_model import LocalidadModel
from models.provincia_model import ProvinciaModel


class PersistenceService:
    """
    Servicio de persistencia: el contrato de almacenamiento que consumen el
    resolutor de identidad, el detector de duplicados y los extractores.

    Agrupa los modelos CRUD de provincia, localidad y estación sobre una única
    conexión recibida por parámetro.
    """

    def __init__(self, conexion: ConexionBD):
        """
        Inicializa el servicio instanciando los modelos necesarios.

        Args:
            conexion (ConexionBD): Conexión abierta a la base de datos.
        """
        self.conexion = conexion
        self.model_provincia = ProvinciaModel(conexion)
        self.model_localidad = LocalidadModel(conexion)
        self.model_estacion = EstacionModel(conexion)

    # ---------------- PROVINCIAS ----------------

    def buscar_provincia_por_nombre(self, nombre: str) -> Optional[Provincia]:
        return self.model_provincia.buscar_por_nombre(nombre)

    def insertar_provincia(self, nombre: str) -> Provincia:
        """
        Inserta una provincia nueva.

        Raises:
            SQLAlchemyError: Si falla la inserción (incluida la restricción única).
        """
        return self.model_provincia.create({"nombre": nombre})

    def contar_provincias(self) -> int:
        return self.model_provincia.count()

    # ---------------- LOCALIDADES ----------------

    def buscar_localidad(self, nombre: str, provincia_id: int) -> Optional[Localidad]:
        return self.model_localidad.buscar(nombre, provincia_id)

    def insertar_localidad(self, nombre: str, provincia_id: int) -> Localidad:
        return self.model_localidad.create({"nombre": nombre, "provincia_id": provincia_id})

    def contar_localidades(self) -> int:
        return self.model_localidad.count()

    # ---------------- ESTACIONES ----------------

    def existe_estacion(self, nombre: str, localidad_id: int) -> bool:
        return self.model_estacion.existe(nombre, localidad_id)

    def insertar_estacion(self, datos: Dict) -> Estacion:
        """
        Inserta una estación.

        Args:
            datos (Dict): Columnas de `Estacion` (sin id, que se genera como ULID).

        Returns:
            Estacion: La estación persistida.

        Raises:
            SQLAlchemyError: Si la base de datos rechaza la fila.
        """
        return self.model_estacion.create(datos)

    def listar_estaciones(self, campos: Sequence[str]) -> List[Dict]:
        return self.model_estacion.listar(campos)

    def eliminar_estaciones(self, ids: Iterable[str]) -> int:
        """
        Elimina en bloque las estaciones indicadas.

        Returns:
            int: Número de estaciones borradas.

        Raises:
            SQLAlchemyError: Si falla el borrado.
        """
        return self.model_estacion.delete_many(ids)

    def contar_estaciones(self, filtros: Optional[Dict] = None) -> int:
        """
        Cuenta estaciones, opcionalmente filtrando por igualdad de columnas
        (por ejemplo `{"tipo": TipoEstacion.MOVIL}`).
        """
        return self.model_estacion.count(filters=filtros)

    def contar_estaciones_por_tipo(self) -> Dict[str, int]:
        return self.model_estacion.contar_por_tipo()

    def contar_estaciones_por_provincia(self) -> Dict[str, int]:
        return self.model_estacion.contar_por_provincia()

    def buscar_estaciones_detalle(
        self,
        provincia: Optional[str] = None,
        localidad: Optional[str] = None,
        tipo: Optional[TipoEstacion] = None,
    ) -> List[Dict]:
        return self.model_estacion.buscar_detalle(provincia, localidad, tipo)
