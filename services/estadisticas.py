from typing import Dict, Optional

from config.referencias import DatosReferencia
from services.persistence import PersistenceService


def obtener_estadisticas(almacen: PersistenceService, referencias: Optional[DatosReferencia] = None) -> Dict:
    """
    Recuento general de la base de datos.

    Returns:
        Dict: {"provincias", "localidades", "estaciones": {"total", "fijas",
        "moviles", "otros"}, "regiones": {región: estaciones}}
    """
    ref = referencias or DatosReferencia()
    por_tipo = almacen.contar_estaciones_por_tipo()
    por_provincia = almacen.contar_estaciones_por_provincia()

    regiones = {
        region: sum(por_provincia.get(p, 0) for p in provincias)
        for region, provincias in ref.regiones.items()
    }

    return {
        "provincias": almacen.contar_provincias(),
        "localidades": almacen.contar_localidades(),
        "estaciones": {
            "total": almacen.contar_estaciones(),
            "fijas": por_tipo.get("Estacion Fija", 0),
            "moviles": por_tipo.get("Estacion Movil", 0),
            "otros": por_tipo.get("Otros", 0),
        },
        "regiones": regiones,
    }
