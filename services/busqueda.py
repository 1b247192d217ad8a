import math
from typing import Dict, List, Optional

from database.models import TipoEstacion
from services.persistence import PersistenceService

RADIO_TIERRA_KM = 6371


def calcular_distancia(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Distancia de círculo máximo entre dos puntos (fórmula de Haversine).

    Returns:
        float: Distancia en kilómetros.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (math.sin(d_lat / 2) ** 2
         + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return RADIO_TIERRA_KM * c


def buscar_estaciones(
    almacen: PersistenceService,
    provincia: Optional[str] = None,
    localidad: Optional[str] = None,
    tipo: Optional[str] = None,
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    radio: Optional[float] = None,
) -> List[Dict]:
    """
    Búsqueda unificada de estaciones de todas las comunidades.

    Args:
        almacen (PersistenceService): Acceso a los datos.
        provincia (str, optional): Subcadena del nombre de provincia.
        localidad (str, optional): Subcadena del nombre de localidad.
        tipo (str, optional): Valor de `TipoEstacion` ("Estacion Fija", ...).
        lat, lon, radio (float, optional): Búsqueda por proximidad; van juntos.

    Returns:
        List[Dict]: Estaciones con su localidad y provincia. Si hay búsqueda
        por proximidad, ordenadas por `distancia_km` ascendente.

    Raises:
        ValueError: Si solo se da parte de los parámetros de proximidad, si no
            son numéricos o si el tipo no existe.
    """
    proximidad = [lat, lon, radio]
    if any(p is not None for p in proximidad) and not all(p is not None for p in proximidad):
        raise ValueError("Para búsqueda por proximidad se requieren lat, lon y radio")

    tipo_enum = TipoEstacion(tipo) if tipo else None

    estaciones = almacen.buscar_estaciones_detalle(provincia, localidad, tipo_enum)

    if lat is None:
        return estaciones

    try:
        lat, lon, radio = float(lat), float(lon), float(radio)
    except (TypeError, ValueError):
        raise ValueError("Los parámetros lat, lon y radio deben ser números válidos")

    cercanas = []
    for est in estaciones:
        distancia = calcular_distancia(lat, lon, est["latitud"], est["longitud"])
        if distancia <= radio:
            cercanas.append({**est, "distancia_km": round(distancia, 2)})

    cercanas.sort(key=lambda e: e["distancia_km"])
    return cercanas
