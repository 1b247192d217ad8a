import logging
import re
from typing import Optional, Protocol

import requests

import database.config as config
from database.schemas import Coordenadas

logger = logging.getLogger(__name__)


class Geocodificador(Protocol):
    """Cualquier objeto capaz de convertir una dirección en coordenadas."""

    def geocodificar(self, direccion: str, municipio: str, provincia: str,
                     codigo_postal: str) -> Optional[Coordenadas]:
        ...


def limpiar_direccion(direccion: str) -> str:
    """
    Simplifica una dirección para mejorar la geocodificación.

    Quita "s/n", números de parcela y puntos kilométricos, y reduce cualquier
    "Pol. Ind. <nombre>" a "Polígono Industrial".
    """
    limpia = direccion or ""
    limpia = re.sub(r"\bs/n[ºo]?", "", limpia, flags=re.IGNORECASE)
    limpia = re.sub(r"parcelas?\s*\d+(\s*y\s*\d+)?", "", limpia, flags=re.IGNORECASE)
    limpia = re.sub(r"pol\.?\s*ind\.?\s*[^,]*", "Polígono Industrial", limpia, flags=re.IGNORECASE)
    limpia = re.sub(r"km\.?\s*\d+([.,]\d+)?", "", limpia, flags=re.IGNORECASE)
    limpia = re.sub(r",\s*,", ",", limpia)
    limpia = re.sub(r"\s+", " ", limpia)
    return limpia.strip(" ,")


class GeocodificadorNominatim:
    """
    Geocodificador sobre la API de búsqueda de Nominatim (OpenStreetMap).

    Intenta primero con la dirección limpia y, si no hay resultado, con
    municipio + provincia + código postal. Cualquier fallo HTTP devuelve None;
    no hay reintentos. La pausa de cortesía entre llamadas la aplica quien lo usa.
    """

    def __init__(self, url: str = None, user_agent: str = None, timeout: float = None,
                 sesion: Optional[requests.Session] = None):
        self.url = url or config.NOMINATIM_URL
        self.user_agent = user_agent or config.GEOCODING_USER_AGENT
        self.timeout = timeout or config.GEOCODING_TIMEOUT
        self.sesion = sesion or requests.Session()

    def geocodificar(self, direccion: str, municipio: str, provincia: str,
                     codigo_postal: str) -> Optional[Coordenadas]:
        consulta = ", ".join(p for p in (limpiar_direccion(direccion), municipio, provincia, "España") if p)
        coordenadas = self._consultar(consulta)
        if coordenadas:
            return coordenadas

        logger.info("Reintentando geocodificación solo con el municipio: %s", municipio)
        consulta_simple = ", ".join(p for p in (municipio, provincia, codigo_postal, "España") if p)
        coordenadas = self._consultar(consulta_simple)
        if coordenadas is None:
            logger.warning("No se encontraron coordenadas para: %s", municipio)
        return coordenadas

    def _consultar(self, consulta: str) -> Optional[Coordenadas]:
        params = {"q": consulta, "format": "json", "limit": 1}
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        try:
            response = self.sesion.get(self.url, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.HTTPError as err:
            status = getattr(err.response, "status_code", None)
            logger.warning("Error HTTP de Nominatim (%s) para '%s'", status, consulta)
            return None
        except (requests.RequestException, ValueError) as err:
            logger.warning("No se pudo consultar Nominatim para '%s': %s", consulta, err)
            return None

        if not isinstance(payload, list) or not payload:
            return None
        try:
            return Coordenadas(lat=float(payload[0]["lat"]), lon=float(payload[0]["lon"]))
        except (KeyError, TypeError, ValueError):
            return None
