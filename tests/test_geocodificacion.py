"""
Tests del geocodificador de Nominatim con una sesión HTTP simulada.
"""

import pytest
import requests

from services.geocodificacion import GeocodificadorNominatim, limpiar_direccion


class RespuestaFalsa:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code}", response=self)

    def json(self):
        return self.payload


class SesionFalsa:
    """Devuelve las respuestas en orden y guarda los parámetros de cada GET."""

    def __init__(self, *respuestas):
        self.respuestas = list(respuestas)
        self.consultas = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.consultas.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        respuesta = self.respuestas.pop(0)
        if isinstance(respuesta, Exception):
            raise respuesta
        return respuesta


def geocodificador(sesion):
    return GeocodificadorNominatim(url="http://nominatim.test/search", user_agent="itv-tests",
                                   timeout=3, sesion=sesion)


@pytest.mark.parametrize(
    "entrada, esperado",
    [
        ("Calle Mayor s/n", "Calle Mayor"),
        ("Pol. Ind. El Oliveral, Parcela 12", "Polígono Industrial"),
        ("Ctra. Nacional 340 km 12,5", "Ctra. Nacional 340"),
        ("", ""),
    ],
)
def test_limpiar_direccion(entrada, esperado):
    assert limpiar_direccion(entrada) == esperado


def test_primera_consulta_con_direccion():
    sesion = SesionFalsa(RespuestaFalsa([{"lat": "39.4699", "lon": "-0.3763"}]))

    coordenadas = geocodificador(sesion).geocodificar("Calle Mayor 1", "Valencia", "Valencia", "46001")

    assert (coordenadas.lat, coordenadas.lon) == (39.4699, -0.3763)
    consulta = sesion.consultas[0]
    assert consulta["params"]["q"] == "Calle Mayor 1, Valencia, Valencia, España"
    assert consulta["headers"]["User-Agent"] == "itv-tests"
    assert consulta["timeout"] == 3


def test_reintenta_solo_con_el_municipio():
    sesion = SesionFalsa(RespuestaFalsa([]), RespuestaFalsa([{"lat": "38.34", "lon": "-0.48"}]))

    coordenadas = geocodificador(sesion).geocodificar("Calle Inventada 99", "Alicante", "Alicante", "03001")

    assert coordenadas.lat == pytest.approx(38.34)
    assert sesion.consultas[1]["params"]["q"] == "Alicante, Alicante, 03001, España"


@pytest.mark.parametrize(
    "fallo",
    [
        RespuestaFalsa([], status=503),
        requests.ConnectionError("sin red"),
        requests.Timeout("lento"),
        RespuestaFalsa([{"lat": "no es un número", "lon": "1"}]),
    ],
)
def test_fallos_devuelven_none(fallo):
    sesion = SesionFalsa(fallo, RespuestaFalsa([]))
    assert geocodificador(sesion).geocodificar("Calle Mayor 1", "Lugo", "Lugo", "27001") is None
