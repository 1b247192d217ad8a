"""
Configuración global de pytest para el catálogo de estaciones ITV.

Cada test que toca la base de datos recibe un SQLite temporal propio, así que
los tests son independientes entre sí y no necesitan red.

Ejecutar tests con:
    pytest tests/ -v
    pytest tests/ -v -k "escenario"
"""

import json
from datetime import datetime
from pathlib import Path

import pytest
from faker import Faker

from config.referencias import DatosReferencia
from controllers.validador_estacion import ValidadorEstacion
from database.conexion import ConexionBD
from database.models import TipoEstacion
from database.schemas import Coordenadas
from database.setup import inicializar_base_de_datos
from services.persistence import PersistenceService


# ========================================================================
# BASE DE DATOS
# ========================================================================


@pytest.fixture
def conexion(tmp_path: Path):
    """
    Conexión abierta a un SQLite temporal con las tablas creadas.

    Yields:
        ConexionBD: Conexión lista para usar; se cierra al terminar el test.
    """
    con = ConexionBD(f"sqlite:///{tmp_path / 'itv_test.db'}")
    con.abrir()
    inicializar_base_de_datos(con)
    yield con
    con.cerrar()


@pytest.fixture
def almacen(conexion) -> PersistenceService:
    return PersistenceService(conexion)


@pytest.fixture
def crear_estacion(almacen):
    """
    Inserta una estación resolviendo (o creando) su provincia y localidad.

    Returns:
        Callable: crear(nombre, municipio, provincia, **extra) -> Estacion
    """

    def _crear(nombre, municipio="Valencia", provincia="Valencia", **extra):
        prov = almacen.buscar_provincia_por_nombre(provincia) or almacen.insertar_provincia(provincia)
        loc = almacen.buscar_localidad(municipio, prov.id) or almacen.insertar_localidad(municipio, prov.id)
        datos = {
            "nombre": nombre,
            "tipo": TipoEstacion.FIJA,
            "direccion": "Calle Mayor 1",
            "codigo_postal": "46001",
            "latitud": 39.47,
            "longitud": -0.376,
            "localidad_id": loc.id,
        }
        datos.update(extra)
        return almacen.insertar_estacion(datos)

    return _crear


# ========================================================================
# VALIDACIÓN
# ========================================================================


@pytest.fixture(scope="session")
def referencias() -> DatosReferencia:
    return DatosReferencia()


@pytest.fixture
def validador(referencias) -> ValidadorEstacion:
    return ValidadorEstacion(referencias)


# ========================================================================
# GEOCODIFICACIÓN Y PAUSAS
# ========================================================================


class GeocodificadorFalso:
    """Devuelve siempre las mismas coordenadas y apunta cada consulta."""

    def __init__(self, coordenadas=Coordenadas(39.4699, -0.3763)):
        self.coordenadas = coordenadas
        self.llamadas = []

    def geocodificar(self, direccion, municipio, provincia, codigo_postal):
        self.llamadas.append((direccion, municipio, provincia, codigo_postal))
        return self.coordenadas


@pytest.fixture
def geocodificador() -> GeocodificadorFalso:
    return GeocodificadorFalso()


@pytest.fixture
def pausas() -> list:
    """Lista donde la función `esperar` falsa anota cada pausa pedida."""
    return []


@pytest.fixture
def esperar(pausas):
    return pausas.append


# ========================================================================
# DATOS DE ORIGEN
# ========================================================================


@pytest.fixture(scope="session")
def faker() -> Faker:
    fake = Faker("es_ES")
    Faker.seed(911)
    return fake


@pytest.fixture
def escribir_cv(tmp_path: Path):
    """Escribe un estaciones.json con los encabezados originales."""

    def _escribir(registros, nombre="estaciones.json") -> str:
        ruta = tmp_path / nombre
        ruta.write_text(json.dumps(registros, ensure_ascii=False), encoding="utf-8")
        return str(ruta)

    return _escribir


@pytest.fixture
def fila_cv(faker):
    """Registro CV válido; los argumentos sobrescriben campos."""

    def _fila(**campos) -> dict:
        fila = {
            "TIPO ESTACIÓN": "Estación Fija",
            "PROVINCIA": "Valencia",
            "MUNICIPIO": "Torrent",
            "C.POSTAL": 46900,
            "DIRECCIÓN": faker.street_address(),
            "Nº ESTACIÓN": 4621,
            "HORARIOS": "L-V 7:00-21:00",
            "CORREO": faker.company_email(),
        }
        fila.update(campos)
        return fila

    return _fila


CSV_GAL = (
    "\ufeffNOME DA ESTACIÓN;ENDEREZO;CONCELLO;CÓDIGO POSTAL;PROVINCIA;TELÉFONO;HORARIO;"
    "SOLICITUDE DE CITA PREVIA;CORREO ELECTRÓNICO;COORDENADAS GMAPS\n"
    "Vigo;Rúa Industria 12;Vigo;36210;Pontevedra;986000000;L-V 8:00-20:00;"
    "https://sycitv.com/cita;vigo@sycitv.com;42.2206, -8.7261\n"
    "Santiago;Polígono do Tambre;SANTIAGO DE COMPOSTELA;15890;Coruña;981000000;L-V 8:00-20:00;"
    ";;42° 54.365', -8° 31.120'\n"
    "Lugo Sur;Avda. Coruña 3;Lugo;15001;Lugo;982000000;L-V 8:00-20:00;;;43.0100, -7.5500\n"
)


@pytest.fixture
def ruta_gal(tmp_path: Path) -> str:
    ruta = tmp_path / "Estacions_ITV.csv"
    ruta.write_bytes(CSV_GAL.encode("utf-8"))
    return str(ruta)


XML_CAT = """<?xml version="1.0" encoding="UTF-8"?>
<response>
  <row>
    <row _id="1">
      <denominaci>ITV Reus</denominaci>
      <municipi>Reus</municipi>
      <serveis_territorials>Tarragona</serveis_territorials>
      <operador>Applus+</operador>
      <adre_a>Carrer de l'Alcalde Joan Bertran 2</adre_a>
      <cp>43206</cp>
      <lat>411561000</lat>
      <long>11065000</long>
      <horari_de_servei>L-V 7:00-21:00</horari_de_servei>
      <correu_electr_nic>https://www.applus.com/contacte</correu_electr_nic>
      <web url="https://www.applusiteuve.com/reus"/>
    </row>
    <row _id="2">
      <denominaci>ITV Girona</denominaci>
      <municipi>Girona</municipi>
      <serveis_territorials>Gerona</serveis_territorials>
      <operador>TÜV Rheinland</operador>
      <adre_a>Carrer de la Creu 1</adre_a>
      <cp>17005</cp>
      <lat>41979000</lat>
      <long>2821000</long>
      <horari_de_servei>L-V 8:00-20:00</horari_de_servei>
      <correu_electr_nic>girona@itv.cat</correu_electr_nic>
      <web/>
    </row>
    <row _id="3">
      <denominaci>ITV Lleida</denominaci>
      <municipi>Lleida</municipi>
      <serveis_territorials>Lleida</serveis_territorials>
      <operador>Applus+</operador>
      <adre_a>Polígon El Segre</adre_a>
      <cp>08001</cp>
      <lat>41617000</lat>
      <long>626000</long>
      <horari_de_servei>L-V 8:00-20:00</horari_de_servei>
      <correu_electr_nic>lleida@itv.cat</correu_electr_nic>
      <web/>
    </row>
  </row>
</response>
"""


@pytest.fixture
def ruta_cat(tmp_path: Path) -> str:
    ruta = tmp_path / "ITV-CAT.xml"
    ruta.write_text(XML_CAT, encoding="utf-8")
    return str(ruta)


@pytest.fixture
def instante():
    """Fábrica de fechas de creación explícitas para ordenar duplicados."""

    def _instante(minuto: int) -> datetime:
        return datetime(2024, 1, 1, 12, minuto)

    return _instante
