import logging
import numbers
import xml.etree.ElementTree as ET
from typing import Dict, List

import pandas as pd

from config.mappings import (
    COLUMNAS_CV, COLUMNAS_GAL, COLUMNAS_CAT,
    URL_CV, URL_GAL, URL_CAT, CONTACTO_CAT
)
from controllers.corrector_campos import desescalar_coordenada, normalizar_tipo, parsear_coordenadas_gal
from database.models import TipoEstacion
from database.schemas import FilaCV, FilaGAL, FilaCAT, FilaFuente, RegistroEstacion
from utilities.sanitizer import Sanitizer

logger = logging.getLogger(__name__)


class FuenteNoDisponibleError(RuntimeError):
    """No se pudo obtener la lista de registros crudos de una fuente."""


# ---------------------------------------------------------------------------
# MAPEO DE COLUMNAS
# ---------------------------------------------------------------------------

def mapear_columnas(columnas: List[str], alias: Dict[str, List[str]]) -> Dict[str, str]:
    """Identifica qué columna de la fuente alimenta cada campo.

    Primero busca coincidencia exacta con el nombre del campo o alguno de sus
    alias; si no la hay, acepta una columna que contenga el alias.

    Args:
        columnas (List[str]): Encabezados ya limpiados con `Sanitizer.limpiar_texto`.
        alias (Dict[str, List[str]]): Campo -> posibles encabezados.

    Returns:
        Dict[str, str]: Campo -> columna encontrada (los no encontrados se omiten).
    """
    mapa = {}
    usadas = []

    for campo, lista_alias in alias.items():
        encontrada = None
        for col in columnas:
            if col not in usadas and (col == Sanitizer.limpiar_texto(campo) or col in lista_alias):
                encontrada = col
                break

        if encontrada is None:
            for col in columnas:
                if col in usadas:
                    continue
                if any(a in col for a in lista_alias):
                    encontrada = col
                    break

        if encontrada is not None:
            mapa[campo] = encontrada
            usadas.append(encontrada)

    return mapa


def _filas(registros: List[Dict], alias: Dict[str, List[str]], tipo_fila):
    """Convierte dicts crudos (con encabezados originales) en filas tipadas."""
    if not registros:
        return []

    limpios = [{Sanitizer.limpiar_texto(k): v for k, v in r.items()} for r in registros]
    columnas = list(dict.fromkeys(col for r in limpios for col in r))
    mapa = mapear_columnas(columnas, alias)

    faltantes = [c for c in alias if c not in mapa]
    if faltantes:
        logger.warning("Columnas no encontradas en la fuente: %s", ", ".join(faltantes))

    filas = []
    for r in limpios:
        datos = {campo: r.get(col) for campo, col in mapa.items()}
        datos.update({campo: None for campo in faltantes})
        filas.append(tipo_fila(**datos))
    return filas


# ---------------------------------------------------------------------------
# LECTORES DE FUENTES
# ---------------------------------------------------------------------------

def leer_cv(ruta: str) -> List[FilaCV]:
    """Lee `estaciones.json` (lista de objetos) de la Comunitat Valenciana.

    Raises:
        FuenteNoDisponibleError: Si el fichero no existe o no es JSON válido.
    """
    try:
        df = pd.read_json(ruta, orient="records", dtype=False, convert_dates=False)
    except (OSError, ValueError) as e:
        raise FuenteNoDisponibleError(f"No se pudo leer la fuente CV ({ruta}): {e}") from e

    logger.info("Leídos %d registros crudos de %s", len(df), ruta)
    return _filas(df.to_dict("records"), COLUMNAS_CV, FilaCV)


def leer_gal(ruta: str) -> List[FilaGAL]:
    """Lee `Estacions_ITV.csv` de Galicia (separador ';', UTF-8 con BOM).

    Si el fichero no es UTF-8 se reintenta en latin-1.

    Raises:
        FuenteNoDisponibleError: Si el fichero no existe o no se puede parsear.
    """
    opciones = dict(sep=";", dtype=str, keep_default_na=False)
    try:
        try:
            df = pd.read_csv(ruta, encoding="utf-8-sig", **opciones)
        except UnicodeDecodeError:
            logger.warning("El CSV de Galicia no es UTF-8; se lee como latin-1")
            df = pd.read_csv(ruta, encoding="latin-1", **opciones)
    except (OSError, ValueError) as e:
        raise FuenteNoDisponibleError(f"No se pudo leer la fuente GAL ({ruta}): {e}") from e

    logger.info("Leídos %d registros crudos de %s", len(df), ruta)
    return _filas(df.to_dict("records"), COLUMNAS_GAL, FilaGAL)


def leer_cat(ruta: str) -> List[FilaCAT]:
    """Lee `ITV-CAT.xml` de Catalunya (`<response><row><row>...`).

    El elemento `web` puede traer la dirección en el atributo `url`.

    Raises:
        FuenteNoDisponibleError: Si el fichero no existe o el XML está mal formado.
    """
    try:
        raiz = ET.parse(ruta).getroot()
    except (OSError, ET.ParseError) as e:
        raise FuenteNoDisponibleError(f"No se pudo leer la fuente CAT ({ruta}): {e}") from e

    if len(raiz) == 1 and raiz[0].tag == "row":
        filas_xml = raiz[0].findall("row")
    else:
        filas_xml = raiz.findall("row")

    registros = []
    for fila in filas_xml:
        registro = {}
        for hijo in fila:
            texto = (hijo.text or "").strip()
            if not texto and "url" in hijo.attrib:
                texto = hijo.attrib["url"].strip()
            registro[hijo.tag] = texto
        registros.append(registro)

    logger.info("Leídos %d registros crudos de %s", len(registros), ruta)
    return _filas(registros, COLUMNAS_CAT, FilaCAT)


# ---------------------------------------------------------------------------
# ADAPTADORES A LA FORMA CANÓNICA
# ---------------------------------------------------------------------------

def _es_numero(valor) -> bool:
    return isinstance(valor, numbers.Real) and not isinstance(valor, bool) and not pd.isna(valor)


def _entero_texto(valor) -> str:
    """Texto de un número que pandas pudo leer como float (3001.0 -> '3001')."""
    if _es_numero(valor) and float(valor).is_integer():
        return str(int(valor))
    return Sanitizer.a_texto(valor)


def adaptar_cv(fila: FilaCV) -> RegistroEstacion:
    tipo_raw = Sanitizer.a_texto(fila.tipo_estacion)
    municipio = Sanitizer.a_texto(fila.municipio)
    provincia = Sanitizer.a_texto(fila.provincia)
    numero = _entero_texto(fila.numero)
    correo = Sanitizer.a_texto(fila.correo)

    # El JSON guarda el código postal como número y pierde el cero inicial
    codigo_postal = _entero_texto(fila.codigo_postal)
    if _es_numero(fila.codigo_postal) and codigo_postal.isdigit():
        codigo_postal = codigo_postal.zfill(5)

    tipo = normalizar_tipo(tipo_raw)
    url = URL_CV
    if tipo == TipoEstacion.MOVIL:
        url += "movil"
    elif tipo == TipoEstacion.OTROS or "agricola" in Sanitizer.normalizar(tipo_raw):
        url += "agricola"

    nombre_municipio = Sanitizer.titulo(municipio or provincia)

    return RegistroEstacion(
        origen="CV",
        nombre=f"ITV {nombre_municipio} {numero}".strip(),
        tipo_raw=tipo_raw,
        provincia=provincia,
        municipio=municipio,
        codigo_postal=codigo_postal,
        direccion=Sanitizer.a_texto(fila.direccion),
        descripcion=f"Estación ITV {nombre_municipio} con código: {numero}",
        horario=Sanitizer.a_texto(fila.horarios),
        contacto=correo,
        correo=correo,
        url=url,
        codigo=numero,
    )


def adaptar_gal(fila: FilaGAL) -> RegistroEstacion:
    nome = Sanitizer.a_texto(fila.nome)
    concello = Sanitizer.a_texto(fila.concello)
    coordenadas = parsear_coordenadas_gal(fila.coordenadas)

    tipo_raw = TipoEstacion.MOVIL.value if "movil" in Sanitizer.normalizar(nome) else TipoEstacion.FIJA.value
    telefono = Sanitizer.a_texto(fila.telefono) or "N/A"
    correo = Sanitizer.a_texto(fila.correo)

    return RegistroEstacion(
        origen="GAL",
        nombre=f"Estación ITV {nome}",
        tipo_raw=tipo_raw,
        provincia=Sanitizer.a_texto(fila.provincia),
        municipio=concello,
        codigo_postal=Sanitizer.a_texto(fila.codigo_postal),
        direccion=Sanitizer.a_texto(fila.enderezo),
        latitud=coordenadas.lat,
        longitud=coordenadas.lon,
        descripcion=f"Estación ITV de {concello}",
        horario=Sanitizer.a_texto(fila.horario),
        contacto=f"Tel: {telefono} Email: {correo or 'N/A'}",
        correo=correo,
        url=Sanitizer.a_texto(fila.cita_previa) or URL_GAL,
    )


def adaptar_cat(fila: FilaCAT) -> RegistroEstacion:
    denominacio = Sanitizer.a_texto(fila.denominacio)
    municipi = Sanitizer.a_texto(fila.municipi)
    operador = Sanitizer.a_texto(fila.operador)

    correo = Sanitizer.a_texto(fila.correu)
    contacto = correo
    if correo.lower().startswith("http"):
        # Algunas filas traen un formulario web en vez de un correo
        contacto, correo = CONTACTO_CAT, ""

    return RegistroEstacion(
        origen="CAT",
        nombre=denominacio,
        tipo_raw=TipoEstacion.FIJA.value,
        provincia=Sanitizer.a_texto(fila.serveis_territorials),
        municipio=municipi,
        codigo_postal=Sanitizer.a_texto(fila.cp),
        direccion=Sanitizer.a_texto(fila.adreca),
        latitud=desescalar_coordenada(fila.lat, es_latitud=True),
        longitud=desescalar_coordenada(fila.long, es_latitud=False),
        descripcion=f"{denominacio} - {municipi} ({operador})",
        horario=Sanitizer.a_texto(fila.horari),
        contacto=contacto,
        correo=correo,
        url=Sanitizer.a_texto(fila.web) or URL_CAT,
    )


ADAPTADORES = {
    FilaCV: adaptar_cv,
    FilaGAL: adaptar_gal,
    FilaCAT: adaptar_cat,
}


def adaptar(fila: FilaFuente) -> RegistroEstacion:
    """Convierte cualquier fila cruda en un `RegistroEstacion`.

    Raises:
        TypeError: Si la fila no pertenece a ninguna fuente conocida.
    """
    adaptador = ADAPTADORES.get(type(fila))
    if adaptador is None:
        raise TypeError(f"Fila de fuente desconocida: {type(fila).__name__}")
    return adaptador(fila)
