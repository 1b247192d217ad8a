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

"""Corrección campo a campo de los registros de estaciones.

Cada función es pura: recibe el valor crudo (y, si hace falta, campos ya
corregidos de los que depende) y devuelve un `ResultadoCorreccion`. Nada de
este módulo toca la base de datos.
"""

import re
from typing import List, Optional, Tuple

from config.referencias import DatosReferencia
from database.models import TipoEstacion
from database.schemas import ResultadoCorreccion, Veredicto, Coordenadas
from utilities.sanitizer import Sanitizer

VALORES_CP_VACIOS = {"", "0", "00000", "undefined"}
CP_EXENTO = "00000"
DISTANCIA_MAXIMA_PROVINCIA = 2

RANGO_LATITUD = (27.0, 44.0)
RANGO_LONGITUD = (-19.0, 5.0)

LONGITUD_MINIMA_DIRECCION = 5
VALORES_GENERICOS = {"n/a", "-"}

_PATRON_CP = re.compile(r"^\d{5}$")
_PATRON_CORREO = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_REFERENCIAS_DEFECTO = DatosReferencia()


# ---------------- TIPO DE ESTACIÓN ----------------

def es_exento(tipo_raw) -> Tuple[bool, bool]:
    """Determina si el tipo de estación exime de localidad y código postal.

    Returns:
        Tuple[bool, bool]: (es_movil, es_agricola)
    """
    tipo = Sanitizer.normalizar(tipo_raw)
    return "movil" in tipo, "agricola" in tipo


def normalizar_tipo(tipo_raw) -> TipoEstacion:
    """Traduce el tipo libre de la fuente a `TipoEstacion`."""
    tipo = Sanitizer.normalizar(tipo_raw)
    if "fija" in tipo:
        return TipoEstacion.FIJA
    if "movil" in tipo:
        return TipoEstacion.MOVIL
    return TipoEstacion.OTROS


# ---------------- PROVINCIA ----------------

def corregir_provincia(valor, referencias: Optional[DatosReferencia] = None) -> ResultadoCorreccion:
    """Corrige el nombre de una provincia contra la lista oficial.

    Orden de prioridad:
        1. Coincidencia exacta: se acepta sin cambios.
        2. Alias oficial (lengua cooficial, nombre histórico).
        3. Igualdad tras normalizar (tildes y mayúsculas).
        4. Provincia más cercana por distancia de edición, si es <= 2.
        5. Sin coincidencia: se conserva el valor con un aviso no fatal.

    Args:
        valor: Provincia cruda.
        referencias (DatosReferencia, optional): Listas de referencia.

    Returns:
        ResultadoCorreccion: `es_valido` es False solo si la provincia está vacía.
    """
    ref = referencias or _REFERENCIAS_DEFECTO
    original = Sanitizer.a_texto(valor)

    if not original:
        return ResultadoCorreccion(
            es_valido=False,
            valor_corregido="",
            veredicto=Veredicto("provincia", original, "Provincia vacía o ausente"),
        )

    if original in ref.provincias:
        return ResultadoCorreccion(es_valido=True, valor_corregido=original)

    normalizado = Sanitizer.normalizar(original)

    alias = ref.alias.get(normalizado)
    if alias:
        return _provincia_corregida(original, alias, "alias oficial")

    for provincia in ref.provincias:
        if Sanitizer.normalizar(provincia) == normalizado:
            return _provincia_corregida(original, provincia, "tildes/mayúsculas")

    mejor, mejor_distancia = None, None
    for provincia in ref.provincias:
        distancia = Sanitizer.distancia_edicion(normalizado, Sanitizer.normalizar(provincia))
        # Ante empate gana la primera provincia de la lista
        if mejor_distancia is None or distancia < mejor_distancia:
            mejor, mejor_distancia = provincia, distancia

    if mejor is not None and mejor_distancia <= DISTANCIA_MAXIMA_PROVINCIA:
        return _provincia_corregida(original, mejor, f"distancia de edición {mejor_distancia}")

    return ResultadoCorreccion(
        es_valido=True,
        valor_corregido=original,
        veredicto=Veredicto("provincia", original, f"Provincia '{original}' no reconocida"),
    )


def _provincia_corregida(original: str, corregida: str, motivo: str) -> ResultadoCorreccion:
    return ResultadoCorreccion(
        es_valido=True,
        valor_corregido=corregida,
        veredicto=Veredicto(
            campo="provincia",
            valor_original=original,
            mensaje=f"Provincia corregida ({motivo}): '{original}' -> '{corregida}'",
            valor_corregido=corregida,
            corregido=True,
        ),
        cambio=True,
    )


# ---------------- MUNICIPIO ----------------

def corregir_municipio(valor, exento: bool = False) -> ResultadoCorreccion:
    """Valida y capitaliza el municipio.

    Un municipio vacío es fatal salvo en estaciones exentas (móviles o
    agrícolas), que no tienen localidad fija. Un valor de relleno
    ("Desconocido", "N/A", "-") es fatal siempre.
    """
    original = Sanitizer.a_texto(valor)

    if not original:
        if exento:
            return ResultadoCorreccion(es_valido=True, valor_corregido="")
        return ResultadoCorreccion(
            es_valido=False,
            valor_corregido="",
            veredicto=Veredicto("municipio", original, "Municipio vacío o ausente"),
        )

    normalizado = Sanitizer.normalizar(original)
    if "desconocido" in normalizado or normalizado in VALORES_GENERICOS:
        return ResultadoCorreccion(
            es_valido=False,
            valor_corregido=original,
            veredicto=Veredicto("municipio", original,
                                f"Municipio '{original}' es un valor genérico o desconocido"),
        )

    corregido = Sanitizer.titulo(original)
    if corregido == original:
        return ResultadoCorreccion(es_valido=True, valor_corregido=original)

    return ResultadoCorreccion(
        es_valido=True,
        valor_corregido=corregido,
        veredicto=Veredicto(
            campo="municipio",
            valor_original=original,
            mensaje=f"Municipio normalizado: '{original}' -> '{corregido}'",
            valor_corregido=corregido,
            corregido=True,
        ),
        cambio=True,
    )


# ---------------- CÓDIGO POSTAL ----------------

def corregir_codigo_postal(valor, provincia: str = "", exento: bool = False,
                           referencias: Optional[DatosReferencia] = None) -> ResultadoCorreccion:
    """Valida un código postal; nunca lo corrige salvo para estaciones exentas.

    Args:
        valor: Código postal crudo.
        provincia (str): Provincia ya corregida (para el prefijo).
        exento (bool): Estación móvil o agrícola.
        referencias (DatosReferencia, optional): Tabla de prefijos.

    Returns:
        ResultadoCorreccion: Resultado con el código validado.
    """
    ref = referencias or _REFERENCIAS_DEFECTO
    original = Sanitizer.a_texto(valor)

    if original in VALORES_CP_VACIOS:
        if exento:
            return ResultadoCorreccion(
                es_valido=True,
                valor_corregido=CP_EXENTO,
                cambio=original != CP_EXENTO,
            )
        return ResultadoCorreccion(
            es_valido=False,
            valor_corregido=original,
            veredicto=Veredicto("codigo_postal", original, "Código postal vacío o ausente"),
        )

    if not _PATRON_CP.match(original):
        return ResultadoCorreccion(
            es_valido=False,
            valor_corregido=original,
            veredicto=Veredicto("codigo_postal", original,
                                f"Código postal '{original}' no tiene 5 dígitos"),
        )

    prefijo = ref.prefijos_cp.get(provincia)
    if prefijo and not original.startswith(prefijo):
        return ResultadoCorreccion(
            es_valido=False,
            valor_corregido=original,
            veredicto=Veredicto(
                "codigo_postal", original,
                f"Código postal '{original}' no corresponde a {provincia} (prefijo {prefijo})"
            ),
        )

    return ResultadoCorreccion(es_valido=True, valor_corregido=original)


# ---------------- DIRECCIÓN, CORREO Y HORARIO ----------------

def validar_direccion(valor, exento: bool = False) -> Optional[Veredicto]:
    """Rechaza direcciones vacías, genéricas o demasiado cortas para geocodificar.

    Las estaciones exentas pueden no tener dirección.

    Returns:
        Optional[Veredicto]: Error encontrado, o None si la dirección sirve.
    """
    direccion = Sanitizer.a_texto(valor)
    if not direccion:
        if exento:
            return None
        return Veredicto("direccion", direccion, "Dirección vacía o ausente")

    normalizado = Sanitizer.normalizar(direccion)
    if "sin direccion" in normalizado or normalizado in VALORES_GENERICOS:
        return Veredicto("direccion", direccion, f"Dirección '{direccion}' es un valor genérico")

    if len(direccion) < LONGITUD_MINIMA_DIRECCION:
        return Veredicto("direccion", direccion, f"Dirección '{direccion}' demasiado corta")
    return None


def validar_correo(valor) -> Optional[Veredicto]:
    """Un correo ausente se acepta; uno presente debe tener forma de correo."""
    correo = Sanitizer.a_texto(valor)
    if correo and not _PATRON_CORREO.match(correo):
        return Veredicto("correo", correo, f"Correo '{correo}' no tiene un formato válido")
    return None


def validar_horario(valor) -> Optional[Veredicto]:
    """Avisa (sin rechazar) de un horario ausente o genérico."""
    horario = Sanitizer.a_texto(valor)
    normalizado = Sanitizer.normalizar(horario)
    if not horario:
        return Veredicto("horario", horario, "Horario no especificado")
    if "no especificado" in normalizado or normalizado in VALORES_GENERICOS:
        return Veredicto("horario", horario, f"Horario '{horario}' es un valor genérico")
    return None


def validar_datos_estacion(datos: dict, exento: bool = False) -> List[str]:
    """Última comprobación de una fila de `Estacion` justo antes de insertarla.

    Args:
        datos (dict): Columnas de la estación, con `tipo` ya traducido.
        exento (bool): Estación móvil o agrícola (sin dirección obligatoria).

    Returns:
        List[str]: Mensajes de error; vacía si la fila se puede insertar.
    """
    errores = []

    if not Sanitizer.a_texto(datos.get("nombre")):
        errores.append("El nombre es obligatorio")
    if not isinstance(datos.get("tipo"), TipoEstacion):
        errores.append("El tipo de estación no es válido")
    if not exento and not Sanitizer.a_texto(datos.get("direccion")):
        errores.append("La dirección es obligatoria")
    if not Sanitizer.a_texto(datos.get("codigo_postal")):
        errores.append("El código postal es obligatorio")

    for campo in ("latitud", "longitud"):
        valor = datos.get(campo)
        if isinstance(valor, bool) or _a_float(valor) is None:
            errores.append(f"La {campo} debe ser un número válido")

    localidad_id = datos.get("localidad_id")
    if not isinstance(localidad_id, int) or localidad_id <= 0:
        errores.append("La localidad es obligatoria")

    return errores


# ---------------- COORDENADAS ----------------

def _a_float(valor) -> Optional[float]:
    try:
        numero = float(valor)
    except (TypeError, ValueError):
        return None
    if numero != numero:  # NaN
        return None
    return numero


def validar_coordenadas(lat, lon) -> List[Veredicto]:
    """Comprueba que unas coordenadas caigan dentro de España.

    El valor exacto 0 se trata como "desconocido" y es un error aunque sea
    numéricamente válido.

    Returns:
        List[Veredicto]: Errores encontrados (vacía si son correctas).
    """
    errores = []

    latitud = _a_float(lat)
    if latitud is None or latitud == 0:
        errores.append(Veredicto("latitud", str(lat), "Latitud inválida o igual a 0"))
    elif not RANGO_LATITUD[0] <= latitud <= RANGO_LATITUD[1]:
        errores.append(Veredicto("latitud", str(lat),
                                 f"Latitud {latitud} fuera del rango {list(RANGO_LATITUD)}"))

    longitud = _a_float(lon)
    if longitud is None or longitud == 0:
        errores.append(Veredicto("longitud", str(lon), "Longitud inválida o igual a 0"))
    elif not RANGO_LONGITUD[0] <= longitud <= RANGO_LONGITUD[1]:
        errores.append(Veredicto("longitud", str(lon),
                                 f"Longitud {longitud} fuera del rango {list(RANGO_LONGITUD)}"))

    return errores


def desescalar_coordenada(valor, es_latitud: bool) -> float:
    """Devuelve una coordenada guardada multiplicada por una potencia de diez a su escala real.

    Prueba los divisores 10^0 ... 10^7 y acepta el primero que deja el valor
    (con su signo) dentro del rango válido.

    Ejemplo: 419027600 como latitud -> 41.90276.

    Returns:
        float: Coordenada desescalada, o 0.0 si ningún divisor encaja.
    """
    numero = _a_float(valor)
    if numero is None or numero == 0:
        return 0.0

    minimo, maximo = RANGO_LATITUD if es_latitud else RANGO_LONGITUD
    for exponente in range(8):
        candidato = numero / (10 ** exponente)
        if minimo <= candidato <= maximo:
            return candidato
    return 0.0


def parsear_coordenadas_gal(texto) -> Coordenadas:
    """Interpreta la columna de coordenadas de Galicia.

    Admite decimal ("42.906076, -8.5") y grados con minutos decimales
    ("43° 18.856', -8° 17.123'"). Lo que no se entiende devuelve (0, 0).
    """
    limpio = Sanitizer.a_texto(texto).replace("'", "")
    partes = [p.strip() for p in limpio.split(",")]
    if len(partes) != 2:
        return Coordenadas(0.0, 0.0)

    try:
        if "°" in partes[0]:
            return Coordenadas(_grados_minutos(partes[0]), _grados_minutos(partes[1]))
        return Coordenadas(float(partes[0]), float(partes[1]))
    except ValueError:
        return Coordenadas(0.0, 0.0)


def _grados_minutos(texto: str) -> float:
    grados, _, minutos = texto.partition("°")
    signo = -1 if "-" in texto else 1
    minutos = float(minutos.strip() or 0)
    return signo * (abs(float(grados.strip())) + minutos / 60)
