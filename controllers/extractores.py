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

"""Extractores regionales: cargan una fuente completa en la base de datos.

Cada registro recorre, en orden y sin solaparse con el siguiente:
adaptar -> validar -> resolver identidad -> comprobar duplicado -> persistir.
Cada paso termina devolviendo un `Desenlace`; solo el fallo al leer la fuente
interrumpe la carga entera.
"""

import enum
import os
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

import database.config as config
from controllers import corrector_campos as corrector
from controllers.import_processor import adaptar, leer_cv, leer_gal, leer_cat
from controllers.validador_estacion import ValidadorEstacion
from database.schemas import FilaFuente, RegistroEstacion, ResultadoValidacion, ResumenCarga
from services.geocodificacion import Geocodificador
from services.persistence import PersistenceService
from services.resolutor_identidad import ResolutorIdentidad
from utilities.registro import RegistroCarga


class Desenlace(enum.Enum):
    """Resultado etiquetado del procesamiento de un registro."""
    CARGADA = "cargada"
    CORREGIDA = "corregida"          # cargada, con correcciones automáticas
    INVALIDA = "invalida"
    SIN_IDENTIDAD = "sin_identidad"  # fallo resolviendo provincia/localidad
    DUPLICADA = "duplicada"
    ERROR_BD = "error_bd"

    @property
    def aceptada(self) -> bool:
        return self in (Desenlace.CARGADA, Desenlace.CORREGIDA)


@dataclass
class ResultadoRegistro:
    desenlace: Desenlace
    nombre: str = ""
    motivo: str = ""


class ExtractorRegional:
    """Base de los extractores de cada comunidad.

    Las subclases indican cómo leer su fuente (`leer`) y pueden ajustar la
    validación (`validar`). Todas las dependencias se inyectan: almacén,
    validador y destino de los mensajes.
    """

    origen = ""
    region = ""
    fichero = ""

    def __init__(self, almacen: PersistenceService, ruta: Optional[str] = None,
                 validador: Optional[ValidadorEstacion] = None,
                 registro: Optional[RegistroCarga] = None):
        self.almacen = almacen
        self.ruta = ruta or os.path.join(config.DATA_DIR, self.fichero)
        self.validador = validador or ValidadorEstacion()
        self.registro = registro or RegistroCarga()
        self.resolutor = ResolutorIdentidad(almacen)

    # ---------------- PUNTOS DE EXTENSIÓN ----------------

    def leer(self) -> List[FilaFuente]:
        raise NotImplementedError

    def validar(self, registro: RegistroEstacion) -> ResultadoValidacion:
        """Valida con coordenadas salvo para estaciones móviles o agrícolas."""
        es_movil, es_agricola = corrector.es_exento(registro.tipo_raw)
        if es_movil or es_agricola:
            return self.validador.validar_sin_coordenadas(registro, self.region)
        return self.validador.validar_completo(registro, self.region)

    # ---------------- CARGA ----------------

    def cargar(self) -> ResumenCarga:
        """Carga todos los registros de la fuente.

        Returns:
            ResumenCarga: Recuento final, resultado autoritativo de la carga.

        Raises:
            FuenteNoDisponibleError: Si no se puede leer la fuente.
        """
        filas = self.leer()
        self.registro.info(f"Cargando {len(filas)} estaciones de {self.region}...")

        resumen = ResumenCarga(origen=self.origen)
        for fila in filas:
            resultado = self._procesar_seguro(fila)
            resumen.total_procesadas += 1

            if resultado.desenlace.aceptada:
                resumen.cargadas += 1
                if resultado.desenlace == Desenlace.CORREGIDA:
                    resumen.corregidas += 1
            else:
                resumen.rechazadas += 1
                resumen.errores.append(f"{resultado.nombre}: {resultado.motivo}")

        self.registro.exito(
            f"Resumen {self.region}: {resumen.cargadas} cargadas, {resumen.corregidas} con correcciones, "
            f"{resumen.rechazadas} rechazadas, {resumen.total_procesadas} procesadas"
        )
        return resumen

    def _procesar_seguro(self, fila: FilaFuente) -> ResultadoRegistro:
        try:
            return self.procesar(fila)
        except Exception as e:
            self.registro.error(f"Error inesperado procesando un registro de {self.region}: {e}")
            return ResultadoRegistro(Desenlace.ERROR_BD, motivo=str(e))

    def procesar(self, fila: FilaFuente) -> ResultadoRegistro:
        """Lleva un registro crudo hasta la base de datos o su rechazo."""
        registro = adaptar(fila)

        # 1. Validación
        validacion = self.validar(registro)
        if not validacion.es_valido:
            motivo = "; ".join(e.mensaje for e in validacion.errores)
            self.registro.advertencia(f"Rechazada '{registro.nombre}': {motivo}")
            return ResultadoRegistro(Desenlace.INVALIDA, registro.nombre, motivo)

        datos = validacion.datos_corregidos
        for aviso in validacion.advertencias:
            self.registro.info(f"'{datos.nombre}': {aviso.mensaje}")

        # 2. Identidad geográfica
        localidad_id = self._resolver_localidad(datos)
        if localidad_id is None:
            motivo = f"No se pudo resolver la localidad '{datos.municipio}' ({datos.provincia})"
            self.registro.error(f"Rechazada '{datos.nombre}': {motivo}")
            return ResultadoRegistro(Desenlace.SIN_IDENTIDAD, datos.nombre, motivo)

        # 3. Duplicado
        if self.almacen.existe_estacion(datos.nombre, localidad_id):
            self.registro.info(f"Omitida '{datos.nombre}': ya existe en la localidad")
            return ResultadoRegistro(Desenlace.DUPLICADA, datos.nombre, "Estación duplicada")

        # 4. Persistencia
        fila_bd = self._fila_estacion(datos, localidad_id)
        es_movil, es_agricola = corrector.es_exento(datos.tipo_raw)
        errores = corrector.validar_datos_estacion(fila_bd, exento=es_movil or es_agricola)
        if errores:
            motivo = "; ".join(errores)
            self.registro.advertencia(f"Rechazada '{datos.nombre}' antes de insertar: {motivo}")
            return ResultadoRegistro(Desenlace.INVALIDA, datos.nombre, motivo)

        try:
            self.almacen.insertar_estacion(fila_bd)
        except SQLAlchemyError as e:
            self.registro.error(f"Error insertando '{datos.nombre}': {e}")
            return ResultadoRegistro(Desenlace.ERROR_BD, datos.nombre, str(e))

        if any(a.corregido for a in validacion.advertencias):
            return ResultadoRegistro(Desenlace.CORREGIDA, datos.nombre)
        return ResultadoRegistro(Desenlace.CARGADA, datos.nombre)

    def _resolver_localidad(self, datos: RegistroEstacion) -> Optional[int]:
        provincia_id = self.resolutor.obtener_o_crear_provincia(datos.provincia)
        if provincia_id is None:
            return None
        # Las estaciones móviles sin municipio cuelgan de la capital de provincia
        municipio = datos.municipio or datos.provincia
        return self.resolutor.obtener_o_crear_localidad(municipio, provincia_id)

    @staticmethod
    def _fila_estacion(datos: RegistroEstacion, localidad_id: int) -> Dict:
        return {
            "nombre": datos.nombre,
            "tipo": corrector.normalizar_tipo(datos.tipo_raw),
            "direccion": datos.direccion,
            "codigo_postal": datos.codigo_postal,
            "latitud": datos.latitud or 0.0,
            "longitud": datos.longitud or 0.0,
            "descripcion": datos.descripcion,
            "horario": datos.horario,
            "contacto": datos.contacto,
            "url": datos.url,
            "localidad_id": localidad_id,
        }


class ExtractorCV(ExtractorRegional):
    """Comunitat Valenciana: la fuente no trae coordenadas y se geocodifica.

    La geocodificación solo se hace tras la validación básica, para no gastar
    consultas en registros que se van a rechazar, y va seguida siempre de la
    pausa de cortesía. Sin geocodificador las estaciones se guardan en (0, 0)
    sin comprobar coordenadas.
    """

    origen = "CV"
    region = "Comunidad Valenciana"
    fichero = config.FICHERO_CV

    def __init__(self, almacen: PersistenceService, ruta: Optional[str] = None,
                 validador: Optional[ValidadorEstacion] = None,
                 registro: Optional[RegistroCarga] = None,
                 geocodificador: Optional[Geocodificador] = None,
                 pausa: float = None,
                 esperar: Callable[[float], None] = time.sleep):
        super().__init__(almacen, ruta, validador, registro)
        self.geocodificador = geocodificador
        self.pausa = config.GEOCODING_DELAY if pausa is None else pausa
        self.esperar = esperar

    def leer(self):
        return leer_cv(self.ruta)

    def validar(self, registro: RegistroEstacion) -> ResultadoValidacion:
        resultado = self.validador.validar_sin_coordenadas(registro, self.region)
        if not resultado.es_valido or self.geocodificador is None:
            return resultado

        datos = resultado.datos_corregidos
        es_movil, es_agricola = corrector.es_exento(datos.tipo_raw)
        if es_movil or es_agricola:
            return resultado

        self.registro.info(f"Geocodificando {datos.municipio}...")
        coordenadas = self.geocodificador.geocodificar(
            datos.direccion, datos.municipio, datos.provincia, datos.codigo_postal
        )
        self.esperar(self.pausa)

        if coordenadas is not None:
            datos = replace(datos, latitud=coordenadas.lat, longitud=coordenadas.lon)
            resultado.datos_corregidos = datos

        errores = corrector.validar_coordenadas(datos.latitud, datos.longitud)
        if errores:
            resultado.errores.extend(errores)
            resultado.es_valido = False
        return resultado


class ExtractorGAL(ExtractorRegional):
    """Galicia: CSV con coordenadas en formato decimal o grados/minutos."""

    origen = "GAL"
    region = "Galicia"
    fichero = config.FICHERO_GAL

    def leer(self):
        return leer_gal(self.ruta)


class ExtractorCAT(ExtractorRegional):
    """Catalunya: XML con coordenadas escaladas por una potencia de diez."""

    origen = "CAT"
    region = "Cataluña"
    fichero = config.FICHERO_CAT

    def leer(self):
        return leer_cat(self.ruta)


EXTRACTORES = {
    "cv": ExtractorCV,
    "gal": ExtractorGAL,
    "cat": ExtractorCAT,
}
