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
import logging
from dataclasses import replace
from typing import List, Optional

from config.referencias import DatosReferencia
from controllers import corrector_campos as corrector
from database.schemas import RegistroEstacion, ResultadoValidacion, Veredicto
from utilities.sanitizer import Sanitizer

logger = logging.getLogger(__name__)


class ValidadorEstacion:
    """Máquina de estados que decide si un registro canónico es aceptable.

    Ofrece dos puntos de entrada: `validar_sin_coordenadas`, para fuentes que
    geocodifican después de la validación básica, y `validar_completo`, que
    además comprueba latitud y longitud.

    En ambos casos `datos_corregidos` lleva la mejor provincia, municipio y
    código postal conocidos, incluso cuando el registro se rechaza.
    """

    def __init__(self, referencias: Optional[DatosReferencia] = None, provincia_estricta: bool = False):
        """
        Args:
            referencias (DatosReferencia, optional): Listas de referencia compartidas.
            provincia_estricta (bool): Si es True, una provincia que no se puede
                resolver contra la lista oficial se rechaza en vez de avisar.
        """
        self.referencias = referencias or DatosReferencia()
        self.provincia_estricta = provincia_estricta

    def validar_sin_coordenadas(self, registro: RegistroEstacion, origen: str = "") -> ResultadoValidacion:
        """Valida provincia, municipio, código postal, dirección, correo y horario.

        Args:
            registro (RegistroEstacion): Registro adaptado desde la fuente.
            origen (str): Etiqueta de la fuente, solo para el registro de eventos.

        Returns:
            ResultadoValidacion: Decisión, errores, avisos y datos corregidos.
        """
        errores = []
        advertencias = []

        es_movil, es_agricola = corrector.es_exento(registro.tipo_raw)
        exento = es_movil or es_agricola

        # 1. Provincia
        res_provincia = corrector.corregir_provincia(registro.provincia, self.referencias)
        provincia = res_provincia.valor_corregido
        if not res_provincia.es_valido:
            errores.append(res_provincia.veredicto)
        elif res_provincia.veredicto is not None:
            if res_provincia.cambio:
                advertencias.append(res_provincia.veredicto)
            elif self.provincia_estricta:
                errores.append(res_provincia.veredicto)
            else:
                advertencias.append(res_provincia.veredicto)

        # 2. Municipio y comprobación cruzada
        res_municipio = corrector.corregir_municipio(registro.municipio, exento)
        municipio = res_municipio.valor_corregido
        if not res_municipio.es_valido:
            errores.append(res_municipio.veredicto)
        elif res_municipio.cambio:
            # El cambio de mayúsculas se aplica, pero no se cuenta como aviso
            logger.debug("[%s] %s", origen, res_municipio.veredicto.mensaje)

        if res_municipio.es_valido and municipio and provincia:
            provincia_municipio = self.referencias.municipios.get(Sanitizer.normalizar(municipio))
            if provincia_municipio and provincia_municipio != provincia:
                advertencias.append(Veredicto(
                    campo="provincia",
                    valor_original=provincia,
                    mensaje=(f"El municipio '{municipio}' pertenece a {provincia_municipio}, "
                             f"no a {provincia}; se corrige la provincia"),
                    valor_corregido=provincia_municipio,
                    corregido=True,
                ))
                provincia = provincia_municipio

        # 3. Código postal contra la provincia final
        codigo_postal = Sanitizer.a_texto(registro.codigo_postal)
        if not errores:
            res_cp = corrector.corregir_codigo_postal(
                registro.codigo_postal, provincia, exento, self.referencias
            )
            codigo_postal = res_cp.valor_corregido
            if not res_cp.es_valido:
                errores.append(res_cp.veredicto)

        # 4. Dirección y correo (fatales) y horario (solo aviso)
        for error in (corrector.validar_direccion(registro.direccion, exento),
                      corrector.validar_correo(registro.correo)):
            if error is not None:
                errores.append(error)

        aviso_horario = corrector.validar_horario(registro.horario)
        if aviso_horario is not None:
            advertencias.append(aviso_horario)

        datos = replace(
            registro,
            provincia=provincia,
            municipio=municipio,
            codigo_postal=codigo_postal,
        )

        resultado = ResultadoValidacion(
            es_valido=not errores,
            errores=errores,
            advertencias=advertencias,
            datos_corregidos=datos,
        )
        self._registrar(datos.nombre, advertencias + errores, origen)
        return resultado

    def validar_completo(self, registro: RegistroEstacion, origen: str = "") -> ResultadoValidacion:
        """Valida el registro y, si no hay errores fatales, sus coordenadas.

        Las coordenadas de un registro ya rechazado no se comprueban.
        """
        resultado = self.validar_sin_coordenadas(registro, origen)
        if not resultado.es_valido:
            return resultado

        errores_coord = corrector.validar_coordenadas(registro.latitud, registro.longitud)
        if errores_coord:
            resultado.errores.extend(errores_coord)
            resultado.es_valido = False
            self._registrar(resultado.datos_corregidos.nombre, errores_coord, origen)
        return resultado

    @staticmethod
    def _registrar(nombre: str, veredictos: List[Veredicto], origen: str) -> None:
        for veredicto in veredictos:
            logger.debug("[%s] %s: %s", origen, nombre, veredicto.mensaje)
