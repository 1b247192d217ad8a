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
from datetime import datetime
from typing import Callable, Dict, List

Observador = Callable[[Dict[str, str]], None]


class RegistroCarga:
    """Destino de los mensajes de una carga regional.

    Escribe en el logger del módulo y reenvía cada evento como diccionario
    `{"message", "level", "timestamp"}` a los observadores suscritos (por
    ejemplo, un canal de difusión en vivo). Un observador que falla se da de
    baja y la carga continúa.
    """

    NIVELES = {
        "info": logging.INFO,
        "success": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
    }

    def __init__(self, nombre: str = "itv.carga"):
        self.logger = logging.getLogger(nombre)
        self._observadores: List[Observador] = []

    def suscribir(self, observador: Observador) -> None:
        if observador not in self._observadores:
            self._observadores.append(observador)

    def desuscribir(self, observador: Observador) -> None:
        if observador in self._observadores:
            self._observadores.remove(observador)

    def info(self, mensaje: str) -> None:
        self._emitir(mensaje, "info")

    def exito(self, mensaje: str) -> None:
        self._emitir(mensaje, "success")

    def advertencia(self, mensaje: str) -> None:
        self._emitir(mensaje, "warning")

    def error(self, mensaje: str) -> None:
        self._emitir(mensaje, "error")

    def _emitir(self, mensaje: str, nivel: str) -> None:
        self.logger.log(self.NIVELES[nivel], mensaje)

        evento = {
            "message": mensaje,
            "level": nivel,
            "timestamp": datetime.now().isoformat(),
        }
        for observador in list(self._observadores):
            try:
                observador(evento)
            except Exception:
                self.logger.exception("Observador de carga eliminado tras un error")
                self.desuscribir(observador)
