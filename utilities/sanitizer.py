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
import unicodedata
import pandas as pd
from rapidfuzz.distance import Levenshtein
from typing import Any

# Conectores que se mantienen en minúscula salvo al inicio del nombre
CONECTORES = {"de", "del", "la", "el", "los", "las", "y"}


class Sanitizer:
    """Clase utilitaria estática para limpieza y comparación de textos."""

    @staticmethod
    def a_texto(valor: Any) -> str:
        """
        Convierte un valor crudo de la fuente (None, NaN, número, lista) en texto.

        Las listas se reducen a su primer elemento, como ocurre con los nodos
        repetidos de un XML.

        Args:
            valor (Any): Valor de entrada.

        Returns:
            str: Texto sin espacios en los extremos, o cadena vacía.
        """
        if isinstance(valor, (list, tuple)):
            valor = valor[0] if valor else None
        if valor is None:
            return ""
        try:
            if pd.isna(valor):
                return ""
        except (TypeError, ValueError):
            pass
        return str(valor).strip()

    @staticmethod
    def limpiar_texto(texto: Any) -> str:
        """
        Normaliza texto eliminando acentos y caracteres especiales, manteniendo la Ñ.
        Convierte a mayúsculas. Se usa para comparar encabezados de columnas.

        Args:
            texto (Any): Texto de entrada.

        Returns:
            str: Texto limpio y en mayúsculas.
        """
        txt = Sanitizer.a_texto(texto)
        if not txt:
            return ""

        # Protección de la Ñ
        txt = txt.replace("ñ", "__ENYE__").replace("Ñ", "__ENYE_MAYUS__")

        txt = unicodedata.normalize("NFD", txt)
        txt = "".join(c for c in txt if unicodedata.category(c) != "Mn")

        txt = txt.replace("__ENYE__", "ñ").replace("__ENYE_MAYUS__", "Ñ")
        return " ".join(txt.upper().split())

    @staticmethod
    def normalizar(texto: Any) -> str:
        """
        Forma canónica de comparación: minúsculas, sin diacríticos y con los
        espacios colapsados. A diferencia de `limpiar_texto`, la Ñ pasa a N.

        Args:
            texto (Any): Texto de entrada.

        Returns:
            str: Texto normalizado.
        """
        txt = Sanitizer.a_texto(texto).lower()
        txt = unicodedata.normalize("NFD", txt)
        txt = "".join(c for c in txt if not unicodedata.combining(c))
        return " ".join(txt.split())

    @staticmethod
    def titulo(texto: Any) -> str:
        """
        Capitaliza un topónimo respetando los conectores en minúscula.

        Ejemplo: "CASTELLON DE LA PLANA" -> "Castellon de la Plana".

        Args:
            texto (Any): Nombre crudo.

        Returns:
            str: Nombre con formato título.
        """
        tokens = Sanitizer.a_texto(texto).split()
        if not tokens:
            return ""

        resultado = []
        for i, token in enumerate(tokens):
            token = token.lower()
            if i > 0 and token in CONECTORES:
                resultado.append(token)
            else:
                resultado.append(token[:1].upper() + token[1:])

        txt = " ".join(resultado)
        return txt[:1].upper() + txt[1:]

    @staticmethod
    def distancia_edicion(a: str, b: str) -> int:
        """
        Calcula la distancia de Levenshtein entre dos cadenas.

        Inserción, borrado y sustitución cuestan 1. Se usa sobre textos ya
        normalizados para detectar errores tipográficos.

        Args:
            a (str): Primera cadena.
            b (str): Segunda cadena.

        Returns:
            int: Número mínimo de operaciones para transformar `a` en `b`.
        """
        return Levenshtein.distance(a or "", b or "")
