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

"""Datos de referencia oficiales para la validación de estaciones ITV.

Este módulo define las listas estáticas contra las que se corrigen los datos
de las fuentes regionales: provincias válidas, tabla municipio -> provincia,
alias oficiales (lengua cooficial <-> castellano) y prefijos postales.

Las claves de los diccionarios de búsqueda están normalizadas (minúsculas,
sin tildes). Los datos pueden ampliarse o sustituirse con un fichero JSON
(ver `DatosReferencia.cargar`) sin tocar la lógica.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from utilities.sanitizer import Sanitizer

PROVINCIAS_VALIDAS = (
    # Comunitat Valenciana
    "Alicante", "Castellón", "Valencia",
    # Galicia
    "A Coruña", "Lugo", "Ourense", "Pontevedra",
    # Catalunya
    "Barcelona", "Girona", "Lleida", "Tarragona",
)
"""tuple: Nombres canónicos de las provincias cubiertas por las tres fuentes.

El orden importa: ante un empate de distancia de edición gana la primera.
"""

ALIAS_PROVINCIAS = {
    "alacant": "Alicante",
    "alicante/alacant": "Alicante",
    "alacant/alicante": "Alicante",
    "castello": "Castellón",
    "castellon/castello": "Castellón",
    "castello/castellon": "Castellón",
    "valencia/valencia": "Valencia",
    "coruna": "A Coruña",
    "la coruna": "A Coruña",
    "a coruna/la coruna": "A Coruña",
    "orense": "Ourense",
    "gerona": "Girona",
    "lerida": "Lleida",
}
"""dict: Variantes oficiales o históricas de provincia -> nombre canónico."""

PREFIJOS_CP = {
    "Alicante": "03",
    "Castellón": "12",
    "Valencia": "46",
    "A Coruña": "15",
    "Lugo": "27",
    "Ourense": "32",
    "Pontevedra": "36",
    "Barcelona": "08",
    "Girona": "17",
    "Lleida": "25",
    "Tarragona": "43",
}
"""dict: Prefijo postal oficial (dos dígitos) de cada provincia."""

MUNICIPIO_PROVINCIA = {
    # --- Alicante ---
    "alicante": "Alicante", "alacant": "Alicante",
    "elche": "Alicante", "elx": "Alicante",
    "torrevieja": "Alicante", "orihuela": "Alicante", "oriola": "Alicante",
    "benidorm": "Alicante", "alcoy": "Alicante", "alcoi": "Alicante",
    "elda": "Alicante", "petrer": "Alicante", "villena": "Alicante",
    "san vicente del raspeig": "Alicante", "sant vicent del raspeig": "Alicante",
    "denia": "Alicante", "ibi": "Alicante", "novelda": "Alicante",
    # --- Castellón ---
    "castellon de la plana": "Castellón", "castello de la plana": "Castellón",
    "vila-real": "Castellón", "villarreal": "Castellón",
    "burriana": "Castellón", "borriana": "Castellón",
    "vinaros": "Castellón", "vinaroz": "Castellón",
    "benicarlo": "Castellón", "onda": "Castellón",
    "la vall d'uixo": "Castellón", "vall de uxo": "Castellón",
    # --- Valencia ---
    "valencia": "Valencia",
    "torrent": "Valencia", "gandia": "Valencia", "paterna": "Valencia",
    "sagunto": "Valencia", "sagunt": "Valencia",
    "alzira": "Valencia", "mislata": "Valencia", "burjassot": "Valencia",
    "ontinyent": "Valencia", "onteniente": "Valencia",
    "xativa": "Valencia", "jativa": "Valencia",
    "requena": "Valencia", "catarroja": "Valencia", "silla": "Valencia",
    "alboraya": "Valencia", "alboraia": "Valencia",
    "riba-roja de turia": "Valencia", "ribarroja del turia": "Valencia",
    # --- A Coruña ---
    "a coruna": "A Coruña", "la coruna": "A Coruña", "coruna": "A Coruña",
    "santiago de compostela": "A Coruña", "ferrol": "A Coruña",
    "naron": "A Coruña", "oleiros": "A Coruña", "arteixo": "A Coruña",
    "carballo": "A Coruña", "ribeira": "A Coruña", "culleredo": "A Coruña",
    "as pontes de garcia rodriguez": "A Coruña", "as pontes": "A Coruña",
    # --- Lugo ---
    "lugo": "Lugo", "monforte de lemos": "Lugo", "viveiro": "Lugo",
    "vilalba": "Lugo", "sarria": "Lugo", "ribadeo": "Lugo",
    "burela": "Lugo", "foz": "Lugo",
    # --- Ourense ---
    "ourense": "Ourense", "orense": "Ourense", "verin": "Ourense",
    "o barco de valdeorras": "Ourense", "el barco de valdeorras": "Ourense",
    "o carballino": "Ourense", "carballino": "Ourense",
    "xinzo de limia": "Ourense", "ginzo de limia": "Ourense",
    # --- Pontevedra ---
    "vigo": "Pontevedra", "pontevedra": "Pontevedra",
    "vilagarcia de arousa": "Pontevedra", "villagarcia de arosa": "Pontevedra",
    "redondela": "Pontevedra", "cangas": "Pontevedra", "marin": "Pontevedra",
    "o porrino": "Pontevedra", "porrino": "Pontevedra", "lalin": "Pontevedra",
    "a estrada": "Pontevedra", "ponteareas": "Pontevedra",
    "tui": "Pontevedra", "tuy": "Pontevedra",
    # --- Barcelona ---
    "barcelona": "Barcelona",
    "l'hospitalet de llobregat": "Barcelona", "hospitalet de llobregat": "Barcelona",
    "badalona": "Barcelona", "terrassa": "Barcelona", "tarrasa": "Barcelona",
    "sabadell": "Barcelona", "mataro": "Barcelona",
    "santa coloma de gramenet": "Barcelona", "cornella de llobregat": "Barcelona",
    "sant boi de llobregat": "Barcelona", "manresa": "Barcelona",
    "granollers": "Barcelona", "vilanova i la geltru": "Barcelona",
    "igualada": "Barcelona", "vic": "Barcelona", "martorell": "Barcelona",
    # --- Girona ---
    "girona": "Girona", "gerona": "Girona",
    "figueres": "Girona", "figueras": "Girona",
    "blanes": "Girona", "lloret de mar": "Girona", "olot": "Girona",
    "salt": "Girona", "palafrugell": "Girona",
    # --- Lleida ---
    "lleida": "Lleida", "lerida": "Lleida", "balaguer": "Lleida",
    "tarrega": "Lleida", "mollerussa": "Lleida",
    "la seu d'urgell": "Lleida", "seo de urgel": "Lleida",
    # --- Tarragona ---
    "tarragona": "Tarragona", "reus": "Tarragona", "tortosa": "Tarragona",
    "el vendrell": "Tarragona", "cambrils": "Tarragona", "salou": "Tarragona",
    "valls": "Tarragona", "amposta": "Tarragona", "calafell": "Tarragona",
}
"""dict: Municipio normalizado -> provincia canónica.

Cubre al menos el municipio más poblado de cada provincia y las variantes
habituales en lengua cooficial. Se usa en la comprobación cruzada
municipio/provincia.
"""

REGIONES = {
    "Comunidad Valenciana": ("Alicante", "Castellón", "Valencia"),
    "Galicia": ("A Coruña", "Lugo", "Ourense", "Pontevedra"),
    "Cataluña": ("Barcelona", "Girona", "Lleida", "Tarragona"),
}
"""dict: Comunidad autónoma -> provincias, usado en las estadísticas."""


@dataclass(frozen=True)
class DatosReferencia:
    """Contenedor inmutable de las listas de referencia.

    Se construye una vez y se comparte en solo lectura entre validadores,
    por lo que no necesita sincronización.
    """

    provincias: Tuple[str, ...] = PROVINCIAS_VALIDAS
    alias: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(ALIAS_PROVINCIAS)))
    municipios: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(MUNICIPIO_PROVINCIA)))
    prefijos_cp: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(dict(PREFIJOS_CP)))
    regiones: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType(dict(REGIONES)))

    @classmethod
    def cargar(cls, ruta: Optional[str] = None) -> "DatosReferencia":
        """Construye los datos de referencia, ampliados con un JSON opcional.

        El fichero puede contener las claves `provincias` (lista que reemplaza
        a la oficial), `alias`, `municipios`, `prefijos_cp` y `regiones`
        (diccionarios que se fusionan sobre los valores por defecto).

        Args:
            ruta (str, optional): Ruta al fichero JSON de ampliación.

        Returns:
            DatosReferencia: Instancia inmutable lista para usar.

        Raises:
            FileNotFoundError: Si la ruta indicada no existe.
        """
        if not ruta:
            return cls()

        path = Path(ruta)
        if not path.exists():
            raise FileNotFoundError(f"No existe el fichero de referencias: {path}")

        extra = json.loads(path.read_text(encoding="utf-8"))

        provincias = tuple(extra.get("provincias") or PROVINCIAS_VALIDAS)
        regiones = {**REGIONES, **{k: tuple(v) for k, v in (extra.get("regiones") or {}).items()}}

        return cls(
            provincias=provincias,
            alias=MappingProxyType({**ALIAS_PROVINCIAS, **_normalizar_claves(extra.get("alias"))}),
            municipios=MappingProxyType({**MUNICIPIO_PROVINCIA, **_normalizar_claves(extra.get("municipios"))}),
            prefijos_cp=MappingProxyType({**PREFIJOS_CP, **(extra.get("prefijos_cp") or {})}),
            regiones=MappingProxyType(regiones),
        )


def _normalizar_claves(valores: Optional[Mapping[str, str]]) -> dict:
    """Normaliza las claves de un diccionario de ampliación."""
    return {Sanitizer.normalizar(k): v for k, v in (valores or {}).items()}
