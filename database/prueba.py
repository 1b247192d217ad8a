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

import json
import os
import random

from faker import Faker

from config.referencias import PREFIJOS_CP

# Inicializar Faker
faker = Faker("es_ES")  # Español

# Municipios de la Comunitat Valenciana con su provincia
MUNICIPIOS_CV = [
    ("Alicante", "Alicante"), ("Elche", "Alicante"), ("Benidorm", "Alicante"), ("Alcoy", "Alicante"),
    ("Castellón de la Plana", "Castellón"), ("Vila-real", "Castellón"), ("Vinaròs", "Castellón"),
    ("Valencia", "Valencia"), ("Gandia", "Valencia"), ("Torrent", "Valencia"), ("Paterna", "Valencia"),
]

# Variantes sucias que la validación debe corregir
PROVINCIAS_SUCIAS = {
    "Alicante": ["Alicante/Alacant", "alacant", "ALICANTE", "Alicnate"],
    "Castellón": ["Castellón/Castelló", "castellon", "Castello"],
    "Valencia": ["Valencia/València", "VALENCIA", "Valenica"],
}

TIPOS = ["Estación Fija", "Estación Móvil", "Estación Agrícola"]


def generar_estacion_cv(numero: int, sucia: bool = False) -> dict:
    """Genera un registro ficticio con el formato de `estaciones.json`.

    Args:
        numero (int): Nº de estación.
        sucia (bool): Si es True, introduce errores corregibles (provincia en
            lengua cooficial o mal escrita, municipio en mayúsculas).

    Returns:
        dict: Registro con los encabezados originales de la fuente.
    """
    municipio, provincia = random.choice(MUNICIPIOS_CV)
    tipo = random.choices(TIPOS, weights=[8, 1, 1])[0]

    if sucia:
        provincia = random.choice(PROVINCIAS_SUCIAS[provincia])
        municipio = municipio.upper()

    if tipo == "Estación Fija":
        prefijo = PREFIJOS_CP[municipio_provincia(municipio)]
        codigo_postal = int(prefijo + f"{random.randint(0, 999):03d}")
        direccion = faker.street_address()
    else:
        municipio, codigo_postal, direccion = "", "", ""

    return {
        "TIPO ESTACIÓN": tipo,
        "PROVINCIA": provincia,
        "MUNICIPIO": municipio,
        "C.POSTAL": codigo_postal,
        "DIRECCIÓN": direccion,
        "Nº ESTACIÓN": numero,
        "HORARIOS": "L-V 7:00-21:00",
        "CORREO": faker.company_email(),
    }


def municipio_provincia(municipio: str) -> str:
    """Provincia real de un municipio de `MUNICIPIOS_CV` (sin importar mayúsculas)."""
    for nombre, provincia in MUNICIPIOS_CV:
        if nombre.lower() == municipio.lower():
            return provincia
    raise KeyError(municipio)


def crear_fuente_cv(ruta: str, n: int = 25, proporcion_sucia: float = 0.3, semilla: int = None) -> str:
    """Escribe un `estaciones.json` de prueba.

    Args:
        ruta (str): Fichero de destino (se crean los directorios que falten).
        n (int, optional): Número de estaciones. Defaults to 25.
        proporcion_sucia (float, optional): Fracción de registros con errores corregibles.
        semilla (int, optional): Semilla para obtener siempre el mismo fichero.

    Returns:
        str: La ruta escrita.
    """
    if semilla is not None:
        random.seed(semilla)
        Faker.seed(semilla)

    estaciones = [generar_estacion_cv(i, random.random() < proporcion_sucia) for i in range(1, n + 1)]

    carpeta = os.path.dirname(ruta)
    if carpeta:
        os.makedirs(carpeta, exist_ok=True)
    with open(ruta, "w", encoding="utf-8") as f:
        json.dump(estaciones, f, ensure_ascii=False, indent=2)

    print(f"✅ Se han generado {n} estaciones de prueba en {ruta}.")
    return ruta


if __name__ == "__main__":
    crear_fuente_cv(os.path.join("data_prueba", "estaciones.json"))
