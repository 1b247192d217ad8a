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
import os
from dotenv import load_dotenv

# 1. DETERMINAR RUTAS BASE
# La raíz del proyecto es la carpeta que contiene el paquete `database`
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

ENV_PATH = os.path.join(BASE_DIR, '.env')
if os.path.exists(ENV_PATH):
    load_dotenv(ENV_PATH)


def _bool_env(clave, defecto=False):
    """Lee una variable de entorno booleana ('1', 'true', 'si', 'yes')."""
    valor = os.getenv(clave)
    if valor is None:
        return defecto
    return valor.strip().lower() in ("1", "true", "si", "sí", "yes", "on")


# 2. CONFIGURACIÓN DE BASE DE DATOS
DB_TYPE = os.getenv("DB_TYPE", "sqlite")
DB_NAME = os.getenv("DB_NAME", "itv.db")

if DB_TYPE == "sqlite":
    db_path = os.path.join(BASE_DIR, DB_NAME)
    DATABASE_URL = f"sqlite:///{db_path}"
else:
    _user = os.getenv("DB_USER")
    _pass = os.getenv("DB_PASS")
    _host = os.getenv("DB_HOST")
    _name = os.getenv("DB_NAME_REMOTE")
    _port = os.getenv("DB_PORT", "5432")

    if not all([_user, _pass, _host, _name]):
        fallback_path = os.path.join(BASE_DIR, 'temp_fallback.db')
        DATABASE_URL = f"sqlite:///{fallback_path}"
    else:
        DATABASE_URL = f"postgresql://{_user}:{_pass}@{_host}:{_port}/{_name}"

# 3. FUENTES DE DATOS Y REFERENCIAS
DATA_DIR = os.getenv("DATA_DIR", os.path.join(BASE_DIR, 'data'))
FICHERO_CV = os.getenv("FICHERO_CV", "estaciones.json")
FICHERO_GAL = os.getenv("FICHERO_GAL", "Estacions_ITV.csv")
FICHERO_CAT = os.getenv("FICHERO_CAT", "ITV-CAT.xml")

# JSON opcional que amplía las listas de config/referencias.py
REFERENCIAS_PATH = os.getenv("REFERENCIAS_PATH", "")

# Si está activo, una provincia que no se puede resolver es un error fatal
PROVINCIA_ESTRICTA = _bool_env("PROVINCIA_ESTRICTA", False)

# 4. GEOCODIFICACIÓN
NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org/search")
GEOCODING_USER_AGENT = os.getenv("GEOCODING_USER_AGENT", "ITV-Finder-App/1.0")
GEOCODING_TIMEOUT = float(os.getenv("GEOCODING_TIMEOUT", "10"))
# Pausa de cortesía entre peticiones (segundos)
GEOCODING_DELAY = float(os.getenv("GEOCODING_DELAY", "2"))

# 5. REGISTRO
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
APP_TITLE = "Catálogo de Estaciones ITV"
