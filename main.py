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

import argparse
import json
import logging
import os
import sys

import database.config as config
from config.referencias import DatosReferencia
from controllers.extractores import EXTRACTORES, ExtractorCV
from controllers.import_processor import FuenteNoDisponibleError
from controllers.validador_estacion import ValidadorEstacion
from database.conexion import ConexionBD
from database.prueba import crear_fuente_cv
from database.setup import inicializar_base_de_datos, limpiar_base_de_datos
from services.busqueda import buscar_estaciones
from services.detector_duplicados import DetectorDuplicados
from services.estadisticas import obtener_estadisticas
from services.geocodificacion import GeocodificadorNominatim
from services.persistence import PersistenceService
from utilities.registro import RegistroCarga


def construir_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="itv", description=config.APP_TITLE)
    sub = parser.add_subparsers(dest="comando", required=True)

    cargar = sub.add_parser("cargar", help="Carga una o todas las fuentes regionales")
    cargar.add_argument("fuente", choices=[*EXTRACTORES, "todas"])
    cargar.add_argument("--datos", default=config.DATA_DIR, help="Carpeta con los ficheros de origen")
    cargar.add_argument("--sin-geocodificar", action="store_true",
                        help="No consultar coordenadas para la Comunitat Valenciana")

    sub.add_parser("duplicados", help="Elimina estaciones duplicadas (se conserva la más antigua)")
    sub.add_parser("limpiar", help="Borra todas las estaciones, localidades y provincias")
    sub.add_parser("estadisticas", help="Muestra el recuento de la base de datos")

    buscar = sub.add_parser("buscar", help="Busca estaciones")
    buscar.add_argument("--provincia")
    buscar.add_argument("--localidad")
    buscar.add_argument("--tipo", choices=["Estacion Fija", "Estacion Movil", "Otros"])
    buscar.add_argument("--lat", type=float)
    buscar.add_argument("--lon", type=float)
    buscar.add_argument("--radio", type=float, help="Radio en km")

    prueba = sub.add_parser("generar-prueba", help="Genera un estaciones.json ficticio")
    prueba.add_argument("--salida", default=os.path.join("data_prueba", config.FICHERO_CV))
    prueba.add_argument("-n", type=int, default=25)
    prueba.add_argument("--semilla", type=int)

    return parser


def comando_cargar(args, almacen: PersistenceService) -> int:
    referencias = DatosReferencia.cargar(config.REFERENCIAS_PATH)
    validador = ValidadorEstacion(referencias, provincia_estricta=config.PROVINCIA_ESTRICTA)
    registro = RegistroCarga()

    fuentes = list(EXTRACTORES) if args.fuente == "todas" else [args.fuente]
    codigo = 0
    for fuente in fuentes:
        clase = EXTRACTORES[fuente]
        ruta = os.path.join(args.datos, clase.fichero)
        if clase is ExtractorCV:
            geocodificador = None if args.sin_geocodificar else GeocodificadorNominatim()
            extractor = ExtractorCV(almacen, ruta, validador, registro, geocodificador=geocodificador)
        else:
            extractor = clase(almacen, ruta, validador, registro)

        try:
            resumen = extractor.cargar()
        except FuenteNoDisponibleError as e:
            print(f"❌ {e}")
            codigo = 1
            continue

        print("=" * 70)
        print(f"📊 RESUMEN DE CARGA - {extractor.region.upper()}")
        print("=" * 70)
        print(f"✅ Estaciones cargadas: {resumen.cargadas}")
        print(f"✏️  Estaciones con correcciones: {resumen.corregidas}")
        print(f"❌ Estaciones rechazadas: {resumen.rechazadas}")
        print(f"📝 Total procesadas: {resumen.total_procesadas}")
    return codigo


def comando_estadisticas(almacen: PersistenceService) -> int:
    stats = obtener_estadisticas(almacen)
    print(f"Provincias: {stats['provincias']}")
    print(f"Localidades: {stats['localidades']}")
    print(f"Estaciones ITV: {stats['estaciones']['total']}")
    print(f"   - Fijas: {stats['estaciones']['fijas']}")
    print(f"   - Moviles: {stats['estaciones']['moviles']}")
    print(f"   - Otros: {stats['estaciones']['otros']}")
    for region, total in stats["regiones"].items():
        print(f"{region}: {total}")
    return 0


def comando_buscar(args, almacen: PersistenceService) -> int:
    try:
        estaciones = buscar_estaciones(
            almacen, args.provincia, args.localidad, args.tipo, args.lat, args.lon, args.radio
        )
    except ValueError as e:
        print(f"❌ {e}")
        return 2
    print(json.dumps({"total": len(estaciones), "estaciones": estaciones},
                     ensure_ascii=False, indent=2, default=str))
    return 0


def main(argv=None) -> int:
    """
    Punto de entrada de la línea de comandos.

    Abre la conexión, asegura las tablas y despacha el subcomando pedido.
    """
    args = construir_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.comando == "generar-prueba":
        crear_fuente_cv(args.salida, args.n, semilla=args.semilla)
        return 0

    with ConexionBD(config.DATABASE_URL) as conexion:
        inicializar_base_de_datos(conexion)
        almacen = PersistenceService(conexion)

        if args.comando == "cargar":
            return comando_cargar(args, almacen)
        if args.comando == "duplicados":
            eliminadas = DetectorDuplicados(almacen).eliminar_duplicados()
            print(f"🧹 Estaciones duplicadas eliminadas: {eliminadas}")
            return 0
        if args.comando == "limpiar":
            borradas = limpiar_base_de_datos(conexion)
            print(f"✅ Base de datos limpiada: {borradas}")
            return 0
        if args.comando == "estadisticas":
            return comando_estadisticas(almacen)
        if args.comando == "buscar":
            return comando_buscar(args, almacen)
    return 1


if __name__ == "__main__":
    sys.exit(main())
