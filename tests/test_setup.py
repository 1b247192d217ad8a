"""
Tests del ciclo de vida de la conexión y del mantenimiento de la base de datos.
"""

import pytest

from database.conexion import ConexionBD
from database.setup import inicializar_base_de_datos, limpiar_base_de_datos


def test_conexion_cerrada_no_da_sesiones(tmp_path):
    conexion = ConexionBD(f"sqlite:///{tmp_path / 'x.db'}")
    assert not conexion.abierta
    with pytest.raises(RuntimeError):
        conexion.sesion()

    with conexion:
        assert conexion.abierta
        conexion.sesion().close()
    assert not conexion.abierta


def test_inicializar_es_idempotente(conexion, almacen):
    inicializar_base_de_datos(conexion)
    assert almacen.contar_estaciones() == 0


def test_limpiar_borra_en_orden(conexion, almacen, crear_estacion):
    crear_estacion("ITV Torrent", "Torrent")
    crear_estacion("ITV Reus", "Reus", provincia="Tarragona", codigo_postal="43206")

    assert limpiar_base_de_datos(conexion) == {"estaciones": 2, "localidades": 2, "provincias": 2}
    assert almacen.contar_provincias() == 0
    assert limpiar_base_de_datos(conexion) == {"estaciones": 0, "localidades": 0, "provincias": 0}


def test_listar_campo_desconocido(almacen):
    with pytest.raises(ValueError):
        almacen.listar_estaciones(["id", "contraseña"])


def test_modelo_base_filtra_por_igualdad(almacen, crear_estacion):
    torrent = crear_estacion("ITV Torrent", "Torrent")
    crear_estacion("ITV Reus", "Reus", provincia="Tarragona", codigo_postal="43206")
    modelo = almacen.model_estacion

    assert modelo.count() == 2
    assert modelo.count({"nombre": "ITV Reus", "localidad_id": None}) == 1
    assert modelo.search({"nombre": "ITV Torrent"}, first=True).id == torrent.id
    assert {e.nombre for e in modelo.search({"tipo": torrent.tipo})} == {"ITV Torrent", "ITV Reus"}
    assert modelo.delete_many([]) == 0
    assert modelo.delete_many([torrent.id]) == 1
    assert modelo.count() == 1
