"""
Tests de carga completa por comunidad: recuentos, desenlaces y efectos en la BD.
"""

import pytest
from sqlalchemy.exc import OperationalError

from controllers.extractores import Desenlace, ExtractorCAT, ExtractorCV, ExtractorGAL
from controllers.import_processor import FuenteNoDisponibleError
from database.schemas import FilaCV
from utilities.registro import RegistroCarga


class GeocodificadorSinResultados:
    def geocodificar(self, direccion, municipio, provincia, codigo_postal):
        return None


@pytest.fixture
def extractor_cv(almacen, validador, geocodificador, esperar):
    def _crear(ruta, **opciones):
        opciones.setdefault("geocodificador", geocodificador)
        return ExtractorCV(almacen, ruta, validador, pausa=1.5, esperar=esperar, **opciones)

    return _crear


# ========================================================================
# COMUNITAT VALENCIANA
# ========================================================================


class TestCargaCV:
    def test_geocodifica_y_respeta_la_pausa(self, almacen, extractor_cv, escribir_cv, fila_cv,
                                            geocodificador, pausas):
        ruta = escribir_cv([
            fila_cv(),
            fila_cv(PROVINCIA="alacant", MUNICIPIO="ALICANTE", **{"C.POSTAL": 3001, "Nº ESTACIÓN": 301}),
        ])

        resumen = extractor_cv(ruta).cargar()

        assert (resumen.cargadas, resumen.corregidas, resumen.rechazadas) == (2, 1, 0)
        assert resumen.total_procesadas == 2
        assert len(geocodificador.llamadas) == 2
        assert pausas == [1.5, 1.5]

        estaciones = almacen.buscar_estaciones_detalle()
        assert {e["nombre"] for e in estaciones} == {"ITV Torrent 4621", "ITV Alicante 301"}
        assert all(e["latitud"] == pytest.approx(39.4699) for e in estaciones)
        alicante = next(e for e in estaciones if e["nombre"] == "ITV Alicante 301")
        assert alicante["localidad"]["provincia"]["nombre"] == "Alicante"
        assert alicante["codigo_postal"] == "03001"

    def test_no_geocodifica_registros_rechazados(self, extractor_cv, escribir_cv, fila_cv,
                                                 geocodificador, pausas):
        ruta = escribir_cv([fila_cv(**{"C.POSTAL": 8001})])

        resumen = extractor_cv(ruta).cargar()

        assert resumen.rechazadas == 1
        assert geocodificador.llamadas == []
        assert pausas == []

    def test_no_geocodifica_moviles(self, almacen, extractor_cv, escribir_cv, fila_cv, geocodificador):
        ruta = escribir_cv([fila_cv(**{"TIPO ESTACIÓN": "Estación Móvil", "MUNICIPIO": "",
                                       "C.POSTAL": "", "DIRECCIÓN": ""})])

        resumen = extractor_cv(ruta).cargar()

        assert resumen.cargadas == 1
        assert geocodificador.llamadas == []
        [movil] = almacen.buscar_estaciones_detalle()
        assert movil["tipo"] == "Estacion Movil"
        assert movil["codigo_postal"] == "00000"
        assert movil["direccion"] == ""
        assert movil["localidad"]["nombre"] == "Valencia"

    def test_sin_coordenadas_se_rechaza(self, extractor_cv, escribir_cv, fila_cv, pausas):
        ruta = escribir_cv([fila_cv()])

        resumen = extractor_cv(ruta, geocodificador=GeocodificadorSinResultados()).cargar()

        assert resumen.rechazadas == 1
        assert pausas == [1.5]
        assert "Latitud" in resumen.errores[0]

    def test_sin_geocodificador_guarda_en_cero(self, almacen, extractor_cv, escribir_cv, fila_cv, pausas):
        ruta = escribir_cv([fila_cv()])

        resumen = extractor_cv(ruta, geocodificador=None).cargar()

        assert resumen.cargadas == 1
        assert pausas == []
        [estacion] = almacen.buscar_estaciones_detalle()
        assert (estacion["latitud"], estacion["longitud"]) == (0.0, 0.0)

    def test_segunda_carga_no_duplica(self, almacen, extractor_cv, escribir_cv, fila_cv):
        ruta = escribir_cv([fila_cv()])
        extractor_cv(ruta).cargar()

        resumen = extractor_cv(ruta).cargar()

        assert (resumen.cargadas, resumen.rechazadas) == (0, 1)
        assert "duplicada" in resumen.errores[0]
        assert almacen.contar_estaciones() == 1

    def test_fija_y_movil_del_mismo_municipio_comparten_localidad(self, almacen, extractor_cv,
                                                                   escribir_cv, fila_cv):
        ruta = escribir_cv([
            fila_cv(MUNICIPIO="TORRENT"),
            fila_cv(MUNICIPIO="TORRENT", **{"TIPO ESTACIÓN": "Estación Móvil", "C.POSTAL": "",
                                            "Nº ESTACIÓN": 4622}),
        ])

        resumen = extractor_cv(ruta, geocodificador=None).cargar()

        assert resumen.cargadas == 2
        assert almacen.contar_localidades() == 1
        assert {e["localidad"]["nombre"] for e in almacen.buscar_estaciones_detalle()} == {"Torrent"}

    @pytest.mark.parametrize(
        "campos, motivo",
        [
            ({"MUNICIPIO": "Desconocido"}, "genérico"),
            ({"DIRECCIÓN": "Sin dirección"}, "Dirección"),
            ({"DIRECCIÓN": "C/1"}, "corta"),
            ({"CORREO": "itv-torrent"}, "Correo"),
        ],
    )
    def test_valores_de_relleno_se_rechazan(self, almacen, extractor_cv, escribir_cv, fila_cv,
                                            geocodificador, campos, motivo):
        ruta = escribir_cv([fila_cv(**campos)])

        resumen = extractor_cv(ruta).cargar()

        assert resumen.rechazadas == 1
        assert motivo in resumen.errores[0]
        assert geocodificador.llamadas == []
        assert almacen.contar_estaciones() == 0

    def test_horario_ausente_no_rechaza_ni_rellena(self, almacen, extractor_cv, escribir_cv, fila_cv):
        ruta = escribir_cv([fila_cv(HORARIOS="")])

        resumen = extractor_cv(ruta).cargar()

        assert (resumen.cargadas, resumen.corregidas) == (1, 0)
        [estacion] = almacen.buscar_estaciones_detalle()
        assert estacion["horario"] == ""

    def test_fuente_inexistente_interrumpe_la_carga(self, extractor_cv, tmp_path):
        with pytest.raises(FuenteNoDisponibleError):
            extractor_cv(str(tmp_path / "no_existe.json")).cargar()


# ========================================================================
# GALICIA Y CATALUNYA
# ========================================================================


def test_carga_galicia(almacen, validador, ruta_gal):
    resumen = ExtractorGAL(almacen, ruta_gal, validador).cargar()

    assert (resumen.cargadas, resumen.corregidas, resumen.rechazadas) == (2, 1, 1)
    assert resumen.total_procesadas == 3
    assert almacen.contar_estaciones_por_provincia() == {"A Coruña": 1, "Pontevedra": 1}
    assert any("Lugo Sur" in e for e in resumen.errores)


def test_carga_cataluna(almacen, validador, ruta_cat):
    resumen = ExtractorCAT(almacen, ruta_cat, validador).cargar()

    assert (resumen.cargadas, resumen.corregidas, resumen.rechazadas) == (2, 1, 1)
    estaciones = {e["nombre"]: e for e in almacen.buscar_estaciones_detalle()}
    assert set(estaciones) == {"ITV Reus", "ITV Girona"}
    assert estaciones["ITV Girona"]["localidad"]["provincia"]["nombre"] == "Girona"
    assert estaciones["ITV Reus"]["latitud"] == pytest.approx(41.1561)


# ========================================================================
# DESENLACES Y EVENTOS
# ========================================================================


def test_fallo_al_insertar_no_detiene_la_carga(almacen, validador, ruta_cat, monkeypatch):
    def insertar_roto(datos):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(almacen, "insertar_estacion", insertar_roto)
    resumen = ExtractorCAT(almacen, ruta_cat, validador).cargar()

    assert (resumen.cargadas, resumen.rechazadas, resumen.total_procesadas) == (0, 3, 3)


def test_desenlace_por_registro(almacen, validador):
    extractor = ExtractorCV(almacen, "estaciones.json", validador)
    fila = FilaCV(
        tipo_estacion="Estación Fija", provincia="Valencia", municipio="Torrent",
        codigo_postal="46900", direccion="Calle Mayor 1", numero="1",
        horarios="", correo="",
    )

    assert extractor.procesar(fila).desenlace == Desenlace.CARGADA
    assert extractor.procesar(fila).desenlace == Desenlace.DUPLICADA
    assert not Desenlace.DUPLICADA.aceptada
    assert Desenlace.CORREGIDA.aceptada


def test_observadores_reciben_los_eventos(almacen, validador, ruta_gal):
    eventos = []
    registro = RegistroCarga()
    registro.suscribir(eventos.append)

    ExtractorGAL(almacen, ruta_gal, validador, registro).cargar()

    assert {"message", "level", "timestamp"} <= set(eventos[0])
    assert eventos[-1]["level"] == "success"
    assert any(e["level"] == "warning" and "Lugo Sur" in e["message"] for e in eventos)


def test_estacion_sin_nombre_no_llega_a_insertarse(almacen, validador, tmp_path):
    ruta = tmp_path / "ITV-CAT.xml"
    ruta.write_text(
        "<response><row><row>"
        "<denominaci></denominaci><municipi>Salou</municipi>"
        "<serveis_territorials>Tarragona</serveis_territorials><adre_a>Carrer Major 3</adre_a>"
        "<cp>43840</cp><lat>41076000</lat><long>1131000</long>"
        "<horari_de_servei>L-V 8:00-20:00</horari_de_servei>"
        "</row></row></response>",
        encoding="utf-8",
    )
    extractor = ExtractorCAT(almacen, str(ruta), validador)

    [fila] = extractor.leer()
    resultado = extractor.procesar(fila)

    assert resultado.desenlace == Desenlace.INVALIDA
    assert "nombre" in resultado.motivo
    assert almacen.contar_estaciones() == 0
