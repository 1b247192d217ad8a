"""
Tests del normalizador de texto (`Sanitizer`).
"""

import math

import pytest

from utilities.sanitizer import Sanitizer


class TestNormalizar:
    @pytest.mark.parametrize(
        "entrada, esperado",
        [
            ("  Castellón   de la  Plana ", "castellon de la plana"),
            ("A CORUÑA", "a coruna"),
            ("València", "valencia"),
            ("Lleida", "lleida"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_minusculas_sin_tildes_y_espacios_colapsados(self, entrada, esperado):
        assert Sanitizer.normalizar(entrada) == esperado

    def test_es_determinista(self):
        texto = "Sant Vicent del Raspeig"
        assert Sanitizer.normalizar(texto) == Sanitizer.normalizar(texto)


class TestTitulo:
    @pytest.mark.parametrize(
        "entrada, esperado",
        [
            ("CASTELLON DE LA PLANA", "Castellon de la Plana"),
            ("alacant", "Alacant"),
            ("de la rosa", "De la Rosa"),
            ("villanueva de la serena", "Villanueva de la Serena"),
            ("riba-roja del turia", "Riba-roja del Turia"),
            ("  los   montesinos ", "Los Montesinos"),
            ("", ""),
        ],
    )
    def test_conectores_en_minuscula_salvo_al_inicio(self, entrada, esperado):
        assert Sanitizer.titulo(entrada) == esperado


class TestDistanciaEdicion:
    @pytest.mark.parametrize(
        "a, b, distancia",
        [
            ("kitten", "sitting", 3),
            ("", "abc", 3),
            ("alicante", "alicnate", 2),
            ("tarragona", "tarragonna", 1),
            ("lugo", "lugo", 0),
        ],
    )
    def test_valores_conocidos(self, a, b, distancia):
        assert Sanitizer.distancia_edicion(a, b) == distancia

    @pytest.mark.parametrize("texto", ["", "girona", "a coruna", "ourense"])
    def test_distancia_a_si_misma_es_cero(self, texto):
        assert Sanitizer.distancia_edicion(texto, texto) == 0

    @pytest.mark.parametrize(
        "a, b",
        [("valencia", "valenica"), ("lleida", "lerida"), ("pontevedra", "ponte"), ("", "x")],
    )
    def test_es_simetrica(self, a, b):
        assert Sanitizer.distancia_edicion(a, b) == Sanitizer.distancia_edicion(b, a)

    def test_valores_ausentes_cuentan_como_vacios(self):
        assert Sanitizer.distancia_edicion(None, "lugo") == 4
        assert Sanitizer.distancia_edicion("", None) == 0


class TestConversiones:
    def test_a_texto_con_valores_crudos(self):
        assert Sanitizer.a_texto(None) == ""
        assert Sanitizer.a_texto(math.nan) == ""
        assert Sanitizer.a_texto(["  Reus  ", "otro"]) == "Reus"
        assert Sanitizer.a_texto([]) == ""
        assert Sanitizer.a_texto(46001) == "46001"

    def test_limpiar_texto_conserva_la_enie(self):
        assert Sanitizer.limpiar_texto("Nº Estación") == "Nº ESTACION"
        assert Sanitizer.limpiar_texto("a coruña") == "A CORUÑA"
        assert Sanitizer.limpiar_texto("Código   postal") == "CODIGO POSTAL"
