"""
Tests del resolutor de provincias y localidades.
"""

from sqlalchemy.exc import IntegrityError, OperationalError

from services.resolutor_identidad import ResolutorIdentidad


class AlmacenCaido:
    """Almacén cuyas operaciones fallan siempre con un error de base de datos."""

    def buscar_provincia_por_nombre(self, nombre):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    def buscar_localidad(self, nombre, provincia_id):
        raise OperationalError("SELECT", {}, Exception("database is locked"))


class AlmacenConCarrera:
    """Simula que otra carga inserta la fila entre la búsqueda y la inserción."""

    class _Fila:
        def __init__(self, id):
            self.id = id

    def __init__(self):
        self.busquedas = 0

    def buscar_provincia_por_nombre(self, nombre):
        self.busquedas += 1
        return None if self.busquedas == 1 else self._Fila(7)

    def insertar_provincia(self, nombre):
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))


class TestProvincia:
    def test_crea_y_reutiliza(self, almacen):
        resolutor = ResolutorIdentidad(almacen)
        primera = resolutor.obtener_o_crear_provincia("Valencia")
        segunda = resolutor.obtener_o_crear_provincia("  Valencia ")
        assert primera is not None
        assert primera == segunda
        assert almacen.contar_provincias() == 1

    def test_nombre_vacio_devuelve_none(self, almacen):
        assert ResolutorIdentidad(almacen).obtener_o_crear_provincia("  ") is None
        assert almacen.contar_provincias() == 0

    def test_error_de_base_de_datos_devuelve_none(self):
        assert ResolutorIdentidad(AlmacenCaido()).obtener_o_crear_provincia("Lugo") is None

    def test_conflicto_de_unicidad_relee_la_fila(self):
        almacen = AlmacenConCarrera()
        assert ResolutorIdentidad(almacen).obtener_o_crear_provincia("Lugo") == 7
        assert almacen.busquedas == 2


class TestLocalidad:
    def test_misma_localidad_en_dos_provincias(self, almacen):
        resolutor = ResolutorIdentidad(almacen)
        valencia = resolutor.obtener_o_crear_provincia("Valencia")
        lugo = resolutor.obtener_o_crear_provincia("Lugo")

        a = resolutor.obtener_o_crear_localidad("Villanueva", valencia)
        b = resolutor.obtener_o_crear_localidad("Villanueva", lugo)
        c = resolutor.obtener_o_crear_localidad("Villanueva", valencia)

        assert a != b
        assert a == c
        assert almacen.contar_localidades() == 2

    def test_sin_provincia_devuelve_none(self, almacen):
        assert ResolutorIdentidad(almacen).obtener_o_crear_localidad("Torrent", None) is None

    def test_error_de_base_de_datos_devuelve_none(self):
        assert ResolutorIdentidad(AlmacenCaido()).obtener_o_crear_localidad("Torrent", 1) is None
