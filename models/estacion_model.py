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

from typing import Dict, List, Optional, Sequence

from sqlalchemy import func

from database.base_model import BaseCRUDModel
from database.models import Estacion, Localidad, Provincia, TipoEstacion
from utilities.sanitizer import Sanitizer

CAMPOS_DETALLE = (
    "id", "nombre", "tipo", "direccion", "codigo_postal", "latitud", "longitud",
    "descripcion", "horario", "contacto", "url", "localidad_id", "creado_en",
)


class EstacionModel(BaseCRUDModel):
    """Modelo CRUD para las estaciones ITV."""
    model = Estacion

    def existe(self, nombre: str, localidad_id: int) -> bool:
        """Indica si ya hay una estación con ese nombre en la localidad."""
        return self.count(filters={"nombre": nombre, "localidad_id": localidad_id}) > 0

    def listar(self, campos: Sequence[str]) -> List[Dict]:
        """Devuelve todas las estaciones proyectadas sobre las columnas pedidas.

        Args:
            campos (Sequence[str]): Nombres de columna de `Estacion`.

        Returns:
            List[Dict]: Una fila por estación como diccionario {campo: valor}.

        Raises:
            ValueError: Si algún campo no es una columna de la tabla.
        """
        columnas = []
        for campo in campos:
            if campo not in Estacion.__table__.columns:
                raise ValueError(f"Campo desconocido en estacion: {campo}")
            columnas.append(getattr(Estacion, campo))

        with self._get_session() as session:
            filas = session.query(*columnas).all()
            return [dict(zip(campos, fila)) for fila in filas]

    def contar_por_tipo(self) -> Dict[str, int]:
        """Cuenta estaciones agrupadas por tipo (con 0 para los tipos ausentes)."""
        conteo = {tipo.value: 0 for tipo in TipoEstacion}
        with self._get_session() as session:
            filas = session.query(Estacion.tipo, func.count(Estacion.id)).group_by(Estacion.tipo).all()
        for tipo, total in filas:
            clave = tipo.value if isinstance(tipo, TipoEstacion) else str(tipo)
            conteo[clave] = total
        return conteo

    def contar_por_provincia(self) -> Dict[str, int]:
        """Cuenta estaciones por nombre de provincia."""
        with self._get_session() as session:
            filas = session.query(Provincia.nombre, func.count(Estacion.id)) \
                .join(Localidad, Localidad.provincia_id == Provincia.id) \
                .join(Estacion, Estacion.localidad_id == Localidad.id) \
                .group_by(Provincia.nombre) \
                .all()
        return {nombre: total for nombre, total in filas}

    def buscar_detalle(
        self,
        provincia: Optional[str] = None,
        localidad: Optional[str] = None,
        tipo: Optional[TipoEstacion] = None,
    ) -> List[Dict]:
        """Estaciones unidas a su localidad y provincia, con filtros opcionales.

        Los filtros de provincia y localidad son subcadenas sin distinguir
        mayúsculas ni tildes ("castellon" encuentra "Castellón"); el tipo se
        compara por igualdad. SQLite solo pliega mayúsculas ASCII, así que los
        nombres se comparan ya normalizados en Python.

        Returns:
            List[Dict]: Datos de la estación con las claves anidadas
            `localidad` -> {id, nombre, provincia -> {id, nombre}}.
        """
        with self._get_session() as session:
            query = session.query(Estacion, Localidad, Provincia) \
                .join(Localidad, Estacion.localidad_id == Localidad.id) \
                .join(Provincia, Localidad.provincia_id == Provincia.id)

            if tipo is not None:
                query = query.filter(Estacion.tipo == tipo)
            filtro_provincia = Sanitizer.normalizar(provincia)
            filtro_localidad = Sanitizer.normalizar(localidad)

            resultado = []
            for est, loc, prov in query.order_by(Estacion.nombre).all():
                if filtro_provincia and filtro_provincia not in Sanitizer.normalizar(prov.nombre):
                    continue
                if filtro_localidad and filtro_localidad not in Sanitizer.normalizar(loc.nombre):
                    continue
                fila = {campo: getattr(est, campo) for campo in CAMPOS_DETALLE}
                fila["tipo"] = est.tipo.value if isinstance(est.tipo, TipoEstacion) else est.tipo
                fila["localidad"] = {
                    "id": loc.id,
                    "nombre": loc.nombre,
                    "provincia": {"id": prov.id, "nombre": prov.nombre},
                }
                resultado.append(fila)
            return resultado
