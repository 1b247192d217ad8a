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

from sqlalchemy.exc import SQLAlchemyError

from database.conexion import ConexionBD


class BaseCRUDModel:
    """Clase base abstracta para operaciones CRUD genéricas en modelos SQLAlchemy.

    Proporciona métodos estandarizados para crear, contar, buscar y eliminar
    en bloque registros con filtros de igualdad. Las clases hijas deben
    definir el atributo de clase `model` con el modelo SQLAlchemy correspondiente.
    La conexión se recibe en el constructor; no hay sesión global.
    """

    model = None  # se define en la subclase

    def __init__(self, conexion: ConexionBD):
        self.conexion = conexion

    # ----------------------------
    # MÉTODOS BÁSICOS CRUD
    # ----------------------------
    def _get_session(self):
        """Crea y devuelve una nueva sesión de base de datos.

        Returns:
            Session: Una instancia de sqlalchemy.orm.Session.
        """
        return self.conexion.sesion()

    def create(self, data: dict):
        """Crea un nuevo registro en la base de datos.

        Args:
            data (dict): Diccionario con los datos para inicializar el modelo.

        Returns:
            object: La instancia del modelo recién creada y persistida.

        Raises:
            SQLAlchemyError: Si falla la inserción (ej. clave única duplicada).
        """
        with self._get_session() as session:
            try:
                obj = self.model(**data)
                session.add(obj)
                session.commit()
                session.refresh(obj)
                return obj
            except SQLAlchemyError:
                session.rollback()
                raise

    def delete_many(self, ids) -> int:
        """Elimina en bloque los registros cuyos IDs se indican.

        Args:
            ids (Iterable): Identificadores a eliminar.

        Returns:
            int: Cantidad de filas eliminadas (0 si la lista está vacía).

        Raises:
            SQLAlchemyError: Si falla el borrado; la transacción se revierte.
        """
        ids = list(ids)
        if not ids:
            return 0
        with self._get_session() as session:
            try:
                borradas = session.query(self.model) \
                    .filter(self.model.id.in_(ids)) \
                    .delete(synchronize_session=False)
                session.commit()
                return borradas
            except SQLAlchemyError:
                session.rollback()
                raise

    # ----------------------------
    # MÉTODO AUXILIAR DE FILTRADO
    # ----------------------------
    def _apply_filters(self, query, filters: dict | None = None):
        """Aplica filtros de igualdad exacta (AND) a una consulta.

        Args:
            query (Query): Objeto Query base de SQLAlchemy.
            filters (dict, optional): {campo: valor}. Los valores None se ignoran.

        Returns:
            Query: El objeto Query modificado con los filtros aplicados.
        """
        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field) and value is not None:
                    query = query.filter(getattr(self.model, field) == value)
        return query

    # ----------------------------
    # MÉTODOS DE CONSULTA
    # ----------------------------
    def count(self, filters: dict | None = None) -> int:
        """Cuenta el número de registros que coinciden con los filtros dados.

        Args:
            filters (dict, optional): Filtros exactos (AND).

        Returns:
            int: Cantidad de registros encontrados.
        """
        with self._get_session() as session:
            query = self._apply_filters(session.query(self.model), filters)
            return query.count()

    def search(self, filters: dict | None = None, first: bool = False):
        """Busca registros por filtros exactos.

        Args:
            filters (dict, optional): Filtros exactos (AND).
            first (bool, optional): Si True, devuelve solo el primer resultado.

        Returns:
            list | object: Lista de resultados o una instancia única si first=True.
        """
        with self._get_session() as session:
            query = self._apply_filters(session.query(self.model), filters)
            return query.first() if first else query.all()
