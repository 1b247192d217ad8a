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

from database.base_model import BaseCRUDModel
from database.models import Provincia


class ProvinciaModel(BaseCRUDModel):
    """Modelo CRUD para las provincias."""
    model = Provincia

    def buscar_por_nombre(self, nombre: str):
        """Busca una provincia por nombre exacto.

        Args:
            nombre (str): Nombre canónico de la provincia.

        Returns:
            Provincia | None: La provincia encontrada o None.
        """
        return self.search(filters={"nombre": nombre}, first=True)
