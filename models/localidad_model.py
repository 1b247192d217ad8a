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
from database.models import Localidad


class LocalidadModel(BaseCRUDModel):
    """Modelo CRUD para las localidades (municipios)."""
    model = Localidad

    def buscar(self, nombre: str, provincia_id: int):
        """Busca una localidad por el par (nombre, provincia)."""
        return self.search(filters={"nombre": nombre, "provincia_id": provincia_id}, first=True)
