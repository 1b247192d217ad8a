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

import enum
from datetime import datetime

import ulid
from sqlalchemy import (
    Column, String, Float, ForeignKey, DateTime,
    UniqueConstraint, Enum, Integer, Text
)
from sqlalchemy.orm import relationship
from database.conexion import Base


def generar_uid() -> str:
    """
    Genera un identificador único ordenable lexicográficamente (ULID).

    Returns:
        str: Cadena ULID de 26 caracteres.
    """
    return str(ulid.new())


class TipoEstacion(str, enum.Enum):
    """Modos de operación reconocidos de una estación ITV."""
    FIJA = "Estacion Fija"
    MOVIL = "Estacion Movil"
    OTROS = "Otros"


# ---------------- MODELOS ----------------

class Provincia(Base):
    """Provincia canónica. Se crea bajo demanda y nunca se elimina."""
    __tablename__ = "provincia"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String(100), nullable=False)

    localidades = relationship("Localidad", back_populates="provincia")

    __table_args__ = (
        UniqueConstraint("nombre", name="uq_provincia_nombre"),
    )


class Localidad(Base):
    """Localidad (municipio) dentro de una provincia."""
    __tablename__ = "localidad"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String(150), nullable=False)

    provincia_id = Column(
        Integer,
        ForeignKey("provincia.id", ondelete="CASCADE"),
        nullable=False
    )

    provincia = relationship("Provincia", back_populates="localidades")
    estaciones = relationship("Estacion", back_populates="localidad")

    __table_args__ = (
        UniqueConstraint("nombre", "provincia_id", name="uq_localidad_provincia"),
    )


class Estacion(Base):
    """Estación ITV fija, móvil u otra, asociada a una localidad.

    No hay restricción única sobre (nombre, localidad_id): los duplicados se
    evitan con la comprobación previa a la inserción y se purgan con el
    detector de duplicados.
    """
    __tablename__ = "estacion"

    id = Column(String(26), primary_key=True, default=generar_uid, index=True)
    nombre = Column(String(255), nullable=False)
    tipo = Column(
        Enum(TipoEstacion, name="tipo_estacion", values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )
    direccion = Column(String(255), nullable=False)
    codigo_postal = Column(String(5), nullable=False)
    latitud = Column(Float, default=0.0, nullable=False)
    longitud = Column(Float, default=0.0, nullable=False)
    descripcion = Column(Text)
    horario = Column(Text)
    contacto = Column(String(255))
    url = Column(String(300))

    localidad_id = Column(
        Integer,
        ForeignKey("localidad.id", ondelete="CASCADE"),
        nullable=False
    )
    creado_en = Column(DateTime, default=datetime.now, nullable=False)

    localidad = relationship("Localidad", back_populates="estaciones")
