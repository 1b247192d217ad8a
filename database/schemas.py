from dataclasses import dataclass, field
from typing import List, Optional, Union, Literal


@dataclass
class Veredicto:
    """Resultado de validar un campo: qué se recibió, qué se hizo y por qué."""
    campo: str
    valor_original: str
    mensaje: str
    valor_corregido: Optional[str] = None
    corregido: bool = False


@dataclass
class ResultadoCorreccion:
    """Salida de una función del corrector de campos."""
    es_valido: bool
    valor_corregido: str
    veredicto: Optional[Veredicto] = None
    cambio: bool = False


@dataclass
class Coordenadas:
    lat: float
    lon: float


@dataclass
class RegistroEstacion:
    """
    Forma canónica de una estación antes de validarla.
    Todas las fuentes regionales se adaptan a esta estructura.
    """
    origen: str
    nombre: str = ""
    tipo_raw: str = ""
    provincia: str = ""
    municipio: str = ""
    codigo_postal: str = ""
    direccion: str = ""
    latitud: float = 0.0
    longitud: float = 0.0
    descripcion: str = ""
    horario: str = ""
    contacto: str = ""
    correo: str = ""  # Correo suelto, para validar su formato
    url: str = ""
    codigo: str = ""  # Nº de estación en la fuente, si lo hay


@dataclass
class ResultadoValidacion:
    """Decisión final sobre un registro y datos corregidos (incluso si se rechaza)."""
    es_valido: bool
    errores: List[Veredicto] = field(default_factory=list)
    advertencias: List[Veredicto] = field(default_factory=list)
    datos_corregidos: Optional[RegistroEstacion] = None


# ---------------- FORMAS CRUDAS POR FUENTE ----------------

@dataclass
class FilaCV:
    """Fila de estaciones.json (Comunitat Valenciana)."""
    tipo_estacion: str
    provincia: str
    municipio: str
    codigo_postal: str
    direccion: str
    numero: str
    horarios: str
    correo: str
    origen: Literal["CV"] = "CV"


@dataclass
class FilaGAL:
    """Fila de Estacions_ITV.csv (Galicia)."""
    nome: str
    enderezo: str
    concello: str
    codigo_postal: str
    provincia: str
    telefono: str
    horario: str
    cita_previa: str
    correo: str
    coordenadas: str
    origen: Literal["GAL"] = "GAL"


@dataclass
class FilaCAT:
    """Fila de ITV-CAT.xml (Catalunya)."""
    denominacio: str
    municipi: str
    serveis_territorials: str
    operador: str
    adreca: str
    cp: str
    lat: str
    long: str
    horari: str
    correu: str
    web: str
    origen: Literal["CAT"] = "CAT"


FilaFuente = Union[FilaCV, FilaGAL, FilaCAT]


@dataclass
class ResumenCarga:
    """Recuento final de una carga regional. Es el resultado autoritativo."""
    origen: str
    cargadas: int = 0        # Estaciones insertadas
    corregidas: int = 0      # Aceptadas con alguna corrección automática
    rechazadas: int = 0      # Inválidas, sin identidad, duplicadas o con error BD
    total_procesadas: int = 0
    errores: List[str] = field(default_factory=list)
