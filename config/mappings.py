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

"""Configuración de mapeos y constantes para la lectura de las fuentes regionales.

Este módulo define, para cada fuente, qué encabezado (ya limpiado con
`Sanitizer.limpiar_texto`) alimenta cada campo de su fila cruda, además de
las URL y textos fijos que los adaptadores añaden a cada estación.
"""

# Comunitat Valenciana: estaciones.json
COLUMNAS_CV = {
    'tipo_estacion': ['TIPO ESTACION', 'TIPO'],
    'provincia': ['PROVINCIA'],
    'municipio': ['MUNICIPIO'],
    'codigo_postal': ['C.POSTAL', 'CODIGO POSTAL', 'CP'],
    'direccion': ['DIRECCION'],
    'numero': ['Nº ESTACION', 'N ESTACION', 'NUMERO ESTACION'],
    'horarios': ['HORARIOS', 'HORARIO'],
    'correo': ['CORREO', 'EMAIL'],
}
"""dict: Campo de `FilaCV` -> posibles encabezados del JSON valenciano."""

# Galicia: Estacions_ITV.csv (los nombres rotos aparecen cuando el CSV se lee
# con una codificación distinta a la original)
COLUMNAS_GAL = {
    'nome': ['NOME DA ESTACION', 'NOME DA ESTACIN'],
    'enderezo': ['ENDEREZO'],
    'concello': ['CONCELLO'],
    'codigo_postal': ['CODIGO POSTAL', 'CDIGO POSTAL'],
    'provincia': ['PROVINCIA'],
    'telefono': ['TELEFONO', 'TELFONO'],
    'horario': ['HORARIO'],
    'cita_previa': ['SOLICITUDE DE CITA PREVIA'],
    'correo': ['CORREO ELECTRONICO', 'CORREO ELECTRNICO'],
    'coordenadas': ['COORDENADAS GMAPS', 'COORDENADAS'],
}
"""dict: Campo de `FilaGAL` -> posibles encabezados del CSV gallego."""

# Catalunya: ITV-CAT.xml (etiquetas de cada <row>)
COLUMNAS_CAT = {
    'denominacio': ['DENOMINACI', 'DENOMINACIO'],
    'municipi': ['MUNICIPI'],
    'serveis_territorials': ['SERVEIS_TERRITORIALS'],
    'operador': ['OPERADOR'],
    'adreca': ['ADRE_A', 'ADRECA'],
    'cp': ['CP'],
    'lat': ['LAT'],
    'long': ['LONG'],
    'horari': ['HORARI_DE_SERVEI', 'HORARI'],
    'correu': ['CORREU_ELECTR_NIC', 'CORREU'],
    'web': ['WEB'],
}
"""dict: Campo de `FilaCAT` -> posibles etiquetas del XML catalán."""

URL_CV = "https://sitval.com/centros/"
URL_GAL = "https://sycitv.com"
URL_CAT = "https://itv.cat"
CONTACTO_CAT = "https://www.applusiteuve.com/es-es/contacto-itv-responde/itv-responde/"
"""str: Página de contacto del operador catalán, usada cuando la fuente da una URL."""
