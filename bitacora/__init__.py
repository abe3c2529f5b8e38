"""
Bitácora de entrevistas

Registro de observaciones ("textos") etiquetadas por tema ("etiquetas")
a lo largo de las entrevistas de cada estudiante.
"""

__version__ = "0.1.0"
