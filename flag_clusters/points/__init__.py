"""
Módulo de puntos de color para flag_clusters.

Proporciona la dataclass ColorPoint (etiqueta + vector RGB + metadata) y
utilidades para construir puntos a partir de registros ya cargados.

Example:
    >>> from flag_clusters.points import points_from_records
    >>>
    >>> records = [{'state': 'Ohio', 'avg_rgb': [120, 40, 60], 'thumbnail': 'oh.png'}]
    >>> points = points_from_records(records)
    >>> print(points[0].label)                  # 'Ohio'
    >>> print(points[0].metadata['thumbnail'])  # 'oh.png'
"""

from .color_point import ColorPoint, extract_vectors, points_from_records

__all__ = [
    'ColorPoint',
    'extract_vectors',
    'points_from_records'
]
