"""
Puntos de color etiquetados.

Cada punto combina un identificador opaco (p. ej. el nombre del estado),
un vector de 3 componentes (p. ej. el RGB promedio de la bandera) y los
campos auxiliares del registro original, que se conservan sin modificar.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, Union

import numpy as np

from ..exceptions import InvalidInputError

N_DIMS = 3


@dataclass(frozen=True)
class ColorPoint:
    """
    Punto etiquetado en un espacio de 3 dimensiones.

    Attributes:
        label: Identificador del punto (p. ej. 'Ohio')
        vector: Tres componentes reales; no se asume ningún rango
        metadata: Resto de campos del registro (thumbnail, etc.)
    """
    label: str
    vector: Tuple[float, float, float]
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        """Normaliza el vector a una tupla de floats y lo valida."""
        if isinstance(self.vector, (str, bytes)):
            raise InvalidInputError(
                f"Vector of point '{self.label}' must be a sequence of numbers, got {self.vector!r}"
            )

        try:
            values = tuple(float(v) for v in self.vector)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(
                f"Vector of point '{self.label}' must be numeric, got {self.vector!r}"
            ) from exc

        if len(values) != N_DIMS:
            raise InvalidInputError(
                f"Vector of point '{self.label}' must have {N_DIMS} components, "
                f"got {len(values)}"
            )
        if not all(math.isfinite(v) for v in values):
            raise InvalidInputError(
                f"Vector of point '{self.label}' has non-finite components: {values}"
            )

        # frozen=True: hay que pasar por object.__setattr__
        object.__setattr__(self, 'vector', values)


def points_from_records(
    records: Iterable[Mapping[str, Any]],
    label_key: str = 'state',
    vector_key: str = 'avg_rgb'
) -> List[ColorPoint]:
    """
    Convierte registros (dicts) en ColorPoints.

    Los registros siguen el formato del JSON de banderas:
        {"state": "Ohio", "avg_rgb": [r, g, b], "thumbnail": "..."}

    Todos los campos distintos de label_key y vector_key se copian a
    metadata. Los registros originales no se modifican.

    Args:
        records: Registros ya parseados
        label_key: Campo con el identificador
        vector_key: Campo con el vector de 3 componentes

    Returns:
        Lista de ColorPoint en el mismo orden que records.

    Raises:
        InvalidInputError: Si un registro no tiene label_key o vector_key,
                           o si su vector no es válido.

    Example:
        >>> points = points_from_records(records)
        >>> len(points) == len(records)
        True
    """
    points = []

    for position, record in enumerate(records):
        missing = [key for key in (label_key, vector_key) if key not in record]
        if missing:
            raise InvalidInputError(
                f"Record at position {position} is missing field(s): {missing}"
            )

        metadata = {
            key: value for key, value in record.items()
            if key not in (label_key, vector_key)
        }
        points.append(
            ColorPoint(
                label=str(record[label_key]),
                vector=record[vector_key],
                metadata=metadata
            )
        )

    return points


def extract_vectors(
    points: Union[Sequence[ColorPoint], np.ndarray, Sequence[Sequence[float]]]
) -> np.ndarray:
    """
    Extrae los vectores de los puntos como matriz (N, 3).

    Acepta ColorPoints o cualquier secuencia de vectores (incluido un
    np.ndarray de forma (N, 3)). Siempre devuelve una copia float64, de modo
    que el clustering nunca modifica la entrada.

    Args:
        points: Puntos a convertir

    Returns:
        vectors: Matriz float64 de forma (N, 3)

    Raises:
        InvalidInputError: Si no hay puntos, si la forma no es (N, 3) o si
                           hay valores no finitos.
    """
    if len(points) == 0:
        raise InvalidInputError("Cannot cluster an empty point set")

    if isinstance(points, np.ndarray):
        raw = points
    else:
        raw = [p.vector if isinstance(p, ColorPoint) else p for p in points]

    try:
        vectors = np.array(raw, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Points must be numeric 3-vectors: {exc}") from exc

    if vectors.ndim != 2 or vectors.shape[1] != N_DIMS:
        raise InvalidInputError(
            f"Points must have shape (N, {N_DIMS}), got {vectors.shape}"
        )
    if not np.all(np.isfinite(vectors)):
        raise InvalidInputError("Points contain non-finite coordinates")

    return vectors
