"""Metric-aware vector normalization."""

from __future__ import annotations

import math
from collections.abc import Sequence

from endee_client.exceptions import DimensionMismatchError
from endee_client.types import NormalizedVector, SpaceType


def normalize(
    vector: Sequence[float],
    dimension: int,
    space_type: SpaceType,
) -> NormalizedVector:
    """Normalize a dense vector for storage or search.

    Cosine indexes store unit vectors plus the original magnitude as ``norm``.
    A zero vector under cosine, and every vector under other metrics, passes
    through unchanged with ``norm = 1.0``.

    Args:
        vector: Dense vector values.
        dimension: Dense dimension configured on the index.
        space_type: Distance metric configured on the index.

    Returns:
        The (possibly scaled) vector and its norm.

    Raises:
        DimensionMismatchError: If the vector length differs from dimension.
    """
    if len(vector) != dimension:
        raise DimensionMismatchError(dimension, len(vector))

    values = [float(v) for v in vector]
    if space_type is not SpaceType.COSINE:
        return NormalizedVector(vector=values, norm=1.0)

    norm = math.sqrt(sum(v * v for v in values))
    if norm == 0:
        return NormalizedVector(vector=values, norm=1.0)

    return NormalizedVector(vector=[v / norm for v in values], norm=norm)
