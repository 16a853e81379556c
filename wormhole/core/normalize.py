"""Feature normalization to a fixed dimensionality."""

from typing import Sequence, Union

import numpy as np
from numpy.typing import NDArray


def normalize_features(features: Union[Sequence[float], NDArray[np.float64], None],
                       dimensionality: int) -> NDArray[np.float64]:
    """
    Pad or truncate a raw feature list to exactly ``dimensionality`` values.

    The first ``min(len(features), dimensionality)`` values are copied
    positionally; the remaining positions are zero. Never raises for short
    or empty input.
    """
    normalized = np.zeros(dimensionality, dtype=np.float64)
    if features is None:
        return normalized

    raw = np.asarray(features, dtype=np.float64).ravel()
    count = min(raw.size, dimensionality)
    normalized[:count] = raw[:count]
    return normalized
