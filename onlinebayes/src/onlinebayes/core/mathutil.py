"""Log-space special functions used by the posterior predictives."""
from __future__ import annotations

import math


def log_beta(a: float, b: float) -> float:
    """Natural log of the beta function, ``lgamma(a) + lgamma(b) - lgamma(a + b)``.

    Matches :func:`scipy.special.betaln` for positive arguments.
    """

    return math.lgamma(a) + math.lgamma(b) - math.lgamma(a + b)


def log_student_t(x: float, df: float, loc: float, scale: float) -> float:
    """Log density of a location-scale Student-t distribution at ``x``.

    Matches :func:`scipy.stats.t.logpdf` with the same ``df``, ``loc`` and
    ``scale``.
    """

    normed = (x - loc) / scale
    return (
        math.lgamma((df + 1.0) / 2.0)
        - math.log(math.sqrt(df * math.pi))
        - math.lgamma(df / 2.0)
        - ((df + 1.0) / 2.0) * math.log1p(normed * normed / df)
        - math.log(scale)
    )
