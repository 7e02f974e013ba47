"""
Complex arithmetic for impedance networks.

Thin wrappers over Python/numpy complex numbers. Every function accepts a
scalar or a numpy array so the same network code drives single-frequency
evaluation and whole sweeps. Division by an exact zero yields
``complex(inf, 0)`` instead of raising or producing NaN.
"""

import numpy as np

INF = complex(np.inf, 0.0)


def _is_scalar(z) -> bool:
    return np.ndim(z) == 0


def add(a, b):
    return a + b


def multiply(a, b):
    return a * b


def divide(a, b):
    """a / b, with a zero denominator mapped to inf+0j."""
    if _is_scalar(a) and _is_scalar(b):
        b = complex(b)
        if b == 0:
            return INF
        return complex(a) / b

    a = np.asarray(a, dtype=complex)
    b = np.asarray(b, dtype=complex)
    zero = b == 0
    with np.errstate(divide='ignore', invalid='ignore'):
        out = a / np.where(zero, 1.0, b)
    return np.where(zero, INF, out)


def reciprocal(z):
    return divide(1.0, z)


def magnitude(z):
    if _is_scalar(z):
        return abs(complex(z))
    return np.abs(z)


def phase(z):
    """Phase angle in radians (atan2(imag, real))."""
    if _is_scalar(z):
        return float(np.angle(complex(z)))
    return np.angle(z)


def phase_deg(z):
    return np.degrees(phase(z))


def parallel(z1, z2):
    """
    Two impedances in parallel: Z1·Z2 / (Z1 + Z2).

    An infinite branch (open circuit) drops out and the other branch is
    returned unchanged.
    """
    if _is_scalar(z1) and _is_scalar(z2):
        z1, z2 = complex(z1), complex(z2)
        if np.isinf(z1):
            return z2
        if np.isinf(z2):
            return z1
        return divide(z1 * z2, z1 + z2)

    z1, z2 = np.broadcast_arrays(np.asarray(z1, dtype=complex), np.asarray(z2, dtype=complex))
    open1 = np.isinf(z1)
    open2 = np.isinf(z2)
    with np.errstate(invalid='ignore', over='ignore'):
        out = divide(np.where(open1 | open2, 0, z1 * z2), np.where(open1 | open2, 1, z1 + z2))
    return np.where(open1, z2, np.where(open2, z1, out))
