"""
Unit conversions.

Parameters are entered in workshop units (mm, pF, kHz) and every formula in
the engine works in SI. These helpers are the only place the scale factors
live.
"""

MM_PER_INCH = 25.4


def mm_to_m(mm: float) -> float:
    return mm * 1e-3


def m_to_mm(m: float) -> float:
    return m * 1e3


def mm_to_inch(mm: float) -> float:
    return mm / MM_PER_INCH


def inch_to_mm(inch: float) -> float:
    return inch * MM_PER_INCH


def mm2_to_m2(mm2: float) -> float:
    return mm2 * 1e-6


def pf_to_f(pf: float) -> float:
    return pf * 1e-12


def f_to_pf(farads: float) -> float:
    return farads * 1e12


def t_to_mt(tesla: float) -> float:
    """Tesla → millitesla (field plots are in mT)."""
    return tesla * 1e3


def s_to_ms(seconds: float) -> float:
    return seconds * 1e3
