"""Minimal 2D vector algebra for orbit positions (AU) and detector offsets (mas)."""
from __future__ import annotations

from dataclasses import dataclass
import math


@dataclass(frozen=True)
class Vector2:
    x: float
    y: float


UNIT_X = Vector2(1.0, 0.0)


def add(a: Vector2, b: Vector2) -> Vector2:
    return Vector2(a.x + b.x, a.y + b.y)


def sub(a: Vector2, b: Vector2) -> Vector2:
    return Vector2(a.x - b.x, a.y - b.y)


def scale(v: Vector2, k: float) -> Vector2:
    return Vector2(v.x * k, v.y * k)


def dot(a: Vector2, b: Vector2) -> float:
    return a.x * b.x + a.y * b.y


def length(v: Vector2) -> float:
    return math.hypot(v.x, v.y)


def normalize(v: Vector2) -> Vector2:
    """Return ``v`` scaled to unit length.

    A zero-length vector has no direction, so the canonical ``(1, 0)`` is
    returned instead of failing.
    """

    n = length(v)
    if not (n > 0) or not math.isfinite(n):
        return UNIT_X
    return Vector2(v.x / n, v.y / n)


def perp(v: Vector2) -> Vector2:
    """Rotate ``v`` by +90 degrees."""
    return Vector2(-v.y, v.x)
