# pricing.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

ROUND = ROUND_HALF_UP
DEFAULT_UNIT_PRICE = Decimal("2000")


def D(x) -> Decimal:
    if isinstance(x, Decimal):
        return x
    if x is None:
        return Decimal("0")
    if isinstance(x, (int, float)):
        return Decimal(str(x))
    s = str(x).strip().replace(",", ".")
    try:
        return Decimal(s or "0")
    except InvalidOperation:
        return Decimal("0")


def q2(x) -> Decimal:
    return D(x).quantize(Decimal("0.01"), rounding=ROUND)


# ---------------------------------------------------------------------
# Modelos
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class PriceBreakdown:
    mesh_type: str
    material_type: str
    unit_price: Decimal
    area: Decimal
    window_count: int
    total: Decimal
    used_default: bool


# ---------------------------------------------------------------------
# Calculadora
# ---------------------------------------------------------------------
class PricingCalculator:
    """
    Fixed-table pricing: total = width * height * unit_price * count.

    The matrix is ``{mesh_type: {material_type: unit_price}}``. It is copied
    into a read-only mapping keyed by ``(mesh, material)`` so later changes to
    the source dict (e.g. app config) never leak into prices.
    Unknown combinations fall back to ``default_unit_price``.
    """

    def __init__(
        self,
        matrix: Optional[Mapping[str, Mapping[str, Any]]] = None,
        default_unit_price: Any = DEFAULT_UNIT_PRICE,
    ):
        table = {}
        for mesh, row in (matrix or {}).items():
            for material, price in (row or {}).items():
                table[(self._norm(mesh), self._norm(material))] = D(price)
        self._table: Mapping[Tuple[str, str], Decimal] = MappingProxyType(table)
        self.default_unit_price = D(default_unit_price)

    @staticmethod
    def _norm(s: Any) -> str:
        return (str(s) if s is not None else "").strip().lower()

    @property
    def table(self) -> Mapping[Tuple[str, str], Decimal]:
        return self._table

    def unit_price(self, mesh_type: Any, material_type: Any) -> Decimal:
        key = (self._norm(mesh_type), self._norm(material_type))
        return self._table.get(key, self.default_unit_price)

    def breakdown(self, mesh_type, material_type, width, height, count) -> PriceBreakdown:
        key = (self._norm(mesh_type), self._norm(material_type))
        used_default = key not in self._table
        unit = self._table.get(key, self.default_unit_price)
        area = D(width) * D(height)
        total = q2(area * unit * D(count))
        return PriceBreakdown(
            mesh_type=key[0],
            material_type=key[1],
            unit_price=unit,
            area=area,
            window_count=int(count),
            total=total,
            used_default=used_default,
        )

    def total(self, mesh_type, material_type, width, height, count) -> Decimal:
        return self.breakdown(mesh_type, material_type, width, height, count).total
