# polyhomes_app/services/pricing_service.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import current_app
from pricing import PricingCalculator

def _build_calculator(app):
    """Constrói a calculadora a partir da matriz de preços do config."""
    return PricingCalculator(
        app.config.get("PRICE_MATRIX") or {},
        default_unit_price=app.config.get("DEFAULT_UNIT_PRICE", 2000),
    )

def init_pricing(app):
    app.extensions["pricing"] = _build_calculator(app)

def get_calculator() -> PricingCalculator:
    """
    Retorna SEMPRE um PricingCalculator.
    Se por algum motivo não houver um em extensions, constrói.
    """
    calc = current_app.extensions.get("pricing")
    if not isinstance(calc, PricingCalculator):
        calc = _build_calculator(current_app)
        current_app.extensions["pricing"] = calc
    return calc
