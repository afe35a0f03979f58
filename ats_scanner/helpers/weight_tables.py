"""
Built-in scoring weight tables.

Industry overrides replace the base weights they name; role-level adjustments
are then added and every table is normalized to sum to 1.
"""
from typing import Dict, List, Optional, Tuple

from ats_scanner.helpers.lexicons import ROLE_LEVELS
from ats_scanner.models.reference import WeightTable

DIMENSIONS: Tuple[str, ...] = (
    "skills",
    "experience",
    "education",
    "keywords",
    "format",
    "leadership",
    "certifications",
    "industry_specific",
)

DEFAULT_WEIGHTS: Dict[str, float] = {
    "skills": 0.25,
    "experience": 0.20,
    "education": 0.15,
    "keywords": 0.15,
    "format": 0.10,
    "leadership": 0.05,
    "certifications": 0.05,
    "industry_specific": 0.05,
}

INDUSTRY_WEIGHT_OVERRIDES: Dict[str, Dict[str, float]] = {
    "technology": {
        "skills": 0.35, "experience": 0.25, "education": 0.10,
        "keywords": 0.15, "certifications": 0.10, "industry_specific": 0.05,
    },
    "healthcare": {
        "certifications": 0.30, "education": 0.25, "experience": 0.20,
        "skills": 0.10, "keywords": 0.10, "industry_specific": 0.05,
    },
    "finance": {
        "certifications": 0.25, "experience": 0.25, "education": 0.20,
        "skills": 0.15, "keywords": 0.10, "industry_specific": 0.05,
    },
    "education": {
        "education": 0.35, "experience": 0.20, "certifications": 0.15,
        "skills": 0.10, "keywords": 0.15, "industry_specific": 0.05,
    },
}

_SENIOR_ADJUSTMENT = {"leadership": 0.10, "experience": 0.05, "skills": -0.05, "education": -0.05, "keywords": -0.05}

ROLE_LEVEL_ADJUSTMENTS: Dict[str, Dict[str, float]] = {
    "entry": {"education": 0.10, "skills": 0.05, "experience": -0.10, "leadership": -0.05},
    "senior": _SENIOR_ADJUSTMENT,
    "lead": _SENIOR_ADJUSTMENT,
    "executive": {"leadership": 0.20, "experience": 0.10, "skills": -0.10, "education": -0.10, "keywords": -0.10},
}


def _normalized(weights: Dict[str, float]) -> Dict[str, float]:
    clamped = {d: max(0.0, weights.get(d, 0.0)) for d in DIMENSIONS}
    total = sum(clamped.values())
    return {d: w / total for d, w in clamped.items()}


def compose_weights(industry: Optional[str] = None, role_level: Optional[str] = None) -> Dict[str, float]:
    weights = dict(DEFAULT_WEIGHTS)
    if industry:
        weights.update(INDUSTRY_WEIGHT_OVERRIDES.get(industry, {}))
    if role_level:
        for dimension, delta in ROLE_LEVEL_ADJUSTMENTS.get(role_level, {}).items():
            weights[dimension] += delta
    return _normalized(weights)


def build_weight_tables() -> Tuple[WeightTable, ...]:
    """Global default, per-level globals, and every (industry, level) override"""
    tables = [WeightTable(weights=compose_weights())]
    for level in ROLE_LEVELS:
        tables.append(WeightTable(role_level=level, weights=compose_weights(role_level=level)))
    for industry in INDUSTRY_WEIGHT_OVERRIDES:
        tables.append(WeightTable(industry=industry, weights=compose_weights(industry)))
        for level in ROLE_LEVELS:
            tables.append(WeightTable(industry=industry, role_level=level, weights=compose_weights(industry, level)))
    return tuple(tables)


def unknown_dimensions(weights) -> List[str]:
    """Dimension names in ``weights`` that have no scorer"""
    return sorted(d for d in weights if d not in DIMENSIONS)
