"""
Horadric Core — summon calculator engine.

Usage:
    from core import SummonEngine
    from games.d2 import create_d2_config

    engine = SummonEngine(create_d2_config())
    engine.initialize()
    result = engine.skeleton(skill_level=20, mastery_level=10)
"""

from core.calc_config import CalcConfig
from core.summon_engine import SummonEngine

__all__ = [
    "SummonEngine",
    "CalcConfig",
]
