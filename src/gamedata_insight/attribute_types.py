"""Game-design role of a field, guessed from its name.

Patterns are checked in order and the first one found anywhere in the name
wins; names matching nothing are UNKNOWN.
"""
from __future__ import annotations

import re
from typing import List, Pattern, Tuple

from .models import AttributeType, GameAttributeCategory

# (pattern, category, description), checked top to bottom
_ATTRIBUTE_PATTERNS: List[Tuple[Pattern[str], GameAttributeCategory, str]] = [
    (
        re.compile(r"(id|编号|序号)", re.IGNORECASE),
        GameAttributeCategory.IDENTIFIER,
        "Unique identifier, used to link other data",
    ),
    (
        re.compile(r"(level|等级|lv|lvl)", re.IGNORECASE),
        GameAttributeCategory.PROGRESSION,
        "Level requirement or progression stage",
    ),
    (
        re.compile(r"(hp|blood|health|血量|生命)", re.IGNORECASE),
        GameAttributeCategory.COMBAT_STAT,
        "Health points, decides survivability",
    ),
    (
        re.compile(r"(atk|attack|攻击|伤害|damage)", re.IGNORECASE),
        GameAttributeCategory.COMBAT_STAT,
        "Attack power, decides damage output",
    ),
    (
        re.compile(r"(def|defense|防御|护甲)", re.IGNORECASE),
        GameAttributeCategory.COMBAT_STAT,
        "Defense, reduces damage taken",
    ),
    (
        re.compile(r"(price|金币|金钱|cost|价格)", re.IGNORECASE),
        GameAttributeCategory.ECONOMY,
        "Price or cost, affects the in-game economy",
    ),
    (
        re.compile(r"(quality|品质|rarity|稀有度|rare)", re.IGNORECASE),
        GameAttributeCategory.QUALITY,
        "Quality or rarity grade",
    ),
    (
        re.compile(r"(weight|权重|概率|probability)", re.IGNORECASE),
        GameAttributeCategory.PROBABILITY,
        "Probability weight for random rolls",
    ),
]


def identify_attribute_type(field_name: str) -> AttributeType:
    """Classify ``field_name`` by keyword.

    >>> identify_attribute_type("max_hp").category.value
    'combat_stat'
    """
    for pattern, category, description in _ATTRIBUTE_PATTERNS:
        if pattern.search(field_name):
            return AttributeType(
                field_name=field_name, category=category, description=description
            )
    return AttributeType(
        field_name=field_name, category=GameAttributeCategory.UNKNOWN, description=""
    )


__all__ = ["identify_attribute_type"]
