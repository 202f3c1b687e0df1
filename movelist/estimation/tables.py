"""Static heuristic tables for weight, dimension and category estimation.

Weights are kilograms, dimensions are (height, width, depth) centimetres.
Lookups that scan these tables treat them as read-only.
"""

from __future__ import annotations

from types import MappingProxyType

DEFAULT_CATEGORY = "misc"

# Checked in order; the first category with a trigger present as a whole word
# (plural allowed) wins.
CATEGORY_TRIGGERS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        "musical": (
            "music",
            "musical",
            "instrument",
            "piano",
            "guitar",
            "drum",
            "keyboard",
            "cello",
        ),
        "exercise": (
            "exercise",
            "fitness",
            "gym",
            "workout",
            "treadmill",
            "dumbbell",
            "weights",
            "weight bench",
            "rowing machine",
            "elliptical",
            "cross trainer",
        ),
        "appliances": (
            "appliance",
            "fridge",
            "freezer",
            "refrigerator",
            "washer",
            "washing machine",
            "dryer",
            "dishwasher",
            "oven",
            "microwave",
            "cooker",
            "vacuum",
        ),
        "furniture": (
            "furniture",
            "table",
            "chair",
            "sofa",
            "couch",
            "bed",
            "mattress",
            "wardrobe",
            "cabinet",
            "desk",
            "shelf",
            "bookcase",
            "drawers",
            "sideboard",
            "dresser",
            "stool",
            "stand",
        ),
        "electronics": (
            "tv",
            "television",
            "computer",
            "laptop",
            "monitor",
            "speaker",
            "printer",
            "console",
        ),
        "outdoor": (
            "garden",
            "outdoor",
            "patio",
            "bbq",
            "barbecue",
            "grill",
            "shed",
            "trampoline",
            "hot tub",
            "lawn",
        ),
        "tools": ("tool", "drill", "saw", "hammer", "workbench", "compressor", "generator"),
    }
)

CATEGORY_BASE_WEIGHT: MappingProxyType[str, float] = MappingProxyType(
    {
        "furniture": 35,
        "appliances": 80,
        "electronics": 20,
        "exercise": 50,
        "musical": 40,
        "outdoor": 40,
        "tools": 15,
        DEFAULT_CATEGORY: 20,
    }
)

CATEGORY_BASE_DIMENSIONS: MappingProxyType[str, tuple[float, float, float]] = MappingProxyType(
    {
        "furniture": (80, 120, 60),
        "appliances": (150, 60, 60),
        "electronics": (50, 80, 30),
        "exercise": (120, 150, 70),
        "musical": (100, 130, 50),
        "outdoor": (100, 120, 80),
        "tools": (40, 60, 40),
        DEFAULT_CATEGORY: (80, 80, 60),
    }
)

# Canonical sizes for common item types, matched as whole words on the text.
ITEM_DIMENSIONS: MappingProxyType[str, tuple[float, float, float]] = MappingProxyType(
    {
        "table": (75, 140, 80),
        "chair": (90, 60, 50),
        "bed": (50, 200, 140),
        "sofa": (85, 180, 90),
        "cabinet": (180, 120, 60),
        "wardrobe": (200, 120, 60),
        "fridge": (180, 60, 65),
        "freezer": (140, 70, 85),
        "washing machine": (85, 60, 60),
        "dishwasher": (82, 60, 55),
        "tv": (70, 109, 30),
        "exercise bike": (140, 110, 50),
        "treadmill": (140, 180, 80),
        "piano": (110, 150, 60),
    }
)

# (words, weight multiplier, dimension multiplier); groups apply independently.
SIZE_MODIFIERS: tuple[tuple[tuple[str, ...], float, float], ...] = (
    (("large", "big", "huge", "massive", "giant"), 1.5, 1.4),
    (("small", "mini", "compact", "tiny", "little"), 0.6, 0.7),
    (("double", "king", "kingsize"), 1.4, 1.3),
)

# First material found sets the multiplier.
MATERIAL_MULTIPLIERS: tuple[tuple[tuple[str, ...], float], ...] = (
    (("metal", "steel", "iron", "cast iron"), 1.8),
    (("glass", "marble", "stone"), 1.4),
    (("wood", "wooden", "oak", "pine", "walnut"), 1.2),
    (("plastic", "lightweight", "foldable", "inflatable"), 0.7),
)

# Known heavy items: the estimate never drops below these floors.
WEIGHT_FLOORS: tuple[tuple[str, float], ...] = (
    ("grand piano", 400),
    ("hot tub", 400),
    ("pool table", 300),
    ("piano", 180),
    ("gun safe", 200),
    ("safe", 120),
    ("treadmill", 85),
    ("freezer", 65),
    ("exercise bike", 45),
)

MIN_WEIGHT_KG = 0.5
MAX_WEIGHT_KG = 1000.0
