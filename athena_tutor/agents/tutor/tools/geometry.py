"""Geometry tools: area, volume, perimeter, surface area, Pythagorean theorem.

Results are rounded to 2 decimal places; the steps keep the unrounded value.
A dimension that is missing or zero counts as not provided.
"""

import json
import math
from collections.abc import Callable
from typing import Any

from athena_tutor.agents.tutor.tools.parsing import math_tool
from athena_tutor.exceptions import MathToolError

# shape -> (required dimensions, formula text, calculation)
Formula = tuple[tuple[str, ...], str, Callable[..., float]]

AREA_FORMULAS: dict[str, Formula] = {
    "circle": (("radius",), "π × r²", lambda radius: math.pi * radius * radius),
    "rectangle": (("length", "width"), "length × width", lambda length, width: length * width),
    "square": (("side",), "side²", lambda side: side * side),
    "triangle": (("base", "height"), "½ × base × height", lambda base, height: 0.5 * base * height),
    "trapezoid": (
        ("base1", "base2", "height"),
        "½ × (base1 + base2) × height",
        lambda base1, base2, height: 0.5 * (base1 + base2) * height,
    ),
    "parallelogram": (("base", "height"), "base × height", lambda base, height: base * height),
}

_PRISM: Formula = (
    ("length", "width", "height"),
    "length × width × height",
    lambda length, width, height: length * width * height,
)

VOLUME_FORMULAS: dict[str, Formula] = {
    "cube": (("side",), "side³", lambda side: side**3),
    "sphere": (("radius",), "4/3 × π × r³", lambda radius: (4 / 3) * math.pi * radius**3),
    "cylinder": (
        ("radius", "height"),
        "π × r² × h",
        lambda radius, height: math.pi * radius**2 * height,
    ),
    "cone": (
        ("radius", "height"),
        "1/3 × π × r² × h",
        lambda radius, height: (1 / 3) * math.pi * radius**2 * height,
    ),
    "rectangular_prism": _PRISM,
    "box": _PRISM,
}

PERIMETER_FORMULAS: dict[str, Formula] = {
    "circle": (("radius",), "2 × π × r", lambda radius: 2 * math.pi * radius),
    "rectangle": (
        ("length", "width"),
        "2 × (length + width)",
        lambda length, width: 2 * (length + width),
    ),
    "square": (("side",), "4 × side", lambda side: 4 * side),
    "triangle": (
        ("side1", "side2", "side3"),
        "side1 + side2 + side3",
        lambda side1, side2, side3: side1 + side2 + side3,
    ),
}

_PRISM_SURFACE: Formula = (
    ("length", "width", "height"),
    "2 × (lw + lh + wh)",
    lambda length, width, height: 2 * (length * width + length * height + width * height),
)

SURFACE_AREA_FORMULAS: dict[str, Formula] = {
    "cube": (("side",), "6 × side²", lambda side: 6 * side * side),
    "sphere": (("radius",), "4 × π × r²", lambda radius: 4 * math.pi * radius * radius),
    "cylinder": (
        ("radius", "height"),
        "2 × π × r × (r + h)",
        lambda radius, height: 2 * math.pi * radius * (radius + height),
    ),
    "cone": (
        ("radius", "height"),
        "π × r × (r + l)",
        lambda radius, height: math.pi * radius * (radius + math.hypot(radius, height)),
    ),
    "rectangular_prism": _PRISM_SURFACE,
    "box": _PRISM_SURFACE,
}


def _measure(
    formulas: dict[str, Formula],
    label: str,
    key: str,
    shape: str,
    dimensions: dict[str, Any],
) -> dict[str, Any]:
    if not isinstance(shape, str) or shape.lower() not in formulas:
        raise MathToolError(f"Unsupported shape: {shape}")
    if not isinstance(dimensions, dict):
        raise MathToolError(f"Missing required dimensions for {shape}")

    required, formula, calculate = formulas[shape.lower()]
    values = {name: float(dimensions.get(name) or 0) for name in required}
    if not all(values.values()):
        raise MathToolError(f"Missing required dimensions for {shape}")

    value = calculate(**values)
    return {
        key: round(value, 2),
        "formula": formula,
        "steps": [
            f"Shape: {shape}",
            f"Dimensions: {json.dumps(dimensions)}",
            f"Formula: {formula}",
            f"{label}: {value}",
        ],
    }


@math_tool("calculate area")
def calculate_area(shape: str, dimensions: dict[str, Any]) -> dict[str, Any]:
    return _measure(AREA_FORMULAS, "Area", "area", shape, dimensions)


@math_tool("calculate volume")
def calculate_volume(shape: str, dimensions: dict[str, Any]) -> dict[str, Any]:
    return _measure(VOLUME_FORMULAS, "Volume", "volume", shape, dimensions)


@math_tool("calculate perimeter")
def calculate_perimeter(shape: str, dimensions: dict[str, Any]) -> dict[str, Any]:
    return _measure(PERIMETER_FORMULAS, "Perimeter", "perimeter", shape, dimensions)


@math_tool("calculate surface area")
def calculate_surface_area(shape: str, dimensions: dict[str, Any]) -> dict[str, Any]:
    return _measure(SURFACE_AREA_FORMULAS, "Surface Area", "surface_area", shape, dimensions)


@math_tool("solve Pythagorean theorem")
def solve_pythagorean_theorem(
    a: float | None = None,
    b: float | None = None,
    c: float | None = None,
) -> dict[str, Any]:
    """Find the missing side of a right triangle from exactly two known sides."""
    given = {name: float(value) for name, value in (("a", a), ("b", b), ("c", c)) if value}
    if len(given) != 2:
        raise MathToolError("Must provide exactly two of a, b, c")

    if "c" not in given:
        missing_side = math.hypot(given["a"], given["b"])
        formula = "c = √(a² + b²)"
    else:
        leg_name, leg = ("a", given["a"]) if "a" in given else ("b", given["b"])
        if given["c"] <= leg:
            raise MathToolError(f"Hypotenuse c must be longer than side {leg_name}")
        missing_side = math.sqrt(given["c"] ** 2 - leg**2)
        formula = "b = √(c² - a²)" if leg_name == "a" else "a = √(c² - b²)"

    return {
        "missing_side": round(missing_side, 2),
        "formula": formula,
        "steps": [
            f"Given: {json.dumps(given)}",
            f"Using Pythagorean theorem: {formula}",
            f"Missing side: {missing_side}",
        ],
    }
