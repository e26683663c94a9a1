"""OpenAI function-calling schemas for the math tools.

Sent with every chat round so the model can call any tool on its own.
"""

from typing import Any


def _function(
    name: str,
    description: str,
    properties: dict[str, Any],
    required: list[str] | None = None,
) -> dict[str, Any]:
    parameters: dict[str, Any] = {"type": "object", "properties": properties}
    if required is not None:
        parameters["required"] = required
    return {
        "type": "function",
        "function": {"name": name, "description": description, "parameters": parameters},
    }


def _number(description: str) -> dict[str, str]:
    return {"type": "number", "description": description}


def _string(description: str) -> dict[str, str]:
    return {"type": "string", "description": description}


_SOLID_DIMENSIONS = {
    "type": "object",
    "description": (
        "Required dimensions. Cube: {side}. Sphere: {radius}. Cylinder: {radius, height}. "
        "Cone: {radius, height}. Rectangular prism: {length, width, height}"
    ),
    "properties": {
        "side": _number("Side length (for cube)"),
        "radius": _number("Radius (for sphere, cylinder, cone)"),
        "height": _number("Height (for cylinder, cone, rectangular prism)"),
        "length": _number("Length (for rectangular prism)"),
        "width": _number("Width (for rectangular prism)"),
    },
}

_SOLID_SHAPES = ["cube", "sphere", "cylinder", "cone", "rectangular_prism"]


# =============================================================================
# Algebra
# =============================================================================

ALGEBRA_SCHEMAS = [
    _function(
        "solve_linear_equation",
        "Solve a linear equation (e.g., 2x + 5 = 13). Use when student provides a linear "
        "equation or asks to solve for a variable in a linear equation.",
        {
            "equation": _string(
                "The linear equation to solve (e.g., '2x + 5 = 13' or '3y - 7 = 14')"
            ),
            "variable": _string("The variable to solve for (e.g., 'x', 'y', 'z')"),
        },
        ["equation", "variable"],
    ),
    _function(
        "solve_quadratic_equation",
        "Solve a quadratic equation (e.g., x² + 5x + 6 = 0). Use when student provides a "
        "quadratic equation or asks to solve for a variable in a quadratic equation.",
        {
            "equation": _string("The quadratic equation to solve (e.g., 'x^2 + 5x + 6 = 0')"),
            "variable": _string("The variable to solve for (usually 'x')"),
        },
        ["equation", "variable"],
    ),
    _function(
        "factor_expression",
        "Factor an algebraic expression (e.g., x² + 5x + 6 → (x+2)(x+3)). Use when student "
        "asks to factor an expression or when checking if factoring is correct.",
        {"expression": _string("The algebraic expression to factor (e.g., 'x^2 + 5x + 6')")},
        ["expression"],
    ),
    _function(
        "expand_expression",
        "Expand an algebraic expression (e.g., (x+2)(x+3) → x² + 5x + 6). Use when student "
        "asks to expand an expression or when checking if expansion is correct.",
        {"expression": _string("The algebraic expression to expand (e.g., '(x+2)(x+3)')")},
        ["expression"],
    ),
    _function(
        "simplify_expression",
        "Simplify an algebraic expression (e.g., 2x + 3x → 5x). Use when student asks to "
        "simplify an expression or when checking if simplification is correct.",
        {
            "expression": _string(
                "The algebraic expression to simplify (e.g., '2x + 3x' or '2(x + 3)')"
            )
        },
        ["expression"],
    ),
    _function(
        "solve_system_of_equations",
        "Solve a system of linear equations (e.g., 2x + y = 5, x - y = 1). Use when student "
        "provides multiple equations with multiple variables.",
        {
            "equations": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Array of equations to solve (e.g., ['2x + y = 5', 'x - y = 1'])",
            },
            "variables": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Array of variables to solve for (e.g., ['x', 'y'])",
            },
        },
        ["equations", "variables"],
    ),
]

# =============================================================================
# Geometry
# =============================================================================

GEOMETRY_SCHEMAS = [
    _function(
        "calculate_area",
        "Calculate the area of a geometric shape. Use when student asks about area of circle, "
        "rectangle, triangle, square, trapezoid, or parallelogram.",
        {
            "shape": {
                "type": "string",
                "enum": ["circle", "rectangle", "triangle", "square", "trapezoid", "parallelogram"],
                "description": "The shape to calculate area for",
            },
            "dimensions": {
                "type": "object",
                "description": (
                    "Required dimensions for the shape. Circle: {radius}. Rectangle: "
                    "{length, width}. Triangle: {base, height}. Square: {side}. Trapezoid: "
                    "{base1, base2, height}. Parallelogram: {base, height}"
                ),
                "properties": {
                    "radius": _number("Radius (for circle)"),
                    "length": _number("Length (for rectangle)"),
                    "width": _number("Width (for rectangle)"),
                    "base": _number("Base (for triangle, parallelogram)"),
                    "height": _number("Height (for triangle, trapezoid, parallelogram)"),
                    "side": _number("Side length (for square)"),
                    "base1": _number("First base (for trapezoid)"),
                    "base2": _number("Second base (for trapezoid)"),
                },
            },
        },
        ["shape", "dimensions"],
    ),
    _function(
        "calculate_volume",
        "Calculate the volume of a 3D shape. Use when student asks about volume of cube, "
        "sphere, cylinder, cone, or rectangular prism.",
        {
            "shape": {
                "type": "string",
                "enum": _SOLID_SHAPES,
                "description": "The 3D shape to calculate volume for",
            },
            "dimensions": _SOLID_DIMENSIONS,
        },
        ["shape", "dimensions"],
    ),
    _function(
        "calculate_perimeter",
        "Calculate the perimeter or circumference of a shape. Use when student asks about "
        "perimeter of circle, rectangle, triangle, or square.",
        {
            "shape": {
                "type": "string",
                "enum": ["circle", "rectangle", "triangle", "square"],
                "description": "The shape to calculate perimeter for",
            },
            "dimensions": {
                "type": "object",
                "description": (
                    "Required dimensions. Circle: {radius}. Rectangle: {length, width}. "
                    "Triangle: {side1, side2, side3}. Square: {side}"
                ),
                "properties": {
                    "radius": _number("Radius (for circle)"),
                    "length": _number("Length (for rectangle)"),
                    "width": _number("Width (for rectangle)"),
                    "side": _number("Side length (for square)"),
                    "side1": _number("First side (for triangle)"),
                    "side2": _number("Second side (for triangle)"),
                    "side3": _number("Third side (for triangle)"),
                },
            },
        },
        ["shape", "dimensions"],
    ),
    _function(
        "calculate_surface_area",
        "Calculate the surface area of a 3D shape. Use when student asks about surface area "
        "of cube, sphere, cylinder, cone, or rectangular prism.",
        {
            "shape": {
                "type": "string",
                "enum": _SOLID_SHAPES,
                "description": "The 3D shape to calculate surface area for",
            },
            "dimensions": _SOLID_DIMENSIONS,
        },
        ["shape", "dimensions"],
    ),
    _function(
        "solve_pythagorean_theorem",
        "Solve using Pythagorean theorem (a² + b² = c²). Use when student asks about right "
        "triangles, finding missing side, or mentions Pythagorean theorem.",
        {
            "a": _number("Length of side a (optional if unknown)"),
            "b": _number("Length of side b (optional if unknown)"),
            "c": _number(
                "Length of hypotenuse c (optional if unknown). Must provide exactly two of a, b, c."
            ),
        },
    ),
]

# =============================================================================
# Calculus
# =============================================================================

CALCULUS_SCHEMAS = [
    _function(
        "calculate_derivative",
        "Calculate the derivative of a function. Use when student asks about derivatives, "
        "d/dx, or differentiation.",
        {
            "expression": _string(
                "The mathematical expression to differentiate (e.g., 'x^2 + 3*x')"
            ),
            "variable": _string(
                "The variable to differentiate with respect to (usually 'x')"
            ),
        },
        ["expression", "variable"],
    ),
    _function(
        "calculate_integral",
        "Calculate the integral (indefinite or definite) of a function. Use when student asks "
        "about integrals, ∫, or integration.",
        {
            "expression": _string("The mathematical expression to integrate (e.g., 'x^2')"),
            "variable": _string("The variable of integration (usually 'x')"),
            "lower": _number(
                "Lower bound for definite integral (optional, omit for indefinite integral)"
            ),
            "upper": _number(
                "Upper bound for definite integral (optional, omit for indefinite integral)"
            ),
        },
        ["expression", "variable"],
    ),
    _function(
        "calculate_limit",
        "Calculate the limit of a function as a variable approaches a value. Use when student "
        "asks about limits or lim notation.",
        {
            "expression": _string("The mathematical expression (e.g., '(x^2-4)/(x-2)')"),
            "variable": _string("The variable approaching a value (usually 'x')"),
            "approaches": _number("The value the variable approaches (e.g., 2 for lim x→2)"),
        },
        ["expression", "variable", "approaches"],
    ),
]

# =============================================================================
# Arithmetic
# =============================================================================

ARITHMETIC_SCHEMAS = [
    _function(
        "evaluate_expression",
        "MANDATORY: Evaluate an arithmetic or algebraic expression. Use ALWAYS when student "
        "provides ANY arithmetic calculation (e.g., '100 - 36', '5 * 7', '2^3') or when you "
        "need to check if a calculation is correct. Examples: If student says '100 - 36 = 74', "
        "call evaluate_expression('100 - 36') to verify the result is 64, not 74. NEVER trust "
        "your own calculations - ALWAYS use this tool.",
        {
            "expression": _string(
                "The expression to evaluate (e.g., '100 - 36', '5 * 7', '2^3', '2 + 3 * 4')"
            )
        },
        ["expression"],
    ),
    _function(
        "calculate_percentage",
        "Calculate percentage or part from percentage. Use when student asks about "
        "percentages, percent of, or part/whole calculations.",
        {
            "part": _number("The part value (optional if calculating part from percent)"),
            "whole": _number("The whole value (always required)"),
            "percent": _number(
                "The percentage value (optional if calculating percent from part)"
            ),
        },
        ["whole"],
    ),
]

# =============================================================================
# Validation
# =============================================================================

VALIDATION_SCHEMAS = [
    _function(
        "validate_answer",
        "MANDATORY: Validate a student's answer against the correct solution. Use ALWAYS when "
        "student provides ANY numerical answer or calculation result. This is CRITICAL for "
        "accurate feedback. Examples: If student says '100 - 36 = 74', call validate_answer "
        "with problem='100 - 36', student_answer='74', problem_type='arithmetic'. If student "
        "says 'x = 4', call validate_answer with the original problem. NEVER proceed without "
        "validating.",
        {
            "problem": _string(
                "The original problem or expression to validate (e.g., '2x + 5 = 13', "
                "'x^2 + 5x + 6 = 0', '100 - 36', '5 * 7')"
            ),
            "student_answer": _string(
                "The student's answer or result (e.g., 'x = 4', 'x = -2, x = -3', '74', '35')"
            ),
            "problem_type": {
                "type": "string",
                "enum": [
                    "algebra",
                    "linear_equation",
                    "quadratic_equation",
                    "arithmetic",
                    "expression",
                    "geometry",
                    "calculus",
                ],
                "description": (
                    "The type of problem for validation. Use 'arithmetic' or 'expression' for "
                    "arithmetic calculations like '100 - 36', '5 * 7', etc."
                ),
            },
        },
        ["problem", "student_answer", "problem_type"],
    ),
    _function(
        "check_step",
        "Validate an intermediate step in problem solving. Use when student provides a step "
        "and you need to check if it's mathematically correct.",
        {
            "previous_step": _string(
                "The previous step in the solution (e.g., '2x + 5 = 13')"
            ),
            "current_step": _string("The current step to validate (e.g., '2x = 8')"),
            "operation": _string(
                "The operation performed (e.g., 'subtract', 'divide', 'factor')"
            ),
        },
        ["previous_step", "current_step", "operation"],
    ),
]

MATH_TOOL_SCHEMAS: list[dict[str, Any]] = [
    *ALGEBRA_SCHEMAS,
    *GEOMETRY_SCHEMAS,
    *CALCULUS_SCHEMAS,
    *ARITHMETIC_SCHEMAS,
    *VALIDATION_SCHEMAS,
]
