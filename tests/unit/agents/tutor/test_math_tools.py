"""Unit tests for the algebra, geometry, calculus and arithmetic tools."""

import pytest
import sympy
from sympy.core.function import AppliedUndef

from athena_tutor.agents.tutor.tools import algebra, arithmetic, calculus, geometry
from athena_tutor.agents.tutor.tools.parsing import (
    format_expr,
    normalize_notation,
    parse_equation,
    parse_expression,
    to_number,
)
from athena_tutor.exceptions import MathToolError


class TestParsing:
    """Tests for the shared parsing helpers."""

    def test_implicit_multiplication_and_caret(self):
        """Student notation parses to the same expression as explicit notation."""
        assert parse_expression("2x^2 + 3x") == parse_expression("2*x**2 + 3*x")

    def test_unicode_notation(self):
        """Superscripts and operator symbols are normalised."""
        assert normalize_notation("x² × 3 ÷ 2 − 1") == "x^2 * 3 / 2 - 1"

    def test_equation_zero_form(self):
        """lhs = rhs becomes lhs - rhs."""
        assert parse_equation("2x + 5 = 13") == parse_expression("2x - 8")

    def test_too_many_equals(self):
        """Chained equations are rejected."""
        with pytest.raises(MathToolError):
            parse_equation("x = 1 = 2")

    @pytest.mark.parametrize(
        "text",
        ["__import__('os').system('id')", "x; import os", "lambda: 1", "", "   "],
    )
    def test_rejects_non_math_input(self, text):
        """Anything beyond math notation is refused before parsing."""
        with pytest.raises(MathToolError):
            parse_expression(text)

    def test_rejects_long_input(self):
        """Oversized input is refused."""
        with pytest.raises(MathToolError, match="longer than"):
            parse_expression("1+" * 300 + "1")

    def test_format_expr(self):
        """Powers are rendered with a caret."""
        assert format_expr(parse_expression("x^3")) == "x^3"

    def test_to_number_prefers_int(self):
        """Whole floats become ints."""
        assert to_number(12.0) == 12
        assert isinstance(to_number(12.0), int)
        assert to_number(2.5) == 2.5

    def test_to_number_rejects_overflow(self):
        """A value beyond float range is an error, not infinity."""
        with pytest.raises(MathToolError, match="too large to represent"):
            to_number(sympy.Float("1e400"))

    @pytest.mark.parametrize(
        "text", ["9^9^9", "7^7^8", "2^100000", "x^5000", "((10^999)^999)^999"]
    )
    def test_rejects_oversized_powers(self, text):
        """Powers too large to compute are refused before evaluation."""
        with pytest.raises(MathToolError, match="too large to evaluate"):
            parse_expression(text)

    def test_large_power_within_limits(self):
        """Big but bounded powers still evaluate exactly."""
        assert parse_expression("2^100") == sympy.Integer(2) ** 100
        assert parse_expression("(10^999)^2") == sympy.Integer(10) ** 1998

    @pytest.mark.parametrize("name", ["preview", "factorint", "var", "open"])
    def test_unknown_names_are_inert(self, name):
        """Calls to names outside the math namespace become undefined functions."""
        expr = parse_expression(f"{name}(x)")

        assert isinstance(expr, sympy.Expr)
        assert expr.atoms(AppliedUndef)

    def test_math_functions_available(self):
        """Common functions and constants evaluate as usual."""
        assert parse_expression("sin(pi/2)") == 1
        assert parse_expression("sqrt(16)") == 4
        assert parse_expression("ln(E)") == 1

    def test_library_names_are_symbols(self):
        """Other SymPy exports are ordinary symbols."""
        assert parse_expression("N + S") == sympy.Symbol("N") + sympy.Symbol("S")

    def test_rejects_attribute_access(self):
        with pytest.raises(MathToolError, match="Unsupported characters"):
            parse_expression("pi.evalf(100000)")


class TestAlgebra:
    """Tests for algebra tools."""

    def test_solve_linear_equation(self):
        """The solution is rendered as an assignment."""
        result = algebra.solve_linear_equation("2x + 5 = 13", "x")

        assert result["solution"] == "x = 4"
        assert result["steps"][-1] == "Solution: x = 4"

    def test_solve_linear_other_variable(self):
        """Any single-letter variable can be solved for."""
        assert algebra.solve_linear_equation("3y - 7 = 14", "y")["solution"] == "y = 7"

    def test_solve_linear_no_solution(self):
        """An inconsistent equation is an error."""
        with pytest.raises(MathToolError, match="No solution"):
            algebra.solve_linear_equation("x + 1 = x + 2", "x")

    def test_solve_quadratic_equation(self):
        """Both roots and the discriminant are reported."""
        result = algebra.solve_quadratic_equation("x^2 + 5x + 6 = 0", "x")

        assert set(result["solutions"]) == {"-3", "-2"}
        assert result["discriminant"] == 1

    def test_factor_expression(self):
        assert algebra.factor_expression("x^2 + 5x + 6")["factored"] == "(x + 2)*(x + 3)"

    def test_expand_expression(self):
        assert algebra.expand_expression("(x + 2)(x + 3)")["expanded"] == "x^2 + 5*x + 6"

    def test_simplify_expression(self):
        assert algebra.simplify_expression("2x + 3x")["simplified"] == "5*x"

    def test_solve_system_of_equations(self):
        """Each variable maps to its value."""
        result = algebra.solve_system_of_equations(["2x + y = 5", "x - y = 1"], ["x", "y"])

        assert result["solutions"] == {"x": "2", "y": "1"}

    def test_solve_system_inconsistent(self):
        """Parallel lines have no solution."""
        with pytest.raises(MathToolError, match="System has no solution"):
            algebra.solve_system_of_equations(["x + y = 1", "x + y = 2"], ["x", "y"])

    def test_solve_system_requires_input(self):
        with pytest.raises(MathToolError, match="at least one equation"):
            algebra.solve_system_of_equations([], ["x"])

    def test_invalid_variable(self):
        """A variable name that is not an identifier is rejected."""
        with pytest.raises(MathToolError, match="Invalid variable name"):
            algebra.solve_linear_equation("2x = 4", "2")


class TestGeometry:
    """Tests for geometry tools."""

    def test_circle_area(self):
        """Results are rounded to two places and carry the formula."""
        result = geometry.calculate_area("circle", {"radius": 2})

        assert result["area"] == 12.57
        assert result["formula"] == "π × r²"

    def test_rectangle_area(self):
        assert geometry.calculate_area("rectangle", {"length": 3, "width": 4})["area"] == 12

    def test_shape_name_case_insensitive(self):
        assert geometry.calculate_area("Square", {"side": 5})["area"] == 25

    def test_unsupported_shape(self):
        with pytest.raises(MathToolError, match="Unsupported shape: hexagon"):
            geometry.calculate_area("hexagon", {"side": 1})

    @pytest.mark.parametrize("dimensions", [{}, {"radius": 0}, {"diameter": 4}])
    def test_missing_dimensions(self, dimensions):
        """Missing or zero dimensions are reported."""
        with pytest.raises(MathToolError, match="Missing required dimensions for circle"):
            geometry.calculate_area("circle", dimensions)

    def test_cube_volume(self):
        assert geometry.calculate_volume("cube", {"side": 3})["volume"] == 27

    def test_box_is_rectangular_prism(self):
        """box is accepted as another name for a rectangular prism."""
        dimensions = {"length": 2, "width": 3, "height": 4}

        box = geometry.calculate_volume("box", dimensions)
        prism = geometry.calculate_volume("rectangular_prism", dimensions)

        assert box["volume"] == prism["volume"] == 24
        assert box["formula"] == prism["formula"]

    def test_triangle_perimeter(self):
        result = geometry.calculate_perimeter("triangle", {"side1": 3, "side2": 4, "side3": 5})

        assert result["perimeter"] == 12

    def test_cone_surface_area(self):
        """Cone surface area includes the slant height."""
        result = geometry.calculate_surface_area("cone", {"radius": 3, "height": 4})

        assert result["surface_area"] == 75.4

    @pytest.mark.parametrize(
        "sides,expected",
        [({"a": 3, "b": 4}, 5.0), ({"a": 3, "c": 5}, 4.0), ({"b": 5, "c": 13}, 12.0)],
    )
    def test_pythagorean(self, sides, expected):
        """The missing side is computed from the other two."""
        assert geometry.solve_pythagorean_theorem(**sides)["missing_side"] == expected

    def test_pythagorean_needs_two_sides(self):
        with pytest.raises(MathToolError, match="exactly two"):
            geometry.solve_pythagorean_theorem(a=3)

    def test_pythagorean_hypotenuse_too_short(self):
        with pytest.raises(MathToolError, match="must be longer"):
            geometry.solve_pythagorean_theorem(a=5, c=3)


class TestCalculus:
    """Tests for calculus tools."""

    def test_derivative(self):
        assert calculus.calculate_derivative("x^2 + 3x", "x")["derivative"] == "2*x + 3"

    def test_indefinite_integral(self):
        result = calculus.calculate_integral("x^2", "x")

        assert result["integral"] == "x^3/3"
        assert "value" not in result

    def test_definite_integral(self):
        result = calculus.calculate_integral("x^2", "x", lower=0, upper=3)

        assert result["integral"] == "9"
        assert result["value"] == 9

    def test_removable_discontinuity_limit(self):
        assert calculus.calculate_limit("(x^2 - 4)/(x - 2)", "x", 2)["limit"] == 4

    def test_limit_at_infinity_is_text(self):
        """A non-finite limit is returned as text."""
        assert calculus.calculate_limit("1/x", "x", 0)["limit"] == "oo"


class TestArithmetic:
    """Tests for arithmetic tools."""

    @pytest.mark.parametrize(
        "expression,expected",
        [("100 - 36", 64), ("2^3", 8), ("2 + 3 * 4", 14), ("10 / 4", 2.5), ("6 ÷ 3", 2)],
    )
    def test_evaluate_expression(self, expression, expected):
        assert arithmetic.evaluate_expression(expression)["result"] == expected

    def test_evaluate_symbolic(self):
        """An expression with free variables has no numeric value."""
        with pytest.raises(MathToolError, match="could not be evaluated"):
            arithmetic.evaluate_expression("x + 1")

    def test_evaluate_syntax_error(self):
        """Malformed input is reported as a failed evaluation."""
        with pytest.raises(MathToolError, match="Failed to evaluate expression"):
            arithmetic.evaluate_expression("2 +* 3")

    def test_evaluate_beyond_float_range(self):
        """A result no float can hold is reported instead of returned as infinity."""
        with pytest.raises(MathToolError, match="too large to represent"):
            arithmetic.evaluate_expression("10^400")

    def test_percentage_from_part(self):
        assert arithmetic.calculate_percentage(whole=200, part=25)["result"] == 12.5

    def test_part_from_percentage(self):
        assert arithmetic.calculate_percentage(whole=80, percent=15)["result"] == 12

    def test_percentage_needs_part_or_percent(self):
        with pytest.raises(MathToolError, match="Must provide either"):
            arithmetic.calculate_percentage(whole=80)

    def test_percentage_of_zero_whole(self):
        with pytest.raises(MathToolError, match="non-zero"):
            arithmetic.calculate_percentage(whole=0, part=5)
