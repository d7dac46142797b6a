import pytest

from derivegen.semantics.name_mangling import to_snake_case


@pytest.mark.parametrize(
    "name, expected",
    [
        ("ConstantValue", "constant_value"),
        ("I32", "i32"),
        ("VARIANT", "v_a_r_i_a_n_t"),
        ("Nil", "nil"),
        ("already_snake", "already_snake"),
        ("U8Array", "u8_array"),
        ("HTTPRequest", "h_t_t_p_request"),
        ("", ""),
    ],
)
def test_to_snake_case(name, expected):
    assert to_snake_case(name) == expected


def test_digits_stay_glued_to_preceding_letter():
    assert to_snake_case("F64") == "f64"
    assert to_snake_case("Vec2D") == "vec2_d"


def test_to_snake_case_is_deterministic():
    assert to_snake_case("ConstantValue") == to_snake_case("ConstantValue")


def test_uppercase_after_digit_starts_a_word():
    assert to_snake_case("U8Array") == "u8_array"
    assert to_snake_case("Op2Add") == "op2_add"
