"""Identifier case conversion for generated method names.

Variant names are PascalCase (or occasionally SCREAMING); generated methods
are named `is_<variant>` / `as_<variant>` in snake_case.
"""


def to_snake_case(name: str) -> str:
    """Convert an identifier to snake_case.

    An underscore is inserted before an uppercase character only when the
    previous character was a letter or a digit. A digit following an
    uppercase letter stays glued to it:

        ConstantValue -> constant_value
        I32           -> i32     (not i_32)
        VARIANT       -> v_a_r_i_a_n_t
        U8Array       -> u8_array

    Args:
        name: Identifier to convert

    Returns:
        The snake_case identifier
    """
    out = []
    last_is_alnum = False

    for c in name:
        if c.isupper():
            if last_is_alnum:
                out.append('_')
            out.append(c.lower()[0])
        else:
            out.append(c)
        last_is_alnum = c.isalnum()

    return "".join(out)
