import pytest

from derivegen.backend.index_type import (
    IndexTypeOptions, OverflowPolicy, generate_index_module, generate_index_type,
)
from derivegen.internals.errors import MalformedInvocation
from derivegen.internals.parser import lex_invocation


def test_fun_id_module_shape():
    text = generate_index_type(lex_invocation("FunId"))

    assert text.startswith("pub mod FunId {\n")
    assert text.endswith("}")
    assert "pub struct Id {\n        index: usize,\n    }" in text
    assert "pub struct Generator {\n        counter: usize,\n    }" in text
    assert "std::hash::Hash, std::cmp::PartialEq, std::cmp::Eq" in text
    assert "std::cmp::PartialOrd, std::cmp::Ord" in text


def test_constants_and_display():
    text = generate_index_module("FunId")

    assert "pub static ZERO: Id = Id { index: 0 };" in text
    assert "pub static ONE: Id = Id { index: 1 };" in text
    assert "impl std::fmt::Display for Id {" in text
    assert "f.write_str(self.index.to_string().as_str())" in text


def test_generator_starts_at_zero_and_returns_current_value():
    text = generate_index_module("FunId")

    assert "Generator { counter: 0 }" in text
    fresh = text[text.index("pub fn fresh_id"):]
    assert fresh.index("let index = Id::new(self.counter);") < fresh.index("checked_add(1)")


def test_abort_policy_panics_on_overflow():
    text = generate_index_module("FunId")

    assert "pub fn incr(&mut self) {" in text
    assert 'self.index.checked_add(1).unwrap_or_else(|| panic!("FunId::Id: index overflow: {}", self.index));' in text
    assert "pub fn fresh_id(&mut self) -> Id {" in text
    assert "IdOverflow" not in text


def test_abort_policy_asserts_32_bit_serialization():
    text = generate_index_module("FunId")

    assert "impl serde::Serialize for Id {" in text
    assert ('assert!(self.index <= std::u32::MAX as usize, '
            '"FunId::Id: index does not fit in 32 bits: {}", self.index);') in text
    assert "serializer.serialize_u32(self.index as u32)" in text


def test_recoverable_policy_returns_results():
    options = IndexTypeOptions(overflow_policy=OverflowPolicy.RECOVERABLE)
    text = generate_index_module("VarId", options)

    assert "pub struct IdOverflow;" in text
    assert "pub fn incr(&mut self) -> std::result::Result<(), IdOverflow> {" in text
    assert "pub fn fresh_id(&mut self) -> std::result::Result<Id, IdOverflow> {" in text
    assert "<S::Error as serde::ser::Error>::custom" in text
    assert "panic!" not in text
    assert 'Id::incr(self).expect("VarId::Id: index overflow");' in text


def test_id_vector_path_option():
    text = generate_index_module("FunId", IndexTypeOptions(id_vector_path="crate::ids"))

    assert "pub type Vector<T> = crate::ids::Vector<Id,T>;" in text
    assert "impl crate::ids::ToUsize for Id {" in text
    assert "impl crate::ids::Increment for Id {" in text
    assert "impl crate::ids::Zero for Id {" in text


def test_default_id_vector_path():
    assert "pub type Vector<T> = crate::id_vector::Vector<Id,T>;" in generate_index_module("FunId")


def test_generation_is_idempotent():
    assert generate_index_module("FunId") == generate_index_module("FunId")


@pytest.mark.parametrize("invocation", ["", "FunId VarId", "FunId,", "42", "'a", '"FunId"', "::"])
def test_malformed_invocations(invocation):
    with pytest.raises(MalformedInvocation) as excinfo:
        generate_index_type(lex_invocation(invocation))
    assert excinfo.value.code == "DG1301"


def test_malformed_invocation_describes_tokens():
    with pytest.raises(MalformedInvocation) as excinfo:
        generate_index_type(lex_invocation("A B"))
    assert "NAME 'A', NAME 'B'" in excinfo.value.message
