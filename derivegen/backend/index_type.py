"""Index type modules.

`generate_index_type` emits a submodule defining an opaque `Id` handle and a
`Generator` minting fresh ids, so that indices of different kinds (variables,
definitions, ...) cannot be mixed up with each other or with raw integers.

What happens when the counter overflows is an explicit choice
(`OverflowPolicy`). The default aborts, like every other runtime fault of
generated code; RECOVERABLE surfaces an `IdOverflow` error value instead.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from string import Template
from typing import Sequence

from lark import Token

from derivegen.internals.errors import raise_derive_error, runtime_message


class OverflowPolicy(str, Enum):
    ABORT = "abort"
    RECOVERABLE = "recoverable"


@dataclass(frozen=True)
class IndexTypeOptions:
    overflow_policy: OverflowPolicy = OverflowPolicy.ABORT
    id_vector_path: str = "crate::id_vector"  # Module providing Vector, ToUsize, Increment, Zero


_ID_DERIVES = """\
    #[derive(std::fmt::Debug, std::clone::Clone, std::marker::Copy,
             std::hash::Hash, std::cmp::PartialEq, std::cmp::Eq,
             std::cmp::PartialOrd, std::cmp::Ord)]"""

_PREAMBLE = Template("""\
pub mod $name {
$id_derives
    pub struct Id {
        index: usize,
    }

    #[derive(std::fmt::Debug, std::clone::Clone, std::marker::Copy)]
    pub struct Generator {
        counter: usize,
    }

    pub type Vector<T> = $vec::Vector<Id,T>;
""")

_ID_IMPL_ABORT = Template("""
    impl Id {
        pub fn new(init: usize) -> Id {
            Id { index: init }
        }

        pub fn is_zero(&self) -> bool {
            self.index == 0
        }

        pub fn incr(&mut self) {
            self.index = self.index.checked_add(1).unwrap_or_else(|| panic!("$overflow: {}", self.index));
        }
    }
""")

_ID_IMPL_RECOVERABLE = Template("""
    #[derive(std::fmt::Debug, std::clone::Clone, std::marker::Copy,
             std::cmp::PartialEq, std::cmp::Eq)]
    pub struct IdOverflow;

    impl std::fmt::Display for IdOverflow {
        fn fmt(&self, f: &mut std::fmt::Formatter<'_>) -> std::fmt::Result {
            f.write_str("$overflow")
        }
    }

    impl std::error::Error for IdOverflow {}

    impl Id {
        pub fn new(init: usize) -> Id {
            Id { index: init }
        }

        pub fn is_zero(&self) -> bool {
            self.index == 0
        }

        pub fn incr(&mut self) -> std::result::Result<(), IdOverflow> {
            self.index = self.index.checked_add(1).ok_or(IdOverflow)?;
            Ok(())
        }
    }
""")

_CONSTANTS_AND_TRAITS = Template("""
    pub static ZERO: Id = Id { index: 0 };
    pub static ONE: Id = Id { index: 1 };

    impl $vec::ToUsize for Id {
        fn to_usize(&self) -> usize {
            self.index
        }
    }

    impl $vec::Increment for Id {
        fn incr(&mut self) {
            $trait_incr
        }
    }

    impl $vec::Zero for Id {
        fn zero() -> Self {
            Id::new(0)
        }
    }

    impl std::fmt::Display for Id {
        fn fmt(&self, f: &mut std::fmt::Formatter<'_>) ->
          std::result::Result<(), std::fmt::Error> {
            f.write_str(self.index.to_string().as_str())
        }
    }
""")

_SERIALIZE_ABORT = Template("""
    impl serde::Serialize for Id {
        fn serialize<S>(&self, serializer: S) -> std::result::Result<S::Ok, S::Error>
        where
            S: serde::Serializer,
        {
            // usize is not necessarily contained in u32
            assert!(self.index <= std::u32::MAX as usize, "$range: {}", self.index);
            serializer.serialize_u32(self.index as u32)
        }
    }
""")

_SERIALIZE_RECOVERABLE = Template("""
    impl serde::Serialize for Id {
        fn serialize<S>(&self, serializer: S) -> std::result::Result<S::Ok, S::Error>
        where
            S: serde::Serializer,
        {
            // usize is not necessarily contained in u32
            if self.index > std::u32::MAX as usize {
                return Err(<S::Error as serde::ser::Error>::custom(format!("$range: {}", self.index)));
            }
            serializer.serialize_u32(self.index as u32)
        }
    }
""")

_GENERATOR_ABORT = Template("""
    impl Generator {
        pub fn new() -> Generator {
            Generator { counter: 0 }
        }

        pub fn fresh_id(&mut self) -> Id {
            let index = Id::new(self.counter);
            self.counter = self.counter.checked_add(1).unwrap_or_else(|| panic!("$overflow: {}", self.counter));
            index
        }
    }
}""")

_GENERATOR_RECOVERABLE = Template("""
    impl Generator {
        pub fn new() -> Generator {
            Generator { counter: 0 }
        }

        pub fn fresh_id(&mut self) -> std::result::Result<Id, IdOverflow> {
            let index = Id::new(self.counter);
            self.counter = self.counter.checked_add(1).ok_or(IdOverflow)?;
            Ok(index)
        }
    }
}""")


def generate_index_module(name: str, options: IndexTypeOptions = IndexTypeOptions()) -> str:
    """Render the index module for an already validated identifier."""
    subst = dict(
        name=name,
        id_derives=_ID_DERIVES,
        vec=options.id_vector_path,
        overflow=runtime_message("DG2002", module=name),
        range=runtime_message("DG2003", module=name),
    )

    if options.overflow_policy == OverflowPolicy.ABORT:
        id_impl, serialize, generator = _ID_IMPL_ABORT, _SERIALIZE_ABORT, _GENERATOR_ABORT
        subst["trait_incr"] = "self.incr();"
    else:
        id_impl, serialize, generator = _ID_IMPL_RECOVERABLE, _SERIALIZE_RECOVERABLE, _GENERATOR_RECOVERABLE
        # The id-vector trait cannot report failure
        subst["trait_incr"] = f'Id::incr(self).expect("{subst["overflow"]}");'

    parts = [_PREAMBLE, id_impl, _CONSTANTS_AND_TRAITS, serialize, generator]
    return "".join(t.substitute(subst) for t in parts)


def _describe(tokens: Sequence[Token]) -> str:
    if not tokens:
        return "no tokens"
    return ", ".join(f"{t.type} '{t}'" for t in tokens)


def generate_index_type(tokens: Sequence[Token],
                        options: IndexTypeOptions = IndexTypeOptions()) -> str:
    """Generate an index module from a macro invocation's tokens.

    Args:
        tokens: The invocation tokens; must be exactly one NAME token
        options: Overflow policy and id-vector module path

    Returns:
        Source text of the `pub mod <name> { ... }` submodule

    Raises:
        MalformedInvocation: On zero, several or non-identifier tokens
    """
    if len(tokens) != 1 or tokens[0].type != "NAME":
        raise_derive_error("DG1301", got=_describe(tokens))
    return generate_index_module(str(tokens[0]), options)
