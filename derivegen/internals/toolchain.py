"""Toolchain channel lookup from a `rust-toolchain` file.

The file is TOML:

    [toolchain]
    channel = "nightly-2022-01-29"
    components = ["rustc-dev", "llvm-tools-preview"]
"""
from __future__ import annotations

import tomllib
from pathlib import Path

from derivegen.internals.errors import raise_derive_error

TOOLCHAIN_FILE = "rust-toolchain"


def read_toolchain_channel(path: Path | None = None) -> str:
    """Return the channel of the toolchain file as `+<channel>` (cargo's override syntax).

    Raises:
        ToolchainError: If the file is missing, not TOML, or has no channel
    """
    if path is None:
        path = Path.cwd() / TOOLCHAIN_FILE
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise_derive_error("DG1501", path=str(path), reason=e.strerror or str(e))
    except tomllib.TOMLDecodeError as e:
        raise_derive_error("DG1501", path=str(path), reason=str(e))

    channel = data.get("toolchain", {}).get("channel")
    if not isinstance(channel, str) or not channel:
        raise_derive_error("DG1501", path=str(path), reason="missing [toolchain] channel")
    return f"+{channel}"
