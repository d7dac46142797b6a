from __future__ import annotations
import sys, platform

from derivegen import __version__ as app_ver, __dev__ as is_dev


def _get_versions() -> dict[str, str]:
    # lark version (best-effort)
    try:
        import lark
        lark_ver = getattr(lark, "__version__", "unknown")
    except ImportError:
        lark_ver = "unknown"

    return {
        "app": app_ver,
        "python": platform.python_version(),
        "lark": lark_ver,
    }


def version_line() -> str:
    v = _get_versions()
    dev_marker = " (dev)" if is_dev else ""
    return f"derivegen {v['app']}{dev_marker} • Python {v['python']} • lark {v['lark']}"


def print_banner(stream=None) -> None:
    stream = stream or sys.stdout

    # Only use ANSI styling on an interactive terminal
    use_ansi = getattr(stream, "isatty", lambda: False)()
    BOLD, RESET = ("\x1b[1m", "\x1b[0m") if use_ansi else ("", "")

    print(f"{BOLD}{version_line()}{RESET}", file=stream)
