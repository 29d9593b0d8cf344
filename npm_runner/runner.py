# npm_runner/runner.py
"""
Canonical subprocess runner for npm_runner.

Goals:
- One implementation behind every process launch.
- Cross-platform binary resolution (argv[0] may be a bare name or a path).
- Safe decoding on Windows when output is captured:
    encoding="utf-8", errors="replace"
- Timeouts return a structured result (no uncaught TimeoutExpired).
- Launch failures return a structured result; the caller decides which error
  to raise from it.

Return shape (always a dict):
  {
    "returncode": int | None,
    "stdout": str,
    "stderr": str,
    "timed_out": bool,
    "missing_executable": bool,
    "launch_error": bool,
    "resolved_path": str | None,
    "elapsed_sec": float,
    "ok": bool,
    "error": str | None,
  }
"""

from __future__ import annotations

import os
import shutil
import sys
import time
from typing import Any, Dict, List, Optional, Sequence


def _is_windows() -> bool:
    return sys.platform.startswith("win")


def resolve_binary(exe: str, search_path: Optional[str] = None) -> Optional[str]:
    """
    Resolve an executable name or path to an absolute path, or None.

    `search_path` is an os.pathsep-separated list of directories searched instead
    of PATH (shutil.which semantics).
    """
    if not exe:
        return None

    # If it looks like a path, prefer it; otherwise use PATH resolution.
    looks_like_path = (os.path.sep in exe) or (os.path.altsep is not None and os.path.altsep in exe) or (_is_windows() and ":" in exe)
    if looks_like_path:
        abs_path = os.path.abspath(exe)
        if os.path.isfile(abs_path):
            return abs_path
        # Might still be resolvable (e.g., "bin/npm" relative to a search dir)
        resolved = shutil.which(exe, path=search_path)
    else:
        resolved = shutil.which(exe, path=search_path)

    return os.path.abspath(resolved) if resolved else None


def _normalize_output(val: Any) -> str:
    if val is None:
        return ""
    if isinstance(val, str):
        return val
    if isinstance(val, (bytes, bytearray)):
        return val.decode("utf-8", errors="replace")
    return str(val)


def run_command(
    cmd: Sequence[str],
    *,
    cwd: Optional[str] = None,
    timeout: Optional[float] = None,
    env: Optional[Dict[str, str]] = None,
    capture_output: bool = False,
    subprocess_module=None,
) -> Dict[str, Any]:
    """
    Run an argv list and return a structured result. Never raises for launch
    failures or timeouts; those are reported through the result dict.

    Output streams straight to the parent's stdout/stderr unless
    capture_output=True. `subprocess_module` is injectable for tests
    (defaults to stdlib subprocess).
    """
    if subprocess_module is None:
        import subprocess as subprocess_module  # type: ignore

    t0 = time.time()

    result: Dict[str, Any] = {
        "returncode": None,
        "stdout": "",
        "stderr": "",
        "timed_out": False,
        "missing_executable": False,
        "launch_error": False,
        "resolved_path": None,
        "elapsed_sec": 0.0,
        "ok": False,
        "error": None,
    }

    # Build env
    proc_env = os.environ.copy()
    if env:
        proc_env.update(env)

    argv: List[str] = [str(x) for x in cmd]
    if not argv:
        result["launch_error"] = True
        result["error"] = "empty command provided"
        return result

    resolved = resolve_binary(argv[0])
    if not resolved:
        result["missing_executable"] = True
        result["error"] = f"executable not found: {argv[0]}"
        result["elapsed_sec"] = round(time.time() - t0, 6)
        return result
    result["resolved_path"] = resolved
    argv[0] = resolved

    popen_kwargs: Dict[str, Any] = {
        "cwd": cwd,
        "env": proc_env,
        "shell": False,
    }
    if capture_output:
        popen_kwargs["stdout"] = subprocess_module.PIPE
        popen_kwargs["stderr"] = subprocess_module.PIPE
        # Avoid cp1252 decode crashes on Windows
        popen_kwargs["text"] = True
        popen_kwargs["encoding"] = "utf-8"
        popen_kwargs["errors"] = "replace"

    try:
        proc = subprocess_module.Popen(argv, **popen_kwargs)
    except OSError as e:
        # Permission denied, missing cwd, or the path vanished after resolution.
        result["launch_error"] = True
        result["error"] = str(e)
        result["elapsed_sec"] = round(time.time() - t0, 6)
        return result

    try:
        out, err = proc.communicate(timeout=timeout)
        result["returncode"] = proc.returncode
        if capture_output:
            result["stdout"] = _normalize_output(out)
            result["stderr"] = _normalize_output(err)
    except subprocess_module.TimeoutExpired:
        result["timed_out"] = True
        proc.kill()
        out, err = proc.communicate()
        if capture_output:
            result["stdout"] = _normalize_output(out)
            result["stderr"] = _normalize_output(err)
        result["returncode"] = None
        result["error"] = "timeout"
    finally:
        result["elapsed_sec"] = round(time.time() - t0, 6)

    result["ok"] = (result["returncode"] == 0) and not result["timed_out"]
    return result


__all__ = ["run_command", "resolve_binary"]
