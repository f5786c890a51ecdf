#!/usr/bin/env python3

import os
import subprocess
import sys


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def _run_example(path: str, *, input_data: bytes, args: list, timeout_s: float = 30.0) -> dict:
    cmd = [sys.executable, "-m", "bfrepl", *args, path]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [os.path.join(ROOT, "src"), env.get("PYTHONPATH")]))
    try:
        p = subprocess.run(
            cmd,
            input=input_data,
            capture_output=True,
            cwd=ROOT,
            env=env,
            timeout=timeout_s,
        )
        return {
            "ok": p.returncode == 0,
            "returncode": p.returncode,
            "stdout": p.stdout,
            "stderr": p.stderr.decode("utf-8", errors="replace"),
            "timeout": False,
        }
    except subprocess.TimeoutExpired as e:
        return {
            "ok": False,
            "returncode": None,
            "stdout": e.stdout or b"",
            "stderr": (e.stderr or b"").decode("utf-8", errors="replace") + "\n[TIMEOUT]",
            "timeout": True,
        }


def main() -> int:
    examples = [
        {
            "file": "examples/00_hello_world.bf",
            "input": b"",
            "args": [],
            "check": lambda out: out == b"Hello World!\n",
            "expect": "exactly equals 'Hello World!\\n'",
        },
        {
            "file": "examples/01_cat.bf",
            "input": b"echo me",
            "args": ["--eof", "zero"],
            "check": lambda out: out == b"echo me",
            "expect": "exactly equals the input",
        },
        {
            "file": "examples/02_add_digits.bf",
            "input": b"34",
            "args": [],
            "check": lambda out: out == b"7",
            "expect": "exactly equals '7'",
        },
        {
            "file": "examples/03_digits.bf",
            "input": b"",
            "args": [],
            "check": lambda out: out == b"0123456789\n",
            "expect": "exactly equals '0123456789\\n'",
        },
    ]

    print("=== Brainfuck Examples Verification ===")

    any_fail = False
    for ex in examples:
        r = _run_example(ex["file"], input_data=ex["input"], args=ex["args"])

        passed = r["ok"] and ex["check"](r["stdout"])
        status = "PASS" if passed else "FAIL"
        print(f"\n[{status}] {ex['file']}")

        if passed:
            continue

        any_fail = True
        print(f"Expected: {ex['expect']}")
        print(f"Return code: {r['returncode']}  Timeout: {r['timeout']}")
        print("--- program output ---")
        print(repr(r["stdout"][:2000]))
        print("--- stderr ---")
        print(r["stderr"][:2000])

    if any_fail:
        print("\nSome examples FAILED.")
        return 1

    print("\nAll examples passed (output checks).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
