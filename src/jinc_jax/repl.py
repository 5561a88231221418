"""Read-eval-print loop: one expression per input line, until end of input."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable
from typing import TextIO

from .errors import JError, classify_runtime_exception
from .evaluator import EvaluationEnvironment, evaluate_with_errors
from .render import render


def run(
    lines: Iterable[str],
    *,
    out: TextIO,
    err: TextIO,
    env: EvaluationEnvironment | None = None,
) -> int:
    """Evaluate ``lines`` in one environment, printing each result.

    Blank lines are skipped. A failing line reports ``error: ...`` on ``err``
    and leaves the variables assigned by earlier lines intact.
    """
    env = EvaluationEnvironment() if env is None else env
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        try:
            value = evaluate_with_errors(line, env=env)
            if value is None:
                continue
            text = render(value)
        except RecursionError as exc:
            # Rendering a box nested deeper than the recursion limit.
            print(f"error: {classify_runtime_exception(exc)}", file=err)
            continue
        except JError as exc:
            print(f"error: {exc}", file=err)
            continue
        out.write(text)
        out.write("\n")
        out.flush()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="jinc-jax", description=__doc__)
    parser.add_argument(
        "path",
        nargs="?",
        help="file to read expressions from (default: standard input)",
    )
    args = parser.parse_args(argv)

    if args.path is None:
        return run(sys.stdin, out=sys.stdout, err=sys.stderr)
    with open(args.path, encoding="utf-8") as handle:
        return run(handle, out=sys.stdout, err=sys.stderr)
