#!/usr/bin/env python3
"""
repl_demo.py

Small host program around the calcexpr evaluator.

What it does:
1) Builds an environment with the builtins and binds the variable r = 2.
2) Prints the constants, variables and functions tables.
3) Evaluates "sqrt(2  )" and "pi*r*r".
4) Optional: evaluates --expr arguments, or reads expressions line by line with --interactive.

Usage examples:
    python playground/repl_demo.py
    python playground/repl_demo.py --expr "r*r + 1" --r 3
    python playground/repl_demo.py --interactive
"""

import argparse
import math
import sys

from calcexpr import Cell, Environment, VariableBinding, parse


def build_environment(r_value=2.0):
    env = Environment.with_builtins()
    r = Cell(r_value)
    env.append_variables([VariableBinding("r", r)])
    return env, r


def print_tables(env, out=sys.stdout):
    print("constants:", file=out)
    for c in env.constants:
        print(c.name, file=out)
    print("variables:", file=out)
    for v in env.variables:
        print(v.name, file=out)
    print("functions:", file=out)
    for f in env.functions:
        print(f"{f.name}/{f.arity}", file=out)


def run_expr(env, src, out=sys.stdout):
    parsed = parse(src)
    if not parsed.ok:
        print(f"{src!r}: parse error", file=out)
        return math.nan
    value = env.evaluate(parsed)
    parsed.release()
    print(f"value: {value:f}", file=out)
    return value


def main(argv=None):
    ap = argparse.ArgumentParser(description="calcexpr demo")
    ap.add_argument("--expr", action="append", default=[], help="expression to evaluate (repeatable)")
    ap.add_argument("--r", type=float, default=2.0, help="value bound to the variable r")
    ap.add_argument("--interactive", action="store_true", help="read expressions from stdin")
    ap.add_argument("--quiet", action="store_true", help="do not print the tables")
    args = ap.parse_args(argv)

    env, _ = build_environment(args.r)
    if not args.quiet:
        print_tables(env)

    for src in args.expr or ["sqrt(2  )", "pi*r*r"]:
        run_expr(env, src)

    if args.interactive:
        for line in sys.stdin:
            line = line.strip()
            if line in ("quit", "exit"):
                break
            if line:
                run_expr(env, line)

    env.release()
    print("end")
    return 0


if __name__ == "__main__":
    sys.exit(main())
