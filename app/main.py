
import logging
import math
from typing import Dict, List

import numpy as np
import pandas as pd
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

import calcexpr.functions  # noqa: F401  (registers builtins)
from calcexpr.analyzer import analyze, unresolved
from calcexpr.ast_utils import ast_to_pretty, ast_to_source, ast_to_table
from calcexpr.environment import Cell, Environment, VariableBinding, builtin_environment
from calcexpr.errors import ParseError
from calcexpr.eval import evaluate
from calcexpr.parser import parse
from calcexpr.registry import ConstSpec, list_constants, list_functions

from app.config import AppConfig, load_config

CONFIG: AppConfig = load_config()
logging.basicConfig(level=CONFIG.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="calcexpr playground")


class ParseBody(BaseModel):
    expr: str

class EvalBody(BaseModel):
    expr: str
    variables: Dict[str, float] = {}
    constants: Dict[str, float] = {}

class SeriesBody(BaseModel):
    expr: str
    columns: Dict[str, List[float]]


def _json_number(x: float):
    # JSON has no NaN or infinity
    if math.isnan(x):
        return "nan"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    return x


def _parse(expr: str):
    if len(expr) > CONFIG.max_expression_length:
        raise HTTPException(
            status_code=413,
            detail=f"expression longer than {CONFIG.max_expression_length} characters",
        )
    try:
        return parse(expr, strict=True)
    except ParseError as e:
        raise HTTPException(status_code=400, detail=str(e))


def build_env(variables: Dict[str, float] = None, constants: Dict[str, float] = None):
    """Request environment: request variables, then request constants, then config, then builtins."""
    env = Environment()
    env.append_variables([VariableBinding(name, Cell(value)) for name, value in (variables or {}).items()])
    env.append_constants([ConstSpec(name, value) for name, value in (constants or {}).items()])
    env.append_constants([ConstSpec(name, value) for name, value in CONFIG.constants.items()])
    if CONFIG.include_builtins:
        env.extend(builtin_environment())
    return env


@app.get("/functions")
def functions():
    return {"functions": list_functions(), "constants": list_constants()}

@app.post("/parse")
def parse_endpoint(body: ParseBody):
    parsed = _parse(body.expr)
    meta = analyze(parsed.root)
    env = build_env()
    missing = unresolved(parsed.root, env)
    return {
        "ok": True,
        "names": sorted(meta.names),
        "calls": {k: sorted(v) for k, v in meta.calls.items()},
        "unresolved": {
            "names": sorted(missing.names),
            "calls": {k: sorted(v) for k, v in missing.calls.items()},
        },
    }

@app.post("/ast")
def ast_view(body: ParseBody):
    parsed = _parse(body.expr)
    return {
        "ok": True,
        "pretty": ast_to_pretty(parsed.root),
        "nodes": ast_to_table(parsed.root),
        "source": ast_to_source(parsed.root),
    }

@app.post("/evaluate")
def evaluate_endpoint(body: EvalBody):
    parsed = _parse(body.expr)
    env = build_env(body.variables, body.constants)
    result = evaluate(parsed, env)
    logger.info("evaluated %r -> %r", body.expr, result)
    return {"expr": body.expr, "result": _json_number(result)}

@app.post("/evaluate_series")
def evaluate_series_endpoint(body: SeriesBody):
    from engine.row_loop import evaluate_rows
    from engine.vectorized import evaluate_columns

    lengths = {len(v) for v in body.columns.values()}
    if len(lengths) > 1:
        raise HTTPException(status_code=400, detail="columns must all have the same length")
    parsed = _parse(body.expr)
    frame = pd.DataFrame(body.columns)
    env = build_env()
    try:
        out = evaluate_columns(parsed, frame, env)
    except Exception:
        logger.info("vectorized evaluation failed for %r, falling back to row loop", body.expr, exc_info=True)
        out = evaluate_rows(parsed, frame, env)
    return {
        "expr": body.expr,
        "values": [_json_number(float(v)) for v in np.asarray(out, dtype=float)],
    }
