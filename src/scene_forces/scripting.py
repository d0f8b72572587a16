# MIT License (see LICENSE)
"""
Restricted evaluator for procedural animation scripts.

Animation configs may carry a short script instead of a built-in kind:

    mesh.rotation.y = t
    mesh.position.y = obj.position[1] + Math.sin(t * 2) * 0.5
    if Math.cos(t) > 0:
        mesh.material.opacity = 1
    else:
        mesh.material.opacity = 0.4

Scripts are parsed with the Python grammar but never handed to exec or
eval. The AST is checked against a whitelist at compile time and then
walked by AnimationScript.run():

- statements: assignment, augmented assignment, if/else, pass
- expressions: numbers, names, arithmetic, comparisons, and/or/not,
  conditional expressions, constant integer subscripts, attribute reads
  and calls of the whitelisted math functions
- writes: local names, mesh.position|rotation|scale.x|y|z and
  mesh.material.opacity|metalness|roughness

There are no loops, definitions or imports, and arithmetic only accepts
numbers (computed as floats), so run time and memory are bounded by
script size (MAX_SOURCE_LENGTH, MAX_NODES). Names must be bound, math
names, or assigned by an earlier statement.
"""
from __future__ import annotations
import ast
import math
import numbers
import operator
from functools import lru_cache
from types import SimpleNamespace
from typing import Any, Callable

MAX_SOURCE_LENGTH = 4096
MAX_NODES = 512


class ScriptError(ValueError):
    """Animation script rejected at compile time or failed while running."""


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


MATH_FUNCS: dict[str, Callable[..., float]] = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "asin": math.asin,
    "acos": math.acos,
    "atan": math.atan,
    "atan2": math.atan2,
    "sqrt": math.sqrt,
    "exp": math.exp,
    "log": math.log,
    "abs": abs,
    "min": min,
    "max": max,
    "floor": math.floor,
    "ceil": math.ceil,
    "pow": math.pow,
    "radians": math.radians,
    "degrees": math.degrees,
    "hypot": math.hypot,
    "clamp": _clamp,
}

MATH_CONSTANTS: dict[str, float] = {
    "pi": math.pi,
    "PI": math.pi,
    "tau": math.tau,
    "e": math.e,
    "E": math.e,
}

# `math.sin(t)` and `Math.sin(t)` both resolve here
MATH_NAMESPACE = SimpleNamespace(**MATH_FUNCS, **MATH_CONSTANTS)

BOUND_NAMES = frozenset({"mesh", "obj", "time", "t", "deltaTime", "delta_time", "math", "Math"})

WRITABLE_TRANSFORMS = frozenset({"position", "rotation", "scale"})
WRITABLE_AXES = frozenset({"x", "y", "z"})
WRITABLE_MATERIAL = frozenset({"opacity", "metalness", "roughness"})

def _number(value: Any) -> float:
    """Arithmetic operand as a float; anything else (str, list, bool, ...) is rejected."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ScriptError(f"Arithmetic needs numbers, got {type(value).__name__}")
    return float(value)


def _arith(op: Callable[[float, float], float]) -> Callable[[Any, Any], float]:
    # floats only: no sequence repetition, no unbounded integer growth
    return lambda a, b: op(_number(a), _number(b))


_BIN_OPS: dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: _arith(operator.add),
    ast.Sub: _arith(operator.sub),
    ast.Mult: _arith(operator.mul),
    ast.Div: _arith(operator.truediv),
    ast.FloorDiv: _arith(operator.floordiv),
    ast.Mod: _arith(operator.mod),
    ast.Pow: _arith(math.pow),
}

_UNARY_OPS: dict[type, Callable[[Any], Any]] = {
    ast.UAdd: lambda a: +_number(a),
    ast.USub: lambda a: -_number(a),
    ast.Not: operator.not_,
}

_CMP_OPS: dict[type, Callable[[Any, Any], bool]] = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
}

ALLOWED_NODES = frozenset({
    ast.Module, ast.Assign, ast.AugAssign, ast.If, ast.Pass,
    ast.BinOp, ast.UnaryOp, ast.BoolOp, ast.Compare, ast.IfExp,
    ast.Constant, ast.Name, ast.Attribute, ast.Subscript, ast.Call,
    ast.Load, ast.Store, ast.And, ast.Or,
    *_BIN_OPS, *_UNARY_OPS, *_CMP_OPS,
})


def _is_math_call(func: ast.expr) -> bool:
    if isinstance(func, ast.Name):
        return func.id in MATH_FUNCS
    return (
        isinstance(func, ast.Attribute)
        and isinstance(func.value, ast.Name)
        and func.value.id in ("math", "Math")
        and func.attr in MATH_FUNCS
    )


def _check_target(target: ast.expr) -> None:
    """Only locals and whitelisted mesh channels may be written."""
    if isinstance(target, ast.Name):
        if target.id in BOUND_NAMES or target.id in MATH_FUNCS or target.id in MATH_CONSTANTS:
            raise ScriptError(f"Cannot assign to reserved name '{target.id}'")
        return
    if isinstance(target, ast.Attribute) and isinstance(target.value, ast.Attribute):
        group = target.value
        if isinstance(group.value, ast.Name) and group.value.id == "mesh":
            if group.attr in WRITABLE_TRANSFORMS and target.attr in WRITABLE_AXES:
                return
            if group.attr == "material" and target.attr in WRITABLE_MATERIAL:
                return
    raise ScriptError(f"Assignment target not allowed: {ast.unparse(target)}")


def _validate(tree: ast.Module) -> None:
    count = 0
    for node in ast.walk(tree):
        count += 1
        if count > MAX_NODES:
            raise ScriptError(f"Animation script exceeds {MAX_NODES} syntax nodes")
        if type(node) not in ALLOWED_NODES:
            raise ScriptError(f"Unsupported syntax in animation script: {type(node).__name__}")
        if isinstance(node, ast.Name) and node.id.startswith("_"):
            raise ScriptError(f"Name not allowed: {node.id}")
        if isinstance(node, ast.Attribute) and node.attr.startswith("_"):
            raise ScriptError(f"Attribute not allowed: {node.attr}")
        if isinstance(node, ast.Constant) and (
            isinstance(node.value, bool) or not isinstance(node.value, (int, float))
        ):
            raise ScriptError(f"Only numeric literals are allowed, got {node.value!r}")
        if isinstance(node, ast.Subscript):
            index = node.slice
            if not (isinstance(index, ast.Constant) and type(index.value) is int):
                raise ScriptError("Subscripts must be integer literals")
        if isinstance(node, ast.Call):
            if not _is_math_call(node.func):
                raise ScriptError(f"Function not allowed: {ast.unparse(node.func)}")
            if node.keywords:
                raise ScriptError("Keyword arguments are not allowed")
        if isinstance(node, ast.Assign):
            for target in node.targets:
                _check_target(target)
        if isinstance(node, ast.AugAssign):
            _check_target(node.target)
    _check_names(tree.body, set(BOUND_NAMES) | set(MATH_FUNCS) | set(MATH_CONSTANTS))


def _check_reads(node: ast.AST, known: set[str]) -> None:
    for child in ast.walk(node):
        if isinstance(child, ast.Name) and isinstance(child.ctx, ast.Load) and child.id not in known:
            raise ScriptError(f"Unknown name '{child.id}'")


def _check_names(body: list[ast.stmt], known: set[str]) -> None:
    """Every name read must be bound, a math name, or assigned by an earlier statement."""
    for stmt in body:
        if isinstance(stmt, ast.Assign):
            _check_reads(stmt.value, known)
            known.update(t.id for t in stmt.targets if isinstance(t, ast.Name))
        elif isinstance(stmt, ast.AugAssign):
            _check_reads(stmt.value, known)
            if isinstance(stmt.target, ast.Name) and stmt.target.id not in known:
                raise ScriptError(f"Unknown name '{stmt.target.id}'")
        elif isinstance(stmt, ast.If):
            _check_reads(stmt.test, known)
            # set in either branch; run() rejects reads after the untaken one
            then_known, else_known = set(known), set(known)
            _check_names(stmt.body, then_known)
            _check_names(stmt.orelse, else_known)
            known.update(then_known, else_known)


class AnimationScript:
    """
    A validated animation script.

    Build instances with compile_animation(); run() once per frame.
    """

    def __init__(self, source: str, tree: ast.Module) -> None:
        self.source = source
        self._body = tree.body

    def run(self, mesh: Any, obj: Any, time: float, t: float, delta_time: float) -> dict[str, Any]:
        """
        Execute against a render handle.

        Returns the local variables the script defined (handy in tests).
        Any failure surfaces as an exception for the caller to handle.
        """
        env: dict[str, Any] = {
            "mesh": mesh,
            "obj": obj,
            "time": time,
            "t": t,
            "deltaTime": delta_time,
            "delta_time": delta_time,
            "math": MATH_NAMESPACE,
            "Math": MATH_NAMESPACE,
            **MATH_CONSTANTS,
        }
        reserved = set(env)
        self._exec_block(self._body, env)
        return {k: v for k, v in env.items() if k not in reserved}

    # -------------------------------------------------------------------------
    # statements

    def _exec_block(self, body: list[ast.stmt], env: dict[str, Any]) -> None:
        for stmt in body:
            if isinstance(stmt, ast.Assign):
                value = self._eval(stmt.value, env)
                for target in stmt.targets:
                    self._store(target, value, env)
            elif isinstance(stmt, ast.AugAssign):
                current = self._eval(_as_load(stmt.target), env)
                self._store(stmt.target, _BIN_OPS[type(stmt.op)](current, self._eval(stmt.value, env)), env)
            elif isinstance(stmt, ast.If):
                branch = stmt.body if self._eval(stmt.test, env) else stmt.orelse
                self._exec_block(branch, env)
            # ast.Pass: nothing

    def _store(self, target: ast.expr, value: Any, env: dict[str, Any]) -> None:
        if isinstance(target, ast.Name):
            env[target.id] = value
            return
        # mesh.<group>.<attr>, validated at compile time
        group = getattr(env["mesh"], target.value.attr)
        setattr(group, target.attr, float(value))

    # -------------------------------------------------------------------------
    # expressions

    def _eval(self, node: ast.expr, env: dict[str, Any]) -> Any:
        if isinstance(node, ast.Constant):
            return node.value
        if isinstance(node, ast.Name):
            if node.id in env:
                return env[node.id]
            if node.id in MATH_FUNCS:
                return MATH_FUNCS[node.id]
            raise ScriptError(f"Unknown name '{node.id}'")
        if isinstance(node, ast.Attribute):
            return getattr(self._eval(node.value, env), node.attr)
        if isinstance(node, ast.Subscript):
            return self._eval(node.value, env)[node.slice.value]
        if isinstance(node, ast.BinOp):
            return _BIN_OPS[type(node.op)](self._eval(node.left, env), self._eval(node.right, env))
        if isinstance(node, ast.UnaryOp):
            return _UNARY_OPS[type(node.op)](self._eval(node.operand, env))
        if isinstance(node, ast.BoolOp):
            if isinstance(node.op, ast.And):
                result = True
                for v in node.values:
                    result = self._eval(v, env)
                    if not result:
                        return result
                return result
            result = False
            for v in node.values:
                result = self._eval(v, env)
                if result:
                    return result
            return result
        if isinstance(node, ast.Compare):
            left = self._eval(node.left, env)
            for op, comparator in zip(node.ops, node.comparators):
                right = self._eval(comparator, env)
                if not _CMP_OPS[type(op)](left, right):
                    return False
                left = right
            return True
        if isinstance(node, ast.IfExp):
            return self._eval(node.body if self._eval(node.test, env) else node.orelse, env)
        if isinstance(node, ast.Call):
            func = self._eval(node.func, env)
            return func(*(self._eval(a, env) for a in node.args))
        raise ScriptError(f"Unsupported expression: {type(node).__name__}")


def _as_load(target: ast.expr) -> ast.expr:
    """Re-read an augmented-assignment target as an expression."""
    if isinstance(target, ast.Name):
        return ast.Name(id=target.id, ctx=ast.Load())
    return ast.Attribute(value=target.value, attr=target.attr, ctx=ast.Load())


@lru_cache(maxsize=256)
def compile_animation(source: str) -> AnimationScript:
    """
    Parse and validate an animation script.

    Raises:
        ScriptError: Source too long, not parseable, or uses syntax,
                     names or targets outside the allowed subset.
    """
    if len(source) > MAX_SOURCE_LENGTH:
        raise ScriptError(f"Animation script longer than {MAX_SOURCE_LENGTH} characters")
    try:
        tree = ast.parse(source.strip(), mode="exec")
    except SyntaxError as e:
        raise ScriptError(f"Animation script is not valid: {e.msg} (line {e.lineno})") from e
    _validate(tree)
    return AnimationScript(source, tree)
