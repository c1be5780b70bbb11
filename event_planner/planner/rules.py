from __future__ import annotations

from typing import Any, Callable, Mapping

from event_planner.planner.errors import CatalogError

_OPERATORS = frozenset({"exists", "=", "!=", "in", ">", ">=", "<", "<="})


def is_rule_satisfied(rule: Mapping[str, Any] | None, facts: Mapping[str, Any]) -> bool:
    """Evaluate an optional ``when`` clause; a missing clause always holds."""
    if rule is None:
        return True
    return eval_rule(rule, facts)


def eval_rule(rule: Any, facts: Mapping[str, Any]) -> bool:
    if not isinstance(rule, Mapping):
        raise CatalogError("rule must be an object")

    if "all" in rule:
        return all(eval_rule(clause, facts) for clause in _clauses(rule, "all"))

    if "any" in rule:
        return any(eval_rule(clause, facts) for clause in _clauses(rule, "any"))

    if "not" in rule:
        return not eval_rule(rule["not"], facts)

    return eval_predicate(rule, facts)


def eval_predicate(pred: Mapping[str, Any], facts: Mapping[str, Any]) -> bool:
    fact_key, op = _predicate_shape(pred)

    if op == "exists":
        return fact_key in facts
    if fact_key not in facts:
        return False

    left = facts[fact_key]
    right = pred.get("value")

    if op == "=":
        return left == right
    if op == "!=":
        return left != right
    if op == "in":
        return left in right if isinstance(right, list) else False
    if op == ">":
        return _compare_numeric(left, right, lambda a, b: a > b)
    if op == ">=":
        return _compare_numeric(left, right, lambda a, b: a >= b)
    if op == "<":
        return _compare_numeric(left, right, lambda a, b: a < b)
    return _compare_numeric(left, right, lambda a, b: a <= b)


def validate_rule(rule: Any, context: str = "rule") -> None:
    """Check rule shape without evaluating it."""
    if not isinstance(rule, Mapping):
        raise CatalogError(f"{context} must be an object")
    if "all" in rule or "any" in rule:
        key = "all" if "all" in rule else "any"
        for idx, clause in enumerate(_clauses(rule, key)):
            validate_rule(clause, f"{context}.{key}[{idx}]")
        return
    if "not" in rule:
        validate_rule(rule["not"], f"{context}.not")
        return
    _predicate_shape(rule)


def _clauses(rule: Mapping[str, Any], key: str) -> list[Any]:
    clauses = rule[key]
    if not isinstance(clauses, list):
        raise CatalogError(f"rule.{key} must be a list")
    return clauses


def _predicate_shape(pred: Mapping[str, Any]) -> tuple[str, str]:
    fact_key = pred.get("fact")
    op = pred.get("op")
    if not isinstance(fact_key, str) or not isinstance(op, str):
        raise CatalogError(f"invalid predicate shape: {dict(pred)!r}")
    if op not in _OPERATORS:
        raise CatalogError(f"unsupported predicate op: {op}")
    return fact_key, op


def _compare_numeric(left: Any, right: Any, fn: Callable[[float, float], bool]) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return False
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return bool(fn(float(left), float(right)))
    return False
