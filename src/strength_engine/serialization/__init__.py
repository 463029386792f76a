"""Serialization module: parse raw records and export generated plans."""

from strength_engine.serialization.catalog import (
    parse_catalog,
    parse_check_in,
    parse_constraints,
    parse_goals,
    parse_history,
    parse_profile,
    parse_template,
)
from strength_engine.serialization.plan import plan_to_dict, result_to_dict, result_to_json_string

__all__ = [
    "parse_catalog",
    "parse_check_in",
    "parse_constraints",
    "parse_goals",
    "parse_history",
    "parse_profile",
    "parse_template",
    "plan_to_dict",
    "result_to_dict",
    "result_to_json_string",
]
