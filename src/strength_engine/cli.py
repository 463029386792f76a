"""Command-line entry point: generate one session from a JSON request file.

Usage:
    python -m strength_engine.cli plan.json --intent push --seed 7
    python -m strength_engine.cli plan.json --template --strict

The request file holds ``catalog`` and optional ``history``, ``check_in``,
``profile``, ``goals``, ``constraints``, ``pinned_ids``, ``avoid_ids``,
``body_part_targets``, ``mesocycle`` ({"week", "length"}), ``set_overrides``
({exercise_id: sets}), ``cold_start_stage`` (0-2), ``now`` and ``template`` keys.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from strength_engine.config import EngineConfig, log_level_from_env
from strength_engine.engine import GenerationRequest, WorkoutEngine
from strength_engine.exceptions import CatalogError, StrengthEngineError
from strength_engine.models.enums import GenerationMode, SessionIntent
from strength_engine.serialization import (
    parse_catalog,
    parse_check_in,
    parse_constraints,
    parse_goals,
    parse_history,
    parse_profile,
    parse_template,
    result_to_json_string,
)
from strength_engine.serialization.catalog import (
    parse_cold_start_stage,
    parse_datetime,
    parse_enum,
    parse_mesocycle,
    parse_set_overrides,
)

logger = logging.getLogger(__name__)


def _load_document(path: Path) -> dict:
    """Load the JSON request file from disk."""
    with open(path) as f:
        document = json.load(f)
    if not isinstance(document, dict):
        raise CatalogError(f"{path} must contain a JSON object")
    return document


def build_request(document: dict, intent: SessionIntent, seed: int | None, mode: GenerationMode) -> GenerationRequest:
    """Turn a parsed request document into a GenerationRequest."""
    now = document.get("now")
    return GenerationRequest(
        profile=parse_profile(document.get("profile")),
        catalog=parse_catalog(
            document.get("catalog") or (),
            allow_unknown_body_parts=bool(document.get("allow_unknown_body_parts", False)),
        ),
        intent=intent,
        goals=parse_goals(document.get("goals")),
        constraints=parse_constraints(document.get("constraints")),
        history=parse_history(document.get("history") or ()),
        check_in=parse_check_in(document.get("check_in")),
        mesocycle=parse_mesocycle(document.get("mesocycle")),
        pinned_ids=tuple(document.get("pinned_ids") or ()),
        avoid_ids=frozenset(document.get("avoid_ids") or ()),
        body_part_targets=frozenset(document.get("body_part_targets") or ()),
        set_overrides=parse_set_overrides(document.get("set_overrides")),
        cold_start_stage=parse_cold_start_stage(document.get("cold_start_stage")),
        seed=seed,
        mode=mode,
        now=parse_datetime(now, "now") if now else None,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a strength training session")
    parser.add_argument("request", type=Path, help="Path to the JSON request file")
    parser.add_argument(
        "--intent",
        default=SessionIntent.FULL_BODY.value,
        choices=[i.value for i in SessionIntent],
        help="Session intent (default: full_body)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Tie-break seed")
    parser.add_argument(
        "--template",
        action="store_true",
        help="Prescribe the request file's template instead of selecting exercises",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Never substitute template exercises automatically",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=log_level_from_env(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        document = _load_document(args.request)
        mode = GenerationMode.STRICT if args.strict else GenerationMode.FLEXIBLE
        request = build_request(document, parse_enum(SessionIntent, args.intent, "intent"), args.seed, mode)
        engine = WorkoutEngine(config=EngineConfig.from_env())
        if args.template:
            result = engine.generate_from_template(
                request, parse_template(document.get("template") or ())
            )
        else:
            result = engine.generate(request)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Could not read %s: %s", args.request, exc)
        return 1
    except (StrengthEngineError, ValueError) as exc:
        logger.error("Invalid request: %s", exc)
        return 2

    print(result_to_json_string(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
