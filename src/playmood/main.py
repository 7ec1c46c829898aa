"""Application entrypoint — run the engine on JSON documents from the shell."""

from __future__ import annotations

import argparse
import json
import random
import sys
from typing import Any

from pydantic import BaseModel, ValidationError

from playmood.config import get_settings
from playmood.engine import MoodPersonaEngine
from playmood.exceptions import PlaymoodError
from playmood.logger import setup_logging
from playmood.recommend.models import RecommendationRequest


def _read_document(path: str) -> Any:
    if path == "-":
        return json.load(sys.stdin)
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def _emit(model: BaseModel) -> None:
    print(model.model_dump_json(indent=2, exclude_none=True))


def _require_object(document: Any) -> dict[str, Any]:
    if not isinstance(document, dict):
        raise ValueError("expected a JSON object at the top level")
    return document


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="playmood",
        description="Mood- and persona-aware game recommendation engine.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for exploration sampling.")
    sub = parser.add_subparsers(dest="command")

    # ── mood ──────────────────────────────────────────────────
    mood_parser = sub.add_parser("mood", help="Infer the current mood from behaviour counters.")
    mood_parser.add_argument("input", help="JSON file with counters (and optional weights), or '-'.")

    # ── feedback ──────────────────────────────────────────────
    feedback_parser = sub.add_parser("feedback", help="Adjust a weight table from prediction feedback.")
    feedback_parser.add_argument("input", help="JSON file with 'weights' and 'feedback', or '-'.")

    # ── persona ───────────────────────────────────────────────
    persona_parser = sub.add_parser("persona", help="Synthesise a persona from library history.")
    persona_parser.add_argument("input", help="JSON file with ownedItems and sessions, or '-'.")

    # ── recommend ─────────────────────────────────────────────
    recommend_parser = sub.add_parser("recommend", help="Score a candidate pool.")
    recommend_parser.add_argument("input", help="JSON recommendation request, or '-'.")
    recommend_parser.add_argument("--debug", action="store_true", help="Include score breakdowns.")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    settings = get_settings()
    setup_logging(settings.log_level, json_output=settings.log_json)
    seed = args.seed if args.seed is not None else settings.random_seed
    engine = MoodPersonaEngine(settings, rng=random.Random(seed))

    try:
        document = _require_object(_read_document(args.input))

        if args.command == "mood":
            _emit(engine.analyze_mood(document, document.get("weights")))
        elif args.command == "feedback":
            weights = document.get("weights") or engine.inference.default_weights()
            _emit(engine.apply_feedback(weights, _require_object(document.get("feedback"))))
        elif args.command == "persona":
            owned = document.get("ownedItems", document.get("owned_items"))
            _emit(engine.synthesize_persona(owned, document.get("sessions")))
        elif args.command == "recommend":
            request = RecommendationRequest.model_validate(document)
            if args.debug:
                request.debug = True
            _emit(engine.recommend(request))
    except (PlaymoodError, ValidationError, ValueError, OSError) as exc:
        print(f"playmood: error: {exc}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
