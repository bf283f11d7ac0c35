from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from triadtcg.engine.types import CardDatabase, CardDefinition, StatValue


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _parse_stats(raw: object) -> tuple[StatValue, StatValue, StatValue, StatValue]:
    if not isinstance(raw, list) or len(raw) != 4:
        raise ContentError("stats must be a list of 4 values")
    out: list[StatValue] = []
    for v in raw:
        # numeric strings are kept raw; the engine coerces at comparison time
        if isinstance(v, bool) or not isinstance(v, (int, float, str)):
            raise ContentError(f"Invalid stat value: {v!r}")
        out.append(v)
    return (out[0], out[1], out[2], out[3])


def parse_cards(raw: object) -> CardDatabase:
    if not isinstance(raw, dict):
        raise ContentError("cards.json must be an object")
    raw_cards = raw.get("cards")
    if not isinstance(raw_cards, list):
        raise ContentError("cards.json.cards must be a list")

    cards: dict[str, CardDefinition] = {}
    for item in raw_cards:
        if not isinstance(item, dict):
            continue
        card = CardDefinition(
            id=_require_str(item, "id"),
            name=_require_str(item, "name"),
            rarity=_require_str(item, "rarity"),  # type: ignore[arg-type]
            stats=_parse_stats(item.get("stats")),
            art_path=_require_str(item, "art_path"),
        )
        if card.id in cards:
            raise ContentError(f"Duplicate card id: {card.id}")
        cards[card.id] = card
    return CardDatabase(cards=cards)


def starter_hands(
    cards: CardDatabase, rng: random.Random, hand_size: int = 5
) -> tuple[list[str], list[str]]:
    """Deal a player hand and an enemy hand of card ids; duplicates are allowed."""
    ids = sorted(cards.all_ids())
    if not ids:
        raise ContentError("Card catalog is empty")
    return [rng.choice(ids) for _ in range(hand_size)], [rng.choice(ids) for _ in range(hand_size)]


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_cards_db(self) -> CardDatabase:
        cards_path = self._data_dir / "cards.json"
        schema = _load_json(self._schema_dir / "cards.schema.json")
        raw = _load_json(cards_path)
        validate_json(raw, schema, context=str(cards_path))
        return parse_cards(raw)

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_cards_db()
