"""Config loading and validation for the doubles round scheduler."""

from pathlib import Path

import yaml

from pairsched.models import BalancePolicy, GenerationConfig


class ConfigError(ValueError):
    """The tournament file is structurally unusable."""


def parse_players(value) -> list:
    """Parse the players entry.

    An int N expands to P1..PN; a list keeps its order, with names stripped
    and duplicates dropped (with a warning).
    """
    if isinstance(value, bool):
        raise ConfigError(f"players must be a list or a count, got {value!r}")
    if isinstance(value, int):
        return [f"P{i}" for i in range(1, value + 1)]
    if not isinstance(value, list):
        raise ConfigError(f"players must be a list or a count, got {value!r}")

    roster = []
    for p in value:
        if isinstance(p, dict):
            p = p.get("name", p.get("id"))
        if p is None:
            raise ConfigError("Player entry without a name")
        name = p.strip() if isinstance(p, str) else str(p)
        if not name:
            raise ConfigError("Player entry with an empty name")
        if name in roster:
            print(f"Warning: duplicate player {name} ignored")
            continue
        roster.append(name)
    return roster


def _optional_int(raw: dict, key: str) -> int | None:
    value = raw.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"generation.{key} must be an integer, got {value!r}")
    return value


def parse_generation(raw: dict | None) -> GenerationConfig:
    """Build a GenerationConfig from the optional `generation` section."""
    raw = raw or {}
    defaults = GenerationConfig()

    max_rounds = _optional_int(raw, "max_rounds")
    policy = raw.get("balance_policy", defaults.balance_policy.value)
    try:
        balance_policy = BalancePolicy.from_str(str(policy))
    except ValueError:
        raise ConfigError(
            f"generation.balance_policy must be 'priority' or 'strict', "
            f"got {policy!r}"
        ) from None

    return GenerationConfig(
        max_rounds=max_rounds if max_rounds is not None else defaults.max_rounds,
        target_games_per_player=_optional_int(raw, "target_games_per_player"),
        backtrack_budget=_optional_int(raw, "backtrack_budget"),
        allow_relaxed=bool(raw.get("allow_relaxed", defaults.allow_relaxed)),
        allow_resplits=bool(raw.get("allow_resplits", defaults.allow_resplits)),
        balance_policy=balance_policy,
    )


def load_config(path: str | Path) -> dict:
    """Load a tournament YAML file, returning structured data.

    Returns dict with:
    - tournament: {name, courts}
    - roster: list of player names, in file order
    - generation: GenerationConfig
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")
    if "players" not in raw:
        raise ConfigError(f"{path}: missing 'players'")

    tdata = raw.get("tournament") or {}
    courts = tdata.get("courts", 1)
    if isinstance(courts, bool) or not isinstance(courts, int):
        raise ConfigError(f"tournament.courts must be an integer, got {courts!r}")

    tournament = {
        "name": tdata.get("name", path.stem),
        "courts": courts,
    }

    roster = parse_players(raw["players"])
    generation = parse_generation(raw.get("generation"))

    # Soft checks; generate() reports these as invalid input
    if len(roster) < 4:
        print(f"Warning: only {len(roster)} players, at least 4 are needed")
    if courts > len(roster) // 4:
        print(f"Warning: {courts} courts but only enough players for "
              f"{len(roster) // 4}; extra courts stay empty")

    return {
        "tournament": tournament,
        "roster": roster,
        "generation": generation,
    }
