#!/usr/bin/env python3
"""
Replay a series of observed ratios through the dynamic fee poke cycle.

Each ratio is one trigger. The tool starts from a fresh pool state for the
chosen pool type and prints one JSON object per cycle (post-state + effects),
which makes it easy to eyeball streak throttling and EMA drift.

Input format (--ratios):
  - a JSON array of integers, or
  - one integer per line (``#`` comments and blank lines ignored).
  Integers may use ``<m>e<k>`` notation, e.g. ``13e17`` for 1.3.

Example:
  python3 tools/fee_replay.py --pool-type standard --initial-fee 3000 \
      --initial-target 1e18 --ratios ratios.txt
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from poolfee.config import ConfigError, PoolType, load_fee_config, parse_int
from poolfee.core.dynamic_fee.errors import DynamicFeeError
from poolfee.core.dynamic_fee.types import PoolTypeParams
from poolfee.core.poke import initial_pool_state, poke
from poolfee.state.fee_state import PoolFeeState, state_to_dict

logger = logging.getLogger("fee_replay")


def load_ratios(path: Path) -> list[int]:
    text = path.read_text(encoding="utf-8")
    stripped = text.lstrip()
    if stripped.startswith("["):
        raw: Any = json.loads(stripped)
        if not isinstance(raw, list):
            raise ConfigError("ratios JSON must be an array")
        return [parse_int(f"ratios[{i}]", v) for i, v in enumerate(raw)]
    ratios: list[int] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.split("#", 1)[0].strip()
        if not line:
            continue
        ratios.append(parse_int(f"line {lineno}", line))
    return ratios


def replay(
    state: PoolFeeState, ratios: list[int], *, params: PoolTypeParams, global_max_adj_rate: int
) -> tuple[list[dict[str, Any]], str | None]:
    """Poke once per ratio. Stops at the first rejection and returns its reason."""
    rows: list[dict[str, Any]] = []
    for i, ratio in enumerate(ratios):
        res = poke(state, ratio, params, global_max_adj_rate)
        if not res.accepted or res.state is None or res.effects is None:
            logger.error("cycle %d rejected: %s", i, res.rejection)
            return rows, res.rejection
        state = res.state
        rows.append({"cycle": i, "state": state_to_dict(state), "effects": asdict(res.effects)})
    return rows, None


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Replay observed ratios through the dynamic fee engine.")
    p.add_argument("--ratios", required=True, type=Path, help="Path to ratios (JSON array or one per line)")
    p.add_argument("--pool-type", default=PoolType.STANDARD.value, choices=[t.value for t in PoolType])
    p.add_argument("--config", type=Path, default=None, help="Fee config YAML (default: $POOLFEE_CONFIG or packaged)")
    p.add_argument("--initial-fee", required=True, help="Starting fee (hundredths of a bip)")
    p.add_argument("--initial-target", required=True, help="Starting target ratio (1e18 == 1.0)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every fee update to stderr")
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_fee_config(args.config)
        params = config.params_for(args.pool_type)
        state = initial_pool_state(
            parse_int("initial_fee", args.initial_fee),
            parse_int("initial_target", args.initial_target),
            params,
        )
        ratios = load_ratios(args.ratios)
    except (OSError, json.JSONDecodeError, DynamicFeeError) as exc:
        print(f"fee_replay error: {exc}", file=sys.stderr)
        return 2

    rows, rejection = replay(state, ratios, params=params, global_max_adj_rate=config.global_max_adj_rate)
    for row in rows:
        print(json.dumps(row, sort_keys=True))
    return 1 if rejection is not None else 0


if __name__ == "__main__":
    raise SystemExit(main())
