"""Load, validate, and hot-reload the cycle prediction policy.

The policy lives in ``cycle_config.yaml`` alongside this module.  It is loaded
once and cached.  Call ``reload_cycle_policy()`` to re-read from disk after an
admin update.

Usage::

    from cyclecast.cycle.config_loader import get_cycle_policy

    policy = get_cycle_policy()
    policy.luteal_phase_days     # 14
    policy.fertile_window_days   # 6
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from cyclecast.cycle import constants

logger = logging.getLogger("cyclecast.cycle.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "cycle_config.yaml"


class ConfigValidationError(ValueError):
    """Raised when cycle_config.yaml or a CyclePolicy fails validation."""


@dataclass(frozen=True)
class CyclePolicy:
    """Validated cycle prediction policy.

    The defaults are the named constants, so ``CyclePolicy()`` behaves exactly
    like an analyzer with no configuration at all.

    Attributes:
        version:                   Config schema version string.
        luteal_phase_days:         Days between ovulation and the next period.
        fertile_window_days:       Fertile window length ending on ovulation day.
        menstrual_phase_days:      Days from the last start counted as menstrual.
        history_window:            Most recent starts used for averaging.
        min_cycle_days:            Intervals below this are flagged short.
        max_cycle_days:            Intervals above this are flagged long.
        regular_max_spread_days:   Interval spread still considered regular.
        irregular_min_spread_days: Interval spread above which cycles are irregular.
    """

    version: str = "1.0"
    luteal_phase_days: int = constants.LUTEAL_PHASE_DAYS
    fertile_window_days: int = constants.FERTILE_WINDOW_DAYS
    menstrual_phase_days: int = constants.MENSTRUAL_PHASE_DAYS
    history_window: int = constants.HISTORY_WINDOW
    min_cycle_days: int = constants.MIN_CYCLE_DAYS
    max_cycle_days: int = constants.MAX_CYCLE_DAYS
    regular_max_spread_days: int = constants.REGULAR_MAX_SPREAD_DAYS
    irregular_min_spread_days: int = constants.IRREGULAR_MIN_SPREAD_DAYS

    def __post_init__(self) -> None:
        # fertile_window_start < fertile_window_end < next_period_start
        problems = []
        if self.luteal_phase_days < 1:
            problems.append(f"luteal_phase_days = {self.luteal_phase_days} must be >= 1")
        if self.fertile_window_days < 2:
            problems.append(f"fertile_window_days = {self.fertile_window_days} must be >= 2")
        if self.menstrual_phase_days < 1:
            problems.append(f"menstrual_phase_days = {self.menstrual_phase_days} must be >= 1")
        if self.history_window < constants.MIN_PERIOD_STARTS:
            problems.append(
                f"history_window = {self.history_window} must be >= "
                f"{constants.MIN_PERIOD_STARTS}"
            )
        if not 0 < self.min_cycle_days < self.max_cycle_days:
            problems.append("min_cycle_days must be positive and below max_cycle_days")
        if not 0 <= self.regular_max_spread_days <= self.irregular_min_spread_days:
            problems.append(
                "regular_max_spread_days must be between 0 and irregular_min_spread_days"
            )
        if problems:
            raise ConfigValidationError("Invalid cycle policy: " + "; ".join(problems))


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed or not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Cycle config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigValidationError(f"{path} must contain a mapping at the top level")
    return raw


def _validate_and_build(raw: dict) -> CyclePolicy:
    """Validate the raw YAML dict and construct a CyclePolicy.

    Every problem is collected before raising so an operator sees them all
    at once.

    Raises:
        ConfigValidationError: If any value is missing a valid integer form or
            violates a bound.
    """
    errors: list[str] = []

    def _int(section: dict, key: str, default: int, path: str, minimum: int) -> int:
        value: Any = section.get(key, default)
        try:
            number = int(value)
        except (TypeError, ValueError):
            errors.append(f"{path}.{key} must be an integer, got {value!r}")
            return default
        if isinstance(value, float) and value != number:
            errors.append(f"{path}.{key} must be a whole number, got {value!r}")
        if number < minimum:
            errors.append(f"{path}.{key} = {number} must be >= {minimum}")
        return number

    version = str(raw.get("version", "1.0"))

    mc_raw = raw.get("menstrual_cycle", {}) or {}
    if not isinstance(mc_raw, dict):
        raise ConfigValidationError("'menstrual_cycle' must be a mapping")
    cl_raw = mc_raw.get("cycle_length", {}) or {}
    rg_raw = mc_raw.get("regularity", {}) or {}

    luteal = _int(mc_raw, "luteal_phase_days", constants.LUTEAL_PHASE_DAYS,
                  "menstrual_cycle", 1)
    fertile = _int(mc_raw, "fertile_window_days", constants.FERTILE_WINDOW_DAYS,
                   "menstrual_cycle", 2)
    menstrual = _int(mc_raw, "menstrual_phase_days", constants.MENSTRUAL_PHASE_DAYS,
                     "menstrual_cycle", 1)
    history = _int(mc_raw, "history_window", constants.HISTORY_WINDOW,
                   "menstrual_cycle", constants.MIN_PERIOD_STARTS)
    min_days = _int(cl_raw, "min_cycle_days", constants.MIN_CYCLE_DAYS,
                    "menstrual_cycle.cycle_length", 1)
    max_days = _int(cl_raw, "max_cycle_days", constants.MAX_CYCLE_DAYS,
                    "menstrual_cycle.cycle_length", 1)
    regular = _int(rg_raw, "regular_max_spread_days", constants.REGULAR_MAX_SPREAD_DAYS,
                   "menstrual_cycle.regularity", 0)
    irregular = _int(rg_raw, "irregular_min_spread_days",
                     constants.IRREGULAR_MIN_SPREAD_DAYS,
                     "menstrual_cycle.regularity", 0)

    if min_days >= max_days:
        errors.append(
            f"menstrual_cycle.cycle_length.min_cycle_days ({min_days}) must be "
            f"below max_cycle_days ({max_days})"
        )
    if regular > irregular:
        errors.append(
            f"menstrual_cycle.regularity.regular_max_spread_days ({regular}) must not "
            f"exceed irregular_min_spread_days ({irregular})"
        )

    if luteal != constants.LUTEAL_PHASE_DAYS or fertile != constants.FERTILE_WINDOW_DAYS:
        logger.warning(
            "Cycle policy overrides luteal=%d fertile_window=%d (defaults %d/%d)",
            luteal,
            fertile,
            constants.LUTEAL_PHASE_DAYS,
            constants.FERTILE_WINDOW_DAYS,
        )

    if errors:
        raise ConfigValidationError(
            f"cycle_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return CyclePolicy(
        version=version,
        luteal_phase_days=luteal,
        fertile_window_days=fertile,
        menstrual_phase_days=menstrual,
        history_window=history,
        min_cycle_days=min_days,
        max_cycle_days=max_days,
        regular_max_spread_days=regular,
        irregular_min_spread_days=irregular,
    )


def load_cycle_policy(path: Path | None = None) -> CyclePolicy:
    """Load and validate the cycle policy from disk.

    Args:
        path: Override path to YAML. Uses the bundled cycle_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    policy = _validate_and_build(raw)
    logger.info("Loaded cycle policy v%s from %s", policy.version, target)
    return policy


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_policy: CyclePolicy | None = None
_policy_lock = threading.Lock()


def get_cycle_policy(path: Path | None = None) -> CyclePolicy:
    """Return the global CyclePolicy singleton, loading it on first call.

    ``path`` only matters for the first load; afterwards use
    ``reload_cycle_policy()``.
    """
    global _policy
    if _policy is None:
        with _policy_lock:
            if _policy is None:  # double-checked locking
                _policy = load_cycle_policy(path)
    return _policy


def reload_cycle_policy(path: Path | None = None) -> CyclePolicy:
    """Reload the policy from disk and replace the global singleton.

    If validation fails the old policy is retained and the error re-raised.
    """
    global _policy
    new_policy = load_cycle_policy(path)  # validate before acquiring lock
    with _policy_lock:
        old_version = _policy.version if _policy else "none"
        _policy = new_policy
    logger.info("Reloaded cycle policy: %s → %s", old_version, new_policy.version)
    return new_policy
