"""Engine configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

_FALSE_VALUES = ("0", "false", "no", "off")


class BoundPolicy(Enum):
    """How a ``between`` rule combines with standalone ``min``/``max`` rules.

    STANDALONE_OVERRIDES: start from ``between``; ``min``/``max`` overwrite
        whichever bound they declare.
    RANGE_OVERRIDES: start from ``between``; ``min``/``max`` only fill a bound
        that ``between`` left unset.
    """

    STANDALONE_OVERRIDES = "standalone"
    RANGE_OVERRIDES = "range"


@dataclass(frozen=True)
class EngineConfig:
    """Validation engine configuration.

    One engine applies one bound policy to every field type.
    """

    bound_policy: BoundPolicy = BoundPolicy.STANDALONE_OVERRIDES
    blank_signature_is_empty: bool = True
    log_level: str = "WARNING"
    forms_path: Path = Path("forms")

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> EngineConfig:
        """Create config from environment variables.

        Reads:
        1. FORMFORGE_BOUND_POLICY: "standalone" (default) or "range"
        2. FORMFORGE_BLANK_SIGNATURE_IS_EMPTY: "1" (default) or "0"
        3. FORMFORGE_LOG_LEVEL: logging level name for the CLI
        4. FORMFORGE_FORMS_PATH: form definitions directory,
           default {base_path}/forms
        """
        raw_policy = os.environ.get("FORMFORGE_BOUND_POLICY", "").strip().lower()
        policy = BoundPolicy.STANDALONE_OVERRIDES
        if raw_policy:
            try:
                policy = BoundPolicy(raw_policy)
            except ValueError:
                logger.warning(
                    "Unknown FORMFORGE_BOUND_POLICY %r, using 'standalone'", raw_policy
                )

        blank_flag = os.environ.get("FORMFORGE_BLANK_SIGNATURE_IS_EMPTY", "1")
        blank_is_empty = blank_flag.strip().lower() not in _FALSE_VALUES

        log_level = os.environ.get("FORMFORGE_LOG_LEVEL", "WARNING").strip().upper()

        forms_path = os.environ.get("FORMFORGE_FORMS_PATH")
        if forms_path:
            path = Path(forms_path)
        elif base_path:
            path = base_path / "forms"
        else:
            path = Path("forms")

        return cls(
            bound_policy=policy,
            blank_signature_is_empty=blank_is_empty,
            log_level=log_level or "WARNING",
            forms_path=path,
        )
