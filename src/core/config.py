"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Tuple

from core.interval_parser import DEFAULT_INDEFINITE_MARKERS


@dataclass(frozen=True)
class SubmissionConfig:
    """Submission handling settings for the announcement chat.

    - allowed_sources: every source key the announcement chat may carry
    - indefinite_markers: words rejecting a submission as open-ended
    - panel_enabled: keep the instruction panel as the newest message
    """

    allowed_sources: FrozenSet[str]
    indefinite_markers: Tuple[str, ...] = DEFAULT_INDEFINITE_MARKERS
    panel_enabled: bool = True
