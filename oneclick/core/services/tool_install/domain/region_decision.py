"""
L1 Domain — Region decision (pure).

Classifies the network as "restricted" (use the mirror endpoint set) or
not, from signals that were already collected.  No I/O here: the
resolver gathers the signals and calls in.

Order of checks, first positive match wins:
    1. timezone identifier in ``RESTRICTED_TIMEZONES``
    2. locale contains ``RESTRICTED_LOCALE_MARKER``
    3. reachability probe of the primary endpoint failed
"""

from __future__ import annotations

from dataclasses import dataclass

PRIMARY = "primary"
MIRROR = "mirror"

REGIONS = (PRIMARY, MIRROR)

RESTRICTED_TIMEZONES = frozenset({"Asia/Shanghai", "Asia/Chongqing"})
RESTRICTED_LOCALE_MARKER = "zh_CN"


@dataclass(frozen=True)
class RegionSignals:
    """Raw inputs to the decision.

    ``probe_reachable`` is ``None`` when no probe ran, either because no
    probing tool exists or because a local signal already decided.
    """

    timezone: str | None = None
    locale: str | None = None
    probe_reachable: bool | None = None


def local_verdict(timezone: str | None, locale: str | None) -> tuple[str, str] | None:
    """Decide from timezone/locale alone.

    Returns:
        ``(MIRROR, reason)`` on a positive match, ``None`` when the
        local signals are inconclusive and a probe is needed.
    """
    if timezone and timezone.strip() in RESTRICTED_TIMEZONES:
        return MIRROR, "timezone"
    if locale and RESTRICTED_LOCALE_MARKER in locale:
        return MIRROR, "locale"
    return None


def decide_region(signals: RegionSignals) -> tuple[str, str]:
    """Return ``(region, reason)`` for a complete set of signals."""
    verdict = local_verdict(signals.timezone, signals.locale)
    if verdict is not None:
        return verdict

    if signals.probe_reachable is None:
        return PRIMARY, "probe-unavailable"
    if signals.probe_reachable:
        return PRIMARY, "probe-succeeded"
    return MIRROR, "probe-failed"
