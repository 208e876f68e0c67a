"""
L2 Resolver — Region resolution.

Chooses between the primary and mirror endpoint sets.  Signal
collection (timezone, locale, probe) is injected; the decision itself
is the pure ``decide_region``.  The result is computed once per
resolver and reused for every URL in the run.
"""

from __future__ import annotations

import logging
from typing import Callable

from oneclick.core.models.install import EndpointSet, RegionProfile
from oneclick.core.services.tool_install.detection.region_signals import (
    probe_endpoint,
    read_locale,
    read_timezone,
)
from oneclick.core.services.tool_install.domain.errors import InvalidInput
from oneclick.core.services.tool_install.domain.region_decision import (
    REGIONS,
    RegionSignals,
    decide_region,
    local_verdict,
)

logger = logging.getLogger(__name__)

ProbeFn = Callable[[str, float], "bool | None"]


class RegionResolver:
    """Resolve and cache the ``RegionProfile`` for one tool.

    Args:
        primary: Official endpoint set; its ``probe_url`` is probed.
        mirror: Mirror endpoint set.
        override: ``"auto"`` (detect) or a fixed region.
        timezone_reader: Returns the timezone identifier or None.
        locale_reader: Returns the locale string or None.
        probe: ``probe(url, timeout) -> bool``; ``None`` means no
            probing tool is available, which resolves to primary.
        probe_timeout: Seconds for the reachability probe.
    """

    def __init__(
        self,
        primary: EndpointSet,
        mirror: EndpointSet,
        *,
        override: str = "auto",
        timezone_reader: Callable[[], str | None] = read_timezone,
        locale_reader: Callable[[], str | None] = read_locale,
        probe: ProbeFn | None = probe_endpoint,
        probe_timeout: float = 3.0,
    ) -> None:
        if override != "auto" and override not in REGIONS:
            raise InvalidInput(
                f"Unknown region: {override}",
                hint=f"Use auto, {', '.join(REGIONS)}",
            )
        self.primary = primary
        self.mirror = mirror
        self.override = override
        self._timezone_reader = timezone_reader
        self._locale_reader = locale_reader
        self._probe = probe
        self._probe_timeout = probe_timeout
        self._profile: RegionProfile | None = None
        self.signals: RegionSignals | None = None

    def resolve(self) -> RegionProfile:
        if self._profile is None:
            self._profile = self._resolve()
            logger.info(
                "Region: %s (%s) via %s",
                self._profile.selected,
                self._profile.endpoints.name,
                self._profile.reason,
            )
        return self._profile

    def _resolve(self) -> RegionProfile:
        if self.override != "auto":
            return self._profile_for(self.override, "override")

        timezone = self._timezone_reader()
        locale = self._locale_reader()
        verdict = local_verdict(timezone, locale)
        if verdict is not None:
            self.signals = RegionSignals(timezone=timezone, locale=locale)
            return self._profile_for(*verdict)

        reachable: bool | None = None
        if self._probe is not None:
            reachable = self._probe(self.primary.probe_url, self._probe_timeout)

        self.signals = RegionSignals(
            timezone=timezone, locale=locale, probe_reachable=reachable,
        )
        return self._profile_for(*decide_region(self.signals))

    def _profile_for(self, region: str, reason: str) -> RegionProfile:
        return RegionProfile(
            primary=self.primary,
            mirror=self.mirror,
            selected=region,
            reason=reason,
        )
