from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Sequence

from arch_genius.agents.sketch_agent import SketchAgent
from arch_genius.core.errors import ArchGeniusError
from arch_genius.schemas.plan import PlanOption
from arch_genius.utilities.utilities import Utilities


logger = logging.getLogger(__name__)


class VisualizationStatus(str, Enum):
    ABSENT = "absent"
    LOADING = "loading"
    READY = "ready"


class PlanSession:
    """
    State of one results view: the plan batch, the active plan and the per-plan sketch cache.

    Sketch requests are tagged with the session id they were issued under. A request that
    completes after `close()` is dropped instead of being written into a dead session.
    """

    def __init__(
        self,
        plans: Sequence[PlanOption],
        style: str,
        sketch_agent: SketchAgent,
        session_id: str | None = None,
    ) -> None:
        if not plans:
            raise ValueError("A plan session needs at least one plan option.")

        self.session_id: str | None = session_id or Utilities.make_session_id()
        self.style: str = style
        self.sketch_agent: SketchAgent = sketch_agent

        self._plans: list[PlanOption] = list(plans)
        self._active_plan_id: int = self._plans[0].id
        self._visualizations: dict[int, str] = {}
        self._loading: dict[int, bool] = {}

    # -------------------------
    # Plans and selection
    # -------------------------
    @property
    def plans(self) -> tuple[PlanOption, ...]:
        return tuple(self._plans)

    @property
    def is_live(self) -> bool:
        return self.session_id is not None

    def plan(self, plan_id: int) -> PlanOption:
        for plan in self._plans:
            if plan.id == plan_id:
                return plan
        raise KeyError(f"No plan with id {plan_id} in this session.")

    @property
    def active_plan_id(self) -> int:
        return self._active_plan_id

    @property
    def active_plan(self) -> PlanOption:
        for plan in self._plans:
            if plan.id == self._active_plan_id:
                return plan
        return self._plans[0]

    def select(self, plan_id: int) -> PlanOption:
        plan: PlanOption = self.plan(plan_id)
        self._active_plan_id = plan.id
        return plan

    # -------------------------
    # Visualization cache
    # -------------------------
    def status(self, plan_id: int) -> VisualizationStatus:
        if self._loading.get(plan_id, False):
            return VisualizationStatus.LOADING
        if plan_id in self._visualizations:
            return VisualizationStatus.READY
        return VisualizationStatus.ABSENT

    def visualization(self, plan_id: int) -> str | None:
        return self._visualizations.get(plan_id)

    @property
    def visualizations(self) -> Mapping[int, str]:
        """Read-only snapshot of the cache, safe to hand to exporters."""
        return MappingProxyType(dict(self._visualizations))

    def _owns(self, session_id: str | None) -> bool:
        return self.session_id is not None and self.session_id == session_id

    async def visualize(self, plan_id: int, force: bool = False) -> str | None:
        """
        Fetch a sketch for `plan_id` and cache it.

        Returns the cached image without a network call when one exists and `force` is False.
        Returns None when a request for this plan is already in flight, or when the session
        was closed before the request completed. Service failures propagate to the caller and
        leave the plan's previous cache entry untouched.
        """
        plan: PlanOption = self.plan(plan_id)

        if self._loading.get(plan_id, False):
            logger.info("Sketch for plan %s already in flight; ignoring request.", plan_id)
            return None

        cached: str | None = self._visualizations.get(plan_id)
        if cached is not None and not force:
            return cached

        issued_for: str | None = self.session_id
        self._loading[plan_id] = True
        try:
            image_uri: str = await self.sketch_agent.run(plan.layout_description, self.style)
        except ArchGeniusError:
            if not self._owns(issued_for):
                logger.info("Dropping sketch failure for closed session %s.", issued_for)
                return None
            raise
        finally:
            if self._owns(issued_for):
                self._loading.pop(plan_id, None)

        if not self._owns(issued_for):
            logger.info("Dropping sketch for closed session %s.", issued_for)
            return None

        self._visualizations[plan_id] = image_uri
        return image_uri

    def close(self) -> None:
        """Discard the batch and every cached sketch; late completions are ignored from now on."""
        self.session_id = None
        self._visualizations.clear()
        self._loading.clear()
        self._plans.clear()
