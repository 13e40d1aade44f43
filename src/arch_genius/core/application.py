from __future__ import annotations

import logging
from enum import Enum

from arch_genius.agents.deps import Deps
from arch_genius.agents.plan_agent import PlanAgent
from arch_genius.agents.sketch_agent import SketchAgent
from arch_genius.core.errors import GenerationInProgressError
from arch_genius.core.plan_session import PlanSession
from arch_genius.core.settings import Settings
from arch_genius.schemas.plan import GenerationResponse, PlanOption
from arch_genius.schemas.requirements import Requirements


logger = logging.getLogger(__name__)


class ViewMode(str, Enum):
    CAPTURING = "capturing"
    PRESENTING = "presenting"


class Application:
    """Moves between the requirements form and the results view."""

    def __init__(self, settings: Settings, deps: Deps) -> None:
        self.settings = settings
        self.plan_agent = PlanAgent(deps)
        self.sketch_agent = SketchAgent(deps)

        self.mode: ViewMode = ViewMode.CAPTURING
        self.is_busy: bool = False
        self.requirements: Requirements | None = None
        self.session: PlanSession | None = None

    @property
    def plans(self) -> tuple[PlanOption, ...]:
        return self.session.plans if self.session is not None else ()

    async def submit(self, requirements: Requirements) -> PlanSession:
        if self.is_busy:
            raise GenerationInProgressError("Floor plans are already being generated. Please wait.")

        self.is_busy = True
        try:
            response: GenerationResponse = await self.plan_agent.run(requirements)
        finally:
            self.is_busy = False

        logger.info("Received %d plan options.", len(response.options))
        if self.session is not None:
            self.session.close()
        self.requirements = requirements
        self.session = PlanSession(
            plans=response.options,
            style=requirements.style,
            sketch_agent=self.sketch_agent,
        )
        self.mode = ViewMode.PRESENTING
        return self.session

    def reset(self) -> None:
        if self.session is not None:
            self.session.close()
        self.session = None
        self.requirements = None
        self.mode = ViewMode.CAPTURING
