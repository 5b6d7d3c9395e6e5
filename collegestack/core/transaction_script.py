"""
Ordered multi-step workflows with explicit partial-failure handling.

A script runs its steps in order. A failing *critical* step aborts the script
and re-raises; a failing non-critical step is logged, recorded in the result
and the remaining steps still run. Steps that belong together atomically
should be one critical step wrapping a single database transaction.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List

logger = logging.getLogger("app")


@dataclass
class StepFailure:
    step: str
    error: str


@dataclass
class ScriptResult:
    name: str
    completed: List[str] = field(default_factory=list)
    failed: List[StepFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass
class _Step:
    name: str
    action: Callable[[], None]
    critical: bool


class TransactionScript:
    def __init__(self, name: str):
        self.name = name
        self._steps: List[_Step] = []

    def add_step(self, name: str, action: Callable[[], None], critical: bool = False) -> "TransactionScript":
        self._steps.append(_Step(name=name, action=action, critical=critical))
        return self

    def run(self) -> ScriptResult:
        result = ScriptResult(name=self.name)
        for step in self._steps:
            try:
                step.action()
            except Exception as e:
                if step.critical:
                    logger.error(f"[{self.name}] critical step '{step.name}' failed, aborting: {e}")
                    raise
                logger.error(f"[{self.name}] step '{step.name}' failed, continuing: {e}")
                result.failed.append(StepFailure(step=step.name, error=str(e)))
                continue
            result.completed.append(step.name)

        if result.failed:
            logger.warning(f"[{self.name}] finished with {len(result.failed)} failed step(s)")
        return result
