"""Automated players: PerfectPlayer (always right) or RulePlayer (seeded mistakes)."""

import random
from abc import ABC, abstractmethod
from typing import Optional

from sim.base import EmergencyEvent
from sim.content import AGENCIES, GO_BAG_ITEMS, EVACUATION_CENTERS, INFRASTRUCTURE_TASKS, MAX_GO_BAG_ITEMS
from phases.preparedness import MIN_GO_BAG_ITEMS, BUDGET_FULL, BUDGET_STEP
from phases.recovery import RECOVERY_ACTIONS, MIN_INFRASTRUCTURE_TASKS


class BasePlayer(ABC):
    name = "base"

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed

    @abstractmethod
    def prepare(self, session) -> None:
        """Phase 1 intents. Must leave the preparedness gate satisfied to get any further."""

    @abstractmethod
    def coordinate(self, session) -> None:
        """Phase 2 side actions: evacuation order and agency contacts."""

    @abstractmethod
    def choose_option(self, event: EmergencyEvent) -> int:
        pass

    @abstractmethod
    def recover(self, session) -> None:
        pass


class PerfectPlayer(BasePlayer):
    """Meets every gate, maximises every score, never picks a wrong option."""

    name = "perfect"

    def prepare(self, session) -> None:
        best = sorted(GO_BAG_ITEMS, key=lambda i: -i.points)[:MAX_GO_BAG_ITEMS]
        for item in best:
            session.toggle_go_bag_item(item.id)
        center = max(EVACUATION_CENTERS, key=lambda c: c.points)
        session.select_evacuation_center(center.id)
        session.set_budget(BUDGET_FULL)
        session.mark_drills_completed()
        session.mark_risk_assessment_done()
        session.mark_alert_understood()

    def coordinate(self, session) -> None:
        session.order_evacuation()
        for agency in AGENCIES:
            session.contact_agency(agency)

    def choose_option(self, event: EmergencyEvent) -> int:
        return event.correct_index()

    def recover(self, session) -> None:
        for task in INFRASTRUCTURE_TASKS:
            session.toggle_infrastructure_task(task.id)
        for action in RECOVERY_ACTIONS:
            session.complete_recovery_action(action)


class RulePlayer(BasePlayer):
    """Seeded player that passes every gate but errs at `mistake_rate` on optional choices and event options."""

    name = "rule"

    def __init__(self, seed: Optional[int] = 42, mistake_rate: float = 0.3):
        super().__init__(seed)
        self.rng = random.Random(seed)
        self.mistake_rate = mistake_rate

    def _slip(self) -> bool:
        return self.rng.random() < self.mistake_rate

    def prepare(self, session) -> None:
        n_items = self.rng.randint(MIN_GO_BAG_ITEMS, MAX_GO_BAG_ITEMS)
        for item in self.rng.sample(list(GO_BAG_ITEMS), n_items):
            session.toggle_go_bag_item(item.id)
        session.select_evacuation_center(self.rng.choice(EVACUATION_CENTERS).id)
        session.set_budget(self.rng.randint(0, 10) * BUDGET_STEP)
        if not self._slip():
            session.mark_drills_completed()
        session.mark_risk_assessment_done()
        session.mark_alert_understood()

    def coordinate(self, session) -> None:
        if not self._slip():
            session.order_evacuation()
        n_agencies = self.rng.randint(1, len(AGENCIES))
        for agency in self.rng.sample(list(AGENCIES), n_agencies):
            session.contact_agency(agency)

    def choose_option(self, event: EmergencyEvent) -> int:
        correct = event.correct_index()
        wrong = [i for i, o in enumerate(event.options) if not o.correct]
        if wrong and self._slip():
            return self.rng.choice(wrong)
        return correct

    def recover(self, session) -> None:
        n_tasks = self.rng.randint(MIN_INFRASTRUCTURE_TASKS, len(INFRASTRUCTURE_TASKS))
        for task in self.rng.sample(list(INFRASTRUCTURE_TASKS), n_tasks):
            session.toggle_infrastructure_task(task.id)
        session.complete_recovery_action("rdana")
        session.complete_recovery_action("relief")
        for action in RECOVERY_ACTIONS:
            if action not in ("rdana", "relief") and not self._slip():
                session.complete_recovery_action(action)


def get_player(mode: str = "perfect", seed: Optional[int] = 42, **kwargs) -> BasePlayer:
    if mode == "rule":
        return RulePlayer(seed=seed, mistake_rate=kwargs.get("mistake_rate", 0.3))
    return PerfectPlayer(seed=seed)
