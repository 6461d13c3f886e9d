"""Phase 1 (before the disaster): preparedness record, score and advance gate."""

from dataclasses import dataclass, field, replace
from typing import Optional

from sim.content import MAX_GO_BAG_ITEMS, get_go_bag_item, get_center
from phases.scoring import round_half_up, clamp_int

GO_BAG_WEIGHT = 0.4
GO_BAG_CAP = 40
RISK_ASSESSMENT_POINTS = 15
ALERT_POINTS = 10
DRILL_POINTS = 10
BUDGET_FULL = 50000
BUDGET_PARTIAL = 30000
BUDGET_MAX = 100000
BUDGET_STEP = 10000
MIN_GO_BAG_ITEMS = 5


@dataclass
class PreparednessRecord:
    go_bag_items: list[str] = field(default_factory=list)
    evacuation_center_id: Optional[str] = None
    budget_allocated: int = 0
    drills_completed: bool = False
    risk_assessment_done: bool = False
    alert_understood: bool = False
    preparedness_score: Optional[int] = None  # set by finalize_preparedness

    def toggle_go_bag_item(self, item_id: str) -> bool:
        if item_id in self.go_bag_items:
            self.go_bag_items.remove(item_id)
            return True
        if get_go_bag_item(item_id) is None or len(self.go_bag_items) >= MAX_GO_BAG_ITEMS:
            return False
        self.go_bag_items.append(item_id)
        return True

    def select_evacuation_center(self, center_id: str) -> bool:
        if get_center(center_id) is None or center_id == self.evacuation_center_id:
            return False
        self.evacuation_center_id = center_id
        return True

    def set_budget(self, amount: int) -> bool:
        snapped = clamp_int(int(amount), 0, BUDGET_MAX) // BUDGET_STEP * BUDGET_STEP
        if snapped == self.budget_allocated:
            return False
        self.budget_allocated = snapped
        return True

    def mark_drills_completed(self) -> bool:
        changed = not self.drills_completed
        self.drills_completed = True
        return changed

    def mark_risk_assessment_done(self) -> bool:
        changed = not self.risk_assessment_done
        self.risk_assessment_done = True
        return changed

    def mark_alert_understood(self) -> bool:
        changed = not self.alert_understood
        self.alert_understood = True
        return changed


def go_bag_points(item_ids: list[str]) -> int:
    total = 0
    for item_id in item_ids:
        item = get_go_bag_item(item_id)
        total += item.points if item else 0
    return total


def budget_points(budget: int) -> int:
    if budget >= BUDGET_FULL:
        return 10
    if budget >= BUDGET_PARTIAL:
        return 5
    return 0


def calculate_preparedness_score(record: PreparednessRecord) -> int:
    """Go bag (x0.4, max 40) + center + risk assessment 15 + alert 10 + drills 10 + budget up to 10."""
    score = min(go_bag_points(record.go_bag_items) * GO_BAG_WEIGHT, GO_BAG_CAP)
    center = get_center(record.evacuation_center_id)
    if center is not None:
        score += center.points
    if record.risk_assessment_done:
        score += RISK_ASSESSMENT_POINTS
    if record.alert_understood:
        score += ALERT_POINTS
    if record.drills_completed:
        score += DRILL_POINTS
    score += budget_points(record.budget_allocated)
    return clamp_int(round_half_up(score), 0, 100)


def preparedness_checklist(record: PreparednessRecord) -> dict[str, bool]:
    return {
        "go_bag": len(record.go_bag_items) >= MIN_GO_BAG_ITEMS,
        "evacuation_center": get_center(record.evacuation_center_id) is not None,
        "alert_understood": record.alert_understood,
        "risk_assessment": record.risk_assessment_done,
    }


def can_advance_preparedness(record: PreparednessRecord) -> bool:
    return all(preparedness_checklist(record).values())


def finalize_preparedness(record: PreparednessRecord) -> PreparednessRecord:
    return replace(record, go_bag_items=list(record.go_bag_items), preparedness_score=calculate_preparedness_score(record))


def preparedness_record_valid(record: PreparednessRecord) -> bool:
    """True when a restored record could have been produced by the intents above."""
    items = record.go_bag_items
    if len(items) > MAX_GO_BAG_ITEMS or len(set(items)) != len(items):
        return False
    if any(get_go_bag_item(i) is None for i in items):
        return False
    if record.evacuation_center_id is not None and get_center(record.evacuation_center_id) is None:
        return False
    if not 0 <= record.budget_allocated <= BUDGET_MAX or record.budget_allocated % BUDGET_STEP:
        return False
    return record.preparedness_score is None or 0 <= record.preparedness_score <= 100
