"""Static content tables: alerts, go-bag catalog, evacuation centers, agencies, recovery tasks, event pools, lessons."""

import logging
from typing import Optional

from sim.base import (
    Hazard,
    Severity,
    EventOption,
    EmergencyEvent,
    HazardBrief,
    HazardAlert,
    HazardLesson,
    GoBagItem,
    EvacuationCenter,
    InfrastructureTask,
)

logger = logging.getLogger(__name__)

FALLBACK_HAZARD = Hazard.TYPHOON

MAX_GO_BAG_ITEMS = 12

AGENCIES = ("BFP", "PNP", "AFP", "DOH", "DSWD")


HAZARD_BRIEFS: dict[Hazard, HazardBrief] = {
    Hazard.TYPHOON: HazardBrief("Typhoon (Bagyo)", "Manage a Super Typhoon with storm surges threatening coastal barangays"),
    Hazard.EARTHQUAKE: HazardBrief("Earthquake", "Respond to a magnitude 7.2 earthquake in Metro Manila"),
    Hazard.FLOOD: HazardBrief("Flooding", "Handle urban flooding during monsoon season"),
    Hazard.VOLCANO: HazardBrief("Volcanic Eruption", "Evacuate communities near an erupting volcano"),
    Hazard.LANDSLIDE: HazardBrief("Landslide", "Respond to landslides in mountainous communities"),
    Hazard.FIRE: HazardBrief("Fire", "Manage a fire emergency in a dense urban community"),
}


DISASTER_ALERTS: dict[Hazard, HazardAlert] = {
    Hazard.TYPHOON: HazardAlert(
        "PAGASA (Weather)", "Signal #4 (Very Strong Typhoon)",
        "A Super Typhoon is coming! Winds are very strong. The sea might rise (storm surge). Heavy rain is falling.",
    ),
    Hazard.EARTHQUAKE: HazardAlert(
        "PHIVOLCS (Quakes)", "Earthquake Alert",
        "A very strong earthquake happened! Buildings might shake. Watch out for aftershocks (smaller shakes).",
    ),
    Hazard.FLOOD: HazardAlert(
        "PAGASA (Weather)", "Red Rainfall Warning",
        "Too much rain! Floods are rising fast. Low places will be underwater.",
    ),
    Hazard.VOLCANO: HazardAlert(
        "PHIVOLCS (Volcanoes)", "Alert Level 4",
        "The volcano might erupt (explode) soon! Dangerous ash and lava are coming.",
    ),
    Hazard.LANDSLIDE: HazardAlert(
        "PAGASA & MGB", "Landslide Warning",
        "It rained too much on the mountains. The soil is soft and might slide down. Dangerous!",
    ),
    Hazard.FIRE: HazardAlert(
        "BFP (Firefighters)", "Fire Alarm",
        "Big fire in the village! The wind is spreading the fire. Everyone must leave now!",
    ),
}


GO_BAG_ITEMS: tuple[GoBagItem, ...] = (
    GoBagItem("water", "Bottled Water (3L per person)", "essential", 10),
    GoBagItem("food", "Ready-to-eat Food (3-day supply)", "essential", 10),
    GoBagItem("firstaid", "First Aid Kit", "essential", 10),
    GoBagItem("flashlight", "Flashlight & Batteries", "essential", 8),
    GoBagItem("radio", "Battery-powered Radio", "essential", 8),
    GoBagItem("whistle", "Emergency Whistle", "essential", 6),
    GoBagItem("documents", "Important Documents (Waterproof)", "essential", 10),
    GoBagItem("cash", "Emergency Cash", "essential", 8),
    GoBagItem("medicine", "Personal Medicines", "essential", 9),
    GoBagItem("clothes", "Extra Clothes", "comfort", 5),
    GoBagItem("blanket", "Blanket/Mat", "comfort", 5),
    GoBagItem("toiletries", "Hygiene Items", "comfort", 6),
    GoBagItem("phone", "Phone & Powerbank", "communication", 9),
    GoBagItem("rope", "Rope/Cord", "tools", 4),
    GoBagItem("knife", "Multi-tool/Swiss Knife", "tools", 4),
    GoBagItem("mask", "Face Masks", "health", 7),
    GoBagItem("alcohol", "Alcohol/Sanitizer", "health", 6),
)


EVACUATION_CENTERS: tuple[EvacuationCenter, ...] = (
    EvacuationCenter("school", "Kiling Elementary School", 500, "Good", 10),
    EvacuationCenter("hall", "Barangay Hall & Covered Court", 300, "Fair", 8),
    EvacuationCenter("church", "Local Church/Chapel", 200, "Good", 9),
    EvacuationCenter("gym", "Municipal Gymnasium", 800, "Excellent", 10),
)


INFRASTRUCTURE_TASKS: tuple[InfrastructureTask, ...] = (
    InfrastructureTask("power", "Restore Electricity", "Coordinate with electric cooperative", 15),
    InfrastructureTask("water", "Restore Water Supply", "Repair water system", 15),
    InfrastructureTask("roads", "Clear Roads & Debris", "Remove obstacles for access", 10),
    InfrastructureTask("comms", "Restore Communications", "Repair cell towers, radios", 10),
)


DISASTER_LESSONS: dict[Hazard, HazardLesson] = {
    Hazard.TYPHOON: HazardLesson(
        "Typhoon Yolanda (Haiyan) 2013",
        "Super Typhoon Yolanda caused massive storm surge casualties because many did not understand what "
        "\"storm surge\" meant. Early evacuation and clear communication saves lives.",
        "PAGASA now uses Filipino terms and clearer warnings. \"Daluyong ng Dagat\" (storm surge) is now better understood.",
    ),
    Hazard.EARTHQUAKE: HazardLesson(
        "Bohol Earthquake 2013",
        "The magnitude 7.2 earthquake in Bohol showed the importance of earthquake drills and structural "
        "assessments. Many casualties occurred in old churches and buildings.",
        "Regular \"Duck, Cover, Hold\" drills and building code compliance are critical in earthquake-prone areas.",
    ),
    Hazard.FLOOD: HazardLesson(
        "Ondoy Flooding 2009",
        "Tropical Storm Ondoy dumped a month's worth of rain in 6 hours, causing massive urban flooding. "
        "Many were trapped because they didn't expect such extreme rainfall.",
        "PAGASA's rainfall warning system (Yellow, Orange, Red) helps communities prepare for different flood intensities.",
    ),
    Hazard.VOLCANO: HazardLesson(
        "Taal Volcano Eruption 2020",
        "Taal's phreatic eruption reminded us that volcanoes can erupt with little warning. "
        "PHIVOLCS alert levels must be heeded immediately.",
        "Know your volcano alert levels: Level 4 means evacuate immediately, don't wait for Level 5 (eruption in progress).",
    ),
    Hazard.LANDSLIDE: HazardLesson(
        "Cherry Hills Landslide 1999",
        "The Cherry Hills landslide in Antipolo killed dozens. Heavy rainfall saturated slopes, causing "
        "catastrophic failure. Ground cracks are warning signs.",
        "Evacuate immediately when ground cracks appear. Landslides happen in seconds - prevention through evacuation is key.",
    ),
    Hazard.FIRE: HazardLesson(
        "Urban Fires in Dense Communities",
        "Fires spread rapidly in densely populated informal settlements. Quick BFP response and community "
        "fire lanes save lives and property.",
        "Fire prevention (no open flames, fire lanes, fire extinguishers) and early BFP notification are critical in urban areas.",
    ),
}


def _opt(action: str, outcome: str, correct: bool = False) -> EventOption:
    return EventOption(action=action, outcome=outcome, correct=correct)


def _event(hazard: Hazard, id_: str, title: str, severity: Severity, description: str, *options: EventOption) -> EmergencyEvent:
    return EmergencyEvent(id=id_, hazard=hazard, title=title, severity=severity, description=description, options=tuple(options))


_TYPHOON_EVENTS = (
    _event(
        Hazard.TYPHOON, "evac1", "Evacuation Decision", Severity.HIGH,
        "PAGASA Signal #4 is now in effect. Coastal residents are asking if they should evacuate now.",
        _opt("Order immediate mandatory evacuation of all coastal and low-lying areas",
             "Correct! Early evacuation saves lives. Residents moved to safety before peak storm.", True),
        _opt("Wait for Signal #5 before ordering evacuation",
             "Incorrect. Signal #5 doesn't exist. Delayed evacuation puts lives at risk!"),
        _opt("Let residents decide for themselves",
             "Incorrect. As DRRM Officer, you must issue clear evacuation orders per RA 10121."),
    ),
    _event(
        Hazard.TYPHOON, "storm1", "Storm Surge Warning", Severity.HIGH,
        "PAGASA warns of 2-3 meter storm surge in 2 hours. Some families refuse to leave their homes.",
        _opt("Coordinate with Barangay Tanods and PNP for forced evacuation",
             "Correct! Forced evacuation is legal when lives are in imminent danger (PD 1566).", True),
        _opt("Respect their decision and leave them",
             "Incorrect. Storm surges are deadly - you must evacuate all residents from danger zones."),
    ),
    _event(
        Hazard.TYPHOON, "rescue1", "Rescue Request", Severity.HIGH,
        "Family is trapped on roof by rising floodwater. Strong winds make rescue dangerous.",
        _opt("Coordinate with BFP and AFP for rescue operation using appropriate equipment",
             "Correct! Professional rescue teams have training and equipment for dangerous conditions.", True),
        _opt("Send barangay tanods immediately without waiting",
             "Incorrect. Untrained rescuers in dangerous conditions may become victims themselves."),
    ),
    _event(
        Hazard.TYPHOON, "hospital_power", "Critical Infrastructure", Severity.HIGH,
        "District Hospital reports power failure. Generators are failing. Patients on life support at risk.",
        _opt("Prioritize fuel delivery and coordinate technical team from Electric Coop",
             "Correct! Securing power for critical lifeline facilities is a top priority.", True),
        _opt("Relocate all patients to the Barangay Hall",
             "Incorrect. Moving critical patients during a storm is extremely dangerous and facilities are inadequate."),
    ),
    _event(
        Hazard.TYPHOON, "food_shortage", "Relief Operations", Severity.MEDIUM,
        "Evacuees are increasing rapidly. Food stocks in the center are running low.",
        _opt("Request augmentation from DSWD and Municipal DRRMO",
             "Correct! Local government should request higher level support when local resources are insufficient.", True),
        _opt("Ask evacuees to go home and get food",
             "Incorrect. Sending people back to danger zones defeats the purpose of evacuation!"),
    ),
)

_EARTHQUAKE_EVENTS = (
    _event(
        Hazard.EARTHQUAKE, "aftershock1", "Aftershock Warning", Severity.HIGH,
        "PHIVOLCS warns of strong aftershocks. People want to return home to get belongings.",
        _opt("Prohibit entry to damaged buildings until structural inspection",
             "Correct! Aftershocks can collapse weakened structures. Safety first per NDRRMC protocols.", True),
        _opt("Allow quick trips with escorts",
             "Incorrect. Even brief exposure to unstable buildings during aftershocks is extremely dangerous."),
    ),
    _event(
        Hazard.EARTHQUAKE, "quake_fire1", "Fire Emergency", Severity.HIGH,
        "Electrical fire breaks out in damaged building due to exposed wires. Spreading quickly.",
        _opt("Immediately call BFP, evacuate adjacent houses, coordinate rescue with trained personnel",
             "Correct! Quick BFP response and systematic evacuation prevents fire from spreading.", True),
        _opt("Organize community bucket brigade to fight fire",
             "Incorrect. Large fires need professional firefighters. Focus on evacuation and rescue."),
    ),
    _event(
        Hazard.EARTHQUAKE, "collapse1", "Collapsed Structure", Severity.HIGH,
        "A two-storey house collapsed. Neighbors hear voices under the rubble and start digging by hand.",
        _opt("Secure the area and request an urban search and rescue team from BFP and AFP",
             "Correct! Trained USAR teams prevent secondary collapse and injuries to volunteers.", True),
        _opt("Let neighbors keep digging to save time",
             "Incorrect. Untrained digging can trigger further collapse and crush survivors."),
    ),
    _event(
        Hazard.EARTHQUAKE, "school_check", "School Safety", Severity.MEDIUM,
        "Parents ask if classes can resume tomorrow at the elementary school, which has visible wall cracks.",
        _opt("Suspend classes until DPWH engineers inspect and clear the building",
             "Correct! Structures must be assessed before reoccupation after a strong earthquake.", True),
        _opt("Resume classes but keep students away from the cracked wall",
             "Incorrect. Hidden structural damage can fail during aftershocks."),
    ),
    _event(
        Hazard.EARTHQUAKE, "injured1", "Mass Casualty", Severity.HIGH,
        "Dozens of injured residents arrive at the barangay health station, which is overwhelmed.",
        _opt("Set up triage with DOH personnel and coordinate transfers to the nearest hospitals",
             "Correct! Triage prioritizes the critically injured and spreads the load across facilities.", True),
        _opt("Treat patients in order of arrival",
             "Incorrect. First-come first-served wastes critical minutes for the most severely injured."),
    ),
)

_VOLCANO_EVENTS = (
    _event(
        Hazard.VOLCANO, "eruption_level4", "Alert Level 4 Raised", Severity.HIGH,
        "PHIVOLCS raises Alert Level to 4. Hazardous eruption imminent.",
        _opt("Issue immediate mandatory evacuation, coordinate transportation, activate all evacuation centers",
             "Correct! Alert Level 4 means eruption within hours to days - immediate action required!", True),
        _opt("Prepare evacuation but wait for Level 5",
             "Incorrect. Alert Level 5 means eruption in progress - too late! Act at Level 4."),
    ),
    _event(
        Hazard.VOLCANO, "ashfall1", "Heavy Ashfall", Severity.MEDIUM,
        "Ash is falling on the barangay. Residents are coughing and roofs are collecting thick ash.",
        _opt("Distribute N95 masks with DOH and advise residents to stay indoors and clear roofs safely",
             "Correct! Fine ash damages lungs and heavy ash loads can collapse roofs.", True),
        _opt("Tell residents ash is harmless and daily activities can continue",
             "Incorrect. Volcanic ash causes respiratory illness and structural damage."),
    ),
    _event(
        Hazard.VOLCANO, "livestock1", "Return for Livestock", Severity.HIGH,
        "Farmers want to go back inside the danger zone to rescue their livestock.",
        _opt("Keep the danger zone closed and coordinate a supervised livestock rescue with the Department of Agriculture and AFP",
             "Correct! Only authorized, equipped teams should enter the permanent danger zone.", True),
        _opt("Allow farmers to go back quickly on their own",
             "Incorrect. Pyroclastic flows move faster than anyone can run."),
    ),
    _event(
        Hazard.VOLCANO, "lahar1", "Lahar Threat", Severity.HIGH,
        "Heavy rain over the volcano slopes. River channels downstream may carry lahar.",
        _opt("Evacuate communities along river channels and close crossings",
             "Correct! Lahar can bury riverside communities within minutes.", True),
        _opt("Wait until mudflow is seen before moving people",
             "Incorrect. By the time lahar is visible it is too late to evacuate."),
    ),
    _event(
        Hazard.VOLCANO, "water_contam", "Contaminated Water", Severity.MEDIUM,
        "Evacuation center water tanks are covered with ash.",
        _opt("Request clean water delivery from DSWD and the water district and cover all containers",
             "Correct! Ash-contaminated water causes illness among evacuees.", True),
        _opt("Let evacuees boil the ashy water",
             "Incorrect. Boiling does not remove ash and dissolved contaminants."),
    ),
)

_LANDSLIDE_EVENTS = (
    _event(
        Hazard.LANDSLIDE, "landslide1", "Landslide Risk", Severity.HIGH,
        "Continuous rain saturating mountainside. Ground showing cracks. Houses at risk.",
        _opt("Immediately evacuate at-risk houses, coordinate with MGB and DENR for assessment",
             "Correct! Ground cracks are warning signs - evacuate before catastrophic failure.", True),
        _opt("Monitor situation and prepare to evacuate if landslide occurs",
             "Incorrect. Landslides happen in seconds - must evacuate at first warning signs!"),
    ),
    _event(
        Hazard.LANDSLIDE, "road_blocked", "Blocked Access Road", Severity.MEDIUM,
        "A slide has cut the only road to a sitio. Families there need food and medicine.",
        _opt("Coordinate with DPWH for clearing and request AFP airlift for urgent cases",
             "Correct! Parallel clearing and airlift keeps isolated families supplied.", True),
        _opt("Ask residents to walk across the debris to the town",
             "Incorrect. Fresh debris is unstable and may slide again."),
    ),
    _event(
        Hazard.LANDSLIDE, "buried_house", "Buried House", Severity.HIGH,
        "A house was partially buried. Relatives report two people missing.",
        _opt("Call BFP and AFP rescue teams and keep bystanders off the slope",
             "Correct! Trained teams can search while watching for secondary slides.", True),
        _opt("Gather volunteers to dig immediately from the top of the slope",
             "Incorrect. Extra weight on the slope can trigger another slide."),
    ),
    _event(
        Hazard.LANDSLIDE, "return_home", "Residents Returning", Severity.MEDIUM,
        "Rain has stopped. Evacuees want to return to their houses on the slope.",
        _opt("Keep evacuees in the center until MGB declares the area safe",
             "Correct! Saturated slopes can fail even after rain stops.", True),
        _opt("Allow returns since it is no longer raining",
             "Incorrect. Many landslides occur hours after the rain has ended."),
    ),
    _event(
        Hazard.LANDSLIDE, "creek_dam", "Natural Dam", Severity.HIGH,
        "Debris has blocked the creek upstream and water is rising behind it.",
        _opt("Evacuate downstream households and alert the Municipal DRRMO for monitoring",
             "Correct! A debris dam can burst suddenly and flood downstream areas.", True),
        _opt("Send residents to remove the debris by hand",
             "Incorrect. A sudden breach would sweep away anyone on the debris."),
    ),
)

_FIRE_EVENTS = (
    _event(
        Hazard.FIRE, "fire1", "Urban Fire", Severity.HIGH,
        "Fire spreading rapidly in dense community. Strong winds. Multiple families trapped.",
        _opt("Immediately call BFP, evacuate adjacent houses, coordinate rescue with trained personnel",
             "Correct! Quick BFP response and systematic evacuation prevents fire from spreading.", True),
        _opt("Organize community bucket brigade to fight fire",
             "Incorrect. Large fires need professional firefighters. Focus on evacuation and rescue."),
    ),
    _event(
        Hazard.FIRE, "fire_lane", "Blocked Fire Lane", Severity.HIGH,
        "Fire trucks cannot enter because parked vehicles and stalls block the narrow road.",
        _opt("Have PNP and tanods clear the road and guide the trucks in",
             "Correct! Keeping fire lanes open lets BFP reach the fire quickly.", True),
        _opt("Tell BFP to wait until owners move their vehicles",
             "Incorrect. Every minute of delay lets the fire spread to more houses."),
    ),
    _event(
        Hazard.FIRE, "lpg_tanks", "LPG Tanks", Severity.HIGH,
        "Residents report several LPG tanks inside houses near the fire.",
        _opt("Inform BFP of the LPG locations and widen the evacuation perimeter",
             "Correct! Exploding tanks can injure people far from the fire.", True),
        _opt("Ask residents to run back in and carry the tanks out",
             "Incorrect. Entering burning houses for tanks risks lives."),
    ),
    _event(
        Hazard.FIRE, "burn_victims", "Burn Injuries", Severity.MEDIUM,
        "Several residents have burn injuries and smoke inhalation.",
        _opt("Set up a first aid point with DOH and transfer serious cases to the hospital",
             "Correct! Early treatment of burns and smoke inhalation prevents complications.", True),
        _opt("Treat burns with toothpaste and send everyone home",
             "Incorrect. Home remedies worsen burns; serious cases need medical care."),
    ),
    _event(
        Hazard.FIRE, "displaced", "Displaced Families", Severity.MEDIUM,
        "Dozens of families lost their homes and are gathering on the street at night.",
        _opt("Open the evacuation center and coordinate food packs and registration with DSWD",
             "Correct! Registered evacuees receive organized shelter and relief.", True),
        _opt("Tell families to find relatives to stay with",
             "Incorrect. The barangay must provide temporary shelter for displaced families."),
    ),
)

# Flood has no dedicated pool; event_pool() serves the fallback hazard's events.
EVENT_POOLS: dict[Hazard, tuple[EmergencyEvent, ...]] = {
    Hazard.TYPHOON: _TYPHOON_EVENTS,
    Hazard.EARTHQUAKE: _EARTHQUAKE_EVENTS,
    Hazard.FLOOD: (),
    Hazard.VOLCANO: _VOLCANO_EVENTS,
    Hazard.LANDSLIDE: _LANDSLIDE_EVENTS,
    Hazard.FIRE: _FIRE_EVENTS,
}


def event_pool(hazard: Hazard) -> tuple[EmergencyEvent, ...]:
    """Events for a hazard; an empty pool is served from the fallback hazard."""
    pool = EVENT_POOLS.get(hazard, ())
    if not pool:
        logger.warning("No events defined for %s; using %s events", hazard.value, FALLBACK_HAZARD.value)
        pool = EVENT_POOLS[FALLBACK_HAZARD]
    return pool


def get_go_bag_item(item_id: str) -> Optional[GoBagItem]:
    for item in GO_BAG_ITEMS:
        if item.id == item_id:
            return item
    return None


def get_center(center_id: Optional[str]) -> Optional[EvacuationCenter]:
    for center in EVACUATION_CENTERS:
        if center.id == center_id:
            return center
    return None


def get_infrastructure_task(task_id: str) -> Optional[InfrastructureTask]:
    for task in INFRASTRUCTURE_TASKS:
        if task.id == task_id:
            return task
    return None
