"""Built-in catalog of construction principles."""

from __future__ import annotations

from .models import ConstructionPrinciple, PrincipleCategory


def _principle(
    id: str,  # noqa: A002 - matches the model field
    category: PrincipleCategory,
    name: str,
    description: str,
    importance: int,
    conditions: list[str],
    confidence: float = 1.0,
    exceptions: list[str] | None = None,
    examples: list[str] | None = None,
) -> ConstructionPrinciple:
    return ConstructionPrinciple(
        id=id,
        category=category,
        name=name,
        description=description,
        importance=importance,
        confidence=confidence,
        conditions=conditions,
        exceptions=exceptions or [],
        examples=examples or [],
    )


SEQ = PrincipleCategory.SEQUENCING
SAF = PrincipleCategory.SAFETY
QUA = PrincipleCategory.QUALITY
EFF = PrincipleCategory.EFFICIENCY
COM = PrincipleCategory.COMPLIANCE
RES = PrincipleCategory.RESOURCE
ENV = PrincipleCategory.ENVIRONMENTAL

PRINCIPLE_CATALOG: tuple[ConstructionPrinciple, ...] = (
    # Sequencing
    _principle(
        "seq_001",
        SEQ,
        "Foundation Before Framing",
        "Foundation must be completed and cured before framing begins",
        10,
        [
            "Foundation concrete must cure for minimum 7 days",
            "Foundation inspection must be passed",
            "Moisture barriers must be installed",
        ],
        exceptions=["Temporary structures", "Modular construction"],
        examples=["Concrete foundation -> Wait 7 days -> Begin framing"],
    ),
    _principle(
        "seq_002",
        SEQ,
        "Rough-In Before Close-In",
        "All MEP rough-ins must be complete before insulation and drywall",
        9,
        [
            "Electrical rough-in complete",
            "Plumbing rough-in complete",
            "HVAC rough-in complete",
            "Inspections passed",
        ],
    ),
    _principle(
        "seq_003",
        SEQ,
        "Dry-In Priority",
        "Building must be dried-in (roof/windows) before interior work",
        9,
        [
            "Roof decking and underlayment complete",
            "Windows and doors installed",
            "Building wrap/moisture barrier installed",
        ],
    ),
    _principle(
        "seq_004",
        SEQ,
        "Top-Down Exterior",
        "Exterior work proceeds from top to bottom to prevent damage",
        7,
        ["Roof before siding", "Siding before landscaping", "Gutters after roofing"],
        confidence=0.95,
    ),
    _principle(
        "seq_005",
        SEQ,
        "Clean to Dirty Finish Work",
        "Finish work proceeds from clean to dirty trades",
        6,
        ["Painting before flooring", "Drywall before trim", "Ceiling work before wall work"],
        confidence=0.9,
    ),
    # Safety
    _principle(
        "saf_001",
        SAF,
        "Overhead Protection",
        "No work below active overhead operations",
        10,
        [
            "Roofing excludes work below",
            "Crane operations require clear zones",
            "Demolition requires full clearance",
        ],
    ),
    _principle(
        "saf_002",
        SAF,
        "Structural Stability",
        "Structural elements must be secured before loading",
        10,
        [
            "Beams must be fully connected",
            "Temporary bracing required until permanent bracing installed",
            "Load limits must be observed",
        ],
    ),
    _principle(
        "saf_003",
        SAF,
        "Excavation Safety",
        "Excavations must be shored or sloped before entry",
        10,
        [
            "Trenches over 5 feet require protection",
            "Daily inspections required",
            "Access ladders every 25 feet",
        ],
    ),
    _principle(
        "saf_004",
        SAF,
        "Hot Work Separation",
        "Hot work must be isolated from combustibles",
        9,
        [
            "Fire watch required",
            "35-foot clearance from combustibles",
            "Fire suppression equipment on hand",
        ],
    ),
    # Quality
    _principle(
        "qua_001",
        QUA,
        "Moisture Control",
        "Materials must be protected from moisture damage",
        9,
        [
            "Materials stored off ground",
            "Temporary weather protection required",
            "Moisture content checked before installation",
        ],
        confidence=0.95,
    ),
    _principle(
        "qua_002",
        QUA,
        "Temperature Constraints",
        "Temperature-sensitive work must occur within specified ranges",
        8,
        ["Concrete: 40-90°F", "Painting: 50-85°F", "Roofing adhesives: per manufacturer"],
        confidence=0.9,
    ),
    _principle(
        "qua_003",
        QUA,
        "Cure Time Respect",
        "Materials must have adequate cure/dry time",
        8,
        [
            "Concrete: 7-28 days depending on use",
            "Paint: per manufacturer specs",
            "Adhesives: full cure before loading",
        ],
        confidence=0.95,
    ),
    _principle(
        "qua_004",
        QUA,
        "Protection of Finished Work",
        "Completed work must be protected from damage",
        7,
        ["Floor protection during construction", "Wall corner guards", "HVAC filter protection"],
        confidence=0.85,
    ),
    # Efficiency
    _principle(
        "eff_001",
        EFF,
        "Trade Stacking Optimization",
        "Multiple trades can work simultaneously in different areas",
        7,
        [
            "Vertical separation (different floors)",
            "Horizontal separation (different zones)",
            "No shared resources required",
        ],
        confidence=0.8,
    ),
    _principle(
        "eff_002",
        EFF,
        "Material Delivery Timing",
        "Materials delivered just-in-time to reduce storage/damage",
        6,
        ["Storage space available", "Weather protection available", "Installation crew ready"],
        confidence=0.75,
    ),
    _principle(
        "eff_003",
        EFF,
        "Critical Path Priority",
        "Critical path activities take precedence",
        8,
        ["Delays impact overall schedule", "No float available", "Dependencies downstream"],
        confidence=0.85,
    ),
    _principle(
        "eff_004",
        EFF,
        "Inspection Scheduling",
        "Inspections scheduled to avoid work stoppage",
        7,
        ["Inspector availability confirmed", "Work complete for inspection", "Documentation ready"],
        confidence=0.8,
    ),
    # Compliance
    _principle(
        "com_001",
        COM,
        "Permit Sequencing",
        "Work cannot proceed without required permits",
        10,
        [
            "Building permit before construction",
            "Trade permits before trade work",
            "Inspection approvals before concealment",
        ],
    ),
    _principle(
        "com_002",
        COM,
        "Code Inspection Points",
        "Mandatory inspection points must be scheduled",
        10,
        [
            "Foundation before backfill",
            "Framing before insulation",
            "Rough-ins before close-in",
            "Final before occupancy",
        ],
    ),
    _principle(
        "com_003",
        COM,
        "Environmental Compliance",
        "Environmental regulations must be followed",
        9,
        [
            "Erosion control in place",
            "Dust control measures",
            "Noise ordinance compliance",
            "Waste disposal compliance",
        ],
        confidence=0.95,
    ),
    # Resource
    _principle(
        "res_001",
        RES,
        "Crew Availability",
        "Adequate crew size required for safe/efficient work",
        8,
        ["Minimum crew sizes per task", "Skill requirements met", "Supervision ratios maintained"],
        confidence=0.85,
    ),
    _principle(
        "res_002",
        RES,
        "Equipment Availability",
        "Required equipment must be available and operational",
        8,
        ["Equipment reserved/scheduled", "Operators qualified", "Maintenance current"],
        confidence=0.85,
    ),
    _principle(
        "res_003",
        RES,
        "Space Conflicts",
        "Adequate workspace required for each trade",
        7,
        [
            "Sufficient area for work",
            "Access routes clear",
            "Material staging space available",
        ],
        confidence=0.8,
    ),
    # Environmental
    _principle(
        "env_001",
        ENV,
        "Weather Windows",
        "Weather-sensitive work requires appropriate conditions",
        8,
        [
            "No rain for roofing/concrete",
            "Temperature ranges for materials",
            "Wind limits for crane work",
        ],
        confidence=0.9,
    ),
    _principle(
        "env_002",
        ENV,
        "Seasonal Considerations",
        "Seasonal factors affect scheduling",
        6,
        ["Frost protection in winter", "Heat protection in summer", "Rainy season avoidance"],
        confidence=0.75,
    ),
)
