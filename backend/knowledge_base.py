"""
PharmaGuard Knowledge Base
==========================
Static, read-only pharmacogenomic tables used by the diplotype engine.

  ALLELE_FUNCTION   gene → star allele → functional class
  FUNC_SEVERITY     functional class → severity rank (lower = more severe)
  GENE_FAMILIES     gene → phenotype rule family
  CPIC_ALERTS       gene → phenotype → (evidence tier, recommendation)

Every mapping is wrapped in MappingProxyType at import time and is never
mutated afterwards, so it can be shared freely between concurrent runs.
"""

from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, NamedTuple


# ---------------------------------------------------------------------------
# Constants — Phenotype labels
# ---------------------------------------------------------------------------
PM  = "Poor Metabolizer"
IM  = "Intermediate Metabolizer"
NM  = "Normal Metabolizer"
RM  = "Rapid Metabolizer"
URM = "Ultrarapid Metabolizer"

POOR_FUNCTION      = "Poor Function"
DECREASED_FUNCTION = "Decreased Function"
NORMAL_FUNCTION    = "Normal Function"

HIGH_SENSITIVITY     = "High Warfarin Sensitivity"
MODERATE_SENSITIVITY = "Moderate Warfarin Sensitivity"
NORMAL_SENSITIVITY   = "Normal Warfarin Sensitivity"

UNKNOWN_PHENOTYPE = "Unknown"

# Wildtype label both haplotype slots start from
REFERENCE_ALLELE = "*1"

DEFAULT_CPIC_LEVEL = "B"
DEFAULT_RECOMMENDATION = "No specific CPIC guideline found for this phenotype."


class AlleleFunction(str, Enum):
    NO_FUNCTION = "no_function"
    DECREASED_FUNCTION = "decreased_function"
    NORMAL_FUNCTION = "normal_function"
    INCREASED_FUNCTION = "increased_function"


class GeneFamily(str, Enum):
    METABOLIZER = "metabolizer"
    TRANSPORTER = "transporter"
    SENSITIVITY = "sensitivity"
    UNCLASSIFIED = "unclassified"


class Guidance(NamedTuple):
    level: str
    recommendation: str


def _freeze(table: Dict) -> Mapping:
    return MappingProxyType({
        key: _freeze(value) if isinstance(value, dict) else value
        for key, value in table.items()
    })


NO  = AlleleFunction.NO_FUNCTION
DEC = AlleleFunction.DECREASED_FUNCTION
NF  = AlleleFunction.NORMAL_FUNCTION
INC = AlleleFunction.INCREASED_FUNCTION

# ---------------------------------------------------------------------------
# Star allele → functional classification
# Used for severity ranking and phenotype derivation only; whether the patient
# carries an allele is decided by GT alone.
# ---------------------------------------------------------------------------
ALLELE_FUNCTION: Mapping[str, Mapping[str, AlleleFunction]] = _freeze({
    "CYP2C19": {
        "*1": NF,
        "*2": NO,    # rs4244285
        "*3": NO,    # rs4986893
        "*4": NO,
        "*5": NO,
        "*17": INC,  # rs12248560
    },
    "CYP2D6": {
        "*1": NF,
        "*2": NF,
        "*4": NO,
        "*5": NO,
        "*10": DEC,
        "*17": DEC,
        "*41": DEC,
    },
    "CYP2C9": {
        "*1": NF,
        "*2": DEC,
        "*3": DEC,
        "*5": NO,
        "*6": NO,
    },
    "SLCO1B1": {
        "*1a": NF,
        "*1b": NF,
        "*5": NO,    # rs4149056
        "*15": NO,   # rs2306283 + rs4149056
    },
    "TPMT": {
        "*1": NF,
        "*2": NO,
        "*3A": NO,
        "*3C": NO,
    },
    "DPYD": {
        "*1": NF,
        "*2A": NO,
        "*13": NO,
    },
    "VKORC1": {
        "-1639G>A": INC,  # increased warfarin sensitivity
    },
})

# increased_function ranks last: it is a separate clinical axis, handled by
# the phenotype rules rather than by slot competition.
FUNC_SEVERITY: Mapping[AlleleFunction, int] = _freeze({
    NO: 0,
    DEC: 1,
    NF: 2,
    INC: 3,
})

GENE_FAMILIES: Mapping[str, GeneFamily] = _freeze({
    "CYP2D6": GeneFamily.METABOLIZER,
    "CYP2C19": GeneFamily.METABOLIZER,
    "CYP2C9": GeneFamily.METABOLIZER,
    "TPMT": GeneFamily.METABOLIZER,
    "DPYD": GeneFamily.METABOLIZER,
    "SLCO1B1": GeneFamily.TRANSPORTER,
    "VKORC1": GeneFamily.SENSITIVITY,
})

# ---------------------------------------------------------------------------
# CPIC alerts — evidence tier and dosing recommendation per phenotype
# ---------------------------------------------------------------------------
CPIC_ALERTS: Mapping[str, Mapping[str, Guidance]] = _freeze({
    "CYP2C19": {
        PM:  Guidance("1A", "Avoid clopidogrel — use prasugrel or ticagrelor instead (FDA black-box warning)."),
        IM:  Guidance("1A", "Consider alternative antiplatelet therapy; reduced clopidogrel efficacy."),
        URM: Guidance("1A", "PPIs may be less effective; consider H2 blockers or dose escalation."),
        RM:  Guidance("2A", "Monitor PPI efficacy; may need higher proton pump inhibitor doses."),
        NM:  Guidance("B", "Standard dosing for all CYP2C19-metabolised drugs."),
    },
    "CYP2D6": {
        PM:  Guidance("1A", "Avoid codeine/tramadol (opioid toxicity). Avoid tamoxifen — reduced efficacy."),
        IM:  Guidance("1A", "Use lower codeine doses with caution. Consider alternatives."),
        URM: Guidance("1A", "Codeine contraindicated — life-threatening morphine accumulation."),
        NM:  Guidance("B", "Standard dosing."),
        RM:  Guidance("2A", "Monitor for sub-therapeutic response with typical doses."),
    },
    "CYP2C9": {
        PM: Guidance("1A", "Reduce warfarin dose significantly. High bleeding risk at standard doses."),
        IM: Guidance("1A", "Start warfarin at reduced dose. Increase INR monitoring frequency."),
        NM: Guidance("B", "Standard warfarin dosing."),
    },
    "SLCO1B1": {
        POOR_FUNCTION:      Guidance("1A", "Avoid simvastatin >20mg/day — high myopathy risk. Use rosuvastatin or pravastatin."),
        DECREASED_FUNCTION: Guidance("1A", "Limit simvastatin dose. Consider atorvastatin or rosuvastatin."),
        NORMAL_FUNCTION:    Guidance("B", "Standard statin dosing."),
    },
    "TPMT": {
        PM: Guidance("1A", "Avoid thiopurines (azathioprine, 6-MP) — fatal myelosuppression risk."),
        IM: Guidance("1A", "Reduce thiopurine dose by 30–70%. Monitor blood counts closely."),
        NM: Guidance("B", "Standard thiopurine dosing."),
    },
    "DPYD": {
        PM: Guidance("1A", "Avoid 5-FU and capecitabine — life-threatening toxicity risk. Use alternative chemotherapy."),
        IM: Guidance("1A", "Start fluoropyrimidines at 50% dose; escalate based on tolerance and monitoring."),
        NM: Guidance("B", "Standard fluoropyrimidine dosing."),
    },
    "VKORC1": {
        HIGH_SENSITIVITY:     Guidance("2A", "Significantly reduce warfarin starting dose. Very high bleeding risk."),
        MODERATE_SENSITIVITY: Guidance("2A", "Reduce warfarin starting dose. Increase INR monitoring."),
        NORMAL_SENSITIVITY:   Guidance("B", "Standard warfarin dosing."),
    },
})

DEFAULT_GUIDANCE = Guidance(DEFAULT_CPIC_LEVEL, DEFAULT_RECOMMENDATION)
