"""
PharmaGuard Diplotype Engine
============================
CPIC-aligned diplotype and phenotype derivation.

Pipeline:
  GT-confirmed variants → group by gene → two-slot diplotype resolution
  → severity-ordered diplotype → gene-family phenotype rule
  → CPIC guidance lookup → GeneResult

Two-slot haplotype model:
  Every gene has exactly two slots (a, b), both starting at "*1".
    copies == 2 → the allele competes for BOTH slots.
    copies == 1 → the allele takes the first slot still at "*1"; when both are
                  already non-reference it competes for the less severe slot.
  A competition keeps whichever allele has the lower severity rank; on a tie
  the current occupant stays.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from knowledge_base import (
    ALLELE_FUNCTION,
    CPIC_ALERTS,
    DEFAULT_GUIDANCE,
    FUNC_SEVERITY,
    GENE_FAMILIES,
    REFERENCE_ALLELE,
    AlleleFunction,
    GeneFamily,
    Guidance,
    PM, IM, NM, RM, URM,
    POOR_FUNCTION, DECREASED_FUNCTION, NORMAL_FUNCTION,
    HIGH_SENSITIVITY, MODERATE_SENSITIVITY, NORMAL_SENSITIVITY,
    UNKNOWN_PHENOTYPE,
)
from models import GeneResult, RiskResult, VariantObservation
from vcf_parser import genotype_to_copies

logger = logging.getLogger("PharmaGuard.DiplotypeEngine")

NO_VARIANTS_SENTINEL = "No variants detected — *1/*1 assumed"


# ---------------------------------------------------------------------------
# Allele severity
# ---------------------------------------------------------------------------

def allele_function(gene: str, star: str) -> AlleleFunction:
    return ALLELE_FUNCTION.get(gene, {}).get(star, AlleleFunction.NORMAL_FUNCTION)


def allele_severity(gene: str, star: str) -> int:
    return FUNC_SEVERITY[allele_function(gene, star)]


def pick_more_severe(gene: str, current: str, candidate: str) -> str:
    """Return the more severe allele; the current one wins ties."""
    if allele_severity(gene, current) <= allele_severity(gene, candidate):
        return current
    return candidate


def order_by_severity(gene: str, a: str, b: str) -> Tuple[str, str]:
    """Canonical pair order: most severe allele first, ties left as given."""
    if allele_severity(gene, a) <= allele_severity(gene, b):
        return a, b
    return b, a


# ---------------------------------------------------------------------------
# Two-slot diplotype resolution
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HaplotypeSlots:
    a: str = REFERENCE_ALLELE
    b: str = REFERENCE_ALLELE


def place_allele(gene: str, slots: HaplotypeSlots,
                 variant: VariantObservation) -> HaplotypeSlots:
    """Apply one observation to the slots and return the new slot state."""
    star = variant.star

    if variant.copies == 2:
        return HaplotypeSlots(
            a=pick_more_severe(gene, slots.a, star),
            b=pick_more_severe(gene, slots.b, star),
        )

    if variant.copies != 1:
        return slots

    if slots.a == REFERENCE_ALLELE:
        return HaplotypeSlots(a=star, b=slots.b)
    if slots.b == REFERENCE_ALLELE:
        return HaplotypeSlots(a=slots.a, b=star)

    # Both slots already non-reference: the less severe one is the upgrade
    # candidate. Equal ranks upgrade slot a.
    if allele_severity(gene, slots.a) >= allele_severity(gene, slots.b):
        return HaplotypeSlots(a=pick_more_severe(gene, slots.a, star), b=slots.b)
    return HaplotypeSlots(a=slots.a, b=pick_more_severe(gene, slots.b, star))


def resolve_diplotype(gene: str,
                      variants: Iterable[VariantObservation]) -> Tuple[str, str]:
    slots = HaplotypeSlots()
    for v in variants:
        slots = place_allele(gene, slots, v)
        logger.debug(f"  {gene}: {v.star} (GT={v.gt}, x{v.copies}) → {slots.a}/{slots.b}")
    return order_by_severity(gene, slots.a, slots.b)


# ---------------------------------------------------------------------------
# Phenotype rules, one per gene family
# ---------------------------------------------------------------------------

def _metabolizer_phenotype(counts: Counter) -> str:
    no_fn = counts[AlleleFunction.NO_FUNCTION]
    dec_fn = counts[AlleleFunction.DECREASED_FUNCTION]
    inc_fn = counts[AlleleFunction.INCREASED_FUNCTION]

    if no_fn == 2:
        return PM
    if no_fn == 1 and dec_fn >= 1:
        return PM
    if no_fn == 1:
        return IM
    if dec_fn >= 1:
        return IM
    if inc_fn == 2:
        return URM
    if inc_fn == 1:
        return RM
    return NM


def _transporter_phenotype(counts: Counter) -> str:
    no_fn = counts[AlleleFunction.NO_FUNCTION]
    if no_fn == 2:
        return POOR_FUNCTION
    if no_fn == 1 or counts[AlleleFunction.DECREASED_FUNCTION] >= 1:
        return DECREASED_FUNCTION
    return NORMAL_FUNCTION


def _sensitivity_phenotype(counts: Counter) -> str:
    inc_fn = counts[AlleleFunction.INCREASED_FUNCTION]
    if inc_fn == 2:
        return HIGH_SENSITIVITY
    if inc_fn == 1:
        return MODERATE_SENSITIVITY
    return NORMAL_SENSITIVITY


PHENOTYPE_RULES: Dict[GeneFamily, Callable[[Counter], str]] = {
    GeneFamily.METABOLIZER: _metabolizer_phenotype,
    GeneFamily.TRANSPORTER: _transporter_phenotype,
    GeneFamily.SENSITIVITY: _sensitivity_phenotype,
    GeneFamily.UNCLASSIFIED: lambda counts: UNKNOWN_PHENOTYPE,
}


def gene_family(gene: str) -> GeneFamily:
    return GENE_FAMILIES.get(gene, GeneFamily.UNCLASSIFIED)


def derive_phenotype(gene: str, func1: AlleleFunction, func2: AlleleFunction) -> str:
    counts = Counter([func1, func2])
    return PHENOTYPE_RULES[gene_family(gene)](counts)


def lookup_guidance(gene: str, phenotype: str) -> Guidance:
    return CPIC_ALERTS.get(gene, {}).get(phenotype, DEFAULT_GUIDANCE)


# ---------------------------------------------------------------------------
# Core engine
# ---------------------------------------------------------------------------

def group_by_gene(variants: Iterable[VariantObservation]) -> Dict[str, List[VariantObservation]]:
    """Genes in first-appearance order, variants in input order within a gene."""
    by_gene: Dict[str, List[VariantObservation]] = {}
    for v in variants:
        by_gene.setdefault(v.gene, []).append(v)
    return by_gene


def analyse_gene(gene: str, variants: List[VariantObservation]) -> GeneResult:
    """Resolve diplotype, phenotype and CPIC guidance for a single gene."""
    # copies=0 never leaves the parser, but the engine does not rely on it
    carried = [v for v in variants if v.copies > 0]

    allele1, allele2 = resolve_diplotype(gene, carried)
    diplotype = f"{allele1}/{allele2}"

    phenotype = derive_phenotype(
        gene,
        allele_function(gene, allele1),
        allele_function(gene, allele2),
    )
    guidance = lookup_guidance(gene, phenotype)

    contributing = [v.describe() for v in carried] or [NO_VARIANTS_SENTINEL]

    logger.info(f"  {gene}: diplotype={diplotype}, phenotype={phenotype}, CPIC {guidance.level}")

    return GeneResult(
        gene=gene,
        diplotype=diplotype,
        phenotype=phenotype,
        contributing_variants=contributing,
        cpic_level=guidance.level,
        recommendation=guidance.recommendation,
    )


def build_gene_results(variants: Iterable[VariantObservation]) -> List[GeneResult]:
    """
    One GeneResult per gene seen in `variants`.

    Genes with no genotype-confirmed variants do not appear at all; treating
    them as *1/*1 is the caller's decision.
    """
    by_gene = group_by_gene(variants)
    logger.info(f"Building gene results for {len(by_gene)} genes")
    return [analyse_gene(gene, gene_variants) for gene, gene_variants in by_gene.items()]


def evaluate_risk(gene: str, star: str, gt: str) -> Optional[RiskResult]:
    """
    Single-variant check kept for older callers.

    Returns None when GT shows the patient does not carry the allele.
    """
    copies = genotype_to_copies(gt)
    if copies == 0:
        return None

    variant = VariantObservation(gene=gene, star=star, rsid="", gt=gt, copies=copies)
    result = analyse_gene(gene, [variant])
    return RiskResult(
        gene=result.gene,
        variant=result.diplotype,
        genotype=gt,
        phenotype=result.phenotype,
        cpic_level=result.cpic_level,
        recommendation=result.recommendation,
    )
