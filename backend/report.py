"""
PharmaGuard — upload report assembly.
Turns engine output into the summary line, the gene_profiles rows handed to
storage, and the upload response payload.
"""

from dataclasses import asdict
from typing import Any, Dict, List, Sequence

from models import GeneResult, VariantObservation

WILDTYPE_SUMMARY = (
    "All GT=0/0 — no actionable pharmacogenomic variants detected. "
    "Patient is wildtype for all tested genes."
)


def format_gene_result(result: GeneResult) -> str:
    return f"{result.gene}: {result.diplotype} → {result.phenotype} (guidance {result.cpic_level})"


def build_summary(results: Sequence[GeneResult]) -> str:
    if not results:
        return WILDTYPE_SUMMARY
    return "; ".join(format_gene_result(r) for r in results)


def gene_profile_rows(patient_id: str, results: Sequence[GeneResult]) -> List[Dict[str, str]]:
    """One gene_profiles row per gene result."""
    return [
        {
            "patient_id": patient_id,
            "gene_name": r.gene,
            "variant": r.diplotype,
            "metabolizer_type": r.phenotype,
        }
        for r in results
    ]


def build_upload_report(
    patient_id: str,
    variants: Sequence[VariantObservation],
    results: Sequence[GeneResult],
) -> Dict[str, Any]:
    return {
        "message": "VCF processed successfully",
        "patient_id": patient_id,
        "variants_detected": len(variants),
        "genes_reported": len(results),
        "summary": build_summary(results),
        "gene_results": [asdict(r) for r in results],
        "data": gene_profile_rows(patient_id, results),
    }
