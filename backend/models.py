from dataclasses import dataclass, field
from typing import List


# ---------------------------------------------------------------------------
# Data classes shared by the parser and the engine
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class VariantObservation:
    """One genotype-confirmed variant call. `copies` is always 1 or 2."""
    gene: str
    star: str
    rsid: str
    gt: str
    copies: int

    def describe(self) -> str:
        return f"{self.star} ({self.rsid}, GT={self.gt})"


@dataclass
class GeneResult:
    gene: str
    diplotype: str
    phenotype: str
    contributing_variants: List[str] = field(default_factory=list)
    cpic_level: str = "B"
    recommendation: str = ""


@dataclass
class RiskResult:
    gene: str
    variant: str
    genotype: str
    phenotype: str
    cpic_level: str
    recommendation: str
