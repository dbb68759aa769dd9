"""
PharmaGuard Test Suite - Pytest Fixtures
========================================
Shared VCF builders for parser, engine and API tests.
"""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "backend"))

VCF_HEADER = (
    "##fileformat=VCFv4.2\n"
    "##INFO=<ID=GENE,Number=1,Type=String,Description=\"Gene symbol\">\n"
    "##INFO=<ID=STAR,Number=1,Type=String,Description=\"Star allele\">\n"
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tSAMPLE\n"
)


def make_line(gene, star, gt, rsid="rs0000001", chrom="10", pos=94781859,
              fmt="GT:DP", sample_extra=":30", info=None):
    if info is None:
        info = f"GENE={gene};STAR={star}"
    sample = f"{gt}{sample_extra}" if gt is not None else ""
    return "\t".join([chrom, str(pos), rsid, "G", "A", "99", "PASS", info, fmt, sample])


@pytest.fixture
def vcf_line():
    """Factory for a single VCF data line."""
    return make_line


@pytest.fixture
def build_vcf():
    """Factory joining data lines under a standard header."""
    def _build(*lines):
        return VCF_HEADER + "\n".join(lines) + "\n"
    return _build


@pytest.fixture
def mixed_vcf(build_vcf):
    """CYP2C19 *2/*17, CYP2D6 hom-ref only, SLCO1B1 *5 het, one junk line."""
    return build_vcf(
        make_line("CYP2C19", "*17", "0/1", rsid="rs12248560", pos=94761900),
        make_line("CYP2D6", "*4", "0/0", rsid="rs3892097", chrom="22", pos=42524947),
        "22\t42524947\tbroken",
        make_line("CYP2C19", "*2", "0|1", rsid="rs4244285"),
        make_line("SLCO1B1", "*5", "1/0", rsid="rs4149056", chrom="12", pos=21331549),
    )
