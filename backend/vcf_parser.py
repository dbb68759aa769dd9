"""
PharmaGuard — VCF variant extractor.

GT is the only evidence that the patient carries a variant. INFO.STAR names
the allele a variant belongs to but never implies carriage on its own.

Column layout of a data line (0-indexed):
  0 CHROM  1 POS  2 ID  3 REF  4 ALT  5 QUAL  6 FILTER
  7 INFO    GENE=CYP2C19;STAR=*2
  8 FORMAT  GT:AD:DP
  9 SAMPLE  0/1:10,5:15
"""

import io
import logging
from typing import Dict, Iterable, Iterator, List, Optional

from models import VariantObservation

logger = logging.getLogger("PharmaGuard.VcfParser")

MIN_COLUMNS = 8
NO_CALL = "./."
UNKNOWN_ID = "."
STAR_KEYS = ("STAR", "ALLELE")


def genotype_to_copies(gt: str) -> int:
    """
    Number of ALT allele copies in a GT string: 0, 1 or 2.

    Phased and unphased separators are treated the same. Anything that is not
    exactly two allele tokens counts as zero copies; a token adds a copy only
    if it is an integer greater than zero (so '.', '0' and junk add nothing).
    """
    parts = gt.replace("|", "/").split("/")
    if len(parts) != 2:
        return 0

    copies = 0
    for token in parts:
        try:
            allele_index = int(token.strip())
        except ValueError:
            continue
        if allele_index > 0:
            copies += 1
    return copies


def parse_info_field(info: str) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for part in info.split(";"):
        key, sep, value = part.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        fields[key] = value.strip()
    return fields


def extract_genotype(format_str: str, sample_str: str) -> str:
    """Pick the GT sub-field out of the sample column using the FORMAT schema."""
    format_fields = format_str.split(":")
    sample_fields = sample_str.split(":")
    if "GT" not in format_fields:
        return NO_CALL
    gt_index = format_fields.index("GT")
    if gt_index >= len(sample_fields) or not sample_fields[gt_index]:
        return NO_CALL
    return sample_fields[gt_index]


def resolve_star_allele(info: Dict[str, str]) -> Optional[str]:
    """STAR takes precedence over ALLELE; empty values count as absent."""
    for key in STAR_KEYS:
        value = info.get(key)
        if value:
            return value
    return None


def _column(cols: List[str], index: int) -> str:
    return cols[index] if index < len(cols) else ""


def iter_variants(lines: Iterable[str]) -> Iterator[VariantObservation]:
    """
    Yield genotype-confirmed variants in input order.

    Headers, blank lines, short lines, no-calls, hom-ref calls and lines
    without a GENE or star allele annotation are skipped silently.
    """
    for line_no, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        cols = line.split("\t")
        if len(cols) < MIN_COLUMNS:
            logger.debug(f"line {line_no}: {len(cols)} columns — skipped")
            continue

        rsid = cols[2] or UNKNOWN_ID
        format_str = _column(cols, 8)
        sample_str = _column(cols, 9)

        gt = NO_CALL
        if format_str and sample_str:
            gt = extract_genotype(format_str, sample_str)

        copies = genotype_to_copies(gt)
        if copies == 0:
            logger.debug(f"line {line_no}: GT={gt} carries no ALT allele — skipped")
            continue

        info = parse_info_field(cols[7])
        gene = info.get("GENE", "")
        star = resolve_star_allele(info)
        if not gene or not star:
            logger.debug(f"line {line_no}: missing GENE or STAR annotation — skipped")
            continue

        yield VariantObservation(gene=gene, star=star, rsid=rsid, gt=gt, copies=copies)


def _collect(lines: List[str], source: str) -> List[VariantObservation]:
    variants = list(iter_variants(lines))
    logger.info(
        f"{source}: {len(lines)} lines read, {len(variants)} genotype-confirmed variants kept"
    )
    return variants


def parse_vcf_content(content: str) -> List[VariantObservation]:
    # newline=None gives the same universal-newline splitting as reading a file
    return _collect(io.StringIO(content, newline=None).readlines(), "VCF content")


def extract_variants(vcf_path) -> List[VariantObservation]:
    """
    Read a VCF file from disk and return its genotype-confirmed variants.

    An unreadable file raises OSError; nothing inside the file does.
    """
    with open(vcf_path, "r", encoding="utf-8") as handle:
        lines = handle.readlines()

    return _collect(lines, str(vcf_path))
