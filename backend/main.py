import logging
import shutil
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile

import config
from diplotype_engine import build_gene_results, evaluate_risk
from report import build_upload_report
from vcf_parser import extract_variants

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger("PharmaGuard.API")

app = FastAPI(title="PharmaGuard")


@app.get("/")
def home():
    return {"message": "PharmaGuard backend running"}


def _temp_path(filename: str) -> Path:
    config.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    return config.UPLOAD_DIR / f"temp_{uuid.uuid4().hex}_{Path(filename).name}"


def _save_upload(file: UploadFile, file_location: Path) -> None:
    with open(file_location, "wb") as buffer:
        shutil.copyfileobj(file.file, buffer)


@app.post("/upload/vcf", status_code=201)
def upload_vcf(
    vcfFile: Optional[UploadFile] = File(None),
    patient_id: Optional[str] = Form(None),
):
    if vcfFile is None or not vcfFile.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not patient_id:
        raise HTTPException(status_code=400, detail="Patient ID is required")
    if not vcfFile.filename.lower().endswith(config.ALLOWED_VCF_EXTENSIONS):
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type; expected one of {', '.join(config.ALLOWED_VCF_EXTENSIONS)}",
        )

    file_location = _temp_path(vcfFile.filename)
    try:
        _save_upload(vcfFile, file_location)
        variants = extract_variants(file_location)
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="VCF file is not valid UTF-8 text")
    except OSError as e:
        logger.error(f"Failed to store or read uploaded VCF {vcfFile.filename!r}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        file_location.unlink(missing_ok=True)

    gene_results = build_gene_results(variants)
    logger.info(
        f"Patient {patient_id}: {len(variants)} variants → {len(gene_results)} gene results"
    )
    return build_upload_report(patient_id, variants, gene_results)


@app.post("/analyze")
def analyze(gene: str = Form(...), star: str = Form(...), gt: str = Form(...)):
    result = evaluate_risk(gene, star, gt)
    return {"result": asdict(result) if result else None}
