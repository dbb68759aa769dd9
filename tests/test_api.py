"""
PharmaGuard Test Suite - API Tests
===================================
Upload endpoint behaviour through FastAPI's TestClient.
"""

import pytest
from fastapi.testclient import TestClient

import config
import main


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "UPLOAD_DIR", tmp_path / "uploads")
    return TestClient(main.app)


def _upload(client, content, filename="patient.vcf", patient_id="P-1"):
    data = {"patient_id": patient_id} if patient_id else {}
    files = {"vcfFile": (filename, content.encode("utf-8"), "text/plain")}
    return client.post("/upload/vcf", data=data, files=files)


def test_home(client):
    assert client.get("/").json() == {"message": "PharmaGuard backend running"}


def test_upload_reports_gene_results(client, mixed_vcf):
    response = _upload(client, mixed_vcf)
    assert response.status_code == 201

    body = response.json()
    assert body["variants_detected"] == 3
    assert body["genes_reported"] == 2
    assert body["gene_results"][0]["diplotype"] == "*2/*17"
    assert body["data"][1] == {
        "patient_id": "P-1",
        "gene_name": "SLCO1B1",
        "variant": "*5/*1",
        "metabolizer_type": "Decreased Function",
    }


def test_upload_removes_temp_file(client, mixed_vcf):
    _upload(client, mixed_vcf)
    assert list(config.UPLOAD_DIR.iterdir()) == []


def test_upload_all_reference(client, build_vcf, vcf_line):
    response = _upload(client, build_vcf(vcf_line("CYP2D6", "*4", "0/0")))
    assert response.status_code == 201
    assert response.json()["genes_reported"] == 0
    assert response.json()["summary"].startswith("All GT=0/0")


def test_upload_requires_patient_id(client, mixed_vcf):
    response = _upload(client, mixed_vcf, patient_id=None)
    assert response.status_code == 400


def test_upload_rejects_other_extensions(client, mixed_vcf):
    response = _upload(client, mixed_vcf, filename="patient.txt")
    assert response.status_code == 400


def test_upload_requires_file(client):
    response = client.post("/upload/vcf", data={"patient_id": "P-1"})
    assert response.status_code == 400


def test_analyze_single_variant(client):
    response = client.post("/analyze", data={"gene": "CYP2C19", "star": "*2", "gt": "0/1"})
    assert response.json()["result"]["variant"] == "*2/*1"

    response = client.post("/analyze", data={"gene": "CYP2C19", "star": "*2", "gt": "0/0"})
    assert response.json() == {"result": None}


def test_upload_write_failure_leaves_no_temp_file(client, mixed_vcf, monkeypatch):
    def failing_copy(src, dst):
        dst.write(b"partial")
        raise OSError("disk full")

    monkeypatch.setattr(main.shutil, "copyfileobj", failing_copy)
    response = _upload(client, mixed_vcf)

    assert response.status_code == 500
    assert response.json()["detail"] == "disk full"
    assert list(config.UPLOAD_DIR.iterdir()) == []


def test_upload_read_error_is_500(client, mixed_vcf, monkeypatch):
    def unreadable(path):
        raise OSError("unreadable")

    monkeypatch.setattr(main, "extract_variants", unreadable)
    response = _upload(client, mixed_vcf)

    assert response.status_code == 500
    assert response.json()["detail"] == "unreadable"
    assert list(config.UPLOAD_DIR.iterdir()) == []


def test_upload_rejects_non_utf8(client):
    files = {"vcfFile": ("patient.vcf", b"\xff\xfe", "application/octet-stream")}
    response = client.post("/upload/vcf", data={"patient_id": "P-1"}, files=files)

    assert response.status_code == 400
    assert list(config.UPLOAD_DIR.iterdir()) == []
