"""
PharmaGuard — runtime configuration.
Values come from the environment, optionally seeded from a local .env file.
"""

import os
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

# .env sits next to the backend directory
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)

LOG_LEVEL: str = os.getenv("PHARMAGUARD_LOG_LEVEL", "INFO").upper()
LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

UPLOAD_DIR: Path = Path(os.getenv("PHARMAGUARD_UPLOAD_DIR", "uploads"))

ALLOWED_VCF_EXTENSIONS: Tuple[str, ...] = tuple(
    ext.strip().lower()
    for ext in os.getenv("PHARMAGUARD_ALLOWED_EXTENSIONS", ".vcf").split(",")
    if ext.strip()
)
