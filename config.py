import os
from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Encoding used to decode uploaded CSV files (utf-8-sig also accepts a BOM)
CSV_ENCODING = os.getenv("CSV_ENCODING", "utf-8-sig")

# Emit a generic "Data Distribution" chart when no file-name rule matches
FALLBACK_CHART_ENABLED = os.getenv("FALLBACK_CHART_ENABLED", "true").lower() in ("1", "true", "yes")

PREVIEW_ROWS = int(os.getenv("PREVIEW_ROWS", "20"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(20 * 1024 * 1024)))

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
