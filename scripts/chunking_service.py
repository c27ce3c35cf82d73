from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv(ROOT / ".env")

from smart_chunking.app import create_app
from smart_chunking.config import ChunkingServiceConfig
from smart_chunking.logging_config import configure_logging
import uvicorn


config = ChunkingServiceConfig.from_env()
configure_logging(config)
app = create_app(config)

uvicorn.run(app, host="0.0.0.0", port=8002)
