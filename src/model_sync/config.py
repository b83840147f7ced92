import os
from dotenv import load_dotenv

load_dotenv()

# Paths
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
SCHEMA_DIR = os.path.join(os.path.dirname(__file__), "schemas")

# Local cache root; each artifact lands in MODELS_DIR/<subdir>/<name>
MODELS_DIR = os.path.expanduser(os.getenv("MODELS_DIR", os.path.join("~", "models")))
MODEL_MANIFEST = os.getenv("MODEL_MANIFEST", os.path.join(BASE_DIR, "models.json"))

# Revision marker
REVISION_FILE = os.getenv("REVISION_FILE", ".last_revision")
REVISION_LENGTH = int(os.getenv("REVISION_LENGTH", "8"))  # short commit sha, like `git log --oneline`

# Skip non-PyTorch formats (Flax, TF, Rust, ONNX exports) to save space
_DEFAULT_EXCLUDES = "*.msgpack,*.h5,flax_model*,tf_model*,rust_model*,onnx/*"
EXCLUDE_PATTERNS = [
    p.strip() for p in os.getenv("EXCLUDE_PATTERNS", _DEFAULT_EXCLUDES).split(",") if p.strip()
]

# HuggingFace Hub
HF_TOKEN = os.getenv("HF_TOKEN") or None

# Ollama
OLLAMA_HOST = os.getenv("OLLAMA_HOST", "http://localhost:11434")
OLLAMA_REGISTRY = os.getenv("OLLAMA_REGISTRY", "https://registry.ollama.ai")
OLLAMA_TIMEOUT = float(os.getenv("OLLAMA_TIMEOUT", "30"))
# generate may cold-load the model into memory first
OLLAMA_GENERATE_TIMEOUT = float(os.getenv("OLLAMA_GENERATE_TIMEOUT", "300"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.path.expanduser(os.getenv("LOG_FILE", "")) or None
