# src/model_sync/smoke/ner.py

try:
    from gliner import GLiNER
except Exception:
    # gliner is an optional extra: pip install "model-sync[ner]"
    GLiNER = None  # type: ignore[assignment]

from .base import SmokeFailed, SmokeResult

TEXT = (
    "Python is a programming language used with TensorFlow "
    "and PyTorch for building neural networks and transformers."
)
LABELS = ["technology", "algorithm", "framework", "concept", "programming language", "data structure"]
THRESHOLD = 0.5


def check_ner(path: str) -> SmokeResult:
    if GLiNER is None:
        raise SmokeFailed("gliner is not installed. Install with: pip install 'model-sync[ner]'")
    try:
        model = GLiNER.from_pretrained(path, local_files_only=True)
    except Exception as e:
        raise SmokeFailed(f"Failed to load GLiNER model from '{path}'.") from e

    try:
        entities = model.predict_entities(TEXT, LABELS, threshold=THRESHOLD)
    except Exception as e:
        raise SmokeFailed(f"GLiNER at '{path}' failed to predict: {e}") from e
    found = ", ".join(f"{e['text']}->{e['label']}" for e in entities)
    return SmokeResult(name="ner", passed=len(entities) > 0, detail=f"{len(entities)} entities: {found}")
