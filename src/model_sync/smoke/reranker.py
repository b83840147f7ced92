# src/model_sync/smoke/reranker.py

try:
    from sentence_transformers.cross_encoder import CrossEncoder
except Exception:
    # CrossEncoder not available (package missing or import error)
    CrossEncoder = None  # type: ignore[assignment]

from .base import SmokeFailed, SmokeResult

QUERY = "What is machine learning?"
RELEVANT = "Machine learning is a subset of AI that learns from data."
IRRELEVANT = "The Eiffel Tower is located in Paris, France."


def load_reranker(path: str) -> "CrossEncoder":
    """
    Load a CrossEncoder from a synced folder (local files only).

    Raises:
      SmokeFailed if CrossEncoder is unavailable or the local model
      cannot be loaded.
    """
    if CrossEncoder is None:
        raise SmokeFailed(
            "sentence-transformers CrossEncoder is not available. "
            "Install sentence-transformers with cross-encoder support."
        )
    try:
        return CrossEncoder(path, local_files_only=True)
    except Exception as e:
        raise SmokeFailed(
            f"Failed to load reranker model from '{path}'. "
            f"Make sure the folder exists and contains a valid CrossEncoder model."
        ) from e


def check_reranker(path: str) -> SmokeResult:
    model = load_reranker(path)
    try:
        scores = model.predict([[QUERY, RELEVANT], [QUERY, IRRELEVANT]])
    except Exception as e:
        raise SmokeFailed(f"Reranker at '{path}' failed to score: {e}") from e
    relevant, irrelevant = float(scores[0]), float(scores[1])
    return SmokeResult(
        name="reranker",
        passed=relevant > irrelevant,
        detail=f"relevant={relevant:.4f} irrelevant={irrelevant:.4f}",
    )
