# src/model_sync/smoke/embedder.py
from sentence_transformers import SentenceTransformer, util

from .base import SmokeFailed, SmokeResult

SENTENCES = [
    "Artificial intelligence is transforming industries.",
    "AI and machine learning are reshaping the world.",
    "The weather in Kuala Lumpur is hot and humid.",
]


def load_embedder(path: str) -> SentenceTransformer:
    """
    Load a SentenceTransformer from a synced folder.

    Strictly offline: local_files_only=True means it will only load
    from `path` and never attempt to download from the internet.
    """
    try:
        return SentenceTransformer(path, local_files_only=True)
    except Exception as e:
        raise SmokeFailed(
            f"Failed to load embedder model from '{path}'. "
            f"Make sure the folder exists and contains a valid SentenceTransformer model."
        ) from e


def check_embedder(path: str) -> SmokeResult:
    """Two AI sentences must sit closer to each other than to the weather one."""
    model = load_embedder(path)
    try:
        emb = model.encode(SENTENCES, normalize_embeddings=True, convert_to_numpy=True)
    except Exception as e:
        raise SmokeFailed(f"Embedder at '{path}' failed to encode: {e}") from e
    sims = util.cos_sim(emb[0:1], emb[1:])[0]
    related, unrelated = float(sims[0]), float(sims[1])
    return SmokeResult(
        name="embedding",
        passed=related > unrelated,
        detail=f"shape={tuple(emb.shape)} related={related:.4f} unrelated={unrelated:.4f}",
    )
