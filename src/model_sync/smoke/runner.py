# src/model_sync/smoke/runner.py
from .base import SmokeResult

KINDS = ("embedding", "reranker", "ner", "llm")


def run_smoke(kind: str, target: str) -> SmokeResult:
    """Run the smoke check for `kind` against a local path (or an Ollama model name)."""
    # runtimes are imported per check: torch, gliner and ollama are heavy or optional
    if kind == "embedding":
        from .embedder import check_embedder
        return check_embedder(target)
    if kind == "reranker":
        from .reranker import check_reranker
        return check_reranker(target)
    if kind == "ner":
        from .ner import check_ner
        return check_ner(target)
    if kind == "llm":
        from .llm import check_llm
        return check_llm(target)
    raise ValueError(f"Unknown smoke check: {kind}")
