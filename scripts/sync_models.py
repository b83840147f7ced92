# scripts/sync_models.py
# Same as the `model-sync` console script; safe to re-run.
from model_sync.cli import main

if __name__ == "__main__":
    main()
