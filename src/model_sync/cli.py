# src/model_sync/cli.py
import sys, json, argparse, logging, time
import jsonschema
from dataclasses import dataclass
from typing import Dict, List, Optional

from .config import LOG_FILE, LOG_LEVEL, MODEL_MANIFEST, MODELS_DIR
from .manifest import ManifestEntry, load_manifest
from .registry.huggingface import HuggingFaceRegistry
from .registry.ollama import OllamaRegistry
from .smoke.base import SmokeFailed
from .smoke.runner import run_smoke
from .sync.errors import SyncError
from .sync.policy import check, sync

# ---------- logging ----------
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _extras(record: logging.LogRecord) -> Dict:
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime(record.created)),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        for k, v in _extras(record).items():
            try:
                json.dumps(v); payload[k] = v
            except Exception:
                payload[k] = str(v)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class KeyValueFormatter(logging.Formatter):
    """Plain text, with `extra=` fields appended as key=value."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = " ".join(f"{k}={v}" for k, v in _extras(record).items())
        return f"{line} {fields}" if fields else line


def configure_logging(log_json: bool, level: str, log_file: Optional[str] = None) -> None:
    lvl = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(lvl)
    fmt = JsonFormatter() if log_json else KeyValueFormatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    h = logging.StreamHandler(sys.stderr)
    h.setLevel(lvl)
    h.setFormatter(fmt)
    root.addHandler(h)
    if log_file:
        # appended across runs, like `tee -a`
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(lvl)
        fh.setFormatter(fmt)
        root.addHandler(fh)


log = logging.getLogger("model_sync.cli")

# ---------- sync + smoke ----------
REGISTRIES = {
    "huggingface": HuggingFaceRegistry,
    "ollama": OllamaRegistry,
}


@dataclass
class Outcome:
    id: str
    ok: bool
    updated: bool = False
    smoke: Optional[str] = None
    error: Optional[str] = None


def process(entry: ManifestEntry, registry, models_dir: str, check_only: bool = False, skip_smoke: bool = False) -> Outcome:
    ref = entry.ref(models_dir)
    try:
        if check_only:
            stored, latest, up_to_date = check(ref, registry)
            log.info("check", extra={"artifact": entry.id, "stored": stored, "latest": latest, "up_to_date": up_to_date})
            return Outcome(id=entry.id, ok=True)

        result = sync(ref, registry, entry.exclude_patterns)
        outcome = Outcome(id=entry.id, ok=True, updated=result.updated)

        if skip_smoke or not entry.smoke:
            return outcome
        target = entry.id if entry.registry == "ollama" else str(result.local_path)
        try:
            smoke = run_smoke(entry.smoke, target)
        except SmokeFailed as e:
            log.error(str(e), exc_info=log.isEnabledFor(logging.DEBUG), extra={"artifact": entry.id})
            outcome.ok, outcome.smoke, outcome.error = False, "fail", str(e)
            return outcome
        except Exception as e:
            # an inference runtime blowing up fails this artifact, not the whole run
            log.error("smoke check crashed", exc_info=True, extra={"artifact": entry.id, "check": entry.smoke})
            outcome.ok, outcome.smoke, outcome.error = False, "fail", f"{entry.smoke} smoke check crashed: {e}"
            return outcome
        level = logging.INFO if smoke.passed else logging.ERROR
        log.log(level, "smoke %s", "PASS" if smoke.passed else "FAIL",
                extra={"artifact": entry.id, "check": smoke.name, "detail": smoke.detail})
        outcome.smoke = "pass" if smoke.passed else "fail"
        outcome.ok = smoke.passed
        return outcome
    except SyncError as e:
        log.error(str(e), exc_info=log.isEnabledFor(logging.DEBUG), extra={"artifact": entry.id})
        return Outcome(id=entry.id, ok=False, error=str(e))


def run(entries: List[ManifestEntry], models_dir: str, check_only: bool = False, skip_smoke: bool = False,
        registries: Optional[Dict] = None) -> List[Outcome]:
    registries = registries if registries is not None else {}
    outcomes = []
    for step, entry in enumerate(entries, 1):
        log.info("step %d/%d", step, len(entries), extra={"artifact": entry.id, "registry": entry.registry})
        if entry.registry not in registries:
            registries[entry.registry] = REGISTRIES[entry.registry]()
        outcomes.append(process(entry, registries[entry.registry], models_dir, check_only, skip_smoke))
    return outcomes


# ---------- CLI ----------
def main(argv: Optional[List[str]] = None) -> None:
    p = argparse.ArgumentParser(description="Download/update local model artifacts and smoke-test them")
    p.add_argument("--manifest", default=MODEL_MANIFEST, help="Path to the models JSON manifest")
    p.add_argument("--models-dir", default=MODELS_DIR, help="Local cache root")
    p.add_argument("--only", nargs="+", metavar="ID", help="Only process these manifest ids")
    p.add_argument("--check", action="store_true", help="Report stored vs latest revision, download nothing")
    p.add_argument("--skip-smoke", action="store_true", help="Do not run inference smoke checks")
    p.add_argument("--log-json", action="store_true", help="Emit JSON logs to stderr")
    p.add_argument("--log-level", default=LOG_LEVEL, choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level")
    p.add_argument("--log-file", default=LOG_FILE, help="Also append logs to this file")
    args = p.parse_args(argv)

    configure_logging(args.log_json, args.log_level, args.log_file)

    try:
        entries = load_manifest(args.manifest)
    except (OSError, ValueError, jsonschema.ValidationError) as e:
        p.error(f"bad manifest {args.manifest}: {e}")
    if args.only:
        unknown = set(args.only) - {e.id for e in entries}
        if unknown:
            p.error(f"not in manifest: {', '.join(sorted(unknown))}")
        entries = [e for e in entries if e.id in args.only]

    outcomes = run(entries, args.models_dir, check_only=args.check, skip_smoke=args.skip_smoke)

    failed = [o for o in outcomes if not o.ok]
    updated = sum(1 for o in outcomes if o.updated)
    print(f"\nDone. Artifacts: {len(outcomes)}  Updated: {updated}  Failed: {len(failed)}  Models dir: {args.models_dir}")
    if failed:
        for o in failed:
            print(f"  [failed] {o.id}: {o.error or 'smoke check failed'}")
        sys.exit(1)


if __name__ == "__main__":
    main()
