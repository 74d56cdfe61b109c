"""
app.py — afsat: Argumentation Semantics API

Serves complete, stable and preferred labellings of abstract
argumentation frameworks computed by SAT.

  Client ──POST apx / attacks──▶ afsat ──▶ APX bridge ──▶ AF
                                      │
                                      └── engine (fresh SAT sessions) ──▶ labellings

Usage:
  afsat                      # or: python -m afsat.app
  curl -X POST localhost:8788/v1/semantics/preferred \\
       -H 'Content-Type: application/json' \\
       -d '{"apx": "arg(a).\\narg(b).\\natt(a,b).\\natt(b,a)."}'
"""

from __future__ import annotations

import logging
import os
import time

import uvicorn
from fastapi import FastAPI, HTTPException

from afsat.argumentation import (
    PRESETS,
    ApxBridge,
    ApxParseError,
    ArgumentationEngine,
    ArgumentationFramework,
    Semantics,
    get_preset,
)
from afsat.models import (
    FrameworkRequest,
    HealthResponse,
    LabellingView,
    PresetInfo,
    SemanticsResponse,
    SkippedLineView,
)
from afsat.utils.audit import get_recent_queries, log_query

# ── Logging ──────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(name)-14s │ %(levelname)-7s │ %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("afsat.server")

# ── Configuration ────────────────────────────────────────────────

VERSION = "0.1.0"
SOLVER = os.environ.get("AFSAT_SOLVER", "glucose4")
MAX_ARGUMENTS = int(os.environ.get("AFSAT_MAX_ARGUMENTS", "64"))
HOST = os.environ.get("AFSAT_HOST", "0.0.0.0")
PORT = int(os.environ.get("AFSAT_PORT", "8788"))
SERVER_START_TIME = time.time()


# ── FastAPI App ──────────────────────────────────────────────────

app = FastAPI(
    title="afsat API",
    description="Complete, stable and preferred labellings of argumentation frameworks via SAT.",
    version=VERSION,
)


def build_framework(req: FrameworkRequest) -> tuple[ArgumentationFramework, list[SkippedLineView]]:
    """Turn a request body into a framework, mapping bad input to HTTP errors."""
    if req.apx is not None:
        try:
            report = ApxBridge(strict=req.strict).parse(req.apx)
        except ApxParseError as e:
            raise HTTPException(status_code=422, detail=str(e))
        af = report.framework
        skipped = [SkippedLineView.from_skipped(s) for s in report.skipped]
    elif req.names is not None:
        try:
            af = ArgumentationFramework.from_named(
                {name: i for i, name in enumerate(req.names)}, req.attacks
            )
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        skipped = []
    else:
        af = ArgumentationFramework.from_attacks(req.attacks)
        skipped = []

    if af.num_args > MAX_ARGUMENTS:
        raise HTTPException(
            status_code=413,
            detail=f"Framework has {af.num_args} arguments; limit is {MAX_ARGUMENTS}",
        )
    return af, skipped


# ═════════════════════════════════════════════════════════════════
#  ENDPOINTS
# ═════════════════════════════════════════════════════════════════


# ── Health ───────────────────────────────────────────────────────

@app.get("/v1/health", response_model=HealthResponse, tags=["System"])
async def health():
    return HealthResponse(
        status="ok",
        version=VERSION,
        uptime_seconds=int(time.time() - SERVER_START_TIME),
        solver=SOLVER,
        max_arguments=MAX_ARGUMENTS,
    )


# ── Semantics ────────────────────────────────────────────────────

@app.post("/v1/semantics/{semantics}", response_model=SemanticsResponse, tags=["Semantics"])
def compute_semantics(semantics: Semantics, req: FrameworkRequest):
    """
    Compute every labelling of the framework under ``semantics``.
    Sync endpoint: FastAPI runs it in the threadpool.
    """
    af, skipped = build_framework(req)
    result = ArgumentationEngine(SOLVER).resolve(af, semantics)
    summary = result.framework_summary

    response = SemanticsResponse(
        semantics=semantics,
        arguments=summary["arguments"],
        num_attacks=summary["stats"]["num_attacks"],
        framework_hash=summary["framework_hash"],
        labellings=[
            LabellingView.from_labelling(lab, summary["arguments"]) for lab in result.labellings
        ],
        skipped_lines=skipped,
        elapsed_ms=result.resolution_time_ms,
    )

    log_query(
        request_id=response.request_id,
        semantics=semantics.value,
        framework_hash=response.framework_hash,
        num_arguments=af.num_args,
        num_attacks=response.num_attacks,
        num_labellings=len(result.labellings),
        elapsed_ms=result.resolution_time_ms,
        solver=SOLVER,
        skipped_lines=len(skipped),
    )

    return response


# ── Presets ──────────────────────────────────────────────────────

def _preset_info(index: int) -> PresetInfo:
    preset = get_preset(index)
    af = preset.framework()
    return PresetInfo(
        index=index,
        name=preset.name,
        description=preset.description,
        apx=preset.apx,
        num_arguments=af.num_args,
        num_attacks=len(af.attacks),
    )


@app.get("/v1/presets", tags=["Presets"])
async def list_presets():
    return {"presets": [_preset_info(i) for i in range(len(PRESETS))]}


@app.get("/v1/presets/{index}", response_model=PresetInfo, tags=["Presets"])
async def get_preset_info(index: int):
    try:
        return _preset_info(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))


# ── Audit Log ────────────────────────────────────────────────────

@app.get("/v1/audit/queries", tags=["Audit"])
async def list_audit_queries(limit: int = 50):
    queries = get_recent_queries(limit=max(1, min(limit, 200)))
    return {"queries": queries, "total": len(queries)}


# ── Entrypoint ───────────────────────────────────────────────────

def main():
    log.info(f"afsat {VERSION} | solver={SOLVER} | max_arguments={MAX_ARGUMENTS}")
    uvicorn.run(
        "afsat.app:app",
        host=HOST,
        port=PORT,
        log_level="info",
        reload=False,
    )


if __name__ == "__main__":
    main()
