"""
Schematic Core Backend - FastAPI Application

This is the HTTP entry point for the schematic engine.
It provides:
- Derived state (junctions, no-connects, render list) for a page snapshot
- Validation and summary of a page
- Wire operations (merge, extend, rubberband, segment drag)
- Orthogonal preview paths for the wire tool
- CORS configuration for the editor frontend

The service is stateless: every request carries the page objects it
operates on, and every response is a new set of objects for the caller
to commit.
"""
import logging
import os

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from schematic_core import (
    DragSegmentRequest,
    ExtendWireRequest,
    MergeWiresRequest,
    PageRequest,
    PreviewPathRequest,
    RubberbandRequest,
)
from schematic_core.analysis import find_wire_networks, summarize_page
from schematic_core.derived import compute
from schematic_core.editing import drag_wire_segment
from schematic_core.geometry import get_preview_path
from schematic_core.symbols import find_symbol_by_id
from schematic_core.validation import validate_page, validation_summary
from schematic_core.wiring import extend_wire, find_wire_by_id, merge_wires, rubberband_symbol

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173"
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("SCHEMATIC_CORE_CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
    if origin.strip()
]


# --- FastAPI App ---

app = FastAPI(
    title="Schematic Core API",
    description="Wire connectivity and derived state for the ASCII schematic editor",
    version="1.0.0",
)

# CORS for the editor frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Health Check ---

@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


# --- Page State ---

@app.post("/api/derived")
async def derive(request: PageRequest):
    """Compute derived objects and the render list for a page."""
    state = compute(request.objects)
    return {"success": True, **state.to_dict()}


@app.post("/api/validate")
async def validate(request: PageRequest):
    """Validate a page for structural issues."""
    issues = validate_page(request.objects)
    return {
        "success": True,
        "issues": [issue.to_dict() for issue in issues],
        "summary": validation_summary(issues)
    }


@app.post("/api/summary")
async def summary(request: PageRequest):
    """Summarize a page's objects and wire networks."""
    return {
        "success": True,
        "summary": summarize_page(request.objects).to_dict(),
        "networks": [n.to_dict() for n in find_wire_networks(request.objects)]
    }


# --- Wire Operations ---

@app.post("/api/wires/merge")
async def merge(request: MergeWiresRequest):
    """Merge two wires at coinciding ends."""
    result = merge_wires(request.wire1, request.wire1_is_start, request.wire2, request.wire2_is_start)
    if result is None:
        raise HTTPException(status_code=400, detail="Wire ends do not coincide")
    return {
        "success": True,
        "wire": result.wire.to_json_dict(),
        "deleted_ids": result.deleted_ids
    }


@app.post("/api/wires/extend")
async def extend(request: ExtendWireRequest):
    """Extend a wire from one of its ends."""
    wire = extend_wire(request.wire, request.from_start, request.new_points, request.new_binding)
    return {"success": True, "wire": wire.to_json_dict()}


@app.post("/api/wires/rubberband")
async def rubberband(request: RubberbandRequest):
    """Re-route wires bound to a symbol after it has moved."""
    symbol = find_symbol_by_id(request.symbol_id, request.objects)
    if symbol is None:
        raise HTTPException(status_code=404, detail=f"Symbol not found: {request.symbol_id}")

    wires = rubberband_symbol(symbol, request.objects)
    logger.debug("Rubberbanded %d wire(s) for %s", len(wires), symbol.id)
    return {"success": True, "wires": [w.to_json_dict() for w in wires]}


@app.post("/api/wires/drag-segment")
async def drag_segment(request: DragSegmentRequest):
    """Drag one wire segment, sliding any bound pins it carries."""
    wire = find_wire_by_id(request.wire_id, request.objects)
    if wire is None:
        raise HTTPException(status_code=404, detail=f"Wire not found: {request.wire_id}")

    result = drag_wire_segment(wire, request.segment_index, request.target, request.objects)
    if result is None:
        raise HTTPException(status_code=409, detail="Pin relocation rejected")

    return {
        "success": True,
        "wire": result.wire.to_json_dict(),
        "pin_moves": [
            {"symbol_id": m.symbol_id, "pin_id": m.pin_id, "offset": m.offset}
            for m in result.pin_moves
        ]
    }


# --- Geometry ---

@app.post("/api/geometry/preview-path")
async def preview_path(request: PreviewPathRequest):
    """Orthogonal preview path from an anchor to the cursor."""
    points = get_preview_path(request.anchor, request.cursor, request.horizontal_first)
    return {"success": True, "points": [p.to_json_dict() for p in points]}


# --- Run with uvicorn ---

if __name__ == "__main__":
    import uvicorn

    log_level = os.environ.get("SCHEMATIC_CORE_LOG_LEVEL", "INFO")
    logging.basicConfig(level=log_level, format="%(levelname)s %(name)s: %(message)s")
    uvicorn.run(
        app,
        host=os.environ.get("SCHEMATIC_CORE_HOST", "127.0.0.1"),
        port=int(os.environ.get("SCHEMATIC_CORE_PORT", "8765")),
    )
