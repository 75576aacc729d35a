# digipin_api/main.py
import io
import logging

from fastapi import FastAPI, File, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse, StreamingResponse

from . import config
from .digipin import DigipinError
from .models import (CellsRequest, CoordinatesRequest, DigipinRequest,
                     ToolCallRequest)
from .processing import (cells_to_geojson, run_decoding_pipeline,
                         run_encoding_pipeline)
from .tools import (TOOLS, UnknownToolError, call_tool, coordinates_payload,
                    decode_payload, encode_payload, info_payload,
                    validate_payload)

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="DIGIPIN API", version=config.SERVICE_VERSION)

logger.info("%s %s started with %d tools", config.SERVICE_NAME, config.SERVICE_VERSION, len(TOOLS))


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.get("/health")
async def health():
    return {"status": "ok", "name": config.SERVICE_NAME, "version": config.SERVICE_VERSION, "tools": len(TOOLS)}


# --- Tool dispatch ---

@app.get("/tools")
async def list_tools():
    return {"tools": TOOLS}


@app.post("/tools/{name}")
async def run_tool(name: str, request: ToolCallRequest):
    """
    Runs one of the DIGIPIN tools with raw arguments.
    Errors are returned in the same envelope with success set to false.
    """
    try:
        return call_tool(name, request.arguments)
    except UnknownToolError as e:
        return _error_response(status.HTTP_404_NOT_FOUND, str(e))
    except ValueError as e:
        return _error_response(status.HTTP_400_BAD_REQUEST, str(e))


# --- Typed endpoints ---

@app.post("/encode")
async def encode_endpoint(request: CoordinatesRequest):
    try:
        return {"success": True, **encode_payload(request.latitude, request.longitude)}
    except DigipinError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/decode")
async def decode_endpoint(request: DigipinRequest):
    try:
        return {"success": True, **decode_payload(request.digipin)}
    except DigipinError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/validate")
async def validate_endpoint(request: DigipinRequest):
    return {"success": True, **validate_payload(request.digipin)}


@app.post("/info")
async def info_endpoint(request: DigipinRequest):
    try:
        return {"success": True, **info_payload(request.digipin)}
    except DigipinError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/validate-coordinates")
async def validate_coordinates_endpoint(request: CoordinatesRequest):
    return {"success": True, **coordinates_payload(request.latitude, request.longitude)}


# --- Batch endpoints ---

def _csv_response(df, filename: str) -> StreamingResponse:
    output_stream = io.StringIO()
    df.to_csv(output_stream, index=False)
    output_stream.seek(0)

    return StreamingResponse(
        iter([output_stream.read()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@app.post("/process-csv/")
async def process_csv_endpoint(points_file: UploadFile = File(...)):
    """
    Appends a DIGIPIN to every row of an uploaded CSV of coordinates.
    """
    try:
        result_df = run_encoding_pipeline(points_file.file)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Error during encoding pipeline")
        raise HTTPException(status_code=500, detail=f"An error occurred during processing: {e}")

    return _csv_response(result_df, "digipin_encoded.csv")


@app.post("/decode-csv/")
async def decode_csv_endpoint(codes_file: UploadFile = File(...)):
    """
    Appends the cell center of every DIGIPIN in an uploaded CSV.
    """
    try:
        result_df = run_decoding_pipeline(codes_file.file)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Error during decoding pipeline")
        raise HTTPException(status_code=500, detail=f"An error occurred during processing: {e}")

    return _csv_response(result_df, "digipin_decoded.csv")


@app.post("/cells")
async def cells_endpoint(request: CellsRequest):
    """Returns the grid cells of the given DIGIPINs as GeoJSON."""
    try:
        return cells_to_geojson(request.codes, request.level)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
