"""Service that reports where business objects are used in a SAP BI folder"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Query
from typing import Dict, List
from PySap_config import SapConfig, configure_logging
from PySap_exceptions import AuthError, NotFoundError, SapError
from object_usage import find_object_usage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(title="SAP BI object usage", lifespan=lifespan)


def status_for_error(error: SapError) -> int:
    if isinstance(error, AuthError):
        return 401
    if isinstance(error, NotFoundError):
        return 404
    return 502


@app.get("/object_usage")
def object_usage(folder_id: str, object_names: List[str] = Query(...)) -> List[Dict[str, str]]:
    """Scan a folder with the server credential.

    :param folder_id: SAP folder id
    :param object_names: Result object names, repeat the parameter for several
    :return: One entry per match"""

    try:
        config = SapConfig.from_env(require_scan=False)
    except ValueError as e:
        logger.error(f"Service is not configured: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    config.folder_id = folder_id
    config.object_names = object_names
    config.output_file = None

    try:
        records = find_object_usage(config)
    except SapError as e:
        raise HTTPException(status_code=status_for_error(e), detail=str(e))

    return [record._asdict() for record in records]
