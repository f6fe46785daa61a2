"""Scrape, history, export and options endpoint handlers."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response
from pydantic import ValidationError

from scrape_service.api.schemas import HistoryResponse, ScrapeRequest, ScrapeResponse
from scrape_service.api.service import ScraperService
from scrape_service.auth.dependencies import require_api_key
from scrape_service.scraper import DataFormat, ScrapeResult, ScraperOptions

router = APIRouter(dependencies=[Depends(require_api_key)])


def _get_service(request: Request) -> ScraperService:
    return request.app.state.service


def _get_result(service: ScraperService, item_id: str) -> ScrapeResult:
    result = service.get_history_item(item_id)
    if result is None:
        raise HTTPException(status_code=404, detail="History item not found")
    return result


@router.post("/scrape", response_model=ScrapeResponse)
async def create_scrape(
    body: ScrapeRequest,
    service: ScraperService = Depends(_get_service),
):
    try:
        item_id, result = await service.scrape_url(body.url, body.options, body.api_key)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc
    return ScrapeResponse(id=item_id, result=result)


@router.get("/history", response_model=HistoryResponse)
async def list_history(service: ScraperService = Depends(_get_service)):
    return HistoryResponse(items=service.get_history())


@router.get("/history/{item_id}", response_model=ScrapeResult)
async def get_history_item(item_id: str, service: ScraperService = Depends(_get_service)):
    return _get_result(service, item_id)


@router.delete("/history/{item_id}", status_code=204)
async def delete_history_item(item_id: str, service: ScraperService = Depends(_get_service)):
    if not service.delete_history_item(item_id):
        raise HTTPException(status_code=404, detail="History item not found")
    return Response(status_code=204)


@router.delete("/history", status_code=204)
async def clear_history(service: ScraperService = Depends(_get_service)):
    service.clear_history()
    return Response(status_code=204)


@router.get("/history/{item_id}/export")
async def export_history_item(
    item_id: str,
    format: DataFormat = Query("json"),
    service: ScraperService = Depends(_get_service),
):
    result = _get_result(service, item_id)
    if result.data is None:
        raise HTTPException(status_code=409, detail="Scrape failed; nothing to export")

    payload = service.download_data(result.data, format)
    return Response(
        content=payload.content,
        media_type=payload.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{payload.filename}"'},
    )


@router.get("/options", response_model=ScraperOptions, response_model_by_alias=True)
async def get_options(service: ScraperService = Depends(_get_service)):
    return service.get_options()


@router.put("/options", response_model=ScraperOptions, response_model_by_alias=True)
async def update_options(
    changes: dict[str, Any] = Body(...),
    service: ScraperService = Depends(_get_service),
):
    try:
        return service.update_options(**changes)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc
