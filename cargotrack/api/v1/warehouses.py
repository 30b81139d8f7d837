"""Warehouse endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cargotrack.api.deps import get_db
from cargotrack.schemas.warehouse import (
    ConsignmentResponse,
    WarehouseCreate,
    WarehouseDetailResponse,
    WarehouseLogResponse,
    WarehouseResponse,
)
from cargotrack.services.warehouse_service import warehouse_service

router = APIRouter()


@router.post("", response_model=WarehouseResponse, status_code=status.HTTP_201_CREATED)
async def create_warehouse(
    request: WarehouseCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WarehouseResponse:
    """Register a warehouse."""
    warehouse = await warehouse_service.create_warehouse(db, **request.model_dump())
    return WarehouseResponse.model_validate(warehouse)


@router.get("", response_model=list[WarehouseResponse])
async def list_warehouses(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[WarehouseResponse]:
    """List active warehouses."""
    warehouses = await warehouse_service.list_active(db)
    return [WarehouseResponse.model_validate(w) for w in warehouses]


@router.get("/{warehouse_id}", response_model=WarehouseDetailResponse)
async def get_warehouse(
    warehouse_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WarehouseDetailResponse:
    """Warehouse details with the consignments currently inside."""
    warehouse = await warehouse_service.get_warehouse(db, warehouse_id)
    consignments = await warehouse_service.list_open_consignments(db, warehouse_id)

    return WarehouseDetailResponse(
        **WarehouseResponse.model_validate(warehouse).model_dump(),
        consignments=[ConsignmentResponse.model_validate(c) for c in consignments],
    )


@router.get("/{warehouse_id}/logs", response_model=list[WarehouseLogResponse])
async def list_warehouse_logs(
    warehouse_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[WarehouseLogResponse]:
    """Incoming/outgoing movements, newest first."""
    logs = await warehouse_service.list_logs(db, warehouse_id)
    return [WarehouseLogResponse.model_validate(log) for log in logs]
