from typing import Annotated

from fastapi import APIRouter, Depends, FastAPI, Path, Response, status
from fastapi.routing import APIRoute

from taskboard.database.deps import get_pool
from taskboard.database.pool import ConnectionPool
from taskboard.resources import EntityResource
from taskboard.schemas.ids import ID_MAX, ID_MIN

ItemId = Annotated[int, Path(ge=ID_MIN, le=ID_MAX)]


def build_crud_router(resource: EntityResource) -> APIRouter:
    router = APIRouter(prefix=resource.path, tags=[resource.name])
    store = resource.store
    out_schema = resource.out_schema
    create_schema = resource.create_schema

    @router.get("", response_model=list[out_schema], name=f"list_{resource.name}")
    def list_items(pool: ConnectionPool = Depends(get_pool)):
        with pool.session() as db:
            rows = store.read_all(db)
            return [out_schema.model_validate(row) for row in rows]

    @router.get("/{item_id}", response_model=out_schema, name=f"read_{resource.name}")
    def read_item(item_id: ItemId, pool: ConnectionPool = Depends(get_pool)):
        with pool.session() as db:
            row = store.read(db, item_id)
            if row is None:
                return Response(status_code=status.HTTP_404_NOT_FOUND)
            return out_schema.model_validate(row)

    @router.post(
        "",
        response_model=out_schema,
        status_code=status.HTTP_201_CREATED,
        name=f"create_{resource.name}",
    )
    def create_item(payload: create_schema, pool: ConnectionPool = Depends(get_pool)):
        with pool.session() as db:
            row = store.create(db, payload)
            return out_schema.model_validate(row)

    @router.put("/{item_id}", response_model=out_schema, name=f"update_{resource.name}")
    def update_item(item_id: ItemId, payload: create_schema, pool: ConnectionPool = Depends(get_pool)):
        with pool.session() as db:
            row = store.update(db, item_id, payload)
            if row is None:
                return Response(status_code=status.HTTP_404_NOT_FOUND)
            return out_schema.model_validate(row)

    @router.delete("/{item_id}", name=f"delete_{resource.name}")
    def delete_item(item_id: ItemId, pool: ConnectionPool = Depends(get_pool)):
        with pool.session() as db:
            deleted = store.delete(db, item_id)
        if not deleted:
            return Response(status_code=status.HTTP_404_NOT_FOUND)
        return {"deleted": deleted}

    return router


def route_table(app: FastAPI) -> list[tuple[str, str, str]]:
    table = []
    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue
        for method in sorted(route.methods):
            table.append((method, route.path, route.name))
    return table
