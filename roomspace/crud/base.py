from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar
from beanie import Document, PydanticObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo import ASCENDING, DESCENDING

ModelT = TypeVar("ModelT", bound=Document)
CreateSchemaT = TypeVar("CreateSchemaT", bound=BaseModel)
UpdateSchemaT = TypeVar("UpdateSchemaT", bound=BaseModel)

Sort = Sequence[Tuple[str, int]]


def to_object_id(id: Any) -> Optional[PydanticObjectId]:
    """Parse an id string; malformed ids resolve to None"""
    if isinstance(id, PydanticObjectId):
        return id
    try:
        return PydanticObjectId(str(id))
    except (InvalidId, TypeError, ValueError):
        return None


class BaseCRUD(Generic[ModelT, CreateSchemaT, UpdateSchemaT]):
    def __init__(self, model: Type[ModelT]):
        self.model = model

    async def get_by_id(self, id: str) -> Optional[ModelT]:
        object_id = to_object_id(id)
        if object_id is None:
            return None
        return await self.model.find_one({"_id": object_id})

    async def get_one(self, filter_: Dict[str, Any]) -> Optional[ModelT]:
        return await self.model.find_one(dict(filter_))

    async def list(
        self,
        filter_: Optional[Dict[str, Any]] = None,
        limit: int = 50,
        skip: int = 0,
        sort: Optional[Sort] = None,
    ) -> List[ModelT]:
        cursor = self.model.find(dict(filter_ or {}))
        if sort:
            cursor = cursor.sort(list(sort))
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return await cursor.to_list()

    async def count(self, filter_: Optional[Dict[str, Any]] = None) -> int:
        return await self.model.find(dict(filter_ or {})).count()

    async def count_grouped(self, filter_: Dict[str, Any], group_field: str) -> Dict[str, int]:
        """Count documents matching filter_ grouped by group_field, in one aggregation"""
        pipeline = [
            {"$match": filter_},
            {"$group": {"_id": f"${group_field}", "count": {"$sum": 1}}},
        ]
        rows = await self.model.aggregate(pipeline).to_list()
        return {str(row["_id"]): row["count"] for row in rows if row["_id"] is not None}

    async def create(self, obj_in: CreateSchemaT | Dict[str, Any]) -> ModelT:
        data = obj_in.model_dump() if isinstance(obj_in, BaseModel) else dict(obj_in)
        db_obj = self.model(**data)
        await db_obj.insert()
        return db_obj

    async def update(
        self,
        db_obj: ModelT,
        obj_in: UpdateSchemaT | Dict[str, Any],
    ) -> ModelT:
        if isinstance(obj_in, BaseModel):
            update_data = obj_in.model_dump(exclude_unset=True)
        else:
            update_data = dict(obj_in)

        if "updated_at" in type(db_obj).model_fields:
            update_data["updated_at"] = datetime.utcnow()

        await db_obj.set(update_data)
        return db_obj

    async def delete(self, db_obj: ModelT) -> None:
        await db_obj.delete()


def sort_spec(field: str, descending: bool) -> Sort:
    """Sort on field with _id as the final tie-break so paging is stable"""
    direction = DESCENDING if descending else ASCENDING
    return [(field, direction), ("_id", direction)]
