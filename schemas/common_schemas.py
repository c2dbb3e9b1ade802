from decimal import Decimal
from typing import Annotated, Generic, TypeVar
from pydantic import BaseModel, PlainSerializer

# Prices and totals stay Decimal in Python and serialize as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

DataT = TypeVar("DataT")


class SuccessResponse(BaseModel, Generic[DataT]):
    success: bool = True
    data: DataT


class MessageData(BaseModel):
    message: str
