from pydantic import BaseModel
from typing import List, Dict, Literal, Optional, Union

Scalar = Union[str, int, float]
DataRecord = Dict[str, Optional[Scalar]]

ChartType = Literal["bar", "line", "pie", "area", "scatter"]


class ChartConfig(BaseModel):
    title: str
    chartType: ChartType
    dataKey: str
    valueKeys: List[str]
    description: str = ""


class RemovedRowPayload(BaseModel):
    originalRow: DataRecord = {}
    reason: str


class ChangeLog(BaseModel):
    summary: str
    removedRows: List[RemovedRowPayload] = []


class CleaningResults(BaseModel):
    cleanedData: List[DataRecord]
    changeLog: ChangeLog
