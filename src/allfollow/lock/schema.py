from __future__ import annotations

from typing import Annotated, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

FollowsPathDTO = Annotated[List[StrictStr], Field(min_length=1)]
EdgeDTO = Union[StrictStr, FollowsPathDTO]


class LockNodeDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    inputs: Dict[str, EdgeDTO] = {}


class LockFileDTO(BaseModel):
    model_config = ConfigDict(extra="allow")

    version: StrictInt
    root: StrictStr = "root"
    nodes: Dict[str, LockNodeDTO]
