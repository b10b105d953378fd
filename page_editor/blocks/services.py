"""Bloc Services — liste de prestations (titre + description)."""
from typing import List, Literal

from pydantic import BaseModel, ConfigDict

from .base import BlockContent


class ServiceItem(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    title: str = ""
    description: str = ""


class ServicesContent(BlockContent):
    kind: Literal["services"] = "services"
    title: str = ""
    services: List[ServiceItem] = []
