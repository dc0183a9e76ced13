"""
SuperVia data models.
Only the fields the planner consumes are modelled.
"""

from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class _WireModel(BaseModel):
    """Read-only model of an upstream object. Null fields take their default."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Station(_WireModel):
    """Rail station. The id is lowercase and underscore-delimited."""
    id: str
    name: str = Field(default="", alias="nome")


class StationCatalog(_WireModel):
    """Stations in the order the upstream service returned them."""
    stations: List[Station] = Field(default_factory=list, alias="estacoes")

    def __iter__(self):
        return iter(self.stations)

    def __len__(self) -> int:
        return len(self.stations)


class Leg(_WireModel):
    """Single ride on one rail extension."""
    origin_id: str = Field(default="", alias="estacao_origem_id")
    origin_name: str = Field(default="", alias="estacao_origem_nome")
    dest_id: str = Field(default="", alias="estacao_destino_id")
    dest_name: str = Field(default="", alias="estacao_destino_nome")
    departure: str = Field(default="", alias="horario_partida")
    arrival: str = Field(default="", alias="horario_chegada")
    extension_id: str = Field(default="", alias="ramal_id")
    extension_name: str = Field(default="", alias="ramal_nome")


class Traject(_WireModel):
    """Journey grouping. Each inner list is one trip option."""
    trips: List[List[Leg]] = Field(default_factory=list, alias="viagens")


class TripPlan(_WireModel):
    """Itinerary returned by the planner endpoint."""
    trajects: List[Traject] = Field(default_factory=list, alias="trajetos")


class PlanRequest(BaseModel):
    """Raw tokens as typed by the user."""
    origin_token: str
    dest_token: str
    date_token: Optional[str] = None
    time_token: Optional[str] = None


class ResolvedPlan(BaseModel):
    """Plan request with canonical station ids and normalized date/time."""
    origin_id: str
    dest_id: str
    date: str
    time: str


class PlanResult(BaseModel):
    """Everything the CLI needs to print a plan."""
    request: ResolvedPlan
    description: str
    alerts: List[Any] = Field(default_factory=list)
    trip_plan: TripPlan
