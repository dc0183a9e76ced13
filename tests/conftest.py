import pytest

from via.models import Station, StationCatalog
from via.ttl_cache import TTLCache


class FakeClock:
    """Epoch-seconds clock advanced by hand."""

    def __init__(self, start=1_700_000_000.0):
        self.value = start

    def __call__(self):
        return self.value

    def advance(self, seconds):
        self.value += seconds


STATIONS_PAYLOAD = {
    "estacoes": [
        {"id": "santa_cruz", "nome": "Santa Cruz"},
        {"id": "central", "nome": "Central do Brasil"},
        {"id": "saracuruna", "nome": "Saracuruna"},
        {"id": "deodoro", "nome": "Deodoro"},
    ]
}

TRIP_PLAN_PAYLOAD = {
    "trajetos": [
        {
            "viagens": [
                [
                    {
                        "estacao_origem_id": "central",
                        "estacao_origem_nome": "Central do Brasil",
                        "estacao_destino_id": "deodoro",
                        "estacao_destino_nome": "Deodoro",
                        "horario_partida": "08:02:00",
                        "horario_chegada": "08:31:00",
                        "ramal_id": "japeri",
                        "ramal_nome": "Japeri",
                    },
                    {
                        "estacao_origem_id": "deodoro",
                        "estacao_origem_nome": "Deodoro",
                        "estacao_destino_id": "santa_cruz",
                        "estacao_destino_nome": "Santa Cruz",
                        "horario_partida": "08:40:00",
                        "horario_chegada": "09:25:00",
                        "ramal_id": "santa_cruz",
                        "ramal_nome": "Santa Cruz",
                    },
                ]
            ]
        }
    ]
}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(tmp_path, clock):
    return TTLCache(f"sqlite:///{tmp_path / 'cache.db'}", clock=clock)


@pytest.fixture
def catalog():
    return StationCatalog(stations=[
        Station(id="santa_cruz", name="Santa Cruz"),
        Station(id="central", name="Central do Brasil"),
    ])
