"""
Region and fuel price lookup.

Cities are mapped to their Brazilian state through a static table of the
main cities; states are mapped to average per-liter diesel and gasoline
prices (R$).  Both lookups always return a value: unknown cities fall back
to São Paulo and unknown states to the national average price.

Substring fallback
------------------
When a name has no exact entry (``"são paulo, sp"``), the table is scanned
for a key contained in the name or containing it.  Keys are scanned
longest first, then alphabetically, so the most specific city wins and the
result never depends on dictionary ordering.
"""

from __future__ import annotations

from types import MappingProxyType

from .enums import FuelType

DEFAULT_STATE = "São Paulo"

NATIONAL_AVERAGE_PRICES = MappingProxyType(
    {FuelType.DIESEL: 5.70, FuelType.GASOLINE: 6.00}
)

CITY_TO_STATE = MappingProxyType(
    {
        # São Paulo
        "são paulo": "São Paulo",
        "santos": "São Paulo",
        "campinas": "São Paulo",
        "sorocaba": "São Paulo",
        "ribeirão preto": "São Paulo",
        "santo andré": "São Paulo",
        "osasco": "São Paulo",
        "guarulhos": "São Paulo",
        # Rio de Janeiro
        "rio de janeiro": "Rio de Janeiro",
        "niterói": "Rio de Janeiro",
        "nova iguaçu": "Rio de Janeiro",
        "duque de caxias": "Rio de Janeiro",
        "campos": "Rio de Janeiro",
        # Minas Gerais
        "belo horizonte": "Minas Gerais",
        "uberlândia": "Minas Gerais",
        "contagem": "Minas Gerais",
        "juiz de fora": "Minas Gerais",
        "betim": "Minas Gerais",
        # Rio Grande do Sul
        "porto alegre": "Rio Grande do Sul",
        "caxias do sul": "Rio Grande do Sul",
        "pelotas": "Rio Grande do Sul",
        "canoas": "Rio Grande do Sul",
        "santa maria": "Rio Grande do Sul",
        # Paraná
        "curitiba": "Paraná",
        "londrina": "Paraná",
        "maringá": "Paraná",
        "ponta grossa": "Paraná",
        "cascavel": "Paraná",
        # Bahia
        "salvador": "Bahia",
        "feira de santana": "Bahia",
        "vitória da conquista": "Bahia",
        "camaçari": "Bahia",
        "itabuna": "Bahia",
        # Santa Catarina
        "florianópolis": "Santa Catarina",
        "joinville": "Santa Catarina",
        "blumenau": "Santa Catarina",
        "são josé": "Santa Catarina",
        "criciúma": "Santa Catarina",
        # Goiás
        "goiânia": "Goiás",
        "aparecida de goiânia": "Goiás",
        "anápolis": "Goiás",
        "rio verde": "Goiás",
        # Pernambuco
        "recife": "Pernambuco",
        "jaboatão": "Pernambuco",
        "olinda": "Pernambuco",
        "caruaru": "Pernambuco",
        "petrolina": "Pernambuco",
        # Ceará
        "fortaleza": "Ceará",
        "caucaia": "Ceará",
        "juazeiro do norte": "Ceará",
        "maracanaú": "Ceará",
        "sobral": "Ceará",
        # Pará
        "belém": "Pará",
        "ananindeua": "Pará",
        "santarém": "Pará",
        "marabá": "Pará",
        # Maranhão
        "são luís": "Maranhão",
        "imperatriz": "Maranhão",
        "timon": "Maranhão",
        # Distrito Federal
        "brasília": "Distrito Federal",
        # Amazonas
        "manaus": "Amazonas",
        # Mato Grosso
        "cuiabá": "Mato Grosso",
        "várzea grande": "Mato Grosso",
        "rondonópolis": "Mato Grosso",
        # Espírito Santo
        "vitória": "Espírito Santo",
        "vila velha": "Espírito Santo",
        "serra": "Espírito Santo",
        "cariacica": "Espírito Santo",
        # Paraíba
        "joão pessoa": "Paraíba",
        "campina grande": "Paraíba",
        # Rio Grande do Norte
        "natal": "Rio Grande do Norte",
        "mossoró": "Rio Grande do Norte",
        # Alagoas
        "maceió": "Alagoas",
        "arapiraca": "Alagoas",
        # Sergipe
        "aracaju": "Sergipe",
        # Piauí
        "teresina": "Piauí",
        "parnaíba": "Piauí",
        # Mato Grosso do Sul
        "campo grande": "Mato Grosso do Sul",
        "dourados": "Mato Grosso do Sul",
        # North
        "rio branco": "Acre",
        "porto velho": "Rondônia",
        "boa vista": "Roraima",
        "macapá": "Amapá",
        "palmas": "Tocantins",
    }
)

DIESEL_PRICES = MappingProxyType(
    {
        "São Paulo": 5.51,
        "Rio de Janeiro": 5.85,
        "Minas Gerais": 5.68,
        "Rio Grande do Sul": 5.53,
        "Paraná": 5.56,
        "Bahia": 5.71,
        "Santa Catarina": 5.58,
        "Goiás": 5.59,
        "Pernambuco": 5.70,
        "Ceará": 5.64,
        "Pará": 5.92,
        "Maranhão": 5.72,
        "Distrito Federal": 5.55,
        "Amazonas": 6.01,
        "Mato Grosso": 5.62,
        "Espírito Santo": 5.73,
        "Paraíba": 5.63,
        "Rio Grande do Norte": 5.61,
        "Alagoas": 5.67,
        "Sergipe": 5.67,
        "Piauí": 5.74,
        "Mato Grosso do Sul": 5.65,
        "Acre": 6.12,
        "Rondônia": 5.95,
        "Roraima": 6.18,
        "Amapá": 5.98,
        "Tocantins": 5.76,
    }
)

GASOLINE_PRICES = MappingProxyType(
    {
        "São Paulo": 5.89,
        "Rio de Janeiro": 6.23,
        "Minas Gerais": 6.05,
        "Rio Grande do Sul": 5.91,
        "Paraná": 5.94,
        "Bahia": 6.08,
        "Santa Catarina": 5.96,
        "Goiás": 5.97,
        "Pernambuco": 6.07,
        "Ceará": 6.01,
        "Pará": 6.29,
        "Maranhão": 6.09,
        "Distrito Federal": 5.93,
        "Amazonas": 6.38,
        "Mato Grosso": 5.99,
        "Espírito Santo": 6.10,
        "Paraíba": 6.00,
        "Rio Grande do Norte": 5.98,
        "Alagoas": 6.04,
        "Sergipe": 6.04,
        "Piauí": 6.11,
        "Mato Grosso do Sul": 6.02,
        "Acre": 6.49,
        "Rondônia": 6.32,
        "Roraima": 6.55,
        "Amapá": 6.35,
        "Tocantins": 6.13,
    }
)

_PRICE_TABLES = MappingProxyType(
    {FuelType.DIESEL: DIESEL_PRICES, FuelType.GASOLINE: GASOLINE_PRICES}
)

# Fallback scan order: longest key first, ties alphabetical
_FALLBACK_KEYS: tuple[str, ...] = tuple(
    sorted(CITY_TO_STATE, key=lambda key: (-len(key), key))
)


def normalize_city(city: str) -> str:
    return city.strip().lower()


def state_for(city: str) -> str:
    """Return the state a city belongs to, defaulting to São Paulo."""
    name = normalize_city(city)
    if not name:
        return DEFAULT_STATE

    state = CITY_TO_STATE.get(name)
    if state is not None:
        return state

    for key in _FALLBACK_KEYS:
        if key in name or name in key:
            return CITY_TO_STATE[key]

    return DEFAULT_STATE


def price_for(state: str, fuel_type: FuelType) -> float:
    """Average price per liter for *fuel_type* in *state*."""
    return _PRICE_TABLES[fuel_type].get(state, NATIONAL_AVERAGE_PRICES[fuel_type])
