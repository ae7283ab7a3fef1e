"""
Route spreadsheets (openpyxl).

Import
------
The first sheet holds one route per row with the columns::

    motorista | origem | destino1 | destino2 | destino3 |
    quantidadePacotes | valorPorPacote | outrosCustos

Rows are validated independently: a bad row is reported as
``"Line N: ..."`` (N is the sheet line, the header is line 1) and skipped,
the remaining rows are still imported.  The total package count is spread
evenly over the 1-3 destination cities; the remainder goes one unit each
to the first destinations (50 over 3 -> 17, 17, 16).

Export
------
* ``build_template_workbook`` -- fill-in template with sample routes and
  instruction / rules sheets.
* ``export_history_workbook`` -- one row per history entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any, Iterable, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font

from route_profit.domain.entities import Destination, HistoryEntry, RouteRequest
from route_profit.domain.errors import SpreadsheetError

logger = logging.getLogger(__name__)

ROUTE_COLUMNS = (
    "motorista",
    "origem",
    "destino1",
    "destino2",
    "destino3",
    "quantidadePacotes",
    "valorPorPacote",
    "outrosCustos",
)
DESTINATION_COLUMNS = ("destino1", "destino2", "destino3")

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass
class ImportResult:
    routes: list[RouteRequest] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


# ── Import ────────────────────────────────────────────────────────────


def distribute_packages(total: int, destination_count: int) -> list[int]:
    """Split *total* packages over *destination_count* stops, remainder first."""
    base, remainder = divmod(total, destination_count)
    return [base + (1 if i < remainder else 0) for i in range(destination_count)]


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    return ""


def _number(value: Any) -> float | None:
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _validate_row(line: int, row: dict[str, Any]) -> tuple[RouteRequest | None, str | None]:
    driver = _text(row.get("motorista"))
    if not driver:
        return None, f"Line {line}: driver name is required"

    origin = _text(row.get("origem"))
    if not origin:
        return None, f"Line {line}: origin city is required"

    if not _text(row.get("destino1")):
        return None, f"Line {line}: at least destino1 is required"

    packages = _number(row.get("quantidadePacotes"))
    if packages is None or packages <= 0:
        return None, f"Line {line}: package quantity must be a number greater than zero"
    if not packages.is_integer():
        return None, f"Line {line}: package quantity must be a whole number"

    value = _number(row.get("valorPorPacote"))
    if value is None or value <= 0:
        return None, f"Line {line}: value per package must be a number greater than zero"

    other_costs = _number(row.get("outrosCustos"))
    if other_costs is None or other_costs < 0:
        return None, f"Line {line}: other costs must be a number greater than or equal to zero"

    cities = [c for c in (_text(row.get(col)) for col in DESTINATION_COLUMNS) if c]
    shares = distribute_packages(int(packages), len(cities))
    destinations = tuple(
        Destination(
            id=f"{line}-{position}",
            city=city,
            packages=share,
            value_per_package=round(value, 2),
        )
        for position, (city, share) in enumerate(zip(cities, shares))
    )
    return (
        RouteRequest(
            driver=driver,
            origin=origin,
            destinations=destinations,
            route_cost=round(other_costs, 2),
        ),
        None,
    )


def _is_blank(values: Sequence[Any]) -> bool:
    return all(v is None or (isinstance(v, str) and not v.strip()) for v in values)


def parse_route_workbook(content: bytes) -> ImportResult:
    """Parse an uploaded ``.xlsx`` file into route requests plus row errors."""
    try:
        workbook = load_workbook(filename=BytesIO(content), read_only=True, data_only=True)
    except Exception as exc:  # openpyxl raises a wide mix of zip/xml/key errors
        raise SpreadsheetError(f"Could not read Excel file: {exc}") from exc

    result = ImportResult()
    try:
        worksheet = workbook.worksheets[0]
        rows = worksheet.iter_rows(values_only=True)
        header_row = next(rows, None) or ()
        headers = [str(cell).strip() if cell is not None else "" for cell in header_row]

        data_seen = False
        for line, values in enumerate(rows, start=2):
            if _is_blank(values):
                continue
            data_seen = True
            row = {headers[i]: cell for i, cell in enumerate(values) if i < len(headers)}
            route, error = _validate_row(line, row)
            if error:
                result.errors.append(error)
            else:
                result.routes.append(route)
    finally:
        workbook.close()

    if not data_seen:
        result.errors.append("Excel file is empty or contains no valid data")

    logger.info(
        "Spreadsheet import: %d routes accepted, %d rows rejected",
        len(result.routes),
        len(result.errors),
    )
    return result


# ── Export ────────────────────────────────────────────────────────────

_TEMPLATE_ROUTES = (
    ("João Silva", "São Paulo, SP", "Rio de Janeiro, RJ", "Belo Horizonte, MG", "", 50, 25.5, 400),
    ("Maria Santos", "Curitiba, PR", "Florianópolis, SC", "Porto Alegre, RS", "Caxias do Sul, RS", 75, 30.0, 600),
    ("Pedro Costa", "Salvador, BA", "Recife, PE", "", "", 30, 40.0, 350),
)

_INSTRUCTIONS = (
    ("Campo", "Descrição", "Exemplo", "Obrigatório", "Tipo"),
    ("motorista", "Nome completo do motorista", "João Silva", "SIM", "Texto"),
    ("origem", "Cidade de coleta (inclua estado)", "São Paulo, SP", "SIM", "Texto"),
    ("destino1", "Primeira cidade de destino", "Rio de Janeiro, RJ", "SIM", "Texto"),
    ("destino2", "Segunda cidade de destino (opcional)", "Belo Horizonte, MG", "NÃO", "Texto"),
    ("destino3", "Terceira cidade de destino (opcional)", "Santos, SP", "NÃO", "Texto"),
    ("quantidadePacotes", "Quantidade total de pacotes", "50", "SIM", "Número"),
    ("valorPorPacote", "Valor unitário por pacote", "25.50", "SIM", "Número"),
    ("outrosCustos", "Custos extras (pedágios, manutenção, etc.)", "400.00", "SIM", "Número"),
)

_EXAMPLES = (
    ("Exemplo", "Pacotes", "Valor/Pacote", "Receita Total", "Outros Custos", "Lucro Bruto", "Margem %"),
    ("Rota Simples", 50, 25.5, "50 × 25.50 = R$ 1.275,00", 400, "1.275 - 400 = R$ 875,00", "68.6%"),
    ("Rota Múltipla", 75, 30.0, "75 × 30.00 = R$ 2.250,00", 600, "2.250 - 600 = R$ 1.650,00", "73.3%"),
    ("Rota Econômica", 30, 40.0, "30 × 40.00 = R$ 1.200,00", 350, "1.200 - 350 = R$ 850,00", "70.8%"),
)

_RULES = (
    ("Regra", "Detalhes"),
    ("Fórmula Principal", "Receita Total = Quantidade de Pacotes × Valor por Pacote"),
    ("Lucro Bruto", "Lucro = Receita Total - Outros Custos (sem combustível)"),
    ("Combustível", "Calculado automaticamente com base na origem da rota"),
    ("Distribuição", "Pacotes distribuídos igualmente entre os destinos"),
    ("Destinos", "Mínimo 1 destino (destino1), máximo 3 destinos"),
    ("Valores", "Todos os valores devem ser números positivos"),
    ("Cidades", "Sempre incluir estado: 'São Paulo, SP'"),
)

HISTORY_COLUMNS = (
    "Date",
    "Driver",
    "Route",
    "Distance (km)",
    "Travel time (h)",
    "Packages",
    "Revenue (R$)",
    "Other costs (R$)",
    "Fuel (R$)",
    "Recommended fuel",
    "Profit (R$)",
    "Margin (%)",
)


def _fill_sheet(worksheet, rows: Iterable[Sequence[Any]], widths: Sequence[int]) -> None:
    for row in rows:
        worksheet.append(list(row))
    for cell in worksheet[1]:
        cell.font = Font(bold=True)
    for index, width in enumerate(widths):
        worksheet.column_dimensions[chr(ord("A") + index)].width = width


def _to_bytes(workbook: Workbook) -> bytes:
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def build_template_workbook() -> bytes:
    workbook = Workbook()
    routes = workbook.active
    routes.title = "Rotas"
    _fill_sheet(routes, (ROUTE_COLUMNS, *_TEMPLATE_ROUTES), (15, 20, 20, 20, 20, 12, 12, 12))
    _fill_sheet(workbook.create_sheet("Instruções"), _INSTRUCTIONS, (18, 40, 20, 12, 10))
    _fill_sheet(workbook.create_sheet("Exemplos de Cálculo"), _EXAMPLES, (15, 8, 12, 25, 12, 25, 10))
    _fill_sheet(workbook.create_sheet("Regras"), _RULES, (20, 60))
    return _to_bytes(workbook)


def export_history_workbook(entries: Sequence[HistoryEntry]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "History"
    rows = [HISTORY_COLUMNS]
    for entry in entries:
        r = entry.result
        rows.append(
            (
                entry.date.strftime("%Y-%m-%d %H:%M"),
                r.driver,
                r.route_name,
                r.total_distance,
                round(r.total_travel_time, 2),
                r.total_packages,
                round(r.total_revenue, 2),
                round(r.route_cost, 2),
                round(r.fuel_cost, 2),
                r.fuel_analysis.recommendation.value,
                round(r.profit, 2),
                round(r.profit_margin, 1),
            )
        )
    _fill_sheet(sheet, rows, (17, 18, 50, 14, 10, 10, 14, 16, 16, 22, 14, 11))
    return _to_bytes(workbook)
