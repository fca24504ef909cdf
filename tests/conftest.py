"""
Pytest configuration and shared fixtures.
"""
import io
import os
import sys
from typing import Any, Dict, List

import pytest
from openpyxl import Workbook

# Add project root to path for imports
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)


HEADER = ["Ano/Série", "Bimestre", "Habilidade", "Objetos do Conhecimento", "Conteudo"]


def build_workbook(sheets: Dict[str, List[List[Any]]]) -> bytes:
    """Write ``{sheet_name: rows}`` to an in-memory .xlsx, preserving order."""
    wb = Workbook()
    first = True
    for name, rows in sheets.items():
        if first:
            ws = wb.active
            ws.title = name
            first = False
        else:
            ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def make_workbook():
    return build_workbook


@pytest.fixture
def header_row():
    return list(HEADER)


@pytest.fixture
def ciencias_workbook():
    """Single 'Ciências' sheet with one header row and one data row."""
    return build_workbook(
        {
            "Ciências": [
                list(HEADER),
                ["6º ano", "1º Bimestre", "EF06CI01", "Matéria e energia", "Propriedades físicas"],
            ]
        }
    )


@pytest.fixture
def store_path(tmp_path):
    return str(tmp_path / "store" / "escopo_sequencia.json")
