import io
import sys
from pathlib import Path

import pandas as pd

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from escopo.pipeline import ingest_workbook

HEADER = ["ANO/SÉRIE", "BIMESTRE", "HABILIDADE", "OBJETOS DO CONHECIMENTO", "CONTEUDO", "OBJETIVOS"]


def _build_workbook(data_rows: int) -> bytes:
    sheets = {
        "Índice": pd.DataFrame([["Matemática"], ["Língua Portuguesa"], ["Rascunho"]]),
        "Matemática": pd.DataFrame(
            [["Escopo-sequência 2025"], HEADER]
            + [
                [f"{6 + i % 4}º ano", f"{1 + i % 4}º Bimestre", f"EF0{6 + i % 4}MA{i:02d}",
                 "Números", f"Conteúdo {i}", "" if i % 3 else f"Objetivo {i}"]
                for i in range(data_rows)
            ]
            + [["9º ano", "4º Bimestre", "EF09MA99", "", "Sem objeto"]]
        ),
        "Língua Portuguesa": pd.DataFrame(
            [HEADER[:5], ["6º ano", "1º Bimestre", "EF67LP01", "Leitura", "Notícia"]]
        ),
        "Rascunho": pd.DataFrame([["anotações soltas"]]),
    }
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for name, df in sheets.items():
            df.to_excel(writer, sheet_name=name, index=False, header=False)
    return buf.getvalue()


def main() -> None:
    data_rows = 40
    result = ingest_workbook(_build_workbook(data_rows), "Anos Finais")

    assert len(result.items) == data_rows + 1
    assert result.rows_skipped == 1
    assert {i.subject for i in result.items} == {"Matemática", "Língua Portuguesa"}
    reasons = {s.sheet_name: s.reason for s in result.sheets}
    assert reasons["Índice"] == "excluded_sheet"
    assert reasons["Rascunho"] == "no_header_row"
    assert result.items[0].objectives == "Objetivo 0"
    assert result.items[1].objectives is None
    print("Workbook ingestion smoke test passed.")


if __name__ == "__main__":
    main()
