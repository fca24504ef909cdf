import pandas as pd

from escopo.extractors.excel.config import ExtractorConfig
from escopo.extractors.excel.header_detector import HeaderDetector


def _df(rows):
    return pd.DataFrame(rows, dtype=object)


def test_header_row_found_below_title_and_decoy_rows():
    df = _df(
        [
            ["ESCOPO-SEQUÊNCIA 2025", None, None, None, None, None],
            [None, None, None, None, None, None],
            # decoy: only two mandatory columns named
            ["Ano", "BIMESTRE", "Observações", None, None, None],
            ["conteudo", "objetos do conhecimento", "habilidades", "bimestre", "série", "OBJETIVOS"],
            ["6º ano", "1º Bimestre", "EF06CI01", "Matéria e energia", "Propriedades físicas", "x"],
        ]
    )
    location = HeaderDetector().locate(df, sheet_name="Ciências")

    assert location is not None
    assert location.row_idx == 3
    assert set(location.matched_fields) == {
        "year_or_grade", "term", "skill_code", "knowledge_object", "content",
    }


def test_three_of_five_is_enough():
    df = _df(
        [
            ["Ano", "Bimestre", "Conteúdo", "Coluna X", "Coluna Y"],
            ["7", "2", "Frações", "a", "b"],
        ]
    )
    location = HeaderDetector().locate(df)
    assert location is not None
    assert location.row_idx == 0
    assert location.matched_fields == ["year_or_grade", "term", "content"]


def test_decoy_below_real_header_is_ignored():
    df = _df(
        [
            ["ANO/SÉRIE", "BIMESTRE", "HABILIDADE", "OBJETOS DO CONHECIMENTO", "CONTEUDO"],
            ["Ano", "Bimestre", "Habilidade", "Objeto do Conhecimento", "Conteúdo"],
        ]
    )
    location = HeaderDetector().locate(df)
    assert location.row_idx == 0


def test_two_matches_is_not_a_header():
    df = _df(
        [
            ["Ano", "Bimestre", "Tema livre"],
            ["6", "1", "x"],
        ]
    )
    assert HeaderDetector().locate(df) is None


def test_header_outside_search_window_not_found():
    rows = [["nota"] for _ in range(10)]
    rows.append(["Ano", "Bimestre", "Habilidade", "Objetos do Conhecimento", "Conteudo"])
    df = _df(rows)
    assert HeaderDetector().locate(df) is None

    wider = HeaderDetector(ExtractorConfig(header_search_rows=11))
    location = wider.locate(df)
    assert location is not None
    assert location.row_idx == 10


def test_threshold_is_configurable():
    df = _df([["Ano", "Bimestre", "Conteúdo"], ["6", "1", "x"]])
    strict = HeaderDetector(ExtractorConfig(min_mandatory_found=5))
    assert strict.locate(df) is None


def test_synonym_must_match_exactly_after_trim():
    df = _df(
        [
            ["Ano letivo", "Bimestres", "Habilidade BNCC", "Objetos", "Conteúdo programático"],
            ["  ANO  ", " bimestre", "HABILIDADES ", None, None],
        ]
    )
    location = HeaderDetector().locate(df)
    assert location is not None
    assert location.row_idx == 1


def test_blank_and_empty_sheets():
    assert HeaderDetector().locate(_df([])) is None
    df = _df([[None, None], ["", "  "]])
    assert HeaderDetector().locate(df) is None


def test_blank_rows_do_not_use_up_search_window():
    rows = [["ESCOPO-SEQUÊNCIA 2025", None, None, None, None]]
    rows.extend([[None, None, None, None, None] for _ in range(9)])
    rows.append(["Ano", "Bimestre", "Habilidade", "Objetos do Conhecimento", "Conteudo"])
    rows.append(["6", "1", "EF06CI01", "Matéria", "Misturas"])
    location = HeaderDetector().locate(_df(rows))

    assert location is not None
    assert location.row_idx == 10
    assert len([r for r in location.scanned_rows if not r["blank"]]) == 2
