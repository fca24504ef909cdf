from escopo.extractors.excel.schema_mapper import HeaderMapping, MappingFailure, SchemaMapper


def test_maps_all_fields_and_keeps_original_casing():
    cells = ["Conteúdo", "BIMESTRE", "Ano/Série", "Objetos do Conhecimento", "Habilidades", "Objetivos"]
    mapping = SchemaMapper().map_headers(cells)

    assert isinstance(mapping, HeaderMapping)
    assert mapping.column("content") == 0
    assert mapping.column("term") == 1
    assert mapping.column("year_or_grade") == 2
    assert mapping.column("knowledge_object") == 3
    assert mapping.column("skill_code") == 4
    assert mapping.column("objectives") == 5
    assert mapping.header_by_field["year_or_grade"] == "Ano/Série"
    assert mapping.header_by_field["skill_code"] == "Habilidades"


def test_optional_field_absent_maps_to_none():
    cells = ["Ano", "Bimestre", "Habilidade", "Objeto do Conhecimento", "Conteudo"]
    mapping = SchemaMapper().map_headers(cells)

    assert isinstance(mapping, HeaderMapping)
    assert mapping.column("objectives") is None
    assert mapping.column("cycle") is None
    assert "objectives" not in mapping.header_by_field


def test_synonym_order_decides_between_columns():
    # "ANO/SÉRIE" is listed before "Ano", so the later column wins.
    cells = ["Ano", "Bimestre", "Habilidade", "Objeto do Conhecimento", "Conteudo", "Ano/Série"]
    mapping = SchemaMapper().map_headers(cells)
    assert mapping.column("year_or_grade") == 5


def test_leftmost_duplicate_column_wins():
    cells = ["Conteúdo", "Ano", "Bimestre", "Habilidade", "Objeto do Conhecimento", "Conteúdo"]
    mapping = SchemaMapper().map_headers(cells)
    assert mapping.column("content") == 0


def test_missing_mandatory_column_fails_with_suggestion():
    cells = ["Ano", "Bimestre", "Habilidade", "Objetos do Conhecimentos", "Conteudo"]
    result = SchemaMapper().map_headers(cells)

    assert isinstance(result, MappingFailure)
    assert result.missing_fields == ["knowledge_object"]
    assert result.suggestions.get("knowledge_object") == "Objetos do Conhecimentos"
    assert result.partial is not None
    assert result.partial.column("year_or_grade") == 0


def test_missing_several_columns_without_candidates():
    result = SchemaMapper().map_headers(["Ano", "Bimestre", "Conteúdo"])
    assert isinstance(result, MappingFailure)
    assert result.missing_fields == ["skill_code", "knowledge_object"]
    assert result.suggestions == {}
