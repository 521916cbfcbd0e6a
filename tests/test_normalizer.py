import pytest

from core.errors import ParseError, SchemaError
from core.services.normalizer import normalize, strip_fence


def test_strip_fence_leaves_plain_text_untouched():
    assert strip_fence('  {"resultado": 4, "latex": "2+2=4"}\n') == '{"resultado": 4, "latex": "2+2=4"}'


def test_strip_fence_removes_fence_with_language_tag():
    raw = '```json\n{"resultado":4,"latex":"2+2=4"}\n```'
    assert strip_fence(raw) == '{"resultado":4,"latex":"2+2=4"}'


def test_strip_fence_removes_fence_without_language_tag():
    assert strip_fence("```\n[1, 2]\n```") == "[1, 2]"


def test_strip_fence_without_closing_marker():
    assert strip_fence('```json\n{"a": 1}') == '{"a": 1}'


def test_strip_fence_single_line_keeps_opening_marker():
    # Sin salto de línea no hay línea de apertura que quitar.
    assert strip_fence('```{"a": 1}```') == '```{"a": 1}'


def test_normalize_fenced_and_plain_give_same_result():
    fenced = normalize('```json\n{"resultado":4,"latex":"2+2=4"}\n```')
    plain = normalize('{"resultado":4,"latex":"2+2=4"}')

    assert fenced.resultado == 4
    assert fenced.latex == "2+2=4"
    assert fenced == plain


def test_normalize_missing_latex_is_schema_error():
    with pytest.raises(SchemaError):
        normalize('{"resultado":4}')


def test_normalize_missing_resultado_is_schema_error():
    with pytest.raises(SchemaError):
        normalize('{"latex":"2+2=4"}')


def test_normalize_non_string_latex_is_schema_error():
    with pytest.raises(SchemaError):
        normalize('{"resultado":4,"latex":4}')


def test_normalize_non_object_is_schema_error():
    with pytest.raises(SchemaError):
        normalize("[4, \"2+2=4\"]")


def test_normalize_invalid_json_is_parse_error():
    with pytest.raises(ParseError) as excinfo:
        normalize("not json")

    assert excinfo.value.raw_text == "not json"
    assert "not json" in str(excinfo.value)


@pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
def test_normalize_rejects_non_standard_json_constants(constant):
    with pytest.raises(ParseError):
        normalize(f'{{"resultado": {constant}, "latex": "0/0"}}')


def test_normalize_accepts_non_numeric_resultado():
    result = normalize('{"resultado":"x = 2","latex":"x=2","extra":true}')

    assert result.resultado == "x = 2"
    assert result.display_value() == "x = 2"


def test_normalize_accepts_null_resultado():
    result = normalize('{"resultado":null,"latex":"\\\\emptyset"}')

    assert result.resultado is None
    assert result.latex == "\\emptyset"
