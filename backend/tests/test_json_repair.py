"""
Tests for recovering JSON from LLM output.
"""

import json

import pytest

from learnhub.core.errors import UnparsableAIResponse
from learnhub.services.json_repair import (
    ResponseRepairPipeline,
    escape_control_characters,
    extract_fenced_block,
    match_brackets,
    normalize_template_literals,
    repair_json,
    repair_truncated_array,
)


class TestDirectParse:
    """Already-valid JSON passes through unchanged."""

    def test_object(self):
        value = {"title": "Sum", "tags": ["a", "b"], "n": 3}
        assert repair_json(json.dumps(value)) == value

    @pytest.mark.parametrize(
        "value",
        [
            0,
            -12.5,
            1e21,
            None,
            True,
            False,
            "",
            "plain text",
            "```1```",
            "```json\n[2]\n```",
            "use `reduce` here",
            "line1\nline2\ttab",
            "[not an array",
            [],
            {},
            [1, "two", None, False, [3.5, {"k": []}]],
            {"nested": {"code": "```js\nconst x = `y`;\n```", "items": [{"a": None}]}},
            ["```", "```"],
        ],
    )
    def test_valid_json_round_trips(self, value):
        assert repair_json(json.dumps(value)) == value

    def test_array_of_strings(self):
        assert repair_json('["Hint 1", "Hint 2"]') == ["Hint 1", "Hint 2"]

    def test_leading_prose(self):
        text = 'Here are your hints:\n["Think about loops", "Use reduce"]\nGood luck!'
        assert repair_json(text) == ["Think about loops", "Use reduce"]


class TestFencedBlocks:
    """Markdown code fences around the payload."""

    def test_json_fence(self):
        text = '```json\n{"a": 1}\n```'
        assert repair_json(text) == {"a": 1}

    def test_fence_without_language(self):
        assert repair_json('```\n[1, 2, 3]\n```') == [1, 2, 3]

    def test_unterminated_fence(self):
        assert extract_fenced_block('```json\n{"a": 1}') == '{"a": 1}'
        assert repair_json('```json\n{"a": 1}') == {"a": 1}

    def test_fence_inside_payload_is_ignored(self):
        text = '{"starterCode": "```js\\nlet x;\\n```"}'
        assert extract_fenced_block(text) is None
        assert repair_json(text) == {"starterCode": "```js\nlet x;\n```"}

    def test_prose_around_fence(self):
        text = 'Sure! Here it is:\n```json\n["x", "y"]\n```\nLet me know.'
        assert repair_json(text) == ["x", "y"]


class TestBracketMatching:
    def test_ignores_brackets_in_strings(self):
        candidate, terminated = match_brackets('noise {"a": "}{]["} trailing')
        assert terminated
        assert json.loads(candidate) == {"a": "}{]["}

    def test_respects_escaped_quotes(self):
        candidate, terminated = match_brackets('{"a": "say \\"}\\" now"} tail')
        assert terminated
        assert json.loads(candidate) == {"a": 'say "}" now'}

    def test_unterminated(self):
        assert match_brackets('["a", "b"') == ('["a", "b"', False)

    def test_no_brackets(self):
        assert match_brackets("no json here") is None


class TestTemplateLiterals:
    """Backtick-delimited multi-line values."""

    def test_multiline_value(self):
        text = '{"starterCode": `function f() {\n  return 1;\n}`}'
        assert repair_json(text) == {"starterCode": "function f() {\n  return 1;\n}"}

    def test_quotes_and_backslashes_are_escaped(self):
        out = normalize_template_literals('{"a": `say "hi" \\ bye`}')
        assert json.loads(out) == {"a": 'say "hi" \\ bye'}

    def test_escaped_backtick(self):
        out = normalize_template_literals('{"a": `use \\`code\\``}')
        assert json.loads(out) == {"a": "use `code`"}

    def test_backticks_inside_double_quotes_untouched(self):
        text = '{"a": "run `npm test`"}'
        assert normalize_template_literals(text) == text

    def test_exercise_with_template_code(self):
        text = """```json
{
  "title": "Sum an array",
  "description": "Add numbers",
  "instructions": "Implement sum",
  "starterCode": `function sum(numbers) {
  // TODO
}`,
  "solutionCode": `function sum(numbers) {
  return numbers.reduce((a, b) => a + b, 0);
}`
}
```"""
        value = repair_json(text)
        assert value["title"] == "Sum an array"
        assert value["solutionCode"].startswith("function sum(numbers) {\n")
        assert "reduce" in value["solutionCode"]


class TestTruncationRepair:
    """Arrays cut off by the output token limit."""

    def test_drops_partial_last_element(self):
        text = '[{"test_name": "a", "input_data": {"args": [1]}}, {"test_name": "b", "inpu'
        assert repair_json(text) == [{"test_name": "a", "input_data": {"args": [1]}}]

    def test_truncated_string_array(self):
        assert repair_json('["Hint 1", "Hint 2", "Hint 3 is cut o') == ["Hint 1", "Hint 2"]

    def test_truncated_inside_fence(self):
        text = '```json\n["one", "two", "thr'
        assert repair_json(text) == ["one", "two"]

    def test_nested_commas_are_not_cut_points(self):
        assert repair_truncated_array('[[1, 2], [3, 4') == "[[1, 2]]"


class TestControlCharacters:
    def test_raw_newline_in_string(self):
        text = '{"instructions": "line one\nline two\tend"}'
        assert repair_json(text) == {"instructions": "line one\nline two\tend"}

    def test_escape_leaves_structure_alone(self):
        assert escape_control_characters('{\n"a": "x\ny"\n}') == '{\n"a": "x\\ny"\n}'


class TestFailure:
    def test_no_json(self):
        with pytest.raises(UnparsableAIResponse) as exc_info:
            repair_json("I cannot help with that.")
        assert exc_info.value.preview == "I cannot help with that."

    def test_preview_is_truncated(self):
        text = "{" + "x" * 500
        with pytest.raises(UnparsableAIResponse) as exc_info:
            ResponseRepairPipeline(preview_chars=20).repair(text)
        assert exc_info.value.preview == text[:20]

    def test_empty_text(self):
        with pytest.raises(UnparsableAIResponse):
            repair_json("")
