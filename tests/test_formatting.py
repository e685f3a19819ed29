import json

import pytest

from dataset_curator.core import Pair
from dataset_curator.processing import export_pairs, import_pairs


PAIRS = [
    Pair(prompt='Say "hi"', completion="Hello, world", tags=["greeting"]),
    Pair(prompt="Second", completion="Answer"),
]


class TestExportPairs:
    def test_json_keeps_tags(self):
        records = json.loads(export_pairs(PAIRS, "json"))
        assert records[0] == {"prompt": 'Say "hi"', "completion": "Hello, world", "tags": ["greeting"]}

    def test_jsonl_has_one_record_per_line(self):
        lines = export_pairs(PAIRS, "jsonl").split("\n")
        assert [json.loads(line) for line in lines] == [
            {"prompt": 'Say "hi"', "completion": "Hello, world"},
            {"prompt": "Second", "completion": "Answer"},
        ]

    def test_csv_quotes_every_field(self):
        assert export_pairs(PAIRS[:1], "csv") == 'prompt,completion\n"Say ""hi""","Hello, world"'

    def test_validation_drops_incomplete(self):
        pairs = PAIRS + [Pair(prompt="No answer")]
        assert len(json.loads(export_pairs(pairs, "json"))) == 2
        assert len(json.loads(export_pairs(pairs, "json", validate=False))) == 3

    def test_remove_duplicates(self):
        pairs = PAIRS + [PAIRS[0]]
        assert len(json.loads(export_pairs(pairs, "json", remove_duplicates=True))) == 2

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            export_pairs(PAIRS, "xml")


class TestImportPairs:
    def test_json_array(self):
        pairs = import_pairs('[{"prompt": "a", "completion": "b", "tags": ["t"]}, {"prompt": "only"}]', "json")
        assert [(p.prompt, p.completion, p.tags) for p in pairs] == [("a", "b", ["t"])]

    def test_scalar_tags_are_wrapped(self):
        pairs = import_pairs('[{"prompt": "a", "completion": "b", "tags": 5}]', "json")
        assert pairs[0].tags == ["5"]

    def test_json_falls_back_to_lines(self):
        pairs = import_pairs('{"prompt": "a", "completion": "b"}\n{"prompt": "c", "completion": "d"}', "json")
        assert len(pairs) == 2

    def test_jsonl(self):
        pairs = import_pairs('{"prompt": "a", "completion": "b"}\n\n', "jsonl")
        assert [(p.prompt, p.completion) for p in pairs] == [("a", "b")]

    def test_csv_with_alternative_headers(self):
        pairs = import_pairs('input,response\n"Hi, there","Hello ""friend"""\n', "csv")
        assert [(p.prompt, p.completion) for p in pairs] == [("Hi, there", 'Hello "friend"')]

    def test_csv_export_can_be_read_back(self):
        pairs = import_pairs(export_pairs(PAIRS, "csv"), "csv")
        assert [(p.prompt, p.completion) for p in pairs] == [(p.prompt, p.completion) for p in PAIRS]

    def test_csv_without_columns(self):
        with pytest.raises(ValueError):
            import_pairs("foo,bar\n1,2", "csv")

    def test_text_blocks(self):
        content = "What is AI?\nArtificial intelligence.\nIt is broad.\n\nSingle line block"
        pairs = import_pairs(content, "text")
        assert [(p.prompt, p.completion) for p in pairs] == [("What is AI?", "Artificial intelligence. It is broad.")]

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            import_pairs("", "yaml")
