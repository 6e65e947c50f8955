from archiplan.utils import (
    compute_checksum,
    dump_structured_file,
    load_structured_file,
    new_id,
)


class TestUtils:
    def test_checksum_ignores_key_order(self):
        assert compute_checksum({"a": 1, "b": [1, 2]}) == compute_checksum({"b": [1, 2], "a": 1})
        assert compute_checksum({"a": 1}) != compute_checksum({"a": 2})

    def test_new_id(self):
        first, second = new_id(), new_id("view")
        assert first.startswith("id-")
        assert second.startswith("view-")
        assert first != new_id()

    def test_structured_files(self, tmp_path):
        data = {"name": "Ünïcode", "items": [1, None]}
        for filename in ("doc.json", "doc.yaml"):
            path = tmp_path / filename
            dump_structured_file(path, data)
            assert load_structured_file(path) == data

    def test_yaml_loader_reads_json(self, tmp_path):
        path = tmp_path / "plan.yml"
        path.write_text('{"status": "ready"}', encoding="utf-8")
        assert load_structured_file(path) == {"status": "ready"}
