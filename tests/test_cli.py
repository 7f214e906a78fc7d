import asyncio
import json

from boxtext.__main__ import build_parser, create_text_box, main
from boxtext.config import Settings


def _write_items(path, items):
    path.write_text(json.dumps(items), encoding="utf-8")
    return path


def test_writes_layout_records(clean_env, tmp_path):
    clean_env.chdir(tmp_path)
    items = _write_items(
        tmp_path / "items.json",
        [
            {"id": "title", "text": "Quarterly revenue by region", "width": 120, "height": 60},
            {"id": "empty", "width": 50},
            {"id": "tiny", "text": "Unreadable", "width": 120, "height": 5},
        ],
    )
    out = tmp_path / "out.json"

    code = asyncio.run(main([str(items), "-o", str(out), "--resize", "--parallel"]))

    records = json.loads(out.read_text(encoding="utf-8"))
    assert code == 0
    assert [record["id"] for record in records] == ["title", "tiny"]
    assert records[0]["lines"]
    assert 8 <= records[0]["font_size"] <= 50
    assert records[1]["lines"] == []


def test_prints_to_stdout(clean_env, tmp_path, capsys):
    clean_env.chdir(tmp_path)
    items = _write_items(tmp_path / "items.json", [{"text": "Hi"}])

    code = asyncio.run(main([str(items), "--vertical-align", "middle"]))

    records = json.loads(capsys.readouterr().out)
    assert code == 0
    assert records[0]["lines"] == ["Hi"]
    assert records[0]["y"] > 0


def test_bad_input_returns_error(clean_env, tmp_path):
    clean_env.chdir(tmp_path)
    bad = tmp_path / "items.json"
    bad.write_text("{not json", encoding="utf-8")

    assert asyncio.run(main([str(bad)])) == 1
    assert asyncio.run(main([str(tmp_path / "missing.json")])) == 1


def test_items_can_override_style(measurer):
    args = build_parser().parse_args(["items.json", "--text-anchor", "end"])
    text_box = create_text_box(args, Settings())
    text_box.measurer = measurer

    [record] = text_box.layout([{"text": "Hi", "font_size": 12, "width": 90}])

    assert record.font_size == 12
    assert record.line_height == 12 * 1.4
    assert record.anchor_dx == 90
