from __future__ import annotations

import threading

import pytest

from services.output_sink import OutputSink


def test_concurrent_writers_never_interleave(tmp_path):
    path = tmp_path / "out" / "output.txt"
    sink = OutputSink(str(path))
    payload = "x" * 2000

    def _writer(n):
        for i in range(200):
            sink.write_line(f"{n};{i};{payload}")

    threads = [threading.Thread(target=_writer, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    sink.close()

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 8 * 200
    assert all(line.endswith(payload) and line.count(";") == 2 for line in lines)


def test_appends_to_existing_file(tmp_path):
    path = tmp_path / "output.txt"
    path.write_text("previous\n", encoding="utf-8")
    with OutputSink(str(path)) as sink:
        sink.write_line("next\n")
    assert path.read_text(encoding="utf-8") == "previous\nnext\n"


def test_write_after_close_fails(tmp_path):
    sink = OutputSink(str(tmp_path / "o.txt"))
    sink.close()
    with pytest.raises(ValueError):
        sink.write_line("late")
