import huf


def test_compress_then_decompress(tmp_path, capsys):
    original = tmp_path / "notes.txt"
    original.write_bytes(b"hello hello hello world\n" * 30)

    assert huf.main([str(original)]) == 0
    out = capsys.readouterr().out
    assert f'Compressed file "{tmp_path / "notes.huf"}" created' in out
    assert "bytes ->" in out

    assert huf.main([str(tmp_path / "notes.huf")]) == 0
    out = capsys.readouterr().out
    assert "notes_decompressed.txt" in out
    assert (tmp_path / "notes_decompressed.txt").read_bytes() == original.read_bytes()


def test_verify(tmp_path, capsys):
    original = tmp_path / "data.bin"
    original.write_bytes(bytes(range(256)))
    assert huf.main([str(original), "--verify"]) == 0
    assert "Round trip: identical" in capsys.readouterr().out


def test_errors_are_reported_per_file(tmp_path, capsys):
    good = tmp_path / "good.txt"
    good.write_bytes(b"abc")
    corrupt = tmp_path / "bad.huf"
    corrupt.write_bytes(b"txt")

    assert huf.main([str(tmp_path / "missing.txt"), str(corrupt), str(good)]) == 1
    out = capsys.readouterr().out
    assert out.count("ERROR:") == 2
    assert (tmp_path / "good.huf").exists()


def test_custom_suffix(tmp_path):
    original = tmp_path / "a.txt"
    original.write_bytes(b"aaa")
    assert huf.main([str(original), "--suffix", "hz", "--byteorder", "big"]) == 0
    assert (tmp_path / "a.hz").exists()


def test_interactive_loop(tmp_path, monkeypatch, capsys):
    original = tmp_path / "x.txt"
    original.write_bytes(b"xyzzy")
    answers = iter(["no_such_file.txt", str(original), ""])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    assert huf.main([]) == 0
    out = capsys.readouterr().out
    assert "C O M P R E S S O R" in out
    assert 'File "no_such_file.txt" not found.' in out
    assert (tmp_path / "x.huf").exists()


def test_interactive_quits_on_eof(monkeypatch):
    def no_input(prompt=""):
        raise EOFError
    monkeypatch.setattr("builtins.input", no_input)
    assert huf.main([]) == 0
