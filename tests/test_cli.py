import json
import os

import main


def test_single_file(write_csv, tmp_path, capsys):
    path = write_csv("temp, humidity\n20.5, 40\n21.0, 42\n22.5, 39\n", name="weather.csv")
    outdir = tmp_path / "out"
    assert main.main(["--input", path, "--outdir", str(outdir), "--no-plots"]) == 0

    out = capsys.readouterr().out
    assert "3 rows x 2 columns" in out
    assert '"temp", "humidity"' in out

    with open(outdir / "weather" / "summary.json") as fh:
        summary = json.load(fh)
    assert summary['rows'] == 3
    assert summary['header'] == ["temp", "humidity"]
    assert summary['columns']['temp']['max'] == 22.5
    assert (outdir / "summaries.json").exists()


def test_plots_written(write_csv, tmp_path):
    path = write_csv("a, b\n1, 2\n3, 5\n4, 4\n", name="d.csv")
    outdir = tmp_path / "out"
    assert main.main(["--input", path, "--outdir", str(outdir)]) == 0
    written = set(os.listdir(outdir / "d"))
    assert {"summary.json", "columns.png", "a_hist.png", "b_hist.png"} <= written


def test_indir_with_failure(write_csv, tmp_path, capsys):
    write_csv("a, b\n1, 2\n", name="good.csv")
    write_csv("a, b\n1, x\n", name="bad.csv")
    outdir = tmp_path / "out"
    code = main.main(["--indir", str(tmp_path), "--outdir", str(outdir), "--no-plots"])
    assert code == 1
    err = capsys.readouterr().err
    assert "Failed to load" in err and "bad.csv" in err
    assert (outdir / "good" / "summary.json").exists()


def test_lenient(write_csv, tmp_path):
    path = write_csv("a, b\n1, x\n", name="bad.csv")
    outdir = tmp_path / "out"
    code = main.main(["--input", path, "--outdir", str(outdir), "--no-plots",
                      "--lenient", "--fill-value", "-1"])
    assert code == 0
    with open(outdir / "bad" / "summary.json") as fh:
        assert json.load(fh)['columns']['b']['min'] == -1.0


def test_missing_input(tmp_path, capsys):
    code = main.main(["--input", str(tmp_path / "none.csv"), "--outdir", str(tmp_path / "out")])
    assert code == 1
    assert "sizing pass failed" in capsys.readouterr().err


def test_no_files(tmp_path, capsys):
    assert main.main(["--indir", str(tmp_path / "empty"), "--outdir", str(tmp_path / "out")]) == 1
    assert "No input files found" in capsys.readouterr().out


def test_bad_delimiter(tmp_path, capsys):
    assert main.main(["--input", "x.csv", "--delimiter", ""]) == 2
    assert "Invalid options" in capsys.readouterr().err


def test_same_stem_gets_separate_outdirs(write_csv, tmp_path):
    indir = tmp_path / "in"
    indir.mkdir()
    write_csv("a\n1\n", name="in/d.csv")
    write_csv("a\n2\n3\n", name="in/d.txt")
    outdir = tmp_path / "out"
    code = main.main(["--indir", str(indir), "--pattern", "*", "--outdir", str(outdir), "--no-plots"])
    assert code == 0
    rows = set()
    for label in ("d", "d_2"):
        with open(outdir / label / "summary.json") as fh:
            rows.add(json.load(fh)['rows'])
    assert rows == {1, 2}


def test_output_labels():
    assert main.output_labels(["x/a.csv", "y/a.txt", "a_2.csv"]) == {
        "x/a.csv": "a", "y/a.txt": "a_2", "a_2.csv": "a_2_2",
    }
