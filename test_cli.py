from lf2_parse.cli import main, parse_file
from lf2_parse.test import samples


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_answer(tmp_path, capsys):
    freeze = write(tmp_path, "freeze.txt", samples.FREEZE)

    assert main([freeze]) == 0

    out = capsys.readouterr().out
    assert out == f"{freeze}: Freeze: 2 sprite sheets, 3 frames\n"


def test_failure_exit_code(tmp_path, capsys):
    freeze = write(tmp_path, "freeze.txt", samples.FREEZE)
    broken = write(tmp_path, "broken.txt", "<bmp_begin>\nname: Broken\n")

    assert main([freeze, broken]) == 1

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith(f"{freeze}: Freeze")
    assert lines[1].startswith(f"{broken}: 3:1: expected")


def test_missing_file(tmp_path):
    path, ok, message = parse_file(str(tmp_path / "missing.txt"))
    assert not ok
    assert message.startswith("cannot read")


def test_jobs(tmp_path, capsys):
    paths = [
        write(tmp_path, f"object_{number}.txt", samples.header_with(name=f"Object{number}"))
        for number in range(4)
    ]

    assert main(paths + ["--jobs", "2"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines == [f"{path}: Object{number}: 0 sprite sheets, 0 frames" for number, path in enumerate(paths)]
