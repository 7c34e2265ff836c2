from termbrot.cli import build_parser, config_from_args, main


def test_dump_prints_one_frame(capsys):
    assert main(["--dump", "--rows", "12", "--cols", "30"]) == 0
    lines = capsys.readouterr().out.rstrip("\n").split("\n")
    assert len(lines) == 12
    assert all(len(line) == 30 for line in lines)
    assert "█" in "".join(lines)


def test_invalid_flags_fall_back_to_defaults(capsys):
    assert main(["--dump", "--rows", "2", "--cols", "3", "--max-iter", "0"]) == 0
    captured = capsys.readouterr()
    assert "invalid number of rows" in captured.err
    frame = captured.out.rstrip("\n").split("\n")
    assert len(frame) == 30
    assert all(len(line) == 80 for line in frame)


def test_parser_maps_flags_to_config():
    args = build_parser().parse_args(
        ["--julia", "--julia-c", "0.285+0.01i", "--center-x", "0.1", "--color-scheme", "2"])
    config = config_from_args(args)
    assert config.julia is True
    assert config.julia_c == "0.285+0.01i"
    assert config.center_x == 0.1
    assert config.color_scheme == 2


def test_unwritable_log_file(tmp_path, capsys):
    assert main(["--dump", "--log-file", str(tmp_path / "missing" / "x.log")]) == 1
    assert "failed to open log file" in capsys.readouterr().err


def test_profile_logs_runtime_stats(capsys):
    assert main(["--dump", "--rows", "10", "--cols", "20", "--profile",
                 "--profile-interval", "60"]) == 0
    captured = capsys.readouterr()
    assert "runtime stats" in captured.err
    assert "grid_builds=1" in captured.err
    assert len(captured.out.rstrip("\n").split("\n")) == 10
