from mathwiki.main import build_parser, main
from tests.fixtures import write_corpus


def listed_ids(output):
    return [line.split()[0] for line in output.splitlines() if line.strip()]


class TestCommandLine:

    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        assert args.query == ""
        assert args.tag == []
        assert args.limit is None
        assert not args.debug

    def test_query_against_bundled_corpus(self, qapp, capsys):
        assert main(["gauss"]) == 0
        assert listed_ids(capsys.readouterr().out) == ["normal-distribution"]

    def test_tag_filter_lists_pages_alphabetically(self, qapp, capsys):
        assert main(["--tag", "Statistics"]) == 0
        assert listed_ids(capsys.readouterr().out) == [
            "bayes-theorem", "linear-regression", "normal-distribution", "standard-deviation",
        ]

    def test_limit(self, qapp, capsys):
        assert main(["--limit", "2"]) == 0
        assert len(listed_ids(capsys.readouterr().out)) == 2

    def test_custom_data_directory(self, qapp, capsys, corpus_dir):
        assert main(["--data", str(corpus_dir), "quadratic"]) == 0
        out = capsys.readouterr().out
        assert "quadratic-formula" in out
        assert "Equation" in out

    def test_missing_corpus_exits_with_error(self, qapp, capsys, tmp_path):
        assert main(["--data", str(tmp_path / "nowhere")]) == 1
        assert "pages.json" in capsys.readouterr().err

    def test_debug_logging_keeps_stdout_to_results(self, qapp, capsys):
        assert main(["--debug", "gauss"]) == 0
        captured = capsys.readouterr()
        assert listed_ids(captured.out) == ["normal-distribution"]
        assert "DEBUG mathwiki" in captured.err

    def test_log_file(self, qapp, capsys, tmp_path):
        path = tmp_path / "run.log"
        assert main(["--data", str(tmp_path / "nowhere"), "--log-file", str(path)]) == 1
        assert "Failed to load content" in path.read_text(encoding="utf-8")
