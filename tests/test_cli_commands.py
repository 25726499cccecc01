"""
CLI tests: the module is executed in a subprocess.
"""

from tests.infrastructure import jload, run_cli, write_run_config, write_template


class TestCliRender:

    def test_render_body(self, tmpproj):
        cp = run_cli(tmpproj, "render", "hello.smscr")
        assert cp.returncode == 0, cp.stderr
        assert cp.stdout == "Hello world! 1 2 3"

    def test_render_with_params(self, tmp_path):
        write_template(tmp_path, "p", '{$= "name" @paramGet $}')
        cp = run_cli(tmp_path, "render", "p.smscr", "--param", "name=Ana")
        assert cp.returncode == 0, cp.stderr
        assert cp.stdout == "Ana"

    def test_render_with_headers(self, tmp_path):
        write_template(tmp_path, "h", '{$= "text/plain" @setMimeType $}ok')
        cp = run_cli(tmp_path, "render", "h.smscr", "--headers")
        assert cp.returncode == 0, cp.stderr
        lines = cp.stdout.splitlines()
        assert lines[0] == "HTTP/1.1 200 OK"
        assert lines[1] == "Content-Type: text/plain; charset=utf-8"
        assert lines[2] == "Content-Length: 2"
        assert cp.stdout.endswith("ok")

    def test_parse_error_exit_code(self, tmp_path):
        write_template(tmp_path, "bad", "{$FOR i 1 $}{$END$}")
        cp = run_cli(tmp_path, "render", "bad.smscr")
        assert cp.returncode == 2
        assert "Template processing error" in cp.stderr
        assert cp.stdout == ""

    def test_missing_file(self, tmp_path):
        cp = run_cli(tmp_path, "render", "nope.smscr")
        assert cp.returncode == 2
        assert "not found" in cp.stderr


class TestCliReport:

    def test_report_json(self, tmp_path):
        write_template(
            tmp_path, "r",
            '{$= "visits" @pparamGet 1 + @dup "visits" @pparamSet $}'
            '{$= "done" "flag" @tparamSet $}',
        )
        write_run_config(tmp_path, """
            persistent_parameters:
              visits: 4
            mime_type: text/plain
        """)
        cp = run_cli(tmp_path, "report", "r.smscr", "--config", "run.yaml")
        assert cp.returncode == 0, cp.stderr
        data = jload(cp.stdout)
        assert data["output"] == "5"
        assert data["mime_type"] == "text/plain"
        assert data["persistent_parameters"] == {"visits": "5"}
        assert data["temporary_parameters"] == {"flag": "done"}
        assert data["status_code"] == 200

    def test_cli_params_override_config(self, tmp_path):
        write_template(tmp_path, "o", '{$= "a" @paramGet $}')
        write_run_config(tmp_path, """
            parameters:
              a: from-file
        """)
        cp = run_cli(tmp_path, "report", "o.smscr", "--config", "run.yaml", "--param", "a=from-cli")
        assert cp.returncode == 0, cp.stderr
        assert jload(cp.stdout)["output"] == "from-cli"

    def test_bad_config(self, tmp_path):
        write_template(tmp_path, "o", "x")
        write_run_config(tmp_path, "status_code: nope\n")
        cp = run_cli(tmp_path, "report", "o.smscr", "--config", "run.yaml")
        assert cp.returncode == 2
        assert "status_code" in cp.stderr


class TestCliInspect:

    def test_tree(self, tmp_path):
        write_template(tmp_path, "t", "A{$for i 1 2$}{$=i$}{$end$}")
        cp = run_cli(tmp_path, "tree", "t.smscr")
        assert cp.returncode == 0, cp.stderr
        assert cp.stdout == "A{$ FOR i 1 2 $}{$= i $}{$ END $}"

    def test_tokens(self, tmp_path):
        write_template(tmp_path, "k", "a{$= 1 \"s\" $}")
        cp = run_cli(tmp_path, "tokens", "k.smscr")
        assert cp.returncode == 0, cp.stderr
        assert jload(cp.stdout) == [
            {"type": "TEXT", "value": "a"},
            {"type": "TAG_OPEN", "value": "{$"},
            {"type": "TAG_NAME", "value": "="},
            {"type": "CONSTANT_INTEGER", "value": 1},
            {"type": "STRING", "value": "s"},
            {"type": "TAG_CLOSE", "value": "$}"},
            {"type": "EOF", "value": None},
        ]

    def test_tokens_lexer_error(self, tmp_path):
        write_template(tmp_path, "k", "{$= 1 # $}")
        cp = run_cli(tmp_path, "tokens", "k.smscr")
        assert cp.returncode == 2
        assert "Unexpected character" in cp.stderr

    def test_version(self, tmp_path):
        cp = run_cli(tmp_path, "--version")
        assert cp.returncode == 0
        assert cp.stdout.startswith("smartscript ")
