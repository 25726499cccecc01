"""
Tests for the TemplateProcessor public API.
"""

import io
import threading

import pytest

from smartscript.config import RunConfig
from smartscript.engine import DivisionByZeroError
from smartscript.processor import TemplateProcessingError, TemplateProcessor
from smartscript.request_context import RequestContext
from smartscript.scripting import ParserError, write_tree
from tests.infrastructure import MemorySink, write_template


class TestCompile:

    def test_compile_is_cached(self, processor: TemplateProcessor):
        first = processor.compile("{$= 1 $}", "a")
        second = processor.compile("{$= 1 $}", "a")
        assert first is second

    def test_cache_key_includes_name(self, processor: TemplateProcessor):
        assert processor.compile("x", "a") is not processor.compile("x", "b")

    def test_cache_key_includes_full_text(self, processor: TemplateProcessor):
        first = processor.compile("{$= 1 $}", "same")
        second = processor.compile("{$= 2 $}", "same")
        assert first is not second
        assert write_tree(second) == "{$= 2 $}"

    def test_clear_cache(self, processor: TemplateProcessor):
        first = processor.compile("x")
        processor.clear_cache()
        assert processor.compile("x") is not first

    def test_parse_error_is_wrapped(self, processor: TemplateProcessor):
        with pytest.raises(TemplateProcessingError) as exc_info:
            processor.compile("{$FOR i 1 $}", "broken")
        assert exc_info.value.template_name == "broken"
        assert isinstance(exc_info.value.cause, ParserError)
        assert "broken" in str(exc_info.value)


class TestRender:

    def test_render_text(self, processor: TemplateProcessor):
        assert processor.render_text("Text {$= 1 2 + $} more") == "Text 3 more"

    def test_render_into_context(self, processor: TemplateProcessor):
        stream = io.BytesIO()
        ctx = RequestContext(stream, parameters={"who": "you"})
        result = processor.render_text('hi {$= "who" @paramGet $}', ctx)
        assert result == "hi you"
        assert stream.getvalue().endswith(b"\r\n\r\nhi you")

    def test_render_into_custom_sink(self, processor: TemplateProcessor, sink: MemorySink):
        assert processor.render_text("{$= 2 3 * $}", sink) == "6"
        assert sink.text == "6"

    def test_evaluation_error_is_wrapped(self, processor: TemplateProcessor):
        with pytest.raises(TemplateProcessingError) as exc_info:
            processor.render_text("{$= 1 0 / $}", template_name="div")
        assert isinstance(exc_info.value.cause, DivisionByZeroError)

    def test_infinite_operands_render(self, processor: TemplateProcessor):
        assert processor.render_text('{$= "1e999" @sin $}') == "nan"
        assert processor.render_text('{$= "1e308" 10 * "#,##0" @decfmt $}') == "∞"

    def test_render_file(self, processor: TemplateProcessor, tmp_path):
        path = write_template(tmp_path, "page", "č{$ FOR i 1 2 1 $}{$= i $}{$ END $}")
        assert processor.render_file(path) == "č12"

    def test_render_missing_file(self, processor: TemplateProcessor, tmp_path):
        with pytest.raises(TemplateProcessingError):
            processor.render_file(tmp_path / "missing.smscr")

    def test_render_with_config(self, processor: TemplateProcessor):
        config = RunConfig(
            parameters={"a": "2"},
            persistent_parameters={"count": "1"},
            mime_type="text/plain",
        )
        source = '{$= "a" @paramGet "count" @pparamGet + @dup "count" @pparamSet "application/json" @setMimeType $}'
        result = processor.render_with_config(source, config)
        assert result.output == "3"
        assert result.mime_type == "application/json"
        assert result.persistent_parameters == {"count": "3"}
        assert config.persistent_parameters == {"count": "1"}

    def test_concurrent_renders_share_tree(self, processor: TemplateProcessor):
        source = "{$FOR i 1 50 1$}{$= i $},{$END$}"
        expected = processor.render_text(source)
        results = []

        def worker():
            results.append(processor.render_text(source))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == [expected] * 8
