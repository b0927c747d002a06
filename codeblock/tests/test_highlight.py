import logging
from types import MappingProxyType
from typing import Any

import pytest
from _pytest.logging import LogCaptureFixture
from pytest_mock import MockerFixture

from codeblock.config import Highlighter, HighlighterConfiguration
from codeblock.highlight import (
    HighlightError,
    build_pygmentize_command,
    highlight,
    highlight_none,
    highlight_pygmentize,
    highlight_pygments,
    sanitize_options,
)
from codeblock.markup import CodeBlockDirective, parse_markup
from codeblock.requirement import (
    ExecutableRequirement,
    ModuleRequirement,
    RequirementError,
)
from codeblock.subprocess import CalledSubprocessError, FileNotFound

_PYGMENTIZE_OUTPUT = (
    b'<div class="highlight"><pre><span></span><span class="nb">puts</span> 1\n'
    b"</pre></div>\n"
)


class TestHighlight:
    def test_with_none(self) -> None:
        configuration = HighlighterConfiguration(highlighter=Highlighter.NONE)
        assert (
            highlight(CodeBlockDirective(language="html"), "<p>Hi</p>\n", configuration)
            == "&lt;p&gt;Hi&lt;/p&gt;"
        )

    def test_with_pygments(self) -> None:
        configuration = HighlighterConfiguration(highlighter=Highlighter.PYGMENTS)
        actual = highlight(
            CodeBlockDirective(language="python"), "print(1)", configuration
        )
        assert "print" in actual
        assert not actual.startswith("<div")

    def test_with_pygments_without_module(self, mocker: MockerFixture) -> None:
        mocker.patch.object(ModuleRequirement, "is_met", return_value=False)
        with pytest.raises(RequirementError) as error:
            highlight(parse_markup("x.py"), "x", HighlighterConfiguration())
        assert "pip install Pygments" in str(error.value)

    def test_with_pygmentize(self, mocker: MockerFixture) -> None:
        mocker.patch.object(ExecutableRequirement, "is_met", return_value=True)
        m_run_process = mocker.patch(
            "codeblock.highlight.run_process", return_value=_PYGMENTIZE_OUTPUT
        )
        configuration = HighlighterConfiguration(
            highlighter=Highlighter.PYGMENTIZE, pygmentize="/opt/bin/pygmentize"
        )
        highlight(CodeBlockDirective(language="ruby"), "puts 1", configuration)
        m_run_process.assert_called_once_with(
            ["/opt/bin/pygmentize", "-f", "html", "-l", "ruby"], stdin=b"puts 1"
        )


class TestHighlightPygments:
    def test_should_unwrap(self) -> None:
        actual = highlight_pygments(
            CodeBlockDirective(language="python", line_numbers=False), "x = 1\n"
        )
        assert not actual.startswith("<div")
        assert not actual.startswith("<span></span>")
        assert "</pre>" not in actual
        assert "</div>" not in actual

    def test_with_line_numbers(self) -> None:
        actual = highlight_pygments(
            CodeBlockDirective(language="python", starting_line=42), "x = 1\ny = 2\n"
        )
        assert "42" in actual
        assert "43" in actual
        assert "linenos" in actual

    def test_without_line_numbers(self) -> None:
        actual = highlight_pygments(
            CodeBlockDirective(language="python", line_numbers=False), "x = 1\n"
        )
        assert "linenos" not in actual

    @pytest.mark.parametrize(
        "language",
        [
            None,
            "",
            "codeblock-unknown-language",
        ],
    )
    def test_should_fall_back_to_plain_text(self, language: str | None) -> None:
        actual = highlight_pygments(
            CodeBlockDirective(language=language, line_numbers=False),
            "<b>Hello</b> & goodbye\n",
        )
        assert actual.strip() == "&lt;b&gt;Hello&lt;/b&gt; &amp; goodbye"

    def test_with_guess(self) -> None:
        actual = highlight_pygments(
            CodeBlockDirective(language="guess", line_numbers=False),
            "#!/usr/bin/env python\nimport sys\n",
        )
        assert "sys" in actual


class TestHighlightPygmentize:
    def test_should_unwrap(self, mocker: MockerFixture) -> None:
        mocker.patch.object(ExecutableRequirement, "is_met", return_value=True)
        mocker.patch("codeblock.highlight.run_process", return_value=_PYGMENTIZE_OUTPUT)
        assert (
            highlight_pygmentize(CodeBlockDirective(language="ruby"), "puts 1")
            == '<span class="nb">puts</span> 1\n'
        )

    def test_without_language(self, mocker: MockerFixture) -> None:
        mocker.patch.object(ExecutableRequirement, "is_met", return_value=True)
        m_run_process = mocker.patch(
            "codeblock.highlight.run_process", return_value=_PYGMENTIZE_OUTPUT
        )
        highlight_pygmentize(CodeBlockDirective(), "puts 1")
        m_run_process.assert_called_once_with(
            ["pygmentize", "-f", "html", "-l", "text"], stdin=b"puts 1"
        )

    def test_with_options(self, mocker: MockerFixture) -> None:
        mocker.patch.object(ExecutableRequirement, "is_met", return_value=True)
        m_run_process = mocker.patch(
            "codeblock.highlight.run_process", return_value=_PYGMENTIZE_OUTPUT
        )
        directive = CodeBlockDirective(
            language="ruby",
            options=MappingProxyType({"linenos": "inline", "noclasses": True}),
        )
        highlight_pygmentize(directive, "puts 1")
        m_run_process.assert_called_once_with(
            [
                "pygmentize",
                "-f",
                "html",
                "-l",
                "ruby",
                "-P",
                "linenos=inline",
                "-P",
                "noclasses=True",
            ],
            stdin=b"puts 1",
        )

    def test_with_options_in_safe_mode(self, mocker: MockerFixture) -> None:
        mocker.patch.object(ExecutableRequirement, "is_met", return_value=True)
        m_run_process = mocker.patch(
            "codeblock.highlight.run_process", return_value=_PYGMENTIZE_OUTPUT
        )
        directive = CodeBlockDirective(
            language="ruby",
            options=MappingProxyType({"hl_lines": ["1", "2"], "noclasses": True}),
        )
        highlight_pygmentize(directive, "puts 1", safe=True)
        m_run_process.assert_called_once_with(
            [
                "pygmentize",
                "-f",
                "html",
                "-l",
                "ruby",
                "-P",
                "hl_lines=1 2",
                "-P",
                "encoding=utf-8",
            ],
            stdin=b"puts 1",
        )

    @pytest.mark.parametrize(
        "error",
        [
            CalledSubprocessError(1, "pygmentize", "", "Error: no lexer"),
            FileNotFound("pygmentize"),
        ],
    )
    def test_with_failing_process(
        self, caplog: LogCaptureFixture, error: Exception, mocker: MockerFixture
    ) -> None:
        mocker.patch.object(ExecutableRequirement, "is_met", return_value=True)
        mocker.patch("codeblock.highlight.run_process", side_effect=error)
        with pytest.raises(HighlightError), caplog.at_level(logging.ERROR):
            highlight_pygmentize(
                CodeBlockDirective(language="not-a-language"), "puts 'Hi'"
            )
        assert "There was an error highlighting your code" in caplog.text
        assert "puts 'Hi'" in caplog.text
        assert "pygmentize returned an unacceptable value" in caplog.text

    def test_with_empty_output(self, mocker: MockerFixture) -> None:
        mocker.patch.object(ExecutableRequirement, "is_met", return_value=True)
        mocker.patch("codeblock.highlight.run_process", return_value=b"")
        with pytest.raises(HighlightError):
            highlight_pygmentize(CodeBlockDirective(language="ruby"), "puts 1")

    def test_without_executable(self) -> None:
        with pytest.raises(RequirementError):
            highlight_pygmentize(
                CodeBlockDirective(),
                "puts 1",
                executable="codeblock-non-existent-command",
            )


class TestHighlightNone:
    @pytest.mark.parametrize(
        ("expected", "code"),
        [
            ("", ""),
            ("puts 1", "puts 1"),
            ("puts 1", "\n  puts 1  \n"),
            ("&lt;a href=&#34;#&#34;&gt;&amp;&lt;/a&gt;", '<a href="#">&</a>'),
        ],
    )
    def test(self, expected: str, code: str) -> None:
        assert highlight_none(code) == expected


class TestBuildPygmentizeCommand:
    def test(self) -> None:
        assert build_pygmentize_command(
            "pygmentize", "c++", {"hl_lines": ("3", "5"), "linenos": "table"}
        ) == [
            "pygmentize",
            "-f",
            "html",
            "-l",
            "c++",
            "-P",
            "hl_lines=3 5",
            "-P",
            "linenos=table",
        ]


class TestSanitizeOptions:
    @pytest.mark.parametrize(
        ("expected", "options"),
        [
            ({}, {}),
            ({"noclasses": True}, {"noclasses": True}),
            (
                {"linenos": "inline", "style": "monokai"},
                {"linenos": "inline", "style": "monokai"},
            ),
        ],
    )
    def test_without_safe(
        self, expected: dict[str, Any], options: dict[str, Any]
    ) -> None:
        assert sanitize_options(options, False) == expected

    @pytest.mark.parametrize(
        ("expected", "options"),
        [
            ({"encoding": "utf-8"}, {}),
            ({"encoding": "utf-8"}, {"noclasses": True, "style": "monokai"}),
            (
                {"linenos": "inline", "encoding": "latin-1"},
                {"linenos": "inline", "encoding": "latin-1"},
            ),
            (
                {
                    "startinline": True,
                    "hl_lines": ["1"],
                    "linenos": "table",
                    "encoding": "utf-8",
                    "cssclass": "code",
                },
                {
                    "startinline": True,
                    "hl_lines": ["1"],
                    "linenos": "table",
                    "cssclass": "code",
                    "full": True,
                },
            ),
        ],
    )
    def test_with_safe(
        self, expected: dict[str, Any], options: dict[str, Any]
    ) -> None:
        assert sanitize_options(options, True) == expected
